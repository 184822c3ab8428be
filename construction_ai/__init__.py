"""Construction document assistant: document ingestion, retrieval and a tool-using chat agent."""

__version__ = "0.1.0"
