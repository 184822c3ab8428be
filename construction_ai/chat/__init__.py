"""Conversations, messages and the chat service."""
