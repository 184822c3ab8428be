"""Generated reports."""
