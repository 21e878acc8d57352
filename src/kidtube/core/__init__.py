"""Core domain: bookmark storage."""
