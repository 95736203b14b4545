"""Core operations for dailytodo."""
