"""dailytodo - manage the todo section of daily markdown notes."""

__version__ = "0.3.0"
