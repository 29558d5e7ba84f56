"""code-timeline: chronological snapshot history of text files."""

__version__ = "1.0.0"
