"""Turn web pages and pasted text into structured recipes."""

__version__ = "0.1.0"
