"""PDF upload, sharing and commenting API."""
__version__ = "0.1.0"
