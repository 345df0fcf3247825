"""Canned-response HTTP server for debugging clients."""

__version__ = "0.1.0"
