"""REST backend for the mobile shop app."""

__version__ = "1.0.0"
