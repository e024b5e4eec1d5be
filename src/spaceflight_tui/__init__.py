"""Terminal client for the Spaceflight News API."""

__version__ = "0.1.0"
