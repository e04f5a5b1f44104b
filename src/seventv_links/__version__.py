"""Version information for seventv-links."""

__version__ = "0.3.0"
