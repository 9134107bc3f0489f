"""Version information for doclock."""

__version__ = "1.0.0"
