"""Version information for startgate."""

__version__ = "1.0.0"
