"""Interactive launcher for a LostCity server + client development environment."""

__version__ = "0.1.0"
