"""Policy wizard model-transformation coordinator."""

__version__ = "0.3.0"
