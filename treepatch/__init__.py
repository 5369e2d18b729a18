"""Structural patch application for program syntax trees."""

__version__ = "0.1.0"
