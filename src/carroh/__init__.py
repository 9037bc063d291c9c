"""carroh: manifest-driven optical disc harvesting."""

__version__ = "0.1.0"
