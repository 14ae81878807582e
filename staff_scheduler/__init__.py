"""Monthly staff shift scheduling engine."""

__version__ = "0.1.0"
