"""HTTP control surface over a container engine."""

__version__ = "1.0.0"
