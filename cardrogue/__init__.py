"""Turn-based timeline tactics engine."""

__version__ = "0.1.0"
