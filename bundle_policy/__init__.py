"""Bundle Policy — module resolution policy for multi-variant JS bundle builds."""

__version__ = "0.1.0"
