"""Exceptions raised by pitchline."""


class ConfigurationError(ValueError):
    """Raised when an analysis configuration is invalid."""
