"""Exceptions raised by the level meter."""


class MeterError(Exception):
    """Base class for level meter errors."""


class ConfigurationError(MeterError, ValueError):
    """Raised when a meter is built with invalid geometry or palette."""


class InvariantViolation(MeterError):
    """Raised when an update carries a malformed snapshot."""


class PipelineMessageError(MeterError, ValueError):
    """Raised for malformed messages exchanged with the media pipeline."""
