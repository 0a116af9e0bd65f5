"""Exceptions raised while computing results."""


class ResultProcessingError(Exception):
    """Base exception for result processing errors."""

    pass


class ConfigurationError(ResultProcessingError):
    """Raised when the subject catalog or a scheme constant does not cover the input."""

    pass


class DegenerateCohortError(ResultProcessingError):
    """Raised when a student's subjects add up to zero credits or zero marks."""

    pass
