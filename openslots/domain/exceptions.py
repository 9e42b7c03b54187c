"""
Domain-specific exception hierarchy for the openslots package.
"""


class SlotFinderError(Exception):
    """Base class for all application-level errors."""


class ConfigError(SlotFinderError, ValueError):
    """Raised when slot options or the config file are invalid."""


class ValidationError(SlotFinderError):
    """
    Raised when request input is rejected before any computation starts.

    ``kind`` is a stable identifier the calling layer maps to a client error.
    """

    kind = "ValidationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class MissingBoundError(ValidationError):
    """Raised when the window start or end is absent."""

    kind = "MissingBound"


class InvalidDateFormatError(ValidationError):
    """Raised when a window bound does not parse to an instant."""

    kind = "InvalidDateFormat"


class NotAnArrayError(ValidationError):
    """Raised when the appointment collection is not a list."""

    kind = "NotAnArray"


class InvalidAppointmentShapeError(ValidationError):
    """Raised in strict mode when an appointment entry is malformed."""

    kind = "InvalidAppointmentShape"

    def __init__(self, message: str, index: int):
        super().__init__(message)
        self.index = index


class AppointmentSourceError(SlotFinderError):
    """Raised when appointment data cannot be loaded or decoded."""
