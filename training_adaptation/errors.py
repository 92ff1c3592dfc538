"""Exceptions raised by the training adaptation engine."""


class AdaptationError(Exception):
    """Base exception for adaptation failures."""


class InvalidInputError(AdaptationError, ValueError):
    """Raised when a constraint object or methodology is malformed."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field
