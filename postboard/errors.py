from typing import Optional


class PostboardError(Exception):
    """Base class for errors raised by the store operations."""


class ValidationError(PostboardError, ValueError):
    """Input broke one of the validation rules.

    The message names the rule; ``field`` names the offending input when known.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(PostboardError, LookupError):
    """A referenced user or post does not exist."""
