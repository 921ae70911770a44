"""
Service Layer Exceptions

Custom exceptions for the authoring and live session services.
"""

from ..domain.validation import Violation


class ArticleNotFoundError(Exception):
    """Raised when the article store has no article with the requested ID."""
    pass


class FlowValidationError(Exception):
    """Raised when a flow is saved while it violates a structural invariant."""

    def __init__(self, violation: Violation):
        super().__init__(violation.message or violation.kind.value)
        self.violation = violation


class BuilderDisabledError(Exception):
    """Raised when a builder edit is attempted while the JSON text is authoritative."""
    pass
