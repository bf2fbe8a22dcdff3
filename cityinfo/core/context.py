"""Request-scoped context: correlation IDs and the authenticated subject."""

import uuid
from contextvars import ContextVar

# Context variables survive await boundaries within a single request task
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_subject_var: ContextVar[str | None] = ContextVar("subject", default=None)


class RequestContext:
    """Async-safe storage for data that belongs to the current request.

    The correlation ID is set by the request context middleware; the subject
    is set once a bearer token has been validated.
    """

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context.

        Args:
            correlation_id: The correlation ID to store in the context.
        """
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context.

        Returns:
            str | None: The correlation ID if set, None otherwise.
        """
        return _correlation_id_var.get()

    @staticmethod
    def set_subject(subject: str) -> None:
        """Record the ``sub`` claim of the authenticated caller."""
        _subject_var.set(subject)

    @staticmethod
    def get_subject() -> str | None:
        """Return the authenticated caller's subject, if any."""
        return _subject_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables."""
        _correlation_id_var.set(None)
        _subject_var.set(None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracking.

    Returns:
        str: A string representation of a UUID4.
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a unique request ID for individual request tracking.

    Returns:
        str: A prefixed UUID4 string in format 'req-<uuid4>'.
    """
    return f"req-{uuid.uuid4()}"
