"""Request context management using contextvars.

Every request gets a unique ID; authentication and the progress endpoints add
the learner and course they act on. Values are read by the logging processor
so that each log line of a request carries them without explicit parameters.
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import UUID, uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
course_id_var: ContextVar[str | None] = ContextVar("course_id", default=None)
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)

_OPTIONAL_VARS: dict[str, ContextVar[str | None]] = {
    "user_id": user_id_var,
    "course_id": course_id_var,
    "trace_id": trace_id_var,
}


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Optional request ID. If not provided, generates a new one.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def _to_str(value: str | UUID | None) -> str | None:
    return str(value) if value is not None else None


def get_user_id() -> str | None:
    """Get the current user ID."""
    return user_id_var.get()


def set_user_id(user_id: str | UUID | None) -> None:
    """Set the authenticated user ID for the current context."""
    user_id_var.set(_to_str(user_id))


def get_course_id() -> str | None:
    """Get the course the current request operates on."""
    return course_id_var.get()


def set_course_id(course_id: str | UUID | None) -> None:
    """Set the course the current request operates on."""
    course_id_var.set(_to_str(course_id))


def get_trace_id() -> str | None:
    """Get the current trace ID."""
    return trace_id_var.get()


def set_trace_id(trace_id: str | None) -> None:
    """Set the trace ID from distributed tracing headers."""
    trace_id_var.set(trace_id)


def get_context() -> dict[str, Any]:
    """Get all non-empty context variables as a dictionary."""
    context: dict[str, Any] = {}

    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id

    for name, var in _OPTIONAL_VARS.items():
        value = var.get()
        if value:
            context[name] = value

    return context


def clear_context() -> None:
    """Clear all context variables.

    Called at the end of each request to prevent leakage between requests.
    """
    request_id_var.set("")
    for var in _OPTIONAL_VARS.values():
        var.set(None)


class RequestContext:
    """Context manager for a request-like scope outside the HTTP stack.

    Usage:
        with RequestContext(user_id=learner_id, course_id=course_id):
            logger.info("seeding_enrollment")  # includes request_id, user_id...
    """

    def __init__(
        self,
        request_id: str | None = None,
        user_id: str | UUID | None = None,
        course_id: str | UUID | None = None,
        trace_id: str | None = None,
    ) -> None:
        self.request_id = request_id
        self.values = {
            "user_id": _to_str(user_id),
            "course_id": _to_str(course_id),
            "trace_id": trace_id,
        }
        self._request_token: Token[str] | None = None
        self._tokens: dict[str, Token[str | None]] = {}

    def __enter__(self) -> "RequestContext":
        """Enter context and set variables."""
        self._request_token = request_id_var.set(
            self.request_id or generate_request_id()
        )
        for name, value in self.values.items():
            if value is not None:
                self._tokens[name] = _OPTIONAL_VARS[name].set(value)
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context and restore previous values."""
        for name, token in self._tokens.items():
            _OPTIONAL_VARS[name].reset(token)
        self._tokens.clear()
        if self._request_token is not None:
            request_id_var.reset(self._request_token)
            self._request_token = None
