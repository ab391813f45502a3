"""
Request context variables for cross-cutting concerns.

Uses Python's contextvars to propagate request-scoped values
(like the session id) through the async call chain without explicit passing.
Only log records read it; stream state itself travels in StreamSession.
"""

from contextvars import ContextVar

# Session id for the current request, accessible anywhere in the async call chain.
session_id_var: ContextVar[str] = ContextVar("session_id", default="no-session")


def get_session_id() -> str:
    """Get the current request's session id."""
    return session_id_var.get()


def set_session_id(session_id: str) -> None:
    """Set the session id for the current request."""
    session_id_var.set(session_id)
