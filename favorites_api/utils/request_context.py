"""Request-scoped identifier shared by middleware, handlers and logs.

The application middleware resolves one identifier per inbound request, either
the caller's ``X-Request-ID`` (so a client can correlate its own logs) or a
fresh UUID, and stores it in a ``ContextVar``. Exception handlers read it back
so the error payload and the server-side log line carry the same value.
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "REQUEST_ID_HEADER",
    "clear_request_id",
    "get_request_id",
    "resolve_request_id",
    "set_request_id",
]

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")

# Echoed into response headers and log lines, so only plain tokens are reused.
_ACCEPTED_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,128}")


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a well-formed caller-supplied identifier, otherwise mint a UUID."""

    if incoming is not None:
        candidate = incoming.strip()
        if _ACCEPTED_REQUEST_ID.fullmatch(candidate):
            return candidate
    return str(uuid.uuid4())


def set_request_id(request_id: str) -> Token[str]:
    """Store ``request_id`` for the running task and return the reset token."""

    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Return the current request identifier, or an empty string outside a request."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Reset the identifier, restoring the previous value when given a token."""

    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")
