"""Per-request logging context.

The signer enters :func:`signing_context` for the duration of one
request; :class:`~pcaissuer.logging.setup.SigningContextFilter` copies
the active identity onto every log record emitted meanwhile.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_request_id: ContextVar[str | None] = ContextVar("pcaissuer_request_id", default=None)


def current_request_id() -> str | None:
    """Return the identity of the request being signed, if any."""
    return _request_id.get()


@contextmanager
def signing_context(request_id: str) -> Generator[None, None, None]:
    """Tag log records emitted inside the block with *request_id*."""
    token = _request_id.set(request_id)
    try:
        yield
    finally:
        _request_id.reset(token)
