"""Caller-supplied cancellation signal with an optional deadline.

Usage::

    from pcaissuer.core.cancel import CancelToken

    token = CancelToken.with_timeout(30)
    signer.sign(request, cancel=token)

    # from another thread
    token.cancel()
"""

from __future__ import annotations

import threading
import time


class CancelToken:
    """A :class:`threading.Event` combined with a monotonic deadline.

    The token counts as cancelled once :meth:`cancel` has been called
    or once its deadline has passed, whichever comes first.

    Parameters
    ----------
    deadline:
        Absolute :func:`time.monotonic` value after which the token is
        cancelled, or ``None`` for no deadline.

    """

    def __init__(self, deadline: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> CancelToken:
        """Return a token that cancels itself after *seconds*."""
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        """True once cancelled explicitly or past the deadline."""
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def cancel(self) -> None:
        """Cancel the token, waking up every pending :meth:`wait`."""
        self._event.set()

    def remaining(self) -> float | None:
        """Seconds left until the deadline, or ``None`` without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, timeout: float) -> bool:
        """Sleep up to *timeout* seconds, returning early on cancellation.

        Returns ``True`` if the token is cancelled when the call returns.
        """
        remaining = self.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)
        self._event.wait(timeout=max(0.0, timeout))
        return self.cancelled
