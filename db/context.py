"""
db/context.py
-------------
Per-call timeout and cancellation carrier.

A QueryContext travels with every repository call. It knows how much time
the caller is still willing to wait and lets another thread abort the
statement currently running on the connection bound to it.
"""

import threading
import time
from typing import Optional

from utils.logger import get_logger

logger = get_logger(__name__)


class ContextExpiredError(Exception):
    """Raised when a context is cancelled or its deadline has passed."""


class QueryContext:
    """
    Timeout / cancellation state for one logical request.

    Args:
        timeout: Seconds the caller is willing to wait, or None for no limit.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._deadline = time.monotonic() + timeout if timeout else None
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._conn = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining_ms(self) -> Optional[int]:
        """Milliseconds left before the deadline (None when unbounded)."""
        if self._deadline is None:
            return None
        return max(0, int((self._deadline - time.monotonic()) * 1000))

    def raise_if_done(self) -> None:
        """Raise ContextExpiredError if the context can no longer be used."""
        if self.cancelled:
            raise ContextExpiredError("context cancelled")
        if self.expired:
            raise ContextExpiredError("context deadline exceeded")

    def bind(self, conn) -> None:
        """Attach the connection that is about to run statements."""
        with self._lock:
            self._conn = conn

    def unbind(self) -> None:
        with self._lock:
            self._conn = None

    def cancel(self) -> None:
        """
        Cancel the context. If a connection is bound, the statement it is
        running is interrupted through psycopg2's ``connection.cancel()``.
        """
        self._cancelled.set()
        with self._lock:
            conn = self._conn
        if conn is not None:
            logger.warning("Cancelling in-flight statement")
            conn.cancel()
