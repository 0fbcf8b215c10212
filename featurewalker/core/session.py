"""Per-walk state and the ownership token guarding it.

A walker may run at most one walk at a time. The first entry call on a
thread acquires the TraversalOwnership token and opens a TraversalSession;
nested entry calls on the same thread share it; the session is closed when
the outermost entry call returns or raises.
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from ..errors import TraversalOwnershipError, TraversalCancelledError

log = logging.getLogger(__name__)


@dataclass
class TraversalSession:
    """State scoped to one walk.

    Attributes:
        thread_ident: Identity of the thread running the walk
        thread_name: Name of that thread, for diagnostics
        current_table: Outline table most recently entered during this walk
    """
    thread_ident: int
    thread_name: str
    started: float = field(default_factory=time.monotonic)
    current_table: Optional[Any] = None
    closed: bool = False

    @property
    def elapsed(self) -> float:
        """Seconds since the session was opened."""
        return time.monotonic() - self.started

    def close(self) -> None:
        self.current_table = None
        self.closed = True


class TraversalOwnership:
    """Single-walk-at-a-time token for a walker.

    Re-entry from the owning thread nests. Another thread waits up to
    ``timeout`` seconds for the token and then raises
    TraversalOwnershipError; cancel() wakes every waiter with
    TraversalCancelledError.
    """

    def __init__(self, timeout: float = 0.0):
        """Initialize the token.

        Args:
            timeout: Seconds a competing thread may wait (0 = no wait)
        """
        self.timeout = timeout
        self._cond = threading.Condition()
        self._session: Optional[TraversalSession] = None
        self._depth = 0
        self._generation = 0
        self._waiting = 0

    @property
    def waiting(self) -> int:
        """Number of threads currently waiting for the token."""
        return self._waiting

    @property
    def session(self) -> Optional[TraversalSession]:
        """The session in flight, or None when idle."""
        return self._session

    @property
    def depth(self) -> int:
        """Nesting depth of entry calls on the owning thread."""
        return self._depth

    def owned_by_current_thread(self) -> bool:
        session = self._session
        return session is not None and session.thread_ident == threading.get_ident()

    @contextmanager
    def hold(self) -> Iterator[TraversalSession]:
        """Hold the token for the duration of the block.

        Yields:
            The active TraversalSession
        """
        session = self._acquire()
        try:
            yield session
        finally:
            self._release()

    def cancel(self) -> None:
        """Wake all threads waiting for the token; they raise TraversalCancelledError."""
        with self._cond:
            self._generation += 1
            self._cond.notify_all()

    def _acquire(self) -> TraversalSession:
        current = threading.current_thread()
        with self._cond:
            if self._session is not None and self._session.thread_ident == current.ident:
                self._depth += 1
                return self._session

            generation = self._generation
            deadline = time.monotonic() + self.timeout
            while self._session is not None:
                if self._generation != generation:
                    raise TraversalCancelledError(
                        f"Wait for walker cancelled on thread {current.name!r}"
                    )
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TraversalOwnershipError(
                        f"Walker is busy on thread {self._session.thread_name!r}; "
                        f"thread {current.name!r} gave up after {self.timeout}s"
                    )
                self._waiting += 1
                try:
                    self._cond.wait(remaining)
                finally:
                    self._waiting -= 1

            self._session = TraversalSession(thread_ident=current.ident, thread_name=current.name)
            self._depth = 1

        log.debug("Walk started on thread %s", current.name)
        return self._session

    def _release(self) -> None:
        with self._cond:
            self._depth -= 1
            if self._depth > 0:
                return
            session = self._session
            self._session = None
            self._cond.notify_all()

        session.close()
        log.debug("Walk finished on thread %s after %.3fs", session.thread_name, session.elapsed)
