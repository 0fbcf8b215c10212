"""Foreign-traversal guard for FeatureWalker.

Legacy observers receive the node being visited as the first argument of
before(). Some of them used to call node.accept(self) to walk the subtree
on their own, which traverses it a second time. Before every notification
the walker installs a guarded accept() on that first argument: the walker
itself still traverses normally, any other caller is handed to a
ForeignTraversalPolicy and never reaches the node's children.
"""

import functools
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..errors import ForeignTraversalError

if TYPE_CHECKING:
    from ..config import WalkerConfig
    from .session import TraversalOwnership

log = logging.getLogger(__name__)

# Instance attribute recording which guard currently owns a node
GUARD_ATTR = "_featurewalker_guard"


class ForeignTraversalPolicy(ABC):
    """
    Base class for foreign traversal policies.

    A policy decides what a non-canonical call to a guarded accept()
    does instead of traversing.
    """

    @abstractmethod
    def handle(self, node: Any, visitor: Any) -> Any:
        """
        Answer a foreign traversal attempt.

        Args:
            node: The node whose accept() was called
            visitor: The object that was passed to accept()

        Returns:
            The value returned from accept(), or raises to refuse
        """
        pass


class RejectPolicy(ForeignTraversalPolicy):
    """
    Policy that refuses foreign traversal with ForeignTraversalError.

    This is the default: the attempt becomes a visible error in the
    observer that made it.
    """

    def handle(self, node: Any, visitor: Any) -> Any:
        """Raise ForeignTraversalError immediately."""
        raise ForeignTraversalError(node, visitor, threading.current_thread().name)


@dataclass
class _ParkedCall:
    node: Any
    visitor: Any
    thread_name: str
    wake: threading.Event = field(default_factory=threading.Event)
    cancelled: bool = False


class ParkPolicy(ForeignTraversalPolicy):
    """
    Policy that suspends the calling thread instead of traversing.

    This is how classic runners kept threaded legacy observers in step.
    A parked thread stays blocked until resume() or cancel() is called,
    or until ``timeout`` elapses. Resuming returns None from accept()
    without traversing anything.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize the policy.

        Args:
            timeout: Seconds to stay parked before raising (None = no limit)
        """
        self.timeout = timeout
        self._lock = threading.Lock()
        self._parked: Dict[int, _ParkedCall] = {}

    @property
    def parked_count(self) -> int:
        """Number of threads currently parked."""
        with self._lock:
            return len(self._parked)

    @property
    def parked_threads(self) -> List[str]:
        """Names of the threads currently parked."""
        with self._lock:
            return [call.thread_name for call in self._parked.values()]

    def handle(self, node: Any, visitor: Any) -> Any:
        """Block the calling thread until resumed, cancelled or timed out."""
        current = threading.current_thread()
        call = _ParkedCall(node, visitor, current.name)

        with self._lock:
            self._parked[current.ident] = call
        log.debug("Parking thread %s on %s", current.name, type(node).__name__)

        try:
            woken = call.wake.wait(self.timeout)
        finally:
            with self._lock:
                self._parked.pop(current.ident, None)

        if call.cancelled:
            raise ForeignTraversalError(node, visitor, current.name, reason="cancelled")
        if not woken:
            raise ForeignTraversalError(node, visitor, current.name, reason="timeout")
        return None

    def resume(self, thread_ident: Optional[int] = None) -> int:
        """
        Let parked threads continue without traversing.

        Args:
            thread_ident: Only resume this thread (None = all parked threads)

        Returns:
            Number of threads woken
        """
        return self._wake(thread_ident, cancelled=False)

    def cancel(self, thread_ident: Optional[int] = None) -> int:
        """
        Wake parked threads with ForeignTraversalError(reason="cancelled").

        Returns:
            Number of threads woken
        """
        return self._wake(thread_ident, cancelled=True)

    def _wake(self, thread_ident: Optional[int], cancelled: bool) -> int:
        with self._lock:
            if thread_ident is None:
                calls = list(self._parked.values())
            else:
                calls = [self._parked[thread_ident]] if thread_ident in self._parked else []
            for call in calls:
                call.cancelled = cancelled
                call.wake.set()
        return len(calls)


class RecordPolicy(ForeignTraversalPolicy):
    """
    Policy that records the attempt and returns without traversing.

    Reports are collected for later inspection, which turns foreign
    traversal into a reportable condition without interrupting anyone.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every attempt
        """
        self.reports = []
        self.verbose = verbose
        self._lock = threading.Lock()

    def handle(self, node: Any, visitor: Any) -> Any:
        """Record the attempt and return None."""
        thread_name = threading.current_thread().name
        report = {
            'node': node,
            'node_type': type(node).__name__,
            'visitor_type': type(visitor).__name__,
            'thread': thread_name,
        }
        with self._lock:
            self.reports.append(report)

        if self.verbose:
            log.warning("Skipped foreign traversal of %s by %s on thread %s",
                        report['node_type'], report['visitor_type'], thread_name)
        return None

    def get_statistics(self) -> dict:
        """
        Get statistics about recorded attempts.

        Returns:
            Dictionary with counts per node type and visitor type
        """
        with self._lock:
            reports = list(self.reports)

        by_node: Dict[str, int] = {}
        by_visitor: Dict[str, int] = {}
        for report in reports:
            by_node[report['node_type']] = by_node.get(report['node_type'], 0) + 1
            by_visitor[report['visitor_type']] = by_visitor.get(report['visitor_type'], 0) + 1

        return {
            'total_attempts': len(reports),
            'by_node_type': by_node,
            'by_visitor_type': by_visitor,
            'reports': reports,
        }


class ForeignTraversalGuard:
    """
    Installs guarded accept() methods on nodes handed to legacy observers.

    One guard belongs to one walker. Whether a call traverses is decided
    from the visitor alone, so a document shared by several walkers
    traverses for each of them. Foreign calls go to the policy of the
    guard that installed on the node most recently.
    """

    def __init__(self, walker: Any, ownership: 'TraversalOwnership',
                 policy: ForeignTraversalPolicy, quiet: bool = False):
        """
        Initialize the guard.

        Args:
            walker: The canonical walker
            ownership: The walker's ownership token
            policy: What to do with foreign traversal attempts
            quiet: If True, do not log a deprecation warning per attempt
        """
        self.walker = walker
        self.ownership = ownership
        self.policy = policy
        self.quiet = quiet

    @staticmethod
    def is_guarded(node: Any) -> bool:
        """Check whether a guard has been installed on a node."""
        try:
            return GUARD_ATTR in vars(node)
        except TypeError:
            return False

    def install(self, node: Any) -> bool:
        """
        Install the guarded accept() on a node.

        Args:
            node: First argument of a notification

        Returns:
            True if the node is now guarded by this guard
        """
        accept = getattr(node, "accept", None)
        if not callable(accept):
            return False

        try:
            if GUARD_ATTR in vars(node):
                setattr(node, GUARD_ATTR, self)
                return True

            @functools.wraps(accept)
            def guarded_accept(visitor):
                owner = getattr(node, GUARD_ATTR)
                return owner._dispatch(node, accept, visitor)

            setattr(node, "accept", guarded_accept)
            setattr(node, GUARD_ATTR, self)
        except (AttributeError, TypeError):
            # No instance dict, slots or frozen; nothing to install on
            log.debug("Cannot guard %s", type(node).__name__)
            return False

        return True

    @staticmethod
    def uninstall(node: Any) -> bool:
        """
        Remove the guarded accept() and the owner tag from a node.

        Returns:
            True if the node was guarded
        """
        try:
            state = vars(node)
        except TypeError:
            return False
        if GUARD_ATTR not in state:
            return False
        del state[GUARD_ATTR]
        state.pop("accept", None)
        return True

    @staticmethod
    def is_canonical(visitor: Any) -> bool:
        """
        Check whether a visitor may traverse a guarded node.

        Any walker qualifies on the thread that owns its walk, or on any
        thread while it is idle.
        """
        guard = getattr(visitor, "guard", None)
        if not isinstance(guard, ForeignTraversalGuard) or guard.walker is not visitor:
            return False
        return guard.ownership.session is None or guard.ownership.owned_by_current_thread()

    def _dispatch(self, node: Any, accept, visitor: Any) -> Any:
        if self.is_canonical(visitor):
            return accept(visitor)

        if not self.quiet:
            log.warning("Deprecated: stop visiting things like %s from %s (thread %s)",
                        type(node).__name__, type(visitor).__name__,
                        threading.current_thread().name)
        return self.policy.handle(node, visitor)


def unguarded_state(node: Any) -> Dict[str, Any]:
    """
    Copy of a node's instance attributes without guard state.

    The guarded accept() closes over the original node and the owner tag
    references the walker, so neither may travel with a copy or a pickle.
    """
    state = dict(vars(node))
    if state.pop(GUARD_ATTR, None) is not None:
        state.pop("accept", None)
    return state


def create_policy(config: 'WalkerConfig') -> ForeignTraversalPolicy:
    """
    Build the foreign traversal policy a config asks for.

    Args:
        config: Walker configuration

    Returns:
        ForeignTraversalPolicy instance

    Raises:
        ValueError: If the mode is not recognized
    """
    from ..config import ForeignTraversalMode

    mode = config.foreign_traversal
    if mode == ForeignTraversalMode.CUSTOM:
        return config.custom_policy
    if mode == ForeignTraversalMode.REJECT:
        return RejectPolicy()
    if mode == ForeignTraversalMode.PARK:
        return ParkPolicy(timeout=config.park_timeout)
    if mode == ForeignTraversalMode.RECORD:
        return RecordPolicy(verbose=config.verbose)

    raise ValueError(
        f"Unknown foreign traversal mode: {mode}. "
        f"Choose from: {', '.join(m.value for m in ForeignTraversalMode)}"
    )
