"""Exception hierarchy for FeatureWalker.

Observer errors are never wrapped: they propagate to the caller of the
walker entry method unchanged. The classes here cover the conditions the
walker itself reports.
"""

from typing import Any, Optional


class FeatureWalkerError(Exception):
    """Base class for all errors raised by FeatureWalker."""
    pass


class ConfigurationError(FeatureWalkerError, ValueError):
    """Raised when a WalkerConfig fails validation."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("Invalid walker configuration: " + "; ".join(self.problems))


class EventTableError(FeatureWalkerError):
    """Raised when walker entry methods disagree with the event table."""
    pass


class ForeignTraversalError(FeatureWalkerError):
    """A node's accept() was invoked by something other than the canonical walker.
    
    Attributes:
        node: The node whose traversal was attempted
        visitor: The object passed to accept()
        thread_name: Name of the thread that made the attempt
        reason: One of "rejected", "timeout" or "cancelled"
    """

    def __init__(self, node: Any, visitor: Any, thread_name: str,
                 reason: str = "rejected", message: Optional[str] = None):
        self.node = node
        self.visitor = visitor
        self.thread_name = thread_name
        self.reason = reason
        if message is None:
            message = (
                f"Foreign traversal of {type(node).__name__} by "
                f"{type(visitor).__name__} on thread {thread_name!r} ({reason})"
            )
        super().__init__(message)


class TraversalOwnershipError(FeatureWalkerError):
    """Raised when a second thread enters a walker that is already walking."""
    pass


class TraversalCancelledError(TraversalOwnershipError):
    """Raised in threads waiting for walker ownership when the walk is cancelled."""
    pass
