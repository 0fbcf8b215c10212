"""Observer protocols for FeatureWalker.

Two observer protocols exist side by side:

- LegacyObserver: receives before(event, *args) in pre-order and after()
  in post-order. This is the only protocol the walker notifies.
- EventObserver: the newer single-callback protocol. Walkers accept such
  observers in their observer set but never forward to them; they are
  served by other parts of a runner.

Selection is explicit, through observer_kind(), rather than by probing
for method names.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from .events import Event


class ObserverKind(Enum):
    """Which notification protocol an observer implements."""
    LEGACY = "legacy"
    EVENT = "event"
    UNKNOWN = "unknown"


class LegacyObserver(ABC):
    """Old-style observer notified around every node the walker visits.

    Third-party classes can be marked as legacy observers without
    inheriting, via ``LegacyObserver.register(SomeClass)``.
    """

    @abstractmethod
    def before(self, event: Event, *args: Any) -> None:
        """Called before a node is processed.

        Args:
            event: Identity of the entry method being executed
            *args: The entry method's positional arguments
        """
        pass

    @abstractmethod
    def after(self) -> None:
        """Called after a node and all of its children are processed."""
        pass


class EventObserver(ABC):
    """New-style observer receiving one callback per phase."""

    @abstractmethod
    def on_event(self, phase: str, event: Event, *args: Any) -> None:
        """Handle a notification.

        Args:
            phase: "before" or "after"
            event: Identity of the notification
            *args: Event arguments
        """
        pass


def observer_kind(observer: Any) -> ObserverKind:
    """Classify an observer by the protocol it declares.

    Legacy wins when an object declares both protocols.
    """
    if isinstance(observer, LegacyObserver):
        return ObserverKind.LEGACY
    if isinstance(observer, EventObserver):
        return ObserverKind.EVENT
    return ObserverKind.UNKNOWN
