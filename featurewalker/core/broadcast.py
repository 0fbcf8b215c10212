"""Legacy observer fan-out for FeatureWalker."""

import logging
from typing import Any, Iterable, Tuple

from .events import Event
from .guard import ForeignTraversalGuard
from .observer import ObserverKind, observer_kind

log = logging.getLogger(__name__)


class LegacyObserverAdapter:
    """Forwards walker notifications to the legacy observers of a set.

    The observer set is frozen at construction. Observers that do not
    implement the legacy protocol are kept in ``observers`` but never
    called. Exceptions raised by observers propagate unchanged.
    """

    def __init__(self, observers: Iterable[Any], guard: ForeignTraversalGuard):
        self.observers: Tuple[Any, ...] = tuple(observers)
        self.guard = guard
        self.legacy_observers: Tuple[Any, ...] = tuple(
            observer for observer in self.observers
            if observer_kind(observer) is ObserverKind.LEGACY
        )

    def before(self, event: Event, *args: Any) -> None:
        """Pre-order notification; guards the first argument first."""
        if args:
            self.guard.install(args[0])
        log.debug("before %s -> %d observer(s)", event.value, len(self.legacy_observers))
        for observer in self.legacy_observers:
            observer.before(event, *args)

    def after(self, event: Event) -> None:
        """Post-order notification. ``event`` is only used for logging."""
        log.debug("after %s -> %d observer(s)", event.value, len(self.legacy_observers))
        for observer in self.legacy_observers:
            observer.after()
