"""Core components of FeatureWalker.

This package contains the walker, its event catalogue, the observer
protocols, and the foreign-traversal guard.
"""

from .events import Event, EventSpec, EVENT_SPECS, event_for_method, check_walker_events
from .node import FeatureNode
from .observer import LegacyObserver, EventObserver, ObserverKind, observer_kind
from .guard import (
    ForeignTraversalGuard,
    ForeignTraversalPolicy,
    RejectPolicy,
    ParkPolicy,
    RecordPolicy,
    create_policy,
)
from .session import TraversalSession, TraversalOwnership
from .broadcast import LegacyObserverAdapter
from .walker import FeatureWalker

__all__ = [
    "Event",
    "EventSpec",
    "EVENT_SPECS",
    "event_for_method",
    "check_walker_events",
    "FeatureNode",
    "LegacyObserver",
    "EventObserver",
    "ObserverKind",
    "observer_kind",
    "ForeignTraversalGuard",
    "ForeignTraversalPolicy",
    "RejectPolicy",
    "ParkPolicy",
    "RecordPolicy",
    "create_policy",
    "TraversalSession",
    "TraversalOwnership",
    "LegacyObserverAdapter",
    "FeatureWalker",
]
