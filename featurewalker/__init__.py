"""FeatureWalker - Observer-driven traversal of parsed feature documents.

FeatureWalker walks a feature document (features, scenarios, steps,
tables) in grammar order and notifies observers before and after every
node, so formatters and result collectors never deal with traversal order.

Quick start:
━━━━━━━━━━━━
    from featurewalker import FeatureWalker
    walker = FeatureWalker([my_observer])
    walker.visit_features(features)
━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .config import WalkerConfig, ForeignTraversalMode
from .errors import (
    FeatureWalkerError,
    ConfigurationError,
    EventTableError,
    ForeignTraversalError,
    TraversalOwnershipError,
    TraversalCancelledError,
)
from .core import (
    Event,
    EVENT_SPECS,
    FeatureNode,
    LegacyObserver,
    EventObserver,
    ObserverKind,
    observer_kind,
    ForeignTraversalPolicy,
    RejectPolicy,
    ParkPolicy,
    RecordPolicy,
    FeatureWalker,
)
from .api import walk_document, collect_events

__all__ = [
    "__version__",
    # Config
    "WalkerConfig",
    "ForeignTraversalMode",
    # Errors
    "FeatureWalkerError",
    "ConfigurationError",
    "EventTableError",
    "ForeignTraversalError",
    "TraversalOwnershipError",
    "TraversalCancelledError",
    # Core
    "Event",
    "EVENT_SPECS",
    "FeatureNode",
    "LegacyObserver",
    "EventObserver",
    "ObserverKind",
    "observer_kind",
    "ForeignTraversalPolicy",
    "RejectPolicy",
    "ParkPolicy",
    "RecordPolicy",
    "FeatureWalker",
    # API
    "walk_document",
    "collect_events",
]
