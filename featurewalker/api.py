"""High-level API for FeatureWalker.

This module provides simple, functional interfaces for the common cases.
These functions wrap FeatureWalker for use in scripts and tests.
"""

from typing import Any, Iterable, List, Optional, Tuple

from .config import WalkerConfig
from .core.walker import FeatureWalker
from .testing.fixtures import RecordingObserver


def walk_document(
    document: Any,
    observers: Iterable[Any] = (),
    config: Optional[WalkerConfig] = None,
    step_mother: Any = None,
) -> FeatureWalker:
    """Walk a whole document, notifying the given observers.

    Args:
        document: Root node (as produced by the parser, e.g. Features)
        observers: Observers to notify
        config: Walker configuration
        step_mother: Step execution collaborator exposed to observers

    Returns:
        The FeatureWalker used, for inspecting its policy afterwards

    Example:
        >>> walker = walk_document(features, [progress_formatter])
    """
    walker = FeatureWalker(observers, config=config, step_mother=step_mother)
    walker.visit_features(document)
    return walker


def collect_events(
    document: Any,
    config: Optional[WalkerConfig] = None,
) -> List[Tuple[Any, ...]]:
    """Walk a document and return every notification in order.

    Args:
        document: Root node
        config: Walker configuration

    Returns:
        List of ("before", event, args) and ("after", event) tuples
    """
    recorder = RecordingObserver()
    walk_document(document, [recorder], config=config)
    return list(recorder.events)
