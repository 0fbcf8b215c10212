"""Test fixtures for FeatureWalker consumers.

These helpers record what a walker notifies and build small documents,
so test suites can assert on the exact notification sequence.
"""

import threading
from typing import Any, List, Optional, Sequence, Tuple

from ..ast.nodes import Feature, Features, Scenario, Step, Steps
from ..core.events import Event
from ..core.observer import EventObserver, LegacyObserver


class RecordingObserver(LegacyObserver):
    """Legacy observer that records every notification it receives.

    after() carries no arguments, so the observer keeps a stack of open
    events to know which one is closing.

    Example:
        recorder = RecordingObserver()
        FeatureWalker([recorder]).visit_features(document)
        assert recorder.names()[0] == "before:visit_features"
    """

    def __init__(self):
        self.events: List[Tuple[Any, ...]] = []
        self._open: List[Event] = []
        self._lock = threading.Lock()

    def before(self, event: Event, *args: Any) -> None:
        with self._lock:
            self._open.append(event)
            self.events.append(("before", event, args))

    def after(self) -> None:
        with self._lock:
            event = self._open.pop() if self._open else None
            self.events.append(("after", event))

    @property
    def depth(self) -> int:
        """Number of events currently open."""
        return len(self._open)

    def names(self) -> List[str]:
        """Return the log as "phase:method_name" strings."""
        return [f"{entry[0]}:{entry[1].value if entry[1] else None}" for entry in self.events]

    def before_events(self) -> List[Event]:
        return [entry[1] for entry in self.events if entry[0] == "before"]

    def args_for(self, event: Event) -> List[Tuple[Any, ...]]:
        """Arguments of every before() call for the given event."""
        return [entry[2] for entry in self.events if entry[0] == "before" and entry[1] is event]

    def clear(self) -> None:
        with self._lock:
            self.events.clear()
            self._open.clear()


class RecordingEventObserver(EventObserver):
    """New-style observer that records the callbacks it receives."""

    def __init__(self):
        self.calls: List[Tuple[Any, ...]] = []

    def on_event(self, phase: str, event: Event, *args: Any) -> None:
        self.calls.append((phase, event, args))


def build_document(feature_name: str = "Feature",
                   scenarios: Optional[Sequence[Tuple[str, Sequence[Tuple[str, str]]]]] = None) -> Features:
    """Build a small document of one feature.

    Args:
        feature_name: Name of the feature
        scenarios: (scenario name, [(keyword, step name), ...]) pairs;
            defaults to one scenario with two passing steps

    Returns:
        Features root ready to be walked
    """
    if scenarios is None:
        scenarios = [("Scenario", [("Given ", "a thing"), ("Then ", "it works")])]

    elements = [
        Scenario(name, Steps([Step(keyword, step, status="passed") for keyword, step in steps]))
        for name, steps in scenarios
    ]
    return Features([Feature(feature_name, elements)])
