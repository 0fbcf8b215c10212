"""Event catalogue for FeatureWalker.

Every walker entry method corresponds to exactly one Event. The Event
value is the entry method's name, and EVENT_SPECS records the positional
arguments that method takes and whether it recurses into a node. Entry
methods pass their Event explicitly to the broadcast primitive, and
check_walker_events() verifies at import time that the walker and this
table agree.
"""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from ..errors import EventTableError


class Event(Enum):
    """Identity of a walker notification.

    Listed in grammar order. The set is fixed; it is not meant to be
    extended by users.
    """
    FEATURES = "visit_features"
    FEATURE = "visit_feature"
    COMMENT = "visit_comment"
    COMMENT_LINE = "visit_comment_line"
    TAGS = "visit_tags"
    TAG_NAME = "visit_tag_name"
    FEATURE_NAME = "visit_feature_name"
    FEATURE_ELEMENT = "visit_feature_element"
    BACKGROUND = "visit_background"
    BACKGROUND_NAME = "visit_background_name"
    EXAMPLES_ARRAY = "visit_examples_array"
    EXAMPLES = "visit_examples"
    EXAMPLES_NAME = "visit_examples_name"
    OUTLINE_TABLE = "visit_outline_table"
    SCENARIO_NAME = "visit_scenario_name"
    STEPS = "visit_steps"
    STEP = "visit_step"
    STEP_RESULT = "visit_step_result"
    STEP_NAME = "visit_step_name"
    MULTILINE_ARG = "visit_multiline_arg"
    EXCEPTION = "visit_exception"
    PY_STRING = "visit_py_string"
    TABLE_ROW = "visit_table_row"
    TABLE_CELL = "visit_table_cell"
    TABLE_CELL_VALUE = "visit_table_cell_value"
    ANNOUNCE = "announce"

    @property
    def method_name(self) -> str:
        """Name of the walker entry method for this event."""
        return self.value

    @property
    def params(self) -> Tuple[str, ...]:
        """Positional argument names carried by this event."""
        return EVENT_SPECS[self].params

    @property
    def is_composite(self) -> bool:
        """True if the entry method runs a recursion block."""
        return EVENT_SPECS[self].composite

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EventSpec:
    """Argument shape of one event."""
    params: Tuple[str, ...]
    composite: bool


_STEP_RESULT = ("keyword", "step_match", "multiline_arg", "status",
                "exception", "source_indent", "background")
_STEP_NAME = ("keyword", "step_match", "status", "source_indent", "background")
_NAME_LINE = ("keyword", "name", "file_colon_line", "source_indent")


EVENT_SPECS: Dict[Event, EventSpec] = {
    Event.FEATURES: EventSpec(("features",), True),
    Event.FEATURE: EventSpec(("feature",), True),
    Event.COMMENT: EventSpec(("comment",), True),
    Event.COMMENT_LINE: EventSpec(("comment_line",), False),
    Event.TAGS: EventSpec(("tags",), True),
    Event.TAG_NAME: EventSpec(("tag_name",), False),
    Event.FEATURE_NAME: EventSpec(("name",), False),
    Event.FEATURE_ELEMENT: EventSpec(("feature_element",), True),
    Event.BACKGROUND: EventSpec(("background",), True),
    Event.BACKGROUND_NAME: EventSpec(_NAME_LINE, False),
    Event.EXAMPLES_ARRAY: EventSpec(("examples_array",), True),
    Event.EXAMPLES: EventSpec(("examples",), True),
    Event.EXAMPLES_NAME: EventSpec(("keyword", "name"), False),
    Event.OUTLINE_TABLE: EventSpec(("outline_table",), True),
    Event.SCENARIO_NAME: EventSpec(_NAME_LINE, False),
    Event.STEPS: EventSpec(("steps",), True),
    Event.STEP: EventSpec(("step",), True),
    Event.STEP_RESULT: EventSpec(_STEP_RESULT, True),
    Event.STEP_NAME: EventSpec(_STEP_NAME, False),
    Event.MULTILINE_ARG: EventSpec(("multiline_arg",), True),
    Event.EXCEPTION: EventSpec(("exception", "status"), False),
    Event.PY_STRING: EventSpec(("string",), False),
    Event.TABLE_ROW: EventSpec(("table_row",), True),
    Event.TABLE_CELL: EventSpec(("table_cell",), True),
    Event.TABLE_CELL_VALUE: EventSpec(("value", "status"), False),
    Event.ANNOUNCE: EventSpec(("announcement",), False),
}


def event_for_method(method_name: str) -> Event:
    """Look up the Event for a walker entry method name.

    Raises:
        ValueError: If no event uses that method name
    """
    return Event(method_name)


def check_walker_events(walker_cls) -> None:
    """Verify that a walker class has one matching entry method per event.

    Args:
        walker_cls: Class to check

    Raises:
        EventTableError: If an event has no entry method, or the method's
            positional parameters differ from the event table
    """
    problems: List[str] = []

    missing_specs = [event.name for event in Event if event not in EVENT_SPECS]
    if missing_specs:
        problems.append(f"events without spec: {', '.join(missing_specs)}")

    for event, spec in EVENT_SPECS.items():
        method = getattr(walker_cls, event.method_name, None)
        if not callable(method):
            problems.append(f"{walker_cls.__name__} has no entry method {event.method_name}")
            continue

        params = [
            name for name, param in inspect.signature(method).parameters.items()
            if name != "self" and param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
        ]
        if tuple(params) != spec.params:
            problems.append(
                f"{event.method_name} takes ({', '.join(params)}), "
                f"expected ({', '.join(spec.params)})"
            )

    if problems:
        raise EventTableError("; ".join(problems))
