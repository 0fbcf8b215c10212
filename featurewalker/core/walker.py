"""The canonical walker for parsed feature documents.

FeatureWalker owns the traversal order. Each node kind has one entry
method; each entry method broadcasts its Event to the legacy observers
around a recursion block that hands control to node.accept(walker). The
nodes call back into the matching entry methods for their children, so
the walk is a plain recursive descent on the caller's thread.
"""

import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from ..config import WalkerConfig
from ..errors import ConfigurationError
from .broadcast import LegacyObserverAdapter
from .events import Event, check_walker_events
from .guard import ForeignTraversalGuard, ForeignTraversalPolicy, create_policy
from .session import TraversalOwnership, TraversalSession

log = logging.getLogger(__name__)


class FeatureWalker:
    """Walks a feature document and notifies observers around every node.

    A walker is bound to one observer set and one configuration. It runs
    at most one walk at a time; see TraversalOwnership.

    Example:
        >>> walker = FeatureWalker([progress_observer])
        >>> walker.visit_features(features)
    """

    def __init__(self, observers: Iterable[Any] = (),
                 config: Optional[WalkerConfig] = None,
                 step_mother: Any = None):
        """Initialize the walker.

        Args:
            observers: Observers to notify; only legacy observers are called
            config: Walker configuration (defaults to WalkerConfig())
            step_mother: Step execution collaborator, kept for observers

        Raises:
            ConfigurationError: If the configuration fails validation
        """
        self.config = config if config is not None else WalkerConfig()
        problems = self.config.validate()
        if problems:
            raise ConfigurationError(problems)

        self._step_mother = step_mother
        self._ownership = TraversalOwnership(timeout=self.config.ownership_timeout)
        self._policy = create_policy(self.config)
        self._guard = ForeignTraversalGuard(self, self._ownership, self._policy,
                                            quiet=self.config.quiet)
        self._legacy = LegacyObserverAdapter(observers, self._guard)

    @property
    def options(self) -> dict:
        return self.config.options

    @property
    def step_mother(self) -> Any:
        return self._step_mother

    @property
    def observers(self) -> Tuple[Any, ...]:
        """All registered observers, in registration order."""
        return self._legacy.observers

    @property
    def legacy_observers(self) -> Tuple[Any, ...]:
        """The observers that are actually notified."""
        return self._legacy.legacy_observers

    @property
    def guard(self) -> ForeignTraversalGuard:
        return self._guard

    @property
    def policy(self) -> ForeignTraversalPolicy:
        return self._policy

    @property
    def session(self) -> Optional[TraversalSession]:
        """State of the walk in flight, or None when idle."""
        return self._ownership.session

    @property
    def is_walking(self) -> bool:
        return self._ownership.session is not None

    @property
    def current_table(self) -> Any:
        """Outline table most recently entered during the current walk."""
        session = self._ownership.session
        return session.current_table if session is not None else None

    def cancel(self) -> None:
        """Cancel threads waiting to start a walk on this walker.

        The walk in flight is not interrupted.
        """
        self._ownership.cancel()

    # Entry methods, one per Event

    def visit_features(self, features):
        """Walk a whole document.

        Args:
            features: Root node; its accept() visits each feature
        """
        self._visit(Event.FEATURES, (features,), lambda: features.accept(self))

    def visit_feature(self, feature):
        """Walk one feature.

        Args:
            feature: Node visiting comment, tags, name, background and elements
        """
        self._visit(Event.FEATURE, (feature,), lambda: feature.accept(self))

    def visit_comment(self, comment):
        """Walk a comment block.

        Args:
            comment: Node visiting one comment line per source line
        """
        self._visit(Event.COMMENT, (comment,), lambda: comment.accept(self))

    def visit_comment_line(self, comment_line):
        self._visit(Event.COMMENT_LINE, (comment_line,))

    def visit_tags(self, tags):
        """Walk a tag list.

        Args:
            tags: Node visiting one tag name per tag
        """
        self._visit(Event.TAGS, (tags,), lambda: tags.accept(self))

    def visit_tag_name(self, tag_name):
        self._visit(Event.TAG_NAME, (tag_name,))

    def visit_feature_name(self, name):
        self._visit(Event.FEATURE_NAME, (name,))

    def visit_feature_element(self, feature_element):
        """Walk a Scenario or ScenarioOutline.

        Args:
            feature_element: Scenario-like node
        """
        self._visit(Event.FEATURE_ELEMENT, (feature_element,),
                    lambda: feature_element.accept(self))

    def visit_background(self, background):
        """Walk the background shared by a feature's scenarios.

        Args:
            background: Node visiting its name, then its steps
        """
        self._visit(Event.BACKGROUND, (background,), lambda: background.accept(self))

    def visit_background_name(self, keyword, name, file_colon_line, source_indent):
        self._visit(Event.BACKGROUND_NAME, (keyword, name, file_colon_line, source_indent))

    def visit_examples_array(self, examples_array):
        """Walk the examples sections of an outline.

        Args:
            examples_array: Node visiting each examples section
        """
        self._visit(Event.EXAMPLES_ARRAY, (examples_array,),
                    lambda: examples_array.accept(self))

    def visit_examples(self, examples):
        """Walk one examples section.

        Args:
            examples: Node visiting its name, then its outline table
        """
        self._visit(Event.EXAMPLES, (examples,), lambda: examples.accept(self))

    def visit_examples_name(self, keyword, name):
        self._visit(Event.EXAMPLES_NAME, (keyword, name))

    def visit_outline_table(self, outline_table):
        """Walk an examples table, recording it as the current table.

        Args:
            outline_table: Table node visiting its rows
        """
        def block():
            self._ownership.session.current_table = outline_table
            outline_table.accept(self)

        self._visit(Event.OUTLINE_TABLE, (outline_table,), block)

    def visit_scenario_name(self, keyword, name, file_colon_line, source_indent):
        self._visit(Event.SCENARIO_NAME, (keyword, name, file_colon_line, source_indent))

    def visit_steps(self, steps):
        """Walk the steps of a scenario or background.

        Args:
            steps: Node visiting each step in order
        """
        self._visit(Event.STEPS, (steps,), lambda: steps.accept(self))

    def visit_step(self, step):
        """Walk one step.

        Args:
            step: Node that reports its outcome through visit_step_result()
        """
        self._visit(Event.STEP, (step,), lambda: step.accept(self))

    def visit_step_result(self, keyword, step_match, multiline_arg, status,
                          exception, source_indent, background):
        """Visit the outcome of one executed step.

        The step name is always visited; the multiline argument and the
        exception only when present. Step exceptions arrive here as data.

        Args:
            keyword: Step keyword, e.g. "Given "
            step_match: Matched step definition or the step name
            multiline_arg: Table or PyString node, or None
            status: Execution status such as "passed"
            exception: Exception raised by the step, or None
            source_indent: Indentation for pretty printers
            background: True for background steps
        """
        def block():
            self.visit_step_name(keyword, step_match, status, source_indent, background)
            if multiline_arg is not None:
                self.visit_multiline_arg(multiline_arg)
            if exception is not None:
                self.visit_exception(exception, status)

        self._visit(Event.STEP_RESULT,
                    (keyword, step_match, multiline_arg, status, exception,
                     source_indent, background),
                    block)

    def visit_step_name(self, keyword, step_match, status, source_indent, background):
        self._visit(Event.STEP_NAME, (keyword, step_match, status, source_indent, background))

    def visit_multiline_arg(self, multiline_arg):
        """Walk a step's table or doc string argument.

        Args:
            multiline_arg: Table or PyString node
        """
        self._visit(Event.MULTILINE_ARG, (multiline_arg,), lambda: multiline_arg.accept(self))

    def visit_exception(self, exception, status):
        self._visit(Event.EXCEPTION, (exception, status))

    def visit_py_string(self, string):
        self._visit(Event.PY_STRING, (string,))

    def visit_table_row(self, table_row):
        """Walk one table row.

        Args:
            table_row: Node visiting each of its cells
        """
        self._visit(Event.TABLE_ROW, (table_row,), lambda: table_row.accept(self))

    def visit_table_cell(self, table_cell):
        """Walk one table cell.

        Args:
            table_cell: Node visiting its value and status
        """
        self._visit(Event.TABLE_CELL, (table_cell,), lambda: table_cell.accept(self))

    def visit_table_cell_value(self, value, status):
        self._visit(Event.TABLE_CELL_VALUE, (value, status))

    def announce(self, announcement):
        """Push free text to the observers.

        Can be called at any time, from any thread, including from step
        definitions while a walk is in progress.
        """
        self._broadcast(Event.ANNOUNCE, (announcement,))

    # Broadcast primitive

    def _visit(self, event: Event, args: Tuple[Any, ...],
               block: Optional[Callable[[], None]] = None) -> None:
        with self._ownership.hold():
            self._broadcast(event, args, block)

    def _broadcast(self, event: Event, args: Tuple[Any, ...],
                   block: Optional[Callable[[], None]] = None) -> None:
        """Notify before, run the recursion block, notify after.

        Nothing is caught: an exception from an observer or from the
        block aborts the rest of the walk.
        """
        self._legacy.before(event, *args)
        if block is not None:
            block()
        self._legacy.after(event)

    def __repr__(self) -> str:
        return (f"FeatureWalker(observers={len(self.observers)}, "
                f"legacy={len(self.legacy_observers)}, walking={self.is_walking})")


check_walker_events(FeatureWalker)
