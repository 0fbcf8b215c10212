"""
Tests for FeatureWalker entry methods and the broadcast primitive.
"""

import pytest
from unittest.mock import Mock

from featurewalker import (
    Event,
    FeatureWalker,
    LegacyObserver,
    WalkerConfig,
    walk_document,
)
from featurewalker.ast import (
    Examples,
    ExamplesArray,
    Feature,
    Features,
    OutlineTable,
    PyString,
    Scenario,
    ScenarioOutline,
    Step,
    Steps,
    Table,
)
from featurewalker.testing import RecordingObserver, build_document


class StubNode:
    """Node whose accept() just records who called it."""

    def __init__(self):
        self.accepted = []

    def accept(self, walker):
        self.accepted.append(walker)


def _args_for(event):
    """First argument is a StubNode, the rest are None."""
    return (StubNode(),) + (None,) * (len(event.params) - 1)


NODE_EVENTS = [event for event in Event if event is not Event.ANNOUNCE]


class TestEntryMethods:
    """Every entry method produces one before/after pair for its own event."""

    @pytest.mark.parametrize("event", NODE_EVENTS, ids=lambda e: e.value)
    def test_single_pair_per_entry(self, event):
        """Exactly one before and one after carry the entry's identity, in order."""
        recorder = RecordingObserver()
        walker = FeatureWalker([recorder])
        args = _args_for(event)

        getattr(walker, event.method_name)(*args)

        assert recorder.events[0] == ("before", event, args)
        assert recorder.events[-1] == ("after", event)
        assert sum(1 for e in recorder.events if e[0] == "before" and e[1] is event) == 1
        assert sum(1 for e in recorder.events if e[0] == "after" and e[1] is event) == 1

    @pytest.mark.parametrize("event", NODE_EVENTS, ids=lambda e: e.value)
    def test_composite_entries_recurse(self, event):
        """Composite entries ask their node to accept the walker; leaves do not."""
        walker = FeatureWalker()
        args = _args_for(event)

        getattr(walker, event.method_name)(*args)

        node = args[0]
        if event.is_composite and event is not Event.STEP_RESULT:
            assert node.accepted == [walker]
        else:
            assert node.accepted == []

    @pytest.mark.parametrize("event", [e for e in NODE_EVENTS if e.is_composite],
                             ids=lambda e: e.value)
    def test_composite_entries_documented(self, event):
        """Composite entry methods describe the node they walk."""
        assert "Args:" in getattr(FeatureWalker, event.method_name).__doc__

    def test_walker_idle_after_entry(self):
        """The session is closed once the outermost entry returns."""
        walker = FeatureWalker()
        walker.visit_feature(StubNode())

        assert not walker.is_walking
        assert walker.session is None


class TestNesting:
    """Children's notifications nest strictly inside their parent's."""

    def test_end_to_end_sequence(self):
        """One feature, one scenario, two steps."""
        recorder = RecordingObserver()
        walk_document(build_document(), [recorder])

        assert recorder.names() == [
            "before:visit_features",
            "before:visit_feature",
            "before:visit_feature_name",
            "after:visit_feature_name",
            "before:visit_feature_element",
            "before:visit_scenario_name",
            "after:visit_scenario_name",
            "before:visit_steps",
            "before:visit_step",
            "before:visit_step_result",
            "before:visit_step_name",
            "after:visit_step_name",
            "after:visit_step_result",
            "after:visit_step",
            "before:visit_step",
            "before:visit_step_result",
            "before:visit_step_name",
            "after:visit_step_name",
            "after:visit_step_result",
            "after:visit_step",
            "after:visit_steps",
            "after:visit_feature_element",
            "after:visit_feature",
            "after:visit_features",
        ]

    def test_structural_events_only(self):
        """Filtered to structural nodes, the walk is the canonical skeleton."""
        recorder = RecordingObserver()
        walk_document(build_document(), [recorder])

        wanted = {Event.FEATURES, Event.FEATURE, Event.FEATURE_ELEMENT, Event.STEPS, Event.STEP}
        skeleton = [name for name, entry in zip(recorder.names(), recorder.events)
                    if entry[1] in wanted]

        assert skeleton == [
            "before:visit_features",
            "before:visit_feature",
            "before:visit_feature_element",
            "before:visit_steps",
            "before:visit_step",
            "after:visit_step",
            "before:visit_step",
            "after:visit_step",
            "after:visit_steps",
            "after:visit_feature_element",
            "after:visit_feature",
            "after:visit_features",
        ]

    def test_children_in_document_order(self):
        """Scenarios are visited in the order the feature lists them."""
        recorder = RecordingObserver()
        document = build_document(scenarios=[
            ("first", [("Given ", "one")]),
            ("second", [("Given ", "two")]),
            ("third", [("Given ", "three")]),
        ])
        walk_document(document, [recorder])

        names = [args[1] for args in recorder.args_for(Event.SCENARIO_NAME)]
        assert names == ["first", "second", "third"]

    def test_examples_nest_their_table(self):
        """The outline table is visited between examples' before and after."""
        recorder = RecordingObserver()
        table = OutlineTable.from_values([["x"], ["1"]])
        outline = ScenarioOutline(
            "outline",
            Steps([Step("Given ", "<x>")]),
            ExamplesArray([Examples(table, name="numbers")]),
        )
        walk_document(Features([Feature("F", [outline])]), [recorder])

        names = recorder.names()
        start = names.index("before:visit_examples")
        end = names.index("after:visit_examples")
        assert start < names.index("before:visit_examples_name") < end
        assert start < names.index("before:visit_outline_table") < end
        assert start < names.index("after:visit_outline_table") < end

    def test_pairs_balance(self):
        """Every before has a matching after for a full outline document."""
        recorder = RecordingObserver()
        table = OutlineTable.from_values([["a", "b"], ["1", "2"], ["3", "4"]])
        outline = ScenarioOutline(
            "outline",
            Steps([Step("Given ", "<a> and <b>")]),
            ExamplesArray([Examples(table)]),
        )
        walk_document(Features([Feature("F", [outline])]), [recorder])

        befores = sum(1 for e in recorder.events if e[0] == "before")
        afters = sum(1 for e in recorder.events if e[0] == "after")
        assert befores == afters
        assert recorder.depth == 0
        assert len(recorder.args_for(Event.TABLE_CELL_VALUE)) == 6


class TestStepResult:
    """Step results visit the name, then the optional argument and exception."""

    def test_step_name_only(self):
        """Without multiline argument or exception only the step name follows."""
        recorder = RecordingObserver()
        walker = FeatureWalker([recorder])
        walker.visit_step_result("Given ", "a match", None, "passed", None, 2, False)

        assert recorder.before_events() == [Event.STEP_RESULT, Event.STEP_NAME]
        assert recorder.args_for(Event.STEP_NAME) == [("Given ", "a match", "passed", 2, False)]

    def test_multiline_and_exception(self):
        """Multiline argument precedes the exception, both inside the result."""
        recorder = RecordingObserver()
        walker = FeatureWalker([recorder])
        error = AssertionError("expected 2")
        walker.visit_step_result("Then ", "a match", PyString("text"), "failed", error, 0, False)

        assert recorder.before_events() == [
            Event.STEP_RESULT,
            Event.STEP_NAME,
            Event.MULTILINE_ARG,
            Event.PY_STRING,
            Event.EXCEPTION,
        ]
        assert recorder.args_for(Event.EXCEPTION) == [(error, "failed")]
        assert recorder.events[-1] == ("after", Event.STEP_RESULT)

    def test_empty_table_argument_still_visited(self):
        """An empty table is a present argument, not a missing one."""
        recorder = RecordingObserver()
        walker = FeatureWalker([recorder])
        walker.visit_step_result("Given ", "m", Table(), "passed", None, 0, False)

        assert Event.MULTILINE_ARG in recorder.before_events()

    def test_step_exceptions_are_data(self):
        """A failed step is reported, not raised."""
        recorder = RecordingObserver()
        error = RuntimeError("boom")
        step = Step("When ", "it breaks", status="failed", exception=error)
        document = Features([Feature("F", [Scenario("S", Steps([step]))])])

        walk_document(document, [recorder])

        assert recorder.args_for(Event.EXCEPTION) == [(error, "failed")]


class TestOutlineTable:
    """The current outline table is scoped to the walk."""

    def test_current_table_during_walk(self):
        """Observers see the table as current while it is being walked."""
        table = OutlineTable.from_values([["x"], ["1"]])
        seen = []

        class TableWatcher(LegacyObserver):
            def before(self, event, *args):
                if event is Event.TABLE_ROW:
                    seen.append(walker.current_table)

            def after(self):
                pass

        walker = FeatureWalker([TableWatcher()])
        walker.visit_outline_table(table)

        assert seen == [table, table]
        assert walker.current_table is None

    def test_multiline_table_does_not_set_current(self):
        """Only outline tables become the current table."""
        seen = []

        class Probe(LegacyObserver):
            def before(self, event, *args):
                if event is Event.TABLE_ROW:
                    seen.append(walker.current_table)

            def after(self):
                pass

        walker = FeatureWalker([Probe()])
        walker.visit_multiline_arg(Table.from_values([["a"]]))

        assert seen == [None]


class TestAnnounce:
    """Announcements are plain notifications."""

    def test_announce_outside_walk(self):
        """announce() notifies a single pair when no walk is running."""
        recorder = RecordingObserver()
        walker = FeatureWalker([recorder])

        walker.announce("hello")

        assert recorder.events == [("before", Event.ANNOUNCE, ("hello",)), ("after", Event.ANNOUNCE)]
        assert not walker.is_walking

    def test_announce_during_walk(self):
        """announce() from inside a step nests where it was called."""
        recorder = RecordingObserver()

        class Announcer(LegacyObserver):
            def before(self, event, *args):
                if event is Event.STEP_NAME:
                    walker.announce(f"running {args[1]}")

            def after(self):
                pass

        walker = FeatureWalker([recorder, Announcer()])
        walker.visit_features(build_document())

        announcements = recorder.args_for(Event.ANNOUNCE)
        assert announcements == [("running a thing",), ("running it works",)]


class TestErrorPropagation:
    """Observer errors abort the walk and reach the caller unchanged."""

    def test_before_error_propagates(self):
        """An error in before() stops the walk; the walker becomes idle."""
        class Failing(LegacyObserver):
            def before(self, event, *args):
                if event is Event.STEP:
                    raise KeyError("observer failure")

            def after(self):
                pass

        recorder = RecordingObserver()
        walker = FeatureWalker([recorder, Failing()])

        with pytest.raises(KeyError):
            walker.visit_features(build_document())

        assert not walker.is_walking
        assert ("after", Event.FEATURES) not in recorder.events
        assert Event.STEP_RESULT not in recorder.before_events()

    def test_after_error_propagates(self):
        """An error in after() propagates from the entry method."""
        observer = Mock(spec=LegacyObserver)
        observer.after.side_effect = ValueError("after failed")
        walker = FeatureWalker([observer])

        with pytest.raises(ValueError):
            walker.visit_comment_line("# note")

        observer.before.assert_called_once_with(Event.COMMENT_LINE, "# note")

    def test_walker_reusable_after_error(self):
        """A failed walk does not leave the walker owned."""
        calls = []

        class FailOnce(LegacyObserver):
            def before(self, event, *args):
                if not calls:
                    calls.append(event)
                    raise RuntimeError("first walk fails")

            def after(self):
                pass

        walker = FeatureWalker([FailOnce()])
        with pytest.raises(RuntimeError):
            walker.visit_features(build_document())

        walker.visit_features(build_document())
        assert not walker.is_walking


class TestWalkerAttributes:
    """Configuration-derived attributes."""

    def test_options_and_step_mother(self):
        """Options come from the config; the step mother is kept as given."""
        step_mother = object()
        walker = FeatureWalker(config=WalkerConfig(options={"quiet": True}),
                               step_mother=step_mother)

        assert walker.options == {"quiet": True}
        assert walker.step_mother is step_mother

    def test_repr(self):
        walker = FeatureWalker([RecordingObserver(), object()])
        assert repr(walker) == "FeatureWalker(observers=2, legacy=1, walking=False)"
