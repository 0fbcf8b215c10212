"""Reference document tree implementing the traversal contract."""

from .nodes import (
    Features,
    Feature,
    Comment,
    Tags,
    Background,
    Scenario,
    ScenarioOutline,
    ExamplesArray,
    Examples,
    Steps,
    Step,
    Table,
    OutlineTable,
    TableRow,
    TableCell,
    PyString,
)

__all__ = [
    "Features",
    "Feature",
    "Comment",
    "Tags",
    "Background",
    "Scenario",
    "ScenarioOutline",
    "ExamplesArray",
    "Examples",
    "Steps",
    "Step",
    "Table",
    "OutlineTable",
    "TableRow",
    "TableCell",
    "PyString",
]
