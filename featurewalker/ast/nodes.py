"""Reference document tree for FeatureWalker.

These classes implement the traversal contract for every composite node
kind, in grammar order, so that documents can be built in code and walked.
A parser producing its own node classes only has to follow the same
accept() contract.
"""

from typing import Any, Iterator, List, Optional, Sequence

from ..core.node import FeatureNode


class Features(FeatureNode):
    """Root of a document: every feature that was loaded."""

    def __init__(self, features: Sequence['Feature'] = ()):
        self.features = list(features)

    def accept(self, walker) -> None:
        for feature in self.features:
            walker.visit_feature(feature)

    def __iter__(self) -> Iterator['Feature']:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)


class Feature(FeatureNode):
    """One feature: comment, tags, name, optional background, then elements."""

    def __init__(self,
                 name: str,
                 feature_elements: Sequence[FeatureNode] = (),
                 background: Optional['Background'] = None,
                 comment: Optional['Comment'] = None,
                 tags: Optional['Tags'] = None):
        self.name = name
        self.feature_elements = list(feature_elements)
        self.background = background
        self.comment = comment
        self.tags = tags

    def accept(self, walker) -> None:
        if self.comment is not None:
            walker.visit_comment(self.comment)
        if self.tags is not None:
            walker.visit_tags(self.tags)
        walker.visit_feature_name(self.name)
        if self.background is not None:
            walker.visit_background(self.background)
        for feature_element in self.feature_elements:
            walker.visit_feature_element(feature_element)

    def __repr__(self) -> str:
        return f"Feature(name={self.name!r})"


class Comment(FeatureNode):
    def __init__(self, lines: Sequence[str] = ()):
        self.lines = list(lines)

    def accept(self, walker) -> None:
        for line in self.lines:
            walker.visit_comment_line(line)


class Tags(FeatureNode):
    def __init__(self, names: Sequence[str] = ()):
        self.names = list(names)

    def accept(self, walker) -> None:
        for name in self.names:
            walker.visit_tag_name(name)


class Steps(FeatureNode):
    """Ordered step sequence of a scenario or background."""

    def __init__(self, steps: Sequence['Step'] = ()):
        self.steps = list(steps)

    def accept(self, walker) -> None:
        for step in self.steps:
            walker.visit_step(step)

    def __iter__(self) -> Iterator['Step']:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)


class Step(FeatureNode):
    """A step together with the outcome of executing it.

    Execution happens elsewhere; whatever it produced (status, exception)
    is stored here and reported through visit_step_result.
    """

    def __init__(self,
                 keyword: str,
                 name: str,
                 multiline_arg: Optional[FeatureNode] = None,
                 status: str = "skipped",
                 exception: Optional[BaseException] = None,
                 source_indent: int = 0,
                 background: bool = False,
                 step_match: Any = None):
        self.keyword = keyword
        self.name = name
        self.multiline_arg = multiline_arg
        self.status = status
        self.exception = exception
        self.source_indent = source_indent
        self.background = background
        self.step_match = step_match if step_match is not None else name

    def accept(self, walker) -> None:
        walker.visit_step_result(self.keyword, self.step_match, self.multiline_arg,
                                 self.status, self.exception, self.source_indent,
                                 self.background)

    def __repr__(self) -> str:
        return f"Step({self.keyword!r}, {self.name!r}, status={self.status!r})"


class _NamedElement(FeatureNode):
    """Shared header of scenarios and backgrounds."""

    def __init__(self, keyword: str, name: str, steps: Optional[Steps] = None,
                 file_colon_line: Optional[str] = None, source_indent: int = 0):
        self.keyword = keyword
        self.name = name
        self.steps = steps if steps is not None else Steps()
        self.file_colon_line = file_colon_line
        self.source_indent = source_indent

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.keyword!r}, {self.name!r})"


class Background(_NamedElement):
    def __init__(self, name: str = "", steps: Optional[Steps] = None,
                 keyword: str = "Background:", file_colon_line: Optional[str] = None,
                 source_indent: int = 0):
        super().__init__(keyword, name, steps, file_colon_line, source_indent)

    def accept(self, walker) -> None:
        walker.visit_background_name(self.keyword, self.name,
                                     self.file_colon_line, self.source_indent)
        walker.visit_steps(self.steps)


class Scenario(_NamedElement):
    def __init__(self, name: str, steps: Optional[Steps] = None,
                 keyword: str = "Scenario:", comment: Optional[Comment] = None,
                 tags: Optional[Tags] = None, file_colon_line: Optional[str] = None,
                 source_indent: int = 0):
        super().__init__(keyword, name, steps, file_colon_line, source_indent)
        self.comment = comment
        self.tags = tags

    def accept(self, walker) -> None:
        if self.comment is not None:
            walker.visit_comment(self.comment)
        if self.tags is not None:
            walker.visit_tags(self.tags)
        walker.visit_scenario_name(self.keyword, self.name,
                                   self.file_colon_line, self.source_indent)
        walker.visit_steps(self.steps)


class ScenarioOutline(Scenario):
    """A scenario run once per row of each examples table."""

    def __init__(self, name: str, steps: Optional[Steps] = None,
                 examples_array: Optional['ExamplesArray'] = None,
                 keyword: str = "Scenario Outline:", **kwargs):
        super().__init__(name, steps, keyword=keyword, **kwargs)
        self.examples_array = examples_array if examples_array is not None else ExamplesArray()

    def accept(self, walker) -> None:
        super().accept(walker)
        walker.visit_examples_array(self.examples_array)


class ExamplesArray(FeatureNode):
    def __init__(self, examples: Sequence['Examples'] = ()):
        self.examples = list(examples)

    def accept(self, walker) -> None:
        for examples in self.examples:
            walker.visit_examples(examples)


class Examples(FeatureNode):
    def __init__(self, outline_table: 'OutlineTable', name: str = "",
                 keyword: str = "Examples:"):
        self.keyword = keyword
        self.name = name
        self.outline_table = outline_table

    def accept(self, walker) -> None:
        walker.visit_examples_name(self.keyword, self.name)
        walker.visit_outline_table(self.outline_table)


class TableCell(FeatureNode):
    def __init__(self, value: str, status: Optional[str] = None):
        self.value = value
        self.status = status

    def accept(self, walker) -> None:
        walker.visit_table_cell_value(self.value, self.status)

    def __repr__(self) -> str:
        return f"TableCell({self.value!r})"


class TableRow(FeatureNode):
    def __init__(self, cells: Sequence[TableCell] = ()):
        self.cells = list(cells)

    def accept(self, walker) -> None:
        for cell in self.cells:
            walker.visit_table_cell(cell)

    @classmethod
    def from_values(cls, values: Sequence[str], status: Optional[str] = None) -> 'TableRow':
        return cls([TableCell(value, status) for value in values])


class Table(FeatureNode):
    """Data table, used as a step's multiline argument."""

    def __init__(self, rows: Sequence[TableRow] = ()):
        self.rows = list(rows)

    def accept(self, walker) -> None:
        for row in self.rows:
            walker.visit_table_row(row)

    @classmethod
    def from_values(cls, rows: Sequence[Sequence[str]]) -> 'Table':
        """Build a table from plain cell values, first row being the header."""
        return cls([TableRow.from_values(values) for values in rows])

    def raw(self) -> List[List[str]]:
        return [[cell.value for cell in row.cells] for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


class OutlineTable(Table):
    """Examples table of a scenario outline."""
    pass


class PyString(FeatureNode):
    """Literal text block used as a step's multiline argument."""

    def __init__(self, text: str):
        self.text = text

    def accept(self, walker) -> None:
        walker.visit_py_string(self.text)

    def __str__(self) -> str:
        return self.text
