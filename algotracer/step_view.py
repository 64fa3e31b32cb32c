"""Step view — the plain-data bundle exposed to a render surface.

Combines the structure interpreter and the pointer pass for one selected
step. Contains no styling or layout decisions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from . import constants
from .pointers import ArrayAnnotations, annotate_arrays
from .structure import (
    Leaf,
    Node,
    StructureGroup,
    aggregate_structures,
    classify,
    partition_variables,
)
from .trace_types import Step, TraceDocument


@dataclass(frozen=True)
class ArrayCell:
    index: int
    node: Node
    highlighted: bool = False
    pointers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ArrayView:
    name: str
    cells: tuple[ArrayCell, ...] = ()
    highlighted: tuple[int, ...] = ()

    @property
    def length(self) -> int:
        return len(self.cells)


@dataclass(frozen=True)
class StepView:
    index: int
    step_count: int
    line: int | None
    action: str
    description: str
    primitive_variables: dict[str, Leaf] = field(default_factory=dict)
    composite_variables: dict[str, Node] = field(default_factory=dict)
    arrays: tuple[ArrayView, ...] = ()
    other_structures: tuple[StructureGroup, ...] = ()
    active_frame: str = constants.DEFAULT_FRAME_NAME
    time_complexity: str = constants.COMPLEXITY_UNKNOWN
    space_complexity: str = constants.COMPLEXITY_UNKNOWN

    @property
    def position(self) -> str:
        return f"Step {self.index + 1} / {self.step_count}"

    def highlight_line(self, source_line_count: int) -> int | None:
        """The 1-based line to highlight, or None when out of range."""
        if self.line is None or not 1 <= self.line <= source_line_count:
            return None
        return self.line


def _array_views(
    arrays: dict, annotations: ArrayAnnotations
) -> tuple[ArrayView, ...]:
    views = []
    for name, data in arrays.items():
        values = data if isinstance(data, (list, tuple)) else ()
        cells = tuple(
            ArrayCell(
                index=i,
                node=classify(value),
                highlighted=annotations.is_highlighted(name, i),
                pointers=annotations.labels_for(name, i),
            )
            for i, value in enumerate(values)
        )
        views.append(
            ArrayView(
                name=name,
                cells=cells,
                highlighted=annotations.highlighted.get(name, ()),
            )
        )
    return tuple(views)


def build_step_view(
    document: TraceDocument, index: int, annotate: bool = True
) -> StepView:
    """Project the step at *index* (clamped) into a StepView.

    Args:
        document: A validated trace document with at least one step.
        index: 0-based step index.
        annotate: Run the pointer-inference pass over the arrays.
    """
    index = max(0, min(index, len(document.steps) - 1))
    step: Step = document.steps[index]
    snapshot = step.state
    arrays = snapshot.data_structures.arrays

    groups = partition_variables(snapshot)
    annotations = (
        annotate_arrays(groups.primitive_values, arrays)
        if annotate
        else ArrayAnnotations()
    )

    frame = document.active_frame
    return StepView(
        index=index,
        step_count=len(document.steps),
        line=step.line,
        action=step.action or constants.DEFAULT_ACTION_LABEL,
        description=step.description or constants.DEFAULT_DESCRIPTION,
        primitive_variables=groups.primitive,
        composite_variables=groups.composite,
        arrays=_array_views(arrays, annotations),
        other_structures=tuple(aggregate_structures(snapshot.data_structures)),
        active_frame=(
            frame.function if frame and frame.function else constants.DEFAULT_FRAME_NAME
        ),
        time_complexity=document.complexity.time or constants.COMPLEXITY_UNKNOWN,
        space_complexity=document.complexity.space or constants.COMPLEXITY_UNKNOWN,
    )
