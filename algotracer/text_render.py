"""Plain-text rendering of step views for the terminal front end."""

from __future__ import annotations

import json

from .step_view import ArrayView, StepView
from .structure import Composite, Node
from .trace_types import TraceDocument


def format_node(node: Node, indent: int = 0) -> str:
    """Render a classified node; composites span one line per entry."""
    if not isinstance(node, Composite):
        return node.text
    pad = "  " * (indent + 1)
    lines = []
    for key, child in node.entries:
        if isinstance(child, Composite):
            lines.append(f"{pad}{key}:\n{format_node(child, indent + 1)}")
        else:
            lines.append(f"{pad}{key}: {child.text}")
    return "\n".join(lines)


def _format_named(name: str, node: Node, indent: int) -> list[str]:
    pad = "  " * indent
    if isinstance(node, Composite):
        return [f"{pad}{name}:", format_node(node, indent)]
    return [f"{pad}{name}: {node.text}"]


def _format_array(view: ArrayView) -> list[str]:
    lines = [f"    {view.name}  Array[{view.length}]"]
    if not view.cells:
        return lines
    widths = []
    values = []
    labels = []
    for cell in view.cells:
        # Nested values inside a cell are summarised; the grid stays one row.
        text = "{...}" if isinstance(cell.node, Composite) else cell.node.text
        text = f"[{text}]" if cell.highlighted else f" {text} "
        label = ",".join(cell.pointers)
        widths.append(max(len(text), len(label), len(str(cell.index))))
        values.append(text)
        labels.append(label)
    lines.append("      " + " ".join(v.center(w) for v, w in zip(values, widths)))
    lines.append(
        "      "
        + " ".join(str(c.index).center(w) for c, w in zip(view.cells, widths))
    )
    if any(labels):
        row = " ".join(lbl.center(w) for lbl, w in zip(labels, widths))
        lines.append("      " + row.rstrip())
    return lines


def render_step_view(view: StepView, source: str | None = None) -> str:
    source_lines = source.splitlines() if source is not None else []
    lines = [
        f"═══ {view.position}  [{view.action.upper()}] ═══",
        f"  {view.description}",
    ]

    if source is not None:
        active = view.highlight_line(len(source_lines))
        if active is None:
            lines.append("  (no active source line)")
        else:
            lines.append(f"  > {active:>3} | {source_lines[active - 1]}")

    if view.arrays:
        lines.append("")
        lines.append("  Arrays")
        for array_view in view.arrays:
            lines.extend(_format_array(array_view))

    if view.composite_variables:
        lines.append("")
        lines.append("  Objects & Classes")
        for name, node in view.composite_variables.items():
            lines.extend(_format_named(name, node, indent=2))

    if view.other_structures:
        lines.append("")
        lines.append("  Data Structures")
        for group in view.other_structures:
            lines.append(f"    {group.category}")
            for label, node in group.items:
                lines.extend(_format_named(label, node, indent=3))

    lines.append("")
    lines.append("  Primitive Variables")
    if view.primitive_variables:
        for name, leaf in view.primitive_variables.items():
            lines.append(f"    {name} = {leaf.text}")
    else:
        lines.append("    (none)")

    lines.append("")
    lines.append(
        f"  Complexity: time {view.time_complexity}, space {view.space_complexity}"
    )
    lines.append(f"  Call stack: {view.active_frame} (active frame)")
    return "\n".join(lines)


def render_document_header(document: TraceDocument) -> str:
    lines = [f"═══ Trace ({document.language or 'unknown language'}) ═══"]
    if document.assumed_input:
        lines.append(
            f"  Assumed input: {json.dumps(document.assumed_input, default=str)}"
        )
    for var in document.declared_variables:
        scope = var.scope_kind.value if var.scope_kind else (var.scope or "?")
        lines.append(
            f"  {var.name} ({scope}) = {json.dumps(var.initial_value, default=str)}"
        )
    lines.append(f"  {len(document.steps)} steps")
    return "\n".join(lines)
