"""Structure interpreter — schema-free classification of snapshot values.

Every value in a step snapshot is turned into one of four node shapes:

- ``Leaf``: a primitive, or the null/undefined literal
- ``EmptyComposite``: an object-like value with no entries
- ``Composite``: ordered (key, node) pairs
- ``Opaque``: an object-like value nested past the depth bound

Classification is pure and depth-bounded, so pathological or self-referential
analyzer output always terminates. Nothing here raises; unexpected shapes
degrade to a leaf.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from . import constants
from .trace_types import Snapshot, StructureBundle


class _Missing:
    """Sentinel for an absent value (rendered as ``undefined``)."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@dataclass(frozen=True)
class Leaf:
    text: str
    is_null: bool = False


@dataclass(frozen=True)
class EmptyComposite:
    text: str = constants.EMPTY_COMPOSITE_TEXT


@dataclass(frozen=True)
class Opaque:
    text: str = constants.OPAQUE_TEXT


@dataclass(frozen=True)
class Composite:
    entries: tuple[tuple[str, Node], ...] = ()

    def get(self, key: str) -> Node | None:
        for entry_key, node in self.entries:
            if entry_key == key:
                return node
        return None

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(k for k, _ in self.entries)


Node = Union[Leaf, EmptyComposite, Composite, Opaque]


def format_primitive(value: Any) -> str:
    """Printed form of a primitive, as the analyzer's JSON would show it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _entries_of(value: Any) -> list[tuple[str, Any]] | None:
    """Key/value pairs of an object-like value, or None for anything else."""
    if isinstance(value, Mapping):
        return [(str(k), v) for k, v in value.items()]
    if isinstance(value, (list, tuple)):
        return [(str(i), v) for i, v in enumerate(value)]
    return None


def classify(value: Any, depth: int = 0) -> Node:
    """Classify *value* into a renderable node.

    Depth counts from the classification root; object-like values deeper
    than ``MAX_CLASSIFY_DEPTH`` collapse to ``Opaque``.
    """
    if value is None:
        return Leaf(constants.NULL_TEXT, is_null=True)
    if value is MISSING:
        return Leaf(constants.UNDEFINED_TEXT, is_null=True)
    if isinstance(value, (str, int, float)):
        return Leaf(format_primitive(value))

    entries = _entries_of(value)
    if entries is None:
        return Leaf(str(value))
    if not entries:
        return EmptyComposite()
    if depth > constants.MAX_CLASSIFY_DEPTH:
        return Opaque()
    return Composite(
        tuple((key, classify(child, depth + 1)) for key, child in entries)
    )


@dataclass(frozen=True)
class VariableGroups:
    """Snapshot variables split for layout; arrays are excluded."""

    primitive: dict[str, Leaf] = field(default_factory=dict)
    composite: dict[str, Node] = field(default_factory=dict)
    # Raw values of the primitive group, for the pointer pass.
    primitive_values: dict[str, Any] = field(default_factory=dict)


def partition_variables(snapshot: Snapshot) -> VariableGroups:
    """Classify each variable and group it as primitive or composite.

    Names that are also keys of ``dataStructures.arrays`` are rendered
    only as arrays and never appear in either group.
    """
    array_names = set(snapshot.data_structures.arrays)
    primitive: dict[str, Leaf] = {}
    composite: dict[str, Node] = {}
    primitive_values: dict[str, Any] = {}
    for name, value in snapshot.variables.items():
        if name in array_names:
            continue
        node = classify(value)
        if isinstance(node, Leaf):
            primitive[name] = node
            primitive_values[name] = value
        else:
            composite[name] = node
    return VariableGroups(
        primitive=primitive,
        composite=composite,
        primitive_values=primitive_values,
    )


@dataclass(frozen=True)
class StructureGroup:
    """One non-array structure category with positionally labelled items."""

    category: str
    items: tuple[tuple[str, Node], ...]


def aggregate_structures(bundle: StructureBundle) -> list[StructureGroup]:
    """Collect populated non-array categories in display order.

    Absent, empty and non-sequence categories are dropped. Each element is
    classified from depth 0 and labelled "<singular> <n>" (1-based).
    """
    groups: list[StructureGroup] = []
    for wire_key, display, singular in constants.STRUCTURE_CATEGORIES:
        data = bundle.category(wire_key)
        if not isinstance(data, (list, tuple)) or not data:
            continue
        items = tuple(
            (f"{singular} {n}", classify(item)) for n, item in enumerate(data, 1)
        )
        groups.append(StructureGroup(category=display, items=items))
    return groups
