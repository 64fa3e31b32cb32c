"""Best-effort pointer annotation over already-classified arrays.

The analyzer never says which array an index variable addresses, so any
primitive variable with an index-like name (``i``, ``j``, ``mid`` ...) and a
numeric value is proposed as a highlighted index for *every* array. False
positives on unrelated arrays are accepted. Nothing in
:mod:`algotracer.structure` depends on this module; callers may skip it.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from . import constants


def _as_index(value: Any) -> int | None:
    """An integral number usable as a cell index, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    return value


def index_variables(primitive_values: Mapping[str, Any]) -> list[tuple[str, int]]:
    """(name, index) for each index-like variable, in variable order."""
    found: list[tuple[str, int]] = []
    for name, value in primitive_values.items():
        if name not in constants.INDEX_LIKE_NAMES:
            continue
        index = _as_index(value)
        if index is not None:
            found.append((name, index))
    return found


def highlighted_indices(
    primitive_values: Mapping[str, Any], array_names: list[str]
) -> dict[str, tuple[int, ...]]:
    """Map every array name to the indices proposed by index-like variables."""
    proposed: list[int] = []
    for _, index in index_variables(primitive_values):
        if index not in proposed:
            proposed.append(index)
    if not proposed:
        return {}
    return {name: tuple(proposed) for name in array_names}


def pointer_labels(
    primitive_values: Mapping[str, Any], arrays: Mapping[str, Any]
) -> dict[str, dict[int, tuple[str, ...]]]:
    """Label each array cell with the index-like variables equal to its index.

    Arrays whose value is not a sequence have no cells and get no labels.
    """
    pointers = index_variables(primitive_values)
    labels: dict[str, dict[int, tuple[str, ...]]] = {}
    for name, data in arrays.items():
        if not isinstance(data, (list, tuple)):
            continue
        cells: dict[int, tuple[str, ...]] = {}
        for var_name, index in pointers:
            if 0 <= index < len(data):
                cells[index] = cells.get(index, ()) + (var_name,)
        if cells:
            labels[name] = cells
    return labels


@dataclass(frozen=True)
class ArrayAnnotations:
    highlighted: dict[str, tuple[int, ...]] = field(default_factory=dict)
    pointers: dict[str, dict[int, tuple[str, ...]]] = field(default_factory=dict)

    def is_highlighted(self, array_name: str, index: int) -> bool:
        return index in self.highlighted.get(array_name, ())

    def labels_for(self, array_name: str, index: int) -> tuple[str, ...]:
        return self.pointers.get(array_name, {}).get(index, ())


def annotate_arrays(
    primitive_values: Mapping[str, Any], arrays: Mapping[str, Any]
) -> ArrayAnnotations:
    return ArrayAnnotations(
        highlighted=highlighted_indices(primitive_values, list(arrays)),
        pointers=pointer_labels(primitive_values, arrays),
    )
