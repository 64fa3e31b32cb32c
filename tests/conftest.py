"""Shared sample traces for the test suite."""

import copy
import json

import pytest

from algotracer.trace_types import TraceDocument

BUBBLE_SOURCE = """\
function bubbleSort(arr) {
  let n = arr.length;
  for (let i = 0; i < n - 1; i++) {
    for (let j = 0; j < n - i - 1; j++) {
      if (arr[j] > arr[j + 1]) {
        let temp = arr[j];
        arr[j] = arr[j + 1];
        arr[j + 1] = temp;
      }
    }
  }
  return arr;
}"""


def _step(number, line, action, description, variables, arr):
    return {
        "step": number,
        "line": line,
        "action": action,
        "description": description,
        "state": {
            "variables": variables,
            "dataStructures": {
                "arrays": {"arr": arr},
                "linkedLists": [],
                "stacks": [],
                "queues": [],
                "trees": [],
                "graphs": [],
            },
        },
    }


BUBBLE_TRACE = {
    "language": "javascript",
    "assumedInput": {"arr": [5, 3, 8, 1]},
    "variables": [
        {"name": "n", "initialValue": 4, "scope": "function"},
        {"name": "i", "initialValue": 0, "scope": "block"},
    ],
    "dataStructures": {
        "arrays": {"arr": [5, 3, 8, 1]},
        "linkedLists": [],
        "stacks": [],
        "queues": [],
        "trees": [],
        "graphs": [],
    },
    "steps": [
        _step(1, 2, "assign", "n = arr.length = 4", {"n": 4}, [5, 3, 8, 1]),
        _step(2, 3, "iterate", "Outer loop i = 0", {"n": 4, "i": 0}, [5, 3, 8, 1]),
        _step(
            3,
            5,
            "compare",
            "Compare arr[0]=5 with arr[1]=3",
            {"n": 4, "i": 0, "j": 0},
            [5, 3, 8, 1],
        ),
        _step(
            4,
            8,
            "update",
            "Swap arr[0] and arr[1]",
            {"n": 4, "i": 0, "j": 0, "temp": 5},
            [3, 5, 8, 1],
        ),
        _step(
            5,
            5,
            "compare",
            "Compare arr[1]=5 with arr[2]=8",
            {"n": 4, "i": 0, "j": 1},
            [3, 5, 8, 1],
        ),
    ],
    "callStack": [{"function": "bubbleSort", "parameters": {"arr": [5, 3, 8, 1]}}],
    "complexity": {"time": "O(n^2)", "space": "O(1)"},
}


def make_trace(step_count: int) -> dict:
    """A minimal valid trace dict with *step_count* steps."""
    return {
        "language": "python",
        "steps": [
            {
                "step": n + 1,
                "line": n + 1,
                "action": "assign",
                "description": f"step {n + 1}",
                "state": {"variables": {"x": n}, "dataStructures": {"arrays": {}}},
            }
            for n in range(step_count)
        ],
    }


@pytest.fixture
def bubble_trace() -> dict:
    return copy.deepcopy(BUBBLE_TRACE)


@pytest.fixture
def bubble_json(bubble_trace) -> str:
    return json.dumps(bubble_trace)


@pytest.fixture
def bubble_document(bubble_trace) -> TraceDocument:
    return TraceDocument.model_validate(bubble_trace)


@pytest.fixture
def bubble_source() -> str:
    return BUBBLE_SOURCE


@pytest.fixture
def trace_factory():
    """Build a TraceDocument with the given number of steps."""

    def build(step_count: int) -> TraceDocument:
        return TraceDocument.model_validate(make_trace(step_count))

    return build
