"""Trace document data types — the analyzer's reply as immutable models.

The analyzer speaks camelCase JSON; attributes are snake_case with wire
aliases. Everything inside a snapshot stays schema-free (``Any``) and is
classified later by :mod:`algotracer.structure`.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StepAction(str, Enum):
    """Known step tags. Purely a label; playback never branches on it."""

    ASSIGN = "assign"
    COMPARE = "compare"
    ITERATE = "iterate"
    CALL = "call"
    RETURN = "return"
    PUSH = "push"
    POP = "pop"
    ACCESS = "access"
    UPDATE = "update"


class VariableScope(str, Enum):
    GLOBAL = "global"
    FUNCTION = "function"
    BLOCK = "block"


def _mapping_or_empty(value: Any) -> Any:
    if isinstance(value, Mapping):
        return value
    return {}


def _model_or_mapping(value: Any) -> Any:
    if isinstance(value, (Mapping, BaseModel)):
        return value
    return {}


def _sequence_or_empty(value: Any) -> Any:
    return [] if value is None else value


def _objects_only(value: Any) -> Any:
    """Drop entries that are not objects from a descriptive-only list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, (Mapping, BaseModel))]
    return value


def _text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


class _TraceModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class StructureBundle(_TraceModel):
    """Named arrays plus five schema-free structure categories."""

    arrays: dict[str, Any] = {}
    linked_lists: Any = Field(default_factory=list, alias="linkedLists")
    stacks: Any = []
    queues: Any = []
    trees: Any = []
    graphs: Any = []

    @field_validator("arrays", mode="before")
    @classmethod
    def _arrays(cls, value: Any) -> Any:
        return _mapping_or_empty(value)

    @field_validator(
        "linked_lists", "stacks", "queues", "trees", "graphs", mode="before"
    )
    @classmethod
    def _categories(cls, value: Any) -> Any:
        return _sequence_or_empty(value)

    def category(self, wire_key: str) -> Any:
        """Look up a structure category by its wire name (e.g. ``linkedLists``)."""
        for name, field_info in type(self).model_fields.items():
            if field_info.alias == wire_key or name == wire_key:
                return getattr(self, name)
        return []


class Snapshot(_TraceModel):
    """Full variable/structure state at one step (not a diff)."""

    variables: dict[str, Any] = {}
    data_structures: StructureBundle = Field(
        default_factory=StructureBundle, alias="dataStructures"
    )

    @field_validator("variables", mode="before")
    @classmethod
    def _variables(cls, value: Any) -> Any:
        return _mapping_or_empty(value)

    @field_validator("data_structures", mode="before")
    @classmethod
    def _data_structures(cls, value: Any) -> Any:
        return _model_or_mapping(value)


class Step(_TraceModel):
    """One point in the simulated timeline."""

    step: int | None = None
    line: int | None = None
    action: str = ""
    description: str = ""
    state: Snapshot = Field(default_factory=Snapshot)

    @field_validator("step", "line", mode="before")
    @classmethod
    def _numbers(cls, value: Any) -> int | None:
        return _optional_int(value)

    @field_validator("action", "description", mode="before")
    @classmethod
    def _texts(cls, value: Any) -> str:
        return _text_or_empty(value)

    @field_validator("state", mode="before")
    @classmethod
    def _state(cls, value: Any) -> Any:
        return _model_or_mapping(value)

    @property
    def action_kind(self) -> StepAction | None:
        """The action as a known tag, or None for an unrecognised label."""
        try:
            return StepAction(self.action.lower())
        except ValueError:
            return None


class DeclaredVariable(_TraceModel):
    name: str = ""
    initial_value: Any = Field(default=None, alias="initialValue")
    scope: str = ""

    @field_validator("name", "scope", mode="before")
    @classmethod
    def _texts(cls, value: Any) -> str:
        return _text_or_empty(value)

    @property
    def scope_kind(self) -> VariableScope | None:
        try:
            return VariableScope(self.scope.lower())
        except ValueError:
            return None


class CallFrame(_TraceModel):
    function: str = ""
    parameters: dict[str, Any] = {}
    return_value: Any = Field(default=None, alias="returnValue")

    @field_validator("function", mode="before")
    @classmethod
    def _function(cls, value: Any) -> str:
        return _text_or_empty(value)

    @field_validator("parameters", mode="before")
    @classmethod
    def _parameters(cls, value: Any) -> Any:
        return _mapping_or_empty(value)


class Complexity(_TraceModel):
    time: str = ""
    space: str = ""

    @field_validator("time", "space", mode="before")
    @classmethod
    def _texts(cls, value: Any) -> str:
        return _text_or_empty(value)


class TraceDocument(_TraceModel):
    """Complete analyzer output for one submitted program.

    A document with a non-empty ``error`` has no usable steps; playback
    refuses it. ``steps`` order is the only playback order.
    """

    language: str = ""
    assumed_input: dict[str, Any] = Field(default_factory=dict, alias="assumedInput")
    declared_variables: tuple[DeclaredVariable, ...] = Field(
        default=(), alias="variables"
    )
    initial_data_structures: StructureBundle = Field(
        default_factory=StructureBundle, alias="dataStructures"
    )
    steps: tuple[Step, ...] = ()
    call_stack: tuple[CallFrame, ...] = Field(default=(), alias="callStack")
    complexity: Complexity = Field(default_factory=Complexity)
    error: str | None = None

    @field_validator("language", mode="before")
    @classmethod
    def _language(cls, value: Any) -> str:
        return _text_or_empty(value)

    @field_validator("assumed_input", mode="before")
    @classmethod
    def _assumed_input(cls, value: Any) -> Any:
        return _mapping_or_empty(value)

    @field_validator("initial_data_structures", "complexity", mode="before")
    @classmethod
    def _models(cls, value: Any) -> Any:
        return _model_or_mapping(value)

    @field_validator("declared_variables", "call_stack", mode="before")
    @classmethod
    def _descriptive_lists(cls, value: Any) -> Any:
        return _objects_only(value)

    @field_validator("steps", mode="before")
    @classmethod
    def _steps(cls, value: Any) -> Any:
        return _sequence_or_empty(value)

    @field_validator("error", mode="before")
    @classmethod
    def _error(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return _text_or_empty(value)

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def active_frame(self) -> CallFrame | None:
        """Most recent call-stack entry; the only one shown as active."""
        return self.call_stack[0] if self.call_stack else None

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
