"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

# Values nested deeper than this (counted from each top-level variable or
# structure element) collapse to an opaque placeholder.
MAX_CLASSIFY_DEPTH = 2

NULL_TEXT = "null"
UNDEFINED_TEXT = "undefined"
EMPTY_COMPOSITE_TEXT = "{}"
OPAQUE_TEXT = "{ ... }"

INDEX_LIKE_NAMES: tuple[str, ...] = (
    "i",
    "j",
    "k",
    "l",
    "r",
    "mid",
    "low",
    "high",
    "p",
    "q",
)

# (wire key, display name, singular) in display order.
STRUCTURE_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("linkedLists", "Linked Lists", "Linked List"),
    ("trees", "Trees", "Tree"),
    ("stacks", "Stacks", "Stack"),
    ("queues", "Queues", "Queue"),
    ("graphs", "Graphs", "Graph"),
)

DEFAULT_ACTION_LABEL = "init"
DEFAULT_DESCRIPTION = "Ready to start execution."
DEFAULT_FRAME_NAME = "main"
COMPLEXITY_UNKNOWN = "N/A"

DEFAULT_TICK_INTERVAL = 1.0
DEFAULT_MAX_TOKENS = 8192

PROVIDER_CLAUDE = "claude"
PROVIDER_OPENAI = "openai"
PROVIDER_OLLAMA = "ollama"
SUPPORTED_PROVIDERS: tuple[str, ...] = (
    PROVIDER_CLAUDE,
    PROVIDER_OPENAI,
    PROVIDER_OLLAMA,
)

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OLLAMA_MODEL = "qwen2.5-coder:7b-instruct"
DEFAULT_OLLAMA_URL = "http://localhost:11434/v1"
