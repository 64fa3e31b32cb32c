"""LLM-backed analyzer — sends raw source to an LLM and returns a trace document."""

from __future__ import annotations

import logging

from . import constants
from .errors import AnalyzerUnavailableError, TraceViewerError, UserInputError
from .llm_client import LLMClient
from .trace_parser import parse_trace_response
from .trace_types import TraceDocument

logger = logging.getLogger(__name__)


class AnalyzerPrompts:
    """Prompt templates for execution-trace generation."""

    SYSTEM_PROMPT = """\
You are an execution analyzer and data-structure visualization engine.

## Input

You receive a code snippet. It may be a function, a class, or a script \
(JavaScript, Python, Java, C++, ...).

## Task

Analyze the code logically and simulate its behavior step by step. \
If the code is only a definition (e.g. a TreeNode class and an inorder \
function) with no main block, INVENT valid sample data (e.g. a tree with \
3-5 nodes) and simulate the function running on it. Do not return an error \
because inputs are missing.

## Output rules

- Output valid JSON only. No markdown, no comments, no text outside the JSON.
- Be deterministic and structured.

## Assumptions

- If no input is provided, invent meaningful sample input and record it in "assumedInput".
- Linked lists and trees: build a small structure (3-5 nodes).
- Classes: instantiate objects in "variables".

## JSON schema

{
  "language": "string",
  "assumedInput": {},
  "variables": [
    {"name": "string", "initialValue": "any", "scope": "global | function | block"}
  ],
  "dataStructures": {
    "arrays": {},
    "linkedLists": [],
    "stacks": [],
    "queues": [],
    "trees": [],
    "graphs": []
  },
  "steps": [
    {
      "step": 1,
      "line": 1,
      "action": "assign | compare | iterate | call | return | push | pop | access | update",
      "description": "short clear description",
      "state": {"variables": {}, "dataStructures": {}}
    }
  ],
  "callStack": [
    {"function": "string", "parameters": {}, "returnValue": "any"}
  ],
  "complexity": {"time": "string", "space": "string"}
}

## Execution rules

- Each loop iteration, each comparison and each variable update is its own step.
- "state" holds the FULL state at that step, not a difference.
- For recursion, push and pop call stack frames.
- For tree/graph traversals, emit an "access" step for every visited node.
- Track pointer movement explicitly (i, j, low, high, mid, ...).
- In "state.variables", write objects/nodes as their full nested structure.
- Put trees in "dataStructures.trees" as nested objects (val, left, right).

## Failure

If the code cannot be visualized, return {"error": "<why>"} only. Try hard \
to infer context first: a TreeNode class means a tree problem.
"""

    USER_PROMPT_TEMPLATE = "Trace the execution of the following code:\n\n{source}"


class TraceAnalyzer:
    """Turns source text into a TraceDocument via an LLM.

    One call per analysis; no retries. Provider failures become
    AnalyzerUnavailableError, unusable replies MalformedTraceError.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        max_tokens: int = constants.DEFAULT_MAX_TOKENS,
    ):
        self._llm_client = llm_client
        self._max_tokens = max_tokens

    def request(self, source: str) -> str:
        """Send *source* to the LLM and return its raw reply text."""
        if not source or not source.strip():
            raise UserInputError("No source code to analyze")

        logger.info("Analyzer: requesting trace for %d chars of source", len(source))
        user_message = AnalyzerPrompts.USER_PROMPT_TEMPLATE.format(source=source)
        try:
            raw_response = self._llm_client.complete(
                system_prompt=AnalyzerPrompts.SYSTEM_PROMPT,
                user_message=user_message,
                max_tokens=self._max_tokens,
            )
        except TraceViewerError:
            raise
        except Exception as exc:
            raise AnalyzerUnavailableError(f"Analyzer request failed: {exc}") from exc

        if not raw_response or not raw_response.strip():
            raise AnalyzerUnavailableError("No response from the analyzer")
        logger.debug("Analyzer raw response length: %d chars", len(raw_response))
        return raw_response

    def analyze(self, source: str) -> TraceDocument:
        document = parse_trace_response(self.request(source))
        logger.info("Analyzer: produced trace with %d steps", len(document.steps))
        return document
