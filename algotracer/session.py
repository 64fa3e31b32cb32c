"""Trace session — owns the playback controller and the in-flight analysis.

Only one analysis request may be outstanding. Starting one clears the
controller to IDLE before the request is issued; a request superseded by
``cancel()``, ``reset()`` or ``close()`` still runs to completion in its
worker thread, but its result is discarded and never reaches the controller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .analyzer import TraceAnalyzer
from .config import TracerConfig
from .errors import (
    AnalysisInProgressError,
    AnalyzerUnavailableError,
    MalformedTraceError,
    UserInputError,
)
from .llm_client import get_llm_client
from .playback import PlaybackController
from .scheduling import Scheduler
from .step_view import StepView, build_step_view
from .trace_parser import parse_trace_response
from .trace_types import TraceDocument

logger = logging.getLogger(__name__)


class TraceSession:
    def __init__(
        self,
        analyzer: TraceAnalyzer | None,
        controller: PlaybackController,
        annotate_pointers: bool = True,
    ):
        self._analyzer = analyzer
        self._controller = controller
        self._annotate_pointers = annotate_pointers
        self._request_generation = 0
        self._in_flight = False

    @classmethod
    def from_config(
        cls, config: TracerConfig, scheduler: Scheduler, client: Any = None
    ) -> TraceSession:
        """Build a session with a provider client chosen by *config*."""
        llm_client = get_llm_client(
            provider=config.provider,
            model=config.model,
            client=client,
            base_url=config.base_url,
        )
        return cls(
            analyzer=TraceAnalyzer(llm_client, max_tokens=config.max_tokens),
            controller=PlaybackController(scheduler, interval=config.tick_interval),
            annotate_pointers=config.annotate_pointers,
        )

    @property
    def controller(self) -> PlaybackController:
        return self._controller

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def error(self) -> str | None:
        return self._controller.error

    def _supersede(self) -> None:
        if self._in_flight:
            logger.info("Superseding in-flight analysis request")
        self._request_generation += 1
        self._in_flight = False

    async def analyze(self, source: str) -> TraceDocument | None:
        """Analyze *source* and load the resulting trace.

        Returns the loaded document, or None if the request was superseded
        while it was outstanding.

        Raises:
            UserInputError: empty source; nothing else is touched.
            AnalysisInProgressError: another request is outstanding.
            AnalyzerUnavailableError: the session was built without an
                analyzer (replay only).
            AnalyzerUnavailableError, MalformedTraceError: the controller is
                left in ERROR with the same message.
        """
        if not source or not source.strip():
            raise UserInputError("No source code to analyze")
        if self._in_flight:
            raise AnalysisInProgressError("An analysis is already in progress")
        if self._analyzer is None:
            raise AnalyzerUnavailableError("No analyzer configured for this session")

        self._request_generation += 1
        generation = self._request_generation
        self._controller.clear()
        self._in_flight = True
        try:
            document = await asyncio.to_thread(self._analyzer.analyze, source)
        except (AnalyzerUnavailableError, MalformedTraceError) as exc:
            if generation != self._request_generation:
                logger.warning("Discarding failure of superseded analysis: %s", exc)
                return None
            logger.info("Analysis failed: %s", exc)
            self._controller.fail(str(exc))
            raise
        finally:
            if generation == self._request_generation:
                self._in_flight = False

        if generation != self._request_generation:
            logger.warning("Discarding result of superseded analysis request")
            return None
        self._controller.load(document)
        return document

    def load_document(self, document: TraceDocument) -> None:
        """Load an already-built document, superseding any outstanding request."""
        self._supersede()
        self._controller.load(document)

    def load_raw(self, raw_text: str) -> TraceDocument:
        """Parse a saved analyzer reply and load it."""
        self._supersede()
        try:
            document = parse_trace_response(raw_text)
        except MalformedTraceError as exc:
            self._controller.fail(str(exc))
            raise
        self._controller.load(document)
        return document

    def cancel(self) -> None:
        """Abandon the outstanding request; its eventual result is ignored."""
        self._supersede()

    def reset(self) -> None:
        self._supersede()
        self._controller.reset()

    def close(self) -> None:
        self._supersede()
        self._controller.clear()

    def view(self) -> StepView | None:
        """The current step's view, or None when nothing is loaded."""
        document = self._controller.document
        if document is None:
            return None
        return build_step_view(
            document, self._controller.index, annotate=self._annotate_pointers
        )
