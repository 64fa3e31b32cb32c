"""Playback controller — transport state machine over a trace's steps.

Owns the ``(document, index, status)`` triple. While playing, exactly one
advance is scheduled at a time; every transition away from PLAYING cancels
it synchronously before the new state is committed. Each scheduled advance
also carries a generation token, so a callback that slips past cancellation
can never move the index of a newer document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from . import constants
from .errors import InvalidTraceError, MalformedTraceError
from .scheduling import ScheduledCall, Scheduler
from .trace_parser import validate_trace
from .trace_types import Step, TraceDocument

logger = logging.getLogger(__name__)


class PlaybackStatus(Enum):
    IDLE = "idle"
    PAUSED = "paused"
    PLAYING = "playing"
    ERROR = "error"


@dataclass(frozen=True)
class PlaybackEvent:
    """Emitted to listeners after every index change or state transition."""

    status: PlaybackStatus
    index: int
    reason: str


PlaybackListener = Callable[[PlaybackEvent], None]


class PlaybackController:
    def __init__(
        self,
        scheduler: Scheduler,
        interval: float = constants.DEFAULT_TICK_INTERVAL,
    ):
        self._scheduler = scheduler
        self._interval = interval
        self._document: TraceDocument | None = None
        self._index = 0
        self._status = PlaybackStatus.IDLE
        self._error: str | None = None
        self._pending: ScheduledCall | None = None
        self._tick_generation = 0
        self._listeners: list[PlaybackListener] = []

    # ── read-only state ─────────────────────────────────────────────

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def index(self) -> int:
        return self._index

    @property
    def document(self) -> TraceDocument | None:
        return self._document

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_loaded(self) -> bool:
        return self._document is not None

    @property
    def is_playing(self) -> bool:
        return self._status == PlaybackStatus.PLAYING

    @property
    def step_count(self) -> int:
        return len(self._document.steps) if self._document else 0

    @property
    def current_step(self) -> Step | None:
        if self._document is None:
            return None
        return self._document.steps[self._index]

    @property
    def at_start(self) -> bool:
        return self._index == 0

    @property
    def at_end(self) -> bool:
        return self.is_loaded and self._index >= self.step_count - 1

    @property
    def progress(self) -> float:
        if not self.is_loaded:
            return 0.0
        return (self._index + 1) / self.step_count

    # ── listeners ───────────────────────────────────────────────────

    def subscribe(self, listener: PlaybackListener) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, reason: str) -> None:
        logger.debug(
            "playback %s: status=%s index=%d",
            reason,
            self._status.value,
            self._index,
        )
        event = PlaybackEvent(status=self._status, index=self._index, reason=reason)
        for listener in list(self._listeners):
            listener(event)

    # ── timer ───────────────────────────────────────────────────────

    def _cancel_pending(self) -> None:
        self._tick_generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule_advance(self) -> None:
        generation = self._tick_generation
        self._pending = self._scheduler.schedule(
            self._interval, lambda: self._on_tick(generation)
        )

    def _on_tick(self, generation: int) -> None:
        if generation != self._tick_generation or not self.is_playing:
            logger.warning("Ignoring stale playback tick (generation %d)", generation)
            return
        self._pending = None
        if not self.at_end:
            self._index += 1
        if self.at_end:
            self._status = PlaybackStatus.PAUSED
            self._tick_generation += 1
            self._notify("end")
            return
        self._schedule_advance()
        self._notify("tick")

    # ── document lifecycle ──────────────────────────────────────────

    def load(self, document: TraceDocument) -> None:
        """Replace the document, rewind to step 0 and pause.

        Raises:
            InvalidTraceError: the document carries an ``error`` or has no
                steps. The controller is left in ERROR with no document.
        """
        self._cancel_pending()
        try:
            validate_trace(document)
        except MalformedTraceError as exc:
            self._document = None
            self._index = 0
            self._status = PlaybackStatus.ERROR
            self._error = str(exc)
            self._notify("fail")
            raise InvalidTraceError(str(exc)) from exc

        self._document = document
        self._index = 0
        self._status = PlaybackStatus.PAUSED
        self._error = None
        logger.info("Loaded trace with %d steps", len(document.steps))
        self._notify("load")

    def clear(self) -> None:
        """Drop the document and return to IDLE."""
        self._cancel_pending()
        self._document = None
        self._index = 0
        self._status = PlaybackStatus.IDLE
        self._error = None
        self._notify("clear")

    def fail(self, message: str) -> None:
        """Drop the document and surface *message* in the ERROR state."""
        self._cancel_pending()
        self._document = None
        self._index = 0
        self._status = PlaybackStatus.ERROR
        self._error = message
        self._notify("fail")

    # ── transport ───────────────────────────────────────────────────

    def play(self) -> None:
        if not self.is_loaded:
            logger.warning("play() ignored: no trace loaded")
            return
        if self.is_playing or self.at_end:
            return
        self._cancel_pending()
        self._status = PlaybackStatus.PLAYING
        self._schedule_advance()
        self._notify("play")

    def pause(self) -> None:
        if not self.is_playing:
            return
        self._cancel_pending()
        self._status = PlaybackStatus.PAUSED
        self._notify("pause")

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, index: int) -> None:
        """Jump to *index*, clamped to the step range. Status is unchanged."""
        if not self.is_loaded:
            return
        clamped = max(0, min(index, self.step_count - 1))
        if clamped == self._index:
            return
        self._index = clamped
        self._notify("step")

    def step_forward(self) -> None:
        self.seek(self._index + 1)

    def step_backward(self) -> None:
        self.seek(self._index - 1)

    def reset(self) -> None:
        """Pause and rewind to step 0, keeping the document."""
        if not self.is_loaded:
            return
        self._cancel_pending()
        self._index = 0
        self._status = PlaybackStatus.PAUSED
        self._notify("reset")
