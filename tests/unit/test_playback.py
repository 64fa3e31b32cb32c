"""Tests for the playback controller state machine."""

import pytest

from algotracer.errors import InvalidTraceError, MalformedTraceError
from algotracer.playback import PlaybackController, PlaybackStatus
from algotracer.scheduling import ManualScheduler
from algotracer.trace_types import TraceDocument


class RecordingScheduler(ManualScheduler):
    """Keeps every scheduled callback so a test can invoke one late."""

    def __init__(self):
        super().__init__()
        self.callbacks = []

    def schedule(self, delay, callback):
        self.callbacks.append(callback)
        return super().schedule(delay, callback)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def controller(scheduler):
    return PlaybackController(scheduler, interval=1.0)


@pytest.fixture
def loaded(controller, trace_factory):
    controller.load(trace_factory(5))
    return controller


class TestInitialState:
    def test_idle_without_document(self, controller):
        assert controller.status == PlaybackStatus.IDLE
        assert not controller.is_loaded
        assert controller.current_step is None
        assert controller.step_count == 0
        assert controller.progress == 0.0
        assert not controller.at_end

    def test_transport_is_inert_without_document(self, controller, scheduler):
        controller.play()
        controller.step_forward()
        controller.reset()
        assert controller.status == PlaybackStatus.IDLE
        assert scheduler.pending == 0


class TestLoad:
    def test_load_pauses_at_first_step(self, loaded):
        assert loaded.status == PlaybackStatus.PAUSED
        assert loaded.index == 0
        assert loaded.step_count == 5
        assert loaded.current_step.description == "step 1"
        assert loaded.error is None

    def test_error_document_rejected(self, controller):
        with pytest.raises(InvalidTraceError, match="cannot trace"):
            controller.load(TraceDocument(error="cannot trace"))
        assert controller.status == PlaybackStatus.ERROR
        assert controller.error == "cannot trace"
        assert not controller.is_loaded

    def test_transport_inert_after_rejected_document(self, controller, scheduler):
        with pytest.raises(InvalidTraceError):
            controller.load(TraceDocument(error="cannot trace"))
        controller.play()
        controller.step_forward()
        assert controller.index == 0
        assert controller.status == PlaybackStatus.ERROR
        assert scheduler.pending == 0

    def test_invalid_trace_is_malformed(self, controller):
        with pytest.raises(MalformedTraceError):
            controller.load(TraceDocument())

    def test_load_replaces_playing_document(
        self, loaded, scheduler, trace_factory
    ):
        loaded.play()
        scheduler.advance(1.0)
        assert loaded.index == 1
        loaded.load(trace_factory(3))
        assert loaded.status == PlaybackStatus.PAUSED
        assert loaded.index == 0
        assert scheduler.pending == 0

    def test_clear_returns_to_idle(self, loaded):
        loaded.clear()
        assert loaded.status == PlaybackStatus.IDLE
        assert loaded.document is None

    def test_fail_drops_document(self, loaded):
        loaded.fail("analyzer down")
        assert loaded.status == PlaybackStatus.ERROR
        assert loaded.error == "analyzer down"
        assert loaded.document is None


class TestStepping:
    def test_step_forward_and_backward(self, loaded):
        loaded.step_forward()
        loaded.step_forward()
        assert loaded.index == 2
        loaded.step_backward()
        assert loaded.index == 1

    def test_clamped_at_both_ends(self, loaded):
        loaded.step_backward()
        assert loaded.index == 0
        for _ in range(10):
            loaded.step_forward()
        assert loaded.index == 4
        assert loaded.at_end

    def test_seek_clamps(self, loaded):
        loaded.seek(42)
        assert loaded.index == 4
        loaded.seek(-1)
        assert loaded.index == 0

    def test_progress(self, loaded):
        assert loaded.progress == pytest.approx(0.2)
        loaded.seek(4)
        assert loaded.progress == pytest.approx(1.0)

    def test_reset_rewinds_and_pauses(self, loaded, scheduler):
        loaded.seek(3)
        loaded.play()
        loaded.reset()
        assert loaded.index == 0
        assert loaded.status == PlaybackStatus.PAUSED
        assert scheduler.pending == 0


class TestAutoAdvance:
    def test_one_step_per_interval(self, loaded, scheduler):
        loaded.play()
        assert loaded.status == PlaybackStatus.PLAYING
        scheduler.advance(0.5)
        assert loaded.index == 0
        scheduler.advance(0.5)
        assert loaded.index == 1
        assert scheduler.pending == 1

    def test_stops_at_last_step(self, loaded, scheduler):
        loaded.play()
        scheduler.advance(10.0)
        assert loaded.index == 4
        assert loaded.status == PlaybackStatus.PAUSED
        assert scheduler.pending == 0

    def test_pauses_in_the_tick_that_reaches_the_end(self, loaded, scheduler):
        loaded.play()
        assert scheduler.advance(4.0) == 4
        assert loaded.index == 4
        assert loaded.status == PlaybackStatus.PAUSED

    def test_play_at_end_is_a_no_op(self, loaded, scheduler):
        loaded.seek(4)
        loaded.play()
        assert loaded.status == PlaybackStatus.PAUSED
        assert scheduler.pending == 0

    def test_single_step_trace_cannot_play(self, controller, scheduler, trace_factory):
        controller.load(trace_factory(1))
        controller.play()
        assert controller.status == PlaybackStatus.PAUSED
        assert scheduler.pending == 0

    def test_pause_cancels_the_timer(self, loaded, scheduler):
        loaded.play()
        loaded.pause()
        assert scheduler.pending == 0
        scheduler.advance(5.0)
        assert loaded.index == 0

    def test_play_twice_keeps_one_timer(self, loaded, scheduler):
        loaded.play()
        loaded.play()
        assert scheduler.pending == 1

    def test_toggle(self, loaded):
        loaded.toggle()
        assert loaded.is_playing
        loaded.toggle()
        assert loaded.status == PlaybackStatus.PAUSED

    def test_manual_step_while_playing_keeps_playing(self, loaded, scheduler):
        loaded.play()
        loaded.step_forward()
        assert loaded.index == 1
        assert loaded.is_playing
        scheduler.advance(1.0)
        assert loaded.index == 2

    def test_stale_tick_is_ignored(self, trace_factory):
        scheduler = RecordingScheduler()
        controller = PlaybackController(scheduler, interval=1.0)
        controller.load(trace_factory(5))
        controller.play()
        stale = scheduler.callbacks[0]
        controller.load(trace_factory(3))
        controller.play()
        stale()
        assert controller.index == 0
        assert scheduler.advance(1.0) == 1
        assert controller.index == 1


class TestListeners:
    def test_events_in_order(self, loaded, scheduler):
        events = []
        loaded.subscribe(events.append)
        loaded.play()
        scheduler.advance(10.0)
        reasons = [event.reason for event in events]
        assert reasons == ["play", "tick", "tick", "tick", "end"]
        assert events[-1].status == PlaybackStatus.PAUSED
        assert events[-1].index == 4

    def test_unchanged_seek_is_silent(self, loaded):
        events = []
        loaded.subscribe(events.append)
        loaded.seek(0)
        assert events == []

    def test_unsubscribe(self, loaded):
        events = []
        unsubscribe = loaded.subscribe(events.append)
        unsubscribe()
        unsubscribe()
        loaded.step_forward()
        assert events == []
