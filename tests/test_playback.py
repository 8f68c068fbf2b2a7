"""Tests for the playback controller.

The controller replays a planned sequence one element per tick.  Time
is advanced by hand through ``advance(ms)`` so every test is exact.
The key property: once a run completes, the movement it accumulated
tick by tick equals the planner's total seek time, no matter how often
it was paused and resumed on the way.
"""

import pytest

from disk_sim.logging import Logger, LogLevel
from disk_sim.planner import Algorithm, Direction, compute_sequence
from disk_sim.playback import (
    EmptySequenceError,
    InvalidStateError,
    PlaybackController,
    PlaybackSnapshot,
    PlaybackState,
)
from disk_sim.timer import DEFAULT_TICK_INTERVAL_MS, IntervalTimer

_INTERVAL = 100
_HEAD = 53
_TWO_STEPS = [98, 183]
_TWO_STEP_TOTAL = 130  # |53-98| + |98-183| = 45 + 85
_TEXTBOOK_REQUESTS = [98, 183, 37, 122, 14, 124, 65, 67]
_MAX_TRACK = 199


def _controller(logger: Logger | None = None) -> PlaybackController:
    """Create a controller on a fresh timer at the test interval."""
    return PlaybackController(timer=IntervalTimer(interval_ms=_INTERVAL), logger=logger)


def _started(sequence: list[int] | None = None) -> PlaybackController:
    """Create a controller already RUNNING the two-step sequence."""
    controller = _controller()
    controller.start(sequence or _TWO_STEPS, _HEAD)
    return controller


# -- Start -----------------------------------------------------------------------


class TestStart:
    """start() seeds the run and arms the timer."""

    def test_initial_fields(self) -> None:
        """A fresh run sits on the start track with zero movement."""
        snap = _controller().start(_TWO_STEPS, _HEAD)
        assert snap.status is PlaybackState.RUNNING
        assert snap.step_index == 0
        assert snap.current_position == _HEAD
        assert snap.total_movement == 0
        assert snap.sequence == tuple(_TWO_STEPS)
        assert snap.total_seek_time == _TWO_STEP_TOTAL

    def test_arms_timer(self) -> None:
        """Starting arms the controller's timer."""
        controller = _started()
        assert controller.timer.active

    def test_custom_interval(self) -> None:
        """An interval passed to start() replaces the current one."""
        controller = _controller()
        controller.start(_TWO_STEPS, _HEAD, 250)
        expected = 250
        assert controller.tick_interval_ms == expected

    def test_empty_sequence_refused(self) -> None:
        """Starting with nothing to play raises and stays IDLE."""
        controller = _controller()
        with pytest.raises(EmptySequenceError):
            controller.start([], _HEAD)
        assert controller.state is PlaybackState.IDLE
        assert not controller.timer.active

    @pytest.mark.parametrize("pause_first", [False, True])
    def test_double_start_rejected(self, *, pause_first: bool) -> None:
        """start() while RUNNING or PAUSED raises and changes nothing."""
        controller = _started()
        controller.advance(_INTERVAL)
        if pause_first:
            controller.pause()
        before = controller.snapshot()
        with pytest.raises(InvalidStateError):
            controller.start([1, 2, 3], 0)
        assert controller.snapshot() == before

    def test_restart_after_completion(self) -> None:
        """A COMPLETED run can be replaced by a new one."""
        controller = _started()
        controller.advance(_INTERVAL * 3)
        assert controller.state is PlaybackState.COMPLETED
        snap = controller.start([10], 20)
        assert snap.status is PlaybackState.RUNNING
        assert snap.total_movement == 0
        assert snap.current_position == 20  # noqa: PLR2004


# -- Ticks -----------------------------------------------------------------------


class TestTick:
    """Each tick visits exactly one element of the sequence."""

    def test_one_tick(self) -> None:
        """After one interval the head is on the first stop."""
        controller = _started()
        fired = controller.advance(_INTERVAL)
        assert fired == 1
        snap = controller.snapshot()
        assert snap.step_index == 1
        assert snap.current_position == _TWO_STEPS[0]
        assert snap.step_movement == abs(_TWO_STEPS[0] - _HEAD)
        assert snap.total_movement == snap.step_movement

    def test_partial_interval_does_nothing(self) -> None:
        """Less than one interval fires no tick."""
        controller = _started()
        assert controller.advance(_INTERVAL - 1) == 0
        assert controller.step_index == 0

    def test_completion_needs_one_more_tick(self) -> None:
        """The run completes on the tick after the last stop."""
        controller = _started()
        controller.advance(_INTERVAL * 2)
        assert controller.state is PlaybackState.RUNNING
        assert controller.step_index == len(_TWO_STEPS)
        controller.advance(_INTERVAL)
        assert controller.state is PlaybackState.COMPLETED
        assert not controller.timer.active

    def test_no_ticks_after_completion(self) -> None:
        """A completed run ignores further time."""
        controller = _started()
        controller.advance(_INTERVAL * 10)
        snap = controller.snapshot()
        assert controller.advance(_INTERVAL * 10) == 0
        assert controller.snapshot() == snap

    def test_manual_tick(self) -> None:
        """tick() performs one step without waiting."""
        controller = _started()
        snap = controller.tick()
        assert snap.step_index == 1

    def test_manual_tick_requires_running(self) -> None:
        """tick() is only valid while RUNNING."""
        with pytest.raises(InvalidStateError):
            _controller().tick()

    def test_progress(self) -> None:
        """Progress is the visited fraction of the sequence."""
        controller = _started()
        controller.advance(_INTERVAL)
        half = 0.5
        assert controller.snapshot().progress == half


# -- Pause / resume -----------------------------------------------------------------


class TestPauseResume:
    """Pausing freezes progress; resuming continues it exactly."""

    def test_pause_stops_ticks(self) -> None:
        """No tick fires while PAUSED."""
        controller = _started()
        controller.advance(_INTERVAL)
        controller.pause()
        assert controller.advance(_INTERVAL * 5) == 0
        assert controller.step_index == 1
        assert not controller.timer.active

    def test_playback_scenario(self) -> None:
        """Tick, pause, resume, and finish with the planned total."""
        controller = _started()
        controller.advance(_INTERVAL)
        assert controller.step_index == 1
        assert controller.current_position == _TWO_STEPS[0]

        controller.pause()
        controller.resume()
        controller.advance(_INTERVAL * 2)

        assert controller.state is PlaybackState.COMPLETED
        assert controller.total_movement == _TWO_STEP_TOTAL
        assert controller.total_movement == controller.total_seek_time

    def test_resume_measures_from_last_stop(self) -> None:
        """The first tick after resume measures from the paused position."""
        controller = _started()
        controller.advance(_INTERVAL)
        controller.pause()
        controller.resume()
        controller.advance(_INTERVAL)
        assert controller.step_movement == abs(_TWO_STEPS[1] - _TWO_STEPS[0])

    def test_resume_starts_fresh_interval(self) -> None:
        """Time spent before a pause does not count after it."""
        controller = _started()
        controller.advance(_INTERVAL // 2)
        controller.pause()
        controller.resume()
        assert controller.advance(_INTERVAL // 2) == 0
        assert controller.advance(_INTERVAL // 2) == 1

    def test_pause_requires_running(self) -> None:
        """pause() from IDLE or PAUSED raises."""
        controller = _controller()
        with pytest.raises(InvalidStateError):
            controller.pause()
        controller.start(_TWO_STEPS, _HEAD)
        controller.pause()
        with pytest.raises(InvalidStateError):
            controller.pause()
        assert controller.state is PlaybackState.PAUSED

    def test_resume_requires_paused(self) -> None:
        """resume() from RUNNING or COMPLETED raises."""
        controller = _started()
        with pytest.raises(InvalidStateError):
            controller.resume()
        controller.advance(_INTERVAL * 3)
        with pytest.raises(InvalidStateError):
            controller.resume()
        assert controller.state is PlaybackState.COMPLETED


# -- Reset -------------------------------------------------------------------------


def _in_state(state: PlaybackState) -> PlaybackController:
    """Create a controller in *state*."""
    controller = _controller()
    if state is PlaybackState.IDLE:
        return controller
    controller.start(_TWO_STEPS, _HEAD)
    controller.advance(_INTERVAL)
    if state is PlaybackState.PAUSED:
        controller.pause()
    elif state is PlaybackState.COMPLETED:
        controller.advance(_INTERVAL * 2)
    return controller


class TestReset:
    """reset() returns to IDLE defaults from any state."""

    @pytest.mark.parametrize("state", list(PlaybackState))
    def test_reset_from_any_state(self, state: PlaybackState) -> None:
        """All run fields are cleared and the timer released."""
        controller = _in_state(state)
        assert controller.state is state
        snap = controller.reset()
        assert snap.status is PlaybackState.IDLE
        assert snap.step_index == 0
        assert snap.total_movement == 0
        assert snap.step_movement == 0
        assert snap.sequence == ()
        assert snap.total_seek_time == 0
        assert not controller.timer.active
        assert controller.advance(_INTERVAL * 5) == 0

    def test_reset_returns_head_to_start(self) -> None:
        """The head goes back to the track the run started on."""
        controller = _in_state(PlaybackState.PAUSED)
        assert controller.reset().current_position == _HEAD

    def test_reset_to_given_position(self) -> None:
        """An explicit position parks the head there."""
        controller = _in_state(PlaybackState.RUNNING)
        target = 120
        assert controller.reset(position=target).current_position == target


# -- Speed ------------------------------------------------------------------------


class TestChangeSpeed:
    """change_speed() affects only future ticks."""

    def test_progress_kept(self) -> None:
        """Changing speed mid-run keeps the step index and totals."""
        controller = _started()
        controller.advance(_INTERVAL)
        before = controller.snapshot()
        controller.change_speed(_INTERVAL * 5)
        assert controller.snapshot() == before
        assert controller.state is PlaybackState.RUNNING

    def test_new_cadence(self) -> None:
        """The next tick waits for the new interval."""
        controller = _started()
        controller.advance(_INTERVAL)
        slower = _INTERVAL * 5
        controller.change_speed(slower)
        assert controller.advance(slower - 1) == 0
        assert controller.advance(1) == 1

    def test_invalid_speed(self) -> None:
        """A non-positive interval is rejected."""
        with pytest.raises(ValueError, match="positive"):
            _controller().change_speed(0)

    def test_default_interval(self) -> None:
        """A controller without a timer uses the default interval."""
        assert PlaybackController().tick_interval_ms == DEFAULT_TICK_INTERVAL_MS


# -- Teardown and listeners ---------------------------------------------------------


class TestLifecycle:
    """close() and the context manager release the timer."""

    def test_close_cancels_timer(self) -> None:
        """No tick fires after close()."""
        controller = _started()
        controller.close()
        assert not controller.timer.active
        assert controller.advance(_INTERVAL * 5) == 0

    def test_context_manager(self) -> None:
        """Leaving the with-block releases the timer."""
        with _controller() as controller:
            controller.start(_TWO_STEPS, _HEAD)
            assert controller.timer.active
        assert not controller.timer.active


class TestListeners:
    """Listeners see every tick and state change."""

    def test_receives_snapshots(self) -> None:
        """start, two ticks and completion each notify once."""
        seen: list[PlaybackSnapshot] = []
        controller = _controller()
        controller.subscribe(seen.append)
        controller.start(_TWO_STEPS, _HEAD)
        controller.advance(_INTERVAL * 3)
        statuses = [s.status for s in seen]
        assert statuses == [
            PlaybackState.RUNNING,
            PlaybackState.RUNNING,
            PlaybackState.RUNNING,
            PlaybackState.COMPLETED,
        ]
        assert [s.current_position for s in seen[1:3]] == _TWO_STEPS

    def test_unsubscribe(self) -> None:
        """An unsubscribed listener hears nothing more."""
        seen: list[PlaybackSnapshot] = []
        controller = _controller()
        unsubscribe = controller.subscribe(seen.append)
        unsubscribe()
        controller.start(_TWO_STEPS, _HEAD)
        assert seen == []


class TestLogging:
    """Transitions and rejections are logged."""

    def test_transitions_logged(self) -> None:
        """Start and completion appear at INFO, ticks at DEBUG."""
        logger = Logger()
        controller = _controller(logger)
        controller.start(_TWO_STEPS, _HEAD)
        controller.advance(_INTERVAL * 3)
        info = logger.filter(min_level=LogLevel.INFO, source="playback")
        assert "started" in info[0].message
        assert "completed" in info[-1].message
        debug = [e for e in logger.entries if e.level is LogLevel.DEBUG]
        assert len(debug) == len(_TWO_STEPS)

    def test_rejection_logged(self) -> None:
        """An illegal transition is recorded as a warning."""
        logger = Logger()
        controller = _controller(logger)
        with pytest.raises(InvalidStateError):
            controller.resume()
        warnings = logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings) == 1
        assert "resume" in warnings[0].message


# -- Planner and controller together -----------------------------------------------


class TestMovementMatchesPlan:
    """Completed runs always add up to the planned seek time."""

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    @pytest.mark.parametrize("direction", list(Direction))
    def test_uninterrupted(self, algorithm: Algorithm, direction: Direction) -> None:
        """Playing straight through matches the plan."""
        plan = compute_sequence(_HEAD, _MAX_TRACK, direction, _TEXTBOOK_REQUESTS, algorithm)
        controller = _controller()
        controller.start(plan.sequence, plan.initial_position)
        controller.advance(_INTERVAL * (len(plan.sequence) + 1))
        assert controller.state is PlaybackState.COMPLETED
        assert controller.total_movement == plan.total_seek_time

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    @pytest.mark.parametrize("direction", list(Direction))
    def test_pause_every_step(self, algorithm: Algorithm, direction: Direction) -> None:
        """Pausing and resuming after every tick still matches the plan."""
        plan = compute_sequence(_HEAD, _MAX_TRACK, direction, _TEXTBOOK_REQUESTS, algorithm)
        controller = _controller()
        controller.start(plan.sequence, plan.initial_position)
        while controller.state is not PlaybackState.COMPLETED:
            controller.advance(_INTERVAL)
            if controller.state is PlaybackState.RUNNING:
                controller.pause()
                controller.resume()
        assert controller.total_movement == plan.total_seek_time
