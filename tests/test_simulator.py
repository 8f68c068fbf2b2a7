"""Tests for the simulator session — queue, planning and playback together."""

import random

import pytest

from disk_sim.config import ConfigError, SimulationConfig
from disk_sim.logging import LogLevel
from disk_sim.planner import Algorithm, Direction
from disk_sim.playback import EmptySequenceError, InvalidStateError, PlaybackState
from disk_sim.request_queue import RequestError
from disk_sim.simulator import Simulator

_HEAD = 53
_REQUESTS = [98, 183, 37, 122, 14, 124, 65, 67]
_FCFS_TOTAL = 640
_SSTF_TOTAL = 236
_INTERVAL = 100


def _loaded(**changes: object) -> Simulator:
    """Create a simulator at head 53 with the classic request queue."""
    config = SimulationConfig(initial_position=_HEAD, tick_interval_ms=_INTERVAL)
    sim = Simulator(config.replace(**changes), rng=random.Random(0))
    for track in _REQUESTS:
        sim.add_request(track)
    return sim


class TestInitialState:
    """A fresh session is idle with the head on its configured track."""

    def test_idle_at_head(self) -> None:
        """The snapshot shows the configured head and nothing planned."""
        sim = Simulator(SimulationConfig(initial_position=_HEAD))
        snap = sim.snapshot()
        assert sim.state is PlaybackState.IDLE
        assert snap.current_position == _HEAD
        assert snap.sequence == ()
        assert sim.plan is None

    def test_config_drives_defaults(self) -> None:
        """Algorithm, direction and speed come from the config."""
        config = SimulationConfig(
            algorithm=Algorithm.LOOK,
            direction=Direction.LEFT,
            tick_interval_ms=_INTERVAL,
        )
        sim = Simulator(config)
        assert sim.algorithm is Algorithm.LOOK
        assert sim.direction is Direction.LEFT
        assert sim.controller.tick_interval_ms == _INTERVAL


class TestRequests:
    """Queue operations go through the simulator."""

    def test_add_and_list(self) -> None:
        """Requests are listed in insertion order."""
        assert _loaded().requests == _REQUESTS

    def test_rejection_logged(self) -> None:
        """A rejected request is logged as a warning and re-raised."""
        sim = _loaded()
        with pytest.raises(RequestError):
            sim.add_request(98)
        warnings = sim.logger.filter(min_level=LogLevel.WARNING, source="requests")
        assert len(warnings) == 1
        assert "already queued" in warnings[0].message

    def test_remove_by_position(self) -> None:
        """remove_request() drops the request at a queue index."""
        sim = _loaded()
        assert sim.remove_request(1) == _REQUESTS[1]
        assert _REQUESTS[1] not in sim.requests

    def test_randomize_avoids_head(self) -> None:
        """A random batch has the configured size and skips the head track."""
        sim = Simulator(SimulationConfig(random_batch_size=5), rng=random.Random(2))
        batch = sim.randomize_requests()
        assert len(batch) == 5  # noqa: PLR2004
        assert sim.initial_position not in batch
        assert sim.requests == batch


class TestParameters:
    """Parameter changes are validated and invalidate any run."""

    def test_head_out_of_range(self) -> None:
        """The head must sit on the disk."""
        sim = Simulator()
        with pytest.raises(ConfigError):
            sim.initial_position = sim.max_track + 1

    def test_max_track_below_head(self) -> None:
        """The disk cannot shrink underneath the head."""
        sim = _loaded()
        with pytest.raises(ConfigError):
            sim.max_track = _HEAD - 1

    def test_shrinking_drops_requests(self) -> None:
        """Requests beyond the new bound are removed."""
        sim = _loaded()
        sim.max_track = 100
        assert sim.requests == [98, 37, 14, 65, 67]

    def test_change_while_running_resets(self) -> None:
        """Selecting a new algorithm mid-run returns to IDLE."""
        sim = _loaded()
        sim.start()
        sim.advance(_INTERVAL)
        sim.algorithm = Algorithm.SSTF
        assert sim.state is PlaybackState.IDLE
        assert sim.plan is None
        assert sim.snapshot().current_position == _HEAD
        assert not sim.controller.timer.active

    def test_head_change_moves_idle_head(self) -> None:
        """The idle head follows the new starting track."""
        sim = Simulator()
        sim.initial_position = 120
        assert sim.snapshot().current_position == 120  # noqa: PLR2004


class TestPlayback:
    """start() plans the queue and plays it."""

    def test_preview_does_not_start(self) -> None:
        """preview() returns the plan but leaves playback idle."""
        sim = _loaded(algorithm=Algorithm.SSTF)
        plan = sim.preview()
        assert plan.total_seek_time == _SSTF_TOTAL
        assert sim.state is PlaybackState.IDLE

    def test_start_empty_refused(self) -> None:
        """An empty queue cannot be played and the refusal is logged."""
        sim = Simulator()
        with pytest.raises(EmptySequenceError):
            sim.start()
        assert sim.logger.filter(min_level=LogLevel.WARNING, source="simulator")
        assert sim.state is PlaybackState.IDLE

    def test_full_run(self) -> None:
        """Playing to the end moves exactly the planned distance."""
        sim = _loaded()
        sim.start()
        assert sim.plan is not None
        assert sim.plan.total_seek_time == _FCFS_TOTAL
        sim.advance(_INTERVAL * (len(_REQUESTS) + 1))
        snap = sim.snapshot()
        assert snap.status is PlaybackState.COMPLETED
        assert snap.total_movement == _FCFS_TOTAL
        assert snap.current_position == _REQUESTS[-1]

    def test_start_twice_rejected(self) -> None:
        """A running session cannot be started again."""
        sim = _loaded()
        sim.start()
        with pytest.raises(InvalidStateError):
            sim.start()

    def test_refused_start_plans_nothing(self) -> None:
        """A rejected second start logs a warning but no new plan."""
        sim = _loaded()
        sim.start()
        sim.pause()
        plans_before = len(sim.logger.filter(source="planner"))
        with pytest.raises(InvalidStateError, match="paused"):
            sim.start()
        assert len(sim.logger.filter(source="planner")) == plans_before
        assert sim.logger.filter(min_level=LogLevel.WARNING, source="simulator")
        assert sim.state is PlaybackState.PAUSED

    def test_step(self) -> None:
        """step() services one request immediately."""
        sim = _loaded()
        sim.start()
        snap = sim.step()
        assert snap.step_index == 1
        assert snap.current_position == _REQUESTS[0]

    def test_pause_resume(self) -> None:
        """Pausing stops time; resuming continues from the same track."""
        sim = _loaded()
        sim.start()
        sim.advance(_INTERVAL * 2)
        paused = sim.pause()
        sim.advance(_INTERVAL * 5)
        assert sim.snapshot() == paused
        sim.resume()
        sim.advance(_INTERVAL * (len(_REQUESTS) + 1))
        assert sim.snapshot().total_movement == _FCFS_TOTAL

    def test_start_with_speed(self) -> None:
        """start() can set the tick interval."""
        sim = _loaded()
        fast = 10
        sim.start(fast)
        assert sim.controller.tick_interval_ms == fast
        assert sim.advance(fast) == 1

    def test_restart_after_completion(self) -> None:
        """A completed run can be started again."""
        sim = _loaded()
        sim.start()
        sim.advance(_INTERVAL * (len(_REQUESTS) + 1))
        sim.start()
        assert sim.state is PlaybackState.RUNNING
        assert sim.snapshot().step_index == 0


class TestStopReset:
    """stop() keeps the setup; reset() restores defaults."""

    def test_stop_keeps_requests(self) -> None:
        """stop() returns to IDLE with the queue intact."""
        sim = _loaded()
        sim.start()
        sim.advance(_INTERVAL * 3)
        sim.stop()
        assert sim.state is PlaybackState.IDLE
        assert sim.requests == _REQUESTS
        assert sim.snapshot().current_position == _HEAD

    def test_reset_restores_defaults(self) -> None:
        """reset() empties the queue and restores head and direction."""
        sim = _loaded()
        sim.initial_position = 10
        sim.direction = Direction.LEFT
        sim.start()
        sim.reset()
        assert sim.requests == []
        assert sim.initial_position == _HEAD
        assert sim.direction is Direction.RIGHT
        assert sim.state is PlaybackState.IDLE
        assert not sim.controller.timer.active

    def test_close_releases_timer(self) -> None:
        """close() cancels the playback timer."""
        sim = _loaded()
        sim.start()
        sim.close()
        assert not sim.controller.timer.active
