"""Simulator — one interactive disk scheduling session.

The simulator is what a user interface holds on to.  It gathers the
session parameters (algorithm, head position, track bound, direction),
owns the request queue, asks the planner for a sequence when a run
starts, and hands that sequence to its playback controller.

Changing any planning parameter invalidates the current run: the
controller is reset so no stale sequence keeps ticking against new
inputs.  ``reset()`` goes further and restores the configured defaults
and an empty queue, the way pressing a "Reset" button would.
"""

import random

from disk_sim.config import ConfigError, SimulationConfig
from disk_sim.logging import Logger, LogLevel
from disk_sim.planner import Algorithm, Direction, SchedulePlan, compute_sequence
from disk_sim.playback import (
    EmptySequenceError,
    InvalidStateError,
    PlaybackController,
    PlaybackSnapshot,
    PlaybackState,
)
from disk_sim.request_queue import RequestError, RequestQueue
from disk_sim.timer import IntervalTimer


class Simulator:
    """Parameters, request queue and playback for one session."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        *,
        logger: Logger | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Create an idle session.

        Args:
            config: Session defaults; ``SimulationConfig()`` if omitted.
            logger: Shared event log; a fresh one is created if omitted.
            rng: Random source for request batches.

        """
        self._config = (config or SimulationConfig()).validate()
        self._logger = logger if logger is not None else Logger()
        self._rng = rng if rng is not None else random.Random()
        self._algorithm = self._config.algorithm
        self._direction = self._config.direction
        self._initial_position = self._config.initial_position
        self._requests = RequestQueue(max_track=self._config.max_track)
        self._controller = PlaybackController(
            timer=IntervalTimer(interval_ms=self._config.tick_interval_ms),
            logger=self._logger,
        )
        self._controller.reset(position=self._initial_position)
        self._plan: SchedulePlan | None = None

    # -- Parameters ------------------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        """Return the session defaults."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the shared event log."""
        return self._logger

    @property
    def controller(self) -> PlaybackController:
        """Return the playback controller."""
        return self._controller

    @property
    def algorithm(self) -> Algorithm:
        """Return the selected algorithm."""
        return self._algorithm

    @algorithm.setter
    def algorithm(self, value: Algorithm) -> None:
        """Select an algorithm.  Any run in progress is reset."""
        self._algorithm = Algorithm(value)
        self._invalidate()

    @property
    def direction(self) -> Direction:
        """Return the initial sweep direction."""
        return self._direction

    @direction.setter
    def direction(self, value: Direction) -> None:
        """Set the sweep direction.  Any run in progress is reset."""
        self._direction = Direction(value)
        self._invalidate()

    @property
    def initial_position(self) -> int:
        """Return the head's starting track."""
        return self._initial_position

    @initial_position.setter
    def initial_position(self, value: int) -> None:
        """Move the head's starting track.  Any run in progress is reset.

        Raises:
            ConfigError: If *value* is outside ``[0, max_track]``.

        """
        if not 0 <= value <= self.max_track:
            msg = f"initial position {value} is outside 0-{self.max_track}"
            raise ConfigError(msg)
        self._initial_position = value
        self._invalidate()

    @property
    def max_track(self) -> int:
        """Return the highest addressable track."""
        return self._requests.max_track

    @max_track.setter
    def max_track(self, value: int) -> None:
        """Change the track bound.  Requests beyond it are dropped.

        Raises:
            ConfigError: If *value* is below 1 or below the head position.

        """
        if value < 1 or value < self._initial_position:
            msg = (
                f"max track {value} must be at least 1"
                f" and cover the head at {self._initial_position}"
            )
            raise ConfigError(msg)
        self._requests.max_track = value
        self._invalidate()

    @property
    def requests(self) -> list[int]:
        """Return the queued tracks in insertion order."""
        return self._requests.pending

    @property
    def plan(self) -> SchedulePlan | None:
        """Return the plan of the current run, if one was started."""
        return self._plan

    @property
    def state(self) -> PlaybackState:
        """Return the playback state."""
        return self._controller.state

    # -- Request queue ---------------------------------------------------------

    def add_request(self, track: int | str) -> int:
        """Queue a request.  Rejections are logged and re-raised.

        Raises:
            RequestError: If the track is invalid or already queued.

        """
        try:
            value = self._requests.add(track)
        except RequestError as e:
            self._logger.log(LogLevel.WARNING, f"rejected request: {e}", source="requests")
            raise
        self._invalidate()
        return value

    def remove_request(self, index: int) -> int:
        """Remove the request at queue position *index*."""
        track = self._requests.remove_at(index)
        self._invalidate()
        return track

    def clear_requests(self) -> None:
        """Empty the request queue."""
        self._requests.clear()
        self._invalidate()

    def randomize_requests(self, count: int | None = None) -> list[int]:
        """Replace the queue with a random batch avoiding the head's track."""
        batch = self._requests.randomize(
            self._config.random_batch_size if count is None else count,
            exclude=self._initial_position,
            rng=self._rng,
        )
        self._logger.log(LogLevel.INFO, f"random batch: {batch}", source="requests")
        self._invalidate()
        return batch

    # -- Planning and playback -------------------------------------------------

    def preview(self) -> SchedulePlan:
        """Compute the plan for the current parameters without playing it."""
        return compute_sequence(
            self._initial_position,
            self.max_track,
            self._direction,
            self._requests.pending,
            self._algorithm,
        )

    def start(self, tick_interval_ms: int | None = None) -> PlaybackSnapshot:
        """Plan the current queue and start playing it.

        Raises:
            EmptySequenceError: If no requests are queued.
            InvalidStateError: If a run is already RUNNING or PAUSED.

        """
        if self.state in {PlaybackState.RUNNING, PlaybackState.PAUSED}:
            self._logger.log(
                LogLevel.WARNING, f"start refused while {self.state}", source="simulator"
            )
            msg = f"Cannot start: playback is {self.state}"
            raise InvalidStateError(msg)
        if not self._requests:
            self._logger.log(LogLevel.WARNING, "start refused: no requests", source="simulator")
            msg = "Cannot start: no requests queued"
            raise EmptySequenceError(msg)
        plan = compute_sequence(
            self._initial_position,
            self.max_track,
            self._direction,
            self._requests.pending,
            self._algorithm,
            logger=self._logger,
        )
        snapshot = self._controller.start(plan.sequence, plan.initial_position, tick_interval_ms)
        self._plan = plan
        return snapshot

    def pause(self) -> PlaybackSnapshot:
        """Pause the running simulation."""
        return self._controller.pause()

    def resume(self) -> PlaybackSnapshot:
        """Resume a paused simulation."""
        return self._controller.resume()

    def stop(self) -> PlaybackSnapshot:
        """Abandon the current run but keep parameters and requests."""
        self._plan = None
        return self._controller.reset(position=self._initial_position)

    def reset(self) -> PlaybackSnapshot:
        """Abandon the run, empty the queue and restore the defaults."""
        self._requests.clear()
        self._initial_position = self._config.initial_position
        self._direction = self._config.direction
        return self.stop()

    def advance(self, elapsed_ms: int) -> int:
        """Let playback time pass; return the number of ticks."""
        return self._controller.advance(elapsed_ms)

    def step(self) -> PlaybackSnapshot:
        """Perform one tick immediately."""
        return self._controller.tick()

    def change_speed(self, tick_interval_ms: int) -> None:
        """Set the playback speed in milliseconds per step."""
        self._controller.change_speed(tick_interval_ms)

    def snapshot(self) -> PlaybackSnapshot:
        """Return the current playback snapshot."""
        return self._controller.snapshot()

    def close(self) -> None:
        """Release the playback timer."""
        self._controller.close()

    def _invalidate(self) -> None:
        """Drop any run planned from parameters that just changed."""
        self._plan = None
        self._controller.reset(position=self._initial_position)
