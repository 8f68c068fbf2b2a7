"""Playback controller — step through a planned sequence one tick at a time.

The planner answers *where* the head goes; the controller replays that
answer over time so a user can watch the arm move.  It owns one
simulation run: the sequence, the step index, the head position and
the running movement totals, plus the single interval timer that
drives it.

State machine::

    IDLE ──start──▶ RUNNING ──pause──▶ PAUSED
      ▲               │  ▲               │
      │               │  └────resume─────┘
      │            (ticks)
      │               ▼
      └──start─── COMPLETED

    reset: any state ──▶ IDLE

Movement is always measured from ``last_position``, the track the head
stopped at on the previous tick.  Pausing keeps it, so a paused and
resumed run adds up exactly like an uninterrupted one and, once
COMPLETED, ``total_movement`` equals the planner's ``total_seek_time``.

The timer is released on every exit path: pause, reset, completion and
``close()`` (the controller is also a context manager).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

from disk_sim.logging import Logger, LogLevel
from disk_sim.planner import seek_time
from disk_sim.timer import DEFAULT_TICK_INTERVAL_MS, IntervalTimer

if TYPE_CHECKING:
    from types import TracebackType

Listener: TypeAlias = Callable[["PlaybackSnapshot"], None]


class PlaybackState(StrEnum):
    """Lifecycle phases of a playback run."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class InvalidStateError(RuntimeError):
    """Raise when a transition is not allowed from the current state."""


class EmptySequenceError(ValueError):
    """Raise when playback is started with nothing to play."""


@dataclass(frozen=True)
class PlaybackSnapshot:
    """An immutable view of the run, handed to listeners and the UI.

    Attributes:
        status: Current lifecycle state.
        step_index: Number of sequence elements already visited.
        current_position: Track the head is on now.
        last_position: Track movement is measured from on the next tick.
        step_movement: Distance covered by the most recent tick.
        total_movement: Distance covered so far.
        sequence: The full planned sequence.
        total_seek_time: Planned total distance for the whole sequence.

    """

    status: PlaybackState
    step_index: int
    current_position: int
    last_position: int
    step_movement: int
    total_movement: int
    sequence: tuple[int, ...]
    total_seek_time: int

    @property
    def progress(self) -> float:
        """Return the fraction of the sequence visited (0.0 to 1.0)."""
        if not self.sequence:
            return 0.0
        return self.step_index / len(self.sequence)

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-friendly dict of the snapshot."""
        return {
            "status": str(self.status),
            "step_index": self.step_index,
            "current_position": self.current_position,
            "last_position": self.last_position,
            "step_movement": self.step_movement,
            "total_movement": self.total_movement,
            "sequence": list(self.sequence),
            "total_seek_time": self.total_seek_time,
        }


class PlaybackController:
    """Timed, pausable stepper over a precomputed head-movement sequence."""

    def __init__(
        self,
        *,
        timer: IntervalTimer | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create an idle controller.

        Args:
            timer: The timer to drive playback.  A fresh one at the
                default interval is created if omitted.
            logger: Optional log to record transitions in.

        """
        self._timer = timer if timer is not None else IntervalTimer()
        self._logger = logger
        self._listeners: list[Listener] = []
        self._state = PlaybackState.IDLE
        self._clear_run(position=0)

    def _clear_run(self, *, position: int) -> None:
        """Reset every run field to its idle default."""
        self._origin = position
        self._sequence: tuple[int, ...] = ()
        self._total_seek_time = 0
        self._step_index = 0
        self._current_position = position
        self._last_position = position
        self._step_movement = 0
        self._total_movement = 0

    # -- Read-only views -------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def timer(self) -> IntervalTimer:
        """Return the timer driving this controller."""
        return self._timer

    @property
    def tick_interval_ms(self) -> int:
        """Return the current tick interval."""
        return self._timer.interval_ms

    @property
    def sequence(self) -> tuple[int, ...]:
        """Return the sequence being played."""
        return self._sequence

    @property
    def step_index(self) -> int:
        """Return the number of elements already visited."""
        return self._step_index

    @property
    def current_position(self) -> int:
        """Return the track the head is on."""
        return self._current_position

    @property
    def step_movement(self) -> int:
        """Return the distance covered by the last tick."""
        return self._step_movement

    @property
    def total_movement(self) -> int:
        """Return the distance covered so far."""
        return self._total_movement

    @property
    def total_seek_time(self) -> int:
        """Return the planned distance for the whole sequence."""
        return self._total_seek_time

    def snapshot(self) -> PlaybackSnapshot:
        """Return an immutable view of the current run."""
        return PlaybackSnapshot(
            status=self._state,
            step_index=self._step_index,
            current_position=self._current_position,
            last_position=self._last_position,
            step_movement=self._step_movement,
            total_movement=self._total_movement,
            sequence=self._sequence,
            total_seek_time=self._total_seek_time,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for every tick and state change.

        Returns:
            A function that unsubscribes the listener.

        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- Transitions -----------------------------------------------------------

    def start(
        self,
        sequence: Sequence[int],
        initial_position: int,
        tick_interval_ms: int | None = None,
    ) -> PlaybackSnapshot:
        """Begin playing *sequence* from *initial_position*.

        Args:
            sequence: Tracks to visit, as computed by the planner.
            initial_position: Track the head starts on.
            tick_interval_ms: Optional new tick interval.

        Returns:
            The snapshot right after starting.

        Raises:
            InvalidStateError: If a run is already RUNNING or PAUSED.
            EmptySequenceError: If *sequence* is empty.

        """
        if self._state not in {PlaybackState.IDLE, PlaybackState.COMPLETED}:
            self._reject("start")
        if not sequence:
            msg = "Cannot start playback: the sequence is empty"
            raise EmptySequenceError(msg)
        if tick_interval_ms is not None:
            self._timer.interval_ms = tick_interval_ms

        self._clear_run(position=initial_position)
        self._sequence = tuple(sequence)
        self._total_seek_time = seek_time(self._sequence, head=initial_position)
        self._timer.cancel()
        self._timer.arm(self._on_tick)
        self._state = PlaybackState.RUNNING
        self._log(
            LogLevel.INFO,
            f"started {len(self._sequence)} steps from {initial_position} "
            f"every {self._timer.interval_ms}ms",
        )
        return self._notify()

    def pause(self) -> PlaybackSnapshot:
        """Stop the timer and keep all progress.

        Raises:
            InvalidStateError: If the run is not RUNNING.

        """
        if self._state is not PlaybackState.RUNNING:
            self._reject("pause")
        self._timer.cancel()
        self._state = PlaybackState.PAUSED
        self._log(LogLevel.INFO, f"paused at track {self._current_position}")
        return self._notify()

    def resume(self) -> PlaybackSnapshot:
        """Restart the timer from where the run was paused.

        Raises:
            InvalidStateError: If the run is not PAUSED.

        """
        if self._state is not PlaybackState.PAUSED:
            self._reject("resume")
        self._timer.arm(self._on_tick)
        self._state = PlaybackState.RUNNING
        self._log(LogLevel.INFO, f"resumed from track {self._last_position}")
        return self._notify()

    def reset(self, *, position: int | None = None) -> PlaybackSnapshot:
        """Cancel any timer and return to IDLE with cleared fields.

        Valid from every state.

        Args:
            position: Track to park the head on.  Defaults to the track
                the last run started from.

        """
        self._timer.cancel()
        previous = self._state
        self._clear_run(position=self._origin if position is None else position)
        self._state = PlaybackState.IDLE
        if previous is not PlaybackState.IDLE:
            self._log(LogLevel.INFO, f"reset from {previous}")
        return self._notify()

    def change_speed(self, tick_interval_ms: int) -> None:
        """Change the tick interval without touching progress.

        Only future ticks are affected.

        Raises:
            ValueError: If the interval is not positive.

        """
        self._timer.interval_ms = tick_interval_ms
        self._log(LogLevel.INFO, f"tick interval set to {tick_interval_ms}ms")

    def advance(self, elapsed_ms: int) -> int:
        """Let *elapsed_ms* milliseconds of playback time pass.

        Returns:
            The number of ticks that fired.

        """
        return self._timer.advance(elapsed_ms)

    def tick(self) -> PlaybackSnapshot:
        """Perform one tick immediately, as if the timer had fired.

        Raises:
            InvalidStateError: If the run is not RUNNING.

        """
        if self._state is not PlaybackState.RUNNING:
            self._reject("tick")
        self._on_tick()
        return self.snapshot()

    def close(self) -> None:
        """Release the timer (teardown).  Progress is left untouched."""
        self._timer.cancel()

    def __enter__(self) -> PlaybackController:
        """Return the controller itself."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Cancel the timer on the way out."""
        self.close()

    # -- Internals -------------------------------------------------------------

    def _on_tick(self) -> None:
        """Advance one sequence element, or complete the run."""
        if self._state is not PlaybackState.RUNNING:
            return
        if self._step_index >= len(self._sequence):
            self._timer.cancel()
            self._state = PlaybackState.COMPLETED
            self._log(
                LogLevel.INFO,
                f"completed: total movement {self._total_movement}"
                f" (planned {self._total_seek_time})",
            )
            self._notify()
            return

        target = self._sequence[self._step_index]
        self._step_movement = abs(target - self._last_position)
        self._total_movement += self._step_movement
        self._current_position = target
        self._last_position = target
        self._step_index += 1
        self._log(LogLevel.DEBUG, f"moved to {target} (+{self._step_movement})")
        self._notify()

    def _reject(self, action: str) -> None:
        """Log and raise for an illegal transition."""
        self._log(LogLevel.WARNING, f"rejected {action} while {self._state}")
        msg = f"Cannot {action}: playback is {self._state}"
        raise InvalidStateError(msg)

    def _notify(self) -> PlaybackSnapshot:
        """Send the current snapshot to every listener and return it."""
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
        return snap

    def _log(self, level: LogLevel, message: str) -> None:
        """Record an event if a logger is attached."""
        if self._logger is not None:
            self._logger.log(level, message, source="playback", step=self._step_index)
