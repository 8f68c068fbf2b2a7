"""Interval timer — the heartbeat that drives playback.

A playback run advances one step per **tick**.  Ticks come from a
repeating timer, like a programmable interval timer chip that fires an
interrupt every N milliseconds.  The timer here does not read the wall
clock itself: time is fed in with ``advance(elapsed_ms)``.  That keeps
playback deterministic (tests advance time by hand) while
``run_realtime`` sleeps between ticks for interactive use.

Lifecycle:
    - ``arm(callback)`` acquires the timer.  At most one arming is
      live; arming an armed timer is an error, never a silent replace.
    - ``cancel()`` releases it.  It is idempotent and takes effect
      immediately, even from inside the callback.
    - A cancelled timer never fires, and it forgets any partial interval,
      so re-arming always starts a fresh interval.
"""

import time
from collections.abc import Callable

DEFAULT_TICK_INTERVAL_MS = 1000


class TimerError(RuntimeError):
    """Raise when the timer is armed twice."""


class IntervalTimer:
    """A repeating millisecond timer advanced by explicit elapsed time."""

    def __init__(self, *, interval_ms: int = DEFAULT_TICK_INTERVAL_MS) -> None:
        """Create a disarmed timer.

        Args:
            interval_ms: Milliseconds between fires (must be > 0).

        Raises:
            ValueError: If the interval is not positive.

        """
        self._interval_ms = _check_interval(interval_ms)
        self._callback: Callable[[], None] | None = None
        self._elapsed_ms = 0
        self._fires = 0

    @property
    def interval_ms(self) -> int:
        """Return the interval between fires."""
        return self._interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        """Change the interval.  Progress into the current interval is kept.

        Raises:
            ValueError: If the interval is not positive.

        """
        self._interval_ms = _check_interval(value)

    @property
    def active(self) -> bool:
        """Return True while the timer is armed."""
        return self._callback is not None

    @property
    def elapsed_ms(self) -> int:
        """Return milliseconds accumulated since the last fire."""
        return self._elapsed_ms

    @property
    def remaining_ms(self) -> int:
        """Return milliseconds until the next fire (0 if already due)."""
        return max(self._interval_ms - self._elapsed_ms, 0)

    @property
    def fires(self) -> int:
        """Return the total number of times the timer has fired."""
        return self._fires

    def arm(self, callback: Callable[[], None]) -> None:
        """Start firing *callback* every interval.

        Raises:
            TimerError: If the timer is already armed.

        """
        if self._callback is not None:
            msg = "Timer is already armed"
            raise TimerError(msg)
        self._callback = callback
        self._elapsed_ms = 0

    def cancel(self) -> None:
        """Stop firing.  Safe to call when already disarmed."""
        self._callback = None
        self._elapsed_ms = 0

    def advance(self, elapsed_ms: int) -> int:
        """Let *elapsed_ms* milliseconds pass.

        The callback fires once per whole interval that completes.  If
        the callback cancels the timer, the remaining time is dropped.

        Args:
            elapsed_ms: Milliseconds that have passed (must be >= 0).

        Returns:
            How many times the callback fired.

        Raises:
            ValueError: If *elapsed_ms* is negative.

        """
        if elapsed_ms < 0:
            msg = f"Elapsed time must not be negative, got {elapsed_ms}"
            raise ValueError(msg)
        if self._callback is None:
            return 0

        self._elapsed_ms += elapsed_ms
        fired = 0
        while self._callback is not None and self._elapsed_ms >= self._interval_ms:
            self._elapsed_ms -= self._interval_ms
            self._fires += 1
            fired += 1
            self._callback()
        return fired


def run_realtime(
    timer: IntervalTimer,
    *,
    sleep: Callable[[float], None] = time.sleep,
    on_fire: Callable[[], None] | None = None,
) -> int:
    """Drive *timer* in real time until it is cancelled.

    Sleeps for the time left in the current interval, then advances
    the timer by exactly that amount.

    Args:
        timer: The timer to drive.
        sleep: Sleep function taking seconds (injectable for tests).
        on_fire: Called after every advance that fired the timer.

    Returns:
        The number of fires while driving.

    """
    total = 0
    while timer.active:
        wait_ms = timer.remaining_ms
        sleep(wait_ms / 1000)
        fired = timer.advance(wait_ms)
        total += fired
        if fired and on_fire is not None:
            on_fire()
    return total


def _check_interval(value: int) -> int:
    """Return *value* if it is a positive interval."""
    if value <= 0:
        msg = f"Interval must be positive, got {value}"
        raise ValueError(msg)
    return value
