"""Sequence planner — the order in which the disk head visits requests.

When several I/O requests are pending, the disk arm must move between
tracks (cylinders) to service them.  The dominant cost is **seek
time**: how far the arm travels.  A disk scheduling algorithm decides
the *order* in which requests are serviced, and that order is all the
planner computes.  It is a pure function of its inputs: no clock, no
side effects, the same answer every time.

Think of a disk arm like an elevator in a building:
    - **FCFS** — stop at every floor in the order people pressed buttons.
    - **SSTF** — always go to the nearest requested floor (greedy).
    - **SCAN** — ride to the end of the shaft, then come back down.
    - **C-SCAN** — ride to the top, drop to the ground floor, ride up again.
    - **LOOK** — like SCAN, but turn around at the last waiting passenger.
    - **C-LOOK** — like C-SCAN, but only as far as the outermost request.

Boundary policy:
    SCAN and C-SCAN force the arm to the disk edge (``0`` or
    ``max_track``) on the *first* sweep only.  The reverse sweep stops
    at the last real request.  Some textbooks sweep fully to both ends;
    this simulator deliberately does not.  LOOK and C-LOOK never visit
    an edge that was not requested.

All policies implement the ``DiskPolicy`` protocol (Strategy pattern),
and ``policy_for`` maps the closed ``Algorithm`` enum onto them.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from disk_sim.logging import Logger, LogLevel

DEFAULT_MAX_TRACK = 199


class Direction(StrEnum):
    """Initial sweep direction of the disk arm."""

    LEFT = "left"
    RIGHT = "right"


class Algorithm(StrEnum):
    """The six disk scheduling disciplines the simulator supports."""

    FCFS = "fcfs"
    SSTF = "sstf"
    SCAN = "scan"
    CSCAN = "cscan"
    LOOK = "look"
    CLOOK = "clook"


class DiskPolicy(Protocol):
    """Protocol for disk scheduling policies (Strategy pattern)."""

    def schedule(self, requests: Sequence[int], *, head: int) -> list[int]:
        """Return the order in which the head visits tracks.

        Args:
            requests: Track numbers to visit, in insertion order.
            head: Current position of the disk head.

        Returns:
            Every stop the head makes, in visiting order.

        """
        ...  # pragma: no cover


class FCFSPolicy:
    """First Come, First Served — service in arrival order.

    Fair (no starvation), but the arm zigzags across the disk and the
    total seek time is usually the worst of the six.
    """

    def schedule(self, requests: Sequence[int], *, head: int) -> list[int]:  # noqa: ARG002
        """Return requests in their original order."""
        return list(requests)


class SSTFPolicy:
    """Shortest Seek Time First — always go to the nearest request.

    Greedy: lowest immediate cost, but distant requests can starve
    while the arm hovers near a busy region.

    Tiebreaker: when two requests are equally close, the one that
    appears first in the remaining list wins.  ``min`` returns the
    first minimal element, which gives exactly that.
    """

    def schedule(self, requests: Sequence[int], *, head: int) -> list[int]:
        """Return requests ordered nearest-first from the moving head."""
        remaining = list(requests)
        order: list[int] = []
        current = head
        while remaining:
            nearest = min(remaining, key=lambda r: abs(r - current))
            order.append(nearest)
            remaining.remove(nearest)
            current = nearest
        return order


class SCANPolicy:
    """SCAN (Elevator algorithm) — sweep to the edge, then reverse.

    Moving right, every request at or above the head is served in
    ascending order and the arm continues to ``max_track`` (unless the
    last request already sits there).  It then reverses and serves the
    requests below the head in descending order.  Moving left mirrors
    this with ``0`` as the edge.

    Args:
        direction: Initial sweep direction.
        max_track: Highest track number on the disk.

    """

    def __init__(
        self,
        *,
        direction: Direction = Direction.RIGHT,
        max_track: int = DEFAULT_MAX_TRACK,
    ) -> None:
        """Create a SCAN policy with an initial direction."""
        self._direction = direction
        self._max_track = max_track

    @property
    def direction(self) -> Direction:
        """Return the initial sweep direction."""
        return self._direction

    def schedule(self, requests: Sequence[int], *, head: int) -> list[int]:
        """Return stops in SCAN order, including the forced edge."""
        if not requests:
            return []

        ordered = sorted(requests)
        if self._direction is Direction.RIGHT:
            sweep = [r for r in ordered if r >= head]
            if not sweep or sweep[-1] < self._max_track:
                sweep.append(self._max_track)
            back = [r for r in reversed(ordered) if r < head]
            return sweep + back

        sweep = [r for r in reversed(ordered) if r <= head]
        if not sweep or sweep[-1] > 0:
            sweep.append(0)
        back = [r for r in ordered if r > head]
        return sweep + back


class CSCANPolicy:
    """Circular SCAN — sweep to the edge, jump to the other edge, continue.

    Requests are only served while moving in the initial direction.
    After reaching the edge the arm jumps to the opposite edge (the jump
    counts as head movement) and keeps sweeping the same way.  Wait
    times are more uniform than SCAN because middle tracks are no
    longer passed twice per cycle.

    Args:
        direction: Sweep direction.
        max_track: Highest track number on the disk.

    """

    def __init__(
        self,
        *,
        direction: Direction = Direction.RIGHT,
        max_track: int = DEFAULT_MAX_TRACK,
    ) -> None:
        """Create a C-SCAN policy with sweep direction."""
        self._direction = direction
        self._max_track = max_track

    @property
    def direction(self) -> Direction:
        """Return the sweep direction."""
        return self._direction

    def schedule(self, requests: Sequence[int], *, head: int) -> list[int]:
        """Return stops in C-SCAN order, including edge and jump target."""
        if not requests:
            return []

        ordered = sorted(requests)
        if self._direction is Direction.RIGHT:
            sweep = [r for r in ordered if r >= head]
            if not sweep or sweep[-1] < self._max_track:
                sweep.append(self._max_track)
            sweep.append(0)
            wrapped = [r for r in ordered if r < head]
            return sweep + wrapped

        # Moving left the head's own track belongs to the wrapped pass.
        sweep = [r for r in reversed(ordered) if r < head]
        if not sweep or sweep[-1] > 0:
            sweep.append(0)
        sweep.append(self._max_track)
        wrapped = [r for r in reversed(ordered) if r >= head]
        return sweep + wrapped


class LOOKPolicy:
    """LOOK — SCAN that turns around at the last request.

    Moving right, requests strictly above the head are served first,
    then everything at or below it in descending order.  Moving left,
    requests strictly below the head come first, then everything at or
    above it in ascending order.  No edge is ever forced.

    Args:
        direction: Initial sweep direction.

    """

    def __init__(self, *, direction: Direction = Direction.RIGHT) -> None:
        """Create a LOOK policy with an initial direction."""
        self._direction = direction

    @property
    def direction(self) -> Direction:
        """Return the initial sweep direction."""
        return self._direction

    def schedule(self, requests: Sequence[int], *, head: int) -> list[int]:
        """Return requests in LOOK order."""
        ordered = sorted(requests)
        if self._direction is Direction.RIGHT:
            greater = [r for r in ordered if r > head]
            lesser = [r for r in reversed(ordered) if r <= head]
            return greater + lesser

        lesser = [r for r in reversed(ordered) if r < head]
        greater = [r for r in ordered if r >= head]
        return lesser + greater


class CLOOKPolicy:
    """Circular LOOK — C-SCAN that only travels as far as the requests.

    Moving right, requests strictly above the head are served in
    ascending order, then the arm jumps back to the lowest request and
    serves the rest ascending as well.  Moving left is the mirror image
    with both passes descending.

    Args:
        direction: Sweep direction.

    """

    def __init__(self, *, direction: Direction = Direction.RIGHT) -> None:
        """Create a C-LOOK policy with sweep direction."""
        self._direction = direction

    @property
    def direction(self) -> Direction:
        """Return the sweep direction."""
        return self._direction

    def schedule(self, requests: Sequence[int], *, head: int) -> list[int]:
        """Return requests in C-LOOK order."""
        ordered = sorted(requests)
        if self._direction is Direction.RIGHT:
            greater = [r for r in ordered if r > head]
            lesser = [r for r in ordered if r <= head]
            return greater + lesser

        lesser = [r for r in reversed(ordered) if r < head]
        greater = [r for r in reversed(ordered) if r >= head]
        return lesser + greater


def policy_for(
    algorithm: Algorithm,
    *,
    direction: Direction = Direction.RIGHT,
    max_track: int = DEFAULT_MAX_TRACK,
) -> DiskPolicy:
    """Build the policy object for *algorithm*.

    Args:
        algorithm: Which discipline to use.
        direction: Initial sweep direction (ignored by FCFS and SSTF).
        max_track: Highest track number (used by SCAN and C-SCAN).

    Returns:
        A policy satisfying the ``DiskPolicy`` protocol.

    """
    match algorithm:
        case Algorithm.FCFS:
            return FCFSPolicy()
        case Algorithm.SSTF:
            return SSTFPolicy()
        case Algorithm.SCAN:
            return SCANPolicy(direction=direction, max_track=max_track)
        case Algorithm.CSCAN:
            return CSCANPolicy(direction=direction, max_track=max_track)
        case Algorithm.LOOK:
            return LOOKPolicy(direction=direction)
        case Algorithm.CLOOK:
            return CLOOKPolicy(direction=direction)


def seek_time(sequence: Iterable[int], *, head: int) -> int:
    """Return the total head movement for visiting *sequence* from *head*.

    Args:
        sequence: Tracks in visiting order.
        head: Starting position of the disk head.

    Returns:
        Sum of absolute distances between consecutive stops.

    """
    total = 0
    current = head
    for track in sequence:
        total += abs(track - current)
        current = track
    return total


@dataclass(frozen=True)
class SchedulePlan:
    """The result of planning one simulation run.

    Attributes:
        algorithm: The discipline that produced the sequence.
        initial_position: Where the head started.
        sequence: Every stop, in visiting order.
        total_seek_time: Total head movement for the whole sequence.

    """

    algorithm: Algorithm
    initial_position: int
    sequence: tuple[int, ...]
    total_seek_time: int

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-friendly dict of the plan."""
        return {
            "algorithm": str(self.algorithm),
            "initial_position": self.initial_position,
            "sequence": list(self.sequence),
            "total_seek_time": self.total_seek_time,
        }


def compute_sequence(
    initial_position: int,
    max_track: int,
    direction: Direction,
    requests: Sequence[int],
    algorithm: Algorithm,
    *,
    logger: Logger | None = None,
) -> SchedulePlan:
    """Compute the visiting order and total seek time for one run.

    Inputs are assumed valid: the request queue rejects out-of-range
    and duplicate tracks before they get here.

    Args:
        initial_position: Starting track of the disk head.
        max_track: Highest addressable track.
        direction: Initial sweep direction.
        requests: Pending tracks in insertion order.
        algorithm: Which discipline to apply.
        logger: Optional log to record the computed plan in.

    Returns:
        The computed ``SchedulePlan``.

    """
    policy = policy_for(algorithm, direction=direction, max_track=max_track)
    sequence = tuple(policy.schedule(requests, head=initial_position))
    total = seek_time(sequence, head=initial_position)
    if logger is not None:
        logger.log(
            LogLevel.INFO,
            f"{algorithm.name} from {initial_position} ({direction}): "
            f"{len(sequence)} stops, seek time {total}",
            source="planner",
        )
    return SchedulePlan(
        algorithm=algorithm,
        initial_position=initial_position,
        sequence=sequence,
        total_seek_time=total,
    )
