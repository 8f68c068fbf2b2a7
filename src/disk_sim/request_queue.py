"""Request queue — the pending tracks a simulation will service.

The queue is the gatekeeper in front of the planner.  The planner
assumes every request is an integer in ``[0, max_track]`` and that no
track appears twice; the queue is where those rules are enforced.
Insertion order is preserved because FCFS depends on it.
"""

import random
from collections.abc import Iterator

from disk_sim.planner import DEFAULT_MAX_TRACK

DEFAULT_BATCH_SIZE = 8


class RequestError(ValueError):
    """Raise when a request is out of range, malformed, or a duplicate."""


class RequestQueue:
    """An ordered set of unique, in-range track requests."""

    def __init__(self, *, max_track: int = DEFAULT_MAX_TRACK) -> None:
        """Create an empty queue for a disk with tracks ``0..max_track``."""
        self._max_track = max_track
        self._tracks: list[int] = []

    @property
    def max_track(self) -> int:
        """Return the highest track a request may name."""
        return self._max_track

    @max_track.setter
    def max_track(self, value: int) -> None:
        """Change the track bound, dropping requests that no longer fit."""
        self._max_track = value
        self._tracks = [t for t in self._tracks if t <= value]

    @property
    def pending(self) -> list[int]:
        """Return the queued tracks in insertion order."""
        return list(self._tracks)

    def add(self, track: int | str) -> int:
        """Queue a request for *track*.

        Args:
            track: Track number, or its decimal string form.

        Returns:
            The track that was queued.

        Raises:
            RequestError: If the value is not an integer, is outside
                ``[0, max_track]``, or is already queued.

        """
        value = self._parse(track)
        if not 0 <= value <= self._max_track:
            msg = f"track {value} is out of range 0-{self._max_track}"
            raise RequestError(msg)
        if value in self._tracks:
            msg = f"track {value} is already queued"
            raise RequestError(msg)
        self._tracks.append(value)
        return value

    def extend(self, tracks: list[int]) -> None:
        """Queue several requests, stopping at the first invalid one."""
        for track in tracks:
            self.add(track)

    def remove(self, track: int) -> None:
        """Remove the request for *track*.

        Raises:
            RequestError: If *track* is not queued.

        """
        if track not in self._tracks:
            msg = f"track {track} is not queued"
            raise RequestError(msg)
        self._tracks.remove(track)

    def remove_at(self, index: int) -> int:
        """Remove and return the request at position *index*.

        Raises:
            RequestError: If there is no request at that position.

        """
        if not 0 <= index < len(self._tracks):
            msg = f"no request at position {index}"
            raise RequestError(msg)
        return self._tracks.pop(index)

    def clear(self) -> None:
        """Remove every request."""
        self._tracks.clear()

    def randomize(
        self,
        count: int = DEFAULT_BATCH_SIZE,
        *,
        exclude: int | None = None,
        rng: random.Random | None = None,
    ) -> list[int]:
        """Replace the queue with *count* unique random tracks.

        Args:
            count: How many requests to generate.
            exclude: A track that must not be chosen (the head position).
            rng: Random source, for reproducible batches.

        Returns:
            The new queue contents.

        Raises:
            RequestError: If *count* is negative or the disk has fewer than
                *count* eligible tracks.

        """
        candidates = [t for t in range(self._max_track + 1) if t != exclude]
        if not 0 <= count <= len(candidates):
            msg = f"cannot pick {count} unique tracks from {len(candidates)} available"
            raise RequestError(msg)
        source = rng if rng is not None else random.Random()
        self._tracks = source.sample(candidates, count)
        return self.pending

    def _parse(self, track: int | str) -> int:
        """Return *track* as an int, or raise RequestError."""
        if isinstance(track, bool):
            msg = f"invalid track {track!r}"
            raise RequestError(msg)
        if isinstance(track, int):
            return track
        try:
            return int(track.strip())
        except (AttributeError, ValueError):
            msg = f"invalid track {track!r}"
            raise RequestError(msg) from None

    def __len__(self) -> int:
        """Return the number of queued requests."""
        return len(self._tracks)

    def __contains__(self, track: object) -> bool:
        """Return True if *track* is queued."""
        return track in self._tracks

    def __iter__(self) -> Iterator[int]:
        """Iterate over queued tracks in insertion order."""
        return iter(list(self._tracks))
