"""Simulation event log — an audit trail of what the engine did.

Every interesting event in a simulation (a plan computed, playback
started, a tick serviced a request, a rejected transition) is recorded
as a structured entry.  The log stays in memory so the shell and the
web API can show it back to the user, much like ``dmesg`` shows the
kernel ring buffer.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, step).
- **Logger** — an append-only log with filtering and clearing.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records should be immutable.
    - **Step instead of wall-clock time** — playback is driven by ticks,
      so the step index is the meaningful timestamp.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "playback").
        step: The playback step index at the time of the event, if any.

    """

    level: LogLevel
    message: str
    source: str
    step: int | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message`` with an optional step tag."""
        prefix = f"[{self.level.name}] {self.source}"
        if self.step is not None:
            prefix += f"@{self.step}"
        return f"{prefix}: {self.message}"


class Logger:
    """Append-only log buffer with filtering.

    A single logger is usually shared by the planner, the playback
    controller and the simulator, so one ``filter`` call can show the
    full history of a session.
    """

    def __init__(self, *, min_level: LogLevel = LogLevel.DEBUG) -> None:
        """Create an empty logger.

        Args:
            min_level: Entries below this level are dropped on arrival.

        """
        self._min_level = min_level
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    @property
    def min_level(self) -> LogLevel:
        """Return the lowest level that is recorded."""
        return self._min_level

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        step: int | None = None,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            step: Playback step associated with the event.

        """
        if level < self._min_level:
            return
        self._entries.append(LogEntry(level=level, message=message, source=source, step=step))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of recorded entries."""
        return len(self._entries)
