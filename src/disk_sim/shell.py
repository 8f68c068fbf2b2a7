"""The shell — text commands for driving a simulation session.

The shell reads a command string, splits it into a command name and
arguments, dispatches to the matching handler, and returns a string.

Design choices:
    - **Returns strings, not prints.**  The shell is fully testable;
      the REPL and the web API decide how to display output.
    - **Command dispatch via a dict.**  Adding a command means writing
      one method and adding one dict entry.
    - **Errors are output, not exceptions.**  Invalid input produces a
      line starting with ``Error:`` so a typo never ends the session.
"""

from collections.abc import Callable
from typing import TypeAlias

from disk_sim.catalog import all_algorithms, describe
from disk_sim.config import ConfigError
from disk_sim.logging import LogLevel
from disk_sim.planner import Algorithm, Direction
from disk_sim.playback import EmptySequenceError, InvalidStateError, PlaybackSnapshot
from disk_sim.request_queue import RequestError
from disk_sim.simulator import Simulator

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]

_DEFAULT_LOG_LINES = 20


def format_snapshot(snapshot: PlaybackSnapshot) -> str:
    """Render a snapshot as the multi-line ``status`` readout."""
    sequence = " ".join(str(t) for t in snapshot.sequence) or "-"
    return "\n".join(
        [
            f"Status:           {snapshot.status}",
            f"Step:             {snapshot.step_index}/{len(snapshot.sequence)}",
            f"Current position: {snapshot.current_position}",
            f"Step movement:    {snapshot.step_movement}",
            f"Total movement:   {snapshot.total_movement}",
            f"Total seek time:  {snapshot.total_seek_time}",
            f"Sequence:         {sequence}",
        ]
    )


def format_track(position: int, requests: list[int], *, max_track: int, width: int = 50) -> str:
    """Draw the disk as a one-line track with requests and the head.

    ``o`` marks a pending request, ``H`` marks the head.
    """
    cells = ["-"] * (width + 1)

    def column(track: int) -> int:
        return round(track / max_track * width)

    for track in requests:
        cells[column(track)] = "o"
    cells[column(position)] = "H"
    return f"0 |{''.join(cells)}| {max_track}"


class Shell:
    """Command interpreter bound to one simulator."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, simulator: Simulator | None = None) -> None:
        """Create a shell driving *simulator* (a fresh one if omitted)."""
        self._sim = simulator if simulator is not None else Simulator()

        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "algorithms": self._cmd_algorithms,
            "info": self._cmd_info,
            "algo": self._cmd_algo,
            "direction": self._cmd_direction,
            "head": self._cmd_head,
            "maxtrack": self._cmd_maxtrack,
            "add": self._cmd_add,
            "remove": self._cmd_remove,
            "random": self._cmd_random,
            "clear": self._cmd_clear,
            "requests": self._cmd_requests,
            "plan": self._cmd_plan,
            "start": self._cmd_start,
            "tick": self._cmd_tick,
            "step": self._cmd_step,
            "pause": self._cmd_pause,
            "resume": self._cmd_resume,
            "stop": self._cmd_stop,
            "reset": self._cmd_reset,
            "speed": self._cmd_speed,
            "status": self._cmd_status,
            "track": self._cmd_track,
            "log": self._cmd_log,
            "exit": self._cmd_exit,
        }

    @property
    def simulator(self) -> Simulator:
        """Return the simulator this shell drives."""
        return self._sim

    @property
    def command_names(self) -> list[str]:
        """Return all command names, sorted."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute one command.

        Args:
            command: The raw command string (e.g. "add 98 183 37").

        Returns:
            The command output, or an ``Error:`` / ``Unknown command:`` line.

        """
        parts = command.split()
        if not parts:
            return ""
        name, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}"
        try:
            return handler(args)
        except (RequestError, ConfigError, EmptySequenceError, InvalidStateError) as e:
            return f"Error: {e}"

    # -- Information -----------------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        return "Available commands: " + ", ".join(self.command_names)

    def _cmd_algorithms(self, _args: list[str]) -> str:
        """List the algorithms, marking the selected one."""
        lines = []
        for info in all_algorithms():
            marker = "*" if info.algorithm is self._sim.algorithm else " "
            lines.append(f"{marker} {info.algorithm:<6} {info.name}")
        return "\n".join(lines)

    def _cmd_info(self, args: list[str]) -> str:
        """Describe an algorithm (the selected one by default)."""
        algorithm = self._sim.algorithm
        if args:
            parsed = _parse_algorithm(args[0])
            if parsed is None:
                return _unknown_algorithm(args[0])
            algorithm = parsed
        info = describe(algorithm)
        lines = [info.name, info.description, info.details, "", "Advantages:"]
        lines.extend(f"  + {item}" for item in info.advantages)
        lines.append("Disadvantages:")
        lines.extend(f"  - {item}" for item in info.disadvantages)
        return "\n".join(lines)

    # -- Parameters ------------------------------------------------------------

    def _cmd_algo(self, args: list[str]) -> str:
        """Show or select the algorithm."""
        if not args:
            return f"Algorithm: {describe(self._sim.algorithm).name}"
        algorithm = _parse_algorithm(args[0])
        if algorithm is None:
            return _unknown_algorithm(args[0])
        self._sim.algorithm = algorithm
        return f"Algorithm set to {describe(algorithm).name}"

    def _cmd_direction(self, args: list[str]) -> str:
        """Show or set the sweep direction."""
        if not args:
            return f"Direction: {self._sim.direction}"
        try:
            direction = Direction(args[0].lower())
        except ValueError:
            return f"Error: unknown direction '{args[0]}'. Use left or right."
        self._sim.direction = direction
        return f"Direction set to {direction}"

    def _cmd_head(self, args: list[str]) -> str:
        """Show or set the initial head position."""
        if not args:
            return f"Head: {self._sim.initial_position}"
        value = _parse_int(args[0])
        if value is None:
            return f"Error: invalid track '{args[0]}'"
        self._sim.initial_position = value
        return f"Head set to {value}"

    def _cmd_maxtrack(self, args: list[str]) -> str:
        """Show or set the highest track."""
        if not args:
            return f"Max track: {self._sim.max_track}"
        value = _parse_int(args[0])
        if value is None:
            return f"Error: invalid track '{args[0]}'"
        self._sim.max_track = value
        return f"Max track set to {value}"

    # -- Request queue ---------------------------------------------------------

    def _cmd_add(self, args: list[str]) -> str:
        """Queue requests in order, reporting what was queued before an error."""
        if not args:
            return "Usage: add <track> [track...]"
        added: list[str] = []
        for arg in args:
            try:
                added.append(str(self._sim.add_request(arg)))
            except RequestError as e:
                if not added:
                    raise
                return f"Queued: {' '.join(added)}\nError: {e}"
        return f"Queued: {' '.join(added)}"

    def _cmd_remove(self, args: list[str]) -> str:
        """Remove a request by its queue position."""
        if not args:
            return "Usage: remove <position>"
        index = _parse_int(args[0])
        if index is None:
            return f"Error: invalid position '{args[0]}'"
        track = self._sim.remove_request(index)
        return f"Removed {track}"

    def _cmd_random(self, args: list[str]) -> str:
        """Replace the queue with a random batch."""
        count = None
        if args:
            count = _parse_int(args[0])
            if count is None:
                return f"Error: invalid count '{args[0]}'"
        batch = self._sim.randomize_requests(count)
        return f"Requests: {' '.join(str(t) for t in batch)}"

    def _cmd_clear(self, _args: list[str]) -> str:
        """Empty the queue."""
        self._sim.clear_requests()
        return "Request queue cleared."

    def _cmd_requests(self, _args: list[str]) -> str:
        """List the queue in insertion order."""
        pending = self._sim.requests
        if not pending:
            return "No requests."
        return "\n".join(f"[{i}] {track}" for i, track in enumerate(pending))

    # -- Playback --------------------------------------------------------------

    def _cmd_plan(self, _args: list[str]) -> str:
        """Show the sequence the current parameters would produce."""
        plan = self._sim.preview()
        sequence = " ".join(str(t) for t in plan.sequence) or "-"
        return (
            f"{describe(plan.algorithm).name} from {plan.initial_position}"
            f" ({self._sim.direction})\n"
            f"Sequence:        {sequence}\n"
            f"Total seek time: {plan.total_seek_time}"
        )

    def _cmd_start(self, args: list[str]) -> str:
        """Plan and start playback, optionally at a given speed."""
        interval = None
        if args:
            interval = _parse_int(args[0])
            if interval is None or interval <= 0:
                return f"Error: invalid interval '{args[0]}'"
        snap = self._sim.start(interval)
        return (
            f"Started {len(snap.sequence)} steps every {self._sim.controller.tick_interval_ms}ms."
            f" Total seek time: {snap.total_seek_time}"
        )

    def _cmd_tick(self, args: list[str]) -> str:
        """Advance playback time by N milliseconds (one interval by default)."""
        elapsed = self._sim.controller.tick_interval_ms
        if args:
            parsed = _parse_int(args[0])
            if parsed is None or parsed < 0:
                return f"Error: invalid duration '{args[0]}'"
            elapsed = parsed
        fired = self._sim.advance(elapsed)
        return f"{fired} tick(s)\n{format_snapshot(self._sim.snapshot())}"

    def _cmd_step(self, _args: list[str]) -> str:
        """Perform exactly one tick now."""
        return format_snapshot(self._sim.step())

    def _cmd_pause(self, _args: list[str]) -> str:
        """Pause playback."""
        snap = self._sim.pause()
        return f"Paused at track {snap.current_position} (step {snap.step_index})."

    def _cmd_resume(self, _args: list[str]) -> str:
        """Resume playback."""
        snap = self._sim.resume()
        return f"Resumed from track {snap.current_position} (step {snap.step_index})."

    def _cmd_stop(self, _args: list[str]) -> str:
        """Abandon the run, keeping parameters and requests."""
        self._sim.stop()
        return "Playback stopped."

    def _cmd_reset(self, _args: list[str]) -> str:
        """Reset everything to the configured defaults."""
        self._sim.reset()
        return "Simulation reset."

    def _cmd_speed(self, args: list[str]) -> str:
        """Show or set the tick interval in milliseconds."""
        if not args:
            return f"Speed: {self._sim.controller.tick_interval_ms}ms per step"
        value = _parse_int(args[0])
        if value is None or value <= 0:
            return f"Error: invalid interval '{args[0]}'"
        self._sim.change_speed(value)
        return f"Speed set to {value}ms per step"

    def _cmd_status(self, _args: list[str]) -> str:
        """Show the playback readout."""
        return format_snapshot(self._sim.snapshot())

    def _cmd_track(self, _args: list[str]) -> str:
        """Draw the disk with pending requests and the head."""
        snap = self._sim.snapshot()
        return format_track(
            snap.current_position, self._sim.requests, max_track=self._sim.max_track
        )

    def _cmd_log(self, args: list[str]) -> str:
        """Show recent log entries, optionally from a minimum level."""
        min_level = LogLevel.INFO
        if args:
            try:
                min_level = LogLevel[args[0].upper()]
            except KeyError:
                return f"Error: unknown level '{args[0]}'. Use debug, info, warning, or error."
        entries = self._sim.logger.filter(min_level=min_level)[-_DEFAULT_LOG_LINES:]
        if not entries:
            return "Log is empty."
        return "\n".join(str(e) for e in entries)

    def _cmd_exit(self, _args: list[str]) -> str:
        """Release the timer and signal the REPL to quit."""
        self._sim.close()
        return self.EXIT_SENTINEL


def _parse_algorithm(text: str) -> Algorithm | None:
    """Return the algorithm named by *text* (``c-scan`` and ``cscan`` both work)."""
    try:
        return Algorithm(text.lower().replace("-", ""))
    except ValueError:
        return None


def _unknown_algorithm(text: str) -> str:
    """Return the error line for an unknown algorithm name."""
    names = ", ".join(a.value for a in Algorithm)
    return f"Error: unknown algorithm '{text}'. Use {names}."


def _parse_int(text: str) -> int | None:
    """Return *text* as an int, or None."""
    try:
        return int(text)
    except ValueError:
        return None
