"""Tab completer for the simulator shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

The ``complete(text, state)`` method is the readline callback.  It
delegates to ``completions(text, line)`` which looks at the first word
on the line and returns a list of candidate strings.
"""

from __future__ import annotations

import readline
from typing import TYPE_CHECKING

from disk_sim.logging import LogLevel
from disk_sim.planner import Algorithm, Direction

if TYPE_CHECKING:
    from disk_sim.shell import Shell

_ALGORITHM_NAMES = [a.value for a in Algorithm]

# Commands whose single argument comes from a fixed vocabulary.
_ARGUMENTS: dict[str, list[str]] = {
    "algo": _ALGORITHM_NAMES,
    "info": _ALGORITHM_NAMES,
    "direction": [d.value for d in Direction],
    "log": [level.name.lower() for level in LogLevel],
}


class Completer:
    """Context-aware tab completer for the simulator shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance."""
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*.

        Args:
            text: The partial word being completed.
            state: Index into the candidate list (0, 1, 2, …).

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()

        # Still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return [cmd for cmd in self._shell.command_names if cmd.startswith(text)]

        choices = _ARGUMENTS.get(words[0].lower())
        if choices is None:
            return []
        return sorted(choice for choice in choices if choice.startswith(text.lower()))
