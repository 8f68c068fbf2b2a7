"""Interactive REPL (Read-Eval-Print Loop) for the simulator.

The REPL is the thin I/O wrapper around the shell:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

One command is handled here rather than in the shell: ``play`` starts
(or resumes) playback and then drives it in real time, printing the
head position after every tick.  It needs real sleeping and live
output, which the string-returning shell deliberately avoids.

The helper functions (``build_prompt``, ``format_banner``) are pure
and testable.  The ``run()`` function is the I/O entrypoint.
"""

import readline
import time
from collections.abc import Callable

from disk_sim.catalog import describe
from disk_sim.completer import Completer
from disk_sim.config import ConfigError, SimulationConfig
from disk_sim.playback import EmptySequenceError, InvalidStateError, PlaybackState
from disk_sim.shell import Shell, format_snapshot
from disk_sim.simulator import Simulator
from disk_sim.timer import run_realtime

_BANNER_WIDTH = 38


def format_banner(simulator: Simulator) -> str:
    """Format the start-up banner with the session defaults."""
    border = "=" * _BANNER_WIDTH
    header = f"\n  {border}\n      Disk Scheduling Simulator\n  {border}\n\n"
    body = (
        f"  Tracks:    0-{simulator.max_track}\n"
        f"  Head:      {simulator.initial_position} ({simulator.direction})\n"
        f"  Algorithm: {describe(simulator.algorithm).name}\n"
        f"  Speed:     {simulator.controller.tick_interval_ms}ms per step\n"
    )
    footer = "\nType 'help' for commands, 'play' to animate, 'exit' to quit.\n"
    return header + body + footer


def build_prompt(simulator: Simulator) -> str:
    """Build a prompt like ``disk[sstf:running] $ ``."""
    return f"disk[{simulator.algorithm}:{simulator.state}] $ "


def play(
    simulator: Simulator,
    *,
    write: Callable[[str], None] = print,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Start or resume playback and drive it to completion in real time.

    Args:
        simulator: The session to play.
        write: Receives one progress line per tick.
        sleep: Sleep function taking seconds (injectable for tests).

    Returns:
        The final status readout, or an ``Error:`` line.

    """
    try:
        match simulator.state:
            case PlaybackState.PAUSED:
                simulator.resume()
            case PlaybackState.IDLE | PlaybackState.COMPLETED:
                simulator.start()
            case PlaybackState.RUNNING:
                pass
    except (EmptySequenceError, InvalidStateError) as e:
        return f"Error: {e}"

    def report() -> None:
        snap = simulator.snapshot()
        if snap.status is PlaybackState.RUNNING:
            write(
                f"  step {snap.step_index}/{len(snap.sequence)}: head at {snap.current_position}"
                f" (+{snap.step_movement}, total {snap.total_movement})"
            )

    run_realtime(simulator.controller.timer, sleep=sleep, on_fire=report)
    return format_snapshot(simulator.snapshot())


def run() -> None:
    """Run the interactive REPL.

    Handles configuration from the environment, readline completion,
    Ctrl+C during playback (pauses), Ctrl+C / Ctrl+D at the prompt
    (exits), and releasing the timer on the way out.
    """
    try:
        config = SimulationConfig.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}")  # noqa: T201
        return

    simulator = Simulator(config)
    shell = Shell(simulator=simulator)

    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    print(format_banner(simulator))  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(simulator))
            except EOFError:
                # Ctrl+D: graceful exit
                print()  # noqa: T201
                break

            if command.strip().lower() == "play":
                try:
                    print(play(simulator))  # noqa: T201
                except KeyboardInterrupt:
                    if simulator.state is PlaybackState.RUNNING:
                        simulator.pause()
                    print("\nPaused.")  # noqa: T201
                continue

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        # Ctrl+C: graceful exit
        print("\nInterrupted.")  # noqa: T201

    finally:
        simulator.close()
        print("Bye.")  # noqa: T201
