"""Simulation configuration — defaults plus environment overrides.

Every knob a simulation session needs lives in one frozen dataclass.
Defaults match the classic classroom setup: a 200-track disk (tracks
0-199), the head parked at track 50 sweeping right, and one tick per
second.

Overrides come from ``KEY=VALUE`` string pairs, the same way a Unix
process picks up its settings from its environment:

==============================  ===================
Variable                        Field
==============================  ===================
``DISK_SIM_MAX_TRACK``          ``max_track``
``DISK_SIM_INITIAL_POSITION``   ``initial_position``
``DISK_SIM_DIRECTION``          ``direction``
``DISK_SIM_ALGORITHM``          ``algorithm``
``DISK_SIM_TICK_MS``            ``tick_interval_ms``
``DISK_SIM_BATCH_SIZE``         ``random_batch_size``
==============================  ===================
"""

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from disk_sim.planner import DEFAULT_MAX_TRACK, Algorithm, Direction
from disk_sim.request_queue import DEFAULT_BATCH_SIZE
from disk_sim.timer import DEFAULT_TICK_INTERVAL_MS

DEFAULT_INITIAL_POSITION = 50

ENV_PREFIX = "DISK_SIM_"


class ConfigError(ValueError):
    """Raise when a configuration value cannot be parsed or is out of range."""


@dataclass(frozen=True)
class SimulationConfig:
    """Settings for one simulation session.

    Attributes:
        max_track: Highest addressable track.
        initial_position: Track the head starts on.
        direction: Initial sweep direction.
        algorithm: Scheduling discipline.
        tick_interval_ms: Playback speed, in milliseconds per step.
        random_batch_size: Requests generated by a random batch.

    """

    max_track: int = DEFAULT_MAX_TRACK
    initial_position: int = DEFAULT_INITIAL_POSITION
    direction: Direction = Direction.RIGHT
    algorithm: Algorithm = Algorithm.FCFS
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    random_batch_size: int = DEFAULT_BATCH_SIZE

    def validate(self) -> "SimulationConfig":
        """Return self if every field is in range.

        Raises:
            ConfigError: On the first invalid field.

        """
        if self.max_track < 1:
            msg = f"max_track must be at least 1, got {self.max_track}"
            raise ConfigError(msg)
        if not 0 <= self.initial_position <= self.max_track:
            msg = f"initial_position {self.initial_position} is outside 0-{self.max_track}"
            raise ConfigError(msg)
        if self.tick_interval_ms <= 0:
            msg = f"tick_interval_ms must be positive, got {self.tick_interval_ms}"
            raise ConfigError(msg)
        if not 0 < self.random_batch_size <= self.max_track:
            msg = f"random_batch_size must be in 1-{self.max_track}, got {self.random_batch_size}"
            raise ConfigError(msg)
        return self

    def replace(self, **changes: Any) -> "SimulationConfig":  # noqa: ANN401
        """Return a validated copy with *changes* applied."""
        return dataclasses.replace(self, **changes).validate()

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "SimulationConfig":
        """Build a config from ``DISK_SIM_*`` variables.

        Args:
            env: Variables to read; defaults to ``os.environ``.

        Returns:
            A validated configuration.

        Raises:
            ConfigError: If a variable cannot be parsed or is out of range.

        """
        source = os.environ if env is None else env
        changes: dict[str, Any] = {}
        for field, parse in _ENV_FIELDS.items():
            raw = source.get(ENV_PREFIX + field.upper())
            if raw is None or not raw.strip():
                continue
            try:
                changes[_FIELD_NAMES.get(field, field)] = parse(raw.strip().lower())
            except ValueError:
                msg = f"invalid {ENV_PREFIX}{field.upper()}: {raw!r}"
                raise ConfigError(msg) from None
        return cls(**changes).validate()


# Environment suffix → parser.  Suffixes double as field names except
# where _FIELD_NAMES says otherwise.
_ENV_FIELDS: dict[str, Any] = {
    "max_track": int,
    "initial_position": int,
    "direction": Direction,
    "algorithm": Algorithm,
    "tick_ms": int,
    "batch_size": int,
}

_FIELD_NAMES = {
    "tick_ms": "tick_interval_ms",
    "batch_size": "random_batch_size",
}
