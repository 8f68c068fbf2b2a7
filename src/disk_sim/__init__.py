"""Disk scheduling simulator.

Plan the order in which a disk head services track requests under six
classic algorithms, then replay that plan tick by tick.

Re-exports the engine so callers can write::

    from disk_sim import Algorithm, Direction, compute_sequence
"""

from disk_sim.config import ConfigError, SimulationConfig
from disk_sim.logging import LogEntry, Logger, LogLevel
from disk_sim.planner import (
    Algorithm,
    CLOOKPolicy,
    CSCANPolicy,
    DiskPolicy,
    Direction,
    FCFSPolicy,
    LOOKPolicy,
    SCANPolicy,
    SchedulePlan,
    SSTFPolicy,
    compute_sequence,
    policy_for,
    seek_time,
)
from disk_sim.playback import (
    EmptySequenceError,
    InvalidStateError,
    PlaybackController,
    PlaybackSnapshot,
    PlaybackState,
)
from disk_sim.request_queue import RequestError, RequestQueue
from disk_sim.simulator import Simulator
from disk_sim.timer import IntervalTimer, TimerError

__all__ = [
    "Algorithm",
    "CLOOKPolicy",
    "CSCANPolicy",
    "ConfigError",
    "Direction",
    "DiskPolicy",
    "EmptySequenceError",
    "FCFSPolicy",
    "IntervalTimer",
    "InvalidStateError",
    "LOOKPolicy",
    "LogEntry",
    "LogLevel",
    "Logger",
    "PlaybackController",
    "PlaybackSnapshot",
    "PlaybackState",
    "RequestError",
    "RequestQueue",
    "SCANPolicy",
    "SSTFPolicy",
    "SchedulePlan",
    "SimulationConfig",
    "Simulator",
    "TimerError",
    "compute_sequence",
    "policy_for",
    "seek_time",
]
