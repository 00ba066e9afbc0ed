from .types import GestureAttempt, GestureBackend, GestureRejected, TreeSnapshotProvider
from .events import EventChannel
from .delay import DelayController, clamp_interval, jittered_delay
from .selection import SelectionState
from .gesture import GestureDispatcher, candidate_points
from .scheduler import SchedulerTiming, SessionScheduler
from .service import AutomationEngine, connect_adb_engine

__all__ = [
    "GestureAttempt",
    "GestureBackend",
    "GestureRejected",
    "TreeSnapshotProvider",
    "EventChannel",
    "DelayController",
    "clamp_interval",
    "jittered_delay",
    "SelectionState",
    "GestureDispatcher",
    "candidate_points",
    "SchedulerTiming",
    "SessionScheduler",
    "AutomationEngine",
    "connect_adb_engine",
]
