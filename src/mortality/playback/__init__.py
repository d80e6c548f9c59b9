"""
mortality.playback — timer-driven year cursor for the animated map.

## Public API
- PlaybackController — Playing/Paused state machine emitting PlaybackState snapshots.
- ManualScheduler — virtual clock for deterministic driving (tests, Streamlit reruns).
- Scheduler / Cancellable — protocols; an asyncio event loop satisfies Scheduler.

## Import DAG discipline
- Depends on stdlib and mortality.core; mortality.io only for from_index() defaults.
"""

from __future__ import annotations

from .clock import Cancellable, ManualScheduler, ScheduledCall, Scheduler
from .controller import PlaybackController, Subscriber

__all__ = [
    "Cancellable",
    "ManualScheduler",
    "ScheduledCall",
    "Scheduler",
    "PlaybackController",
    "Subscriber",
]
