"""Memory game domain services: difficulty table, timers, engine and live sessions.

Routes and socket handlers import from here; the engine itself has no Flask
dependency beyond the Socket.IO-backed scheduler.
"""

from .difficulty import (
    Difficulty,
    DifficultyParams,
    PresentationTiming,
    UnknownDifficulty,
    describe_difficulties,
    difficulty_params,
    parse_difficulty,
    timing_for,
)
from .engine import CallbackNotifier, GameManager, GamePhase, Notifier, pick_next_cell
from .scheduler import ManualScheduler, Scheduler
