from enum import Enum
from typing import Dict, NamedTuple, Union


class UnknownDifficulty(ValueError):
    """Raised when a difficulty name is not one of the supported levels."""


class Difficulty(str, Enum):
    EASY = 'easy'
    NORMAL = 'normal'
    HARD = 'hard'
    EXPERT = 'expert'
    ONI = 'oni'


class DifficultyParams(NamedTuple):
    grid_dimension: int
    max_sequence_length: int
    step_timing_ms: int


DIFFICULTY_TABLE: Dict[Difficulty, DifficultyParams] = {
    Difficulty.EASY: DifficultyParams(grid_dimension=2, max_sequence_length=4, step_timing_ms=1500),
    Difficulty.NORMAL: DifficultyParams(grid_dimension=3, max_sequence_length=9, step_timing_ms=1000),
    Difficulty.HARD: DifficultyParams(grid_dimension=4, max_sequence_length=16, step_timing_ms=500),
    Difficulty.EXPERT: DifficultyParams(grid_dimension=5, max_sequence_length=25, step_timing_ms=250),
    Difficulty.ONI: DifficultyParams(grid_dimension=5, max_sequence_length=50, step_timing_ms=100),
}


class PresentationTiming(NamedTuple):
    """Millisecond pacing of one game.

    ``highlight_interval_ms`` spaces successive cells during playback and
    ``highlight_duration_ms`` is how long each one stays lit. The remaining
    values are fixed pauses that do not depend on difficulty.
    """
    highlight_interval_ms: int
    highlight_duration_ms: int
    start_delay_ms: int = 1000
    input_feedback_ms: int = 500
    next_round_delay_ms: int = 1000


def difficulty_params(difficulty: Difficulty) -> DifficultyParams:
    return DIFFICULTY_TABLE[parse_difficulty(difficulty)]


def parse_difficulty(value: Union[str, Difficulty]) -> Difficulty:
    """Resolve a difficulty member or a case-insensitive name."""
    if isinstance(value, Difficulty):
        return value
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().lower())
        except ValueError:
            pass
    choices = ', '.join(d.value for d in Difficulty)
    raise UnknownDifficulty(f"Unknown difficulty {value!r} (expected one of: {choices})")


def timing_for(difficulty: Difficulty, start_delay_ms: int = 1000, input_feedback_ms: int = 500,
               next_round_delay_ms: int = 1000) -> PresentationTiming:
    interval = difficulty_params(difficulty).step_timing_ms
    return PresentationTiming(
        highlight_interval_ms=interval,
        highlight_duration_ms=int(interval * 0.75),
        start_delay_ms=start_delay_ms,
        input_feedback_ms=input_feedback_ms,
        next_round_delay_ms=next_round_delay_ms,
    )


def describe_difficulties() -> list:
    """Serializable view of the whole table, easiest first."""
    rows = []
    for difficulty, params in DIFFICULTY_TABLE.items():
        timing = timing_for(difficulty)
        rows.append({
            'difficulty': difficulty.value,
            'grid_size': params.grid_dimension,
            'cell_count': params.grid_dimension * params.grid_dimension,
            'max_sequence_length': params.max_sequence_length,
            'highlight_interval_ms': timing.highlight_interval_ms,
            'highlight_duration_ms': timing.highlight_duration_ms,
        })
    return rows
