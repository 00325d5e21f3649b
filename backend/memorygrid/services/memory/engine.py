"""Sequence-memory game engine.

The player watches a growing sequence of grid cells light up and must repeat
it. ``GameManager`` owns the sequence, the player's input for the current
round and the set of lit cells; views only read its state and forward clicks.

Observable effects leave the engine through a ``Notifier``:

- ``on_highlight_changed(cells)`` receives the full list of lit cells after
  every change, never a delta.
- ``on_state_changed()`` signals that flags, phase or sequence length moved
  and the consumer should re-read the public state.

All delayed work (playback steps, click feedback, next-round pause) goes
through a ``Scheduler``. Each ``start_game`` bumps ``epoch``; with
``discard_stale_timers`` enabled, tasks queued under an older epoch are
dropped when they fire. With it disabled the engine keeps the loose legacy
behaviour where leftovers from a restarted game still touch the new one.
"""

import logging
import random
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .difficulty import Difficulty, PresentationTiming, difficulty_params, parse_difficulty, timing_for
from .scheduler import Scheduler

log = logging.getLogger(__name__)


class Notifier:
    def on_highlight_changed(self, cells: List[int]) -> None:
        pass

    def on_state_changed(self) -> None:
        pass


class CallbackNotifier(Notifier):
    def __init__(self, highlight_callback: Optional[Callable[[List[int]], None]] = None,
                 state_changed_callback: Optional[Callable[[], None]] = None):
        self.highlight_callback = highlight_callback
        self.state_changed_callback = state_changed_callback

    def on_highlight_changed(self, cells: List[int]) -> None:
        if self.highlight_callback:
            self.highlight_callback(cells)

    def on_state_changed(self) -> None:
        if self.state_changed_callback:
            self.state_changed_callback()


class GamePhase(str, Enum):
    IDLE = 'idle'
    PRESENTING = 'presenting'
    AWAITING_INPUT = 'awaiting_input'
    ROUND_CORRECT = 'round_correct'
    GAME_OVER = 'game_over'
    CLEARED = 'cleared'


def pick_next_cell(sequence: Sequence[int], grid_dimension: int, rng=None) -> int:
    """Draw the next cell, avoiding cells already used in the current lap of the grid.

    A lap is each run of ``grid_dimension ** 2`` entries. When the sequence
    length is an exact multiple of the cell count a new lap starts and every
    cell is allowed again, including the one shown last.
    """
    rng = rng or random
    max_cells = grid_dimension * grid_dimension
    remainder = len(sequence) % max_cells
    used = set(sequence[-remainder:]) if remainder else set()
    while True:
        cell = rng.randrange(max_cells)
        if cell not in used:
            return cell


class GameManager:
    def __init__(self, difficulty, notifier: Notifier, scheduler: Scheduler,
                 timing: Optional[PresentationTiming] = None, rng=None, discard_stale_timers: bool = True):
        self.difficulty: Difficulty = parse_difficulty(difficulty)
        params = difficulty_params(self.difficulty)
        self.grid_size: int = params.grid_dimension
        self.max_sequence_length: int = params.max_sequence_length
        self.timing: PresentationTiming = timing or timing_for(self.difficulty)
        self.notifier: Notifier = notifier
        self.scheduler: Scheduler = scheduler
        self.rng = rng or random.Random()
        self.discard_stale_timers = discard_stale_timers

        self.sequence: List[int] = []
        self.player_sequence: List[int] = []
        self.highlighted_cells: List[int] = []
        self.phase: GamePhase = GamePhase.IDLE
        self.epoch: int = 0

    # --- Read surface ---

    @property
    def cell_count(self) -> int:
        return self.grid_size * self.grid_size

    @property
    def level(self) -> int:
        return len(self.sequence)

    @property
    def is_playing(self) -> bool:
        return self.phase in (GamePhase.PRESENTING, GamePhase.AWAITING_INPUT, GamePhase.ROUND_CORRECT)

    @property
    def is_highlighting(self) -> bool:
        return self.phase == GamePhase.PRESENTING

    @property
    def is_correct(self) -> bool:
        return self.phase == GamePhase.ROUND_CORRECT

    @property
    def is_game_over(self) -> bool:
        return self.phase in (GamePhase.GAME_OVER, GamePhase.CLEARED)

    @property
    def is_cleared(self) -> bool:
        return self.phase == GamePhase.CLEARED

    def to_dict(self) -> dict:
        return {
            'difficulty': self.difficulty.value,
            'grid_size': self.grid_size,
            'max_sequence_length': self.max_sequence_length,
            'level': self.level,
            'sequence': list(self.sequence),
            'player_sequence': list(self.player_sequence),
            'highlighted_cells': list(self.highlighted_cells),
            'phase': self.phase.value,
            'is_playing': self.is_playing,
            'is_highlighting': self.is_highlighting,
            'is_correct': self.is_correct,
            'is_game_over': self.is_game_over,
            'is_cleared': self.is_cleared,
            'epoch': self.epoch,
            'timing': self.timing._asdict(),
        }

    snapshot = to_dict

    # --- Commands ---

    def start_game(self) -> None:
        """Reset everything and begin presenting a one-cell sequence."""
        self.epoch += 1
        self.player_sequence = []
        self.highlighted_cells = []
        # fresh lap, nothing excluded
        self.sequence = []
        self.sequence = [self.generate_random_cell()]
        log.info(f"[game-start] difficulty={self.difficulty.value} epoch={self.epoch} first_cell={self.sequence[0]}")
        self._start_highlight_sequence()
        self.notifier.on_state_changed()

    def handle_player_input(self, cell_index: int) -> None:
        if self.phase != GamePhase.AWAITING_INPUT:
            return
        # Ignore taps on a cell that is still flashing from a previous click
        if cell_index in self.highlighted_cells:
            return

        self.player_sequence.append(cell_index)
        self._add_highlight(cell_index)
        self._schedule(self.timing.input_feedback_ms, lambda: self._remove_highlight(cell_index))

        position = len(self.player_sequence) - 1
        # past the end of the sequence counts as a wrong guess
        expected = self.sequence[position] if position < len(self.sequence) else None
        if cell_index != expected:
            log.info(f"[game-over] epoch={self.epoch} level={self.level} position={position} "
                     f"expected={expected} got={cell_index}")
            self._finish(GamePhase.GAME_OVER)
            return

        if len(self.player_sequence) < len(self.sequence):
            return

        if len(self.sequence) == self.max_sequence_length:
            log.info(f"[game-clear] epoch={self.epoch} level={self.level}")
            self._finish(GamePhase.CLEARED)
            return

        self.phase = GamePhase.ROUND_CORRECT
        self.notifier.on_state_changed()
        self._schedule(self.timing.next_round_delay_ms, self._add_next_sequence)

    def generate_random_cell(self) -> int:
        return pick_next_cell(self.sequence, self.grid_size, self.rng)

    # --- Internals ---

    def _finish(self, phase: GamePhase) -> None:
        self.phase = phase
        self.notifier.on_state_changed()

    def _schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        queued_epoch = self.epoch

        def _run():
            if self.discard_stale_timers and queued_epoch != self.epoch:
                log.debug(f"[timer-abort] queued_epoch={queued_epoch} current_epoch={self.epoch}")
                return
            callback()

        self.scheduler.call_later(delay_ms, _run)

    def _add_highlight(self, cell: int) -> None:
        if cell not in self.highlighted_cells:
            self.highlighted_cells.append(cell)
        self.notifier.on_highlight_changed(list(self.highlighted_cells))

    def _remove_highlight(self, cell: int) -> None:
        self.highlighted_cells = [c for c in self.highlighted_cells if c != cell]
        self.notifier.on_highlight_changed(list(self.highlighted_cells))

    def _flash(self, cell: int) -> None:
        self._add_highlight(cell)
        self._schedule(self.timing.highlight_duration_ms, lambda: self._remove_highlight(cell))

    def _start_highlight_sequence(self) -> None:
        self.phase = GamePhase.PRESENTING
        for position, cell in enumerate(self.sequence):
            offset = self.timing.start_delay_ms + position * self.timing.highlight_interval_ms
            self._schedule(offset, lambda c=cell: self._flash(c))
        done_at = self.timing.start_delay_ms + len(self.sequence) * self.timing.highlight_interval_ms
        self._schedule(done_at, self._end_highlight_sequence)

    def _end_highlight_sequence(self) -> None:
        # also clears the between-rounds indicator when a leftover timer lands there
        if self.phase in (GamePhase.PRESENTING, GamePhase.ROUND_CORRECT):
            self.phase = GamePhase.AWAITING_INPUT
        self.notifier.on_state_changed()

    def _add_next_sequence(self) -> None:
        self.sequence.append(self.generate_random_cell())
        self.player_sequence = []
        log.debug(f"[next-round] epoch={self.epoch} level={self.level}")
        self._start_highlight_sequence()
        self.notifier.on_state_changed()
