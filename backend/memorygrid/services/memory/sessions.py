"""Runtime registry of live games, keyed by game code.

The engine state lives only in memory; a ``GameSession`` row mirrors the
phase and level so other processes can list what is running. Both are
dropped when the session ends.
"""

import threading
from typing import Callable, Dict, List, Optional

from flask import current_app

from memorygrid.extensions import db, socketio
from memorygrid.models import GameSession
from .difficulty import parse_difficulty, timing_for
from .engine import GameManager, Notifier
from .scheduler import ManualScheduler, Scheduler


def room_for(game_code: str) -> str:
    return f"game:{game_code}"


class SocketIOScheduler(Scheduler):
    """Runs each task as a Socket.IO background task.

    Callbacks execute inside the Flask app context and while holding ``lock``,
    so request handlers that take the same lock never interleave with a timer.
    """

    def __init__(self, app, lock: Optional[threading.RLock] = None):
        self.app = app
        self.lock = lock or threading.RLock()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        socketio.start_background_task(self._worker, max(0, int(delay_ms)), callback)

    def _worker(self, delay_ms: int, callback: Callable[[], None]) -> None:
        socketio.sleep(delay_ms / 1000.0)
        with self.app.app_context():
            with self.lock:
                try:
                    callback()
                except Exception:
                    self.app.logger.exception(f"[timer-error] callback failed after {delay_ms}ms")


class SocketIONotifier(Notifier):
    """Pushes engine notifications to every client in the game's room."""

    def __init__(self, game_code: str):
        self.game_code = game_code
        self.live: Optional['LiveGame'] = None

    def _silenced(self) -> bool:
        return self.live is None or self.live.ended

    def on_highlight_changed(self, cells: List[int]) -> None:
        if self._silenced():
            return
        socketio.emit('highlight', {'game_code': self.game_code, 'cells': cells},
                      to=room_for(self.game_code), namespace='/ws')

    def on_state_changed(self) -> None:
        # timers of an ended session still fire; nothing reaches clients or the db
        if self._silenced():
            return
        manager = self.live.manager
        row = GameSession.query.filter_by(game_code=self.game_code).first()
        if row is not None:
            try:
                row.phase = manager.phase.value
                row.level = manager.level
                db.session.add(row)
                db.session.commit()
            except Exception:
                db.session.rollback()
                current_app.logger.exception(f"[session-sync] game={self.game_code} failed to store phase")
        socketio.emit('state_update', {'game_code': self.game_code, 'state': manager.to_dict()},
                      to=room_for(self.game_code), namespace='/ws')


class LiveGame:
    """One engine plus the scheduler and lock that serialize access to it."""

    def __init__(self, game_code: str, manager: GameManager, scheduler, lock: threading.RLock):
        self.game_code = game_code
        self.manager = manager
        self.scheduler = scheduler
        self.lock = lock
        self.ended = False

    def start(self) -> dict:
        with self.lock:
            self.manager.start_game()
            return self.manager.to_dict()

    def click(self, cell: int) -> dict:
        with self.lock:
            self.manager.handle_player_input(cell)
            return self.manager.to_dict()

    def snapshot(self) -> dict:
        with self.lock:
            return self.manager.to_dict()


_live_games: Dict[str, LiveGame] = {}


def _build_scheduler(app, lock: threading.RLock):
    kind = str(app.config.get('SCHEDULER', 'socketio')).lower()
    if kind == 'manual':
        return ManualScheduler()
    return SocketIOScheduler(app, lock)


def create_session(app, difficulty=None) -> LiveGame:
    """Register a new game and its database row. Raises UnknownDifficulty."""
    difficulty = parse_difficulty(difficulty or app.config.get('DEFAULT_DIFFICULTY', 'normal'))
    row = GameSession(difficulty=difficulty.value)
    db.session.add(row)
    db.session.commit()

    lock = threading.RLock()
    scheduler = _build_scheduler(app, lock)
    timing = timing_for(
        difficulty,
        start_delay_ms=int(app.config.get('START_DELAY_MS', 1000)),
        input_feedback_ms=int(app.config.get('INPUT_FEEDBACK_MS', 500)),
        next_round_delay_ms=int(app.config.get('NEXT_ROUND_DELAY_MS', 1000)),
    )
    notifier = SocketIONotifier(row.game_code)
    manager = GameManager(
        difficulty,
        notifier,
        scheduler,
        timing=timing,
        discard_stale_timers=bool(app.config.get('DISCARD_STALE_TIMERS', True)),
    )
    live = LiveGame(row.game_code, manager, scheduler, lock)
    notifier.live = live
    _live_games[row.game_code] = live
    app.logger.info(f"[session-create] game={row.game_code} difficulty={difficulty.value} "
                    f"scheduler={type(scheduler).__name__}")
    return live


def get_live_game(game_code: str) -> Optional[LiveGame]:
    if not game_code:
        return None
    return _live_games.get(game_code.upper())


def end_session(game_code: str) -> None:
    """Notify clients, then drop the live game and its row."""
    game_code = game_code.upper()
    live = _live_games.pop(game_code, None)
    if live is not None:
        with live.lock:
            live.ended = True
    socketio.emit('session_ended', {'game_code': game_code}, to=room_for(game_code), namespace='/ws')
    try:
        GameSession.query.filter_by(game_code=game_code).delete()
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception(f"[session-end] game={game_code} failed to delete row")
    finally:
        from memorygrid.socketio_events import forget_owners
        forget_owners(game_code)
    current_app.logger.info(f"[session-end] game={game_code}")


def clear_sessions() -> None:
    _live_games.clear()
