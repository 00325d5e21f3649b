from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from memorygrid.extensions import socketio
from memorygrid.services.memory.sessions import end_session, get_live_game, room_for
from typing import Dict, Any
import time


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*_args):
    # On disconnect, if this socket owned a game and no other owner
    # remains, end the session for that game code
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    game_code = ctx.get('game_code')
    if ctx.get('is_session_owner') and game_code:
        _owner_count[game_code] = max(0, _owner_count.get(game_code, 0) - 1)
        # In tests, end immediately for determinism; in prod, allow grace period
        if current_app.config.get('TESTING'):
            if _owner_count.get(game_code, 0) == 0 and get_live_game(game_code):
                end_session(game_code)
            return
        _schedule_end_if_no_owner(game_code, float(current_app.config.get('OWNER_GRACE_SEC', 2.0)))


def handle_join_game(data):
    game_code = (data or {}).get('game_code')
    is_session_owner = bool((data or {}).get('is_session_owner'))
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    game_code = game_code.upper()
    room = room_for(game_code)
    join_room(room)
    # Track session owner presence and socket context
    _sid_to_ctx[_get_sid()] = {'game_code': game_code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[game_code] = _owner_count.get(game_code, 0) + 1
        _cancel_scheduled_end(game_code)
    emit('joined', {'room': room})
    live = get_live_game(game_code)
    if live:
        emit('state_update', {'game_code': game_code, 'state': live.snapshot()})


def handle_leave_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    game_code = game_code.upper()
    room = room_for(game_code)
    leave_room(room)
    emit('left', {'room': room})
    # Explicit quit by an owner ends the game immediately
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_session_owner') and ctx.get('game_code') == game_code:
        _sid_to_ctx.pop(_get_sid(), None)
        _owner_count.pop(game_code, None)
        if get_live_game(game_code):
            end_session(game_code)


def handle_start_game(data):
    live = get_live_game((data or {}).get('game_code'))
    if not live:
        emit('error', {'message': 'Game not found'})
        return
    live.start()


def handle_cell_click(data):
    data = data or {}
    live = get_live_game(data.get('game_code'))
    if not live:
        emit('error', {'message': 'Game not found'})
        return
    cell = data.get('cell')
    if isinstance(cell, bool) or not isinstance(cell, int) or not 0 <= cell < live.manager.cell_count:
        emit('error', {'message': f'cell must be an integer between 0 and {live.manager.cell_count - 1}'})
        return
    live.click(cell)


def handle_ping(data):
    emit('pong', data or {})

# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}

def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _schedule_end_if_no_owner(game_code: str, delay_sec: float = 2.0) -> None:
    if _owner_count.get(game_code, 0) > 0:
        return
    _end_deadline[game_code] = time.time() + delay_sec
    app = current_app._get_current_object()

    def _runner(code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _owner_count.get(code, 0) == 0 and _end_deadline.get(code) == deadline:
            _end_deadline.pop(code, None)
            with app.app_context():
                if get_live_game(code):
                    end_session(code)

    socketio.start_background_task(_runner, game_code, _end_deadline[game_code])

def _cancel_scheduled_end(game_code: str) -> None:
    _end_deadline.pop(game_code, None)

def forget_owners(game_code: str) -> None:
    """Drop owner bookkeeping for an ended game so a reused code starts clean."""
    _owner_count.pop(game_code, None)
    _end_deadline.pop(game_code, None)
    for sid in [s for s, ctx in _sid_to_ctx.items() if ctx.get('game_code') == game_code]:
        _sid_to_ctx.pop(sid, None)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join_game', handle_join_game, namespace=namespace)
        socketio.on_event('leave_game', handle_leave_game, namespace=namespace)
        socketio.on_event('start_game', handle_start_game, namespace=namespace)
        socketio.on_event('cell_click', handle_cell_click, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
