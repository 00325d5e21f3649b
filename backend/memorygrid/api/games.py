from flask import Blueprint, jsonify, request, current_app
import time
from memorygrid.services.memory import UnknownDifficulty, describe_difficulties
from memorygrid.services.memory.sessions import create_session, end_session, get_live_game


games = Blueprint('games', __name__)

_last_controller_action: dict[str, float] = {}


def _game_not_found():
    return jsonify({'error': 'Game not found'}), 404


def _parse_cell(raw, cell_count: int):
    """Return (cell, error). Booleans and floats with a fraction are rejected."""
    if raw is None:
        return None, 'cell is required'
    if isinstance(raw, bool):
        return None, 'cell must be an integer'
    try:
        cell = int(raw)
    except (TypeError, ValueError):
        return None, 'cell must be an integer'
    if isinstance(raw, float) and raw != cell:
        return None, 'cell must be an integer'
    if not 0 <= cell < cell_count:
        return None, f'cell must be between 0 and {cell_count - 1}'
    return cell, None


@games.route('/difficulties', methods=['GET'])
def list_difficulties():
    return jsonify(describe_difficulties())


@games.route('/create', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    try:
        live = create_session(current_app._get_current_object(), data.get('difficulty'))
    except UnknownDifficulty as exc:
        return jsonify({'error': str(exc)}), 400
    return jsonify({
        'message': 'New game created!',
        'game_code': live.game_code,
        'state': live.snapshot(),
    }), 201


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    live = get_live_game(game_code)
    if not live:
        return _game_not_found()
    payload = live.snapshot()
    payload['game_code'] = live.game_code
    return jsonify(payload)


@games.route('/<string:game_code>/start', methods=['POST'])
def start_game(game_code):
    # Debounce
    try:
        debounce_ms = int(current_app.config.get('CONTROLLER_DEBOUNCE_MS', 0))
    except Exception:
        debounce_ms = 0
    if debounce_ms > 0:
        key = f"start:{game_code.upper()}"
        now = time.time() * 1000.0
        last = _last_controller_action.get(key, 0)
        if now - last < debounce_ms:
            return jsonify({'message': 'debounced'}), 202
        _last_controller_action[key] = now

    live = get_live_game(game_code)
    if not live:
        return _game_not_found()
    payload = live.start()
    current_app.logger.info(f"[start] game={live.game_code} epoch={payload['epoch']}")
    payload['game_code'] = live.game_code
    return jsonify(payload)


@games.route('/<string:game_code>/input', methods=['POST'])
def submit_input(game_code):
    data = request.get_json(silent=True) or {}
    live = get_live_game(game_code)
    if not live:
        return _game_not_found()
    cell, error = _parse_cell(data.get('cell'), live.manager.cell_count)
    if error:
        return jsonify({'error': error}), 400
    payload = live.click(cell)
    payload['game_code'] = live.game_code
    return jsonify(payload)


@games.route('/<string:game_code>', methods=['DELETE'])
def delete_game(game_code):
    live = get_live_game(game_code)
    if not live:
        return _game_not_found()
    end_session(live.game_code)
    return jsonify({'message': 'Session ended', 'game_code': live.game_code})
