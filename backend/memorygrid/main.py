from flask import Blueprint, jsonify
from memorygrid.models import GameSession

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the memory grid game server!'})

@main.route('/games/active')
def get_active_games():
    sessions = GameSession.query.order_by(GameSession.id).all()
    return jsonify([s.to_dict() for s in sessions])
