from flask import Blueprint, current_app, jsonify

from gomoku.errors import RoomNotFound

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Bomb Gomoku server!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'rooms': current_app.extensions['gomoku_rooms'].stats()})

@main.route('/api/leaderboard')
def get_leaderboard():
    return jsonify(current_app.extensions['gomoku_leaderboard'].snapshot())

@main.route('/api/rooms/<string:room_code>')
def get_room_state(room_code):
    """
    Returns the full state of a room.
    """
    try:
        room = current_app.extensions['gomoku_rooms'].get(room_code)
    except RoomNotFound as exc:
        return jsonify({'error': str(exc)}), 404
    return jsonify(room.to_dict())
