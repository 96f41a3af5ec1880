from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return 'Bingo Socket.IO server is running'


@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'rooms': len(current_app.extensions['bingo'])})


@main.route('/rooms/<string:room_code>')
def room_state(room_code):
    room = current_app.extensions['bingo'].get(room_code)
    if room is None:
        return jsonify({'error': 'Room not found'}), 404
    with room.lock:
        return jsonify(room.snapshot())
