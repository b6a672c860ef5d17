from flask import Blueprint, jsonify, request
from app.services.games import manager
from app.services.errors import ServiceError
from app.socketio_events import broadcast, game_room

games = Blueprint('games', __name__)


def _player_request(data: dict):
    game_id = data.get('gameID')
    player_id = data.get('playerID')
    if not isinstance(game_id, str) or not isinstance(player_id, str) or not game_id or not player_id:
        return None, None
    return game_id, player_id


@games.route('/create', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    game_type = data.get('gameType')
    if game_type not in manager.GAME_TYPES:
        return jsonify({'error': 'Invalid game type'}), 400

    try:
        game = manager.create_game(game_type)
    except ServiceError as exc:
        return jsonify({'error': f'Error when creating game: {exc}'}), 500
    return jsonify({'gameID': game.game_id})


@games.route('/join', methods=['POST'])
def join_game():
    game_id, player_id = _player_request(request.get_json(silent=True) or {})
    if not game_id:
        return jsonify({'error': 'Invalid request'}), 400

    try:
        game = manager.join_game(game_id, player_id)
    except ServiceError as exc:
        return jsonify({'error': f'Error when joining game: {exc}'}), 500

    payload = game.to_dict()
    broadcast('gameUpdate', {'gameState': payload}, room=game_room(game_id))
    return jsonify(payload)


@games.route('/leave', methods=['POST'])
def leave_game():
    game_id, player_id = _player_request(request.get_json(silent=True) or {})
    if not game_id:
        return jsonify({'error': 'Invalid request'}), 400

    try:
        payload = manager.leave_game(game_id, player_id)
    except ServiceError as exc:
        return jsonify({'error': f'Error when leaving game: {exc}'}), 500

    broadcast('gameUpdate', {'gameState': payload}, room=game_room(game_id))
    return jsonify(payload)


@games.route('/games', methods=['GET'])
def get_games():
    game_type = request.args.get('gameType') or None
    status = request.args.get('status') or None
    return jsonify([g.to_dict() for g in manager.get_games(game_type, status)])
