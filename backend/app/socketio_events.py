from flask import current_app, request
from flask_socketio import join_room, leave_room, emit
from app import socketio, SOCKET_NAMESPACE
from app.services.errors import ServiceError
from app.services.games import manager


def chat_room(chat_id) -> str:
    return f"chat:{chat_id}"


def game_room(game_id) -> str:
    return f"game:{game_id}"


def broadcast(event: str, payload: dict, room: str = None) -> None:
    """Emit from outside a socket handler, e.g. an HTTP route.

    Without a room the event goes to every connected client.
    """
    if room:
        socketio.emit(event, payload, to=room, namespace=SOCKET_NAMESPACE)
    else:
        socketio.emit(event, payload, namespace=SOCKET_NAMESPACE)


def handle_connect():
    emit('connected', {'message': f'Connected to {SOCKET_NAMESPACE}'})


def handle_disconnect(*args):
    # Flask-SocketIO drops the socket from all of its rooms for us
    current_app.logger.debug(f"[socket-disconnect] sid={request.sid}")


def handle_join_chat(chat_id=None):
    if chat_id in (None, ''):
        emit('error', {'message': 'chatID is required'})
        return
    room = chat_room(chat_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_chat(chat_id=None):
    if chat_id in (None, ''):
        return
    room = chat_room(chat_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_join_game(game_id=None):
    if not game_id:
        emit('error', {'message': 'gameID is required'})
        return
    room = game_room(game_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_game(game_id=None):
    if not game_id:
        emit('error', {'message': 'gameID is required'})
        return
    room = game_room(game_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_make_move(data=None):
    """Apply a move and fan the new state out to the game room.

    Expected payload: ``{gameID, move: {playerID, gameID, move: {numObjects}}}``.
    Failures go back to the sender only, as ``gameError``.
    """
    data = data if isinstance(data, dict) else {}
    game_id = data.get('gameID')
    move = data.get('move') if isinstance(data.get('move'), dict) else {}
    player_id = move.get('playerID')
    num_objects = (move.get('move') or {}).get('numObjects')

    if not game_id or not player_id:
        emit('gameError', {'player': player_id, 'error': 'Invalid move: gameID and playerID are required'})
        return
    if move.get('gameID') and move.get('gameID') != game_id:
        emit('gameError', {'player': player_id, 'error': 'Invalid move: game ID mismatch'})
        return

    try:
        game = manager.make_move(game_id, player_id, num_objects)
    except ServiceError as exc:
        current_app.logger.info(f"[game-move] rejected game={game_id} player={player_id}: {exc}")
        emit('gameError', {'player': player_id, 'error': str(exc)})
        return

    emit('gameUpdate', {'gameState': game.to_dict()}, to=game_room(game_id))


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the shared namespace."""
    socketio.on_event('connect', handle_connect, namespace=SOCKET_NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=SOCKET_NAMESPACE)
    socketio.on_event('joinChat', handle_join_chat, namespace=SOCKET_NAMESPACE)
    socketio.on_event('leaveChat', handle_leave_chat, namespace=SOCKET_NAMESPACE)
    socketio.on_event('joinGame', handle_join_game, namespace=SOCKET_NAMESPACE)
    socketio.on_event('leaveGame', handle_leave_game, namespace=SOCKET_NAMESPACE)
    socketio.on_event('makeMove', handle_make_move, namespace=SOCKET_NAMESPACE)
