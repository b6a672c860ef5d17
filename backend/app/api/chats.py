from flask import Blueprint, jsonify, request
from app.services import chats as chat_service
from app.services.errors import ServiceError
from app.socketio_events import broadcast, chat_room

chats = Blueprint('chats', __name__)


def _is_create_chat_request_valid(data: dict) -> bool:
    participants = data.get('participants')
    if not participants or not isinstance(participants, list):
        return False
    messages = data.get('messages')
    if messages is None:
        return True
    return isinstance(messages, list) and all(isinstance(m, dict) for m in messages)


def _is_add_message_request_valid(data: dict) -> bool:
    return bool(data.get('msg')) and bool(data.get('msgFrom'))


@chats.route('/createChat', methods=['POST'])
def create_chat():
    data = request.get_json(silent=True) or {}
    if not _is_create_chat_request_valid(data):
        return jsonify({'error': 'Invalid chat creation request'}), 400

    try:
        chat = chat_service.save_chat(data['participants'], data.get('messages'))
    except ServiceError as exc:
        return jsonify({'error': f'Error creating a chat: {exc}'}), 500

    payload = chat.to_dict()
    broadcast('chatUpdate', {'chat': payload, 'type': 'created'})
    return jsonify(payload)


@chats.route('/<int:chat_id>/addMessage', methods=['POST'])
def add_message_to_chat(chat_id):
    data = request.get_json(silent=True) or {}
    if not _is_add_message_request_valid(data):
        return jsonify({'error': 'Invalid message request'}), 400

    try:
        message = chat_service.create_message(data['msg'], data['msgFrom'], data.get('msgDateTime'), 'direct')
        chat = chat_service.add_message_to_chat(chat_id, message.id)
    except ServiceError as exc:
        return jsonify({'error': f'Error adding message to chat: {exc}'}), 500

    payload = chat.to_dict()
    broadcast('chatUpdate', {'chat': payload, 'type': 'newMessage'}, room=chat_room(chat_id))
    return jsonify(payload)


@chats.route('/<int:chat_id>', methods=['GET'])
def get_chat(chat_id):
    try:
        chat = chat_service.get_chat(chat_id)
    except ServiceError as exc:
        return jsonify({'error': f'Error retrieving chat: {exc}'}), 500
    return jsonify(chat.to_dict())


@chats.route('/getChatsByUser/<string:username>', methods=['GET'])
def get_chats_by_user(username):
    try:
        found = chat_service.get_chats_by_participants([username])
    except ServiceError as exc:
        return jsonify({'error': f'Error retrieving chat: {exc}'}), 500
    return jsonify([c.to_dict() for c in found])


@chats.route('/<int:chat_id>/addParticipant', methods=['POST'])
def add_participant_to_chat(chat_id):
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    if not username:
        return jsonify({'error': 'Invalid participant request'}), 400

    try:
        chat = chat_service.add_participant_to_chat(chat_id, username)
    except ServiceError as exc:
        return jsonify({'error': f'Error adding participant to chat: {exc}'}), 500

    payload = chat.to_dict()
    broadcast('chatUpdate', {'chat': payload, 'type': 'newParticipant'})
    return jsonify(payload)
