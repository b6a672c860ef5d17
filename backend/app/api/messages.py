from flask import Blueprint, jsonify, request
from app.services import messages as message_service
from app.services.errors import ServiceError
from app.socketio_events import broadcast

messages = Blueprint('messages', __name__)


@messages.route('/addMessage', methods=['POST'])
def add_message():
    data = request.get_json(silent=True) or {}
    message = data.get('messageToAdd') or {}
    if not isinstance(message, dict) or not message.get('msg') or not message.get('msgFrom'):
        return jsonify({'error': 'Invalid message body'}), 400

    try:
        saved = message_service.save_message(message['msg'], message['msgFrom'], message.get('msgDateTime'))
    except ServiceError as exc:
        return jsonify({'error': f'Error when adding a message: {exc}'}), 500

    payload = saved.to_dict()
    broadcast('messageUpdate', {'msg': payload})
    return jsonify(payload)


@messages.route('/getMessages', methods=['GET'])
def get_messages():
    return jsonify([m.to_dict() for m in message_service.get_messages()])
