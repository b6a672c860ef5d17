from flask import Blueprint, jsonify, request, current_app
from flask_login import login_user, logout_user
from app.services import users as user_service
from app.services.errors import ServiceError
from app.socketio_events import broadcast

users = Blueprint('users', __name__)


def _is_text(*values) -> bool:
    return all(isinstance(v, str) and v for v in values)


def _user_update(user_payload: dict, update_type: str) -> None:
    broadcast('userUpdate', {'user': user_payload, 'type': update_type})


@users.route('/signup', methods=['POST'])
def signup():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    biography = data.get('biography')
    if not _is_text(username, password) or not (biography is None or isinstance(biography, str)):
        return jsonify({'error': 'Invalid user body'}), 400

    try:
        user = user_service.save_user(username, password, biography or '')
    except ServiceError as exc:
        return jsonify({'error': f'Error when saving user: {exc}'}), 500

    login_user(user, remember=True)
    payload = user.to_dict()
    _user_update(payload, 'created')
    return jsonify(payload)


@users.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not _is_text(username, password):
        return jsonify({'error': 'Invalid login body'}), 400

    user = user_service.login_user_credentials(username, password)
    if not user:
        current_app.logger.info(f"[login] rejected username={username}")
        return jsonify({'error': 'Invalid username or password'}), 401
    login_user(user, remember=True)
    return jsonify(user.to_dict())


@users.route('/logout', methods=['POST'])
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})


@users.route('/getUser/<string:username>', methods=['GET'])
def get_user(username):
    try:
        user = user_service.get_user_by_username(username)
    except ServiceError as exc:
        return jsonify({'error': f'Error when getting user: {exc}'}), 500
    return jsonify(user.to_dict())


@users.route('/getUsers', methods=['GET'])
def get_users():
    return jsonify([u.to_dict() for u in user_service.get_users_list()])


@users.route('/deleteUser/<string:username>', methods=['DELETE'])
def delete_user(username):
    try:
        payload = user_service.delete_user_by_username(username)
    except ServiceError as exc:
        return jsonify({'error': f'Error when deleting user: {exc}'}), 500
    _user_update(payload, 'deleted')
    return jsonify(payload)


@users.route('/resetPassword', methods=['PATCH'])
def reset_password():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    min_length = int(current_app.config.get('MIN_PASSWORD_LENGTH', 6))
    if not _is_text(username, password):
        return jsonify({'error': 'Invalid user body'}), 400
    if len(password) < min_length:
        return jsonify({'error': f'Password must be at least {min_length} characters long'}), 400

    try:
        user = user_service.reset_password(username, password)
    except ServiceError as exc:
        return jsonify({'error': f'Error when updating user password: {exc}'}), 500
    payload = user.to_dict()
    _user_update(payload, 'updated')
    return jsonify(payload)


@users.route('/updateBiography', methods=['PATCH'])
def update_biography():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    biography = data.get('biography')
    # An empty biography is allowed, a missing one is not
    if not _is_text(username) or not isinstance(biography, str):
        return jsonify({'error': 'Invalid user body'}), 400

    try:
        user = user_service.update_biography(username, biography)
    except ServiceError as exc:
        return jsonify({'error': f'Error when updating user biography: {exc}'}), 500
    payload = user.to_dict()
    _user_update(payload, 'updated')
    return jsonify(payload)
