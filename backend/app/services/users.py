from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app import db
from app.models import User
from .errors import ServiceError, NotFoundError, ConflictError


def _get_or_raise(username: str) -> User:
    user = User.query.filter_by(username=username).first()
    if not user:
        raise NotFoundError('User not found')
    return user


def _commit() -> None:
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise ServiceError(f'Database error: {exc}') from exc


def save_user(username: str, password: str, biography: str = '') -> User:
    """Create a user with a hashed password."""
    if User.query.filter_by(username=username).first():
        raise ConflictError('Username already exists')
    user = User(username=username, biography=biography or '')
    user.set_password(password)
    db.session.add(user)
    _commit()
    current_app.logger.info(f"[user-create] user={user.id} username={username}")
    return user


def login_user_credentials(username: str, password: str):
    """Return the user matching the credentials, or None."""
    user = User.query.filter_by(username=username).first()
    if user and user.check_password(password):
        return user
    return None


def get_user_by_username(username: str) -> User:
    return _get_or_raise(username)


def get_users_list():
    return User.query.order_by(User.id).all()


def delete_user_by_username(username: str) -> dict:
    """Delete a user and return its last serialized form.

    Chats the user was the only participant of are deleted along with
    their messages, so no chat is left without participants.
    """
    user = _get_or_raise(username)
    payload = user.to_dict()
    orphaned = [link.chat for link in user.chat_links if len(link.chat.participant_links) == 1]
    for chat in orphaned:
        for message in list(chat.messages):
            db.session.delete(message)
        db.session.delete(chat)
    db.session.delete(user)
    _commit()
    current_app.logger.info(f"[user-delete] username={username} chats_removed={len(orphaned)}")
    return payload


def reset_password(username: str, password: str) -> User:
    user = _get_or_raise(username)
    user.set_password(password)
    _commit()
    current_app.logger.info(f"[user-password] username={username}")
    return user


def update_biography(username: str, biography: str) -> User:
    user = _get_or_raise(username)
    user.biography = biography
    _commit()
    return user
