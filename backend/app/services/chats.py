"""Chat services.

A chat is an ordered list of participants plus an ordered list of direct
messages. Every function either returns the affected model or raises a
``ServiceError`` whose message is safe to show to clients.
"""
from typing import Iterable, List, Optional
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app import db
from app.models import Chat, ChatParticipant, Message, User
from .errors import ServiceError, NotFoundError, ConflictError
from .messages import build_message


def _users_for_usernames(usernames: Iterable[str]) -> List[User]:
    users = []
    for username in usernames:
        user = User.query.filter_by(username=username).first()
        if not user:
            raise NotFoundError(f'User not found: {username}')
        users.append(user)
    return users


def save_chat(participants: List[str], messages: Optional[List[dict]] = None) -> Chat:
    """Create a chat for the given usernames, saving any initial messages as direct messages."""
    try:
        chat = Chat()
        for message in messages or []:
            chat.messages.append(build_message(
                message.get('msg'),
                message.get('msgFrom'),
                message.get('msgDateTime'),
                'direct',
            ))
        seen = set()
        for user in _users_for_usernames(participants):
            if user.id in seen:
                continue
            seen.add(user.id)
            chat.add_participant(user)
        db.session.add(chat)
        db.session.commit()
    except (ServiceError, SQLAlchemyError) as exc:
        db.session.rollback()
        current_app.logger.warning(f"[chat-create] failed: {exc}")
        raise ServiceError(f'Error when saving chat: {exc}') from exc
    current_app.logger.info(f"[chat-create] chat={chat.id} participants={len(seen)} messages={len(chat.messages)}")
    return chat


def create_message(msg: str, msg_from: str, msg_date_time=None, msg_type: str = 'direct') -> Message:
    try:
        message = build_message(msg, msg_from, msg_date_time, msg_type)
        db.session.add(message)
        db.session.commit()
    except (ServiceError, SQLAlchemyError) as exc:
        db.session.rollback()
        raise ServiceError(f'Error when creating message: {exc}') from exc
    return message


def add_message_to_chat(chat_id: int, message_id: int) -> Chat:
    chat = db.session.get(Chat, chat_id)
    if not chat:
        raise NotFoundError('Chat not found')
    message = db.session.get(Message, message_id)
    if not message:
        raise NotFoundError('Message not found')
    try:
        message.chat = chat
        chat.touch()
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise ServiceError(f'Error when adding message to chat: {exc}') from exc
    current_app.logger.info(f"[chat-message] chat={chat.id} message={message.id} from={message.msg_from}")
    return chat


def get_chat(chat_id: int) -> Chat:
    chat = db.session.get(Chat, chat_id)
    if not chat:
        raise NotFoundError('Chat not found')
    return chat


def get_chats_by_participants(usernames: List[str]) -> List[Chat]:
    """Chats that include every one of the given users.

    Unknown usernames yield an empty list rather than an error.
    """
    try:
        users = _users_for_usernames(usernames)
    except NotFoundError:
        return []
    if not users:
        return []
    query = Chat.query
    for user in users:
        query = query.filter(Chat.participant_links.any(ChatParticipant.user_id == user.id))
    return query.order_by(Chat.id).all()


def add_participant_to_chat(chat_id: int, username: str) -> Chat:
    user = User.query.filter_by(username=username).first()
    if not user:
        raise NotFoundError('User not found')
    chat = db.session.get(Chat, chat_id)
    if not chat or chat.has_participant(user):
        raise ConflictError('Chat not found or user already a participant')
    try:
        chat.add_participant(user)
        chat.touch()
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise ServiceError(f'Error when adding participant to chat: {exc}') from exc
    current_app.logger.info(f"[chat-participant] chat={chat.id} username={username}")
    return chat
