from datetime import datetime, timezone
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app import db
from app.models import Message, User, utcnow
from .errors import ServiceError, NotFoundError

MESSAGE_TYPES = ('direct', 'global')


def parse_date_time(value):
    """Parse an ISO-8601 timestamp from a client into naive UTC.

    Missing values fall back to the current time.
    """
    if not value:
        return utcnow()
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError as exc:
            raise ServiceError(f'Invalid date: {value}') from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def build_message(msg: str, msg_from: str, msg_date_time=None, msg_type: str = 'global') -> Message:
    if msg_type not in MESSAGE_TYPES:
        raise ServiceError(f'Invalid message type: {msg_type}')
    return Message(
        msg=msg,
        msg_from=msg_from,
        msg_date_time=parse_date_time(msg_date_time),
        type=msg_type,
    )


def save_message(msg: str, msg_from: str, msg_date_time=None) -> Message:
    """Save a message to the global channel. The sender must exist."""
    if not User.query.filter_by(username=msg_from).first():
        raise NotFoundError(f'User not found: {msg_from}')
    message = build_message(msg, msg_from, msg_date_time, 'global')
    try:
        db.session.add(message)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise ServiceError(f'Database error: {exc}') from exc
    current_app.logger.info(f"[message-global] message={message.id} from={msg_from}")
    return message


def get_messages():
    return Message.query.filter_by(type='global').order_by(Message.msg_date_time, Message.id).all()
