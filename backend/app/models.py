from app import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
import json
import uuid


def utcnow():
    # Naive UTC, matching what the database hands back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    biography = db.Column(db.Text, nullable=False, default='')
    date_joined = db.Column(db.DateTime, nullable=False, default=utcnow)
    chat_links = db.relationship('ChatParticipant', back_populates='user', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            '_id': self.id,
            'username': self.username,
            'biography': self.biography or '',
            'dateJoined': isoformat(self.date_joined),
        }


class ChatParticipant(db.Model):
    __tablename__ = 'chat_participant'
    __table_args__ = (db.UniqueConstraint('chat_id', 'user_id', name='uq_chat_participant'),)
    # Autoincrement id keeps participants in the order they were added
    id = db.Column(db.Integer, primary_key=True)
    chat_id = db.Column(db.Integer, db.ForeignKey('chat.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    chat = db.relationship('Chat', back_populates='participant_links')
    user = db.relationship('User', back_populates='chat_links')


class Chat(db.Model):
    __tablename__ = 'chat'
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    participant_links = db.relationship(
        'ChatParticipant', back_populates='chat', order_by='ChatParticipant.id', cascade='all, delete-orphan'
    )
    messages = db.relationship('Message', back_populates='chat', order_by='Message.id')

    @property
    def participants(self):
        return [link.user for link in self.participant_links]

    def has_participant(self, user):
        return any(link.user is user or link.user_id == user.id for link in self.participant_links)

    def add_participant(self, user):
        self.participant_links.append(ChatParticipant(user=user))

    def touch(self):
        self.updated_at = utcnow()

    def to_dict(self):
        """Chat with participant usernames and full message records."""
        return {
            '_id': self.id,
            'participants': [u.username for u in self.participants],
            'messages': [m.to_dict() for m in self.messages],
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }


class Message(db.Model):
    __tablename__ = 'message'
    id = db.Column(db.Integer, primary_key=True)
    msg = db.Column(db.Text, nullable=False)
    msg_from = db.Column(db.String(64), nullable=False, index=True)
    msg_date_time = db.Column(db.DateTime, nullable=False, default=utcnow)
    type = db.Column(db.String(16), nullable=False, default='global')  # direct, global
    chat_id = db.Column(db.Integer, db.ForeignKey('chat.id'), nullable=True, index=True)
    chat = db.relationship('Chat', back_populates='messages')

    @property
    def sender(self):
        return User.query.filter_by(username=self.msg_from).first()

    def to_dict(self):
        sender = self.sender
        return {
            '_id': self.id,
            'msg': self.msg,
            'msgFrom': self.msg_from,
            'msgDateTime': isoformat(self.msg_date_time),
            'type': self.type,
            'user': {'_id': sender.id, 'username': sender.username} if sender else None,
        }


def generate_game_id():
    return str(uuid.uuid4())


class GameInstance(db.Model):
    __tablename__ = 'game_instance'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.String(36), unique=True, nullable=False, index=True, default=generate_game_id)
    game_type = db.Column(db.String(32), nullable=False, index=True)
    status = db.Column(db.String(32), nullable=False, index=True)  # mirrors state['status'] for filtering
    players = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of usernames
    state = db.Column(db.Text, nullable=False, default='{}')  # JSON-encoded game state
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def player_list(self):
        return json.loads(self.players) if self.players else []

    @property
    def state_dict(self):
        return json.loads(self.state) if self.state else {}

    def to_dict(self):
        return {
            'gameID': self.game_id,
            'gameType': self.game_type,
            'players': self.player_list,
            'state': self.state_dict,
        }
