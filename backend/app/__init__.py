from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

# All real-time traffic lives on this namespace
SOCKET_NAMESPACE = '/ws'

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from app.routes import main
    flask_app.register_blueprint(main)

    from app.api.users import users
    flask_app.register_blueprint(users, url_prefix='/api/user')

    from app.api.messages import messages
    flask_app.register_blueprint(messages, url_prefix='/api/message')

    from app.api.chats import chats
    flask_app.register_blueprint(chats, url_prefix='/api/chat')

    from app.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from app.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({'error': exc.description}), exc.code

    # Flask-Login user loader
    from app.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Login required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from app.models import User, Chat, Message
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = []
            for u in ['testuser1', 'testuser2', 'testuser3']:
                user = User(username=u, biography=f'Hi, I am {u}.')
                user.set_password('password')
                db.session.add(user)
                users.append(user)

            # Seed a direct chat between the first two users
            chat = Chat()
            chat.add_participant(users[0])
            chat.add_participant(users[1])
            chat.messages.append(Message(msg='Welcome!', msg_from=users[0].username, type='direct'))
            db.session.add(chat)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
