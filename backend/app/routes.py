from flask import Blueprint, jsonify
from sqlalchemy import text
from app import db

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the game lounge server!'})

@main.route('/api/health')
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as exc:
        return jsonify({'status': 'error', 'error': str(exc)}), 500
    return jsonify({'status': 'ok'})
