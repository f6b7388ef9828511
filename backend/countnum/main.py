from datetime import datetime, timezone
from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the countnum score server!'})

@main.route('/api/health')
def health():
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        'rooms': current_app.extensions['room_store'].get_room_count(),
    })
