from flask import Blueprint, jsonify, request, current_app
from countnum.errors import InvalidInput, RoomError
from countnum.services.rooms.store import RoomStore
from countnum.services.rooms.validation import (
    validate_max_players,
    validate_player_name,
    validate_points,
    validate_ready_flag,
)


rooms = Blueprint('rooms', __name__)


def _store() -> RoomStore:
    return current_app.extensions['room_store']


def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _require_player_id(data: dict) -> str:
    player_id = data.get('playerId')
    if not player_id or not isinstance(player_id, str):
        raise InvalidInput('Player ID is required')
    return player_id


@rooms.errorhandler(RoomError)
def handle_room_error(exc: RoomError):
    current_app.logger.info(f"[room-error] {request.method} {request.path} kind={exc.kind} message={exc.message}")
    return jsonify(exc.to_dict()), exc.status_code


@rooms.route('/rooms', methods=['POST'])
def create_room():
    data = _body()
    name = validate_player_name(data.get('playerName'))
    max_players = validate_max_players(data.get('maxPlayers'))
    store = _store()
    with store.lock:
        room, player_id = store.create_room(max_players, name)
        payload = {'room': room.to_dict(), 'playerId': player_id}
    return jsonify(payload), 201


@rooms.route('/rooms/<string:room_code>/join', methods=['POST'])
def join_room(room_code):
    data = _body()
    name = validate_player_name(data.get('playerName'))
    store = _store()
    with store.lock:
        room, player_id = store.join_room(room_code.upper(), name)
        payload = {'room': room.to_dict(), 'playerId': player_id}
    return jsonify(payload)


@rooms.route('/rooms/<string:room_code>', methods=['GET'])
def get_room(room_code):
    store = _store()
    with store.lock:
        room = store.get_room(room_code.upper())
        return jsonify({'room': room.to_dict()})


@rooms.route('/rooms/<string:room_code>/ready', methods=['PUT'])
def set_ready(room_code):
    data = _body()
    player_id = _require_player_id(data)
    is_ready = validate_ready_flag(data.get('isReady'))
    store = _store()
    with store.lock:
        room = store.set_player_ready(room_code.upper(), player_id, is_ready)
        payload = {'room': room.to_dict()}
    current_app.logger.info(f"[ready] room={room_code.upper()} player={player_id} ready={is_ready}")
    return jsonify(payload)


@rooms.route('/rooms/<string:room_code>/start', methods=['POST'])
def start_game(room_code):
    store = _store()
    with store.lock:
        room = store.start_game(room_code.upper())
        payload = {'room': room.to_dict()}
    return jsonify(payload)


@rooms.route('/rooms/<string:room_code>/score', methods=['PUT'])
def update_score(room_code):
    data = _body()
    player_id = _require_player_id(data)
    points = validate_points(data.get('points'))
    actor_id = data.get('actorId') or None
    store = _store()
    with store.lock:
        room = store.update_score(room_code.upper(), player_id, points, actor_id=actor_id)
        payload = {'room': room.to_dict()}
    current_app.logger.info(f"[score] room={room_code.upper()} player={player_id} points={points} actor={actor_id or player_id}")
    return jsonify(payload)


@rooms.route('/rooms/<string:room_code>/undo', methods=['POST'])
def undo_score(room_code):
    store = _store()
    with store.lock:
        room = store.undo_score(room_code.upper())
        payload = {'room': room.to_dict()}
    return jsonify(payload)


@rooms.route('/rooms/<string:room_code>/leave', methods=['DELETE'])
def leave_room(room_code):
    data = _body()
    player_id = _require_player_id(data)
    store = _store()
    with store.lock:
        room, was_deleted = store.leave_room(room_code.upper(), player_id)
        payload = {'room': room.to_dict() if room else None, 'wasDeleted': was_deleted}
    return jsonify(payload)


@rooms.route('/players/<string:player_id>/room', methods=['GET'])
def find_player_room(player_id):
    """Lets a reconnecting client find the room its stored player id is in."""
    code = _store().find_room_code_for_player(player_id)
    if code is None:
        return jsonify({'error': 'Player is not in any room', 'kind': 'PlayerNotFound'}), 404
    return jsonify({'roomId': code})
