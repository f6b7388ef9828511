import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from countnum.errors import (
    ActorNotFound,
    GameAlreadyStarted,
    InsufficientPlayers,
    InvalidInput,
    NoHistory,
    NotAllReady,
    PlayerNotFound,
    RoomFull,
    RoomNotFound,
)
from countnum.models import (
    ACTION_ADD,
    ACTION_DEDUCT,
    ACTION_TRANSFER,
    ActionLog,
    Player,
    Room,
    RoomHistory,
    generate_room_code,
    new_log_id,
    new_player_id,
)
from .validation import (
    MIN_PLAYERS,
    validate_max_players,
    validate_new_score,
    validate_player_name,
    validate_points,
    validate_room_code,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_MS = 24 * 60 * 60 * 1000
# Two opposite, equal-magnitude updates closer than this become one transfer log
TRANSFER_WINDOW_MS = 500


class RoomStore:
    """In-memory registry of rooms and a player -> room index.

    Every state transition of a room goes through this object. Operations
    validate everything they need before touching state, so a failure
    leaves the room exactly as it was.

    Flask serves requests on several threads, so each public operation runs
    under ``self.lock``. The lock is re-entrant: callers that need a stable
    view of a room while serializing it can hold it around the call.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._rooms: Dict[str, Room] = {}
        self._player_rooms: Dict[str, str] = {}
        self._clock = clock
        self.lock = threading.RLock()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _require_room(self, code) -> Room:
        room = self._rooms.get(code)
        if room is None:
            raise RoomNotFound(f'Room {code} not found')
        return room

    @staticmethod
    def _require_player(room: Room, player_id, error=PlayerNotFound) -> Player:
        player = room.find_player(player_id)
        if player is None:
            raise error()
        return player

    def _delete_room(self, code: str) -> None:
        room = self._rooms.pop(code)
        for p in room.players:
            if self._player_rooms.get(p.id) == code:
                del self._player_rooms[p.id]

    # ---- lifecycle ----

    def create_room(self, max_players, player_name, code=None) -> Tuple[Room, str]:
        """Create a room holding a single (unready, zero-score) player.

        When ``code`` is omitted a fresh code is generated.
        """
        max_players = validate_max_players(max_players)
        player_name = validate_player_name(player_name)
        with self.lock:
            if code is None:
                code = generate_room_code(lambda c: c in self._rooms)
            else:
                code = validate_room_code(code)
                if code in self._rooms:
                    raise InvalidInput(f'Room code {code} is already in use')

            player = Player(id=new_player_id(), name=player_name)
            room = Room(id=code, max_players=max_players, created_at=self._now_ms(), players=[player])
            self._rooms[code] = room
            self._player_rooms[player.id] = code
            logger.info("[room-create] room=%s player=%s (%s) max_players=%d", code, player.name, player.id, max_players)
            return room, player.id

    def join_room(self, code, player_name) -> Tuple[Room, str]:
        player_name = validate_player_name(player_name)
        with self.lock:
            room = self._require_room(code)
            if len(room.players) >= room.max_players:
                raise RoomFull()
            if room.is_playing:
                raise GameAlreadyStarted()

            player = Player(id=new_player_id(), name=player_name)
            room.players.append(player)
            self._player_rooms[player.id] = code
            logger.info("[room-join] room=%s player=%s (%s) players=%d/%d",
                        code, player.name, player.id, len(room.players), room.max_players)
            return room, player.id

    def get_room(self, code) -> Room:
        with self.lock:
            return self._require_room(code)

    def find_room_code_for_player(self, player_id) -> Optional[str]:
        with self.lock:
            return self._player_rooms.get(player_id)

    def leave_room(self, code, player_id) -> Tuple[Optional[Room], bool]:
        """Remove a player; the room is deleted once nobody is left.

        Returns ``(room, was_deleted)``. An unknown room is a no-op.
        """
        with self.lock:
            room = self._rooms.get(code)
            if room is None:
                return None, False

            room.players = [p for p in room.players if p.id != player_id]
            if self._player_rooms.get(player_id) == code:
                del self._player_rooms[player_id]

            if not room.players:
                self._delete_room(code)
                logger.info("[room-leave] room=%s player=%s left; room deleted", code, player_id)
                return None, True

            logger.info("[room-leave] room=%s player=%s left; players=%d", code, player_id, len(room.players))
            return room, False

    def cleanup_old_rooms(self, max_age_ms=DEFAULT_MAX_AGE_MS) -> int:
        """Delete every room older than ``max_age_ms``; returns how many went."""
        with self.lock:
            now = self._now_ms()
            expired = [code for code, room in self._rooms.items() if now - room.created_at > max_age_ms]
            for code in expired:
                self._delete_room(code)
            if expired:
                logger.info("[room-cleanup] removed=%d rooms=%s remaining=%d", len(expired), ','.join(expired), len(self._rooms))
            return len(expired)

    def get_room_count(self) -> int:
        with self.lock:
            return len(self._rooms)

    # ---- readiness ----

    def set_player_ready(self, code, player_id, is_ready) -> Room:
        with self.lock:
            room = self._require_room(code)
            player = self._require_player(room, player_id)
            player.is_ready = bool(is_ready)
            return room

    def start_game(self, code) -> Room:
        with self.lock:
            room = self._require_room(code)
            if len(room.players) < MIN_PLAYERS:
                raise InsufficientPlayers()
            if not all(p.is_ready for p in room.players):
                raise NotAllReady()
            room.is_playing = True
            logger.info("[room-start] room=%s players=%d", code, len(room.players))
            return room

    # ---- scoring ----

    def update_score(self, code, player_id, points, actor_id=None) -> Room:
        """Add ``points`` (any sign) to a player's score.

        ``actor_id`` names who made the change and defaults to the target.
        The previous player state is pushed onto the undo history.
        """
        with self.lock:
            room = self._require_room(code)
            points = validate_points(points)
            target = self._require_player(room, player_id)
            if actor_id is None:
                actor = target
            else:
                actor = self._require_player(room, actor_id, ActorNotFound)
            new_score = validate_new_score(target.score + points)

            now = self._now_ms()
            checkpoint = RoomHistory(timestamp=now, players=room.snapshot_players())

            target.score = new_score
            self._record_action(room, target, actor, points, now)
            room.history.append(checkpoint)
            return room

    def _record_action(self, room: Room, target: Player, actor: Player, points, now: int) -> None:
        last = room.action_logs[-1] if room.action_logs else None
        if last is not None and _completes_transfer(last, target, points, now):
            room.action_logs.pop()
            if points < 0:
                giver_id, giver_name = target.id, target.name
                receiver_id, receiver_name = last.target_id, last.target_name
            else:
                giver_id, giver_name = last.target_id, last.target_name
                receiver_id, receiver_name = target.id, target.name
            room.action_logs.append(ActionLog(
                id=new_log_id(),
                timestamp=now,
                action=ACTION_TRANSFER,
                actor_id=giver_id,
                actor_name=giver_name,
                target_id=receiver_id,
                target_name=receiver_name,
                amount=abs(points),
                recipient_id=receiver_id,
                recipient_name=receiver_name,
            ))
            logger.debug("[score-transfer] room=%s from=%s to=%s amount=%s", room.id, giver_id, receiver_id, abs(points))
            return

        room.action_logs.append(ActionLog(
            id=new_log_id(),
            timestamp=now,
            action=ACTION_ADD if points > 0 else ACTION_DEDUCT,
            actor_id=actor.id,
            actor_name=actor.name,
            target_id=target.id,
            target_name=target.name,
            amount=abs(points),
        ))

    def undo_score(self, code) -> Room:
        """Restore the players as they were before the latest score update.

        The action log is an audit trail and is left untouched.
        """
        with self.lock:
            room = self._require_room(code)
            if not room.history:
                raise NoHistory()

            checkpoint = room.history.pop()
            restored_ids = {p.id for p in checkpoint.players}
            for p in room.players:
                if p.id not in restored_ids and self._player_rooms.get(p.id) == code:
                    del self._player_rooms[p.id]
            for p in checkpoint.players:
                self._player_rooms[p.id] = code
            room.players = checkpoint.players
            logger.info("[score-undo] room=%s history_left=%d", code, len(room.history))
            return room


def _completes_transfer(last: ActionLog, target: Player, points, now: int) -> bool:
    """Whether this update is the second half of a give/take gesture."""
    if now - last.timestamp >= TRANSFER_WINDOW_MS:
        return False
    if abs(last.amount) != abs(points) or last.target_id == target.id:
        return False
    if last.action == ACTION_ADD:
        return points < 0
    return points > 0
