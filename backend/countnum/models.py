from collections import deque
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional
import random
import string
import uuid

ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
HISTORY_LIMIT = 50
ACTION_LOG_LIMIT = 100

ACTION_ADD = 'add'
ACTION_DEDUCT = 'deduct'
ACTION_TRANSFER = 'transfer'


def generate_room_code(is_taken: Callable[[str], bool], length=ROOM_CODE_LENGTH):
    """Generate a short room code that is not used by a live room."""
    while True:
        code = ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))
        if not is_taken(code):
            return code


def new_player_id() -> str:
    return f"player_{uuid.uuid4().hex}"


def new_log_id() -> str:
    return f"log_{uuid.uuid4().hex}"


def _iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc).isoformat().replace('+00:00', 'Z')


@dataclass
class Player:
    id: str
    name: str
    score: float = 0
    is_ready: bool = False

    def clone(self) -> 'Player':
        # All fields are immutable scalars, so a field copy is a full value copy
        return replace(self)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'isReady': self.is_ready,
        }


@dataclass
class RoomHistory:
    """Undo checkpoint for one score update.

    ``players`` is the player list as it was *before* that update was
    applied, not after it, so undoing restores exactly this list. Each
    entry in a room's serialized ``history`` therefore shows the scores
    one update back from the entry that follows it (or from the live
    players, for the newest entry).
    """
    timestamp: int
    players: List[Player]

    def to_dict(self):
        return {
            'timestamp': self.timestamp,
            'players': [p.to_dict() for p in self.players],
        }


@dataclass
class ActionLog:
    id: str
    timestamp: int
    action: str
    actor_id: str
    actor_name: str
    target_id: str
    target_name: str
    amount: float
    recipient_id: Optional[str] = None
    recipient_name: Optional[str] = None

    def to_dict(self):
        data = {
            'id': self.id,
            'timestamp': self.timestamp,
            'action': self.action,
            'actorId': self.actor_id,
            'actorName': self.actor_name,
            'targetId': self.target_id,
            'targetName': self.target_name,
            'amount': self.amount,
        }
        if self.action == ACTION_TRANSFER:
            data['recipientId'] = self.recipient_id
            data['recipientName'] = self.recipient_name
        return data


@dataclass
class Room:
    id: str
    max_players: int
    created_at: int
    players: List[Player] = field(default_factory=list)
    is_playing: bool = False
    # Bounded trails; appending past the limit drops the oldest entry
    history: deque = field(default_factory=lambda: deque(maxlen=HISTORY_LIMIT))
    action_logs: deque = field(default_factory=lambda: deque(maxlen=ACTION_LOG_LIMIT))

    def find_player(self, player_id) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def snapshot_players(self) -> List[Player]:
        return [p.clone() for p in self.players]

    def to_dict(self):
        return {
            'id': self.id,
            'maxPlayers': self.max_players,
            'players': [p.to_dict() for p in self.players],
            'isPlaying': self.is_playing,
            'createdAt': _iso(self.created_at),
            'history': [h.to_dict() for h in self.history],
            'actionLogs': [log.to_dict() for log in self.action_logs],
        }
