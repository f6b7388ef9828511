"""Input validators shared by the HTTP layer and the room store.

Each validator returns the normalized value or raises ``InvalidInput``.
"""
import logging
import math
from numbers import Real

from countnum.errors import InvalidInput
from countnum.models import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 10
MAX_NAME_LENGTH = 20


def _is_finite(value) -> bool:
    # Ints beyond float range (e.g. a 400-digit JSON literal) overflow here
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def validate_player_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        logger.warning("Validation failed: player name is empty")
        raise InvalidInput('Player name is required')
    trimmed = name.strip()
    if len(trimmed) > MAX_NAME_LENGTH:
        logger.warning("Validation failed: player name exceeds %d characters (length=%d)", MAX_NAME_LENGTH, len(trimmed))
        raise InvalidInput(f'Player name must be at most {MAX_NAME_LENGTH} characters')
    return trimmed


def validate_max_players(count) -> int:
    # bool is an int subclass; JSON true must not read as 1
    if isinstance(count, bool) or not isinstance(count, Real) or not _is_finite(count) \
            or count != int(count) or not (MIN_PLAYERS <= count <= MAX_PLAYERS):
        logger.warning("Validation failed: max players out of range (count=%r)", count)
        raise InvalidInput(f'Max players must be between {MIN_PLAYERS} and {MAX_PLAYERS}')
    return int(count)


def validate_points(points):
    if isinstance(points, bool) or not isinstance(points, Real) or not _is_finite(points):
        logger.warning("Validation failed: points is not a finite number (points=%r)", points)
        raise InvalidInput('Points must be a number')
    return points


def validate_room_code(code) -> str:
    if not isinstance(code, str):
        raise InvalidInput('Room code is required')
    normalized = code.strip().upper()
    if len(normalized) != ROOM_CODE_LENGTH:
        logger.warning("Validation failed: room code must be exactly %d characters (length=%d)", ROOM_CODE_LENGTH, len(normalized))
        raise InvalidInput(f'Room code must be exactly {ROOM_CODE_LENGTH} characters')
    if any(ch not in ROOM_CODE_ALPHABET for ch in normalized):
        logger.warning("Validation failed: room code contains invalid characters")
        raise InvalidInput('Room code may only contain letters and digits')
    return normalized


def validate_ready_flag(is_ready) -> bool:
    if not isinstance(is_ready, bool):
        raise InvalidInput('Ready status must be true or false')
    return is_ready


def validate_new_score(score):
    """Reject a score update whose result no longer fits a JSON number."""
    if not _is_finite(score):
        logger.warning("Validation failed: resulting score is not finite (score=%r)", score)
        raise InvalidInput('Score is out of range')
    return score
