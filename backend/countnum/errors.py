"""Failure kinds raised by the room store.

Every kind carries a stable ``kind`` string and the HTTP status the API
layer answers with, so transport code never has to inspect messages.
"""


class RoomError(Exception):
    kind = 'RoomError'
    status_code = 400
    default_message = 'Room operation failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class RoomNotFound(RoomError):
    kind = 'RoomNotFound'
    status_code = 404
    default_message = 'Room not found'


class RoomFull(RoomError):
    kind = 'RoomFull'
    default_message = 'Room is full'


class GameAlreadyStarted(RoomError):
    kind = 'GameAlreadyStarted'
    default_message = 'Game already started'


class PlayerNotFound(RoomError):
    kind = 'PlayerNotFound'
    status_code = 404
    default_message = 'Player not found in room'


class ActorNotFound(PlayerNotFound):
    """The acting player of a score update is not a member of the room."""
    kind = 'ActorNotFound'
    default_message = 'Actor not found in room'


class InsufficientPlayers(RoomError):
    kind = 'InsufficientPlayers'
    default_message = 'Need at least 2 players to start'


class NotAllReady(RoomError):
    kind = 'NotAllReady'
    default_message = 'Not all players are ready'


class NoHistory(RoomError):
    kind = 'NoHistory'
    default_message = 'No history to undo'


class InvalidInput(RoomError):
    kind = 'InvalidInput'
    default_message = 'Invalid input'
