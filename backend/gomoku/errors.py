"""Rejection reasons raised by the board and the room state machine.

Every error here is recoverable: the gateway either reports it to the
requesting peer or logs and drops it.
"""


class GameError(Exception):
    code = 'GameError'
    message = 'Request rejected'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    def to_dict(self):
        return {'code': self.code, 'message': str(self)}


class RoomNotFound(GameError):
    code = 'RoomNotFound'
    message = 'Room not found'


class RoomFull(GameError):
    code = 'RoomFull'
    message = 'Room is full'


class NotYourTurn(GameError):
    code = 'NotYourTurn'
    message = 'It is not your turn'


class GameNotActive(GameError):
    code = 'GameNotActive'
    message = 'Game is not active'


class CellOccupied(GameError):
    code = 'CellOccupied'
    message = 'Cell already occupied'


class CellEmpty(GameError):
    code = 'CellEmpty'
    message = 'Cell is empty'


class InvalidTarget(GameError):
    code = 'InvalidTarget'
    message = 'Bomb must target an opponent piece'


class NoBombAvailable(GameError):
    code = 'NoBombAvailable'
    message = 'Bomb already used this game'


class OutOfBounds(GameError):
    code = 'OutOfBounds'
    message = 'Cell is outside the board'


class AlreadyInRoom(GameError):
    code = 'AlreadyInRoom'
    message = 'You are already in this room'
