"""Inbound Socket.IO requests.

Clients send loosely shaped payloads (a bare room code string, a bare
player number, or a dict). ``parse_request`` turns each of them into one
of the request types below, or raises ``ProtocolError``.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .models import Role


class ProtocolError(ValueError):
    pass


@dataclass(frozen=True)
class CreateRoom:
    pass


@dataclass(frozen=True)
class JoinRoom:
    room_id: str


@dataclass(frozen=True)
class MakeMove:
    room_id: Optional[str]
    row: int
    col: int
    player: Optional[Role] = None


@dataclass(frozen=True)
class UsePower:
    room_id: Optional[str]
    row: int
    col: int
    player: Optional[Role] = None


@dataclass(frozen=True)
class ReportWin:
    winner: Role


@dataclass(frozen=True)
class RestartRequest:
    room_id: Optional[str] = None


@dataclass(frozen=True)
class LeaveRoom:
    pass


def _room_id(data: Any, required: bool) -> Optional[str]:
    value = data.get('roomId') if isinstance(data, dict) else data
    if value is None or value == '':
        if required:
            raise ProtocolError('roomId is required')
        return None
    if not isinstance(value, str):
        raise ProtocolError('roomId must be a string')
    value = value.strip().upper()
    if not value.isalnum():
        raise ProtocolError('roomId must be alphanumeric')
    return value


def _int_field(data: dict, *names: str) -> int:
    for name in names:
        if name in data:
            value = data[name]
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ProtocolError(f'{name} must be an integer')
            return value
    raise ProtocolError(f'{names[0]} is required')


def _role(value: Any) -> Role:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError('player must be 1 or 2')
    try:
        return Role(value)
    except ValueError:
        raise ProtocolError('player must be 1 or 2') from None


def _cell_request(cls, data: Any):
    if not isinstance(data, dict):
        raise ProtocolError('payload must be an object')
    player = data.get('player')
    return cls(
        room_id=_room_id(data, required=False),
        # the bomb payload uses r/c
        row=_int_field(data, 'row', 'r'),
        col=_int_field(data, 'col', 'c'),
        player=_role(player) if player is not None else None,
    )


def parse_request(event: str, data: Any = None):
    if event == 'createRoom':
        return CreateRoom()
    if event == 'joinRoom':
        return JoinRoom(_room_id(data, required=True))
    if event == 'makeMove':
        return _cell_request(MakeMove, data)
    if event == 'usePower':
        return _cell_request(UsePower, data)
    if event == 'reportWin':
        winner = data.get('winner') if isinstance(data, dict) else data
        return ReportWin(_role(winner))
    if event == 'restartRequest':
        return RestartRequest(_room_id(data, required=False))
    if event == 'leaveRoom':
        return LeaveRoom()
    raise ProtocolError(f'unknown event {event!r}')
