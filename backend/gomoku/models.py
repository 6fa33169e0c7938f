from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple

from .board import Board
from .errors import (
    AlreadyInRoom,
    GameNotActive,
    InvalidTarget,
    NoBombAvailable,
    NotYourTurn,
    RoomFull,
    RoomNotFound,
)

MAX_PEERS = 2


class Role(IntEnum):
    PLAYER_ONE = 1
    PLAYER_TWO = 2

    @property
    def opponent(self) -> 'Role':
        return Role.PLAYER_TWO if self is Role.PLAYER_ONE else Role.PLAYER_ONE


class RoomState(str, Enum):
    WAITING = 'waiting_for_opponent'
    ACTIVE = 'active'
    FINISHED = 'finished'
    # Match started and one peer left; the room cannot be reused
    ABANDONED = 'abandoned'
    TORN_DOWN = 'torn_down'


class Room:
    """Authoritative state for one two-player session."""

    def __init__(self, code: str, board_size: int = 9, win_length: int = 5):
        self.code = code
        self.peers: List[str] = []
        self.board = Board(board_size, win_length)
        self.turn = Role.PLAYER_ONE
        self.powers: Dict[Role, bool] = {}
        self.state = RoomState.WAITING
        self.winner: Optional[Role] = None
        self.winning_line: Optional[List[Tuple[int, int]]] = None
        self.games_played = 0
        self._reset_game()

    @property
    def active(self) -> bool:
        return self.state is RoomState.ACTIVE

    def role_of(self, peer: str) -> Optional[Role]:
        if peer not in self.peers:
            return None
        return Role(self.peers.index(peer) + 1)

    def opponent_of(self, peer: str) -> Optional[str]:
        return next((p for p in self.peers if p != peer), None)

    def _reset_game(self) -> None:
        self.board.reset()
        self.turn = Role.PLAYER_ONE
        self.powers = {Role.PLAYER_ONE: True, Role.PLAYER_TWO: True}
        self.winner = None
        self.winning_line = None

    # ---- lifecycle ----

    def add_peer(self, peer: str) -> Role:
        if self.state in (RoomState.ABANDONED, RoomState.TORN_DOWN):
            raise RoomNotFound()
        if peer in self.peers:
            raise AlreadyInRoom()
        if len(self.peers) >= MAX_PEERS:
            raise RoomFull()
        self.peers.append(peer)
        if len(self.peers) == MAX_PEERS:
            self._reset_game()
            self.state = RoomState.ACTIVE
        return self.role_of(peer)

    def remove_peer(self, peer: str) -> bool:
        if peer not in self.peers:
            return False
        self.peers.remove(peer)
        if not self.peers:
            self.state = RoomState.TORN_DOWN
        elif self.state is not RoomState.WAITING:
            self.state = RoomState.ABANDONED
        return True

    def restart(self) -> None:
        if self.state not in (RoomState.ACTIVE, RoomState.FINISHED):
            raise GameNotActive()
        self._reset_game()
        self.state = RoomState.ACTIVE

    def finish(self, winner: Optional[Role], line=None) -> bool:
        """Move to FINISHED. Returns False if the game had already ended."""
        if self.state is RoomState.FINISHED:
            return False
        if not self.active:
            raise GameNotActive()
        self.state = RoomState.FINISHED
        self.winner = winner
        self.winning_line = line
        self.games_played += 1
        return True

    # ---- validated mutations ----

    def _require_turn(self, role: Optional[Role]) -> Role:
        if not self.active:
            raise GameNotActive()
        if role is None or role != self.turn:
            raise NotYourTurn()
        return role

    def place(self, peer: str, row: int, col: int):
        """Mark a cell for the peer's role; returns the winning line if any."""
        role = self._require_turn(self.role_of(peer))
        self.board.apply_mark(row, col, role)
        line = self.board.detect_win(row, col, role)
        if line:
            self.finish(role, line)
        else:
            self.turn = role.opponent
        return role, line

    def bomb(self, peer: str, row: int, col: int) -> Role:
        role = self._require_turn(self.role_of(peer))
        if not self.powers[role]:
            raise NoBombAvailable()
        if self.board.get(row, col) != role.opponent:
            raise InvalidTarget()
        self.board.apply_clear(row, col)
        self.powers[role] = False
        self.turn = role.opponent
        return role

    def to_dict(self):
        return {
            'room_id': self.code,
            'state': self.state.value,
            'active': self.active,
            'players': len(self.peers),
            'turn': int(self.turn),
            'powers': {str(int(r)): available for r, available in self.powers.items()},
            'board': self.board.to_list(),
            'winner': int(self.winner) if self.winner else None,
            'winning_line': [list(c) for c in self.winning_line] if self.winning_line else None,
            'games_played': self.games_played,
        }
