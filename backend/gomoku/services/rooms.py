import logging
import random
import string
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from gomoku.errors import NotYourTurn, RoomNotFound
from gomoku.models import Role, Room, RoomState
from .leaderboard import Leaderboard

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_code(code) -> str:
    return str(code or '').strip().upper()


@dataclass
class MoveOutcome:
    room: Room
    role: Role
    row: int
    col: int
    opponent: Optional[str]
    line: Optional[List[Tuple[int, int]]] = None
    stats: Optional[Dict[str, int]] = None

    @property
    def won(self) -> bool:
        return self.line is not None


@dataclass
class PowerOutcome:
    room: Room
    role: Role
    row: int
    col: int
    opponent: Optional[str]


@dataclass
class LeaveOutcome:
    room: Optional[Room] = None
    remaining: Optional[str] = None
    torn_down: bool = False


class RoomRegistry:
    """Owns every live room, keyed by its shareable code."""

    def __init__(self, leaderboard: Leaderboard, board_size: int = 9,
                 win_length: int = 5, code_length: int = 5):
        self.leaderboard = leaderboard
        self.board_size = board_size
        self.win_length = win_length
        self.code_length = code_length
        self.rooms: Dict[str, Room] = {}
        # Socket.IO handlers may run on separate threads
        self._lock = threading.Lock()

    def __len__(self):
        return len(self.rooms)

    def __contains__(self, code):
        return normalize_code(code) in self.rooms

    def generate_code(self) -> str:
        """Generate a unique, short room code."""
        while True:
            code = ''.join(random.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self.rooms:
                return code

    def get(self, code) -> Room:
        room = self.rooms.get(normalize_code(code))
        if room is None:
            raise RoomNotFound()
        return room

    def stats(self) -> Dict[str, int]:
        counts = Counter(room.state.value for room in self.rooms.values())
        counts['total'] = len(self.rooms)
        return dict(counts)

    # ---- lifecycle ----

    def create_room(self, peer: str) -> Room:
        with self._lock:
            room = Room(self.generate_code(), self.board_size, self.win_length)
            room.add_peer(peer)
            self.rooms[room.code] = room
            logger.info(f"[room-created] room={room.code} peer={peer}")
            return room

    def join_room(self, peer: str, code) -> Room:
        with self._lock:
            room = self.get(code)
            role = room.add_peer(peer)
            logger.info(f"[room-joined] room={room.code} peer={peer} role={int(role)} state={room.state.value}")
            return room

    def leave(self, code, peer: str) -> LeaveOutcome:
        """Remove a peer from its room. Unknown rooms and peers are a no-op."""
        with self._lock:
            room = self.rooms.get(normalize_code(code))
            if room is None or not room.remove_peer(peer):
                return LeaveOutcome()
            outcome = LeaveOutcome(room=room, remaining=room.peers[0] if room.peers else None)
            if room.state is RoomState.TORN_DOWN:
                self.rooms.pop(room.code, None)
                outcome.torn_down = True
            logger.info(f"[room-left] room={room.code} peer={peer} state={room.state.value}")
            return outcome

    # ---- game flow ----

    def make_move(self, code, peer: str, row: int, col: int) -> MoveOutcome:
        with self._lock:
            room = self.get(code)
            role, line = room.place(peer, row, col)
            outcome = MoveOutcome(room, role, row, col, room.opponent_of(peer), line)
            if line:
                # place() already moved the room to FINISHED
                outcome.stats = self.leaderboard.record_result(role)
                logger.info(f"[game-over] room={room.code} winner={int(role)} line={line}")
            return outcome

    def use_power(self, code, peer: str, row: int, col: int) -> PowerOutcome:
        with self._lock:
            room = self.get(code)
            role = room.bomb(peer, row, col)
            logger.info(f"[power-used] room={room.code} role={int(role)} cell=({row},{col})")
            return PowerOutcome(room, role, row, col, room.opponent_of(peer))

    def report_win(self, code, peer: str, winner) -> Optional[Dict[str, int]]:
        """Finish the room on a client's say-so; returns new stats or None."""
        with self._lock:
            room = self.get(code)
            role = room.role_of(peer)
            if role is None or role != Role(winner):
                raise NotYourTurn('Only the winning player may report a win')
            # finish() raises unless the room is active, and is False once finished
            if not room.finish(role):
                return None
            logger.info(f"[game-over] room={room.code} winner={int(role)} reported=1")
            return self.leaderboard.record_result(role)

    def restart(self, code, peer: str) -> Room:
        with self._lock:
            room = self.get(code)
            if room.role_of(peer) is None:
                raise RoomNotFound()
            room.restart()
            logger.info(f"[room-restarted] room={room.code} peer={peer}")
            return room
