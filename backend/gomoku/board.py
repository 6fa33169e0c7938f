"""Board model and five-in-a-row detection."""

from typing import List, Optional, Tuple

from .errors import CellEmpty, CellOccupied, OutOfBounds

EMPTY = 0

# Checked in this order; the first axis that reaches the threshold is reported
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (0, 1),   # horizontal
    (1, 0),   # vertical
    (1, 1),   # diagonal down-right
    (1, -1),  # diagonal up-right
)

Cell = Tuple[int, int]


class Board:
    def __init__(self, size: int = 9, win_length: int = 5):
        self.size = size
        self.win_length = win_length
        self.cells: List[List[int]] = []
        self.reset()

    def reset(self) -> None:
        self.cells = [[EMPTY] * self.size for _ in range(self.size)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise OutOfBounds()
        return self.cells[row][col]

    def apply_mark(self, row: int, col: int, player: int) -> None:
        if self.get(row, col) != EMPTY:
            raise CellOccupied()
        self.cells[row][col] = int(player)

    def apply_clear(self, row: int, col: int) -> int:
        """Empty a cell and return whoever held it."""
        previous = self.get(row, col)
        if previous == EMPTY:
            raise CellEmpty()
        self.cells[row][col] = EMPTY
        return previous

    def _walk(self, row: int, col: int, dr: int, dc: int, player: int) -> List[Cell]:
        cells = []
        r, c = row + dr, col + dc
        while self.in_bounds(r, c) and self.cells[r][c] == player:
            cells.append((r, c))
            r += dr
            c += dc
        return cells

    def detect_win(self, row: int, col: int, player: int) -> Optional[List[Cell]]:
        """Return the winning line through (row, col), or None.

        The line starts at the origin, continues along the positive
        direction and then the negative one. Runs longer than the win
        length are reported in full.
        """
        player = int(player)
        for dr, dc in DIRECTIONS:
            line = [(row, col)]
            line += self._walk(row, col, dr, dc, player)
            line += self._walk(row, col, -dr, -dc, player)
            if len(line) >= self.win_length:
                return line
        return None

    def to_list(self) -> List[List[int]]:
        return [list(r) for r in self.cells]
