"""Core rules and game state for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"
Line = Tuple[int, int, int]

EMPTY = ""
PLAYERS: Tuple[Player, Player] = ("X", "O")

WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


# ---------- Rules ----------


def find_winning_line(board: Sequence[str]) -> Optional[Line]:
    """Return the first completed line in row, column, diagonal order."""
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return (a, b, c)
    return None


def is_full(board: Sequence[str]) -> bool:
    return all(c != EMPTY for c in board)


def empty_cells(board: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


def validate_board(board: Sequence[str]) -> None:
    if len(board) != 9:
        raise ValueError(f"Board must have 9 cells, got {len(board)}")
    for c in board:
        if c != EMPTY and c not in PLAYERS:
            raise ValueError(f"Unexpected cell value {c!r}")


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    # EMPTY, 'X' or 'O' in row-major order
    cells: List[str] = field(default_factory=lambda: [EMPTY] * 9)
    current_player: Player = "X"
    winner: Optional[Player] = None
    # UI highlights this line once the game is won
    winning_line: Optional[Line] = None
    drawn: bool = False

    @property
    def is_over(self) -> bool:
        return self.winner is not None or self.drawn

    def available_moves(self) -> List[int]:
        if self.is_over:
            return []
        return empty_cells(self.cells)

    def play_move(self, index: int) -> None:
        """Place the current player's mark, then settle win/tie or pass the turn."""
        if self.is_over:
            raise ValueError("Game already finished")
        if not 0 <= index < 9:
            raise ValueError(f"Cell index {index} is off the board")
        if self.cells[index] != EMPTY:
            raise ValueError("Cell already occupied")

        self.cells[index] = self.current_player

        line = find_winning_line(self.cells)
        if line is not None:
            self.winner = self.current_player
            self.winning_line = line
            return
        if is_full(self.cells):
            self.drawn = True
            return

        self.current_player = other_player(self.current_player)
