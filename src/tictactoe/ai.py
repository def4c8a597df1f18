"""Exhaustive negamax search picking an optimal tic-tac-toe move."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from .game import (
    EMPTY,
    Player,
    TicTacToeGame,
    empty_cells,
    find_winning_line,
    is_full,
    other_player,
    validate_board,
)

logger = logging.getLogger(__name__)

# Scores are from the perspective of the player who just moved
WIN, TIE = 1, 0

_default_rng = random.Random()


def best_move(
    board: Sequence[str],
    turn_is_x: bool,
    rng: Optional[random.Random] = None,
    explore_all: bool = False,
) -> int:
    """Return the index of an optimal move for the side to play.

    An empty board short-circuits to a uniformly random opening cell. Otherwise
    every candidate is scored by negamax and one of the best is drawn from
    ``rng``. Candidates are generated in ascending index order and generation
    stops at the first immediate win or tie, unless ``explore_all`` is set, in
    which case every root candidate is scored so the draw spans all winning
    cells.
    """
    validate_board(board)
    rng = rng or _default_rng

    if all(c == EMPTY for c in board):
        opening = rng.randrange(9)
        logger.debug("Random opening at cell %d", opening)
        return opening

    if is_full(board):
        raise RuntimeError("No valid moves available")

    player: Player = "X" if turn_is_x else "O"
    scores = _score_moves(list(board), player, stop_at_terminal=not explore_all)
    top = max(scores.values())
    candidates = [index for index, score in scores.items() if score == top]
    move = rng.choice(candidates)
    logger.debug(
        "Search for %s scored %s, best %d among %s, playing %d",
        player,
        scores,
        top,
        candidates,
        move,
    )
    return move


# ---- core search ----


def _score_moves(
    board: Sequence[str], player: Player, stop_at_terminal: bool = True
) -> Dict[int, int]:
    """Score each empty cell for ``player``; the caller's board is never mutated."""
    scores: Dict[int, int] = {}
    for index in empty_cells(board):
        child = list(board)
        child[index] = player

        if find_winning_line(child):
            scores[index] = WIN
            if stop_at_terminal:
                break
        elif is_full(child):
            # Only reachable when this was the last empty cell
            scores[index] = TIE
            if stop_at_terminal:
                break
        else:
            scores[index] = -_best_score(child, other_player(player))
    return scores


def _best_score(board: Sequence[str], player: Player) -> int:
    return max(_score_moves(board, player).values())


@dataclass
class MinimaxAI:
    """Computer opponent that always plays optimally.

    - MinimaxAI(player="O", rng=random.Random(seed))
    - choose(game) -> cell_index
    """

    player: Player
    rng: random.Random = field(default_factory=random.Random, repr=False)
    explore_all: bool = False

    def choose(self, game: TicTacToeGame) -> int:
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")
        if game.is_over:
            raise RuntimeError("No valid moves available")
        return best_move(
            game.cells,
            turn_is_x=self.player == "X",
            rng=self.rng,
            explore_all=self.explore_all,
        )
