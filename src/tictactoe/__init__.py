"""Tic-tac-toe package exposing game rules, the optimal AI, and the web application."""

from .ai import MinimaxAI, best_move
from .game import TicTacToeGame, find_winning_line, is_full
from .ui import app

__all__ = [
    "MinimaxAI",
    "TicTacToeGame",
    "app",
    "best_move",
    "find_winning_line",
    "is_full",
]
