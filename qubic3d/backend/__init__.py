from .config import Difficulty, GameSettings, OpponentMode
from .engine import GameEngine, MoveResult, Outcome, Status
from .game_logic import Board, LineIndex, check_win, get_line_index

__all__ = [
    "Board",
    "Difficulty",
    "GameEngine",
    "GameSettings",
    "LineIndex",
    "MoveResult",
    "OpponentMode",
    "Outcome",
    "Status",
    "check_win",
    "get_line_index",
]
