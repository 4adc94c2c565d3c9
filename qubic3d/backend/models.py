from pydantic import BaseModel
from typing import List, Optional, Tuple

from .config import DEFAULT_SIZE, Difficulty, OpponentMode

Coord = Tuple[int, int, int]


class NewGameIn(BaseModel):
    size: int = DEFAULT_SIZE
    opponent_mode: OpponentMode = OpponentMode.HUMAN_VS_HUMAN
    difficulty: Difficulty = Difficulty.EASY


class ResetIn(BaseModel):
    size: Optional[int] = None
    opponent_mode: Optional[OpponentMode] = None
    difficulty: Optional[Difficulty] = None


class MoveIn(BaseModel):
    x: int
    z: int
    player: Optional[int] = None


class BoardState(BaseModel):
    size: int
    board: List[List[List[int]]]  # board[x][z][y]（0=空, 1=先手, 2=後手）
    status: str
    current_player: int
    offensive_player: int
    winner: Optional[int] = None
    winning_coords: Optional[List[Coord]] = None
    game_over: bool
    move_count: int
    last_move: Optional[Coord] = None
    opponent_mode: OpponentMode
    difficulty: Difficulty
    computer_player: Optional[int] = None


class NewGameOut(BaseModel):
    game_id: str
    state: BoardState


class HintsOut(BaseModel):
    own: List[Coord]
    danger: List[Coord]


class MoveOut(BaseModel):
    status: str
    player: int
    cell: Coord
    winning_coords: Optional[List[Coord]] = None
    board_full: bool
    hints: Optional[HintsOut] = None
    state: BoardState


class SuggestOut(BaseModel):
    player: int
    difficulty: Difficulty
    move: Coord


class ColumnOut(BaseModel):
    x: int
    z: int
    lowest_empty: Optional[int] = None
