import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .ai import choose_move
from .config import (
    Difficulty,
    GameSettings,
    OpponentMode,
    other,
    validate_size,
)
from .errors import GameAlreadyOverError, NotYourTurnError
from .game_logic import (
    Board,
    Cell,
    Line,
    NearWinReport,
    check_win,
    get_line_index,
    near_win_report,
)

logger = logging.getLogger(__name__)


class Status(str, Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    status: Status = Status.IN_PROGRESS
    winner: Optional[int] = None
    line: Optional[Line] = None

    @property
    def terminal(self) -> bool:
        return self.status != Status.IN_PROGRESS


@dataclass
class MoveResult:
    """1手ぶんの通知（表示側はこれを見てアニメ・ハイライトする）"""

    cell: Cell
    player: int
    outcome: Outcome
    board_full: bool
    near_wins: Optional[NearWinReport] = None

    @property
    def winning_line(self) -> Optional[Line]:
        return self.outcome.line


class GameEngine:
    """
    ボードと手番を持つゲーム本体。状態の変更はすべてここのメソッド経由。
    勝ち/引き分けに入ったら reset するまで抜けない。
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or GameSettings()
        self.rng = rng or random.Random()
        self.lines = get_line_index(self.settings.size)
        self._new_game()

    def _new_game(self):
        self.board = Board(self.settings.size)
        self.current_mover = self.settings.first_mover
        self.offensive_party = self.settings.first_mover
        self.outcome = Outcome()
        self.last_move: Optional[Cell] = None

    # ---------- 読み取り ----------
    @property
    def size(self) -> int:
        return self.board.n

    @property
    def game_over(self) -> bool:
        return self.outcome.terminal

    def occupant_at(self, cell: Cell) -> int:
        return self.board.occupant_at(cell)

    def lowest_empty(self, x: int, z: int) -> Optional[int]:
        return self.board.lowest_empty(x, z)

    def near_win_report(self) -> NearWinReport:
        return near_win_report(self.board, self.lines, self.current_mover)

    def is_computer(self, player: int) -> bool:
        return self.settings.computer_party == player

    def is_computer_turn(self) -> bool:
        return not self.game_over and self.is_computer(self.current_mover)

    def hints_enabled(self) -> bool:
        """ハイライトは簡単モードかつ人間の手番のときだけ"""
        return (
            not self.game_over
            and self.settings.difficulty == Difficulty.EASY
            and not self.is_computer(self.current_mover)
        )

    def current_state(self) -> dict:
        return {
            "size": self.size,
            "board": self.board.snapshot(),
            "status": self.outcome.status.value,
            "current_player": self.current_mover,
            "offensive_player": self.offensive_party,
            "winner": self.outcome.winner,
            "winning_coords": list(self.outcome.line) if self.outcome.line else None,
            "game_over": self.game_over,
            "move_count": self.board.move_count(),
            "last_move": self.last_move,
            "opponent_mode": self.settings.opponent_mode.value,
            "difficulty": self.settings.difficulty.value,
            "computer_player": self.settings.computer_party,
        }

    # ---------- 変更 ----------
    def drop_piece(self, x: int, z: int, player: Optional[int] = None) -> MoveResult:
        if self.game_over:
            raise GameAlreadyOverError("game is already over; reset to play again")
        if player is not None and player != self.current_mover:
            raise NotYourTurnError(player, self.current_mover)

        mover = self.current_mover
        cell = self.board.place(x, z, mover)
        self.last_move = cell
        logger.debug(f"[move] player={mover} cell={cell}")

        line = check_win(self.board, self.lines, cell, mover)
        full = self.board.is_full()
        if line is not None:
            self.outcome = Outcome(Status.WIN, mover, line)
            logger.info(f"[game] player {mover} wins: {list(line)}")
            return MoveResult(cell, mover, self.outcome, full)

        if full:
            self.outcome = Outcome(Status.DRAW)
            logger.info("[game] draw: board is full")
            return MoveResult(cell, mover, self.outcome, full)

        self.current_mover = other(mover)
        return MoveResult(cell, mover, self.outcome, full, self.near_win_report())

    def choose_computer_move(self, difficulty: Optional[Difficulty] = None) -> Cell:
        """現在の手番側に AI が選ぶ手（盤面は変えない）"""
        if self.game_over:
            raise GameAlreadyOverError("game is already over")
        return choose_move(
            self.board,
            self.lines,
            self.current_mover,
            difficulty or self.settings.difficulty,
            self.rng,
        )

    def play_computer_move(self) -> MoveResult:
        x, z, _ = self.choose_computer_move()
        return self.drop_piece(x, z, self.current_mover)

    def reset(
        self,
        size: Optional[int] = None,
        opponent_mode: Optional[OpponentMode] = None,
        difficulty: Optional[Difficulty] = None,
    ):
        if size is not None:
            validate_size(size)
        updates = {}
        if size is not None:
            updates["size"] = size
        if opponent_mode is not None:
            updates["opponent_mode"] = OpponentMode(opponent_mode)
        if difficulty is not None:
            updates["difficulty"] = Difficulty(difficulty)
        settings = self.settings.model_copy(update=updates)

        if settings.size != self.lines.n:
            self.lines = get_line_index(settings.size)
        self.settings = settings
        self._new_game()
        logger.info(
            f"[game] reset size={settings.size} mode={settings.opponent_mode.value} "
            f"difficulty={settings.difficulty.value}"
        )
