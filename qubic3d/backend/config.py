import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

from .errors import InvalidBoardSizeError

# ========== 定数 ==========
SUPPORTED_SIZES = (4, 6, 8)
DEFAULT_SIZE = 4

EMPTY = 0
PLAYER1 = 1
PLAYER2 = 2

# 電脳の「考え中」演出（秒）。エンジンは待たない。呼び出し側が使う
AI_MOVE_DELAY = float(os.environ.get("QUBIC_AI_MOVE_DELAY", "0.3"))


def other(player: int) -> int:
    return 3 - player


def validate_size(n: int) -> int:
    if n not in SUPPORTED_SIZES:
        raise InvalidBoardSizeError(
            f"unsupported board size: {n} (choose from {list(SUPPORTED_SIZES)})"
        )
    return n


class OpponentMode(str, Enum):
    HUMAN_VS_HUMAN = "human-vs-human"
    HUMAN_FIRST_VS_AI = "human-first-vs-ai"
    AI_FIRST_VS_HUMAN = "ai-first-vs-human"


class Difficulty(str, Enum):
    EASY = "easy"
    HARD = "hard"


class GameSettings(BaseModel):
    """1ゲーム分の設定。reset のたびに差し替える"""

    size: int = DEFAULT_SIZE
    opponent_mode: OpponentMode = OpponentMode.HUMAN_VS_HUMAN
    difficulty: Difficulty = Difficulty.EASY
    first_mover: int = PLAYER1

    @field_validator("size")
    @classmethod
    def _check_size(cls, v: int) -> int:
        return validate_size(v)

    @field_validator("first_mover")
    @classmethod
    def _check_first_mover(cls, v: int) -> int:
        if v not in (PLAYER1, PLAYER2):
            raise ValueError("first_mover must be 1 or 2")
        return v

    @property
    def computer_party(self) -> Optional[int]:
        """電脳が担当するプレイヤー。人間同士なら None"""
        if self.opponent_mode == OpponentMode.HUMAN_FIRST_VS_AI:
            return other(self.first_mover)
        if self.opponent_mode == OpponentMode.AI_FIRST_VS_HUMAN:
            return self.first_mover
        return None


def load_settings_from_env() -> GameSettings:
    """環境変数から初期設定を読む（未指定はデフォルト）"""
    return GameSettings(
        size=int(os.environ.get("QUBIC_BOARD_SIZE", str(DEFAULT_SIZE))),
        opponent_mode=OpponentMode(
            os.environ.get("QUBIC_OPPONENT_MODE", OpponentMode.HUMAN_VS_HUMAN.value)
        ),
        difficulty=Difficulty(os.environ.get("QUBIC_DIFFICULTY", Difficulty.EASY.value)),
    )
