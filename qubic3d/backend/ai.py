import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .config import Difficulty, other
from .errors import NoLegalMoveError
from .game_logic import Board, Cell, LineIndex, near_win_report

logger = logging.getLogger(__name__)


class Strategy(ABC):
    """
    電脳プレイヤーの親クラス。
    盤面は読むだけで、着手はエンジンの drop_piece 経由で行う。
    """

    @abstractmethod
    def choose(
        self, board: Board, index: LineIndex, player: int, rng: random.Random
    ) -> Cell:
        """次に置くセル (x, z, y) を返す"""
        ...

    @staticmethod
    def _legal_moves(board: Board) -> List[Cell]:
        moves = board.legal_moves()
        if not moves:
            raise NoLegalMoveError("no legal move left on the board")
        return moves


class EasyStrategy(Strategy):
    """勝てるなら勝つ。それ以外はランダム"""

    def choose(self, board, index, player, rng):
        legal = self._legal_moves(board)
        report = near_win_report(board, index, player)
        if report.own:
            return rng.choice(report.own)
        return rng.choice(legal)


class HardStrategy(Strategy):
    """勝つ → 防ぐ → 生きているラインが多い場所"""

    def choose(self, board, index, player, rng):
        legal = self._legal_moves(board)
        report = near_win_report(board, index, player)
        if report.own:
            return rng.choice(report.own)
        if report.opponent:
            return rng.choice(report.opponent)
        return rng.choice(best_scored_moves(board, index, player, legal))


def score_move(board: Board, index: LineIndex, player: int, cell: Cell) -> int:
    """相手の駒が1つもないラインごとに（自分の駒数 + 1）を加算"""
    opponent = other(player)
    score = 0
    for line_id in index.lines_through(cell):
        values = [board.grid[x][z][y] for (x, z, y) in index.lines[line_id]]
        if opponent in values:
            continue
        score += values.count(player) + 1
    return score


def best_scored_moves(
    board: Board, index: LineIndex, player: int, legal: Optional[List[Cell]] = None
) -> List[Cell]:
    if legal is None:
        legal = board.legal_moves()
    best_score = -1
    best: List[Cell] = []
    for cell in legal:
        score = score_move(board, index, player, cell)
        if score > best_score:
            best_score = score
            best = [cell]
        elif score == best_score:
            best.append(cell)
    return best


STRATEGIES: Dict[Difficulty, Strategy] = {
    Difficulty.EASY: EasyStrategy(),
    Difficulty.HARD: HardStrategy(),
}


def choose_move(
    board: Board,
    index: LineIndex,
    player: int,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Cell:
    strategy = STRATEGIES[Difficulty(difficulty)]
    cell = strategy.choose(board, index, player, rng or random.Random())
    logger.debug(f"[ai] player={player} difficulty={Difficulty(difficulty).value} -> {cell}")
    return cell
