import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from .config import EMPTY, other, validate_size
from .errors import ColumnFullError, InvalidColumnError

logger = logging.getLogger(__name__)

# (x, z, y)  x: 横方向, z: 奥行き, y: 高さ（0が最下段）
Cell = Tuple[int, int, int]
Line = Tuple[Cell, ...]


def generate_directions() -> List[Tuple[int, int, int]]:
    """26方向から「最初の非ゼロ成分が正」のものだけ残した13方向"""
    dirs = []
    for dx in (-1, 0, 1):
        for dz in (-1, 0, 1):
            for dy in (-1, 0, 1):
                vec = (dx, dz, dy)
                first = next((c for c in vec if c != 0), 0)
                if first > 0:
                    dirs.append(vec)
    return dirs


DIRECTIONS = generate_directions()


class Board:
    """N×N×N の立体ボード（grid[x][z][y]）と列ごとの次の空き高さ"""

    def __init__(self, n: int):
        self.n = validate_size(n)
        self.grid = [[[EMPTY for y in range(n)] for z in range(n)] for x in range(n)]
        self.heights = [[0 for z in range(n)] for x in range(n)]

    def _check_column(self, x: int, z: int):
        if not (0 <= x < self.n and 0 <= z < self.n):
            raise InvalidColumnError(f"column out of range: ({x}, {z})")

    def in_bounds(self, cell: Cell) -> bool:
        return all(0 <= c < self.n for c in cell)

    def lowest_empty(self, x: int, z: int) -> Optional[int]:
        self._check_column(x, z)
        h = self.heights[x][z]
        return None if h == self.n else h

    def place(self, x: int, z: int, player: int) -> Cell:
        """
        指定された x, z の列に、下から順にプレイヤーの駒を置く。
        置いたセルを返す。列がいっぱいなら ColumnFullError。
        """
        y = self.lowest_empty(x, z)
        if y is None:
            raise ColumnFullError(x, z)
        self.grid[x][z][y] = player
        self.heights[x][z] = y + 1
        return (x, z, y)

    def occupant_at(self, cell: Cell) -> int:
        if not self.in_bounds(cell):
            raise InvalidColumnError(f"cell out of range: {cell}")
        x, z, y = cell
        return self.grid[x][z][y]

    def is_full(self) -> bool:
        """盤面がすべて埋まっているかを確認"""
        return all(h == self.n for col in self.heights for h in col)

    def legal_moves(self) -> List[Cell]:
        moves = []
        for x in range(self.n):
            for z in range(self.n):
                y = self.heights[x][z]
                if y < self.n:
                    moves.append((x, z, y))
        return moves

    def move_count(self) -> int:
        return sum(h for col in self.heights for h in col)

    def snapshot(self) -> List[List[List[int]]]:
        return [[list(col) for col in plane] for plane in self.grid]


class LineIndex:
    """勝ちラインの一覧と、セル → そのセルを通るライン番号 の逆引き表"""

    def __init__(self, n: int, lines: List[Line]):
        self.n = n
        self.lines: Tuple[Line, ...] = tuple(lines)
        cell_to_lines: Dict[Cell, List[int]] = {}
        for idx, line in enumerate(self.lines):
            for cell in line:
                cell_to_lines.setdefault(cell, []).append(idx)
        self.cell_to_lines: Dict[Cell, Tuple[int, ...]] = {
            cell: tuple(ids) for cell, ids in cell_to_lines.items()
        }

    @classmethod
    def build(cls, n: int) -> "LineIndex":
        validate_size(n)

        def inside(x, z, y):
            return 0 <= x < n and 0 <= z < n and 0 <= y < n

        lines: List[Line] = []
        for x in range(n):
            for z in range(n):
                for y in range(n):
                    for dx, dz, dy in DIRECTIONS:
                        # 1歩戻って盤内なら、もっと手前から始まるラインの途中
                        if inside(x - dx, z - dz, y - dy):
                            continue
                        line: List[Cell] = []
                        for i in range(n):
                            nx, nz, ny = x + dx * i, z + dz * i, y + dy * i
                            if inside(nx, nz, ny):
                                line.append((nx, nz, ny))
                            else:
                                break
                        if len(line) == n:
                            lines.append(tuple(line))
        logger.debug(f"[lines] n={n} lines={len(lines)}")
        return cls(n, lines)

    def __len__(self) -> int:
        return len(self.lines)

    def lines_through(self, cell: Cell) -> Tuple[int, ...]:
        return self.cell_to_lines.get(cell, ())


@lru_cache(maxsize=None)
def get_line_index(n: int) -> LineIndex:
    """サイズごとに1回だけ作る（以後は読み取り専用）"""
    return LineIndex.build(n)


def check_win(board: Board, index: LineIndex, cell: Cell, player: int) -> Optional[Line]:
    """
    最後に置いたセルを通るラインだけを見て勝ち判定。
    揃っていればそのラインの座標、なければ None。
    """
    for line_id in index.lines_through(cell):
        line = index.lines[line_id]
        if all(board.grid[x][z][y] == player for (x, z, y) in line):
            return line
    return None


def almost_winning_moves(board: Board, index: LineIndex, player: int) -> List[Cell]:
    """player があと1手で揃えられる、今すぐ置けるセル（重複あり）"""
    n = board.n
    moves: List[Cell] = []
    for line in index.lines:
        values = [board.grid[x][z][y] for (x, z, y) in line]
        if values.count(player) != n - 1 or values.count(EMPTY) != 1:
            continue
        x, z, y = line[values.index(EMPTY)]
        # 宙に浮いた空きは今は置けない
        if board.heights[x][z] == y:
            moves.append((x, z, y))
    return moves


def unique_cells(cells: List[Cell]) -> List[Cell]:
    return list(dict.fromkeys(cells))


@dataclass
class NearWinReport:
    own: List[Cell] = field(default_factory=list)
    opponent: List[Cell] = field(default_factory=list)


def near_win_report(board: Board, index: LineIndex, mover: int) -> NearWinReport:
    """手番側と相手側、両方の「差し一手」"""
    return NearWinReport(
        own=almost_winning_moves(board, index, mover),
        opponent=almost_winning_moves(board, index, other(mover)),
    )
