from typing import Iterable, List, Tuple

# 4x4 layer pattern: no row, column or diagonal is constant, 0110 or 1001
DRAW_LAYER = [
    [0, 1, 0, 1],
    [1, 0, 1, 0],
    [0, 1, 0, 1],
    [0, 1, 0, 1],
]
# layer y uses DRAW_LAYER xor DRAW_FLIP[y]
DRAW_FLIP = [0, 1, 1, 0]


def draw_color(x: int, z: int, y: int) -> int:
    return DRAW_LAYER[x][z] ^ DRAW_FLIP[y]


def draw_move_sequence() -> List[Tuple[int, int]]:
    """
    Column order that fills the 4x4x4 board with draw_color, player 1 taking
    the 0 cells. A column starting with 0 is paired with one starting with 1
    so that turns keep alternating.
    """
    zeros = [(x, z) for x in range(4) for z in range(4) if DRAW_LAYER[x][z] == 0]
    ones = [(x, z) for x in range(4) for z in range(4) if DRAW_LAYER[x][z] == 1]
    seq = []
    for c0, c1 in zip(zeros, ones):
        seq += [c0, c1, c1, c0, c1, c0, c0, c1]
    return seq


def play(engine, columns: Iterable[Tuple[int, int]]):
    result = None
    for x, z in columns:
        result = engine.drop_piece(x, z)
    return result


def expected_line_count(n: int) -> int:
    """((N+2)^3 - N^3) / 2 lines on an N-cube"""
    return ((n + 2) ** 3 - n ** 3) // 2
