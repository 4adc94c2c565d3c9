class GameError(Exception):
    """ゲーム操作の失敗（呼び出し側で弾けば盤面は壊れない）"""

    pass


class ColumnFullError(GameError):
    """指定列が最上段まで埋まっている"""

    def __init__(self, x: int, z: int):
        super().__init__(f"column ({x}, {z}) is full")
        self.x = x
        self.z = z


class InvalidColumnError(GameError, ValueError):
    """無効座標指定（範囲外など）"""

    pass


class GameAlreadyOverError(GameError):
    """決着後の着手"""

    pass


class NotYourTurnError(GameError):
    """手番でないプレイヤーからの着手"""

    def __init__(self, player: int, current: int):
        super().__init__(f"player {player} moved on player {current}'s turn")
        self.player = player
        self.current = current


class InvalidBoardSizeError(GameError, ValueError):
    """サポート外の盤面サイズ"""

    pass


class NoLegalMoveError(RuntimeError):
    """置ける場所がないのに AI が呼ばれた（エンジン側のバグ）"""

    pass
