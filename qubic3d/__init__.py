"""立体N目並べ（重力あり）のゲームエンジンと対戦サーバー"""

__version__ = "0.1.0"
