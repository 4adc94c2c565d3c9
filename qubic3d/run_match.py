# run_match.py — サーバーの AI 同士で1局打たせる
import argparse
import logging
import os
import time
from typing import Optional

import requests  # type: ignore

from .backend.config import AI_MOVE_DELAY

logger = logging.getLogger(__name__)

BASE = os.environ.get("QUBIC_SERVER", "http://127.0.0.1:8000")


class MatchClient:
    """
    /games API を叩くだけの薄いクライアント。
    session は get/post/delete を持つものなら何でもよい（requests.Session など）
    """

    def __init__(self, base: str = BASE, session=None):
        self.base = base.rstrip("/")
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base}{path}"

    def new_game(self, size: int = 4) -> dict:
        r = self.session.post(
            self._url("/games"),
            json={"size": size, "opponent_mode": "human-vs-human"},
        )
        r.raise_for_status()
        return r.json()

    def get_state(self, game_id: str) -> dict:
        r = self.session.get(self._url(f"/games/{game_id}"))
        r.raise_for_status()
        return r.json()

    def suggest(self, game_id: str, difficulty: str) -> dict:
        r = self.session.get(
            self._url(f"/games/{game_id}/suggest"), params={"difficulty": difficulty}
        )
        r.raise_for_status()
        return r.json()

    def make_move(self, game_id: str, x: int, z: int, player: int) -> dict:
        r = self.session.post(
            self._url(f"/games/{game_id}/move"),
            json={"x": x, "z": z, "player": player},
        )
        r.raise_for_status()
        return r.json()

    def delete(self, game_id: str):
        r = self.session.delete(self._url(f"/games/{game_id}"))
        r.raise_for_status()


def run_match(
    client: MatchClient,
    size: int = 4,
    player1: str = "hard",
    player2: str = "easy",
    delay: float = AI_MOVE_DELAY,
    max_moves: Optional[int] = None,
) -> dict:
    """決着まで打って最終状態を返す"""
    game_id = client.new_game(size)["game_id"]
    difficulties = {1: player1, 2: player2}
    moves = 0
    try:
        while True:
            state = client.get_state(game_id)
            if state["game_over"]:
                logger.info(f"✅ Game Over: status={state['status']} winner={state['winner']}")
                return state
            if max_moves is not None and moves >= max_moves:
                return state

            current = state["current_player"]
            x, z, y = client.suggest(game_id, difficulties[current])["move"]
            logger.info(f"🧠 Player {current}({difficulties[current]}) → x={x}, z={z}, y={y}")
            client.make_move(game_id, x, z, current)
            moves += 1

            if delay:
                time.sleep(delay)
    finally:
        client.delete(game_id)


def main(argv=None):
    parser = argparse.ArgumentParser(description="AI vs AI match over the game server")
    parser.add_argument("--base", default=BASE)
    parser.add_argument("--size", type=int, default=4, choices=[4, 6, 8])
    parser.add_argument("--player1", default="hard", choices=["easy", "hard"])
    parser.add_argument("--player2", default="easy", choices=["easy", "hard"])
    parser.add_argument("--delay", type=float, default=AI_MOVE_DELAY)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    state = run_match(
        MatchClient(args.base),
        size=args.size,
        player1=args.player1,
        player2=args.player2,
        delay=args.delay,
    )
    print("🎉 終了:", state["status"], "winner:", state["winner"])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
