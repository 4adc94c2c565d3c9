# main.py (FastAPI) — 立体N目並べサーバー
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from fastapi import FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from .backend.config import Difficulty, GameSettings, load_settings_from_env
from .backend.engine import GameEngine, MoveResult
from .backend.errors import (
    ColumnFullError,
    GameAlreadyOverError,
    GameError,
    InvalidBoardSizeError,
    InvalidColumnError,
    NotYourTurnError,
)
from .backend.game_logic import NearWinReport, unique_cells
from .backend.models import (
    BoardState,
    ColumnOut,
    HintsOut,
    MoveIn,
    MoveOut,
    NewGameIn,
    NewGameOut,
    ResetIn,
    SuggestOut,
)

# ========== ログ ==========
logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

# ========== FastAPI ==========
app = FastAPI()

# CORS（表示側は別オリジンのフロント）
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========== ゲーム箱 ==========
class GameEntry:
    """エンジン1つ＋同時リクエスト用のロック"""

    def __init__(self, engine: GameEngine):
        self.engine = engine
        self.lock = threading.Lock()


games: Dict[str, GameEntry] = {}


def _get_entry(game_id: str) -> GameEntry:
    entry = games.get(game_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Invalid game_id")
    return entry


@contextmanager
def _locked(game_id: str) -> Iterator[GameEngine]:
    """ゲームを取り出してロックし、ドメイン例外を HTTP エラーに寄せる"""
    entry = _get_entry(game_id)
    with entry.lock:
        try:
            yield entry.engine
        except (InvalidBoardSizeError, InvalidColumnError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        except (ColumnFullError, GameAlreadyOverError, NotYourTurnError) as e:
            raise HTTPException(status_code=409, detail=str(e))
        except GameError as e:
            raise HTTPException(status_code=400, detail=str(e))


def _state(engine: GameEngine) -> BoardState:
    return BoardState(**engine.current_state())


def _hints(report: NearWinReport) -> HintsOut:
    return HintsOut(own=unique_cells(report.own), danger=unique_cells(report.opponent))


def _move_out(engine: GameEngine, result: MoveResult) -> MoveOut:
    hints = None
    if result.near_wins is not None and engine.hints_enabled():
        hints = _hints(result.near_wins)
    return MoveOut(
        status=result.outcome.status.value,
        player=result.player,
        cell=result.cell,
        winning_coords=list(result.winning_line) if result.winning_line else None,
        board_full=result.board_full,
        hints=hints,
        state=_state(engine),
    )


# ========== エンドポイント ==========
@app.post("/games", response_model=NewGameOut, status_code=201)
def create_game(body: Optional[NewGameIn] = None):
    try:
        if body is None:
            settings = load_settings_from_env()
        else:
            settings = GameSettings(
                size=body.size,
                opponent_mode=body.opponent_mode,
                difficulty=body.difficulty,
            )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"invalid settings: {e.errors()}")
    except (GameError, ValueError) as e:
        # 環境変数の値が数値でない・未知のモードなど
        raise HTTPException(status_code=400, detail=f"invalid settings: {e}")

    game_id = str(uuid.uuid4())
    engine = GameEngine(settings)
    games[game_id] = GameEntry(engine)
    logger.info(
        f"[games] created {game_id} size={settings.size} "
        f"mode={settings.opponent_mode.value} difficulty={settings.difficulty.value}"
    )
    return NewGameOut(game_id=game_id, state=_state(engine))


@app.get("/games/{game_id}", response_model=BoardState)
def get_state(game_id: str):
    with _locked(game_id) as engine:
        return _state(engine)


@app.post("/games/{game_id}/move", response_model=MoveOut)
def move(game_id: str, payload: MoveIn):
    with _locked(game_id) as engine:
        # 電脳は auto-step でしか打たない（player を名乗っても不可）
        if engine.is_computer_turn():
            raise HTTPException(status_code=409, detail="it is the computer's turn")
        result = engine.drop_piece(payload.x, payload.z, payload.player)
        return _move_out(engine, result)


@app.post("/games/{game_id}/auto-step", response_model=MoveOut)
def auto_step(game_id: str):
    """電脳の手番なら1手だけ進める"""
    with _locked(game_id) as engine:
        if engine.game_over:
            raise GameAlreadyOverError("game is already over")
        if not engine.is_computer_turn():
            raise HTTPException(status_code=409, detail="it is not the computer's turn")
        result = engine.play_computer_move()
        logger.info(f"[auto-step] {game_id} player={result.player} cell={result.cell}")
        return _move_out(engine, result)


@app.get("/games/{game_id}/suggest", response_model=SuggestOut)
def suggest(game_id: str, difficulty: Optional[Difficulty] = None):
    """現在の手番に AI が選ぶ手を返すだけ（盤面は変えない）"""
    with _locked(game_id) as engine:
        chosen = difficulty or engine.settings.difficulty
        cell = engine.choose_computer_move(chosen)
        return SuggestOut(player=engine.current_mover, difficulty=chosen, move=cell)


@app.get("/games/{game_id}/hints", response_model=HintsOut)
def hints(game_id: str):
    with _locked(game_id) as engine:
        if not engine.hints_enabled():
            return HintsOut(own=[], danger=[])
        return _hints(engine.near_win_report())


@app.get("/games/{game_id}/columns/{x}/{z}", response_model=ColumnOut)
def column(game_id: str, x: int, z: int):
    with _locked(game_id) as engine:
        return ColumnOut(x=x, z=z, lowest_empty=engine.lowest_empty(x, z))


@app.post("/games/{game_id}/reset", response_model=BoardState)
def reset_game(game_id: str, body: ResetIn):
    with _locked(game_id) as engine:
        engine.reset(body.size, body.opponent_mode, body.difficulty)
        return _state(engine)


@app.delete("/games/{game_id}", status_code=204)
def delete_game(game_id: str):
    if games.pop(game_id, None) is None:
        raise HTTPException(status_code=404, detail="Invalid game_id")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
