"""FastAPI web application for playing ガレッタ against the AI.

FastAPI を使ったガレッタ AI Web アプリケーション。
ブラウザから AI と対戦したり、局面の評価（手のアドバイス）を見たりできる。

エンドポイント:
  GET  /                      — フロントエンドの HTML を返す
  POST /api/new-game          — 新規対局を開始（ゲームIDを返す）
  POST /api/move              — 人間が辺を引く（AI が手番を持つ間は AI が応答）
  POST /api/ai-move/{id}      — AI の手番で1手進める（AI 同士の観戦用）
  GET  /api/state/{id}        — 現在の局面情報を取得
  GET  /api/advice/{id}       — 手番プレイヤー向けの評価内訳と手の分類
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from galleta_ai.config import GameConfig, GameMode
from galleta_ai.engine.evaluator import SimpleDotsEvaluator
from galleta_ai.engine.minimax import MinimaxAlphaBeta
from galleta_ai.engine.player import AIPlayer
from galleta_ai.game.galleta.display import board_to_str
from galleta_ai.game.galleta.shape import GalletaShape
from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import InvalidOperationError, Move

logger = logging.getLogger(__name__)

# 静的ファイル（HTML）のディレクトリ
STATIC_DIR = Path(__file__).parent / "static"

# アドバイス用の探索深さの上限（応答時間を抑えるため）
MAX_ADVICE_DEPTH = 3

app = FastAPI(title="Galleta AI")
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# 対局情報のインメモリストレージ（サーバ再起動で消える簡易実装）
_games: dict[str, dict[str, Any]] = {}

_evaluator = SimpleDotsEvaluator()
_strategy = MinimaxAlphaBeta(_evaluator)


class NewGameRequest(BaseModel):
    """新規対局リクエストのスキーマ。"""

    radius: int = Field(3, ge=2, le=8)  # 盤面の半径
    ai_depth: int = Field(3, ge=1, le=6)  # AI の探索深さ
    mode: GameMode = GameMode.HUMAN_VS_AI
    starting_player: int = Field(0, ge=0, le=1)


class MoveRequest(BaseModel):
    """指し手リクエストのスキーマ。"""

    game_id: str  # 対局ID（/api/new-game で取得）
    move: int  # 引く辺の ID


def _get_game(game_id: str) -> dict[str, Any]:
    game = _games.get(game_id)
    if game is None:
        raise HTTPException(404, "Game not found")
    return game


def _state_to_dict(game: dict[str, Any]) -> dict[str, Any]:
    """Convert a game session to a JSON-serializable dict.

    局面情報を JSON 形式（辞書）に変換する。
    フロントエンドはこの形式を受け取って盤面を描画する。
    """
    state: GalletaState = game["state"]
    shape: GalletaShape = game["shape"]
    board = state.board

    return {
        "current_player": state.current_player,  # 手番（0 or 1）
        "is_terminal": state.is_terminal,  # 終局フラグ
        "winner": state.get_winner() if state.is_terminal else None,  # -1 = 引き分け
        "scores": list(state.scores),
        "remaining_edges": state.remaining_edges,
        "legal_moves": state.legal_moves(),
        "edges_taken": list(state.edges_taken),
        "cell_owners": list(state.cell_owners),
        "ai_players": sorted(game["players"]),
        "radius": shape.radius,
        "vertices": [list(p) for p in shape.points()],  # 点の座標（頂点 ID 順）
        "edges": [[e.vertex_a, e.vertex_b] for e in board.edges],
        "cells": [list(c.edge_ids) for c in board.cells],
        "board_display": board_to_str(state, shape),  # テキスト形式の盤面表示
    }


def _play_ai_turns(game: dict[str, Any]) -> list[Move]:
    """Let the AI move for as long as it holds the turn (extra turns included)."""
    state: GalletaState = game["state"]
    players: dict[int, AIPlayer] = game["players"]
    moves: list[Move] = []
    while not state.is_terminal and state.current_player in players:
        move = players[state.current_player].get_move(state)
        state.apply(move)
        moves.append(move)
    if state.is_terminal:
        logger.info("game %s finished: scores=%s", game["id"], state.scores)
    return moves


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """フロントエンドの HTML を配信する。"""
    index_path = STATIC_DIR / "index.html"
    return HTMLResponse(content=index_path.read_text(encoding="utf-8"))


@app.post("/api/new-game")
async def new_game(req: NewGameRequest) -> dict[str, Any]:
    """新規対局を開始する。

    人間 vs AI で AI が先手なら、AI の手を指した後の局面を返す。
    """
    config = GameConfig(
        radius=req.radius,
        ai_depth=req.ai_depth,
        mode=req.mode,
        starting_player=req.starting_player,
    )
    shape = GalletaShape(config.radius)
    game_id = str(uuid.uuid4())[:8]  # 短いIDを生成
    game: dict[str, Any] = {
        "id": game_id,
        "config": config,
        "shape": shape,
        "state": GalletaState(shape.build(), config.starting_player),
        "players": {
            p: AIPlayer(p, _strategy, config.ai_depth) for p in config.ai_players()
        },
    }
    _games[game_id] = game
    logger.info("new game %s: mode=%s radius=%d depth=%d",
                game_id, config.mode.value, config.radius, config.ai_depth)

    ai_moves: list[Move] = []
    if config.mode == GameMode.HUMAN_VS_AI:
        ai_moves = _play_ai_turns(game)

    return {"game_id": game_id, "state": _state_to_dict(game), "ai_moves": ai_moves}


@app.post("/api/move")
async def make_move(req: MoveRequest) -> dict[str, Any]:
    """人間の手を受け取り、AI が手番を持つ間は AI が応答して次の局面を返す。

    処理フロー:
    1. 人間の手を検証して適用
    2. AI の手番なら探索して適用（セルを獲得すれば続けて指す）
    3. 最新の局面を返す
    """
    game = _get_game(req.game_id)
    state: GalletaState = game["state"]

    if state.is_terminal:
        raise HTTPException(400, "Game is already over")
    if state.current_player in game["players"]:
        raise HTTPException(400, "Current player is AI, use /api/ai-move instead")
    try:
        state.apply(req.move)
    except ValueError as e:
        raise HTTPException(400, f"Illegal move: {e}") from e

    ai_moves: list[Move] = []
    if game["config"].mode == GameMode.HUMAN_VS_AI:
        ai_moves = _play_ai_turns(game)

    return {"state": _state_to_dict(game), "player_move": req.move, "ai_moves": ai_moves}


@app.post("/api/ai-move/{game_id}")
async def ai_move(game_id: str) -> dict[str, Any]:
    """AI の手番で1手だけ進める（AI 同士の観戦モードでフロントエンドが定期的に呼ぶ）。"""
    game = _get_game(game_id)
    state: GalletaState = game["state"]
    player = state.current_player

    if state.is_terminal:
        raise HTTPException(400, "Game is already over")
    ai = game["players"].get(player)
    if ai is None:
        raise HTTPException(400, "Current player is human, use /api/move instead")

    try:
        move = ai.get_move(state)
    except InvalidOperationError as e:
        raise HTTPException(400, str(e)) from e
    result = state.apply(move)
    if state.is_terminal:
        logger.info("game %s finished: scores=%s", game_id, state.scores)

    return {
        "state": _state_to_dict(game),
        "move": move,
        "moved_by": player,
        "captured": list(result.captured),
    }


@app.get("/api/state/{game_id}")
async def get_state(game_id: str) -> dict[str, Any]:
    """現在の局面情報を取得する（ページ再読み込み時などに使用）。"""
    return _state_to_dict(_get_game(game_id))


@app.get("/api/advice/{game_id}")
async def get_advice(game_id: str) -> dict[str, Any]:
    """手番プレイヤー向けのアドバイスを返す。

    evaluation: 評価値とその内訳（材料・3辺セル・安全な手・2辺セル）
    moves:      合法手ごとの分類（capturing / safe / dangerous）
    best_move:  探索による推奨手
    """
    game = _get_game(game_id)
    state: GalletaState = game["state"]
    if state.is_terminal:
        raise HTTPException(400, "Game is already over")

    player = state.current_player
    depth = min(game["config"].ai_depth, MAX_ADVICE_DEPTH)
    best = _strategy.search(state, player, depth)
    breakdown = _evaluator.breakdown(state, player)

    return {
        "player": player,
        "evaluation": asdict(breakdown),
        "moves": [
            {"move": m, "kind": _evaluator.classify_move(state, m)}
            for m in state.legal_moves()
        ],
        "best_move": best.move,
        "best_score": best.score,
        "nodes": best.nodes,
    }


def main() -> None:
    """Run the web server.

    `uv run galleta-web` または `python -m galleta_ai.web.app` で起動する。
    ブラウザで http://localhost:8000 にアクセスして対局できる。
    """
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
