"""Pluggable engine capabilities.

評価関数と探索アルゴリズムのインタフェース。
どちらも振る舞いのメソッドが1つだけなので継承階層は作らず、
プロトコルを満たす具象クラスを組み立てる側（AIPlayer, CLI, Web）で選ぶ。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import Move


@runtime_checkable
class Evaluator(Protocol):
    """Scores a position from one player's perspective (positive = good for them)."""

    def evaluate(self, state: GalletaState, player: int) -> int:
        ...


@runtime_checkable
class SearchStrategy(Protocol):
    """Chooses a move for ``player`` by searching ``depth`` plies ahead."""

    def get_best_move(self, state: GalletaState, player: int, depth: int) -> Move:
        ...
