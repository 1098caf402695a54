"""Minimax search with alpha-beta pruning for ガレッタ.

ネガマックス法 + αβ枝刈りによる探索。

探索は1つの GalletaState を apply()/undo() でその場で書き換えながら進む。
どの経路で戻る場合も（枝刈りで打ち切る場合も）apply() には必ず undo() が
対応するので、探索後の状態は呼び出し前と完全に同じになる。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from galleta_ai.engine.evaluator import SimpleDotsEvaluator
from galleta_ai.engine.protocol import Evaluator
from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import (
    AppliedResult,
    InvalidOperationError,
    Move,
    check_player,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one top-level search.

    move:  最善手
    score: 最善手の評価値（探索したプレイヤー視点）
    nodes: この探索で訪れたノード数（診断用、手の選択には使わない）
    """

    move: Move
    score: int
    nodes: int


@dataclass
class _SearchStats:
    """Per-call node counter threaded through the recursion."""

    nodes: int = 0


def order_moves(state: GalletaState, moves: Iterable[Move]) -> list[Move]:
    """Order moves for better pruning: capturing, then safe, then dangerous.

    手順付け（ムーブオーダリング）。αβ枝刈りは良い手を先に調べるほど効く。
    1. セルを完成させる手
    2. 3辺のセルを作らない安全な手
    3. それ以外（相手にセルを渡す危険な手）
    各グループ内では辺 ID の昇順を保つ（安定・決定的）。
    探索結果の値は変えず、訪問ノード数だけを変える。
    """
    capturing: list[Move] = []
    safe: list[Move] = []
    dangerous: list[Move] = []
    edges_to_cells = state.board.edges_to_cells

    for move in moves:
        completes = False
        gives_away = False
        for cell_id in edges_to_cells[move]:
            if state.is_cell_owned(cell_id):
                continue
            sides = state.count_drawn_edges(cell_id)
            if sides == 3:
                completes = True
            elif sides == 2:
                gives_away = True

        if completes:
            capturing.append(move)
        elif not gives_away:
            safe.append(move)
        else:
            dangerous.append(move)

    return capturing + safe + dangerous


class MinimaxAlphaBeta:
    """Depth-limited negamax with alpha-beta pruning (a SearchStrategy).

    ネガマックス法とは:
    ミニマックス法の変形で、子ノードの評価値の符号を反転して返すことで
    max/min の交互の処理を1つの関数にまとめる。視点は1手ごとに相手へ移る。

    αβ枝刈りとは:
    alpha: 現在の視点のプレイヤーが保証できる最低スコア
    beta:  それ以上は相手が許さない上限
    alpha >= beta になった時点で残りの兄弟ノードは結果を変えられない。

    深さは1手ごとに必ず1減らす（セル獲得による追加手番でも同じ）。
    extend_capture_chains=True にすると、獲得した手では深さを減らさず
    連鎖の先まで読む（既定は無効）。

    インスタンスは探索ごとの可変状態を持たないので、別々の局面に対してなら
    同じインスタンスで同時に探索してよい。
    """

    def __init__(
        self,
        evaluator: Evaluator | None = None,
        extend_capture_chains: bool = False,
    ) -> None:
        self.evaluator: Evaluator = evaluator or SimpleDotsEvaluator()
        self.extend_capture_chains = extend_capture_chains

    def get_best_move(self, state: GalletaState, player: int, depth: int) -> Move:
        """Return the best edge for ``player`` from the current position."""
        return self.search(state, player, depth).move

    def search(self, state: GalletaState, player: int, depth: int) -> SearchResult:
        """Search ``depth`` plies and return the best move with its score.

        ルートでは最善「手」が必要なので beta カットはせず、alpha だけを
        兄弟ノード間で引き上げていく。
        """
        if state is None:
            raise ValueError("state must not be None")
        check_player(player, "maximizing player")
        if depth < 1:
            raise ValueError(f"Depth must be at least 1, got {depth}")
        if state.is_terminal:
            raise InvalidOperationError("Cannot search from a terminal state")

        stats = _SearchStats()
        alpha = float("-inf")
        beta = float("inf")
        best_move: Move | None = None
        best_score = float("-inf")

        for move in order_moves(state, state.generate_moves()):
            result = state.apply(move)
            try:
                # 相手視点の評価値を符号反転して自分の視点に変換（ネガマックスの核心）
                score = -self._alpha_beta(
                    state, 1 - player, self._next_depth(depth, result), -beta, -alpha, stats
                )
            finally:
                state.undo(result)

            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, score)

        assert best_move is not None  # 終局でなければ合法手は必ずある
        logger.debug(
            "search player=%d depth=%d -> move=%d score=%d nodes=%d",
            player, depth, best_move, best_score, stats.nodes,
        )
        return SearchResult(move=best_move, score=int(best_score), nodes=stats.nodes)

    def _alpha_beta(
        self,
        state: GalletaState,
        player: int,
        depth: int,
        alpha: float,
        beta: float,
        stats: _SearchStats,
    ) -> float:
        """Return the value of ``state`` for ``player`` within (alpha, beta)."""
        stats.nodes += 1

        # 終局または深さ0なら静的評価（葉ノード）
        if state.is_terminal or depth <= 0:
            return self.evaluator.evaluate(state, player)

        best_score = float("-inf")
        for move in order_moves(state, state.generate_moves()):
            result = state.apply(move)
            try:
                score = -self._alpha_beta(
                    state, 1 - player, self._next_depth(depth, result), -beta, -alpha, stats
                )
            finally:
                state.undo(result)

            best_score = max(best_score, score)
            alpha = max(alpha, score)
            if alpha >= beta:
                break  # βカットオフ: 残りの手はこのノードの値を変えられない

        return best_score

    def _next_depth(self, depth: int, result: AppliedResult) -> int:
        if self.extend_capture_chains and result.captured:
            return depth
        return depth - 1

    def __str__(self) -> str:
        return f"MinimaxAlphaBeta(extend_capture_chains={self.extend_capture_chains})"


def minimax_move(state: GalletaState, depth: int = 3) -> Move:
    """Return the best move for the player to move, using the default evaluator.

    ミニマックス探索で現在の手番プレイヤーの最善手を返す。
    """
    return MinimaxAlphaBeta().get_best_move(state, state.current_player, depth)
