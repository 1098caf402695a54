"""Heuristic position evaluation for ガレッタ.

ガレッタの静的評価関数。

評価の要素（重み付き線形和）:
- 材料: 獲得セル数の差（最重要）
- あと1辺のセル（3辺）: 相手にただで取られる危険なセル
- 安全な手: 3辺のセルを作らない手の数（手番の余裕）
- 2辺のセル: 連鎖（チェーン）の種
"""

from __future__ import annotations

from dataclasses import dataclass

from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import Move, check_player

WIN_SCORE = 10000
LOSS_SCORE = -WIN_SCORE
DRAW_SCORE = 0

# classify_move() の分類ラベル（探索の手順付けと同じ3段階）
CAPTURING = "capturing"
SAFE = "safe"
DANGEROUS = "dangerous"


@dataclass(frozen=True)
class EvaluatorWeights:
    """Weights of the linear evaluation.

    material:   獲得セル差の重み
    almost:     3辺セル数の差の重み
    safe_moves: 安全な手の数の差の重み
    two_sided:  2辺セル数の差の重み
    """

    material: int = 100
    almost: int = 20
    safe_moves: int = 5
    two_sided: int = 2


@dataclass(frozen=True)
class PlayerFeatures:
    """Feature counts over the unowned cells of a position."""

    almost: int = 0       # 3辺
    two_sided: int = 0    # 2辺
    one_sided: int = 0    # 1辺
    empty: int = 0        # 0辺
    safe_moves: int = 0

    def __str__(self) -> str:
        return (
            f"Almost:{self.almost}, TwoSided:{self.two_sided}, OneSided:{self.one_sided}, "
            f"Empty:{self.empty}, Safe:{self.safe_moves}"
        )


@dataclass(frozen=True)
class EvaluationBreakdown:
    """Per-term contributions to an evaluation, for analysis tools."""

    total: int
    is_terminal: bool
    material: int = 0
    almost: int = 0
    safe_moves: int = 0
    two_sided: int = 0
    own: PlayerFeatures | None = None
    opponent: PlayerFeatures | None = None

    def __str__(self) -> str:
        if self.is_terminal:
            return f"Terminal: {self.total}"
        return (
            f"Total:{self.total} = Material:{self.material} + Almost:{self.almost} "
            f"+ Safe:{self.safe_moves} + TwoSided:{self.two_sided}"
        )


def _adjacent_counts(state: GalletaState, move: Move) -> list[int]:
    """Drawn-edge counts of the unowned cells next to an edge."""
    return [
        state.count_drawn_edges(cell_id)
        for cell_id in state.board.edges_to_cells[move]
        if not state.is_cell_owned(cell_id)
    ]


def _in_range(state: GalletaState, move: Move) -> bool:
    return 0 <= move < state.board.num_edges


class SimpleDotsEvaluator:
    """Weighted-feature evaluator (implements the Evaluator protocol).

    evaluate() は最大化プレイヤー視点の整数スコアを返す。
    終局なら勝ち +10000 / 負け -10000 / 引き分け 0。
    """

    def __init__(self, weights: EvaluatorWeights | None = None) -> None:
        self.weights = weights or EvaluatorWeights()

    def evaluate(self, state: GalletaState, player: int) -> int:
        check_player(player, "maximizing player")
        if state.is_terminal:
            return self._evaluate_terminal(state, player)
        return self.breakdown(state, player).total

    def _evaluate_terminal(self, state: GalletaState, player: int) -> int:
        winner = state.get_winner()
        if winner == player:
            return WIN_SCORE
        if winner == 1 - player:
            return LOSS_SCORE
        return DRAW_SCORE

    def features(self, state: GalletaState) -> PlayerFeatures:
        """Count unowned cells by drawn sides, and the safe moves available.

        所有済みのセルは数えない。
        """
        counts = [0, 0, 0, 0]
        for cell_id in range(state.board.num_cells):
            if state.is_cell_owned(cell_id):
                continue
            counts[state.count_drawn_edges(cell_id)] += 1

        safe = sum(1 for move in state.generate_moves() if self.is_safe_move(state, move))
        return PlayerFeatures(
            almost=counts[3],
            two_sided=counts[2],
            one_sided=counts[1],
            empty=counts[0],
            safe_moves=safe,
        )

    def breakdown(self, state: GalletaState, player: int) -> EvaluationBreakdown:
        """Return the evaluation of ``state`` split into its weighted terms."""
        check_player(player, "maximizing player")
        if state.is_terminal:
            return EvaluationBreakdown(
                total=self._evaluate_terminal(state, player), is_terminal=True
            )

        opponent = 1 - player
        # 特徴量は盤面だけで決まるので、両プレイヤーで同じ値を使う
        own = opp = self.features(state)
        w = self.weights
        scores = state.scores

        material = (scores[player] - scores[opponent]) * w.material
        # 3辺セルは相手にとっての得点機会なので「相手 − 自分」
        almost = (opp.almost - own.almost) * w.almost
        safe_moves = (own.safe_moves - opp.safe_moves) * w.safe_moves
        two_sided = (own.two_sided - opp.two_sided) * w.two_sided

        return EvaluationBreakdown(
            total=material + almost + safe_moves + two_sided,
            is_terminal=False,
            material=material,
            almost=almost,
            safe_moves=safe_moves,
            two_sided=two_sided,
            own=own,
            opponent=opp,
        )

    def is_capturing_move(self, state: GalletaState, move: Move) -> bool:
        """True if drawing ``move`` completes at least one unowned cell."""
        if not _in_range(state, move):
            return False
        return any(count == 3 for count in _adjacent_counts(state, move))

    def is_safe_move(self, state: GalletaState, move: Move) -> bool:
        """True if drawing ``move`` leaves no unowned cell with exactly 3 sides.

        隣接する未獲得セルに2辺のものがあれば、この手で3辺になり相手に取られる。
        """
        if not _in_range(state, move):
            return False
        return all(count != 2 for count in _adjacent_counts(state, move))

    def classify_move(self, state: GalletaState, move: Move) -> str:
        """Return ``"capturing"``, ``"safe"`` or ``"dangerous"``."""
        if self.is_capturing_move(state, move):
            return CAPTURING
        if self.is_safe_move(state, move):
            return SAFE
        return DANGEROUS
