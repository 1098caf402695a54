"""Reversible game state for ガレッタ.

ガレッタの対局状態。探索中は1つのインスタンスを apply()/undo() で
その場で書き換える（ノードごとに盤面をコピーしない）。

apply() と undo() は必ず1対1・後入れ先出し（LIFO）で対応させること。
状態は未 undo の結果をスタックで保持しているので、順序違反や二重 undo は
InvalidOperationError として即座に検出される。
"""

from __future__ import annotations

from collections.abc import Iterator

import torch

from galleta_ai.game.galleta.board import Board
from galleta_ai.game.galleta.types import (
    EDGES_PER_CELL,
    NO_OWNER,
    TIE,
    AppliedResult,
    InvalidOperationError,
    Move,
    check_player,
)

# to_tensor_planes() のチャンネル数: 自分のセル, 相手のセル, 辺0〜3本の未獲得セル, 手番
NUM_PLANES = 7


class GalletaState:
    """Mutable game state with exact undo.

    ガレッタの対局状態。GameState プロトコルを実装する。

    不変条件:
    - remaining_edges == 未使用の辺の数
    - セルが所有されている ⇔ そのセルの4辺がすべて引かれている
    - scores[p] == p が所有するセルの数
    - 手番はセルを1つも獲得しなかった手の後でのみ交代する
    """

    def __init__(self, board: Board, starting_player: int = 0) -> None:
        check_player(starting_player, "starting_player")
        self._board = board
        self._edges_taken = [False] * board.num_edges
        self._cells_owned = [False] * board.num_cells
        self._cell_owners = [NO_OWNER] * board.num_cells
        self._scores = [0, 0]
        self._current_player = starting_player
        self._remaining_edges = board.num_edges
        # 未 undo の apply() 結果（LIFO 検証用）
        self._applied: list[AppliedResult] = []

    # --- 読み取り専用ビュー ---

    @property
    def board(self) -> Board:
        return self._board

    @property
    def edges_taken(self) -> tuple[bool, ...]:
        return tuple(self._edges_taken)

    @property
    def cells_owned(self) -> tuple[bool, ...]:
        return tuple(self._cells_owned)

    @property
    def cell_owners(self) -> tuple[int, ...]:
        return tuple(self._cell_owners)

    @property
    def scores(self) -> tuple[int, int]:
        return self._scores[0], self._scores[1]

    @property
    def current_player(self) -> int:
        """現在の手番プレイヤー（0 or 1）。"""
        return self._current_player

    @property
    def remaining_edges(self) -> int:
        return self._remaining_edges

    @property
    def action_space_size(self) -> int:
        """行動空間のサイズ（= 辺の総数）。"""
        return self._board.num_edges

    @property
    def history(self) -> tuple[Move, ...]:
        """Moves of every outstanding apply(), oldest first."""
        return tuple(result.move for result in self._applied)

    def is_edge_taken(self, edge_id: int) -> bool:
        return self._edges_taken[edge_id]

    def is_cell_owned(self, cell_id: int) -> bool:
        return self._cells_owned[cell_id]

    def cell_owner(self, cell_id: int) -> int:
        return self._cell_owners[cell_id]

    # --- ルール ---

    @property
    def is_terminal(self) -> bool:
        """すべての辺が引かれたら終局。"""
        return self._remaining_edges == 0

    def get_winner(self) -> int:
        """Return the winning player, or TIE (-1) on equal scores.

        終局前に呼ぶと InvalidOperationError。
        """
        if not self.is_terminal:
            raise InvalidOperationError("Cannot determine winner before the game ends")
        if self._scores[0] > self._scores[1]:
            return 0
        if self._scores[1] > self._scores[0]:
            return 1
        return TIE

    def generate_moves(self) -> Iterator[Move]:
        """Yield every undrawn edge id in ascending order.

        遅延評価のジェネレータ。呼び出すたびに最初からやり直せる。
        """
        taken = self._edges_taken
        return (edge_id for edge_id in range(len(taken)) if not taken[edge_id])

    def legal_moves(self) -> list[Move]:
        """合法手（未使用の辺）のリストを返す。"""
        return list(self.generate_moves())

    def count_drawn_edges(self, cell_id: int) -> int:
        """Count how many of a cell's four edges are drawn."""
        if not 0 <= cell_id < len(self._cells_owned):
            raise ValueError(f"Invalid cell id: {cell_id}")
        return self._count_drawn(cell_id)

    def _count_drawn(self, cell_id: int) -> int:
        taken = self._edges_taken
        return sum(1 for edge_id in self._board.cell_edges[cell_id] if taken[edge_id])

    def apply(self, move: Move) -> AppliedResult:
        """Draw an edge in place and return the record needed to undo it.

        辺を引き、囲み終わったセルを現在のプレイヤーのものにする。

        手番ルール:
        - 1つもセルを獲得しなかった → 手番交代
        - 1つ以上獲得した → 同じプレイヤーがもう一度指す（追加手番）
        """
        if not 0 <= move < len(self._edges_taken):
            raise ValueError(f"Invalid edge id: {move}")
        if self._edges_taken[move]:
            raise ValueError(f"Edge {move} has already been drawn")

        self._edges_taken[move] = True
        self._remaining_edges -= 1

        player = self._current_player
        captured: list[int] = []
        # この辺に接する未獲得セルだけを調べればよい（差分更新）
        for cell_id in self._board.edges_to_cells[move]:
            if self._cells_owned[cell_id]:
                continue
            if self._count_drawn(cell_id) == EDGES_PER_CELL:
                self._cells_owned[cell_id] = True
                self._cell_owners[cell_id] = player
                self._scores[player] += 1
                captured.append(cell_id)

        result = AppliedResult(move=move, captured=tuple(captured), player=player)
        if not captured:
            self._current_player = 1 - player
        self._applied.append(result)
        return result

    def undo(self, result: AppliedResult) -> None:
        """Invert the most recent outstanding apply().

        apply() の逆操作。result は直近の未 undo の apply() 結果でなければならない。
        """
        if not self._applied or self._applied[-1] is not result:
            raise InvalidOperationError(
                f"undo() out of order: {result} is not the most recent applied move"
            )
        self._applied.pop()

        self._edges_taken[result.move] = False
        self._remaining_edges += 1

        for cell_id in result.captured:
            self._cells_owned[cell_id] = False
            self._cell_owners[cell_id] = NO_OWNER
            self._scores[result.player] -= 1

        # 獲得なしの手だけが手番を交代させているので、そのときだけ戻す
        if not result.captured:
            self._current_player = result.player

    def clone(self) -> GalletaState:
        """Deep-copy the mutable fields, sharing the Board.

        独立したサンドボックスとして使えるコピーを返す。盤面構造は参照で共有する。
        """
        other = GalletaState(self._board, self._current_player)
        other._edges_taken = list(self._edges_taken)
        other._cells_owned = list(self._cells_owned)
        other._cell_owners = list(self._cell_owners)
        other._scores = list(self._scores)
        other._remaining_edges = self._remaining_edges
        other._applied = list(self._applied)
        return other

    def to_tensor_planes(self) -> torch.Tensor:
        """Encode the position as per-cell feature planes.

        局面をセル単位の特徴プレーン（NUM_PLANES × セル数）に変換する。

        ch.0:   現プレイヤーが所有するセル
        ch.1:   相手が所有するセル
        ch.2-5: 未獲得セルのうち、引かれた辺が 0/1/2/3 本のもの（one-hot）
        ch.6:   手番インジケータ（プレイヤー0の番なら全1）

        常に「現プレイヤーの視点」でエンコードする。
        """
        planes = torch.zeros(NUM_PLANES, self._board.num_cells)
        cp = self._current_player

        for cell_id, owner in enumerate(self._cell_owners):
            if owner == cp:
                planes[0, cell_id] = 1.0
            elif owner != NO_OWNER:
                planes[1, cell_id] = 1.0
            else:
                planes[2 + self._count_drawn(cell_id), cell_id] = 1.0

        if cp == 0:
            planes[6, :] = 1.0

        return planes

    def __str__(self) -> str:
        return (
            f"GalletaState: player {self._current_player} to move, "
            f"scores [{self._scores[0]}, {self._scores[1]}], "
            f"remaining edges: {self._remaining_edges}"
        )
