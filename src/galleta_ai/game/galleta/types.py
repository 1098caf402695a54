"""Types and constants for ガレッタ (Juego de la Galleta).

ガレッタ（ドット・アンド・ボックスの菱形盤バリアント）の基本型・定数定義。
盤面は「点・辺・セル」のグラフで表現し、手は引く辺の ID（整数）で表す。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, unique

# セルの所有者なし / 引き分けを表す番兵値
NO_OWNER = -1
TIE = -1

# 1つのセルを囲む辺の数
EDGES_PER_CELL = 4

# 手は引く辺の ID そのもの（イミュータブルな整数値）
Move = int


class BoardValidationError(ValueError):
    """Raised when a board's structure violates its invariants.

    盤面の構造が不正（ID が連番でない、範囲外の参照など）なときに送出する。
    """


class InvalidOperationError(RuntimeError):
    """Raised when an operation is not allowed in the current game state.

    終局前の勝者判定・終局後の探索・手番違いなど、呼び出し側のバグを表す。
    """


@unique
class Player(IntEnum):
    """Player identifiers.

    FIRST（プレイヤー1）が先に辺を引く。表示上は X、後手の SECOND は O。
    """

    FIRST = 0   # プレイヤー1
    SECOND = 1  # プレイヤー2

    @property
    def opponent(self) -> Player:
        """相手プレイヤーを返す。0↔1 の切り替え。"""
        return Player(1 - self.value)


def check_player(player: int, name: str = "player") -> int:
    """Validate a player id and return it unchanged.

    プレイヤー ID が 0 か 1 であることを検証する。
    """
    if player not in (Player.FIRST, Player.SECOND):
        raise ValueError(f"{name} must be 0 or 1, got {player}")
    return player


@unique
class Orientation(Enum):
    """Direction of an edge on the drawn board."""

    HORIZONTAL = "H"
    VERTICAL = "V"


@dataclass(frozen=True)
class Edge:
    """A candidate line between two adjacent points.

    2つの隣接する点を結ぶ辺。引くと「手」になる。
    """

    id: int
    vertex_a: int
    vertex_b: int
    orientation: Orientation = Orientation.HORIZONTAL

    def __str__(self) -> str:
        return f"Edge {self.id}: {self.vertex_a} -> {self.vertex_b} ({self.orientation.value})"


@dataclass(frozen=True)
class Cell:
    """A unit square bounded by four edges.

    4本の辺で囲まれたセル。4本すべて引かれると、最後の辺を引いたプレイヤーのものになる。
    edge_ids は (上, 右, 下, 左) の順。
    """

    id: int
    edge_ids: tuple[int, ...]

    def __str__(self) -> str:
        return f"Cell {self.id}: [{', '.join(str(e) for e in self.edge_ids)}]"


@dataclass(frozen=True)
class AppliedResult:
    """Everything needed to invert one ``apply`` call.

    apply() の結果。undo() に渡すと盤面を完全に元へ戻せる（コマンドパターン）。
    対応する undo() で一度だけ消費する使い捨ての値で、棋譜ではない。

    move:     引いた辺
    captured: この手で獲得したセル ID（空の場合もある）
    player:   手を指したプレイヤー
    """

    move: Move
    captured: tuple[int, ...]
    player: int

    @property
    def captured_count(self) -> int:
        return len(self.captured)

    def __str__(self) -> str:
        if self.captured:
            return (
                f"Applied edge {self.move} by player {self.player}: "
                f"captured {self.captured_count} cell(s)"
            )
        return f"Applied edge {self.move} by player {self.player}: no captures"
