"""Terminal display for ガレッタ boards.

ガレッタの盤面をターミナルに表示するためのモジュール。
"""

from __future__ import annotations

from galleta_ai.game.galleta.shape import GalletaShape, Point2D
from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import NO_OWNER, TIE, Player

# セル所有者の表示文字: X = プレイヤー1、O = プレイヤー2
OWNER_CHARS: dict[int, str] = {
    Player.FIRST: "X",
    Player.SECOND: "O",
}

VERTEX_CHAR = "+"
# 1列あたりの文字幅（点1文字 + 横辺4文字）
_COL_WIDTH = 5


def player_label(player: int) -> str:
    """プレイヤー ID を表示名に変換する（0 → "Player 1"）。"""
    return f"Player {player + 1} ({OWNER_CHARS[player]})"


def board_to_str(state: GalletaState, shape: GalletaShape) -> str:
    """Convert a state to a human-readable string.

    盤面を人間が読みやすい文字列に変換する。

    Example output (radius=2, 何も引かれていない状態):
        Player 1 (X): 0   Player 2 (O): 0
        Turn: Player 1 (X)

                    + 0  +
                    1    2
               + 3  + 5  + 7  +
               4    6    8    9
        ...

    マス目の見方:
    - "+" = 点
    - "----" / "|" = 引かれた辺
    - 数字 = まだ引かれていない辺の ID（この番号を入力して辺を引く）
    - "X" / "O" = 獲得済みのセル
    """
    board = state.board
    points = shape.points()
    if len(points) != board.vertex_count:
        raise ValueError("Shape does not match the board of this state")

    index = {p: i for i, p in enumerate(points)}
    edge_at = {
        (min(e.vertex_a, e.vertex_b), max(e.vertex_a, e.vertex_b)): e.id for e in board.edges
    }
    # セルの左上の点 → セル ID
    cell_at: dict[Point2D, int] = {}
    for cell in board.cells:
        corners = [points[v] for eid in cell.edge_ids for v in (
            board.edges[eid].vertex_a, board.edges[eid].vertex_b)]
        cell_at[min(corners, key=lambda p: (p.y, p.x))] = cell.id

    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)
    width = (max_x - min_x) * _COL_WIDTH + 1

    def edge_between(a: Point2D, b: Point2D) -> int | None:
        va, vb = index.get(a), index.get(b)
        if va is None or vb is None:
            return None
        return edge_at.get((min(va, vb), max(va, vb)))

    lines: list[str] = []
    s0, s1 = state.scores
    lines.append(f"{player_label(0)}: {s0}   {player_label(1)}: {s1}")
    lines.append(f"Turn: {player_label(state.current_player)}")
    lines.append("")

    for y in range(min_y, max_y + 1):
        # 点と横辺の行
        row = [" "] * width
        # 縦辺とセルの行
        below = [" "] * width
        for x in range(min_x, max_x + 1):
            p = Point2D(x, y)
            if p not in index:
                continue
            col = (x - min_x) * _COL_WIDTH
            row[col] = VERTEX_CHAR

            right = edge_between(p, Point2D(x + 1, y))
            if right is not None:
                text = "----" if state.is_edge_taken(right) else f"{right:^4}"
                row[col + 1 : col + 5] = text

            down = edge_between(p, Point2D(x, y + 1))
            if down is not None:
                text = "|" if state.is_edge_taken(down) else str(down)
                below[col : col + len(text)] = text

            cell_id = cell_at.get(p)
            if cell_id is not None and state.cell_owner(cell_id) != NO_OWNER:
                below[col + 3] = OWNER_CHARS[state.cell_owner(cell_id)]

        lines.append("  " + "".join(row).rstrip())
        if y < max_y:
            lines.append("  " + "".join(below).rstrip())

    return "\n".join(lines)


def format_result(state: GalletaState) -> str:
    """Describe the final outcome of a finished game.

    終局時の結果を文字列で返す。
    """
    winner = state.get_winner()
    s0, s1 = state.scores
    if winner == TIE:
        return f"Draw! {s0} - {s1}"
    return f"{player_label(winner)} wins! {s0} - {s1}"
