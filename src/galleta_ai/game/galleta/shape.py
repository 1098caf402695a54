"""Diamond ("cookie") board shape generator.

クッキー型（菱形）の盤面を半径から生成する。

点の配置（radius=2 の例、x は左右、y は上下）:

        . .
      . . . .
    . . . . . .
    . . . . . .
      . . . .
        . .

中央の最も広い行は2行並ぶ（y=0 と y=1）。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from galleta_ai.game.galleta.board import Board
from galleta_ai.game.galleta.types import Cell, Edge, Orientation

MIN_RADIUS = 2


class Point2D(NamedTuple):
    """A lattice point; y grows downward."""

    x: int
    y: int

    def manhattan_distance(self, other: Point2D) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)


def _edge_key(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


@dataclass(frozen=True)
class GalletaShape:
    """Builds a Board for a cookie of the given radius.

    radius が大きいほど盤面が広くなる（2 = チュートリアル用の最小サイズ）。
    """

    radius: int

    def __post_init__(self) -> None:
        if self.radius < MIN_RADIUS:
            raise ValueError(
                f"Radius must be at least {MIN_RADIUS} to create a valid board, got {self.radius}"
            )

    def points(self) -> list[Point2D]:
        """Return every vertex position; the index is the vertex id.

        上半分（中央行を含む）→ 中央行の複製 → 下半分の順に、各行を左から右へ並べる。
        """
        r = self.radius
        points: list[Point2D] = []

        for y in range(-r, 1):
            half = r - abs(y)
            points.extend(Point2D(x, y) for x in range(-half, half + 2))
            if y == 0:
                # 最も広い行をもう1行追加する
                points.extend(Point2D(x, 1) for x in range(-half, half + 2))

        for y in range(2, r + 2):
            half = r - (y - 1)
            points.extend(Point2D(x, y) for x in range(-half, half + 2))

        return points

    def build(self) -> Board:
        """Generate vertices, edges and cells and return a validated Board."""
        points = self.points()
        index = {p: i for i, p in enumerate(points)}

        # 辺: 各点から右隣（横）と下隣（縦）へ
        edges: list[Edge] = []
        edge_ids: dict[tuple[int, int], int] = {}
        for p, a in index.items():
            for neighbour, orientation in (
                (Point2D(p.x + 1, p.y), Orientation.HORIZONTAL),
                (Point2D(p.x, p.y + 1), Orientation.VERTICAL),
            ):
                b = index.get(neighbour)
                if b is None:
                    continue
                key = _edge_key(a, b)
                if key not in edge_ids:
                    edge_ids[key] = len(edges)
                    edges.append(Edge(len(edges), a, b, orientation))

        # セル: 4隅がそろい、4辺がすべて存在する単位正方形
        cells: list[Cell] = []
        for top_left in points:
            corners = (
                top_left,
                Point2D(top_left.x + 1, top_left.y),
                Point2D(top_left.x, top_left.y + 1),
                Point2D(top_left.x + 1, top_left.y + 1),
            )
            if any(c not in index for c in corners):
                continue
            v1, v2, v3, v4 = (index[c] for c in corners)
            sides = (
                edge_ids.get(_edge_key(v1, v2)),  # 上
                edge_ids.get(_edge_key(v2, v4)),  # 右
                edge_ids.get(_edge_key(v3, v4)),  # 下
                edge_ids.get(_edge_key(v1, v3)),  # 左
            )
            if None in sides:
                continue
            cells.append(Cell(len(cells), tuple(sides)))  # type: ignore[arg-type]

        return Board(len(points), edges, cells)

    @property
    def complexity(self) -> str:
        """盤面の難易度ラベル。"""
        labels = {2: "Very easy (tutorial)", 3: "Easy", 4: "Medium", 5: "Hard"}
        return labels.get(self.radius, "Very hard")

    def describe(self) -> str:
        return (
            f"Galleta board (radius={self.radius}): {len(self.points())} vertices, "
            f"complexity: {self.complexity}"
        )
