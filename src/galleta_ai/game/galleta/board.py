"""Board structure for ガレッタ.

盤面の静的構造（点・辺・セル）と隣接関係のキャッシュ。
構築後は一切変更しないので、複数の GalletaState から参照で共有できる。

隣接関係を前計算しておく理由:
- apply() で「この辺に接するセル」を O(1) で引ける
- 評価関数がセルごとに辺を数えるときに毎回探索しなくて済む
"""

from __future__ import annotations

from collections.abc import Sequence

from galleta_ai.game.galleta.types import (
    EDGES_PER_CELL,
    BoardValidationError,
    Cell,
    Edge,
    Orientation,
)


class Board:
    """Immutable graph of vertices, edges and cells.

    vertex_count:   点の数
    edges:          辺のタプル（edges[i].id == i）
    cells:          セルのタプル（cells[i].id == i）
    edges_to_cells: 辺 ID → その辺に接するセル ID（0〜2個）
    cell_edges:     セル ID → そのセルを囲む4本の辺 ID
    """

    __slots__ = ("vertex_count", "edges", "cells", "edges_to_cells", "cell_edges")

    def __init__(
        self,
        vertex_count: int,
        edges: Sequence[Edge],
        cells: Sequence[Cell],
    ) -> None:
        if vertex_count <= 0:
            raise BoardValidationError(f"Vertex count must be positive, got {vertex_count}")
        if not edges:
            raise BoardValidationError("Board must have at least one edge")

        self.vertex_count = vertex_count
        self.edges: tuple[Edge, ...] = tuple(edges)
        self.cells: tuple[Cell, ...] = tuple(cells)

        self._validate()

        # 検証済みなので参照はすべて範囲内
        self.cell_edges: tuple[tuple[int, ...], ...] = tuple(
            tuple(cell.edge_ids) for cell in self.cells
        )
        self.edges_to_cells: tuple[tuple[int, ...], ...] = self._build_edges_to_cells()

    def _validate(self) -> None:
        """Check every structural invariant, raising BoardValidationError."""
        num_edges = len(self.edges)

        for i, edge in enumerate(self.edges):
            if edge.id != i:
                raise BoardValidationError(f"Edge at index {i} has incorrect id {edge.id}")
            for vertex in (edge.vertex_a, edge.vertex_b):
                if not 0 <= vertex < self.vertex_count:
                    raise BoardValidationError(
                        f"Edge {edge.id} references invalid vertex {vertex}"
                    )
            if edge.vertex_a == edge.vertex_b:
                raise BoardValidationError(
                    f"Edge {edge.id} must connect two different vertices"
                )

        for i, cell in enumerate(self.cells):
            if cell.id != i:
                raise BoardValidationError(f"Cell at index {i} has incorrect id {cell.id}")
            if len(cell.edge_ids) != EDGES_PER_CELL:
                raise BoardValidationError(
                    f"Cell {cell.id} must have exactly {EDGES_PER_CELL} edges, "
                    f"got {len(cell.edge_ids)}"
                )
            for edge_id in cell.edge_ids:
                if not 0 <= edge_id < num_edges:
                    raise BoardValidationError(
                        f"Cell {cell.id} references invalid edge {edge_id}"
                    )

    def _build_edges_to_cells(self) -> tuple[tuple[int, ...], ...]:
        mapping: list[list[int]] = [[] for _ in self.edges]
        for cell in self.cells:
            for edge_id in cell.edge_ids:
                mapping[edge_id].append(cell.id)
        return tuple(tuple(cell_ids) for cell_ids in mapping)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @property
    def num_cells(self) -> int:
        return len(self.cells)

    @classmethod
    def single_cell(cls) -> Board:
        """Return the smallest playable board: one cell, four edges.

        最小の盤面（セル1つ、辺4本）。
            0 ---0--- 1
            |         |
            3         1
            |         |
            2 ---2--- 3
        辺の並び: 0=上, 1=右, 2=下, 3=左
        """
        edges = [
            Edge(0, 0, 1, Orientation.HORIZONTAL),
            Edge(1, 1, 3, Orientation.VERTICAL),
            Edge(2, 2, 3, Orientation.HORIZONTAL),
            Edge(3, 0, 2, Orientation.VERTICAL),
        ]
        return cls(4, edges, [Cell(0, (0, 1, 2, 3))])

    def __str__(self) -> str:
        return (
            f"Board: {self.vertex_count} vertices, "
            f"{self.num_edges} edges, {self.num_cells} cells"
        )
