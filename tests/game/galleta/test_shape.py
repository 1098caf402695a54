"""Tests for the cookie-shaped board generator."""

import pytest

from galleta_ai.game.galleta.shape import GalletaShape, Point2D
from galleta_ai.game.galleta.types import Orientation


class TestRadiusValidation:
    @pytest.mark.parametrize("radius", [-1, 0, 1])
    def test_too_small(self, radius: int) -> None:
        with pytest.raises(ValueError, match="at least 2"):
            GalletaShape(radius)


class TestPoints:
    def test_radius_2_row_widths(self) -> None:
        points = GalletaShape(2).points()
        widths: dict[int, int] = {}
        for p in points:
            widths[p.y] = widths.get(p.y, 0) + 1
        assert widths == {-2: 2, -1: 4, 0: 6, 1: 6, 2: 4, 3: 2}

    def test_first_points(self) -> None:
        points = GalletaShape(2).points()
        assert points[:2] == [Point2D(0, -2), Point2D(1, -2)]

    def test_unique(self) -> None:
        points = GalletaShape(4).points()
        assert len(points) == len(set(points))

    def test_mirror_symmetric(self) -> None:
        # 左右対称: x ↔ 1 - x、上下対称: y ↔ 1 - y
        points = set(GalletaShape(3).points())
        assert {Point2D(1 - p.x, p.y) for p in points} == points
        assert {Point2D(p.x, 1 - p.y) for p in points} == points


class TestBuild:
    @pytest.mark.parametrize(
        ("radius", "vertices", "edges", "cells"),
        [(2, 24, 36, 13), (3, 40, 64, 25)],
    )
    def test_sizes(self, radius: int, vertices: int, edges: int, cells: int) -> None:
        board = GalletaShape(radius).build()
        assert board.vertex_count == vertices
        assert board.num_edges == edges
        assert board.num_cells == cells

    def test_edges_belong_to_one_or_two_cells(self) -> None:
        board = GalletaShape(3).build()
        for cell_ids in board.edges_to_cells:
            assert 1 <= len(cell_ids) <= 2

    def test_each_cell_counted_four_times(self) -> None:
        board = GalletaShape(3).build()
        total = sum(len(cell_ids) for cell_ids in board.edges_to_cells)
        assert total == 4 * board.num_cells

    def test_cell_edge_order_is_top_right_bottom_left(self) -> None:
        board = GalletaShape(2).build()
        for cell in board.cells:
            top, right, bottom, left = (board.edges[e] for e in cell.edge_ids)
            assert top.orientation == Orientation.HORIZONTAL
            assert bottom.orientation == Orientation.HORIZONTAL
            assert right.orientation == Orientation.VERTICAL
            assert left.orientation == Orientation.VERTICAL

    def test_first_edges(self) -> None:
        board = GalletaShape(2).build()
        # 最上段の2点: 右への横辺、続いて下への縦辺
        assert (board.edges[0].vertex_a, board.edges[0].vertex_b) == (0, 1)
        assert board.edges[0].orientation == Orientation.HORIZONTAL
        assert board.edges[1].orientation == Orientation.VERTICAL

    def test_edges_connect_adjacent_points(self) -> None:
        shape = GalletaShape(3)
        points = shape.points()
        for edge in shape.build().edges:
            a, b = points[edge.vertex_a], points[edge.vertex_b]
            assert a.manhattan_distance(b) == 1


class TestDescription:
    @pytest.mark.parametrize(
        ("radius", "label"),
        [(2, "Very easy (tutorial)"), (3, "Easy"), (4, "Medium"), (5, "Hard"), (7, "Very hard")],
    )
    def test_complexity(self, radius: int, label: str) -> None:
        assert GalletaShape(radius).complexity == label

    def test_describe(self) -> None:
        text = GalletaShape(2).describe()
        assert "radius=2" in text
        assert "24 vertices" in text
