"""Tests for minimax search engine."""

from __future__ import annotations

import random

import pytest

from galleta_ai.engine.evaluator import SimpleDotsEvaluator
from galleta_ai.engine.minimax import MinimaxAlphaBeta, SearchResult, minimax_move, order_moves
from galleta_ai.engine.random_player import random_move
from galleta_ai.game.galleta.board import Board
from galleta_ai.game.galleta.shape import GalletaShape
from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import Cell, Edge, InvalidOperationError, Orientation

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


def _two_cell_state(*moves: int) -> GalletaState:
    """Two cells sharing edge 3; apply ``moves`` in order."""
    edges = [
        Edge(0, 0, 1, H), Edge(1, 1, 2, H),
        Edge(2, 0, 3, V), Edge(3, 1, 4, V), Edge(4, 2, 5, V),
        Edge(5, 3, 4, H), Edge(6, 4, 5, H),
    ]
    board = Board(6, edges, [Cell(0, (0, 3, 5, 2)), Cell(1, (1, 4, 6, 3))])
    state = GalletaState(board)
    for move in moves:
        state.apply(move)
    return state


def _random_position(radius: int, num_moves: int, seed: int) -> GalletaState:
    rng = random.Random(seed)
    state = GalletaState(GalletaShape(radius).build())
    for _ in range(num_moves):
        state.apply(random_move(state, rng))
    return state


def _snapshot(state: GalletaState) -> tuple:
    return (
        state.edges_taken,
        state.cell_owners,
        state.scores,
        state.current_player,
        state.remaining_edges,
        state.history,
    )


def _plain_negamax(
    state: GalletaState, player: int, depth: int, evaluator: SimpleDotsEvaluator
) -> int:
    """Unpruned negamax with the same perspective and depth rules."""
    if state.is_terminal or depth <= 0:
        return evaluator.evaluate(state, player)
    best = None
    for move in state.legal_moves():
        result = state.apply(move)
        score = -_plain_negamax(state, 1 - player, depth - 1, evaluator)
        state.undo(result)
        best = score if best is None else max(best, score)
    assert best is not None
    return best


def _plain_root_score(state: GalletaState, player: int, depth: int) -> int:
    evaluator = SimpleDotsEvaluator()
    scores = []
    for move in state.legal_moves():
        result = state.apply(move)
        scores.append(-_plain_negamax(state, 1 - player, depth - 1, evaluator))
        state.undo(result)
    return max(scores)


def _count_unpruned_nodes(state: GalletaState, depth: int) -> int:
    if state.is_terminal or depth <= 0:
        return 1
    total = 1
    for move in state.legal_moves():
        result = state.apply(move)
        total += _count_unpruned_nodes(state, depth - 1)
        state.undo(result)
    return total


class TestOrderMoves:
    def test_three_tiers(self) -> None:
        # セル0: 辺0, 2, 5 → 3本（辺3で完成）、セル1: 辺1, 4 → 2本
        state = _two_cell_state(0, 1, 2, 5, 4)
        # 3 = 獲得、6 = セル1を3辺にする危険な手
        assert order_moves(state, state.generate_moves()) == [3, 6]

    def test_safe_before_dangerous_keeps_id_order(self) -> None:
        # セル0: 辺0, 2 → 2本、セル1: 辺1 → 1本
        state = _two_cell_state(0, 1, 2)
        assert order_moves(state, state.generate_moves()) == [4, 6, 3, 5]

    def test_initial_order_is_ascending(self) -> None:
        state = GalletaState(GalletaShape(2).build())
        assert order_moves(state, state.generate_moves()) == list(range(36))

    def test_is_permutation(self) -> None:
        state = _random_position(3, 30, seed=1)
        legal = state.legal_moves()
        assert sorted(order_moves(state, legal)) == legal


class TestValidation:
    def test_none_state(self) -> None:
        with pytest.raises(ValueError):
            MinimaxAlphaBeta().get_best_move(None, 0, 1)  # type: ignore[arg-type]

    @pytest.mark.parametrize("player", [-1, 2])
    def test_invalid_player(self, player: int) -> None:
        state = GalletaState(Board.single_cell())
        with pytest.raises(ValueError):
            MinimaxAlphaBeta().get_best_move(state, player, 1)

    @pytest.mark.parametrize("depth", [0, -3])
    def test_non_positive_depth(self, depth: int) -> None:
        state = GalletaState(Board.single_cell())
        with pytest.raises(ValueError, match="Depth"):
            MinimaxAlphaBeta().get_best_move(state, 0, depth)

    def test_terminal_state(self) -> None:
        state = GalletaState(Board.single_cell())
        for edge in range(4):
            state.apply(edge)
        with pytest.raises(InvalidOperationError):
            MinimaxAlphaBeta().get_best_move(state, 1, 2)


class TestSearch:
    def test_returns_legal_move(self) -> None:
        state = GalletaState(GalletaShape(2).build())
        move = MinimaxAlphaBeta().get_best_move(state, 0, 2)
        assert move in state.legal_moves()

    def test_takes_free_cell(self) -> None:
        # プレイヤー0の手番、辺3でセル0を獲得できる
        state = _two_cell_state(0, 1, 2, 5)
        assert state.current_player == 0
        for depth in (1, 2, 3):
            assert MinimaxAlphaBeta().get_best_move(state, 0, depth) == 3

    def test_avoids_giving_away_cell(self) -> None:
        # セル0: 辺0, 2 → 2本。辺3, 5 は相手にセルを渡す
        state = _two_cell_state(0, 1, 2)
        assert state.current_player == 1
        move = MinimaxAlphaBeta().get_best_move(state, 1, 2)
        assert move in (4, 6)

    def test_search_result(self) -> None:
        state = _two_cell_state(0, 1, 2, 5)
        result = MinimaxAlphaBeta().search(state, 0, 1)
        assert isinstance(result, SearchResult)
        assert result.move == 3
        assert result.score == 100
        assert result.nodes == 3  # ルート直下の3手を1回ずつ評価

    def test_last_move(self) -> None:
        state = GalletaState(Board.single_cell())
        for edge in range(3):
            state.apply(edge)
        result = MinimaxAlphaBeta().search(state, 1, 4)
        assert result.move == 3
        assert result.score == 10000

    def test_state_restored(self) -> None:
        state = _random_position(2, 12, seed=7)
        before = _snapshot(state)
        MinimaxAlphaBeta().search(state, state.current_player, 3)
        assert _snapshot(state) == before

    def test_deterministic(self) -> None:
        state = _random_position(3, 20, seed=3)
        strategy = MinimaxAlphaBeta()
        moves = {strategy.get_best_move(state, state.current_player, 2) for _ in range(3)}
        assert len(moves) == 1

    def test_node_counter_is_per_call(self) -> None:
        state = _random_position(2, 10, seed=5)
        strategy = MinimaxAlphaBeta()
        first = strategy.search(state, state.current_player, 2)
        second = strategy.search(state, state.current_player, 2)
        assert first.nodes == second.nodes > 0

    def test_minimax_move_uses_current_player(self) -> None:
        state = _two_cell_state(0, 1, 2, 5)
        assert minimax_move(state, depth=2) == 3


class TestAlphaBetaEquivalence:
    @pytest.mark.parametrize(
        ("radius", "num_moves", "seed", "depth"),
        [
            (2, 0, 0, 2),
            (2, 20, 1, 3),
            (2, 26, 2, 4),
            (2, 30, 3, 5),
            (3, 50, 4, 3),
        ],
    )
    def test_same_score_as_full_minimax(
        self, radius: int, num_moves: int, seed: int, depth: int
    ) -> None:
        state = _random_position(radius, num_moves, seed)
        player = state.current_player
        pruned = MinimaxAlphaBeta().search(state, player, depth)
        assert pruned.score == _plain_root_score(state, player, depth)

    def test_whole_tree_of_two_cells(self) -> None:
        state = _two_cell_state()
        pruned = MinimaxAlphaBeta().search(state, 0, 7)
        assert pruned.score == _plain_root_score(state, 0, 7)

    def test_fewer_nodes_than_full_tree(self) -> None:
        state = _random_position(2, 22, seed=9)
        depth = 4
        pruned = MinimaxAlphaBeta().search(state, state.current_player, depth)
        # ルートを除いた全ノード数
        full = _count_unpruned_nodes(state, depth) - 1
        assert pruned.nodes < full


class TestCaptureChainExtension:
    def test_extension_visits_at_least_as_many_nodes(self) -> None:
        state = _two_cell_state(0, 1, 2, 5)
        plain = MinimaxAlphaBeta().search(state, 0, 2)
        extended = MinimaxAlphaBeta(extend_capture_chains=True).search(state, 0, 2)
        assert extended.move == plain.move == 3
        assert extended.nodes >= plain.nodes

    def test_extension_returns_legal_move(self) -> None:
        state = _random_position(2, 24, seed=11)
        move = MinimaxAlphaBeta(extend_capture_chains=True).get_best_move(
            state, state.current_player, 2
        )
        assert move in state.legal_moves()


class TestMinimaxVsRandom:
    @pytest.mark.slow
    def test_minimax_beats_random(self) -> None:
        """Minimax (depth=2) should win most games vs random on radius 2."""
        rng = random.Random(0)
        wins = 0
        num_games = 20
        for _ in range(num_games):
            state = GalletaState(GalletaShape(2).build())
            while not state.is_terminal:
                if state.current_player == 0:
                    move = minimax_move(state, depth=2)
                else:
                    move = random_move(state, rng)
                state.apply(move)
            if state.get_winner() == 0:
                wins += 1
        assert wins / num_games > 0.7, f"Minimax won only {wins}/{num_games}"
