"""AI player: validates the turn and delegates to a search strategy.

AI プレイヤー。手番の検証だけを行い、手の選択は探索アルゴリズムに任せる。
"""

from __future__ import annotations

import logging

from galleta_ai.engine.protocol import SearchStrategy
from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import InvalidOperationError, Move, check_player

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 5


class AIPlayer:
    """An engine-driven player bound to one player id and search depth."""

    def __init__(
        self,
        player: int,
        strategy: SearchStrategy,
        depth: int = DEFAULT_DEPTH,
    ) -> None:
        check_player(player)
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.player = player
        self.strategy = strategy
        self.depth = depth

    def get_move(self, state: GalletaState) -> Move:
        """Return the strategy's move for this player's turn.

        終局後、または相手の手番で呼ぶのは呼び出し側のバグなので例外にする。
        """
        if state.is_terminal:
            raise InvalidOperationError("Cannot get a move for a terminal state")
        if state.current_player != self.player:
            raise InvalidOperationError(f"It is not player {self.player}'s turn")

        move = self.strategy.get_best_move(state, self.player, self.depth)
        logger.debug("AI player %d (depth %d) chose edge %d", self.player, self.depth, move)
        return move

    @property
    def info(self) -> str:
        return f"AI Player {self.player}: {type(self.strategy).__name__}, depth={self.depth}"

    def __str__(self) -> str:
        return self.info
