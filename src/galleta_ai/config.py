"""Game configuration and menu presets.

対局の設定定義。盤面の大きさ・AI の探索深さ・対戦モードを1つの設定クラスで管理する。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from galleta_ai.game.galleta.shape import MIN_RADIUS
from galleta_ai.game.galleta.types import check_player


class GameMode(str, Enum):
    """Who controls each side."""

    HUMAN_VS_AI = "human_vs_ai"
    AI_VS_AI = "ai_vs_ai"
    HUMAN_VS_HUMAN = "human_vs_human"


# 盤面サイズのプリセット（メニュー表示名 → 半径）
BOARD_PRESETS: dict[str, int] = {
    "Very easy (radius 2, 13 cells)": 2,
    "Easy (radius 3, 25 cells)": 3,
    "Medium (radius 4, 41 cells)": 4,
    "Hard (radius 5, 61 cells)": 5,
}

# AI 難易度のプリセット（メニュー表示名 → 探索深さ）
# 深さを1増やすごとに探索ノード数はおおよそ分岐数倍になる
DEPTH_PRESETS: dict[str, int] = {
    "Easy (depth 2)": 2,
    "Normal (depth 3)": 3,
    "Hard (depth 4)": 4,
    "Expert (depth 5)": 5,
}

DEFAULT_RADIUS = 3
DEFAULT_DEPTH = 3


@dataclass(frozen=True)
class GameConfig:
    """Configuration of one game.

    Attributes:
        radius:          盤面の半径（2 以上）
        ai_depth:        AI の探索深さ（1 以上）
        mode:            対戦モード
        starting_player: 先に指すプレイヤー（0 or 1）
        ai_player:       HUMAN_VS_AI で AI が受け持つプレイヤー（既定は後手の 1）
    """

    radius: int = DEFAULT_RADIUS
    ai_depth: int = DEFAULT_DEPTH
    mode: GameMode = GameMode.HUMAN_VS_AI
    starting_player: int = 0
    ai_player: int = 1

    def __post_init__(self) -> None:
        if self.radius < MIN_RADIUS:
            raise ValueError(f"radius must be at least {MIN_RADIUS}, got {self.radius}")
        if self.ai_depth < 1:
            raise ValueError(f"ai_depth must be at least 1, got {self.ai_depth}")
        check_player(self.starting_player, "starting_player")
        check_player(self.ai_player, "ai_player")

    def ai_players(self) -> frozenset[int]:
        """Return the player ids driven by the engine in this mode."""
        if self.mode == GameMode.AI_VS_AI:
            return frozenset({0, 1})
        if self.mode == GameMode.HUMAN_VS_AI:
            return frozenset({self.ai_player})
        return frozenset()
