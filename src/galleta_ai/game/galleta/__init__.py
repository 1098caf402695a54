"""ガレッタ (Juego de la Galleta): dots and boxes on a cookie-shaped board."""

from galleta_ai.game.galleta.board import Board
from galleta_ai.game.galleta.display import board_to_str, format_result
from galleta_ai.game.galleta.shape import GalletaShape, Point2D
from galleta_ai.game.galleta.state import GalletaState
from galleta_ai.game.galleta.types import (
    NO_OWNER,
    TIE,
    AppliedResult,
    BoardValidationError,
    Cell,
    Edge,
    InvalidOperationError,
    Move,
    Orientation,
    Player,
)

__all__ = [
    "AppliedResult",
    "Board",
    "BoardValidationError",
    "Cell",
    "Edge",
    "GalletaShape",
    "GalletaState",
    "InvalidOperationError",
    "Move",
    "NO_OWNER",
    "Orientation",
    "Player",
    "Point2D",
    "TIE",
    "board_to_str",
    "format_result",
]
