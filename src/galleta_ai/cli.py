"""CLI entry point for galleta-ai — Human / AI games in the terminal.

コマンドラインで動くガレッタ対局プログラム。
人間 vs AI、AI vs AI、人間 vs 人間の3つのモードで対局できる。

起動方法: `uv run galleta-cli`（`-v` で探索ログを表示）
"""

from __future__ import annotations

import argparse
import logging

from galleta_ai.config import (
    BOARD_PRESETS,
    DEFAULT_DEPTH,
    DEFAULT_RADIUS,
    DEPTH_PRESETS,
    GameConfig,
    GameMode,
)
from galleta_ai.engine.evaluator import SimpleDotsEvaluator
from galleta_ai.engine.minimax import MinimaxAlphaBeta
from galleta_ai.engine.player import AIPlayer
from galleta_ai.game.galleta.display import board_to_str, format_result, player_label
from galleta_ai.game.galleta.shape import GalletaShape
from galleta_ai.game.galleta.state import GalletaState

INSTRUCTIONS = """\
How to play:
  - Players take turns drawing one line (edge) between two adjacent points.
  - Drawing the 4th side of a cell captures it, and you move again.
  - When every line is drawn, the player with more cells wins.
  - Enter the number shown on an undrawn line to draw it.
  - Enter 'h' for a hint, 'q' to resign.
"""

_MODES: dict[str, GameMode | None] = {
    "1": GameMode.HUMAN_VS_AI,
    "2": GameMode.AI_VS_AI,
    "3": GameMode.HUMAN_VS_HUMAN,
    "4": None,  # 遊び方
}


class _Resigned(Exception):
    """The human player gave up."""


def _choose(title: str, presets: dict[str, int], default: int) -> int:
    """Show a numbered preset menu and return the chosen value.

    不正な入力なら既定値を使う。
    """
    print(title)
    labels = list(presets)
    for i, label in enumerate(labels, start=1):
        print(f"  {i}. {label}")
    choice = input("Option: ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(labels):
        return presets[labels[int(choice) - 1]]
    return default


def _read_human_move(state: GalletaState, strategy: MinimaxAlphaBeta, depth: int) -> int:
    """Prompt until the human enters a legal edge id.

    入力検証ループ（正しい番号が入力されるまで繰り返す）。
    """
    evaluator = SimpleDotsEvaluator()
    while True:
        choice = input("Edge to draw (number, 'h' hint, 'q' resign): ").strip().lower()
        if choice == "q":
            raise _Resigned
        if choice == "h":
            hint = strategy.search(state, state.current_player, depth)
            kind = evaluator.classify_move(state, hint.move)
            print(f"Hint: edge {hint.move} ({kind}, score {hint.score})")
            continue
        try:
            move = int(choice)
        except ValueError:
            print("Enter a number.")
            continue
        if move not in state.legal_moves():
            print(f"Invalid: edge {move} is out of range or already drawn.")
            continue
        return move


def play_game(config: GameConfig) -> GalletaState:
    """Run one game to completion (or resignation) and return the final state.

    ゲームの流れ:
    1. 盤面を表示
    2. 手番が AI なら探索、人間なら辺番号の入力を受け付ける
    3. セルを獲得したら同じプレイヤーがもう一度指す
    4. 終局まで繰り返す
    """
    shape = GalletaShape(config.radius)
    state = GalletaState(shape.build(), config.starting_player)
    strategy = MinimaxAlphaBeta(SimpleDotsEvaluator())
    ai_players = {
        p: AIPlayer(p, strategy, config.ai_depth) for p in config.ai_players()
    }

    print(shape.describe())
    while not state.is_terminal:
        print(board_to_str(state, shape))
        print()

        player = state.current_player
        if player in ai_players:
            print(f"{player_label(player)} (AI) is thinking...")
            move = ai_players[player].get_move(state)
            print(f"AI draws edge {move}")
        else:
            try:
                move = _read_human_move(state, strategy, config.ai_depth)
            except _Resigned:
                print(f"{player_label(player)} resigns. {player_label(1 - player)} wins!")
                return state

        result = state.apply(move)
        if result.captured:
            print(f"{player_label(player)} captured {result.captured_count} cell(s)! Extra turn!")
        print()

    print(board_to_str(state, shape))
    print()
    print(format_result(state))
    return state


def main(argv: list[str] | None = None) -> None:
    """Show the main menu and play games until the user quits."""
    parser = argparse.ArgumentParser(prog="galleta-cli", description="Juego de la Galleta")
    parser.add_argument("-v", "--verbose", action="store_true", help="show search logs")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("=== Juego de la Galleta ===")
    try:
        while True:
            print()
            print("  1. Human vs AI")
            print("  2. AI vs AI")
            print("  3. Human vs Human")
            print("  4. How to play")
            print("  5. Quit")
            choice = input("Select an option: ").strip()

            if choice == "5":
                print("Thanks for playing!")
                return
            if choice not in _MODES:
                print("Invalid option.")
                continue
            mode = _MODES[choice]
            if mode is None:
                print(INSTRUCTIONS)
                continue

            radius = _choose("Board size:", BOARD_PRESETS, DEFAULT_RADIUS)
            depth = DEFAULT_DEPTH
            if mode != GameMode.HUMAN_VS_HUMAN:
                depth = _choose("AI difficulty:", DEPTH_PRESETS, DEFAULT_DEPTH)
            play_game(GameConfig(radius=radius, ai_depth=depth, mode=mode))
    except (EOFError, KeyboardInterrupt):
        print("\nGame aborted.")


if __name__ == "__main__":
    main()
