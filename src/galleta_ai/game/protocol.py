"""GameState protocol, the reversible state interface engines search over.

ゲーム状態の共通インタフェース（プロトコル）。

エンジン（探索・ランダムプレイヤー）はこのプロトコルだけに依存する。
これを「ポリモーフィズム」または「ダックタイピング」と呼ぶ。

重要: apply() は状態をその場で書き換え、undo() で元に戻す（可逆設計）。
ノードごとに盤面をコピーしないので、深い探索でもメモリ確保がほとんど発生しない。
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

import torch


@runtime_checkable  # isinstance() でのランタイムチェックを有効にする
class GameState(Protocol):
    """Common interface for reversible two-player game states.

    apply() が返した結果を、後入れ先出しの順で undo() に渡すこと。
    """

    @property
    def current_player(self) -> int:
        """現在手番のプレイヤー（0 or 1）を返す。"""
        ...

    @property
    def is_terminal(self) -> bool:
        """ゲームが終了していれば True を返す。"""
        ...

    def get_winner(self) -> int:
        """勝者（0 or 1）、引き分けなら -1 を返す。終局前はエラー。"""
        ...

    def generate_moves(self) -> Iterator[int]:
        """合法手を昇順に生成する。"""
        ...

    def legal_moves(self) -> list[int]:
        """合法手のリストを返す。"""
        ...

    def apply(self, move: int) -> Any:
        """手をその場で適用し、undo() 用の結果を返す。"""
        ...

    def undo(self, result: Any) -> None:
        """直近の apply() を取り消す。"""
        ...

    @property
    def action_space_size(self) -> int:
        """行動空間のサイズ（可能な手の総数）を返す。"""
        ...

    def to_tensor_planes(self) -> torch.Tensor:
        """局面を特徴プレーンのテンソルに変換する。"""
        ...
