"""
対局履歴（メモリ上のみ）。

- 盤面のスナップショット列と、各遷移を生んだ (プレイヤー, 座標) の記録を持つ
- `turn` は現在見ている手数。巻き戻した状態で新しい手を積むと、先の履歴は捨てる
- スナップショット数は常に「着手記録の数 + 1」
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .logic import Board, Coord, Player

Move = Tuple[Player, Coord]


class History:
    def __init__(self, board: Board):
        self.turn = 0
        self._boards: List[Board] = []
        self._moves: List[Move] = []
        self.record_opening(board)

    def record_opening(self, board: Board) -> None:
        """初期盤面 1 枚だけの状態に戻す。"""
        self.turn = 0
        self._boards = [board.copy()]
        self._moves = []

    def push(self, move: Move, board: Board) -> None:
        """着手と着手後の盤面を追加する。巻き戻し中なら先の履歴を捨てる。"""
        if self.turn < self.last_turn:
            del self._boards[self.turn + 1:]
            del self._moves[self.turn:]
        self._moves.append(move)
        self._boards.append(board.copy())
        self.turn += 1

    def step_back(self) -> None:
        if self.turn > 0:
            self.turn -= 1

    def step_forward(self) -> None:
        if self.turn < self.last_turn:
            self.turn += 1

    def go_last(self) -> None:
        self.turn = self.last_turn

    @property
    def last_turn(self) -> int:
        return len(self._boards) - 1

    @property
    def moves(self) -> List[Move]:
        return list(self._moves)

    def current_board(self) -> Board:
        return self._boards[self.turn]

    def current_mover(self) -> Optional[Player]:
        """現在の盤面を作った手のプレイヤー。初期盤面では None。"""
        if self.turn == 0:
            return None
        return self._moves[self.turn - 1][0]

    def current_move_position(self) -> Optional[Coord]:
        if self.turn == 0:
            return None
        return self._moves[self.turn - 1][1]

    def __len__(self) -> int:
        return len(self._boards)
