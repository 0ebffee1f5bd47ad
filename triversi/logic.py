"""
トライバーシ（3人用リバーシ）のコアロジック。

役割
- 三角形盤の座標系と 6 方向の隣接関係
- 盤面表現・初期配置の生成（駒数は書き込みごとに差分更新）
- 合法手インデックスの構築（挟み込みの検出）
- 着手の適用（石の反転）と終局判定

設計のポイント
- 座標は `(col, row)`。行 `row` には `row + 1` 個のマスがあり `0 <= col <= row`
- プレイヤーは `Player`（IntEnum, 0..2）で持ち、長さ 3 のリストを直接添字で引く
- 6 方向レイを伸ばして「自分以外の石の連続の先に自分石がある」ラインを反転対象とする
- 合法手インデックスは盤面が変わるたびに全体を作り直す（差分更新はしない）
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidBoardRange


class Player(IntEnum):
    """3 人のプレイヤー。値はそのまま配列の添字として使う。"""

    ONE = 0
    TWO = 1
    THREE = 2

    def next(self) -> "Player":
        """手番順で次のプレイヤー（THREE の次は ONE）。"""
        return PLAYERS[(self + 1) % len(PLAYERS)]


PLAYERS: Tuple[Player, ...] = tuple(Player)

Cell = Optional[Player]
Coord = Tuple[int, int]  # (col, row)
Captures = FrozenSet[Coord]

MIN_RANGE = 5


# (dcol, drow)
DIRECTIONS: Tuple[Coord, ...] = (
    (-1, 0),   # left
    (1, 0),    # right
    (0, -1),   # up
    (0, 1),    # down
    (-1, -1),  # up-left（頂点側の斜め）
    (1, 1),    # down-right（底辺側の斜め）
)


def validate_range(size: int) -> int:
    """盤の一辺のマス数を検証して返す。

    初期配置を中心付近に対称に置くため `size >= 5` かつ `size % 3 in (0, 2)`。
    """
    if size < MIN_RANGE or size % 3 not in (0, 2):
        raise InvalidBoardRange(size)
    return size


def in_bounds(size: int, pos: Coord) -> bool:
    """(col, row) が盤面内かどうか。"""
    c, r = pos
    return 0 <= r < size and 0 <= c <= r


def positions(size: int) -> Iterator[Coord]:
    """盤上の全マスを上の行から順に列挙する。"""
    for r in range(size):
        for c in range(r + 1):
            yield (c, r)


def step(pos: Coord, direction: Coord) -> Coord:
    c, r = pos
    dc, dr = direction
    return (c + dc, r + dr)


def ray(size: int, start: Coord, direction: Coord) -> Iterator[Coord]:
    """`start` から `direction` へ 1 マスずつ進み、盤外に出るまでの座標を返す。

    `start` 自身は含まない。
    """
    pos = step(start, direction)
    while in_bounds(size, pos):
        yield pos
        pos = step(pos, direction)


def move_cursor(size: int, pos: Coord, key: str) -> Coord:
    """カーソル移動（left/right/up/down）。盤端では動かない。

    上の行は 1 マス短いので、up は列を上の行の右端に丸める。
    """
    c, r = pos
    if key == "left" and c > 0:
        return (c - 1, r)
    if key == "right" and c < r:
        return (c + 1, r)
    if key == "up" and r > 0:
        return (min(c, r - 1), r - 1)
    if key == "down" and r < size - 1:
        return (c, r + 1)
    return pos


def initial_cursor(size: int) -> Coord:
    """開始時のカーソル位置（初期配置の近く）。"""
    return (size // 3, 2 * size // 3)


def opening_layout(size: int) -> Dict[Player, List[Coord]]:
    """初期配置（各プレイヤー 4 石）の座標表。

    `size % 3` が 0 と 2 の場合で配置式が異なる。
    """
    n = size
    if n % 3 == 0:
        a, b = n // 3, 2 * n // 3
        return {
            Player.ONE: [(a, b), (a + 1, b - 1), (a - 1, b - 2), (a - 2, b - 1)],
            Player.TWO: [(a, b - 1), (a - 2, b - 2), (a - 1, b), (a + 1, b + 1)],
            Player.THREE: [(a - 1, b - 1), (a, b + 1), (a + 1, b), (a, b - 2)],
        }
    if n % 3 == 2:
        return {
            Player.ONE: [
                ((n - 2) // 3, (2 * n - 4) // 3),
                ((n - 5) // 3, (2 * n - 1) // 3),
                ((n + 1) // 3, (2 * n + 2) // 3),
                ((n + 4) // 3, (2 * n - 1) // 3),
            ],
            Player.TWO: [
                ((n - 2) // 3, (2 * n - 1) // 3),
                ((n + 4) // 3, (2 * n + 2) // 3),
                ((n + 1) // 3, (2 * n - 4) // 3),
                ((n - 5) // 3, (2 * n - 7) // 3),
            ],
            Player.THREE: [
                ((n + 1) // 3, (2 * n - 1) // 3),
                ((n - 2) // 3, (2 * n - 7) // 3),
                ((n - 5) // 3, (2 * n - 4) // 3),
                ((n - 2) // 3, (2 * n + 2) // 3),
            ],
        }
    raise InvalidBoardRange(size)


class Board:
    """三角形盤。`rows[r][c]` に `Optional[Player]` を持つ。

    各プレイヤーの石数は `write` のたびに差分で更新するため、
    `count()` は常に盤上の実数と一致する。
    """

    def __init__(self, size: int):
        self.size = size
        self.rows: List[List[Cell]] = [[None] * (r + 1) for r in range(size)]
        self._counts = [0] * len(PLAYERS)

    def read(self, pos: Coord) -> Cell:
        if not in_bounds(self.size, pos):
            raise IndexError(f"position {pos} is outside the board")
        c, r = pos
        return self.rows[r][c]

    def write(self, pos: Coord, value: Cell) -> None:
        if not in_bounds(self.size, pos):
            raise IndexError(f"position {pos} is outside the board")
        c, r = pos
        prev = self.rows[r][c]
        if prev is not None:
            self._counts[prev] -= 1
        if value is not None:
            self._counts[value] += 1
        self.rows[r][c] = value

    def clear(self) -> None:
        for row in self.rows:
            for c in range(len(row)):
                row[c] = None
        self._counts = [0] * len(PLAYERS)

    def reset_to_opening(self) -> None:
        """盤を空にしてから初期配置を置く。"""
        self.clear()
        for player, cells in opening_layout(self.size).items():
            for pos in cells:
                self.write(pos, player)

    def count(self, player: Player) -> int:
        return self._counts[player]

    def counts(self) -> Tuple[int, ...]:
        """(ONE の石数, TWO の石数, THREE の石数)"""
        return tuple(self._counts)

    def total(self) -> int:
        return sum(self._counts)

    def empty_positions(self) -> List[Coord]:
        return [pos for pos in positions(self.size) if self.read(pos) is None]

    def copy(self) -> "Board":
        other = Board.__new__(Board)
        other.size = self.size
        other.rows = [row[:] for row in self.rows]
        other._counts = self._counts[:]
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self.rows == other.rows

    def __repr__(self) -> str:
        return f"Board(size={self.size}, counts={self.counts()})"


def create_board(size: int = 14) -> Board:
    """一辺 `size` の盤面を作成し、初期配置（各 4 石）を置く。"""
    board = Board(validate_range(size))
    board.reset_to_opening()
    return board


def _ray_captures(board: Board, player: Player, pos: Coord, direction: Coord) -> List[Coord]:
    """方向 `direction` にレイを伸ばし、反転対象の座標一覧を返す。

    条件: 空マス `pos` から見て、`player` 以外の石が 1 つ以上連続し、
    その直後に `player` の石がある。途中の石の色は問わない。
    空マスか盤端に達した場合は空リスト。
    """
    line: List[Coord] = []
    for cur in ray(board.size, pos, direction):
        owner = board.read(cur)
        if owner is None:
            return []
        if owner == player:
            return line
        line.append(cur)
    return []


def find_captures(board: Board, player: Player, pos: Coord) -> Captures:
    """着手 `pos` で裏返る座標を 6 方向探索して集める。"""
    if not in_bounds(board.size, pos) or board.read(pos) is not None:
        return frozenset()
    captured = set()
    for direction in DIRECTIONS:
        captured.update(_ray_captures(board, player, pos, direction))
    return frozenset(captured)


class LegalMoveIndex:
    """プレイヤーごとの「着手位置 -> 反転される座標集合」。

    空集合になる手は登録しないので、キーに無い位置は非合法手。
    """

    def __init__(self, moves: Sequence[Dict[Coord, Captures]]):
        self._moves = list(moves)

    @classmethod
    def build(cls, board: Board) -> "LegalMoveIndex":
        """盤面全体を走査して作り直す。"""
        moves: List[Dict[Coord, Captures]] = [{} for _ in PLAYERS]
        for pos in board.empty_positions():
            for player in PLAYERS:
                captured = find_captures(board, player, pos)
                if captured:
                    moves[player][pos] = captured
        return cls(moves)

    def moves(self, player: Player) -> Dict[Coord, Captures]:
        return self._moves[player]

    def captures(self, player: Player, pos: Coord) -> Captures:
        return self._moves[player].get(pos, frozenset())

    def is_legal(self, player: Player, pos: Coord) -> bool:
        return pos in self._moves[player]

    def has_moves(self, player: Player) -> bool:
        return bool(self._moves[player])

    def is_exhausted(self) -> bool:
        """誰も打てる手が無い。"""
        return not any(self._moves)


def valid_moves(board: Board, player: Player) -> List[Coord]:
    """指定プレイヤーにとっての合法手一覧を返す。"""
    return [pos for pos in board.empty_positions() if find_captures(board, player, pos)]


def has_valid_move(board: Board, player: Player) -> bool:
    """プレイヤーに合法手が1つでもあるか。"""
    return any(find_captures(board, player, pos) for pos in board.empty_positions())


def game_over(board: Board) -> bool:
    """3 人とも合法手が無ければ終局。"""
    return not any(has_valid_move(board, p) for p in PLAYERS)


def apply_move(board: Board, player: Player, move: Coord,
               captures: Optional[Captures] = None) -> Board:
    """着手を適用して新しい盤面を返す（元の盤面は変更しない）。

    `captures` を渡した場合は再計算せずにそれを使う。
    反転対象が無い手は `ValueError`。
    """
    if captures is None:
        captures = find_captures(board, player, move)
    if not captures:
        raise ValueError(f"Invalid move {move}: no markers captured")
    new_board = board.copy()
    new_board.write(move, player)
    for pos in captures:
        new_board.write(pos, player)
    return new_board
