"""
テキストベースのCLI UI。

役割
- 三角形盤の描画（マス間隔・枠線の表示切り替え・カーソル・合法手の印）
- 1 行ずつの入力受付（カーソル移動/着手/パス確認/履歴閲覧/終了/初期化）
- コマンドライン引数の解析

設計のポイント
- ルール判定と状態遷移は `game` に委譲して表示に専念
- 例外 `KeyboardInterrupt` で中断（Ctrl+C や入力の終端を同扱い）
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

try:
    from . import logic
    from .errors import InvalidBoardDistance, InvalidPlayerMarks, TriversiError
    from .game import Game, Status, new_game
    from .log import get_logger, setup_logging
    from .logic import Board, Coord
except ImportError:
    # 単体スクリプトとして実行された場合のフォールバック（PyInstaller対策）
    import os
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))
    from triversi import logic
    from triversi.errors import InvalidBoardDistance, InvalidPlayerMarks, TriversiError
    from triversi.game import Game, Status, new_game
    from triversi.log import get_logger, setup_logging
    from triversi.logic import Board, Coord

logger = get_logger(__name__)

MIN_DISTANCE = 2
MAX_DISTANCE = 10

GUIDANCE = (
    " Quit [q], Initialize [0], Select [Enter], Move ◀︎/▼/▲/▶︎ [h/j/k/l],"
    " History [H] (prev/next [p/n], resume [r]), Zoom In/Out [+/-], Frame On/Off [f]"
)


def parse_marks(text: str) -> Tuple[str, ...]:
    """「1,2,3」形式の文字列を 3 人分の名前に分解する。

    各名前の先頭 1 文字（ASCII）を盤上の記号に使う。
    """
    marks = tuple(text.split(","))
    if len(marks) != 3 or any(not m or not m[0].isascii() or not m[0].strip() for m in marks):
        raise InvalidPlayerMarks(text)
    return marks


def render_lines(
    board: Board,
    distance: int,
    marks: Sequence[str],
    cursor: Optional[Coord] = None,
    hints: Iterable[Coord] = (),
    frame: bool = False,
) -> List[str]:
    """盤面を文字の格子に描く。

    行 `row`・列 `col` のマスは x = d*(n-row-1) + 2*d*col, y = d*row に置く
    （左右 1 文字はカーソルの括弧用の余白）。
    """
    n, d = board.size, distance
    width = 2 * d * (n - 1) + 3
    height = d * (n - 1) + 1
    grid = [[" "] * width for _ in range(height)]
    hints = set(hints)

    def block(pos: Coord) -> Tuple[int, int]:
        c, r = pos
        return 1 + d * (n - r - 1) + 2 * d * c, d * r

    if frame:
        for pos in logic.positions(n):
            c, r = pos
            x, y = block(pos)
            if c < r:
                for k in range(1, 2 * d):
                    grid[y][x + k] = "-"
            if r < n - 1:
                for k in range(1, d):
                    grid[y + k][x - k] = "/"
                    grid[y + k][x + k] = "\\"

    for pos in logic.positions(n):
        x, y = block(pos)
        owner = board.read(pos)
        if owner is not None:
            grid[y][x] = marks[owner][0]
        else:
            grid[y][x] = "*" if pos in hints else "."

    if cursor is not None:
        x, y = block(cursor)
        grid[y][x - 1] = "["
        grid[y][x + 1] = "]"
    return ["".join(row).rstrip() for row in grid]


class TextView:
    """表示設定（マス間隔・記号・枠線）。対局状態は持たない。"""

    def __init__(self, distance: int = 3, marks: Sequence[str] = ("1", "2", "3"), frame: bool = False):
        if not MIN_DISTANCE <= distance <= MAX_DISTANCE:
            raise InvalidBoardDistance(distance)
        self.distance = distance
        self.marks = tuple(marks)
        self.frame = frame

    def zoom_in(self) -> None:
        if self.distance < MAX_DISTANCE:
            self.distance += 1

    def zoom_out(self) -> None:
        if self.distance > MIN_DISTANCE:
            self.distance -= 1

    def toggle_frame(self) -> None:
        self.frame = not self.frame

    def render(self, game: Game) -> str:
        """画面全体（ガイド・手番・メッセージ・盤・スコア）の文字列。"""
        if game.status is Status.ASK_QUIT:
            return "Are you sure to quit?\nY / [n]"
        if game.status is Status.ASK_INITIALIZE:
            return "Are you sure to initialize?\nY / [n]"

        lines = [GUIDANCE]
        players = []
        for p in logic.PLAYERS:
            name = game.player_name(p)
            if p == game.active_player and game.status is not Status.FINISHED:
                name = f">{name}<"
            players.append(name)
        c, r = game.cursor
        header = f" Player: {' '.join(players)} | Position: {c}, {r}"
        if game.reviewing:
            header += f" | History: turn {game.turn}/{game.history.last_turn}"
        lines.append(header)
        message = game.message
        if game.attention:
            message = f"!{message}"
        lines.append(message)

        hints = () if game.status is Status.FINISHED else game.legal_moves.moves(game.active_player)
        lines.extend(render_lines(game.board, self.distance, self.marks, game.cursor, hints, self.frame))
        scores = ", ".join(f"{game.player_name(p)}={n}" for p, n in zip(logic.PLAYERS, game.board.counts()))
        lines.append(f" Score: {scores}")
        return "\n".join(lines)


def _key_table(game: Game, view: TextView) -> Dict[str, Callable[[], None]]:
    return {
        "": game.select,
        "s": game.select,
        "h": lambda: game.move_cursor("left"),
        "j": lambda: game.move_cursor("down"),
        "k": lambda: game.move_cursor("up"),
        "l": lambda: game.move_cursor("right"),
        "q": game.request_quit,
        "0": game.request_initialize,
        "H": game.enter_review,
        "p": game.step_back,
        "n": game.step_forward,
        "r": game.resume_from_review,
        "f": view.toggle_frame,
        "+": view.zoom_in,
        "-": view.zoom_out,
    }


def handle_input(game: Game, view: TextView, text: str) -> None:
    """1 行分の入力を処理する。未知の入力は無視（確認待ちでは「いいえ」）。"""
    s = text.strip()
    if game.status in (Status.ASK_QUIT, Status.ASK_INITIALIZE):
        if s in {"Y", "y", "yes"}:
            game.confirm()
        else:
            game.deny()
        return
    action = _key_table(game, view).get(s)
    if action is None:
        logger.debug("ignored input %r", s)
        return
    action()


def game_loop(game: Game, view: TextView) -> None:
    """メインループ。QUIT になるまで描画と入力を繰り返す。"""
    while game.status is not Status.QUIT:
        print(view.render(game))
        try:
            s = input("> ")
        except EOFError:
            raise KeyboardInterrupt
        handle_input(game, view, s)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="triversi",
        description="Triversi: Reversi-like game played by 3 players.",
    )
    parser.add_argument("-r", "--range", type=int, default=14,
                        help="Number of positions in one edge (>= 5 & = 0,2 (mod3))")
    parser.add_argument("-d", "--distance", type=int, default=3,
                        help=f"Distance between positions (>= {MIN_DISTANCE}, <= {MAX_DISTANCE})")
    parser.add_argument("-p", "--player-marks", default="1,2,3",
                        help="Marks of each player (ascii characters, delimiters are ',')")
    parser.add_argument("-f", "--frame", action="store_true", help="Show the lattice frame")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", default=None, help="Write logs to this file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """エントリーポイント：引数解析→対局開始。"""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)
    try:
        marks = parse_marks(args.player_marks)
        view = TextView(args.distance, marks, args.frame)
        game = new_game(args.range, marks)
    except TriversiError as e:
        logger.debug("startup failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2
    try:
        game_loop(game, view)
    except KeyboardInterrupt:
        print("\n中断しました。")
    return 0


if __name__ == "__main__":
    sys.exit(main())
