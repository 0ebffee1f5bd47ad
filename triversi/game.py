"""
ターン進行と対局状態の管理。

役割
- 手番・カーソル・メッセージなど表示層が読む状態を 1 か所に持つ
- 着手（反転）→履歴追加→合法手インデックス再構築→終局/パス判定
- 終了確認・初期化確認のダイアログ状態と、履歴の閲覧モード

設計のポイント
- ルール判定は `logic` に委譲し、ここは状態遷移に専念
- 非合法手は例外にせず `message` / `attention` で通知する
- UI はコマンド（メソッド）を呼び、プロパティを読むだけ。盤面を直接書き換えない

状態遷移
- TURN: 手番のプレイヤーがカーソル位置に着手する
- SKIPPED: 手番のプレイヤーに合法手が無い。確認すると次のプレイヤーへ
- FINISHED: 誰も打てない
- REVIEW: 履歴の閲覧（読み取り専用）
- ASK_QUIT / ASK_INITIALIZE: 確認待ち。`confirm()` 以外の入力は取り消し扱い
- QUIT: 終了。以降のコマンドは `GameClosedError`
"""

from __future__ import annotations

from enum import Enum
from functools import wraps
from typing import Callable, List, Optional, Sequence, Tuple

from . import logic
from .errors import GameClosedError
from .history import History, Move
from .log import get_logger
from .logic import Board, Coord, LegalMoveIndex, Player, PLAYERS

logger = get_logger(__name__)

DEFAULT_NAMES = ("1", "2", "3")


class Status(Enum):
    TURN = "turn"
    SKIPPED = "skipped"
    FINISHED = "finished"
    REVIEW = "review"
    ASK_INITIALIZE = "ask_initialize"
    ASK_QUIT = "ask_quit"
    QUIT = "quit"


PLAY_STATES = (Status.TURN, Status.SKIPPED, Status.FINISHED)
ASK_STATES = (Status.ASK_INITIALIZE, Status.ASK_QUIT)


def _command(func: Callable) -> Callable:
    """UI から呼ばれるコマンドの共通前処理。

    - QUIT 後は `GameClosedError`
    - 確認待ちの間は、どのコマンドも「いいえ」として扱う
    """
    @wraps(func)
    def wrapper(self: "Game", *args, **kwargs):
        if self.status is Status.QUIT:
            raise GameClosedError(f"{func.__name__}: the game has already quit")
        if self.status in ASK_STATES:
            self.deny()
            return None
        return func(self, *args, **kwargs)
    return wrapper


class Game:
    """1 対局分の状態（盤面・合法手・履歴・手番・カーソル・メッセージ）。"""

    def __init__(self, size: int = 14, names: Optional[Sequence[str]] = None):
        """引数
        - size: 盤の一辺のマス数（5 以上、3 で割った余りが 0 か 2）
        - names: 各プレイヤーの表示名（3 つ）
        """
        self.size = logic.validate_range(size)
        names = tuple(names) if names is not None else DEFAULT_NAMES
        if len(names) != len(PLAYERS):
            raise ValueError(f"expected {len(PLAYERS)} player names, got {len(names)}")
        self.names: Tuple[str, ...] = names

        self.status = Status.TURN
        self._prev_status = Status.TURN
        self.message = ""
        self.attention = False
        self.final_scores: Optional[Tuple[int, ...]] = None

        self._board = logic.create_board(self.size)
        self.history = History(self._board)
        self._start()

    @classmethod
    def from_position(cls, board: Board, player: Player = Player.ONE,
                      names: Optional[Sequence[str]] = None) -> "Game":
        """任意の局面から対局を始める（履歴はその局面が 0 手目）。"""
        game = cls(board.size, names)
        game._board = board.copy()
        game.history.record_opening(game._board)
        game._start()
        game._player = player
        game._settle()
        return game

    # ----- Queries -----
    @property
    def board(self) -> Board:
        """表示用の盤面（閲覧モード中は履歴の盤面）。"""
        return self._review_board if self._reviewing else self._board

    @property
    def legal_moves(self) -> LegalMoveIndex:
        return self._review_index if self._reviewing else self._index

    @property
    def active_player(self) -> Player:
        return self._review_player if self._reviewing else self._player

    @property
    def cursor(self) -> Coord:
        return self._review_cursor if self._reviewing else self._cursor

    @property
    def reviewing(self) -> bool:
        return self._reviewing

    @property
    def turn(self) -> int:
        return self.history.turn

    @property
    def moves(self) -> List[Move]:
        return self.history.moves

    def scores(self) -> Tuple[int, ...]:
        """対局中の盤面の各プレイヤーの石数。"""
        return self._board.counts()

    def player_name(self, player: Player) -> str:
        return self.names[player]

    # ----- Commands -----
    @_command
    def move_cursor(self, key: str) -> None:
        """カーソル移動（left/right/up/down）。閲覧中は無視。"""
        if self.status in PLAY_STATES:
            self._cursor = logic.move_cursor(self.size, self._cursor, key)

    @_command
    def place(self) -> bool:
        """カーソル位置に着手する。着手できたら True。"""
        if self.status is not Status.TURN:
            return False
        player, pos = self._player, self._cursor
        captured = self._index.captures(player, pos)
        if not captured:
            self._notify(
                f" Player-{self.player_name(player)}: You cannot select ({pos[0]}, {pos[1]}).",
                attention=True,
            )
            return False

        self._board = logic.apply_move(self._board, player, pos, captured)
        self.history.push((player, pos), self._board)
        self._index = LegalMoveIndex.build(self._board)
        self._clear_message()
        logger.debug("player %s placed at %s, captured %d", player.name, pos, len(captured))

        if self._index.is_exhausted():
            self._finish()
            return True
        self._player = player.next()
        if not self._index.has_moves(self._player):
            self._skip()
        return True

    @_command
    def acknowledge_skip(self) -> None:
        """パス通知を確認して次のプレイヤーへ。"""
        if self.status is not Status.SKIPPED:
            return
        self._clear_message()
        self._player = self._player.next()
        if not self._index.has_moves(self._player):
            self._skip()
        else:
            self._set_status(Status.TURN)

    @_command
    def select(self) -> None:
        """決定キー相当。状態に応じて着手・パス確認・閲覧終了を行う。"""
        if self.status is Status.TURN:
            self.place()
        elif self.status is Status.SKIPPED:
            self.acknowledge_skip()
        elif self.status is Status.REVIEW:
            self.exit_review()

    @_command
    def request_quit(self) -> None:
        self._set_status(Status.ASK_QUIT)

    @_command
    def request_initialize(self) -> None:
        self._set_status(Status.ASK_INITIALIZE)

    def confirm(self) -> None:
        """確認ダイアログで「はい」。"""
        if self.status is Status.QUIT:
            raise GameClosedError("confirm: the game has already quit")
        if self.status is Status.ASK_QUIT:
            self._set_status(Status.QUIT)
            logger.info("quit")
        elif self.status is Status.ASK_INITIALIZE:
            self.reset()

    def deny(self) -> None:
        """確認ダイアログで「いいえ」。直前の状態に戻る。"""
        if self.status is Status.QUIT:
            raise GameClosedError("deny: the game has already quit")
        if self.status in ASK_STATES:
            self._set_status(self._prev_status)

    def reset(self) -> None:
        """盤面を初期配置に戻し、履歴も捨てる。"""
        if self.status is Status.QUIT:
            raise GameClosedError("reset: the game has already quit")
        self._board = logic.create_board(self.size)
        self.history.record_opening(self._board)
        self.status = Status.TURN
        self._prev_status = Status.TURN
        self._start()
        logger.info("board initialized (range=%d)", self.size)

    @_command
    def enter_review(self) -> None:
        """履歴の閲覧を開始する（現在の手数から）。"""
        if self.status not in PLAY_STATES:
            return
        self._live_status = self.status
        self._live_turn = self.history.turn
        self._reviewing = True
        self._sync_review()
        self._set_status(Status.REVIEW)

    @_command
    def exit_review(self) -> None:
        """閲覧を終えて対局中の状態に戻る（対局状態は変更しない）。"""
        if self.status is not Status.REVIEW:
            return
        self.history.turn = self._live_turn
        self._reviewing = False
        self._set_status(self._live_status)

    @_command
    def resume_from_review(self) -> None:
        """閲覧中の局面から対局を再開する。

        次の着手で、閲覧位置より先の履歴は捨てられる。
        """
        if self.status is not Status.REVIEW:
            return
        self._reviewing = False
        self._board = self.history.current_board().copy()
        self._index = LegalMoveIndex.build(self._board)
        mover = self.history.current_mover()
        self._player = mover.next() if mover is not None else Player.ONE
        self._cursor = self.history.current_move_position() or logic.initial_cursor(self.size)
        self.final_scores = None
        self._clear_message()
        logger.info("resumed from turn %d", self.history.turn)
        self._settle()

    @_command
    def step_back(self) -> None:
        if self.status is Status.REVIEW:
            self.history.step_back()
            self._sync_review()

    @_command
    def step_forward(self) -> None:
        if self.status is Status.REVIEW:
            self.history.step_forward()
            self._sync_review()

    # ----- Internals -----
    def _start(self) -> None:
        self._index = LegalMoveIndex.build(self._board)
        self._player = Player.ONE
        self._cursor = logic.initial_cursor(self.size)
        self._reviewing = False
        self._live_status = Status.TURN
        self._live_turn = 0
        self.final_scores = None
        self._clear_message()

    def _settle(self) -> None:
        """手番のプレイヤーから見た状態（TURN / SKIPPED / FINISHED）を決める。"""
        if self._index.is_exhausted():
            self._finish()
        elif not self._index.has_moves(self._player):
            self._skip()
        else:
            self._set_status(Status.TURN)

    def _set_status(self, status: Status) -> None:
        self._prev_status = self.status
        self.status = status

    def _notify(self, text: str, attention: bool = False) -> None:
        self.message = text
        self.attention = attention

    def _clear_message(self) -> None:
        self._notify("")

    def _skip(self) -> None:
        self._set_status(Status.SKIPPED)
        self._notify(
            f" Player-{self.player_name(self._player)}: "
            "Your turn is skipped, you cannot select any position.",
            attention=True,
        )
        logger.debug("player %s skipped", self._player.name)

    def _finish(self) -> None:
        self._set_status(Status.FINISHED)
        self.final_scores = self._board.counts()
        parts = [f"{self.player_name(p)} = {self.final_scores[p]}" for p in PLAYERS]
        text = " Game is finished! Final Score is " + ", ".join(parts[:-1]) + ", and " + parts[-1] + "."
        self._notify(text)
        logger.info("game finished: %s", self.final_scores)

    def _sync_review(self) -> None:
        self._review_board = self.history.current_board()
        self._review_index = LegalMoveIndex.build(self._review_board)
        mover = self.history.current_mover()
        self._review_player = mover if mover is not None else Player.ONE
        self._review_cursor = self.history.current_move_position() or logic.initial_cursor(self.size)


def new_game(size: int = 14, names: Optional[Sequence[str]] = None) -> Game:
    """新しい対局を作る。盤サイズが不正なら `InvalidBoardRange`。"""
    game = Game(size, names)
    logger.info("new game (range=%d)", size)
    return game
