"""
トライバーシの例外クラス。

- 盤の構築時の設定エラーは呼び出し元へそのまま伝播させる
- 非合法手は例外にせず、`Game.message` で通知する
"""


class TriversiError(Exception):
    """基底例外。"""
    pass


class InvalidBoardRange(TriversiError):
    """盤の一辺のマス数が不正（5 以上かつ 3 で割った余りが 0 または 2）。"""

    def __init__(self, size: int):
        super().__init__(f"{size} is invalid board range.")
        self.size = size


class InvalidBoardDistance(TriversiError):
    """テキスト描画時のマス間隔が不正。"""

    def __init__(self, distance: int):
        super().__init__(f"{distance} is invalid distance.")
        self.distance = distance


class InvalidPlayerMarks(TriversiError):
    """プレイヤー記号の指定文字列が不正。"""

    def __init__(self, text: str):
        super().__init__(f"{text!r} is invalid string for player marks.")
        self.text = text


class GameClosedError(TriversiError):
    """Quit 後にコマンドが送られた。"""
    pass
