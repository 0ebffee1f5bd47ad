"""
Tkinter を使ったトライバーシのGUI実装。

目的と方針
- `game`（状態遷移）を UI から呼び出す薄い層に徹する
- 盤描画・入力（クリック/キー）・ステータス表示を担当

主なUI要素
- 上部バー: New Game / Quit / History / ◀ / ▶ / Resume ボタン と ステータス表示
- キャンバス: 三角形盤（格子線・石・合法手のハイライト・カーソル）

操作の流れ
1) 起動時に盤サイズとプレイヤー名をダイアログで選択
2) キャンバス上のマスをクリックして着手（カーソル移動と決定を兼ねる）
3) 打てないプレイヤーがいるとステータスにパスを表示、クリックで次へ
4) 誰も打てなくなると終局、ステータスに最終スコアを表示
"""

from __future__ import annotations

import math
import tkinter as tk
from tkinter import messagebox
from typing import Optional, Tuple

try:
    # パッケージとして実行される通常ルート
    from . import logic
    from .game import Game, Status, new_game
except ImportError:
    # 単体スクリプトとして実行された場合のフォールバック（PyInstaller対策）
    import os, sys
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))
    from triversi import logic
    from triversi.game import Game, Status, new_game


Point = Tuple[float, float]

SIZES = (5, 8, 11, 14, 17)
PLAYER_COLORS = ("#00bcd4", "#e040fb", "#ffeb3b")  # cyan, magenta, yellow
ROW_HEIGHT = math.sqrt(3) / 2
MARGIN = 24


class TriversiApp:
    """アプリケーションクラス（対局状態とUIの橋渡し）。"""

    def __init__(self, root: tk.Tk, size: int = 14):
        """ウィンドウや対局状態、イベントの初期化を行う。

        引数
        - root: Tk のルートウィンドウ
        - size: 盤の一辺のマス数
        """
        self.root = root
        self.root.title("Triversi (Tkinter)")

        self.size = size
        self.names: Tuple[str, ...] = ("1", "2", "3")
        self.game: Game = new_game(self.size, self.names)

        # UI layout
        self.status = tk.StringVar(value="Ready")
        self.top = tk.Frame(root)
        self.top.pack(side=tk.TOP, fill=tk.X)
        tk.Button(self.top, text="New Game", command=self.new_game).pack(side=tk.LEFT)
        tk.Button(self.top, text="Quit", command=self.quit).pack(side=tk.LEFT)
        tk.Button(self.top, text="History", command=self.toggle_review).pack(side=tk.LEFT)
        tk.Button(self.top, text="◀", command=self.step_back).pack(side=tk.LEFT)
        tk.Button(self.top, text="▶", command=self.step_forward).pack(side=tk.LEFT)
        tk.Button(self.top, text="Resume", command=self.resume).pack(side=tk.LEFT)
        self.label = tk.Label(self.top, textvariable=self.status, anchor="w")
        self.label.pack(side=tk.LEFT, padx=10)

        self.canvas_size = 600
        self.canvas = tk.Canvas(root, width=self.canvas_size, height=self.canvas_size, bg="#202020")
        self.canvas.pack(fill=tk.BOTH, expand=True)
        self.canvas.bind("<Button-1>", self.on_click)
        for key, direction in (("<Left>", "left"), ("<Right>", "right"), ("<Up>", "up"), ("<Down>", "down")):
            root.bind(key, lambda _evt, d=direction: self.move_cursor(d))
        root.bind("<Return>", lambda _evt: self.select())

        self.open_setup_dialog()
        self.game = new_game(self.size, self.names)
        self.redraw()

    # ----- Game control -----
    def new_game(self) -> None:
        """設定ダイアログ→盤を初期化して開始する。"""
        self.open_setup_dialog()
        self.game = new_game(self.size, self.names)
        self.redraw()

    def quit(self) -> None:
        self.game.request_quit()
        if messagebox.askyesno("Quit", "Are you sure to quit?"):
            self.game.confirm()
        else:
            self.game.deny()
        if self.game.status is Status.QUIT:
            self.root.destroy()

    def toggle_review(self) -> None:
        if self.game.reviewing:
            self.game.exit_review()
        else:
            self.game.enter_review()
        self.redraw()

    def step_back(self) -> None:
        self.game.step_back()
        self.redraw()

    def step_forward(self) -> None:
        self.game.step_forward()
        self.redraw()

    def resume(self) -> None:
        self.game.resume_from_review()
        self.redraw()

    def move_cursor(self, direction: str) -> None:
        self.game.move_cursor(direction)
        self.redraw()

    def select(self) -> None:
        cursor = self.game.cursor
        placed_before = self.game.turn
        status = self.game.status
        self.game.select()
        self.redraw()
        if status is Status.TURN and self.game.turn == placed_before:
            self.flash_cell(cursor)

    # ----- Rendering -----
    def redraw(self) -> None:
        """画面全体を描き直す。"""
        self.canvas.delete("all")
        self.draw_grid()
        self.draw_discs()
        self.draw_valid_hints()
        self.draw_cursor()
        self.update_status()

    def cell_size(self) -> float:
        """現在のキャンバスサイズからマス間隔のピクセル数を算出。"""
        w = self.canvas.winfo_width()
        h = self.canvas.winfo_height()
        if w <= 1 or h <= 1:
            w = h = self.canvas_size
        n = self.size
        return max(8.0, min((w - 2 * MARGIN) / max(1, n - 1), (h - 2 * MARGIN) / (max(1, n - 1) * ROW_HEIGHT)))

    def cell_center(self, pos: logic.Coord) -> Point:
        """(col, row) の中心のキャンバス座標。"""
        c, r = pos
        cs = self.cell_size()
        x = MARGIN + cs * ((self.size - 1 - r) / 2 + c)
        y = MARGIN + cs * r * ROW_HEIGHT
        return x, y

    def draw_grid(self) -> None:
        """三角格子の線を描画。"""
        for pos in logic.positions(self.size):
            x0, y0 = self.cell_center(pos)
            for direction in ((1, 0), (0, 1), (1, 1)):
                nxt = logic.step(pos, direction)
                if logic.in_bounds(self.size, nxt):
                    x1, y1 = self.cell_center(nxt)
                    self.canvas.create_line(x0, y0, x1, y1, fill="#505050")

    def draw_discs(self) -> None:
        """石を円で描画。"""
        radius = self.cell_size() * 0.38
        board = self.game.board
        for pos in logic.positions(self.size):
            owner = board.read(pos)
            x, y = self.cell_center(pos)
            if owner is None:
                self.canvas.create_oval(x - 2, y - 2, x + 2, y + 2, fill="#808080", outline="")
                continue
            self.canvas.create_oval(x - radius, y - radius, x + radius, y + radius,
                                    fill=PLAYER_COLORS[owner], outline="#000000", width=2)

    def draw_valid_hints(self) -> None:
        """手番プレイヤーの合法手のハイライト（小さな円の枠）を描画。"""
        if self.game.status is Status.FINISHED:
            return
        color = PLAYER_COLORS[self.game.active_player]
        for pos in self.game.legal_moves.moves(self.game.active_player):
            x, y = self.cell_center(pos)
            self.canvas.create_oval(x - 6, y - 6, x + 6, y + 6, outline=color, width=2)

    def draw_cursor(self) -> None:
        x, y = self.cell_center(self.game.cursor)
        r = self.cell_size() * 0.48
        self.canvas.create_oval(x - r, y - r, x + r, y + r, outline="white", width=1, dash=(3, 2))

    def update_status(self) -> None:
        """手番・スコア・メッセージをステータスバーに表示。"""
        game = self.game
        scores = " ".join(f"{name}={n}" for name, n in zip(game.names, game.scores()))
        if game.status is Status.FINISHED:
            text = game.message.strip()
        elif game.reviewing:
            text = f"History: turn {game.turn}/{game.history.last_turn} | Player-{game.player_name(game.active_player)}"
        elif game.message:
            text = game.message.strip()
        else:
            text = f"Turn: Player-{game.player_name(game.active_player)} | {scores}"
        self.status.set(text)
        self.label.configure(fg="red" if game.attention else "black")

    # ----- Interaction -----
    def open_setup_dialog(self) -> None:
        """起動/新規開始時の設定ダイアログ（盤サイズとプレイヤー名）を表示する。"""
        dlg = tk.Toplevel(self.root)
        dlg.title("新規対局の設定")
        dlg.transient(self.root)
        dlg.grab_set()

        size_var = tk.IntVar(value=self.size if self.size in SIZES else 14)
        name_vars = [tk.StringVar(value=name) for name in self.names]

        frm = tk.Frame(dlg, padx=14, pady=12)
        frm.pack(fill=tk.BOTH, expand=True)

        tk.Label(frm, text="盤面サイズ（一辺のマス数）").grid(row=0, column=0, sticky="w")
        size_frame = tk.Frame(frm)
        size_frame.grid(row=1, column=0, sticky="w")
        for col, val in enumerate(SIZES):
            tk.Radiobutton(size_frame, text=str(val), value=val, variable=size_var).grid(row=0, column=col, padx=6)

        tk.Label(frm, text="プレイヤー名").grid(row=2, column=0, sticky="w", pady=(10, 0))
        name_frame = tk.Frame(frm)
        name_frame.grid(row=3, column=0, sticky="w")
        for col, var in enumerate(name_vars):
            tk.Entry(name_frame, textvariable=var, width=8).grid(row=0, column=col, padx=6)

        btns = tk.Frame(frm)
        btns.grid(row=4, column=0, sticky="e", pady=(14, 0))

        def on_ok():
            self.size = size_var.get()
            names = tuple(var.get().strip() or str(i + 1) for i, var in enumerate(name_vars))
            self.names = names
            dlg.destroy()

        def on_cancel():
            dlg.destroy()

        tk.Button(btns, text="キャンセル", command=on_cancel).pack(side=tk.RIGHT, padx=6)
        tk.Button(btns, text="はい", command=on_ok).pack(side=tk.RIGHT)

        dlg.wait_window()

    def canvas_to_cell(self, x: int, y: int) -> Optional[logic.Coord]:
        """キャンバス座標から最寄りのマス (col, row) を求める。離れすぎなら None。"""
        cs = self.cell_size()
        r = round((y - MARGIN) / (cs * ROW_HEIGHT))
        c = round((x - MARGIN) / cs - (self.size - 1 - r) / 2)
        pos = (c, r)
        if not logic.in_bounds(self.size, pos):
            return None
        cx, cy = self.cell_center(pos)
        if math.hypot(x - cx, y - cy) > cs / 2:
            return None
        return pos

    def on_click(self, event) -> None:
        """クリック処理。パス中なら確認、対局中ならカーソルを合わせて着手。"""
        if self.game.status is Status.SKIPPED:
            self.select()
            return
        if self.game.status is not Status.TURN:
            return
        cell = self.canvas_to_cell(event.x, event.y)
        if cell is None:
            return
        # クリック位置までカーソルを移動してから決定
        while self.game.cursor[1] != cell[1]:
            self.game.move_cursor("down" if self.game.cursor[1] < cell[1] else "up")
        while self.game.cursor[0] != cell[0]:
            self.game.move_cursor("right" if self.game.cursor[0] < cell[0] else "left")
        self.select()

    def flash_cell(self, pos: logic.Coord) -> None:
        """不正な着手時に該当マスを一瞬赤枠でハイライト。"""
        x, y = self.cell_center(pos)
        r = self.cell_size() * 0.5
        ring = self.canvas.create_oval(x - r, y - r, x + r, y + r, outline="#ff6666", width=3)
        self.root.after(150, lambda: self.canvas.delete(ring))


def main() -> None:
    """GUIエントリーポイント。ウィンドウ生成とリサイズ対応を設定。"""
    root = tk.Tk()
    app = TriversiApp(root, size=14)
    # Adjust redraw when canvas resizes
    def _on_resize(_evt):
        app.redraw()
    app.canvas.bind("<Configure>", _on_resize)
    root.mainloop()


if __name__ == "__main__":
    main()
