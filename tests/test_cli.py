"""
tests/test_cli.py

テキスト UI（盤の描画・入力処理・引数）のテスト。
"""

import pytest

from triversi.cli import TextView, handle_input, main, parse_marks, render_lines
from triversi.errors import InvalidBoardDistance, InvalidPlayerMarks
from triversi.game import Status, new_game
from triversi.logic import create_board

MARKS = ("1", "2", "3")


def test_render_opening_distance_2():
    lines = render_lines(create_board(5), 2, MARKS)
    assert len(lines) == 9
    assert lines[0] == "         ."
    assert lines[1] == ""
    assert lines[2] == "       2   3"
    assert lines[8] == " .   3   1   2   ."


def test_render_cursor_and_hints():
    lines = render_lines(create_board(5), 2, MARKS, cursor=(0, 0), hints=[(0, 0), (4, 4)])
    assert lines[0] == "        [*]"
    assert lines[8] == " .   3   1   2   *"


def test_render_frame():
    lines = render_lines(create_board(5), 2, ("S", "O", "B"), frame=True)
    assert lines[1] == "        / \\"
    assert lines[2] == "       O---B"


def test_parse_marks():
    assert parse_marks("1,2,3") == ("1", "2", "3")
    assert parse_marks("Sun,Moon,Star") == ("Sun", "Moon", "Star")
    for bad in ["1,2", "1,,3", "1,2,3,4", "あ,い,う"]:
        with pytest.raises(InvalidPlayerMarks):
            parse_marks(bad)


@pytest.mark.parametrize("distance", [0, 1, 11])
def test_view_rejects_bad_distance(distance):
    with pytest.raises(InvalidBoardDistance):
        TextView(distance)


def test_view_zoom_is_clamped():
    view = TextView(10)
    view.zoom_in()
    assert view.distance == 10
    view = TextView(2)
    view.zoom_out()
    assert view.distance == 2


def test_handle_input_plays_a_move():
    game = new_game(5)
    view = TextView(2)
    for key in ["k", "k", "k", ""]:
        handle_input(game, view, key)
    assert game.turn == 1
    assert game.active_player.name == "TWO"


def test_handle_input_quit_flow():
    game = new_game(5)
    view = TextView(2)
    handle_input(game, view, "q")
    assert game.status is Status.ASK_QUIT
    handle_input(game, view, "n")
    assert game.status is Status.TURN
    handle_input(game, view, "q")
    handle_input(game, view, "Y")
    assert game.status is Status.QUIT


def test_handle_input_ignores_unknown_keys():
    game = new_game(5)
    view = TextView(2)
    handle_input(game, view, "zzz")
    assert game.status is Status.TURN
    assert game.cursor == (1, 3)


def test_screen_shows_players_and_message():
    game = new_game(5)
    view = TextView(2)
    game.place()
    screen = view.render(game)
    assert " Player: >1< 2 3 | Position: 1, 3" in screen
    assert "! Player-1: You cannot select (1, 3)." in screen
    assert " Score: 1=4, 2=4, 3=4" in screen
    game.request_quit()
    assert view.render(game).startswith("Are you sure to quit?")


def test_main_rejects_bad_range(capsys):
    assert main(["-r", "7"]) == 2
    assert "7 is invalid board range." in capsys.readouterr().err


def test_main_rejects_bad_distance(capsys):
    assert main(["-d", "1"]) == 2
    assert "1 is invalid distance." in capsys.readouterr().err


def test_main_quits_on_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda _prompt="": (_ for _ in ()).throw(EOFError))
    assert main(["-r", "5", "-d", "2"]) == 0
    assert "中断しました。" in capsys.readouterr().out
