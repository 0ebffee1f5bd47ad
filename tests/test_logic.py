"""
tests/test_logic.py

座標系・盤面・初期配置・合法手インデックスのテスト。
"""

import random

import pytest

from triversi.errors import InvalidBoardRange
from triversi.logic import (
    DIRECTIONS, PLAYERS, Board, LegalMoveIndex, Player, apply_move, create_board,
    find_captures, game_over, in_bounds, initial_cursor, move_cursor, opening_layout,
    positions, ray, validate_range, valid_moves,
)

ONE, TWO, THREE = Player.ONE, Player.TWO, Player.THREE
VALID_RANGES = [n for n in range(5, 24) if n % 3 in (0, 2)]


def board_from(size, cells):
    board = Board(size)
    for pos, player in cells.items():
        board.write(pos, player)
    return board


def test_player_cycle():
    """手番は ONE→TWO→THREE→ONE の順に回る。"""
    assert ONE.next() is TWO
    assert TWO.next() is THREE
    assert THREE.next() is ONE
    assert ONE.next().next().next() is ONE


@pytest.mark.parametrize("size", [0, 3, 4, 7, 10, 13])
def test_invalid_range(size):
    with pytest.raises(InvalidBoardRange):
        validate_range(size)
    with pytest.raises(InvalidBoardRange):
        create_board(size)


@pytest.mark.parametrize("size", VALID_RANGES)
def test_valid_range(size):
    assert validate_range(size) == size


def test_in_bounds_and_positions():
    assert in_bounds(5, (0, 0))
    assert in_bounds(5, (4, 4))
    assert not in_bounds(5, (1, 0))
    assert not in_bounds(5, (0, 5))
    assert not in_bounds(5, (-1, 2))
    cells = list(positions(5))
    assert len(cells) == 15
    assert cells[:3] == [(0, 0), (0, 1), (1, 1)]


def test_six_directions():
    assert len(DIRECTIONS) == 6
    assert len(set(DIRECTIONS)) == 6


def test_ray_stops_at_edge():
    assert list(ray(5, (0, 0), (0, 1))) == [(0, 1), (0, 2), (0, 3), (0, 4)]
    assert list(ray(5, (0, 4), (1, 0))) == [(1, 4), (2, 4), (3, 4), (4, 4)]
    assert list(ray(5, (0, 0), (1, 1))) == [(1, 1), (2, 2), (3, 3), (4, 4)]
    # 右端の列から真上は盤外
    assert list(ray(5, (4, 4), (0, -1))) == []
    assert list(ray(5, (2, 2), (-1, -1))) == [(1, 1), (0, 0)]
    assert list(ray(5, (0, 3), (-1, 0))) == []


def test_ray_is_lazy():
    r = ray(5, (0, 0), (0, 1))
    assert next(r) == (0, 1)
    assert next(r) == (0, 2)


def test_move_cursor():
    assert move_cursor(5, (0, 0), "left") == (0, 0)
    assert move_cursor(5, (0, 0), "right") == (0, 0)
    assert move_cursor(5, (0, 0), "up") == (0, 0)
    assert move_cursor(5, (0, 0), "down") == (0, 1)
    assert move_cursor(5, (3, 3), "up") == (2, 2)
    assert move_cursor(5, (1, 3), "up") == (1, 2)
    assert move_cursor(5, (2, 4), "down") == (2, 4)
    assert move_cursor(5, (2, 4), "right") == (3, 4)
    assert initial_cursor(5) == (1, 3)


def test_board_counts_follow_writes():
    board = Board(5)
    board.write((0, 0), ONE)
    board.write((0, 1), ONE)
    assert board.counts() == (2, 0, 0)
    board.write((0, 1), TWO)
    assert board.counts() == (1, 1, 0)
    board.write((0, 0), None)
    assert board.counts() == (0, 1, 0)
    assert board.read((0, 0)) is None
    assert board.read((0, 1)) is TWO


def test_board_rejects_outside_positions():
    board = Board(5)
    with pytest.raises(IndexError):
        board.read((1, 0))
    with pytest.raises(IndexError):
        board.read((-1, 2))
    with pytest.raises(IndexError):
        board.write((0, 5), ONE)


def test_board_copy_is_independent():
    board = create_board(5)
    other = board.copy()
    assert other == board
    other.write((0, 0), ONE)
    assert other != board
    assert board.read((0, 0)) is None
    assert board.counts() == (4, 4, 4)


def test_opening_range_5():
    """range=5（余り 2）の初期配置。"""
    board = create_board(5)
    assert board.rows == [
        [None],
        [TWO, THREE],
        [THREE, ONE, TWO],
        [ONE, TWO, THREE, ONE],
        [None, THREE, ONE, TWO, None],
    ]
    assert board.empty_positions() == [(0, 0), (0, 4), (4, 4)]


def test_opening_range_6():
    """range=6（余り 0）の初期配置。"""
    layout = opening_layout(6)
    assert layout[ONE] == [(2, 4), (3, 3), (1, 2), (0, 3)]
    assert layout[TWO] == [(2, 3), (0, 2), (1, 4), (3, 5)]
    assert layout[THREE] == [(1, 3), (2, 5), (3, 4), (2, 2)]


@pytest.mark.parametrize("size", VALID_RANGES)
def test_opening_every_player_can_move(size):
    board = create_board(size)
    assert board.counts() == (4, 4, 4)
    assert board.total() == 12
    index = LegalMoveIndex.build(board)
    for player in PLAYERS:
        assert index.has_moves(player), f"player {player.name} has no opening move (range={size})"


def test_opening_index_range_5():
    """range=5 の初期局面の合法手と反転集合。途中の色が混ざっていても挟める。"""
    index = LegalMoveIndex.build(create_board(5))
    assert index.moves(ONE) == {
        (0, 0): {(0, 1), (0, 2), (1, 1), (2, 2)},
        (0, 4): {(1, 4)},
        (4, 4): {(3, 4)},
    }
    assert index.moves(TWO) == {
        (0, 0): {(1, 1)},
        (0, 4): {(1, 4), (2, 4), (0, 3), (0, 2)},
        (4, 4): {(3, 3)},
    }
    assert index.moves(THREE) == {
        (0, 0): {(0, 1)},
        (0, 4): {(0, 3)},
        (4, 4): {(3, 4), (2, 4), (3, 3), (2, 2)},
    }
    assert index.captures(ONE, (1, 3)) == frozenset()
    assert not index.is_legal(ONE, (1, 3))
    assert not index.is_exhausted()


def test_line_must_be_bounded():
    """自分の石で終わらないラインは取れない。"""
    board = board_from(5, {(1, 4): TWO, (2, 4): TWO})
    assert find_captures(board, ONE, (0, 4)) == frozenset()
    board.write((3, 4), ONE)
    assert find_captures(board, ONE, (0, 4)) == {(1, 4), (2, 4)}
    # 隣が自分の石なら、その方向からは取れない
    assert find_captures(board, TWO, (0, 4)) == frozenset()


def test_line_with_gap_is_not_captured():
    board = board_from(5, {(1, 4): TWO, (3, 4): ONE})
    assert find_captures(board, ONE, (0, 4)) == frozenset()


def test_occupied_candidate_has_no_captures():
    board = create_board(5)
    assert find_captures(board, ONE, (1, 3)) == frozenset()


def test_apply_move():
    board = create_board(5)
    after = apply_move(board, ONE, (0, 0))
    assert board.counts() == (4, 4, 4), "元の盤面は変更しない"
    assert after.counts() == (9, 2, 2)
    assert after.total() == 13
    assert after.read((0, 0)) is ONE
    for pos in [(0, 1), (0, 2), (1, 1), (2, 2)]:
        assert after.read(pos) is ONE


def test_apply_move_rejects_illegal():
    with pytest.raises(ValueError):
        apply_move(create_board(5), ONE, (1, 3))


def test_game_over_on_full_board():
    board = Board(5)
    for i, pos in enumerate(positions(5)):
        board.write(pos, PLAYERS[i % 3])
    assert game_over(board)
    assert valid_moves(board, ONE) == []


def _random_board(rng, size):
    board = Board(size)
    for pos in positions(size):
        board.write(pos, rng.choice([None, None, ONE, TWO, THREE]))
    return board


@pytest.mark.parametrize("seed", range(20))
def test_random_boards_capture_invariants(seed):
    """反転集合には自分の石も空マスも含まれず、着手で石数が正しく変わる。"""
    rng = random.Random(seed)
    board = _random_board(rng, rng.choice([5, 6, 8, 9]))
    index = LegalMoveIndex.build(board)
    for player in PLAYERS:
        assert set(index.moves(player)) == set(valid_moves(board, player))
        for pos, captured in index.moves(player).items():
            assert board.read(pos) is None
            assert captured
            for q in captured:
                assert board.read(q) not in (None, player)
            before = board.counts()
            after = apply_move(board, player, pos, captured)
            assert after.total() == board.total() + 1
            assert after.count(player) == before[player] + len(captured) + 1
            lost = sum(before[p] - after.count(p) for p in PLAYERS if p != player)
            assert lost == len(captured)
