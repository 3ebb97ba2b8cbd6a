"""Unit tests for the kinrow data model and line detection."""

import pytest

from kinrow.errors import ConfigurationError
from kinrow.game import (
    GameConfig,
    GameMode,
    Player,
    completes_line,
    empty_board,
    find_winning_line,
    is_board_full,
    iter_winning_lines,
    to_coord,
)

X, O = Player.X, Player.O


def board_with(size, marks):
    board = list(empty_board(size))
    for index, mark in marks.items():
        board[index] = mark
    return tuple(board)


def test_index_maps_row_major():
    assert to_coord(0, 3) == (0, 0)
    assert to_coord(5, 3) == (1, 2)
    assert to_coord(48, 7) == (6, 6)


def test_empty_board_has_no_winner():
    assert find_winning_line(empty_board(3), 3, 3) is None
    assert find_winning_line(empty_board(7), 7, 4) is None


def test_detects_all_four_directions_on_3x3():
    assert find_winning_line(board_with(3, {0: X, 1: X, 2: X}), 3, 3) == (X, (0, 1, 2))
    assert find_winning_line(board_with(3, {1: O, 4: O, 7: O}), 3, 3) == (O, (1, 4, 7))
    assert find_winning_line(board_with(3, {0: X, 4: X, 8: X}), 3, 3) == (X, (0, 4, 8))
    assert find_winning_line(board_with(3, {2: O, 4: O, 6: O}), 3, 3) == (O, (2, 4, 6))


def test_sliding_windows_on_4x4():
    # Three in a row starting mid-row
    board = board_with(4, {5: X, 6: X, 7: X})
    assert find_winning_line(board, 4, 3) == (X, (5, 6, 7))
    # Anti-diagonal that does not touch a corner
    board = board_with(4, {7: O, 10: O, 13: O})
    assert find_winning_line(board, 4, 3) == (O, (7, 10, 13))


def test_lines_do_not_wrap_around_edges():
    # 2, 3 end row 0 and 4 starts row 1 on a 4x4 board
    board = board_with(4, {2: X, 3: X, 4: X})
    assert find_winning_line(board, 4, 3) is None


def test_mixed_marks_do_not_win():
    board = board_with(3, {0: X, 1: O, 2: X})
    assert find_winning_line(board, 3, 3) is None


def test_seven_by_seven_needs_four():
    three = board_with(7, {24: X, 25: X, 26: X})
    assert find_winning_line(three, 7, 4) is None
    four = board_with(7, {6: O, 12: O, 18: O, 24: O})
    assert find_winning_line(four, 7, 4) == (O, (6, 12, 18, 24))


def test_first_line_in_scan_order_is_reported():
    board = board_with(3, {0: X, 1: X, 2: X, 3: X, 6: X})
    assert find_winning_line(board, 3, 3) == (X, (0, 1, 2))


def test_detection_does_not_mutate_board():
    board = [X, X, X, None, None, None, None, None, None]
    snapshot = list(board)
    find_winning_line(board, 3, 3)
    assert board == snapshot


def test_completes_line_checks_runs_through_index():
    board = board_with(7, {10: X, 11: X, 12: X, 13: X})
    assert completes_line(board, 7, 4, 12)
    assert not completes_line(board, 7, 4, 0)
    assert not completes_line(board_with(7, {10: X, 11: X, 12: X}), 7, 4, 11)


def test_is_board_full():
    assert not is_board_full(empty_board(3))
    assert is_board_full((X, O, X, O, X, O, O, X, O))


def test_config_coerces_strings():
    config = GameConfig(board_size=4, k_in_row=3, first_player="O", mode="human-vs-computer")
    assert config.first_player is O
    assert config.mode is GameMode.HUMAN_VS_COMPUTER
    assert config.cell_count == 16


def test_standard_config_picks_win_length():
    assert GameConfig.standard(3).k_in_row == 3
    assert GameConfig.standard(4).k_in_row == 3
    assert GameConfig.standard(7).k_in_row == 4


@pytest.mark.parametrize(
    "kwargs",
    [
        {"board_size": 5},
        {"board_size": 3.0},
        {"board_size": True},
        {"board_size": 3, "k_in_row": 3.0},
        {"board_size": 3, "k_in_row": 4},
        {"board_size": 7, "k_in_row": 2},
        {"first_player": "Z"},
        {"mode": "online"},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        GameConfig(**kwargs)


def test_iter_winning_lines_reports_every_line_in_scan_order():
    board = board_with(3, {0: X, 1: X, 2: X, 3: X, 6: X})
    lines = [line for _, line in iter_winning_lines(board, 3, 3)]
    assert lines == [(0, 1, 2), (0, 3, 6)]
    assert lines[0] == find_winning_line(board, 3, 3)[1]


def test_float_board_size_fails_at_construction():
    with pytest.raises(ConfigurationError) as excinfo:
        GameConfig(board_size=3.0, k_in_row=3)
    assert excinfo.value.context["board_size"] == 3.0
