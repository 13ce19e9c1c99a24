import random

import pytest

from tetris_engine.board import Board
from tetris_engine.scoring import ClearEvent, ScoringEngine, base_score, is_t_spin
from tetris_engine.tetromino import Piece, TetrominoType


def test_tetris_on_fresh_state_scores_800_and_starts_back_to_back():
    engine = ScoringEngine()
    event = engine.apply_lock(4)
    assert event.score_delta == 800
    assert engine.state.score == 800
    assert engine.state.back_to_back is True
    assert engine.state.combo == 1
    assert engine.state.tetris_count == 1
    assert event.label == "TETRIS"


def test_back_to_back_tetris_gets_bonus():
    engine = ScoringEngine()
    engine.apply_lock(4)
    event = engine.apply_lock(4)
    # combo multiplier 1.5, back-to-back multiplier 1.5
    assert event.score_delta == 1800
    assert event.back_to_back is True
    assert event.label == "TETRIS B2B"


def test_non_clearing_lock_breaks_back_to_back_and_combo():
    engine = ScoringEngine()
    engine.apply_lock(4)
    event = engine.apply_lock(0)
    assert event.score_delta == 0
    assert engine.state.combo == 0
    assert engine.state.back_to_back is False
    event = engine.apply_lock(4)
    assert event.back_to_back is False
    assert event.score_delta == 800


def test_non_clearing_t_spin_keeps_back_to_back():
    engine = ScoringEngine()
    engine.apply_lock(4)
    engine.apply_lock(0, t_spin=True)
    assert engine.state.back_to_back is True
    event = engine.apply_lock(4)
    assert event.back_to_back is True
    assert event.score_delta == 1200


def test_ordinary_clear_breaks_back_to_back():
    engine = ScoringEngine()
    engine.apply_lock(4)
    assert engine.apply_lock(1).score_delta == 150
    assert engine.state.back_to_back is False
    event = engine.apply_lock(4)
    assert event.back_to_back is False
    assert event.score_delta == 1600


def test_combo_multiplier_grows_by_half():
    engine = ScoringEngine()
    deltas = [engine.apply_lock(1).score_delta for _ in range(3)]
    assert deltas == [100, 150, 200]
    assert engine.state.combo == 3


@pytest.mark.parametrize("lines,expected", [(1, 100), (2, 300), (3, 500), (4, 800)])
def test_line_table(lines, expected):
    assert base_score(lines) == expected


@pytest.mark.parametrize("lines,expected", [(0, 0), (1, 800), (2, 1200), (3, 1600), (4, 1600)])
def test_t_spin_table(lines, expected):
    assert base_score(lines, t_spin=True) == expected


def test_perfect_clear_bonus_is_added_after_multipliers():
    engine = ScoringEngine()
    engine.apply_lock(1)
    event = engine.apply_lock(1, perfect_clear=True)
    assert event.score_delta == 150 + 3000
    assert event.label == "PERFECT CLEAR"


def test_t_spin_double_scores_and_counts():
    engine = ScoringEngine()
    event = engine.apply_lock(2, t_spin=True)
    assert event.score_delta == 1200
    assert engine.state.back_to_back is True
    assert engine.state.t_spin_count == 1
    assert event.label == "T-SPIN DOUBLE"


def test_t_spin_without_lines_scores_nothing():
    engine = ScoringEngine()
    event = engine.apply_lock(0, t_spin=True)
    assert event.score_delta == 0
    assert engine.state.t_spin_count == 0
    assert event.label == "T-SPIN"


def test_level_follows_total_lines():
    engine = ScoringEngine()
    events = [engine.apply_lock(1) for _ in range(10)]
    assert engine.state.lines == 10
    assert engine.state.level == 1
    assert [e.level_up for e in events].count(True) == 1
    assert events[-1].level_up is True


def test_score_never_decreases():
    rng = random.Random(5)
    engine = ScoringEngine()
    previous = 0
    for _ in range(200):
        lines = rng.choice([0, 0, 1, 2, 3, 4])
        event = engine.apply_lock(lines, t_spin=rng.random() < 0.1)
        assert engine.state.score >= previous
        if lines == 0:
            assert engine.state.score == previous
            assert event.score_delta == 0
        previous = engine.state.score


def test_invalid_line_count_rejected():
    with pytest.raises(ValueError):
        ScoringEngine().apply_lock(5)


def test_drop_points():
    engine = ScoringEngine()
    assert engine.add_drop_points(18, 2) == 36
    assert engine.add_drop_points(0, 2) == 0
    assert engine.state.score == 36


def _t_slot_board() -> Board:
    board = Board()
    # Pivot of a T at x=4, y=17 sits on (19, 5); fill three diagonals.
    board.set_cell(18, 4, 1)
    board.set_cell(20, 4, 1)
    board.set_cell(20, 6, 1)
    return board


def test_t_spin_needs_rotation_and_three_corners():
    board = _t_slot_board()
    piece = Piece(TetrominoType.T, x=4, y=17, last_action_rotate=True)
    assert board.can_place(piece)
    assert is_t_spin(board, piece)

    piece.last_action_rotate = False
    assert not is_t_spin(board, piece)

    board.set_cell(18, 4, 0)
    piece.last_action_rotate = True
    assert not is_t_spin(board, piece)


def test_walls_count_as_corners():
    board = Board()
    board.set_cell(18, 2, 1)
    # Pivot at (19, 1): the left diagonals are wall cells.
    piece = Piece(TetrominoType.T, rotation=1, x=0, y=17, last_action_rotate=True)
    assert board.can_place(piece)
    assert is_t_spin(board, piece)


def test_only_t_pieces_spin():
    board = _t_slot_board()
    piece = Piece(TetrominoType.S, x=4, y=17, last_action_rotate=True)
    assert not is_t_spin(board, piece)


def test_clear_event_defaults():
    event = ClearEvent(lines=1)
    assert event.label == ""
    assert event.rows == ()
