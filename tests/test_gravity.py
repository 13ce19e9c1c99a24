import pytest

from tetris_engine.board import Board
from tetris_engine.controller import LockController, LockState
from tetris_engine.tetromino import TetrominoType, spawn
from tetris_engine.utils import gravity_interval


def grounded_piece(board):
    piece = spawn(TetrominoType.O)
    piece.y = board.ghost_row(piece)
    return piece


def test_gravity_speed_increases_with_level():
    assert gravity_interval(0.8, 0) == pytest.approx(0.8)
    assert gravity_interval(0.8, 1) == pytest.approx(0.72)
    assert gravity_interval(0.8, 1) < gravity_interval(0.8, 0)
    assert gravity_interval(0.8, 20) == pytest.approx(0.1)
    assert all(gravity_interval(1.0, level) >= 0.1 for level in range(50))
    with pytest.raises(ValueError):
        gravity_interval(0.8, -1)


def test_piece_falls_once_accumulator_exceeds_interval():
    board = Board()
    piece = spawn(TetrominoType.O)
    controller = LockController(0.5)
    assert controller.update(0.3, board, piece) is False
    assert piece.y == 0
    assert controller.update(0.3, board, piece) is False
    assert piece.y == 1
    assert controller.gravity_accum == 0.0
    assert controller.state is LockState.FALLING


def test_grounded_piece_locks_after_delay():
    board = Board()
    piece = grounded_piece(board)
    controller = LockController(0.8)
    assert controller.update(0.1, board, piece) is False
    assert controller.state is LockState.GROUNDED
    assert controller.update(0.25, board, piece) is False
    assert controller.update(0.25, board, piece) is False
    assert controller.update(0.01, board, piece) is True
    assert controller.state is LockState.LOCKED


def test_moves_reset_lock_timer_until_cap():
    board = Board()
    piece = grounded_piece(board)
    controller = LockController(0.8)
    controller.update(0.0, board, piece)
    for _ in range(14):
        controller.register_move()
        assert controller.update(0.4, board, piece) is False
    assert controller.resets == 14
    controller.register_move()
    assert controller.resets == 15
    assert controller.update(0.0, board, piece) is True


def test_reset_cap_stops_refreshing_timer():
    board = Board()
    piece = grounded_piece(board)
    controller = LockController(0.8, max_resets=2)
    controller.update(0.0, board, piece)
    controller.register_move()
    controller.register_move()
    controller.lock_timer = 0.3
    controller.register_move()
    assert controller.resets == 2
    assert controller.lock_timer == 0.3


def test_falling_again_clears_grounded_state():
    board = Board()
    board.set_cell(20, 5, 1)
    piece = grounded_piece(board)
    assert piece.y == 17
    controller = LockController(0.8)
    controller.update(0.0, board, piece)
    controller.register_move()
    controller.update(0.3, board, piece)
    assert controller.lock_timer == pytest.approx(0.3)

    board.set_cell(20, 5, 0)
    assert controller.update(0.1, board, piece) is False
    assert controller.state is LockState.FALLING
    assert controller.lock_timer == 0.0
    assert controller.resets == 0


def test_moves_while_falling_do_not_count():
    controller = LockController(0.8)
    controller.register_move()
    assert controller.resets == 0


def test_force_lock_and_reset():
    board = Board()
    piece = spawn(TetrominoType.T)
    controller = LockController(0.8)
    controller.force_lock()
    assert controller.update(0.0, board, piece) is True
    controller.reset()
    assert controller.state is LockState.FALLING
    assert controller.gravity_interval == 0.8
