from __future__ import annotations

from typing import List

import pytest

from neocheckers.engine import movegen
from neocheckers.engine.board import Board, Piece, PieceColor, Position
from neocheckers.engine.game import Game, GameResult, GameState
from neocheckers.engine.move import Move


CYAN = PieceColor.CYAN
MAGENTA = PieceColor.MAGENTA


def _mv(fr, to, cap=None) -> Move:
    return Move(Position(*fr), Position(*to), Position(*cap) if cap else None)


@pytest.fixture
def double_jump_game(make_board) -> Game:
    # Cyan (5,0) jumps (4,1) then (2,3); (7,6) is a bystander
    board = make_board(
        {
            (5, 0): Piece(CYAN),
            (7, 6): Piece(CYAN),
            (4, 1): Piece(MAGENTA),
            (2, 3): Piece(MAGENTA),
            (0, 1): Piece(MAGENTA),
        }
    )
    return Game.from_board(board)


def test_new_game_state() -> None:
    game = Game.new()
    s = game.state
    assert s.board == Board.startpos()
    assert s.turn is CYAN
    assert s.winner is None
    assert s.selected is None
    assert s.pending_multi_jump is None
    assert (s.cyan_captures, s.magenta_captures, s.move_count) == (0, 0, 0)


def test_select_invalid_squares_is_noop() -> None:
    game = Game.new()
    before = game.state
    game.select(Position(4, 1))  # empty
    game.select(Position(2, 1))  # opponent
    game.select(Position(6, 1))  # blocked, no legal moves
    assert game.state is before


def test_select_movable_piece_sets_selection_and_targets() -> None:
    game = Game.new()
    before = game.state
    game.select(Position(5, 2))
    assert game.state.selected == Position(5, 2)
    assert game.legal_targets() == [Position(4, 1), Position(4, 3)]
    # Snapshots are replaced, never mutated
    assert before.selected is None


def test_simple_move_passes_turn() -> None:
    game = Game.new()
    game.select(Position(5, 0))
    s = game.move(_mv((5, 0), (4, 1)))
    assert s.turn is MAGENTA
    assert s.move_count == 1
    assert s.selected is None
    assert s.board.piece_at(Position(4, 1)) == Piece(CYAN)
    assert game.legal_targets() == []


def test_illegal_move_becomes_selection_of_destination() -> None:
    game = Game.new()
    before = game.state
    # Destination holds a movable cyan piece: treated as selecting it
    game.move(_mv((5, 0), (5, 2)))
    assert game.state.selected == Position(5, 2)
    assert game.state.board == before.board
    assert game.state.turn is CYAN

    # Destination empty: nothing happens
    current = game.state
    game.move(_mv((5, 0), (3, 2)))
    assert game.state is current


def test_simple_move_rejected_while_capture_available(make_board) -> None:
    board = make_board({(5, 0): Piece(CYAN), (3, 2): Piece(CYAN), (2, 3): Piece(MAGENTA)})
    game = Game.from_board(board)
    game.move(_mv((5, 0), (4, 1)))
    assert game.state.turn is CYAN
    assert game.state.board == board


def test_multi_jump_keeps_turn_and_pins_piece(double_jump_game: Game) -> None:
    game = double_jump_game
    s = game.move(_mv((5, 0), (3, 2), (4, 1)))

    assert s.turn is CYAN
    assert s.pending_multi_jump == Position(3, 2)
    assert s.selected == Position(3, 2)
    assert s.cyan_captures == 1
    assert s.move_count == 0
    assert game.legal_moves() == [_mv((3, 2), (1, 4), (2, 3))]

    # Other pieces cannot be selected or moved mid-sequence
    game.select(Position(7, 6))
    assert game.state is s
    game.move(_mv((7, 6), (6, 5)))
    assert game.state is s

    s2 = game.move(_mv((3, 2), (1, 4), (2, 3)))
    assert s2.turn is MAGENTA
    assert s2.pending_multi_jump is None
    assert s2.selected is None
    assert s2.cyan_captures == 2
    assert s2.move_count == 1
    assert s2.winner is None


def test_promotion_ends_multi_jump(make_board) -> None:
    board = make_board(
        {
            (2, 1): Piece(CYAN),
            (1, 2): Piece(MAGENTA),
            (1, 4): Piece(MAGENTA),
        }
    )
    game = Game.from_board(board)
    s = game.move(_mv((2, 1), (0, 3), (1, 2)))

    assert s.board.piece_at(Position(0, 3)) == Piece(CYAN, True)
    # A further jump exists for the new king, but the turn still ends
    assert movegen.jumps_from(s.board, Position(0, 3))
    assert s.turn is MAGENTA
    assert s.pending_multi_jump is None
    assert s.move_count == 1


def test_capture_counters_follow_the_mover(make_board) -> None:
    board = make_board({(2, 3): Piece(MAGENTA), (3, 2): Piece(CYAN), (7, 6): Piece(CYAN)})
    game = Game.from_board(board, turn=MAGENTA)
    s = game.move(_mv((2, 3), (4, 1), (3, 2)))
    assert s.magenta_captures == 1
    assert s.cyan_captures == 0
    assert s.turn is CYAN


def test_capturing_last_piece_wins_and_emits_once(make_board) -> None:
    board = make_board({(3, 2): Piece(CYAN), (2, 3): Piece(MAGENTA)})
    game = Game.from_board(board)
    results: List[GameResult] = []
    game.add_listener(results.append)

    s = game.move(_mv((3, 2), (1, 4), (2, 3)))

    assert s.winner is CYAN
    assert s.turn is MAGENTA
    assert s.is_over
    assert results == [GameResult(winner=CYAN, move_count=1)]
    assert game.legal_moves() == []

    # Terminal: further input is ignored
    game.select(Position(1, 4))
    game.move(_mv((1, 4), (0, 3)))
    assert game.state is s
    assert len(results) == 1


def test_immobilized_opponent_loses(make_board) -> None:
    board = make_board(
        {
            (6, 1): Piece(MAGENTA),
            (7, 0): Piece(CYAN),
            (7, 2): Piece(CYAN),
            (5, 0): Piece(CYAN),
            (5, 2): Piece(CYAN),
        }
    )
    game = Game.from_board(board)
    s = game.move(_mv((5, 2), (4, 3)))
    assert s.winner is CYAN
    assert s.board.count(MAGENTA) == 1


def test_failing_listener_does_not_block_game_over(make_board) -> None:
    board = make_board({(3, 2): Piece(CYAN), (2, 3): Piece(MAGENTA)})
    game = Game.from_board(board)

    def boom(_: GameResult) -> None:
        raise RuntimeError("storage down")

    seen: List[GameResult] = []
    game.add_listener(boom)
    game.add_listener(seen.append)

    s = game.move(_mv((3, 2), (1, 4), (2, 3)))
    assert s.winner is CYAN
    assert len(seen) == 1


def test_reset_restores_start_and_bumps_generation() -> None:
    game = Game.new()
    game.move(_mv((5, 0), (4, 1)))
    gen = game.generation
    s = game.reset()
    assert s == GameState.initial()
    assert game.history == []
    assert game.generation == gen + 1


def test_undo_restores_previous_snapshot(double_jump_game: Game) -> None:
    game = double_jump_game
    start = game.state
    game.move(_mv((5, 0), (3, 2), (4, 1)))
    mid = game.state
    game.move(_mv((3, 2), (1, 4), (2, 3)))

    assert game.undo() is mid
    assert game.undo() is start
    with pytest.raises(ValueError):
        game.undo()


def test_finished_game_cannot_be_undone(make_board) -> None:
    board = make_board({(3, 2): Piece(CYAN), (2, 3): Piece(MAGENTA)})
    game = Game.from_board(board)
    results: List[GameResult] = []
    game.add_listener(results.append)

    s = game.move(_mv((3, 2), (1, 4), (2, 3)))
    with pytest.raises(ValueError, match="game is over"):
        game.undo()

    assert game.state is s
    assert len(game.history) == 1
    assert len(results) == 1
