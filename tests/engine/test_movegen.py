from __future__ import annotations

from neocheckers.engine import movegen
from neocheckers.engine.board import Board, Piece, PieceColor, Position
from neocheckers.engine.move import Move


CYAN = PieceColor.CYAN
MAGENTA = PieceColor.MAGENTA


def _mv(fr, to, cap=None) -> Move:
    return Move(Position(*fr), Position(*to), Position(*cap) if cap else None)


def test_single_piece_at_edge_has_one_move() -> None:
    b = Board.startpos()
    assert movegen.generate(b, CYAN, Position(5, 0)) == [_mv((5, 0), (4, 1))]


def test_startpos_moves_in_scan_order() -> None:
    b = Board.startpos()
    assert movegen.generate(b, CYAN) == [
        _mv((5, 0), (4, 1)),
        _mv((5, 2), (4, 1)),
        _mv((5, 2), (4, 3)),
        _mv((5, 4), (4, 3)),
        _mv((5, 4), (4, 5)),
        _mv((5, 6), (4, 5)),
        _mv((5, 6), (4, 7)),
    ]
    magenta = movegen.generate(b, MAGENTA)
    assert len(magenta) == 7
    assert magenta[0] == _mv((2, 1), (3, 0))
    assert all(m.from_pos.row == 2 and m.to_pos.row == 3 for m in magenta)


def test_jump_over_adjacent_opponent(make_board) -> None:
    b = make_board({(3, 2): Piece(CYAN), (2, 3): Piece(MAGENTA)})
    assert movegen.generate(b, CYAN, Position(3, 2)) == [_mv((3, 2), (1, 4), (2, 3))]


def test_forced_capture_suppresses_simple_moves_board_wide(make_board) -> None:
    b = make_board(
        {
            (5, 0): Piece(CYAN),
            (6, 5): Piece(CYAN),
            (3, 2): Piece(CYAN),
            (2, 3): Piece(MAGENTA),
        }
    )
    moves = movegen.generate(b, CYAN)
    assert moves == [_mv((3, 2), (1, 4), (2, 3))]
    assert all(m.is_jump for m in moves)


def test_origin_scan_applies_forced_capture_only_to_that_piece(make_board) -> None:
    b = make_board({(5, 0): Piece(CYAN), (3, 2): Piece(CYAN), (2, 3): Piece(MAGENTA)})
    # The piece on (5,0) has no jump of its own, so its simple move is returned
    assert movegen.generate(b, CYAN, Position(5, 0)) == [_mv((5, 0), (4, 1))]
    assert movegen.jumps_from(b, Position(5, 0)) == []


def test_empty_or_foreign_origin_yields_nothing() -> None:
    b = Board.startpos()
    assert movegen.generate(b, CYAN, Position(4, 1)) == []
    assert movegen.generate(b, CYAN, Position(2, 1)) == []


def test_men_only_move_forward(make_board) -> None:
    b = make_board({(3, 2): Piece(CYAN), (4, 5): Piece(MAGENTA)})
    assert movegen.generate(b, CYAN) == [_mv((3, 2), (2, 1)), _mv((3, 2), (2, 3))]
    assert movegen.generate(b, MAGENTA) == [_mv((4, 5), (5, 4)), _mv((4, 5), (5, 6))]


def test_king_moves_both_directions(make_board) -> None:
    b = make_board({(3, 2): Piece(CYAN, True)})
    assert movegen.generate(b, CYAN) == [
        _mv((3, 2), (2, 1)),
        _mv((3, 2), (2, 3)),
        _mv((3, 2), (4, 1)),
        _mv((3, 2), (4, 3)),
    ]


def test_king_jumps_backward(make_board) -> None:
    b = make_board({(3, 2): Piece(MAGENTA, True), (2, 1): Piece(CYAN)})
    assert movegen.generate(b, MAGENTA) == [_mv((3, 2), (1, 0), (2, 1))]


def test_no_jump_over_own_piece_or_into_occupied_square(make_board) -> None:
    b = make_board(
        {
            (3, 2): Piece(CYAN),
            (2, 1): Piece(CYAN),
            (2, 3): Piece(MAGENTA),
            (1, 4): Piece(MAGENTA),
        }
    )
    moves = movegen.generate(b, CYAN, Position(3, 2))
    assert moves == []
    assert [m.to_pos for m in movegen.generate(b, CYAN, Position(2, 1))] == [
        Position(1, 0),
        Position(1, 2),
    ]


def test_no_jump_off_board(make_board) -> None:
    b = make_board({(1, 0): Piece(CYAN), (0, 1): Piece(MAGENTA)})
    assert movegen.generate(b, CYAN) == []
    assert not movegen.has_moves(b, CYAN)
    assert movegen.has_moves(b, MAGENTA)
