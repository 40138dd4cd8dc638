from __future__ import annotations

from neocheckers.engine.board import Board, Piece, PieceColor
from neocheckers.eval import KING_VAL, MAN_VAL, evaluate, material


CYAN = PieceColor.CYAN
MAGENTA = PieceColor.MAGENTA


def test_startpos_is_balanced() -> None:
    b = Board.startpos()
    assert material(b, CYAN) == 12 * MAN_VAL
    assert evaluate(b, CYAN) == 0
    assert evaluate(b, MAGENTA) == 0


def test_kings_weigh_five_men(make_board) -> None:
    b = make_board(
        {
            (0, 1): Piece(CYAN, True),
            (5, 0): Piece(MAGENTA),
            (5, 2): Piece(MAGENTA),
        }
    )
    assert KING_VAL == 5
    assert evaluate(b, CYAN) == 5 - 2
    assert evaluate(b, MAGENTA) == 2 - 5


def test_empty_board_scores_zero() -> None:
    assert evaluate(Board.empty(), CYAN) == 0
