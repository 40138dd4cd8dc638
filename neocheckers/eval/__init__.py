"""Evaluation heuristics.

Pure, deterministic, and side-effect free. Material only: no positional or
mobility terms, and the same weights at every search depth.
"""

from __future__ import annotations

from typing import Final

from neocheckers.engine.board import Board, PieceColor


MAN_VAL: Final = 1
KING_VAL: Final = 5


def piece_value(is_king: bool) -> int:
    return KING_VAL if is_king else MAN_VAL


def material(board: Board, color: PieceColor) -> int:
    return sum(piece_value(p.is_king) for _, p in board.pieces(color))


def evaluate(board: Board, color: PieceColor) -> int:
    """Static evaluation of ``board`` from ``color``'s point of view.

    Args:
        board (Board): Position to score.
        color (PieceColor): Side whose material counts positively.

    Returns:
        int: Own material minus opponent material (man = 1, king = 5).
    """
    return material(board, color) - material(board, color.opponent)
