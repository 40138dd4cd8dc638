from __future__ import annotations

from typing import Optional, Tuple

from .board import Board, Piece, Position
from .move import Move


def apply(board: Board, move: Move) -> Tuple[Board, bool]:
    """Apply ``move`` and return the resulting board.

    The input board is never modified. The jumped piece (if any) is removed,
    and a man reaching the far rank is crowned. Promotion is checked once,
    on the landing square only.

    Args:
        board (Board): Position before the move.
        move (Move): Move to play; assumed legal for the piece on ``from_pos``.

    Returns:
        Tuple[Board, bool]: New board and whether the mover was promoted.

    Raises:
        ValueError: If there is no piece on ``move.from_pos``.
    """
    piece = board.piece_at(move.from_pos)
    if piece is None:
        raise ValueError(f"no piece on {move.from_pos}")

    promoted = not piece.is_king and move.to_pos.row == piece.color.promotion_row
    landed = piece.crowned() if promoted else piece

    changes: dict[Position, Optional[Piece]] = {move.from_pos: None, move.to_pos: landed}
    if move.captured is not None:
        changes[move.captured] = None
    return board.with_pieces(changes), promoted
