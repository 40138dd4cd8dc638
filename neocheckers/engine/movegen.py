from __future__ import annotations

from typing import List, Optional, Tuple

from .board import Board, Piece, PieceColor, Position
from .move import Move


def _row_directions(piece: Piece) -> Tuple[int, ...]:
    if piece.is_king:
        return (-1, 1)
    return (piece.color.forward,)


def _piece_moves(board: Board, pos: Position, piece: Piece) -> Tuple[List[Move], List[Move]]:
    simple: List[Move] = []
    jumps: List[Move] = []
    for dr in _row_directions(piece):
        for dc in (-1, 1):
            step = pos.offset(dr, dc)
            if not step.in_bounds():
                continue
            occupant = board.piece_at(step)
            if occupant is None:
                simple.append(Move(pos, step))
            elif occupant.color is not piece.color:
                land = step.offset(dr, dc)
                if board.is_empty(land):
                    jumps.append(Move(pos, land, step))
    return simple, jumps


def generate(board: Board, color: PieceColor, origin: Optional[Position] = None) -> List[Move]:
    """Generate legal moves for ``color``.

    Args:
        board (Board): Position to generate from.
        color (PieceColor): Side to move.
        origin (Optional[Position]): Restrict generation to the piece on this
            square. An empty or opponent-owned origin yields no moves.

    Returns:
        List[Move]: Jumps only if any jump exists in the scanned set, otherwise
        simple moves. Ordered by row, then column, then ``dr=-1`` before
        ``dr=+1`` and ``dc=-1`` before ``dc=+1``.
    """
    if origin is not None:
        piece = board.piece_at(origin)
        if piece is None or piece.color is not color:
            return []
        candidates = [(origin, piece)]
    else:
        candidates = list(board.pieces(color))

    simple: List[Move] = []
    jumps: List[Move] = []
    for pos, piece in candidates:
        s, j = _piece_moves(board, pos, piece)
        simple.extend(s)
        jumps.extend(j)
    # Forced capture
    return jumps if jumps else simple


def jumps_from(board: Board, pos: Position) -> List[Move]:
    """Jump continuations available to the piece on ``pos`` (possibly empty)."""
    piece = board.piece_at(pos)
    if piece is None:
        return []
    return [m for m in generate(board, piece.color, pos) if m.is_jump]


def has_moves(board: Board, color: PieceColor) -> bool:
    for pos, piece in board.pieces(color):
        s, j = _piece_moves(board, pos, piece)
        if s or j:
            return True
    return False
