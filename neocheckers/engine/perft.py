from __future__ import annotations

from typing import Iterator

from . import movegen, rules
from .board import Board, PieceColor, Position


def perft(board: Board, color: PieceColor, depth: int) -> int:
    """Count leaf positions of the full-turn game tree from ``board``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 sums perft(depth-1) over every complete turn of ``color``.
      A multi-jump chain is one turn; each distinct chain is counted.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for child in _turns(board, color):
        nodes += perft(child, color.opponent, depth - 1)
    return nodes


def _turns(board: Board, color: PieceColor) -> Iterator[Board]:
    for m in movegen.generate(board, color):
        child, promoted = rules.apply(board, m)
        if m.is_jump and not promoted:
            yield from _continuations(child, m.to_pos)
        else:
            yield child


def _continuations(board: Board, pos: Position) -> Iterator[Board]:
    follow = movegen.jumps_from(board, pos)
    if not follow:
        yield board
        return
    for m in follow:
        child, promoted = rules.apply(board, m)
        if promoted:
            yield child
        else:
            yield from _continuations(child, m.to_pos)
