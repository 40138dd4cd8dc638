import os
import sys

import pytest


# Ensure the repository root (which contains neocheckers/) is on sys.path
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from neocheckers.engine.board import Board, Position  # noqa: E402


@pytest.fixture
def make_board():
    """Build a board from ``{(row, col): Piece}``."""

    def _make(pieces):
        return Board.from_pieces({Position(r, c): p for (r, c), p in pieces.items()})

    return _make
