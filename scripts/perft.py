#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `neocheckers/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from neocheckers.engine.board import Board, PieceColor, STARTPOS_TEXT
from neocheckers.engine.perft import perft


def main() -> None:
    parser = argparse.ArgumentParser(description="Run perft on a given board and depth")
    parser.add_argument(
        "--board", type=str, default=STARTPOS_TEXT, help="Board text (default: start position)"
    )
    parser.add_argument(
        "--turn", choices=[c.value for c in PieceColor], default=PieceColor.CYAN.value
    )
    parser.add_argument("--depth", type=int, default=5, help="Perft depth (default: 5)")
    args = parser.parse_args()

    board = Board.from_text(args.board)
    start = time.perf_counter()
    nodes = perft(board, PieceColor(args.turn), args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
