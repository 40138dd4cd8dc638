#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# Ensure repo root (which contains `neocheckers/`) is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from neocheckers.engine.board import Board, PieceColor, STARTPOS_TEXT
from neocheckers.search.service import Difficulty, SearchService, SearchResult


@dataclass
class BenchItem:
    id: str
    name: str
    board: str
    turn: PieceColor = PieceColor.MAGENTA
    depth: Optional[int] = None


DEFAULT_ITEMS = [
    BenchItem("start", "Start position", STARTPOS_TEXT),
    BenchItem(
        "midgame",
        "Open midgame",
        "/".join(
            [
                ".m.m.m.m",
                "m.m...m.",
                "...m.m.m",
                "..m.....",
                ".c...c..",
                "c...c...",
                ".c.c.c.c",
                "c.c...c.",
            ]
        ),
    ),
    BenchItem(
        "kings",
        "King endgame",
        "/".join(
            [
                "........",
                "..M.....",
                "........",
                "....C...",
                "........",
                "m...C...",
                "........",
                "........",
            ]
        ),
    ),
]


def load_positions(path: str) -> List[BenchItem]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    items: List[BenchItem] = []
    for obj in data.get("positions", []):
        items.append(
            BenchItem(
                id=str(obj.get("id", obj.get("name", "pos"))),
                name=str(obj.get("name", "Unnamed")),
                board=str(obj["board"]),
                turn=PieceColor(obj.get("turn", PieceColor.MAGENTA.value)),
                depth=(int(obj["depth"]) if obj.get("depth") is not None else None),
            )
        )
    return items


def bench_position(
    svc: SearchService, item: BenchItem, *, depth: int, iterations: int
) -> Dict[str, Any]:
    board = Board.from_text(item.board)
    eff_depth = item.depth if item.depth is not None else depth

    total_time = 0
    total_nodes = 0
    last: Optional[SearchResult] = None
    for _ in range(max(1, iterations)):
        res = svc.search(board, eff_depth, item.turn)
        total_time += max(0, res.time_ms)
        total_nodes += res.nodes
        last = res

    assert last is not None
    avg_time = int(total_time / max(1, iterations))
    avg_nodes = int(total_nodes / max(1, iterations))
    return {
        "id": item.id,
        "name": item.name,
        "turn": item.turn.value,
        "depth": last.depth,
        "best_move": last.best_move.to_notation() if last.best_move else None,
        "line": [m.to_notation() for m in last.line],
        "score": last.score,
        "time_ms": avg_time,
        "nodes": avg_nodes,
        "nps": int(avg_nodes * 1000 / max(1, avg_time)) if avg_time > 0 else 0,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the search over a set of positions")
    parser.add_argument("--positions", default=None, help="Path to positions.json")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.HARD.value,
        help="Search depth preset (default: hard)",
    )
    parser.add_argument("--depth", type=int, default=None, help="Explicit depth override")
    parser.add_argument("--iterations", type=int, default=1)
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    args = parser.parse_args()

    items = load_positions(args.positions) if args.positions else DEFAULT_ITEMS
    depth = args.depth if args.depth is not None else Difficulty(args.difficulty).depth

    svc = SearchService()
    t0 = time.perf_counter()
    results = [
        bench_position(svc, it, depth=depth, iterations=args.iterations) for it in items
    ]
    dt_ms = int((time.perf_counter() - t0) * 1000)
    total_nodes = sum(r["nodes"] for r in results)

    payload = {
        "meta": {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "depth": depth,
            "iterations": max(1, args.iterations),
        },
        "results": results,
        "summary": {
            "positions": len(results),
            "total_time_ms": dt_ms,
            "total_nodes": total_nodes,
            "overall_nps": int(total_nodes * 1000 / max(1, dt_ms)) if dt_ms > 0 else 0,
        },
    }
    print(json.dumps(payload, indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
