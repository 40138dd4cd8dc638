from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from neocheckers.engine import movegen, rules
from neocheckers.engine.board import Board, PieceColor, Position
from neocheckers.engine.move import Move
from neocheckers.eval import evaluate


logger = logging.getLogger(__name__)

INF = 10_000_000
WIN_SCORE = 1000  # side to move has no legal reply


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def depth(self) -> int:
        return {"easy": 1, "medium": 3, "hard": 5}[self.value]


@dataclass
class SearchResult:
    best_move: Optional[Move]
    line: List[Move]
    score: int
    nodes: int
    depth: int
    time_ms: int


class SearchService:
    """Depth-bounded minimax with alpha-beta pruning and material evaluation.

    Stateless between calls; identical inputs give identical results.
    """

    def choose_move(
        self, board: Board, depth: int, maximizing_color: PieceColor
    ) -> Optional[Move]:
        return self.search(board, depth, maximizing_color).best_move

    def search(
        self,
        board: Board,
        depth: int,
        maximizing_color: PieceColor,
        origin: Optional[Position] = None,
    ) -> SearchResult:
        # Forced multi-jump chains are folded into a single ply along the first
        # available continuation; alternatives inside a chain are not explored.
        # Depth 0 is a static evaluation with no move
        depth = max(0, depth)
        nodes = 0
        start = time.perf_counter()

        def resolve(b: Board, m: Move) -> Tuple[Board, List[Move]]:
            child, promoted = rules.apply(b, m)
            chain = [m]
            while m.is_jump and not promoted:
                follow = movegen.jumps_from(child, m.to_pos)
                if not follow:
                    break
                m = follow[0]
                child, promoted = rules.apply(child, m)
                chain.append(m)
            return child, chain

        def minimax(
            b: Board,
            d: int,
            maximizing: bool,
            alpha: int,
            beta: int,
            root_origin: Optional[Position] = None,
        ) -> Tuple[int, List[List[Move]]]:
            nonlocal nodes
            nodes += 1

            if d == 0:
                return evaluate(b, maximizing_color), []

            color = maximizing_color if maximizing else maximizing_color.opponent
            moves = movegen.generate(b, color, root_origin)
            if not moves:
                return (-WIN_SCORE if maximizing else WIN_SCORE), []

            best_line: List[List[Move]] = []
            if maximizing:
                best = -INF
                for m in moves:
                    child, chain = resolve(b, m)
                    score, sub = minimax(child, d - 1, False, alpha, beta)
                    # Strict comparison keeps the earliest move on ties
                    if score > best:
                        best = score
                        best_line = [chain] + sub
                    alpha = max(alpha, score)
                    if beta <= alpha:
                        break
                return best, best_line

            best = INF
            for m in moves:
                child, chain = resolve(b, m)
                score, sub = minimax(child, d - 1, True, alpha, beta)
                if score < best:
                    best = score
                    best_line = [chain] + sub
                beta = min(beta, score)
                if beta <= alpha:
                    break
            return best, best_line

        score, pv = minimax(board, depth, True, -INF, INF, origin)

        result = SearchResult(
            best_move=pv[0][0] if pv else None,
            line=list(pv[0]) if pv else [],
            score=score,
            nodes=nodes,
            depth=depth,
            time_ms=int((time.perf_counter() - start) * 1000),
        )
        logger.debug(
            "search done",
            extra={
                "color": maximizing_color.value,
                "depth": depth,
                "nodes": nodes,
                "score": score,
                "time_ms": result.time_ms,
            },
        )
        return result
