from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from . import movegen, rules
from .board import Board, PieceColor, Position
from .move import Move


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameState:
    """Read-only snapshot of a game session.

    A new snapshot replaces the previous one on every transition.
    """

    board: Board
    turn: PieceColor = PieceColor.CYAN
    winner: Optional[PieceColor] = None
    selected: Optional[Position] = None
    pending_multi_jump: Optional[Position] = None
    cyan_captures: int = 0
    magenta_captures: int = 0
    move_count: int = 0

    @classmethod
    def initial(cls) -> "GameState":
        return cls(board=Board.startpos())

    @property
    def is_over(self) -> bool:
        return self.winner is not None


@dataclass(frozen=True)
class GameResult:
    """Terminal record emitted once when a game is decided."""

    winner: PieceColor
    move_count: int


ResultListener = Callable[[GameResult], None]


@dataclass
class Game:
    """Turn controller owning the authoritative game state.

    Responsibility: validate selections and moves, apply them, handle forced
    multi-jump continuation and detect the winner. Invalid requests are no-ops.
    """

    state: GameState = field(default_factory=GameState.initial)
    history: List[Tuple[GameState, Move]] = field(default_factory=list)
    generation: int = 0
    _listeners: List[ResultListener] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls) -> "Game":
        return cls()

    @classmethod
    def from_board(cls, board: Board, turn: PieceColor = PieceColor.CYAN) -> "Game":
        return cls(state=GameState(board=board, turn=turn))

    def add_listener(self, listener: ResultListener) -> None:
        self._listeners.append(listener)

    # --- Queries ---
    def legal_moves(self) -> List[Move]:
        """Moves the side to move may play right now."""
        s = self.state
        if s.is_over:
            return []
        if s.pending_multi_jump is not None:
            return movegen.generate(s.board, s.turn, s.pending_multi_jump)
        return movegen.generate(s.board, s.turn)

    def legal_targets(self) -> List[Position]:
        sel = self.state.selected
        if sel is None:
            return []
        return [m.to_pos for m in self.legal_moves() if m.from_pos == sel]

    # --- Transitions ---
    def select(self, pos: Position) -> GameState:
        s = self.state
        if s.is_over:
            return s
        if s.pending_multi_jump is not None and s.pending_multi_jump != pos:
            return s
        piece = s.board.piece_at(pos)
        if piece is None or piece.color is not s.turn:
            return s
        if not any(m.from_pos == pos for m in self.legal_moves()):
            return s
        self.state = replace(s, selected=pos)
        return self.state

    def move(self, candidate: Move) -> GameState:
        s = self.state
        if s.is_over:
            return s
        if candidate not in self.legal_moves():
            return self.select(candidate.to_pos)

        mover = s.turn
        board, promoted = rules.apply(s.board, candidate)
        cyan_caps = s.cyan_captures
        magenta_caps = s.magenta_captures
        if candidate.is_jump:
            if mover is PieceColor.CYAN:
                cyan_caps += 1
            else:
                magenta_caps += 1

        self.history.append((s, candidate))
        landing = candidate.to_pos
        if candidate.is_jump and not promoted and movegen.jumps_from(board, landing):
            logger.debug(
                "multi-jump pending",
                extra={"color": mover.value, "square": (landing.row, landing.col)},
            )
            self.state = replace(
                s,
                board=board,
                selected=landing,
                pending_multi_jump=landing,
                cyan_captures=cyan_caps,
                magenta_captures=magenta_caps,
            )
            return self.state

        nxt = mover.opponent
        winner = None if movegen.has_moves(board, nxt) else mover
        self.state = GameState(
            board=board,
            turn=nxt,
            winner=winner,
            selected=None,
            pending_multi_jump=None,
            cyan_captures=cyan_caps,
            magenta_captures=magenta_caps,
            move_count=s.move_count + 1,
        )
        if winner is not None:
            logger.info(
                "game over", extra={"winner": winner.value, "move_count": self.state.move_count}
            )
            self._emit(GameResult(winner=winner, move_count=self.state.move_count))
        return self.state

    def reset(self) -> GameState:
        self.state = GameState.initial()
        self.history.clear()
        self.generation += 1
        return self.state

    def undo(self) -> GameState:
        if self.state.is_over:
            raise ValueError("game is over")
        if not self.history:
            raise ValueError("no moves to undo")
        prev, _ = self.history.pop()
        self.state = prev
        self.generation += 1
        return self.state

    def _emit(self, result: GameResult) -> None:
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                # A failing collaborator must not affect game progression
                logger.exception("result listener failed", extra={"winner": result.winner.value})
