from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from ...engine.board import PieceColor, Position
from ...engine.game import Game, GameResult, GameState
from ...engine.move import Move
from ...search.service import Difficulty, SearchResult, SearchService
from ...storage.records import (
    GameRecord,
    InMemoryRecordStore,
    RecordStore,
    RecordStoreError,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchTicket:
    """Computer move computed against a specific session snapshot."""

    generation: int
    ply: int
    result: SearchResult


class GameSession:
    """One human-vs-computer game plus its metadata.

    The human plays Cyan, the computer Magenta. All mutations go through the
    wrapped ``Game`` under a lock; a computer move computed for an older
    snapshot (after reset or undo) is dropped instead of applied.
    """

    def __init__(
        self,
        game_id: str,
        *,
        player_name: str = "GUEST",
        difficulty: Difficulty = Difficulty.MEDIUM,
        records: Optional[RecordStore] = None,
        search: Optional[SearchService] = None,
        think_delay_ms: int = 0,
    ) -> None:
        self.game_id = game_id
        self.player_name = player_name
        self.difficulty = difficulty
        self.human_color = PieceColor.CYAN
        self.computer_color = PieceColor.MAGENTA
        self.records: RecordStore = records if records is not None else InMemoryRecordStore()
        self.search = search or SearchService()
        self.think_delay_ms = think_delay_ms
        self.game = Game.new()
        self.game.add_listener(self._on_result)
        self._lock = threading.RLock()

    # ---- Queries ----
    @property
    def state(self) -> GameState:
        return self.game.state

    def is_computer_turn(self) -> bool:
        s = self.game.state
        return not s.is_over and s.turn is self.computer_color

    # ---- Human actions (no-ops outside the human's turn) ----
    def select(self, pos: Position) -> GameState:
        with self._lock:
            if self.game.state.turn is not self.human_color:
                return self.game.state
            return self.game.select(pos)

    def move(self, move: Move) -> GameState:
        with self._lock:
            if self.game.state.turn is not self.human_color:
                return self.game.state
            return self.game.move(move)

    def reset(self) -> GameState:
        with self._lock:
            return self.game.reset()

    def undo(self) -> GameState:
        with self._lock:
            return self.game.undo()

    # ---- Computer turn ----
    def compute_computer_move(self) -> Optional[SearchTicket]:
        """Search the computer's move for the current snapshot.

        Returns:
            Optional[SearchTicket]: ``None`` when it is not the computer's turn.
        """
        with self._lock:
            if not self.is_computer_turn():
                return None
            s = self.game.state
            generation = self.game.generation
            ply = len(self.game.history)
        # Search runs outside the lock on an immutable board
        result = self.search.search(
            s.board,
            self.difficulty.depth,
            self.computer_color,
            origin=s.pending_multi_jump,
        )
        return SearchTicket(generation=generation, ply=ply, result=result)

    def apply_search_result(self, ticket: SearchTicket) -> bool:
        """Apply a computed move if the session has not moved on since.

        Returns:
            bool: ``True`` if at least one move of the ticket was applied.
        """
        with self._lock:
            stale = (
                ticket.generation != self.game.generation
                or ticket.ply != len(self.game.history)
                or not self.is_computer_turn()
            )
            if stale:
                logger.info(
                    "discarding stale search result",
                    extra={"game_id": self.game_id, "generation": ticket.generation},
                )
                return False
            applied = False
            for m in ticket.result.line:
                if m not in self.game.legal_moves():
                    break
                self.game.move(m)
                applied = True
                if self.game.state.pending_multi_jump is None:
                    break
            return applied

    def play_computer_turn(self) -> GameState:
        """Play the computer's whole turn, including any forced continuation."""
        if self.think_delay_ms:
            time.sleep(self.think_delay_ms / 1000)
        while True:
            ticket = self.compute_computer_move()
            if ticket is None or not self.apply_search_result(ticket):
                break
        return self.game.state

    def start_computer_turn(self) -> threading.Thread:
        """Run ``play_computer_turn`` on a background thread."""
        worker = threading.Thread(
            target=self.play_computer_turn, name=f"computer-{self.game_id[:8]}", daemon=True
        )
        worker.start()
        return worker

    def _on_result(self, result: GameResult) -> None:
        record = GameRecord(
            player_name=self.player_name,
            player_color=self.human_color.value,
            winner=result.winner.value,
            difficulty=self.difficulty.value,
            moves=result.move_count,
        )
        try:
            self.records.save(record)
        except (OSError, RecordStoreError):
            logger.exception("failed to save game record", extra={"game_id": self.game_id})


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Delete sessions
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}

    def create(
        self,
        *,
        player_name: str = "GUEST",
        difficulty: Difficulty = Difficulty.MEDIUM,
        records: Optional[RecordStore] = None,
        think_delay_ms: int = 0,
    ) -> GameSession:
        gid = str(uuid.uuid4())
        session = GameSession(
            gid,
            player_name=player_name,
            difficulty=difficulty,
            records=records,
            think_delay_ms=think_delay_ms,
        )
        with self._lock:
            self._sessions[gid] = session
        return session

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(game_id)

    def delete(self, game_id: str) -> None:
        with self._lock:
            self._sessions.pop(game_id, None)
