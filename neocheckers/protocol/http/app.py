from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .config import AppConfig
from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
    value_error_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import GameSession, InMemorySessionStore
from ...engine.board import Board, PieceColor, Position
from ...engine.move import Move, parse_move, position_to_str, str_to_position
from ...engine.perft import perft as perft_nodes
from ...search.service import Difficulty
from ...storage.records import open_store


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    player_name: str = Field(default="GUEST", min_length=1, max_length=40)
    difficulty: Optional[Difficulty] = None


class CreateGameResponse(BaseModel):
    game_id: str
    board: list[str]
    difficulty: Difficulty


class SelectRequest(BaseModel):
    row: int = Field(..., ge=0, le=7)
    col: int = Field(..., ge=0, le=7)


class MoveRequest(BaseModel):
    move: Optional[str] = Field(default=None, description="Move notation, e.g. c3-d4 or c3xe5")
    from_square: Optional[str] = Field(default=None, description="Origin square, e.g. c3")
    to_square: Optional[str] = Field(default=None, description="Destination square, e.g. d4")


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1, le=8)


class PerftRequest(BaseModel):
    board: Optional[str] = Field(default=None, description="Board text; start position when unset")
    turn: PieceColor = PieceColor.CYAN
    depth: int = Field(default=1, ge=0, le=8)


class GameStateResponse(BaseModel):
    game_id: str
    board: list[str]
    turn: PieceColor
    winner: Optional[PieceColor]
    selected: Optional[str]
    pending_multi_jump: Optional[str]
    legal_moves: list[str]
    legal_targets: list[str]
    cyan_captures: int
    magenta_captures: int
    move_count: int
    difficulty: Difficulty
    generation: int
    last_move: Optional[str]


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    config = config or AppConfig()
    app = FastAPI(title="NeoCheckers API", version="0.1.0")

    logging.basicConfig(level=config.log_level.upper())

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    records = open_store(config.history_path)
    app.state.config = config
    app.state.sessions = store
    app.state.records = records

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        req = req or CreateGameRequest()
        session = store.create(
            player_name=req.player_name,
            difficulty=req.difficulty or config.default_difficulty,
            records=records,
            think_delay_ms=config.think_delay_ms,
        )
        logger.info(
            "game created",
            extra={"game_id": session.game_id, "difficulty": session.difficulty.value},
        )
        return CreateGameResponse(
            game_id=session.game_id,
            board=session.state.board.rows(),
            difficulty=session.difficulty,
        )

    @app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
    async def get_state(game_id: str) -> GameStateResponse:
        return _state_response(_require_session(store, game_id))

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        _require_session(store, game_id)
        store.delete(game_id)
        return {"status": "deleted"}

    @app.post("/api/games/{game_id}/select", response_model=GameStateResponse)
    async def select(game_id: str, req: SelectRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        session.select(Position(req.row, req.col))
        return _state_response(session)

    @app.post("/api/games/{game_id}/move", response_model=GameStateResponse)
    async def make_move(game_id: str, req: MoveRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        try:
            move = _resolve_move(session, req)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        session.move(move)
        return _state_response(session)

    @app.post("/api/games/{game_id}/ai-move", response_model=GameStateResponse)
    def ai_move(game_id: str, response: Response, wait: bool = True) -> GameStateResponse:
        # Sync handler: the search blocks, so it runs in the threadpool
        session = _require_session(store, game_id)
        if not session.is_computer_turn():
            raise HTTPException(status_code=409, detail="not the computer's turn")
        if not wait:
            # Snapshot before the worker starts; poll /state for the result
            accepted = _state_response(session)
            session.start_computer_turn()
            response.status_code = 202
            return accepted
        session.play_computer_turn()
        return _state_response(session)

    @app.post("/api/games/{game_id}/search")
    def search(game_id: str, req: Optional[SearchRequest] = None) -> Dict[str, Any]:
        session = _require_session(store, game_id)
        s = session.state
        depth = (req.depth if req and req.depth else None) or session.difficulty.depth
        res = session.search.search(s.board, depth, s.turn, origin=s.pending_multi_jump)
        return {
            "best_move": res.best_move.to_notation() if res.best_move else None,
            "line": [m.to_notation() for m in res.line],
            "score": res.score,
            "nodes": res.nodes,
            "depth": res.depth,
            "time_ms": res.time_ms,
        }

    @app.post("/api/games/{game_id}/undo", response_model=GameStateResponse)
    async def undo(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        try:
            session.undo()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state_response(session)

    @app.post("/api/games/{game_id}/reset", response_model=GameStateResponse)
    async def reset(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        session.reset()
        return _state_response(session)

    @app.post("/api/perft")
    def perft(req: PerftRequest) -> Dict[str, Any]:
        try:
            board = Board.from_text(req.board) if req.board else Board.startpos()
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid board")
        return {"nodes": perft_nodes(board, req.turn, req.depth)}

    @app.get("/api/history")
    async def history() -> Dict[str, List[Dict[str, Any]]]:
        return {"games": [r.to_dict() for r in records.list()]}

    return app


def _require_session(store: InMemorySessionStore, game_id: str) -> GameSession:
    session = store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _resolve_move(session: GameSession, req: MoveRequest) -> Move:
    if req.move:
        requested = parse_move(req.move)
    elif req.from_square and req.to_square:
        requested = Move(str_to_position(req.from_square), str_to_position(req.to_square))
    else:
        raise ValueError("either move or from_square/to_square is required")
    # Fill in the captured square from the legal set when the squares match
    for m in session.game.legal_moves():
        if m.from_pos == requested.from_pos and m.to_pos == requested.to_pos:
            return m
    return requested


def _state_response(session: GameSession) -> GameStateResponse:
    game = session.game
    s = game.state
    last = game.history[-1][1].to_notation() if game.history else None
    return GameStateResponse(
        game_id=session.game_id,
        board=s.board.rows(),
        turn=s.turn,
        winner=s.winner,
        selected=position_to_str(s.selected) if s.selected else None,
        pending_multi_jump=(
            position_to_str(s.pending_multi_jump) if s.pending_multi_jump else None
        ),
        legal_moves=[m.to_notation() for m in game.legal_moves()],
        legal_targets=[position_to_str(p) for p in game.legal_targets()],
        cyan_captures=s.cyan_captures,
        magenta_captures=s.magenta_captures,
        move_count=s.move_count,
        difficulty=session.difficulty,
        generation=game.generation,
        last_move=last,
    )


# Default app for non-factory servers
app = create_app()
