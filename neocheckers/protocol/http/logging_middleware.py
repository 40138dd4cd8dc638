from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, log request/response with the game id, set header."""

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        game_id = _game_id_from_path(request.url.path)

        logger.info(
            "request",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "game_id": game_id,
            },
        )

        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["x-request-id"] = request_id

        logger.info(
            "response",
            extra={
                "request_id": request_id,
                "game_id": game_id,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response


def _game_id_from_path(path: str) -> str:
    # /api/games/{game_id}/...
    parts = [p for p in path.split("/") if p]
    if len(parts) >= 3 and parts[0] == "api" and parts[1] == "games":
        return parts[2]
    return ""
