from __future__ import annotations

import argparse
import os
from typing import List, Optional

import uvicorn


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run the NeoCheckers HTTP API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--history", help="JSON file for completed games (default: in-memory)")
    parser.add_argument("--difficulty", choices=["easy", "medium", "hard"])
    parser.add_argument("--think-delay-ms", type=int, help="Pause before each computer move")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    # The factory reads its settings from the environment
    overrides = {
        "NEOCHECKERS_HISTORY_PATH": args.history,
        "NEOCHECKERS_DEFAULT_DIFFICULTY": args.difficulty,
        "NEOCHECKERS_THINK_DELAY_MS": (
            str(args.think_delay_ms) if args.think_delay_ms is not None else None
        ),
        "NEOCHECKERS_LOG_LEVEL": args.log_level,
    }
    for key, value in overrides.items():
        if value is not None:
            os.environ[key] = value

    uvicorn.run(
        "neocheckers.protocol.http.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
    )


if __name__ == "__main__":
    main()
