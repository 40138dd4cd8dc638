from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple


BOARD_SIZE = 8

STARTPOS_TEXT = "/".join(
    [
        ".m.m.m.m",
        "m.m.m.m.",
        ".m.m.m.m",
        "........",
        "........",
        "c.c.c.c.",
        ".c.c.c.c",
        "c.c.c.c.",
    ]
)


class PieceColor(Enum):
    """Side owning a piece. Cyan is the human side and moves first."""

    CYAN = "cyan"
    MAGENTA = "magenta"

    @property
    def opponent(self) -> "PieceColor":
        return PieceColor.MAGENTA if self is PieceColor.CYAN else PieceColor.CYAN

    @property
    def forward(self) -> int:
        """Row delta a non-king of this color advances by."""
        return -1 if self is PieceColor.CYAN else 1

    @property
    def promotion_row(self) -> int:
        return 0 if self is PieceColor.CYAN else BOARD_SIZE - 1


@dataclass(frozen=True)
class Piece:
    color: PieceColor
    is_king: bool = False

    def crowned(self) -> "Piece":
        return Piece(self.color, True)

    def to_char(self) -> str:
        ch = "c" if self.color is PieceColor.CYAN else "m"
        return ch.upper() if self.is_king else ch


CHAR_TO_PIECE = {
    "c": Piece(PieceColor.CYAN),
    "C": Piece(PieceColor.CYAN, True),
    "m": Piece(PieceColor.MAGENTA),
    "M": Piece(PieceColor.MAGENTA, True),
}


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    def in_bounds(self) -> bool:
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE

    def is_dark(self) -> bool:
        return (self.row + self.col) % 2 == 1

    def offset(self, dr: int, dc: int) -> "Position":
        return Position(self.row + dr, self.col + dc)


Grid = Tuple[Tuple[Optional[Piece], ...], ...]


@dataclass(frozen=True)
class Board:
    """Immutable 8x8 checkers board.

    Notes:
    - Row 0 is Magenta's home rank (top), row 7 is Cyan's.
    - Pieces may only stand on dark squares, ``(row + col) % 2 == 1``.
    - Transitions never mutate a board; see ``rules.apply``.
    """

    grid: Grid

    def __post_init__(self) -> None:
        if len(self.grid) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in self.grid):
            raise ValueError("board must be 8x8")
        for r, row in enumerate(self.grid):
            for c, piece in enumerate(row):
                if piece is not None and (r + c) % 2 == 0:
                    raise ValueError(f"piece on light square ({r}, {c})")

    @classmethod
    def empty(cls) -> "Board":
        return cls(tuple(tuple([None] * BOARD_SIZE) for _ in range(BOARD_SIZE)))

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board with the standard starting layout.

        Returns:
            Board: Magenta men on rows 0-2 and Cyan men on rows 5-7, dark squares only.
        """
        return cls.from_text(STARTPOS_TEXT)

    @classmethod
    def from_pieces(cls, pieces: dict[Position, Piece]) -> "Board":
        rows: List[List[Optional[Piece]]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        for pos, piece in pieces.items():
            if not pos.in_bounds():
                raise ValueError(f"position out of bounds: {pos}")
            rows[pos.row][pos.col] = piece
        return cls(tuple(tuple(r) for r in rows))

    @classmethod
    def from_text(cls, text: str) -> "Board":
        """Create a board from a text diagram.

        Args:
            text (str): Eight rows of eight characters, top row first, separated by
                ``/`` or newlines. ``.`` is empty, ``c``/``C`` a cyan man/king,
                ``m``/``M`` a magenta man/king.

        Returns:
            Board: Board described by ``text``.

        Raises:
            ValueError: If the diagram has the wrong shape, an unknown character,
                or a piece on a light square.
        """
        if not text or not isinstance(text, str):
            raise ValueError("board text must be a non-empty string")
        sep = "/" if "/" in text else "\n"
        lines = [ln.strip() for ln in text.strip().split(sep) if ln.strip()]
        if len(lines) != BOARD_SIZE:
            raise ValueError("board text must have 8 rows")
        rows: List[Tuple[Optional[Piece], ...]] = []
        for line in lines:
            if len(line) != BOARD_SIZE:
                raise ValueError(f"board row must have 8 squares: {line!r}")
            row: List[Optional[Piece]] = []
            for ch in line:
                if ch == ".":
                    row.append(None)
                elif ch in CHAR_TO_PIECE:
                    row.append(CHAR_TO_PIECE[ch])
                else:
                    raise ValueError(f"invalid piece in board text: {ch!r}")
            rows.append(tuple(row))
        return cls(tuple(rows))

    def to_text(self) -> str:
        return "/".join(self.rows())

    def rows(self) -> List[str]:
        return ["".join(p.to_char() if p else "." for p in row) for row in self.grid]

    def piece_at(self, pos: Position) -> Optional[Piece]:
        if not pos.in_bounds():
            return None
        return self.grid[pos.row][pos.col]

    def is_empty(self, pos: Position) -> bool:
        return pos.in_bounds() and self.grid[pos.row][pos.col] is None

    def pieces(self, color: Optional[PieceColor] = None) -> Iterator[Tuple[Position, Piece]]:
        """Yield occupied squares in row-major order, optionally for one color."""
        for r, row in enumerate(self.grid):
            for c, piece in enumerate(row):
                if piece is None:
                    continue
                if color is not None and piece.color is not color:
                    continue
                yield Position(r, c), piece

    def count(self, color: PieceColor) -> int:
        return sum(1 for _ in self.pieces(color))

    def with_pieces(self, changes: dict[Position, Optional[Piece]]) -> "Board":
        rows = [list(r) for r in self.grid]
        for pos, piece in changes.items():
            rows[pos.row][pos.col] = piece
        return Board(tuple(tuple(r) for r in rows))
