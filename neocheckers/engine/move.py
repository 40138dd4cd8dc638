from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import BOARD_SIZE, Position


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Attributes:
        from_pos (Position): Origin square.
        to_pos (Position): Destination square.
        captured (Optional[Position]): Square of the jumped opponent piece; set
            iff the move is a jump.
    """

    from_pos: Position
    to_pos: Position
    captured: Optional[Position] = None

    @property
    def is_jump(self) -> bool:
        return self.captured is not None

    def to_notation(self) -> str:
        """Serialize the move, e.g. ``"c3-d4"`` or ``"c3xe5"`` for a jump."""
        sep = "x" if self.is_jump else "-"
        return position_to_str(self.from_pos) + sep + position_to_str(self.to_pos)


def parse_move(text: str) -> Move:
    """Parse move notation.

    Args:
        text (str): Move like ``"c3-d4"`` or ``"c3xe5"``.

    Returns:
        Move: Parsed move. For a jump the captured square is the midpoint of
        origin and destination.

    Raises:
        ValueError: If the string is malformed, the squares are invalid, or the
            geometry does not match the separator.
    """
    text = text.strip()
    if len(text) != 5 or text[2] not in "-x":
        raise ValueError(f"invalid move notation: {text!r}")
    frm = str_to_position(text[0:2])
    to = str_to_position(text[3:5])
    dr = to.row - frm.row
    dc = to.col - frm.col
    if text[2] == "-":
        if abs(dr) != 1 or abs(dc) != 1:
            raise ValueError(f"simple move must be one diagonal step: {text!r}")
        return Move(frm, to)
    if abs(dr) != 2 or abs(dc) != 2:
        raise ValueError(f"jump must be two diagonal steps: {text!r}")
    return Move(frm, to, Position(frm.row + dr // 2, frm.col + dc // 2))


def str_to_position(s: str) -> Position:
    """Convert a square name such as ``"a3"`` into a Position.

    Column letters ``a``..``h`` map to columns 0..7; rank ``8`` is row 0.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    col = ord(s[0]) - ord("a")
    row = BOARD_SIZE - int(s[1])
    return Position(row, col)


def position_to_str(pos: Position) -> str:
    if not pos.in_bounds():
        raise ValueError(f"invalid position: {pos}")
    return chr(ord("a") + pos.col) + str(BOARD_SIZE - pos.row)
