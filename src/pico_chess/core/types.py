"""
Core types and constants.

This module contains the fundamental types used throughout the engine:
- Color, PieceType: enums (PieceType values double as board codes)
- Piece, Position, Move: small immutable tuples
- Board geometry and the drop sentinel
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import NamedTuple


# ─── Board geometry ───────────────────────────────────────────────────────────

BOARD_SIZE = 6
ROWS = BOARD_SIZE
COLS = BOARD_SIZE


class Color(str, Enum):
    """Player colors. Values match the names used on the wire."""

    WHITE = "WHITE"
    BLACK = "BLACK"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def sign(self) -> int:
        """Board encoding sign: WHITE pieces are positive, BLACK negative."""
        return 1 if self is Color.WHITE else -1

    @property
    def forward(self) -> int:
        """Row delta of a pawn step."""
        return 1 if self is Color.WHITE else -1

    @property
    def home_rank(self) -> int:
        return 0 if self is Color.WHITE else ROWS - 1

    @property
    def promotion_rank(self) -> int:
        """Far rank for this color's pawns (the opponent's home rank)."""
        return ROWS - 1 if self is Color.WHITE else 0


class PieceType(IntEnum):
    """
    Piece kinds.

    The integer value is the absolute board code, so
    ``board[r, c] == color.sign * piece_type``.
    """

    KING = 1
    QUEEN = 2
    ROOK = 3
    BISHOP = 4
    KNIGHT = 5
    PAWN = 6


# Hand arrays are indexed by PieceType value; slot 0 is unused
HAND_SLOTS = len(PieceType) + 1

# Piece types a pawn may become (matches the promotion dialog choices)
PROMOTION_CHOICES = (PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP)


class Position(NamedTuple):
    row: int
    col: int

    def on_board(self) -> bool:
        return 0 <= self.row < ROWS and 0 <= self.col < COLS


class Piece(NamedTuple):
    """Immutable (type, color) pair. Pieces have no identity beyond this."""

    type: PieceType
    color: Color

    @property
    def code(self) -> int:
        return self.color.sign * int(self.type)

    @classmethod
    def from_code(cls, code: int) -> "Piece | None":
        """Decode a signed board value; 0 decodes to None."""
        if code == 0:
            return None
        color = Color.WHITE if code > 0 else Color.BLACK
        return cls(PieceType(abs(int(code))), color)


# Off-board origin recorded as the "from" of a drop
DROP_ORIGIN = Position(-1, -1)


class Move(NamedTuple):
    from_pos: Position
    to_pos: Position

    @property
    def is_drop(self) -> bool:
        return self.from_pos == DROP_ORIGIN
