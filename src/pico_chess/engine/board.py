"""
NumPy board utilities.

Small helpers over the signed int8 board shared by move generation,
check detection and the transitions. None of them mutate the board.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

import numpy as np

from pico_chess.core.types import COLS, ROWS, Color, PieceType, Position

logger = logging.getLogger(__name__)


def in_bounds(r: int, c: int) -> bool:
    """Return True if (r, c) is inside the 6x6 board."""
    return 0 <= r < ROWS and 0 <= c < COLS


def owner(code: int) -> Optional[Color]:
    """Color owning a signed board value, or None for an empty cell."""
    if code > 0:
        return Color.WHITE
    if code < 0:
        return Color.BLACK
    return None


def is_enemy(code: int, color: Color) -> bool:
    return (code < 0) if color is Color.WHITE else (code > 0)


def is_friend(code: int, color: Color) -> bool:
    return (code > 0) if color is Color.WHITE else (code < 0)


def pieces_of(board: np.ndarray, color: Color) -> Iterator[Tuple[Position, PieceType]]:
    """Yield (position, type) for every piece of `color`, in row-major order."""
    mask = board > 0 if color is Color.WHITE else board < 0
    for r, c in zip(*np.nonzero(mask)):
        yield Position(int(r), int(c)), PieceType(abs(int(board[r, c])))


def empty_cells(board: np.ndarray) -> List[Position]:
    """All empty cells, in row-major order."""
    return [Position(int(r), int(c)) for r, c in zip(*np.nonzero(board == 0))]


def find_king(board: np.ndarray, color: Color) -> Optional[Position]:
    """
    Locate `color`'s king.

    Returns None if absent. That never happens in a reachable game, so it
    is logged rather than raised.
    """
    hits = np.argwhere(board == color.sign * PieceType.KING)
    if len(hits) == 0:
        logger.warning("No %s king on the board", color.value)
        return None
    r, c = hits[0]
    return Position(int(r), int(c))
