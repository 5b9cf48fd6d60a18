"""
Potential-move generation.

Follows the pieces' movement patterns only; it does not consider check.
Legality (self-check filtering) lives in ``rules``.
"""

from __future__ import annotations

from typing import List

import numpy as np

from pico_chess.core.types import Color, PieceType, Position
from pico_chess.engine.board import in_bounds, is_enemy, is_friend, owner

# Direction vectors (dr, dc)
ORTHOGONAL = ((0, 1), (0, -1), (1, 0), (-1, 0))
DIAGONAL = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ALL_DIRS = ORTHOGONAL + DIAGONAL
KING_DIRS = ALL_DIRS  # King moves 1 step in any direction
KNIGHT_JUMPS = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)


def _add_step_moves(moves: List[Position], board: np.ndarray, r: int, c: int,
                    color: Color, offsets: tuple) -> None:
    """Add single-jump moves (King, Knight)."""
    for dr, dc in offsets:
        nr, nc = r + dr, c + dc
        if in_bounds(nr, nc) and not is_friend(int(board[nr, nc]), color):
            moves.append(Position(nr, nc))


def _add_line_moves(moves: List[Position], board: np.ndarray, r: int, c: int,
                    color: Color, directions: tuple) -> None:
    """Add sliding moves (Rook, Bishop, Queen)."""
    for dr, dc in directions:
        nr, nc = r + dr, c + dc
        while in_bounds(nr, nc):
            target = int(board[nr, nc])

            if target == 0:
                moves.append(Position(nr, nc))
                nr += dr
                nc += dc
            else:
                # Blocked either way; enemy can be captured
                if is_enemy(target, color):
                    moves.append(Position(nr, nc))
                break


def _add_pawn_moves(moves: List[Position], board: np.ndarray, r: int, c: int,
                    color: Color) -> None:
    """Add pawn moves: forward 1 onto empty, capture diagonal."""
    nr = r + color.forward
    if not 0 <= nr < board.shape[0]:
        return

    if board[nr, c] == 0:
        moves.append(Position(nr, c))

    for dc in (-1, 1):
        nc = c + dc
        if in_bounds(nr, nc) and is_enemy(int(board[nr, nc]), color):
            moves.append(Position(nr, nc))


def board_destinations(board: np.ndarray, from_pos: Position) -> List[Position]:
    """Potential destinations of the piece at `from_pos` on a raw board."""
    r, c = from_pos
    if not in_bounds(r, c):
        return []

    code = int(board[r, c])
    color = owner(code)
    if color is None:
        return []

    piece_type = PieceType(abs(code))
    moves: List[Position] = []

    if piece_type == PieceType.PAWN:
        _add_pawn_moves(moves, board, r, c, color)
    elif piece_type == PieceType.KING:
        _add_step_moves(moves, board, r, c, color, KING_DIRS)
    elif piece_type == PieceType.KNIGHT:
        _add_step_moves(moves, board, r, c, color, KNIGHT_JUMPS)
    elif piece_type == PieceType.ROOK:
        _add_line_moves(moves, board, r, c, color, ORTHOGONAL)
    elif piece_type == PieceType.BISHOP:
        _add_line_moves(moves, board, r, c, color, DIAGONAL)
    elif piece_type == PieceType.QUEEN:
        _add_line_moves(moves, board, r, c, color, ALL_DIRS)

    return moves


def attacks(board: np.ndarray, color: Color, target: Position) -> bool:
    """True if any piece of `color` has `target` among its potential destinations."""
    mask = board > 0 if color is Color.WHITE else board < 0
    for r, c in zip(*np.nonzero(mask)):
        if target in board_destinations(board, Position(int(r), int(c))):
            return True
    return False
