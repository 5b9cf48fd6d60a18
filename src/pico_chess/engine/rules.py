"""
Move legality, check, checkmate and stalemate.

Every function here is a pure read of a GameState: nothing is mutated,
simulations run on scratch copies of the board.

Note on stalemate: in this variant a stalemated player LOSES. The engine
only reports the condition; the session layer scores it.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from pico_chess.core.types import Color, PieceType, Position
from pico_chess.engine.board import empty_cells, find_king, is_friend, pieces_of
from pico_chess.engine.game_state import GameState
from pico_chess.engine.movegen import attacks, board_destinations


# ---------------------------------------------------------------------------
# Move generation
# ---------------------------------------------------------------------------

def potential_destinations(state: GameState, from_pos: Position) -> List[Position]:
    """Movement-pattern destinations of the piece at `from_pos`, ignoring check."""
    return board_destinations(state.board, from_pos)


def _leaves_king_attacked(board: np.ndarray, from_pos: Position, to_pos: Position,
                          color: Color) -> bool:
    """Simulate from→to on a scratch board; True if `color`'s king is then attacked."""
    moving = int(board[from_pos.row, from_pos.col])
    if abs(moving) == PieceType.KING:
        king_pos: Optional[Position] = to_pos
    else:
        king_pos = find_king(board, color)
    if king_pos is None:
        return False

    scratch = board.copy()
    scratch[to_pos.row, to_pos.col] = moving
    scratch[from_pos.row, from_pos.col] = 0
    return attacks(scratch, color.opponent, king_pos)


def legal_destinations(state: GameState, from_pos: Position) -> List[Position]:
    """
    Legal destinations of the piece at `from_pos` for the side to move.

    Empty if the cell is off-board, empty, or holds an opponent piece.
    Destinations that would leave the mover's own king attacked are dropped.
    """
    from_pos = Position(*from_pos)
    if not from_pos.on_board():
        return []

    color = state.current_player
    if not is_friend(int(state.board[from_pos.row, from_pos.col]), color):
        return []

    return [
        to_pos
        for to_pos in board_destinations(state.board, from_pos)
        if not _leaves_king_attacked(state.board, from_pos, to_pos, color)
    ]


def is_legal_move(state: GameState, from_pos: Position,
                  to_pos: Optional[Position] = None) -> List[Position]:
    """
    Dual-mode legality check.

    With `to_pos`: ``[to_pos]`` if that move is legal, else ``[]``.
    Without: every legal destination (for move highlighting).
    """
    legal = legal_destinations(state, from_pos)
    if to_pos is None:
        return legal
    to_pos = Position(*to_pos)
    return [to_pos] if to_pos in legal else []


# ---------------------------------------------------------------------------
# Drops
# ---------------------------------------------------------------------------

def can_drop_on(piece_type: PieceType, color: Color, pos: Position) -> bool:
    """Drop restriction independent of hand and occupancy: no pawn on the far rank."""
    return not (piece_type == PieceType.PAWN and pos.row == color.promotion_rank)


def _drop_leaves_king_attacked(board: np.ndarray, piece_type: PieceType, color: Color,
                               pos: Position) -> bool:
    king_pos = find_king(board, color)
    if king_pos is None:
        return False
    scratch = board.copy()
    scratch[pos.row, pos.col] = color.sign * piece_type
    return attacks(scratch, color.opponent, king_pos)


def legal_drop_cells(state: GameState, piece_type: PieceType,
                     color: Optional[Color] = None) -> List[Position]:
    """
    Empty cells where `color` (default: side to move) may drop `piece_type`.

    While `color` is in check only interposing drops qualify.
    """
    color = state.current_player if color is None else Color(color)
    if state.hand_count(color, piece_type) <= 0:
        return []
    cells = [pos for pos in empty_cells(state.board) if can_drop_on(piece_type, color, pos)]
    if not is_king_in_check(state, color):
        return cells
    return [pos for pos in cells
            if not _drop_leaves_king_attacked(state.board, piece_type, color, pos)]


def is_legal_drop(state: GameState, piece_type: PieceType, to_pos: Position) -> bool:
    """True if the side to move may drop `piece_type` on `to_pos` right now."""
    to_pos = Position(*to_pos)
    if not to_pos.on_board():
        return False
    return to_pos in legal_drop_cells(state, PieceType(piece_type))


def pending_promotion(state: GameState) -> Optional[Position]:
    """Cell of the side-to-move's pawn waiting on its far rank, if any."""
    color = state.current_player
    row = state.board[color.promotion_rank]
    cols = np.nonzero(row == color.sign * PieceType.PAWN)[0]
    if len(cols) == 0:
        return None
    return Position(color.promotion_rank, int(cols[0]))


# ---------------------------------------------------------------------------
# Check / checkmate / stalemate
# ---------------------------------------------------------------------------

def is_king_in_check(state: GameState, color: Color) -> bool:
    """
    True if any opposing piece could capture `color`'s king.

    Opponent threats ignore their own self-check. No king → False.
    """
    color = Color(color)
    king_pos = find_king(state.board, color)
    if king_pos is None:
        return False
    return attacks(state.board, color.opponent, king_pos)


def _has_legal_piece_move(state: GameState, color: Color) -> bool:
    as_mover = state if state.current_player is color else state.replace(current_player=color)
    return any(legal_destinations(as_mover, pos) for pos, _ in pieces_of(state.board, color))


def _held_types(state: GameState, color: Color) -> List[PieceType]:
    return [pt for pt, count in state.hand(color).items() if count > 0]


def is_checkmate(state: GameState, color: Color) -> bool:
    """
    True if `color` is in check and no move or drop gets it out.

    Drop escapes are searched exhaustively: every held type on every
    allowed empty cell.
    """
    color = Color(color)
    if not is_king_in_check(state, color):
        return False

    if _has_legal_piece_move(state, color):
        return False

    for piece_type in _held_types(state, color):
        for pos in empty_cells(state.board):
            if not can_drop_on(piece_type, color, pos):
                continue
            if not _drop_leaves_king_attacked(state.board, piece_type, color, pos):
                return False

    return True


def is_stalemate(state: GameState, color: Color) -> bool:
    """
    True if `color` is not in check but has no legal move and no legal drop.

    Scored as a loss for `color` by the session layer.
    """
    color = Color(color)
    if is_king_in_check(state, color):
        return False

    if _has_legal_piece_move(state, color):
        return False

    for piece_type in _held_types(state, color):
        if any(can_drop_on(piece_type, color, pos) for pos in empty_cells(state.board)):
            return False

    return True


def checked_king(state: GameState) -> Optional[Position]:
    """Position of a king currently in check; side to move is checked first."""
    for color in (state.current_player, state.current_player.opponent):
        king_pos = find_king(state.board, color)
        if king_pos is not None and attacks(state.board, color.opponent, king_pos):
            return king_pos
    return None
