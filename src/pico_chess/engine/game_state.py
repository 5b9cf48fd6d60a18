"""
GameState - immutable game state container.

Board encoding (int8, 6x6):
    0 = empty
    Positive = WHITE piece, value is the PieceType code
    Negative = BLACK piece, value is minus the PieceType code

This allows fast ownership checks: piece > 0 → WHITE, piece < 0 → BLACK.

Hands are int16 arrays indexed by PieceType code (slot 0 unused).
All arrays are frozen once a GameState owns them; transitions copy
what they change and share the rest.
"""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from pico_chess.core.types import (
    COLS,
    HAND_SLOTS,
    ROWS,
    Color,
    Move,
    Piece,
    PieceType,
    Position,
)


def _freeze(arr: np.ndarray) -> np.ndarray:
    """Read-only view of `arr`; a writeable array is copied first so the caller keeps theirs."""
    if arr.flags.writeable:
        arr = arr.copy()
        arr.flags.writeable = False
    return arr


def empty_hand() -> np.ndarray:
    return np.zeros(HAND_SLOTS, dtype=np.int16)


class GameState:
    """
    Complete, self-contained snapshot of a match.

    Never mutated after construction: use ``replace()`` or the engine's
    transition functions to derive a new state.
    """
    __slots__ = (
        'board',
        'current_player',
        'player1_hand',
        'player2_hand',
        'last_move',
        'checked_king_position',
    )

    def __init__(
        self,
        board: np.ndarray,
        current_player: Color,
        player1_hand: Optional[np.ndarray] = None,
        player2_hand: Optional[np.ndarray] = None,
        last_move: Optional[Move] = None,
        checked_king_position: Optional[Position] = None,
    ):
        if board.shape != (ROWS, COLS):
            raise ValueError(f"Board must be {ROWS}x{COLS}, got {board.shape}")
        self.board = _freeze(board)
        self.current_player = Color(current_player)
        self.player1_hand = _freeze(empty_hand() if player1_hand is None else player1_hand)
        self.player2_hand = _freeze(empty_hand() if player2_hand is None else player2_hand)
        self.last_move = last_move
        self.checked_king_position = checked_king_position

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def piece_at(self, pos: Position) -> Optional[Piece]:
        return Piece.from_code(int(self.board[pos[0], pos[1]]))

    def hand_array(self, color: Color) -> np.ndarray:
        return self.player1_hand if color is Color.WHITE else self.player2_hand

    def hand_count(self, color: Color, piece_type: PieceType) -> int:
        return int(self.hand_array(color)[int(piece_type)])

    def hand(self, color: Color) -> Dict[PieceType, int]:
        """Hand as a PieceType → count mapping (all types present)."""
        counts = self.hand_array(color)
        return {pt: int(counts[int(pt)]) for pt in PieceType}

    # -------------------------------------------------------------------------
    # Derivation
    # -------------------------------------------------------------------------

    def replace(self, **changes) -> "GameState":
        """
        Return a new state with the given fields replaced.

        Untouched arrays are shared with this state (they are read-only).
        """
        fields = {name: getattr(self, name) for name in self.__slots__}
        fields.update(changes)
        return GameState(**fields)

    def copy(self) -> "GameState":
        """Deep copy with fresh arrays."""
        return GameState(
            self.board.copy(),
            self.current_player,
            self.player1_hand.copy(),
            self.player2_hand.copy(),
            self.last_move,
            self.checked_king_position,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            self.current_player is other.current_player
            and self.last_move == other.last_move
            and self.checked_king_position == other.checked_king_position
            and np.array_equal(self.board, other.board)
            and np.array_equal(self.player1_hand, other.player1_hand)
            and np.array_equal(self.player2_hand, other.player2_hand)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"GameState(current_player={self.current_player.value}, "
            f"last_move={self.last_move}, checked={self.checked_king_position})"
        )


def _initial_board() -> np.ndarray:
    """Create starting position."""
    board = np.zeros((ROWS, COLS), dtype=np.int8)
    # WHITE (positive): bottom-left corner
    board[0, :4] = [PieceType.KING, PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP]
    board[1, 0] = PieceType.PAWN
    # BLACK (negative): top-right corner, mirrored
    board[5, 2:] = [-PieceType.BISHOP, -PieceType.KNIGHT, -PieceType.ROOK, -PieceType.KING]
    board[4, 5] = -PieceType.PAWN
    return board


def initial_state() -> GameState:
    """Fixed starting position: empty hands, WHITE to move."""
    return GameState(_initial_board(), current_player=Color.WHITE)
