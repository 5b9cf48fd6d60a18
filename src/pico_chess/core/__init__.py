"""
Core module - fundamental types, actions and hashing.

This module provides the building blocks used throughout the engine,
the arbiter and the bot strategies.
"""

from pico_chess.core.types import (
    BOARD_SIZE,
    ROWS,
    COLS,
    HAND_SLOTS,
    PROMOTION_CHOICES,
    DROP_ORIGIN,
    Color,
    PieceType,
    Piece,
    Position,
    Move,
)
from pico_chess.core.actions import (
    Action,
    MoveAction,
    DropAction,
    PromotionAction,
    describe_action,
)
from pico_chess.core.hashing import hash_board, hash_state

__all__ = [
    # Types
    "Color",
    "PieceType",
    "Piece",
    "Position",
    "Move",
    # Actions
    "Action",
    "MoveAction",
    "DropAction",
    "PromotionAction",
    "describe_action",
    # Constants
    "BOARD_SIZE",
    "ROWS",
    "COLS",
    "HAND_SLOTS",
    "PROMOTION_CHOICES",
    "DROP_ORIGIN",
    # Functions
    "hash_board",
    "hash_state",
]
