"""
Engine module - the pure rules engine.

Every public function takes a GameState and returns a value or a new
GameState; nothing here performs I/O or mutates its inputs.
"""

from pico_chess.engine.game_state import GameState, initial_state
from pico_chess.engine.board import find_king, in_bounds
from pico_chess.engine.rules import (
    potential_destinations,
    legal_destinations,
    is_legal_move,
    legal_drop_cells,
    is_legal_drop,
    pending_promotion,
    is_king_in_check,
    is_checkmate,
    is_stalemate,
    checked_king,
)
from pico_chess.engine.transitions import make_move, drop_piece, resolve_promotion
from pico_chess.engine.codec import state_to_dict, state_from_dict
from pico_chess.engine.render import state_string

__all__ = [
    "GameState",
    "initial_state",
    # Move generation
    "potential_destinations",
    "legal_destinations",
    "is_legal_move",
    "legal_drop_cells",
    "is_legal_drop",
    "pending_promotion",
    # Check detection
    "is_king_in_check",
    "is_checkmate",
    "is_stalemate",
    "checked_king",
    # Transitions
    "make_move",
    "drop_piece",
    "resolve_promotion",
    # Helpers
    "find_king",
    "in_bounds",
    "state_to_dict",
    "state_from_dict",
    "state_string",
]
