"""
State hashing utilities - optimized for int8 boards.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from pico_chess.engine.game_state import GameState


def hash_board(board: np.ndarray) -> str:
    """
    Fast hash for a board array.

    Contiguous numeric arrays hash their raw bytes directly.
    """
    return hashlib.sha256(np.ascontiguousarray(board).tobytes()).hexdigest()[:16]


def hash_state(state: GameState) -> str:
    """
    Fingerprint of a full game state.

    Covers board, hands and side to move; two states with the same
    fingerprint are interchangeable for play. Sent alongside every
    full-state refresh so clients can detect desync.
    """
    h = hashlib.sha256()
    h.update(np.ascontiguousarray(state.board).tobytes())
    h.update(np.ascontiguousarray(state.player1_hand).tobytes())
    h.update(np.ascontiguousarray(state.player2_hand).tobytes())
    h.update(state.current_player.value.encode())
    return h.hexdigest()[:16]
