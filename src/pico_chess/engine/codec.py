"""
JSON-compatible encoding of a full GameState.

The session protocol is a stateless refresh: every change sends the whole
state. The dict shape mirrors what browser clients already consume:

    {
        "board": [[{"type": "KING", "color": "WHITE"} | None, ...] x6] x6,
        "currentPlayer": "WHITE",
        "player1Hand": {"KING": 0, "QUEEN": 0, ...},
        "player2Hand": {...},
        "lastMove": {"from": {"row": r, "col": c}, "to": {...}} | None,
        "checkedKingPosition": {"row": r, "col": c} | None,
    }
"""

from __future__ import annotations

from typing import Any, Dict, Optional

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
from pico_chess.engine.game_state import GameState


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _pos_to_dict(pos: Optional[Position]) -> Optional[Dict[str, int]]:
    if pos is None:
        return None
    return {"row": int(pos[0]), "col": int(pos[1])}


def _hand_to_dict(state: GameState, color: Color) -> Dict[str, int]:
    return {pt.name: count for pt, count in state.hand(color).items()}


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """Encode the full state as plain dicts/lists (json.dumps-ready)."""
    board = []
    for r in range(ROWS):
        row = []
        for c in range(COLS):
            piece = Piece.from_code(int(state.board[r, c]))
            row.append(None if piece is None else {"type": piece.type.name, "color": piece.color.value})
        board.append(row)

    last_move = None
    if state.last_move is not None:
        last_move = {
            "from": _pos_to_dict(state.last_move.from_pos),
            "to": _pos_to_dict(state.last_move.to_pos),
        }

    return {
        "board": board,
        "currentPlayer": state.current_player.value,
        "player1Hand": _hand_to_dict(state, Color.WHITE),
        "player2Hand": _hand_to_dict(state, Color.BLACK),
        "lastMove": last_move,
        "checkedKingPosition": _pos_to_dict(state.checked_king_position),
    }


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _pos_from_dict(data: Any) -> Optional[Position]:
    if data is None:
        return None
    try:
        return Position(int(data["row"]), int(data["col"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed position: {data!r}") from e


def _hand_from_dict(data: Any) -> np.ndarray:
    hand = np.zeros(HAND_SLOTS, dtype=np.int16)
    if not isinstance(data, dict):
        raise ValueError(f"Malformed hand: {data!r}")
    for name, count in data.items():
        try:
            pt = PieceType[name]
        except KeyError as e:
            raise ValueError(f"Unknown piece type in hand: {name!r}") from e
        if int(count) < 0:
            raise ValueError(f"Negative hand count for {name}: {count}")
        hand[int(pt)] = int(count)
    return hand


def _piece_from_dict(data: Any) -> int:
    if data is None:
        return 0
    try:
        return Piece(PieceType[data["type"]], Color(data["color"])).code
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed piece: {data!r}") from e


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """
    Decode ``state_to_dict`` output back into a GameState.

    Raises:
        ValueError: on any structural problem in `data`.
    """
    try:
        rows = data["board"]
        if len(rows) != ROWS or any(len(row) != COLS for row in rows):
            raise ValueError(f"Board must be {ROWS}x{COLS}")
        board = np.array(
            [[_piece_from_dict(cell) for cell in row] for row in rows],
            dtype=np.int8,
        )
        current = Color(data["currentPlayer"])
        hand1 = _hand_from_dict(data.get("player1Hand", {}))
        hand2 = _hand_from_dict(data.get("player2Hand", {}))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed game state: {e}") from e

    last_move = None
    raw_move = data.get("lastMove")
    if raw_move is not None:
        if not isinstance(raw_move, dict):
            raise ValueError(f"Malformed last move: {raw_move!r}")
        last_move = Move(_pos_from_dict(raw_move.get("from")), _pos_from_dict(raw_move.get("to")))

    return GameState(
        board,
        current,
        hand1,
        hand2,
        last_move=last_move,
        checked_king_position=_pos_from_dict(data.get("checkedKingPosition")),
    )
