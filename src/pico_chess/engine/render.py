"""
Text rendering of a GameState for terminals and logs.
"""

from __future__ import annotations

from pico_chess.core.types import COLS, ROWS, Color, PieceType
from pico_chess.engine.game_state import GameState

PIECE_LETTERS = {
    PieceType.KING: "K",
    PieceType.QUEEN: "Q",
    PieceType.ROOK: "R",
    PieceType.BISHOP: "B",
    PieceType.KNIGHT: "N",
    PieceType.PAWN: "P",
}

# WHITE uppercase, BLACK lowercase
CELL_STRINGS = {0: " "}
CELL_STRINGS.update({int(pt): letter for pt, letter in PIECE_LETTERS.items()})
CELL_STRINGS.update({-int(pt): letter.lower() for pt, letter in PIECE_LETTERS.items()})


def hand_string(state: GameState, color: Color) -> str:
    held = [f"{PIECE_LETTERS[pt]}x{n}" for pt, n in state.hand(color).items() if n > 0]
    return " ".join(held) if held else "-"


def state_string(state: GameState) -> str:
    """Pretty-print the board, row 5 (BLACK home) on top."""
    board = state.board
    top = "╭" + "┬".join(["───"] * COLS) + "╮"
    sep = "├" + "┼".join(["───"] * COLS) + "┤"
    bottom = "╰" + "┴".join(["───"] * COLS) + "╯"

    lines = ["    " + top]
    for i, r in enumerate(range(ROWS - 1, -1, -1)):
        row_strs = [f" {CELL_STRINGS[int(board[r, c])]} " for c in range(COLS)]
        lines.append(f" {r}  │" + "│".join(row_strs) + "│")
        if i < ROWS - 1:
            lines.append("    " + sep)
    lines.append("    " + bottom)
    lines.append("      " + "   ".join(str(c) for c in range(COLS)))

    lines.append(f"\nWHITE hand: {hand_string(state, Color.WHITE)}")
    lines.append(f"BLACK hand: {hand_string(state, Color.BLACK)}")
    status = f"To move: {state.current_player.value}"
    if state.checked_king_position is not None:
        r, c = state.checked_king_position
        status += f"  (check on {r},{c})"
    lines.append(status)

    return "\n".join(lines)
