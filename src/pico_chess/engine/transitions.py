"""
State transitions: moves, drops and promotion.

Each transition takes a GameState and returns a new one (copy-on-write);
the input is never touched. Arrays that do not change are shared.
"""

from __future__ import annotations

from typing import Optional

from pico_chess.core.types import (
    DROP_ORIGIN,
    PROMOTION_CHOICES,
    Move,
    PieceType,
    Position,
)
from pico_chess.engine.game_state import GameState
from pico_chess.engine.rules import can_drop_on, checked_king, is_legal_move, pending_promotion


def _is_promotion_move(code: int, to_pos: Position, state: GameState) -> bool:
    return (
        abs(code) == PieceType.PAWN
        and to_pos.row == state.current_player.promotion_rank
    )


def make_move(state: GameState, from_pos: Position, to_pos: Position, *,
              validated: bool = False) -> GameState:
    """
    Execute from_pos → to_pos and return the resulting state.

    A captured piece's type goes into the mover's hand. The turn passes
    to the opponent unless a pawn lands on its far rank: then promotion
    is pending and the mover stays on turn until ``resolve_promotion``.

    Args:
        state: State to move from (not modified).
        from_pos: Cell of the moving piece.
        to_pos: Destination cell.
        validated:  If True, skip validation (caller guarantees legality,
                    e.g. the arbiter already ran ``is_legal_move``). An
                    illegal move then produces an undefined state.

    Raises:
        ValueError: if not `validated` and the move is illegal.
    """
    from_pos, to_pos = Position(*from_pos), Position(*to_pos)

    if not validated and not is_legal_move(state, from_pos, to_pos):
        raise ValueError(
            f"Illegal move {tuple(from_pos)} -> {tuple(to_pos)} "
            f"for {state.current_player.value}"
        )

    mover = state.current_player
    board = state.board.copy()
    moving = int(board[from_pos.row, from_pos.col])
    captured = int(board[to_pos.row, to_pos.col])

    board[to_pos.row, to_pos.col] = moving
    board[from_pos.row, from_pos.col] = 0

    changes = {
        "board": board,
        "last_move": Move(from_pos, to_pos),
    }

    if captured != 0:
        hand = state.hand_array(mover).copy()
        hand[abs(captured)] += 1
        changes["player1_hand" if mover.sign > 0 else "player2_hand"] = hand

    if not _is_promotion_move(moving, to_pos, state):
        changes["current_player"] = mover.opponent

    new_state = state.replace(**changes)
    return new_state.replace(checked_king_position=checked_king(new_state))


def drop_piece(state: GameState, piece_type: PieceType, to_pos: Position) -> Optional[GameState]:
    """
    Place a piece from the mover's hand on an empty cell.

    Returns None (no effect) if the hand holds none of `piece_type`, the
    cell is off-board or occupied, or a pawn would land on the mover's
    far rank. Drops always pass the turn.
    """
    piece_type = PieceType(piece_type)
    to_pos = Position(*to_pos)
    mover = state.current_player

    if state.hand_count(mover, piece_type) <= 0:
        return None
    if not to_pos.on_board() or state.board[to_pos.row, to_pos.col] != 0:
        return None
    if not can_drop_on(piece_type, mover, to_pos):
        return None

    board = state.board.copy()
    board[to_pos.row, to_pos.col] = mover.sign * piece_type

    hand = state.hand_array(mover).copy()
    hand[int(piece_type)] -= 1

    new_state = state.replace(**{
        "board": board,
        "player1_hand" if mover.sign > 0 else "player2_hand": hand,
        "last_move": Move(DROP_ORIGIN, to_pos),
        "current_player": mover.opponent,
    })
    return new_state.replace(checked_king_position=checked_king(new_state))


def resolve_promotion(state: GameState, position: Position,
                      chosen_type: PieceType) -> Optional[GameState]:
    """
    Finish a pending promotion: swap the pawn for `chosen_type`, pass the turn.

    Returns None unless a promotion is pending at `position` and
    `chosen_type` is one of PROMOTION_CHOICES.
    """
    position = Position(*position)
    chosen_type = PieceType(chosen_type)

    if pending_promotion(state) != position or chosen_type not in PROMOTION_CHOICES:
        return None

    mover = state.current_player
    board = state.board.copy()
    board[position.row, position.col] = mover.sign * chosen_type

    new_state = state.replace(board=board, current_player=mover.opponent)
    return new_state.replace(checked_king_position=checked_king(new_state))
