"""
Candidate actions a player (human or bot) can submit for a turn.

Actions are plain immutable records; they carry no legality guarantee.
The arbiter decides whether an action is accepted.
"""

from __future__ import annotations

from typing import NamedTuple, Union

from pico_chess.core.types import PieceType, Position


class MoveAction(NamedTuple):
    from_pos: Position
    to_pos: Position


class DropAction(NamedTuple):
    piece_type: PieceType
    to_pos: Position


class PromotionAction(NamedTuple):
    position: Position
    piece_type: PieceType


Action = Union[MoveAction, DropAction, PromotionAction]


def describe_action(action: Action) -> str:
    """Short human-readable form used in logs and the CLI."""
    if isinstance(action, MoveAction):
        (fr, fc), (tr, tc) = action.from_pos, action.to_pos
        return f"move {fr},{fc} -> {tr},{tc}"
    if isinstance(action, DropAction):
        r, c = action.to_pos
        return f"drop {action.piece_type.name} @ {r},{c}"
    r, c = action.position
    return f"promote {r},{c} = {action.piece_type.name}"
