"""
Bot strategy contract and the action enumerator strategies share.

A strategy only proposes; the arbiter decides. Any action a strategy
returns must be one the arbiter would accept for that state and color.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import List, Optional

from pico_chess.core.actions import Action, DropAction, MoveAction, PromotionAction
from pico_chess.core.types import PROMOTION_CHOICES, Color, PieceType
from pico_chess.engine.board import pieces_of
from pico_chess.engine.game_state import GameState
from pico_chess.engine.rules import legal_destinations, legal_drop_cells, pending_promotion


def move_actions(state: GameState, color: Color) -> List[MoveAction]:
    """Every legal piece move for `color` (evaluated as if `color` were to move)."""
    color = Color(color)
    if state.current_player is not color:
        state = state.replace(current_player=color)
    return [
        MoveAction(from_pos, to_pos)
        for from_pos, _ in pieces_of(state.board, color)
        for to_pos in legal_destinations(state, from_pos)
    ]


def drop_actions(state: GameState, color: Color) -> List[DropAction]:
    """Every legal drop for `color`."""
    return [
        DropAction(pt, pos)
        for pt in PieceType
        for pos in legal_drop_cells(state, pt, color)
    ]


def all_actions(state: GameState, color: Color) -> List[Action]:
    """
    All actions the arbiter would accept from `color` in `state`.

    Empty when it is not `color`'s turn. While a promotion is pending the
    only actions are its resolutions.
    """
    color = Color(color)
    if state.current_player is not color:
        return []
    pending = pending_promotion(state)
    if pending is not None:
        return [PromotionAction(pending, pt) for pt in PROMOTION_CHOICES]
    return [*move_actions(state, color), *drop_actions(state, color)]


class Strategy(ABC):
    """
    Abstract base for bot move selection.

    Given a state and a color, return one legal action, or None when
    `color` has nothing to do (not its turn, or no legal action).
    """

    name: str = "strategy"

    @abstractmethod
    def choose_action(self, state: GameState, color: Color) -> Optional[Action]:
        pass


class RandomStrategy(Strategy):
    """Uniformly random legal action."""

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_action(self, state: GameState, color: Color) -> Optional[Action]:
        actions = all_actions(state, color)
        if not actions:
            return None
        return self.rng.choice(actions)
