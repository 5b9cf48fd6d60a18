"""
Greedy one-ply bot ("easy" difficulty).

Scores every legal move with a small material/position heuristic and
usually plays the best one; with some probability it picks among the
top few instead, so it stays beatable. Drops are considered only when
no piece move exists.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple, TypeVar

from pico_chess.agent.strategy import Strategy, drop_actions, move_actions
from pico_chess.core.actions import Action, DropAction, MoveAction, PromotionAction
from pico_chess.core.types import PROMOTION_CHOICES, Color, PieceType, Position
from pico_chess.engine.game_state import GameState
from pico_chess.engine.rules import pending_promotion

PIECE_VALUES = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}

CENTER = 2.5

T = TypeVar("T")


def center_bonus(pos: Position) -> float:
    """Larger for cells near the middle of the board."""
    distance = abs(pos.row - CENTER) + abs(pos.col - CENTER)
    return (6 - distance) * 0.5


def score_move(state: GameState, action: MoveAction, color: Color) -> float:
    moving = state.piece_at(action.from_pos)
    target = state.piece_at(action.to_pos)
    score = 0.0

    if target is not None and target.color is not color:
        score += PIECE_VALUES[target.type] * 10

    score += center_bonus(action.to_pos)

    if moving is not None and moving.type == PieceType.PAWN:
        if (action.to_pos.row - action.from_pos.row) * color.forward > 0:
            score += 2

    if moving is not None and moving.type == PieceType.KING:
        score -= 1

    return score


def score_drop(action: DropAction, color: Color) -> float:
    score = PIECE_VALUES[action.piece_type] + center_bonus(action.to_pos)

    # Attacking pieces are worth more in the enemy half
    if action.piece_type != PieceType.PAWN:
        enemy_half = action.to_pos.row > 2 if color is Color.WHITE else action.to_pos.row < 3
        if enemy_half:
            score += 2

    return score


class GreedyStrategy(Strategy):
    """
    Highest-scoring move, with a chance of a weaker pick.

    Args:
        rng: Random source (seed it for reproducible play).
        blunder_chance: Probability of picking uniformly among the
                        top `top_n` moves instead of the best.
        drop_blunder_chance: Same, for drops.
        top_n: Size of the pool a blunder is drawn from.
    """

    name = "greedy"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        blunder_chance: float = 0.3,
        drop_blunder_chance: float = 0.4,
        top_n: int = 3,
    ):
        self.rng = rng or random.Random()
        self.blunder_chance = blunder_chance
        self.drop_blunder_chance = drop_blunder_chance
        self.top_n = max(1, top_n)

    def _pick(self, scored: Sequence[Tuple[float, T]], blunder_chance: float) -> T:
        # Stable sort keeps board-scan order among equal scores
        ranked = sorted(scored, key=lambda item: item[0], reverse=True)
        if self.rng.random() < blunder_chance:
            return self.rng.choice(ranked[:self.top_n])[1]
        return ranked[0][1]

    def choose_action(self, state: GameState, color: Color) -> Optional[Action]:
        color = Color(color)
        if state.current_player is not color:
            return None

        pending = pending_promotion(state)
        if pending is not None:
            best = max(PROMOTION_CHOICES, key=lambda pt: PIECE_VALUES[pt])
            return PromotionAction(pending, best)

        moves = move_actions(state, color)
        if moves:
            scored: List[Tuple[float, Action]] = [(score_move(state, m, color), m) for m in moves]
            return self._pick(scored, self.blunder_chance)

        drops = drop_actions(state, color)
        if drops:
            scored = [(score_drop(d, color), d) for d in drops]
            return self._pick(scored, self.drop_blunder_chance)

        return None
