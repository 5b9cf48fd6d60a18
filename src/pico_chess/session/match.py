"""
Match records: players, the live game state and the final outcome.

A Match is owned by a SessionStore. Anything that reads-then-writes its
state must hold ``match.lock``; the rules engine itself never locks.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from pico_chess.core.hashing import hash_state
from pico_chess.core.types import Color
from pico_chess.engine.codec import state_to_dict
from pico_chess.engine.game_state import GameState, initial_state
from pico_chess.engine.rules import is_checkmate, is_stalemate, pending_promotion


class EndReason(str, Enum):
    CHECKMATE = "Checkmate"
    STALEMATE = "Stalemate"
    RESIGNATION = "Resignation"
    DRAW_AGREEMENT = "Draw by agreement"
    TIMEOUT = "Timeout"


class Outcome(NamedTuple):
    """Final result. `winner` is None only for a draw."""

    winner: Optional[Color]
    reason: EndReason

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner": None if self.winner is None else self.winner.value,
            "reason": self.reason.value,
        }


def evaluate_outcome(state: GameState) -> Optional[Outcome]:
    """
    Board-decided result for the side to move, if any.

    Checkmate and stalemate both lose for the side to move: in this
    variant stalemate is not a draw. Nothing is decided while a promotion
    is pending.
    """
    if pending_promotion(state) is not None:
        return None
    color = state.current_player
    if is_checkmate(state, color):
        return Outcome(color.opponent, EndReason.CHECKMATE)
    if is_stalemate(state, color):
        return Outcome(color.opponent, EndReason.STALEMATE)
    return None


@dataclass
class Player:
    id: str
    name: str
    color: Color
    is_bot: bool = False
    is_connected: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color.value,
            "isBot": self.is_bot,
            "isConnected": self.is_connected,
        }


@dataclass
class Match:
    """One room: up to two players and the game between them."""

    id: str
    players: List[Player] = field(default_factory=list)
    state: GameState = field(default_factory=initial_state)
    is_started: bool = False
    created_at: float = 0.0
    last_activity: float = 0.0
    turn_started_at: float = 0.0
    outcome: Optional[Outcome] = None
    draw_offer_from: Optional[Color] = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def is_full(self) -> bool:
        return len(self.players) >= 2

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    def player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def player_by_color(self, color: Color) -> Optional[Player]:
        return next((p for p in self.players if p.color is color), None)

    def opponent_of(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id != player_id), None)

    def touch(self, now: float) -> None:
        self.last_activity = now

    def snapshot(self) -> Dict[str, Any]:
        """
        Everything a client needs to redraw, in one JSON-ready dict.

        The protocol is a full refresh: no deltas are ever sent.
        """
        return {
            "room": {
                "id": self.id,
                "players": [p.to_dict() for p in self.players],
                "isGameStarted": self.is_started,
            },
            "gameState": state_to_dict(self.state),
            "fingerprint": hash_state(self.state),
            "outcome": None if self.outcome is None else self.outcome.to_dict(),
            "drawOfferFrom": None if self.draw_offer_from is None else self.draw_offer_from.value,
        }
