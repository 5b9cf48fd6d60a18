"""
Move arbiter - the turn-ownership and legality gatekeeper.

Two layers:
    arbitrate()   state-level: (state, color, action) → Verdict
    MoveArbiter   match-level: looks the player up in an injected
                  SessionStore, serializes on the match lock, stores
                  the new state and scores the game.

Game-rule violations never raise; they come back as a rejected Verdict
that the session layer relays to the client.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, NamedTuple, Optional

from pico_chess.core.actions import Action, DropAction, MoveAction, PromotionAction, describe_action
from pico_chess.core.types import Color, PieceType, Position
from pico_chess.engine.game_state import GameState
from pico_chess.engine.rules import is_legal_drop, is_legal_move, pending_promotion
from pico_chess.engine.transitions import drop_piece, make_move, resolve_promotion
from pico_chess.session.match import EndReason, Match, Outcome, evaluate_outcome
from pico_chess.session.store import SessionStore

logger = logging.getLogger(__name__)

AcceptHook = Callable[[SessionStore, Match], None]


class Rejection(str, Enum):
    NOT_FOUND = "not_found"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_NOT_STARTED = "game_not_started"
    GAME_OVER = "game_over"
    PROMOTION_PENDING = "promotion_pending"
    ILLEGAL_MOVE = "illegal_move"
    ILLEGAL_DROP = "illegal_drop"
    ILLEGAL_PROMOTION = "illegal_promotion"
    NO_DRAW_OFFER = "no_draw_offer"


class Verdict(NamedTuple):
    """
    Arbiter result.

    On rejection `state` is the unchanged input state (or None when no
    match was found) and `rejection` says why.
    """

    accepted: bool
    state: Optional[GameState]
    rejection: Optional[Rejection] = None
    captured: Optional[PieceType] = None
    outcome: Optional[Outcome] = None

    @classmethod
    def reject(cls, state: Optional[GameState], reason: Rejection) -> "Verdict":
        return cls(False, state, reason)


def _piece_type(value) -> Optional[PieceType]:
    try:
        return PieceType(value)
    except ValueError:
        return None


def arbitrate(state: GameState, color: Color, action: Action) -> Verdict:
    """
    Validate `action` for `color` and apply it if legal.

    Out-of-turn actions are rejected before any rule is evaluated. While
    a promotion is pending, only its resolution is accepted.
    """
    if Color(color) is not state.current_player:
        return Verdict.reject(state, Rejection.NOT_YOUR_TURN)

    pending = pending_promotion(state)

    if isinstance(action, PromotionAction):
        piece_type = _piece_type(action.piece_type)
        new_state = None if piece_type is None else resolve_promotion(state, action.position, piece_type)
        if new_state is None:
            return Verdict.reject(state, Rejection.ILLEGAL_PROMOTION)
        return Verdict(True, new_state)

    if pending is not None:
        return Verdict.reject(state, Rejection.PROMOTION_PENDING)

    if isinstance(action, MoveAction):
        from_pos, to_pos = Position(*action.from_pos), Position(*action.to_pos)
        if not to_pos.on_board() or not is_legal_move(state, from_pos, to_pos):
            return Verdict.reject(state, Rejection.ILLEGAL_MOVE)
        target = state.piece_at(to_pos)
        new_state = make_move(state, from_pos, to_pos, validated=True)
        return Verdict(True, new_state, captured=None if target is None else target.type)

    if isinstance(action, DropAction):
        piece_type = _piece_type(action.piece_type)
        if piece_type is None or not is_legal_drop(state, piece_type, action.to_pos):
            return Verdict.reject(state, Rejection.ILLEGAL_DROP)
        new_state = drop_piece(state, piece_type, action.to_pos)
        if new_state is None:
            return Verdict.reject(state, Rejection.ILLEGAL_DROP)
        return Verdict(True, new_state)

    raise TypeError(f"Unknown action type: {type(action).__name__}")


class MoveArbiter:
    """
    Match-level gatekeeper.

    Stateless itself: the store is passed in on each call so one arbiter
    can serve any number of stores (and tests can use throwaway ones).

    Args:
        on_accept: Called as ``on_accept(store, match)`` after every accepted
                   human action, outside the match lock. ``create_session``
                   points it at the bot driver so the bot replies.
    """

    def __init__(self, on_accept: Optional[AcceptHook] = None):
        self.on_accept = on_accept

    def _lookup(self, store: SessionStore, player_id: str, match_id: Optional[str] = None):
        match = store.get_by_player(player_id) if match_id is None else store.get(match_id)
        if match is None:
            return None, None
        return match, match.player(player_id)

    def submit(self, store: SessionStore, player_id: str, action: Action,
               match_id: Optional[str] = None) -> Verdict:
        """
        Apply `action` for `player_id` if it is theirs to make and legal.

        `match_id` pins the room explicitly; bots need it since one bot
        identity can sit in many rooms.
        """
        match, player = self._lookup(store, player_id, match_id)
        if match is None or player is None:
            logger.debug("Rejected %s from unknown player %s", describe_action(action), player_id)
            return Verdict.reject(None, Rejection.NOT_FOUND)

        with match.lock:
            if not match.is_started:
                return Verdict.reject(match.state, Rejection.GAME_NOT_STARTED)
            if match.is_over:
                return Verdict.reject(match.state, Rejection.GAME_OVER)

            verdict = arbitrate(match.state, player.color, action)
            if not verdict.accepted:
                logger.debug(
                    "Rejected %s from %s in %s: %s",
                    describe_action(action), player_id, match.id, verdict.rejection.value,
                )
                return verdict

            store.update_state(match.id, verdict.state)
            # Any move answers (declines) a standing draw offer
            match.draw_offer_from = None
            match.outcome = evaluate_outcome(verdict.state)
            if match.outcome is not None:
                logger.info(
                    "Match %s over: %s (%s)", match.id,
                    match.outcome.winner.value if match.outcome.winner else "draw",
                    match.outcome.reason.value,
                )
            verdict = verdict._replace(outcome=match.outcome)

        if self.on_accept is not None and not player.is_bot:
            self.on_accept(store, match)
        return verdict

    def _finish(self, match: Match, outcome: Outcome) -> Verdict:
        match.outcome = outcome
        match.draw_offer_from = None
        logger.info("Match %s over: %s", match.id, outcome.reason.value)
        return Verdict(True, match.state, outcome=outcome)

    def resign(self, store: SessionStore, player_id: str) -> Verdict:
        match, player = self._lookup(store, player_id)
        if match is None or player is None:
            return Verdict.reject(None, Rejection.NOT_FOUND)
        with match.lock:
            if not match.is_started:
                return Verdict.reject(match.state, Rejection.GAME_NOT_STARTED)
            if match.is_over:
                return Verdict.reject(match.state, Rejection.GAME_OVER)
            return self._finish(match, Outcome(player.color.opponent, EndReason.RESIGNATION))

    def offer_draw(self, store: SessionStore, player_id: str) -> Verdict:
        match, player = self._lookup(store, player_id)
        if match is None or player is None:
            return Verdict.reject(None, Rejection.NOT_FOUND)
        with match.lock:
            if not match.is_started:
                return Verdict.reject(match.state, Rejection.GAME_NOT_STARTED)
            if match.is_over:
                return Verdict.reject(match.state, Rejection.GAME_OVER)
            match.draw_offer_from = player.color
            match.touch(store.now())
            return Verdict(True, match.state)

    def respond_draw(self, store: SessionStore, player_id: str, accept: bool) -> Verdict:
        """Answer the opponent's standing offer. Accepting ends the game drawn."""
        match, player = self._lookup(store, player_id)
        if match is None or player is None:
            return Verdict.reject(None, Rejection.NOT_FOUND)
        with match.lock:
            if match.is_over:
                return Verdict.reject(match.state, Rejection.GAME_OVER)
            if match.draw_offer_from is None or match.draw_offer_from is player.color:
                return Verdict.reject(match.state, Rejection.NO_DRAW_OFFER)
            if not accept:
                match.draw_offer_from = None
                return Verdict(True, match.state)
            return self._finish(match, Outcome(None, EndReason.DRAW_AGREEMENT))

    def check_timeout(self, store: SessionStore, match_id: str,
                      now: Optional[float] = None) -> Optional[Outcome]:
        """
        Flag the side to move if its move clock has run out.

        Returns the new outcome, or None if nothing changed.
        """
        match = store.get(match_id)
        if match is None:
            return None
        now = store.now() if now is None else now
        with match.lock:
            if not match.is_started or match.is_over:
                return None
            if now - match.turn_started_at <= store.config.move_time_limit:
                return None
            loser = match.state.current_player
            return self._finish(match, Outcome(loser.opponent, EndReason.TIMEOUT)).outcome
