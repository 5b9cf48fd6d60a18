"""
Tests for pico_chess.session.arbiter

Turn ownership, rejections, outcomes and the non-board end conditions.
"""

import pytest

from pico_chess.core.actions import DropAction, MoveAction, PromotionAction
from pico_chess.core.types import Color, PieceType, Position
from pico_chess.engine.transitions import make_move
from pico_chess.session.arbiter import MoveArbiter, Rejection, arbitrate
from pico_chess.session.match import EndReason, Outcome

PAWN_STEP = MoveAction(Position(1, 0), Position(2, 0))

KNIGHT_MATE = [
    ("alice", (0, 3), (2, 5)),
    ("bob", (5, 3), (4, 1)),
    ("alice", (0, 2), (1, 4)),
    ("bob", (4, 1), (2, 0)),
    ("alice", (1, 4), (0, 2)),
    ("bob", (5, 4), (3, 4)),
    ("alice", (0, 2), (1, 4)),
    ("bob", (3, 4), (3, 1)),
    ("alice", (1, 4), (0, 2)),
    ("bob", (2, 0), (1, 2)),
]


class TestArbitrate:
    """State-level gatekeeping."""

    def test_out_of_turn(self, start):
        verdict = arbitrate(start, Color.BLACK, MoveAction(Position(4, 5), Position(3, 5)))
        assert not verdict.accepted
        assert verdict.rejection is Rejection.NOT_YOUR_TURN
        assert verdict.state is start

    def test_unknown_action_type(self, start):
        with pytest.raises(TypeError):
            arbitrate(start, Color.WHITE, ("move", 1, 0))

    def test_off_board_target(self, start):
        verdict = arbitrate(start, Color.WHITE, MoveAction(Position(1, 0), Position(-1, 0)))
        assert verdict.rejection is Rejection.ILLEGAL_MOVE

    def test_wire_color_name(self, start):
        """The side to move may be named by its wire string."""
        assert arbitrate(start, "WHITE", PAWN_STEP).accepted
        assert arbitrate(start, "BLACK", PAWN_STEP).rejection is Rejection.NOT_YOUR_TURN

    def test_unknown_drop_type_rejected(self, start):
        verdict = arbitrate(start, Color.WHITE, DropAction(9, Position(3, 3)))
        assert verdict.rejection is Rejection.ILLEGAL_DROP
        assert verdict.state is start

    def test_unknown_promotion_type_rejected(self, build_state):
        state = make_move(build_state({(0, 0): "K", (4, 2): "P", (5, 5): "k"}), Position(4, 2), Position(5, 2))
        verdict = arbitrate(state, Color.WHITE, PromotionAction(Position(5, 2), 0))
        assert verdict.rejection is Rejection.ILLEGAL_PROMOTION


class TestSubmit:
    """Match-level submit."""

    def test_accepts_and_stores(self, store, arbiter, started_match):
        verdict = arbiter.submit(store, "alice", PAWN_STEP)
        assert verdict.accepted
        assert started_match.state is verdict.state
        assert started_match.state.current_player is Color.BLACK
        assert verdict.outcome is None

    def test_not_your_turn(self, store, arbiter, started_match):
        verdict = arbiter.submit(store, "bob", MoveAction(Position(4, 5), Position(3, 5)))
        assert verdict.rejection is Rejection.NOT_YOUR_TURN
        assert started_match.state.current_player is Color.WHITE

    def test_unknown_player(self, store, arbiter, started_match):
        verdict = arbiter.submit(store, "mallory", PAWN_STEP)
        assert verdict.rejection is Rejection.NOT_FOUND
        assert verdict.state is None

    def test_not_started(self, store, arbiter):
        store.find_or_create("alice")
        verdict = arbiter.submit(store, "alice", PAWN_STEP)
        assert verdict.rejection is Rejection.GAME_NOT_STARTED

    def test_illegal_move_leaves_state(self, store, arbiter, started_match):
        before = started_match.state
        verdict = arbiter.submit(store, "alice", MoveAction(Position(0, 0), Position(2, 2)))
        assert verdict.rejection is Rejection.ILLEGAL_MOVE
        assert started_match.state is before

    def test_illegal_drop(self, store, arbiter, started_match):
        verdict = arbiter.submit(store, "alice", DropAction(PieceType.ROOK, Position(3, 3)))
        assert verdict.rejection is Rejection.ILLEGAL_DROP

    def test_capture_reported(self, store, arbiter, started_match, build_state):
        store.update_state(started_match.id, build_state({(0, 0): "K", (2, 0): "R", (2, 3): "b", (5, 5): "k"}))
        verdict = arbiter.submit(store, "alice", MoveAction(Position(2, 0), Position(2, 3)))
        assert verdict.captured == PieceType.BISHOP
        assert started_match.state.hand_count(Color.WHITE, PieceType.BISHOP) == 1


class TestAcceptHook:
    """on_accept fires after accepted human actions only."""

    def test_called_with_match(self, store, started_match):
        seen = []
        arbiter = MoveArbiter(on_accept=lambda s, m: seen.append((s, m)))
        arbiter.submit(store, "alice", PAWN_STEP)
        assert seen == [(store, started_match)]

    def test_not_called_on_rejection(self, store, started_match):
        seen = []
        arbiter = MoveArbiter(on_accept=lambda s, m: seen.append(m))
        arbiter.submit(store, "bob", PAWN_STEP)
        assert seen == []

    def test_not_called_for_bot(self, store, started_match):
        seen = []
        arbiter = MoveArbiter(on_accept=lambda s, m: seen.append(m))
        started_match.player("alice").is_bot = True
        assert arbiter.submit(store, "alice", PAWN_STEP).accepted
        assert seen == []


class TestPromotionFlow:

    @pytest.fixture
    def pending(self, store, started_match, build_state):
        state = build_state({(0, 0): "K", (4, 2): "P", (5, 5): "k"})
        store.update_state(started_match.id, make_move(state, Position(4, 2), Position(5, 2)))
        return started_match

    def test_other_actions_blocked(self, store, arbiter, pending):
        verdict = arbiter.submit(store, "alice", MoveAction(Position(0, 0), Position(1, 0)))
        assert verdict.rejection is Rejection.PROMOTION_PENDING

    def test_opponent_still_waits(self, store, arbiter, pending):
        verdict = arbiter.submit(store, "bob", PromotionAction(Position(5, 2), PieceType.ROOK))
        assert verdict.rejection is Rejection.NOT_YOUR_TURN

    def test_queen_refused(self, store, arbiter, pending):
        verdict = arbiter.submit(store, "alice", PromotionAction(Position(5, 2), PieceType.QUEEN))
        assert verdict.rejection is Rejection.ILLEGAL_PROMOTION

    def test_resolution(self, store, arbiter, pending):
        verdict = arbiter.submit(store, "alice", PromotionAction(Position(5, 2), PieceType.BISHOP))
        assert verdict.accepted
        assert pending.state.current_player is Color.BLACK


class TestOutcomes:

    def test_checkmate_ends_match(self, store, arbiter, started_match):
        verdict = None
        for player_id, from_pos, to_pos in KNIGHT_MATE:
            verdict = arbiter.submit(store, player_id, MoveAction(Position(*from_pos), Position(*to_pos)))
            assert verdict.accepted
        assert verdict.outcome == Outcome(Color.BLACK, EndReason.CHECKMATE)
        assert started_match.is_over
        again = arbiter.submit(store, "alice", MoveAction(Position(0, 0), Position(1, 1)))
        assert again.rejection is Rejection.GAME_OVER

    def test_stalemate_is_loss(self, store, arbiter, started_match, build_state):
        """WHITE stalemates BLACK and wins."""
        state = build_state({(5, 0): "k", (4, 3): "R", (2, 1): "R", (0, 5): "K"})
        store.update_state(started_match.id, state)
        verdict = arbiter.submit(store, "alice", MoveAction(Position(2, 1), Position(3, 1)))
        assert verdict.outcome == Outcome(Color.WHITE, EndReason.STALEMATE)

    def test_resign(self, store, arbiter, started_match):
        verdict = arbiter.resign(store, "alice")
        assert verdict.outcome == Outcome(Color.BLACK, EndReason.RESIGNATION)
        assert arbiter.resign(store, "bob").rejection is Rejection.GAME_OVER

    def test_resign_before_start(self, store, arbiter):
        store.find_or_create("alice")
        assert arbiter.resign(store, "alice").rejection is Rejection.GAME_NOT_STARTED


class TestDraws:

    def test_accepted(self, store, arbiter, started_match):
        assert arbiter.offer_draw(store, "alice").accepted
        assert started_match.draw_offer_from is Color.WHITE
        verdict = arbiter.respond_draw(store, "bob", accept=True)
        assert verdict.outcome == Outcome(None, EndReason.DRAW_AGREEMENT)
        assert started_match.is_over

    def test_declined(self, store, arbiter, started_match):
        arbiter.offer_draw(store, "alice")
        assert arbiter.respond_draw(store, "bob", accept=False).accepted
        assert started_match.draw_offer_from is None
        assert not started_match.is_over

    def test_cannot_answer_own_offer(self, store, arbiter, started_match):
        arbiter.offer_draw(store, "alice")
        assert arbiter.respond_draw(store, "alice", accept=True).rejection is Rejection.NO_DRAW_OFFER

    def test_no_offer(self, store, arbiter, started_match):
        assert arbiter.respond_draw(store, "bob", accept=True).rejection is Rejection.NO_DRAW_OFFER

    def test_move_clears_offer(self, store, arbiter, started_match):
        arbiter.offer_draw(store, "bob")
        arbiter.submit(store, "alice", PAWN_STEP)
        assert started_match.draw_offer_from is None


class TestTimeout:

    def test_within_limit(self, store, arbiter, clock, config, started_match):
        clock.advance(config.move_time_limit)
        assert arbiter.check_timeout(store, started_match.id) is None
        assert not started_match.is_over

    def test_side_to_move_flagged(self, store, arbiter, clock, config, started_match):
        clock.advance(config.move_time_limit + 1)
        outcome = arbiter.check_timeout(store, started_match.id)
        assert outcome == Outcome(Color.BLACK, EndReason.TIMEOUT)
        assert started_match.outcome == outcome

    def test_move_resets_clock(self, store, arbiter, clock, config, started_match):
        clock.advance(config.move_time_limit - 1)
        arbiter.submit(store, "alice", PAWN_STEP)
        clock.advance(config.move_time_limit - 1)
        assert arbiter.check_timeout(store, started_match.id) is None

    def test_explicit_now(self, store, arbiter, clock, config, started_match):
        late = clock.now + config.move_time_limit + 5
        assert arbiter.check_timeout(store, started_match.id, now=late).winner is Color.BLACK

    def test_not_started(self, store, arbiter, clock):
        match, _, _ = store.find_or_create("alice")
        clock.advance(1000)
        assert arbiter.check_timeout(store, match.id) is None

    def test_missing_match(self, store, arbiter):
        assert arbiter.check_timeout(store, "room_missing") is None
