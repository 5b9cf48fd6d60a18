"""
Tests for pico_chess.session.bot

Driven through a manual scheduler: nothing sleeps.
"""

import random
from typing import Optional

import pytest

from pico_chess.agent.strategy import Strategy
from pico_chess.core.actions import Action, MoveAction, PromotionAction
from pico_chess.core.types import Color, PieceType, Position
from pico_chess.engine.rules import pending_promotion
from pico_chess.session.bot import BotDriver
from pico_chess.session.match import EndReason
from pico_chess.utils.config import BOT_PLAYER_ID

PAWN_STEP = MoveAction(Position(1, 0), Position(2, 0))


class PromotingStrategy(Strategy):
    """Pushes the pawn on (1,2) to row 0, then promotes to a knight."""

    name = "promoting"

    def choose_action(self, state, color) -> Optional[Action]:
        pending = pending_promotion(state)
        if pending is not None:
            return PromotionAction(pending, PieceType.KNIGHT)
        return MoveAction(Position(1, 2), Position(0, 2))


@pytest.fixture
def bot_match(store, driver):
    """alice (WHITE) waiting alone, then the bot substituted."""
    store.find_or_create("alice")
    return driver.substitute(store, "alice")


class TestSubstitution:

    def test_bot_seated_and_started(self, store, bot_match):
        assert bot_match.is_started
        bot = bot_match.player(BOT_PLAYER_ID)
        assert bot.is_bot and bot.color is Color.BLACK

    def test_waits_for_human_first_move(self, scheduler, bot_match):
        """WHITE (human) moves first, so no bot turn is queued yet."""
        assert scheduler.calls == []

    def test_listener_notified(self, store, arbiter, scheduler):
        seen = []
        driver = BotDriver(arbiter, PromotingStrategy(), scheduler, listener=seen.append)
        store.find_or_create("alice")
        match = driver.substitute(store, "alice")
        assert seen == [match]

    def test_skipped_when_opponent_arrived(self, store, driver):
        store.find_or_create("alice")
        store.find_or_create("bob")
        assert driver.substitute(store, "alice") is None

    def test_unknown_player(self, store, driver):
        assert driver.substitute(store, "ghost") is None

    def test_scheduled_after_wait(self, store, driver, scheduler, config):
        store.find_or_create("alice")
        driver.schedule_substitution(store, "alice")
        assert scheduler.delays == [config.bot_substitute_after]
        match = scheduler.run_next()
        assert match.is_started


class TestTurns:

    def test_schedule_after_human_move(self, store, arbiter, driver, scheduler, config, bot_match):
        arbiter.submit(store, "alice", PAWN_STEP)
        assert driver.schedule_turn(store, bot_match.id)
        (delay,) = scheduler.delays
        assert config.bot_reply_delay + config.bot_think_min <= delay
        assert delay <= config.bot_reply_delay + config.bot_think_max

    def test_nothing_to_schedule_on_human_turn(self, store, driver, scheduler, bot_match):
        assert not driver.schedule_turn(store, bot_match.id)
        assert scheduler.calls == []

    def test_bot_plays_legal_reply(self, store, arbiter, driver, scheduler, bot_match):
        arbiter.submit(store, "alice", PAWN_STEP)
        driver.schedule_turn(store, bot_match.id)
        verdict = scheduler.run_next()
        assert verdict.accepted
        assert bot_match.state.current_player is Color.WHITE
        assert scheduler.calls == []

    def test_play_turn_off_turn_is_noop(self, store, driver, bot_match):
        assert driver.play_turn(store, bot_match.id) is None

    def test_play_turn_missing_match(self, store, driver):
        assert driver.play_turn(store, "room_missing") is None

    def test_no_move_after_game_over(self, store, arbiter, driver, scheduler, bot_match):
        arbiter.submit(store, "alice", PAWN_STEP)
        driver.schedule_turn(store, bot_match.id)
        arbiter.resign(store, "alice")
        assert scheduler.run_next() is None
        assert bot_match.outcome.reason is EndReason.RESIGNATION

    def test_promotion_follow_up(self, store, arbiter, scheduler, config, build_state):
        """A bot that promotes stays on turn and schedules its choice."""
        driver = BotDriver(arbiter, PromotingStrategy(), scheduler, rng=random.Random(0))
        store.find_or_create("alice")
        match = driver.substitute(store, "alice")
        state = build_state({(0, 5): "K", (1, 2): "p", (5, 0): "k"}, Color.BLACK)
        store.update_state(match.id, state)

        driver.play_turn(store, match.id)
        assert match.state.current_player is Color.BLACK
        (delay,) = scheduler.delays
        assert config.bot_think_min <= delay <= config.bot_think_max

        scheduler.run_next()
        assert match.state.piece_at(Position(0, 2)).type == PieceType.KNIGHT
        assert match.state.current_player is Color.WHITE
        assert scheduler.calls == []

    def test_bot_in_many_rooms(self, store, arbiter, driver, scheduler):
        """One bot identity plays independently in two rooms."""
        store.find_or_create("alice")
        first = driver.substitute(store, "alice")
        store.find_or_create("carol")
        second = driver.substitute(store, "carol")
        assert first is not second

        arbiter.submit(store, "carol", PAWN_STEP)
        driver.schedule_turn(store, second.id)
        scheduler.run_all()
        assert second.state.current_player is Color.WHITE
        assert first.state.current_player is Color.WHITE
        assert first.state.last_move is None


class TestSweeps:

    def test_periodic(self, store, driver, scheduler, clock, config, bot_match):
        driver.schedule_sweeps(store)
        assert scheduler.delays == [config.sweep_interval]
        clock.advance(config.max_idle + 1)
        scheduler.run_next()
        assert store.get(bot_match.id) is None
        # Rescheduled for the next period
        assert scheduler.delays == [config.sweep_interval]
