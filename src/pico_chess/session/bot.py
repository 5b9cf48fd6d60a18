"""
Bot driver - plays the scripted opponent through the arbiter.

The bot gets no special access: its actions go through
``MoveArbiter.submit`` exactly like a human's. Thinking time and
substitution delays are scheduled calls, so every engine call stays
synchronous.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from pico_chess.agent.strategy import Strategy
from pico_chess.core.actions import describe_action
from pico_chess.session.arbiter import MoveArbiter, Verdict
from pico_chess.session.match import Match, Player
from pico_chess.session.scheduler import Scheduler
from pico_chess.session.store import SessionStore

logger = logging.getLogger(__name__)

Listener = Callable[[Match], None]


class BotDriver:
    """
    Schedules and plays bot turns, seats bots for lone players, and
    runs the periodic idle sweep.

    Args:
        arbiter: Gatekeeper every bot action goes through.
        strategy: Move selection.
        scheduler: Delayed-call backend.
        rng: Random source for thinking time.
        listener: Called with the match after every bot-made change
                  (the transport layer's broadcast hook).
    """

    def __init__(
        self,
        arbiter: MoveArbiter,
        strategy: Strategy,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        listener: Optional[Listener] = None,
    ):
        self.arbiter = arbiter
        self.strategy = strategy
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.listener = listener

    def _notify(self, match: Match) -> None:
        if self.listener is not None:
            self.listener(match)

    def think_delay(self, store: SessionStore) -> float:
        cfg = store.config
        return self.rng.uniform(cfg.bot_think_min, cfg.bot_think_max)

    @staticmethod
    def bot_to_move(match: Match) -> Optional[Player]:
        """The bot player whose turn it is, if any."""
        if not match.is_started or match.is_over:
            return None
        player = match.player_by_color(match.state.current_player)
        if player is None or not player.is_bot:
            return None
        return player

    # -------------------------------------------------------------------------
    # Turns
    # -------------------------------------------------------------------------

    def play_turn(self, store: SessionStore, match_id: str) -> Optional[Verdict]:
        """
        Play one bot action now, if it is the bot's turn.

        If the bot is still on turn afterwards (a promotion is pending),
        the follow-up is scheduled too.
        """
        match = store.get(match_id)
        if match is None:
            return None

        with match.lock:
            bot = self.bot_to_move(match)
            if bot is None:
                return None

            action = self.strategy.choose_action(match.state, bot.color)
            if action is None:
                logger.warning("Bot %s has no action in %s", bot.id, match_id)
                return None

            verdict = self.arbiter.submit(store, bot.id, action, match_id=match_id)

        if not verdict.accepted:
            # Strategies must only propose legal actions
            logger.error(
                "Bot action %s rejected in %s: %s",
                describe_action(action), match_id, verdict.rejection.value,
            )
            return verdict

        logger.info("Bot %s played %s in %s", bot.id, describe_action(action), match_id)
        self._notify(match)
        self.schedule_turn(store, match_id, reply_delay=0.0)
        return verdict

    def schedule_turn(self, store: SessionStore, match_id: str,
                      reply_delay: Optional[float] = None) -> bool:
        """
        Schedule the bot's next action if it is on turn.

        Delay is the reply delay plus a random thinking time. Returns
        True if something was scheduled.
        """
        match = store.get(match_id)
        if match is None or self.bot_to_move(match) is None:
            return False
        if reply_delay is None:
            reply_delay = store.config.bot_reply_delay
        self.scheduler.call_later(reply_delay + self.think_delay(store), self.play_turn, store, match_id)
        return True

    def reply_to(self, store: SessionStore, match: Match) -> None:
        """``MoveArbiter.on_accept`` hook: answer a human action if the bot is now on turn."""
        self.schedule_turn(store, match.id)

    # -------------------------------------------------------------------------
    # Substitution
    # -------------------------------------------------------------------------

    def substitute(self, store: SessionStore, player_id: str) -> Optional[Match]:
        """Seat the bot opposite `player_id` if they are still waiting alone."""
        match = store.get_by_player(player_id)
        if match is None or match.is_started or len(match.players) != 1:
            return None
        if store.add_bot(match.id) is None:
            return None
        started = store.start(match.id)
        if started is None:
            return None
        logger.info("Bot substituted for missing opponent in %s", match.id)
        self._notify(started)
        self.schedule_turn(store, started.id)
        return started

    def schedule_substitution(self, store: SessionStore, player_id: str) -> None:
        self.scheduler.call_later(store.config.bot_substitute_after, self.substitute, store, player_id)

    # -------------------------------------------------------------------------
    # Housekeeping
    # -------------------------------------------------------------------------

    def _sweep(self, store: SessionStore) -> None:
        try:
            store.sweep_expired()
        finally:
            self.schedule_sweeps(store)

    def schedule_sweeps(self, store: SessionStore) -> None:
        """Run ``sweep_expired`` every ``sweep_interval`` until shutdown."""
        self.scheduler.call_later(store.config.sweep_interval, self._sweep, store)
