"""
Session store - where matches live between actions.

The store is an explicit object handed to the arbiter on every call, so
the rules engine never touches process-wide state and tests can build a
fresh store per case.

Matchmaking follows a simple lobby model:
    - a returning player gets their existing room back
    - otherwise join the oldest waiting room still inside its join window
    - otherwise open a new room and wait (WHITE)
"""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple

from pico_chess.core.types import Color
from pico_chess.engine.game_state import GameState
from pico_chess.session.match import Match, Player
from pico_chess.utils.config import (
    BOT_PLAYER_ID,
    BOT_PLAYER_NAME,
    DEFAULT_CONFIG,
    PLAYER_NAMES,
    Config,
)

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Abstract match storage used by the arbiter and the bot driver."""

    config: Config

    @abstractmethod
    def now(self) -> float:
        """Current time on the store's clock (seconds)."""
        pass

    @abstractmethod
    def find_or_create(self, player_id: str) -> Tuple[Match, Player, bool]:
        """Seat a player. Returns (match, player, is_new_room)."""
        pass

    @abstractmethod
    def get(self, match_id: str) -> Optional[Match]:
        pass

    @abstractmethod
    def get_by_player(self, player_id: str) -> Optional[Match]:
        pass

    @abstractmethod
    def add_bot(self, match_id: str) -> Optional[Match]:
        """Seat the bot opposite a lone waiting player. None if not applicable."""
        pass

    @abstractmethod
    def start(self, match_id: str) -> Optional[Match]:
        """Start a full room. None if missing or not full."""
        pass

    @abstractmethod
    def update_state(self, match_id: str, state: GameState) -> Optional[Match]:
        pass

    @abstractmethod
    def remove_player(self, player_id: str) -> None:
        pass

    @abstractmethod
    def sweep_expired(self) -> List[str]:
        """Drop idle rooms; return their ids."""
        pass


class InMemorySessionStore(SessionStore):
    """
    Dict-backed store. Thread-safe for its own maps; per-match state
    changes are serialized by ``Match.lock``.

    Args:
        config: Timing settings (join window, idle expiry).
        clock: Time source, ``time.monotonic`` by default.
        rng: Random source for display names.
    """

    def __init__(
        self,
        config: Config = DEFAULT_CONFIG,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self._clock = clock
        self._rng = rng or random.Random()
        self._matches: Dict[str, Match] = {}
        self._player_matches: Dict[str, str] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def _human(self, player_id: str, color: Color) -> Player:
        name = f"{self._rng.choice(PLAYER_NAMES)}{self._rng.randrange(1000)}"
        return Player(id=player_id, name=name, color=color)

    def __len__(self) -> int:
        return len(self._matches)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, match_id: str) -> Optional[Match]:
        return self._matches.get(match_id)

    def get_by_player(self, player_id: str) -> Optional[Match]:
        match_id = self._player_matches.get(player_id)
        if match_id is None:
            return None
        return self._matches.get(match_id)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def find_or_create(self, player_id: str) -> Tuple[Match, Player, bool]:
        now = self.now()
        with self._lock:
            existing = self.get_by_player(player_id)
            if existing is not None:
                player = existing.player(player_id)
                if player is not None:
                    player.is_connected = True
                    existing.touch(now)
                    logger.info("Player %s rejoined %s", player_id, existing.id)
                    return existing, player, False

            for match in self._matches.values():
                if (len(match.players) == 1 and not match.is_started
                        and now - match.created_at < self.config.join_window):
                    color = match.players[0].color.opponent
                    player = self._human(player_id, color)
                    match.players.append(player)
                    match.touch(now)
                    self._player_matches[player_id] = match.id
                    logger.info("Player %s joined %s as %s", player_id, match.id, color.value)
                    return match, player, False

            match = Match(id=f"room_{uuid.uuid4().hex[:9]}", created_at=now, last_activity=now)
            player = self._human(player_id, Color.WHITE)
            match.players.append(player)
            self._matches[match.id] = match
            self._player_matches[player_id] = match.id
            logger.info("Player %s opened %s", player_id, match.id)
            return match, player, True

    def add_bot(self, match_id: str) -> Optional[Match]:
        with self._lock:
            match = self._matches.get(match_id)
            if match is None or len(match.players) != 1 or match.is_started:
                return None
            bot = Player(BOT_PLAYER_ID, BOT_PLAYER_NAME, match.players[0].color.opponent, is_bot=True)
            match.players.append(bot)
            match.touch(self.now())
            logger.info("Bot %s seated in %s", bot.id, match.id)
            return match

    def start(self, match_id: str) -> Optional[Match]:
        match = self._matches.get(match_id)
        if match is None or not match.is_full:
            return None
        with match.lock:
            now = self.now()
            match.is_started = True
            match.turn_started_at = now
            match.touch(now)
        logger.info("Match %s started", match.id)
        return match

    def update_state(self, match_id: str, state: GameState) -> Optional[Match]:
        match = self._matches.get(match_id)
        if match is None:
            return None
        with match.lock:
            now = self.now()
            match.state = state
            match.turn_started_at = now
            match.touch(now)
        return match

    def remove_player(self, player_id: str) -> None:
        with self._lock:
            match_id = self._player_matches.pop(player_id, None)
            if match_id is None:
                return
            match = self._matches.get(match_id)
            if match is None:
                return
            match.players = [p for p in match.players if p.id != player_id]
            # Bots never leave on their own; a room with only a bot is empty
            if all(p.is_bot for p in match.players):
                del self._matches[match_id]
                logger.info("Match %s closed", match_id)

    def sweep_expired(self) -> List[str]:
        now = self.now()
        removed = []
        with self._lock:
            for match_id, match in list(self._matches.items()):
                if now - match.last_activity > self.config.max_idle:
                    for player in match.players:
                        self._player_matches.pop(player.id, None)
                    del self._matches[match_id]
                    removed.append(match_id)
        if removed:
            logger.info("Swept %d idle match(es)", len(removed))
        return removed
