"""
Shared test fixtures for pico_chess tests.

Design principles:
- Boards are written as {(row, col): letter} maps, WHITE uppercase,
  BLACK lowercase (same letters as the text renderer)
- Time never really passes: stores get a fake clock, bots a manual scheduler
- Minimal, focused fixtures
"""

import random
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
import pytest

from pico_chess.agent.strategy import RandomStrategy
from pico_chess.core.types import Color, PieceType
from pico_chess.engine.game_state import GameState, empty_hand, initial_state
from pico_chess.engine.render import CELL_STRINGS
from pico_chess.session.arbiter import MoveArbiter
from pico_chess.session.bot import BotDriver
from pico_chess.session.scheduler import Scheduler
from pico_chess.session.store import InMemorySessionStore
from pico_chess.utils.config import Config

LETTER_CODES = {letter: code for code, letter in CELL_STRINGS.items() if code != 0}


# =============================================================================
# State Fixtures
# =============================================================================

def _hand(counts: Optional[Dict[PieceType, int]]) -> np.ndarray:
    hand = empty_hand()
    for pt, n in (counts or {}).items():
        hand[int(pt)] = n
    return hand


@pytest.fixture
def build_state() -> Callable[..., GameState]:
    """
    Factory for hand-built positions.

    build_state({(0, 0): "K", (5, 5): "k"}, Color.BLACK, white_hand={PieceType.ROOK: 1})
    """
    def _build(
        pieces: Dict[Tuple[int, int], str],
        current: Color = Color.WHITE,
        white_hand: Optional[Dict[PieceType, int]] = None,
        black_hand: Optional[Dict[PieceType, int]] = None,
    ) -> GameState:
        board = np.zeros((6, 6), dtype=np.int8)
        for (r, c), letter in pieces.items():
            board[r, c] = LETTER_CODES[letter]
        return GameState(board, current, _hand(white_hand), _hand(black_hand))

    return _build


@pytest.fixture
def start() -> GameState:
    """Fresh starting position."""
    return initial_state()


# =============================================================================
# Session Fixtures
# =============================================================================

class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualScheduler(Scheduler):
    """Queues calls; tests run them explicitly."""

    class Handle:
        def __init__(self):
            self.cancelled = False

        def cancel(self) -> None:
            self.cancelled = True

    def __init__(self):
        self.calls: List[Tuple[float, Callable[..., Any], tuple, "ManualScheduler.Handle"]] = []

    def call_later(self, delay, fn, *args):
        handle = self.Handle()
        self.calls.append((delay, fn, args, handle))
        return handle

    def shutdown(self) -> None:
        for *_, handle in self.calls:
            handle.cancel()
        self.calls.clear()

    @property
    def delays(self) -> List[float]:
        return [delay for delay, *_ in self.calls]

    def run_next(self) -> Any:
        """Run the oldest queued call (skipping cancelled ones)."""
        while self.calls:
            _, fn, args, handle = self.calls.pop(0)
            if not handle.cancelled:
                return fn(*args)
        raise IndexError("No scheduled calls")

    def run_all(self, limit: int = 200) -> int:
        """Run queued calls (including ones they schedule) up to `limit`."""
        ran = 0
        while self.calls and ran < limit:
            self.run_next()
            ran += 1
        return ran


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def store(config: Config, clock: FakeClock) -> InMemorySessionStore:
    """Store on a fake clock with a seeded name generator."""
    return InMemorySessionStore(config, clock=clock, rng=random.Random(0))


@pytest.fixture
def arbiter() -> MoveArbiter:
    return MoveArbiter()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def driver(arbiter: MoveArbiter, scheduler: ManualScheduler) -> BotDriver:
    """Bot driver with a seeded random strategy and a manual scheduler."""
    return BotDriver(arbiter, RandomStrategy(random.Random(1)), scheduler, rng=random.Random(2))


@pytest.fixture
def started_match(store: InMemorySessionStore):
    """Two humans seated and started: alice is WHITE, bob is BLACK."""
    match, _, _ = store.find_or_create("alice")
    store.find_or_create("bob")
    store.start(match.id)
    return match
