"""
Session module - matches, storage, the move arbiter and the bot driver.

Sits between a transport (websocket server, CLI, tests) and the pure
rules engine:

    transport ─► MoveArbiter(store) ─► engine
                     ▲
    BotDriver ───────┘  (same path, scheduled)
"""

from pico_chess.session.match import Match, Player, Outcome, EndReason, evaluate_outcome
from pico_chess.session.store import SessionStore, InMemorySessionStore
from pico_chess.session.arbiter import MoveArbiter, Verdict, Rejection, arbitrate
from pico_chess.session.scheduler import Scheduler, TimerScheduler
from pico_chess.session.bot import BotDriver

__all__ = [
    "Match",
    "Player",
    "Outcome",
    "EndReason",
    "evaluate_outcome",
    "SessionStore",
    "InMemorySessionStore",
    "MoveArbiter",
    "Verdict",
    "Rejection",
    "arbitrate",
    "Scheduler",
    "TimerScheduler",
    "BotDriver",
]
