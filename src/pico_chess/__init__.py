"""
Pico Chess - a 6x6 chess variant with captured-piece drops.

This package provides the rules engine, a session layer that arbitrates
actions from two players (or a player and a bot), and simple bot
strategies.

Quick Start:
    from pico_chess import create_session, MoveAction, Position

    store, arbiter, driver = create_session(seed=7)
    match, player, _ = store.find_or_create("alice")
    driver.substitute(store, "alice")
    arbiter.submit(store, "alice", MoveAction(Position(1, 0), Position(2, 0)))

Modules:
    core     - Fundamental types (colors, pieces, positions, actions), hashing
    engine   - Game state, move generation, rules, transitions, wire codec
    agent    - Bot strategies
    session  - Matches, the session store, the move arbiter, the bot driver
"""

from pico_chess.api import play_match, parse_action

from pico_chess.core import (
    Color,
    PieceType,
    Position,
    Piece,
    MoveAction,
    DropAction,
    PromotionAction,
)
from pico_chess.engine import GameState, initial_state
from pico_chess.session import MoveArbiter, InMemorySessionStore, BotDriver, Outcome
from pico_chess.utils.config import Config, DEFAULT_CONFIG
from pico_chess.utils.factory import create_session, create_strategy

__version__ = "1.0.0"

__all__ = [
    # Main API
    "play_match",
    "parse_action",
    "create_session",
    "create_strategy",
    "Config",
    "DEFAULT_CONFIG",
    # Types
    "Color",
    "PieceType",
    "Position",
    "Piece",
    "MoveAction",
    "DropAction",
    "PromotionAction",
    "GameState",
    "initial_state",
    # Session
    "MoveArbiter",
    "InMemorySessionStore",
    "BotDriver",
    "Outcome",
]
