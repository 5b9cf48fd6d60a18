"""
Factory functions for creating strategies and wiring a session stack.
"""

import random
from typing import Optional

from pico_chess.agent.strategy import Strategy
from pico_chess.session.arbiter import MoveArbiter
from pico_chess.session.bot import BotDriver, Listener
from pico_chess.session.scheduler import Scheduler, TimerScheduler
from pico_chess.session.store import InMemorySessionStore
from pico_chess.utils.config import DEFAULT_CONFIG, STRATEGIES, Config


def create_strategy(name: str, **kwargs) -> Strategy:
    """
    Create a bot strategy by registry name.

    Args:
        name: Key from STRATEGIES (e.g., "greedy")
        **kwargs: Passed to the strategy constructor (e.g., rng=...)

    Returns:
        Configured strategy instance
    """
    if name not in STRATEGIES:
        available = ", ".join(STRATEGIES.keys())
        raise ValueError(f"Unknown strategy: {name}. Available: {available}")
    return STRATEGIES[name](**kwargs)


def create_session(
    config: Config = DEFAULT_CONFIG,
    scheduler: Optional[Scheduler] = None,
    seed: Optional[int] = None,
    listener: Optional[Listener] = None,
):
    """
    Build a ready-to-use store, arbiter and bot driver.

    The arbiter is hooked to the driver, so every accepted human action
    schedules the bot's reply when the bot is on turn.

    Args:
        config: Timing and strategy settings
        scheduler: Delayed-call backend (TimerScheduler by default)
        seed: Seeds every random source, for reproducible games
        listener: Broadcast hook passed to the bot driver

    Returns:
        (store, arbiter, bot_driver)
    """
    rng = random.Random(seed)
    store = InMemorySessionStore(config, rng=random.Random(rng.random()))
    arbiter = MoveArbiter()
    strategy = create_strategy(config.strategy, rng=random.Random(rng.random()))
    driver = BotDriver(
        arbiter,
        strategy,
        scheduler or TimerScheduler(),
        rng=random.Random(rng.random()),
        listener=listener,
    )
    arbiter.on_accept = driver.reply_to
    return store, arbiter, driver
