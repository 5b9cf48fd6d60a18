"""
Configuration and strategy registry.
"""

from pico_chess.agent.greedy import GreedyStrategy
from pico_chess.agent.strategy import RandomStrategy


# ---------------------------------------------------------------------------
# Strategy Registry
# ---------------------------------------------------------------------------

STRATEGIES = {
    "greedy": GreedyStrategy,
    "random": RandomStrategy,
}


# ---------------------------------------------------------------------------
# Default Settings
# ---------------------------------------------------------------------------

# Bot identity used when a bot stands in for a missing opponent
BOT_PLAYER_ID = "bot_kodiak"
BOT_PLAYER_NAME = "Kodiak"

PLAYER_NAMES = (
    "ChessKnight", "PawnMaster", "RookRider", "BishopBoss", "QueenSlayer",
    "KingDefender", "ChessWizard", "BoardMaster", "TacticalGenius",
    "StrategicMind", "ChessLegend", "GameChanger", "PiecePlayer",
    "Movemaker", "ChessChamp", "BoardWarrior", "TacticTitan", "StrategyKing",
)


class Config:
    """
    Session timing and bot settings. All durations are in seconds.

    Args:
        bot_think_min, bot_think_max: Bounds of the bot's random thinking time.
        bot_reply_delay: Pause before the bot driver is invoked after a human move.
        bot_substitute_after: Wait before a bot joins a lone waiting player.
        join_window: How long a waiting room accepts a second player.
        max_idle: Rooms idle for longer than this are swept.
        sweep_interval: Period of the expiry sweep.
        move_time_limit: Per-move clock; the side to move loses when it runs out.
        strategy: Key into STRATEGIES for the bot.
    """

    def __init__(
        self,
        bot_think_min: float = 1.0,
        bot_think_max: float = 3.0,
        bot_reply_delay: float = 1.0,
        bot_substitute_after: float = 60.0,
        join_window: float = 5 * 60.0,
        max_idle: float = 30 * 60.0,
        sweep_interval: float = 5 * 60.0,
        move_time_limit: float = 30.0,
        strategy: str = "greedy",
    ):
        durations = {
            "bot_think_min": bot_think_min,
            "bot_think_max": bot_think_max,
            "bot_reply_delay": bot_reply_delay,
            "bot_substitute_after": bot_substitute_after,
            "join_window": join_window,
            "max_idle": max_idle,
            "sweep_interval": sweep_interval,
            "move_time_limit": move_time_limit,
        }
        negative = [name for name, value in durations.items() if value < 0]
        if negative:
            raise ValueError(f"Durations must be non-negative: {', '.join(negative)}")
        if bot_think_min > bot_think_max:
            raise ValueError(
                f"bot_think_min ({bot_think_min}) exceeds bot_think_max ({bot_think_max})"
            )
        if strategy not in STRATEGIES:
            available = ", ".join(STRATEGIES.keys())
            raise ValueError(f"Unknown strategy: {strategy}. Available: {available}")

        self.bot_think_min = bot_think_min
        self.bot_think_max = bot_think_max
        self.bot_reply_delay = bot_reply_delay
        self.bot_substitute_after = bot_substitute_after
        self.join_window = join_window
        self.max_idle = max_idle
        self.sweep_interval = sweep_interval
        self.move_time_limit = move_time_limit
        self.strategy = strategy


# Default configuration
DEFAULT_CONFIG = Config()
