"""
Public API: a terminal match loop over the session stack.

Usage:
    from pico_chess import play_match, create_strategy

    play_match(human_colors=[Color.WHITE], strategy=create_strategy("greedy"))

Human input formats:
    1,0 2,0         move from (row 1, col 0) to (row 2, col 0)
    drop N 3,3      drop a knight from hand on (3, 3)
    promote R       finish a pending promotion (R, N or B)
    hint 0,1        list legal destinations of the piece on (0, 1)
    resign
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Optional

from pico_chess.agent.strategy import Strategy
from pico_chess.core.actions import Action, DropAction, MoveAction, PromotionAction, describe_action
from pico_chess.core.types import Color, PieceType, Position
from pico_chess.engine.game_state import GameState
from pico_chess.engine.render import PIECE_LETTERS, state_string
from pico_chess.engine.rules import legal_destinations, pending_promotion
from pico_chess.session.arbiter import MoveArbiter
from pico_chess.session.match import Match, Outcome
from pico_chess.session.store import InMemorySessionStore
from pico_chess.utils.config import DEFAULT_CONFIG, Config

logger = logging.getLogger(__name__)

LETTER_TYPES = {letter: pt for pt, letter in PIECE_LETTERS.items()}

_POS = r"(\d)\s*,\s*(\d)"
_MOVE_RE = re.compile(rf"^{_POS}\s+{_POS}$")
_DROP_RE = re.compile(rf"^drop\s+([A-Za-z])\s+{_POS}$", re.IGNORECASE)
_PROMOTE_RE = re.compile(r"^promote\s+([A-Za-z])$", re.IGNORECASE)
_HINT_RE = re.compile(rf"^hint\s+{_POS}$", re.IGNORECASE)


def _piece_type(letter: str) -> PieceType:
    try:
        return LETTER_TYPES[letter.upper()]
    except KeyError:
        raise ValueError(f"Unknown piece letter: {letter!r}") from None


def parse_action(text: str, state: GameState) -> Action:
    """
    Parse one line of human input into an action.

    Raises:
        ValueError: if the text matches no known format.
    """
    text = text.strip()

    if m := _MOVE_RE.match(text):
        fr, fc, tr, tc = map(int, m.groups())
        return MoveAction(Position(fr, fc), Position(tr, tc))

    if m := _DROP_RE.match(text):
        return DropAction(_piece_type(m.group(1)), Position(int(m.group(2)), int(m.group(3))))

    if m := _PROMOTE_RE.match(text):
        pending = pending_promotion(state)
        if pending is None:
            raise ValueError("No promotion is pending")
        return PromotionAction(pending, _piece_type(m.group(1)))

    raise ValueError(f"Unrecognized input: {text!r}")


def _human_turn(arbiter: MoveArbiter, store: InMemorySessionStore, match: Match,
                player_id: str, read: Callable[[str], str], write: Callable[[str], None]) -> None:
    """Prompt until the human makes an accepted action (or resigns)."""
    write(f"\nYour turn ({match.state.current_player.value})")
    while True:
        raw = read("> ").strip()

        if raw.lower() == "resign":
            arbiter.resign(store, player_id)
            return

        if m := _HINT_RE.match(raw):
            pos = Position(int(m.group(1)), int(m.group(2)))
            targets = legal_destinations(match.state, pos)
            write(", ".join(f"{r},{c}" for r, c in targets) or "No legal moves")
            continue

        try:
            action = parse_action(raw, match.state)
        except ValueError as e:
            write(f"Invalid input: {e}")
            continue

        verdict = arbiter.submit(store, player_id, action)
        if verdict.accepted:
            write(f"\nYou played: {describe_action(action)}")
            return
        write(f"Illegal action: {verdict.rejection.value}")


def _bot_turn(arbiter: MoveArbiter, store: InMemorySessionStore, match: Match,
              player_id: str, strategy: Strategy, write: Callable[[str], None]) -> bool:
    """Bot picks and submits. Returns False if it had nothing to play."""
    color = match.state.current_player
    action = strategy.choose_action(match.state, color)
    if action is None:
        return False
    verdict = arbiter.submit(store, player_id, action)
    if not verdict.accepted:
        logger.error("Strategy %s proposed rejected action %s", strategy.name, describe_action(action))
        return False
    write(f"\n{strategy.name} ({color.value}) played: {describe_action(action)}")
    return True


def play_match(
    human_colors: Optional[Iterable[Color]] = None,
    strategy: Optional[Strategy] = None,
    config: Config = DEFAULT_CONFIG,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
    turn_limit: Optional[int] = None,
) -> Optional[Outcome]:
    """
    Run one match in the terminal.

    Parameters
    ----------
    human_colors : Iterable[Color], optional
        Colors played from `read`; the rest are played by `strategy`.
        Empty means bot self-play.
    strategy : Strategy
        Bot move selection (required if any color is not human).
    config : Config
        Session settings.
    read, write : callables
        Input/output hooks (``input``/``print`` by default).
    turn_limit : int, optional
        Stop after this many accepted actions (the game has no draw
        rules, so bot self-play may otherwise run forever).

    Returns
    -------
    The final Outcome, or None if the loop stopped without one.

    Raises
    ------
    ValueError
        If a bot side has no strategy.
    RuntimeError
        If `config` keeps the two seats from sharing a room.
    """
    humans = set(human_colors or [])
    if len(humans) < 2 and strategy is None:
        raise ValueError("A strategy is required when any side is played by the bot")

    store = InMemorySessionStore(config)
    arbiter = MoveArbiter()

    white_id, black_id = "white", "black"
    match, _, _ = store.find_or_create(white_id)
    store.find_or_create(black_id)
    for player in match.players:
        player.is_bot = player.color not in humans
    if store.start(match.id) is None:
        raise RuntimeError("Could not seat both players in one room (check Config.join_window)")

    ids = {Color.WHITE: white_id, Color.BLACK: black_id}
    write(state_string(match.state))

    turns = 0
    try:
        while not match.is_over:
            if turn_limit is not None and turns >= turn_limit:
                write(f"\nTurn limit ({turn_limit}) reached")
                break
            color = match.state.current_player
            if color in humans:
                _human_turn(arbiter, store, match, ids[color], read, write)
            elif not _bot_turn(arbiter, store, match, ids[color], strategy, write):
                break
            turns += 1
            write(state_string(match.state))
    except (KeyboardInterrupt, EOFError):
        write("\nInterrupted")
        return None

    write("\n" + "=" * 40)
    write("GAME OVER")
    write("=" * 40)
    if match.outcome is not None:
        winner = match.outcome.winner.value if match.outcome.winner else "nobody"
        write(f"Winner: {winner} ({match.outcome.reason.value})")
    return match.outcome


__all__ = [
    "play_match",
    "parse_action",
]
