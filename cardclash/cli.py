from __future__ import annotations
import argparse
import random
from typing import List, Optional

from cardclash.system.settings import Settings
from cardclash.system.save import Player, ensure_playable_deck, load_player, save_player
from cardclash.core.errors import BattleError
from cardclash.core.logging import logger
from cardclash.battle.engine import BattleEngine
from cardclash.battle.models import BattleMatch, OPPONENT, PLAYER
from cardclash.battle.render import console, draw, new_log_lines
from cardclash.battle.rewards import apply_match_result
from cardclash.battle.session import BattleSession

class GameContext:
    def __init__(self, settings: Settings, player: Optional[Player] = None):
        self.settings = settings
        self.player = player if player is not None else load_player()
        self.engine = BattleEngine(on_status_change=self._on_match_over)
        self.last_result: Optional[BattleMatch] = None

    def _on_match_over(self, match: BattleMatch):
        self.last_result = match

    def new_session(self, *, seed: Optional[int] = None, opponent: int = 0) -> BattleSession:
        rng = random.Random(seed)
        deck = ensure_playable_deck(self.player, rng)
        return BattleSession.vs_generated_opponent(
            deck, rng, opponent,
            engine=self.engine,
            turn_time_limit=self.settings.data.turn_time_limit,
            player_name=self.player.name,
        )

    def finish(self, session: BattleSession):
        """Apply rewards for a finished session and persist the profile."""
        if not session.match.is_over:
            return None
        reward = apply_match_result(self.player, session.match)
        save_player(self.player)
        return reward


def _prompt(session: BattleSession, side: str = PLAYER) -> str:
    hand = session.match.side(side).hand
    label = session.match.side(side).name
    raw = input(f"{label}: play # / [e]nd turn / [s]urrender > ").strip().lower()
    if raw in ("e", "end"):
        return "end"
    if raw in ("s", "surrender"):
        return "surrender"
    if raw.isdigit() and 1 <= int(raw) <= len(hand):
        return hand[int(raw) - 1].id
    return ""


def _take_turn(session: BattleSession, side: str):
    choice = _prompt(session, side)
    try:
        if choice == "end":
            session.end_turn()
        elif choice == "surrender":
            session.surrender(side)
        elif choice:
            session.play(choice, side)
        else:
            console.print("[yellow]Unrecognised choice.[/yellow]")
    except BattleError as e:
        console.print(f"[yellow]{e}[/yellow]")


def play_interactive(ctx: GameContext, session: BattleSession):
    """Prompt for the player's moves; the opponent is the AI unless ``auto_opponent`` is off."""
    auto_opponent = ctx.settings.data.auto_opponent
    while not session.match.is_over:
        side = session.match.turn
        if side == OPPONENT and auto_opponent:
            before = session.match
            session.opponent_turn()
            for line in new_log_lines(before, session.match):
                console.print(f"[red]»[/red] {line}")
            continue
        draw(session.match, reveal_opponent=side == OPPONENT)
        _take_turn(session, side)
    draw(session.match, reveal_opponent=True)


def play_auto(ctx: GameContext, session: BattleSession, max_turns: int = 200) -> str:
    outcome = session.run_auto(max_turns=max_turns)
    if ctx.settings.data.debug:
        for line in session.log:
            console.print(line)
    draw(session.match, reveal_opponent=True)
    return outcome


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Card Clash terminal battle")
    parser.add_argument("--seed", type=int, default=None, help="Seed for deck shuffles and opponent generation")
    parser.add_argument("--opponent", type=int, default=0, help="Opponent index (0-4)")
    parser.add_argument("--auto", action="store_true", help="Let the AI play both sides")
    parser.add_argument("--no-save", action="store_true", help="Do not write rewards to the profile")
    return parser


def run(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    settings = Settings.load()
    settings.apply()
    ctx = GameContext(settings)
    session = ctx.new_session(seed=args.seed, opponent=args.opponent)
    logger.debug("SessionStart", seed=args.seed, opponent=args.opponent, auto=args.auto)
    if args.auto:
        play_auto(ctx, session)
    else:
        play_interactive(ctx, session)
    if args.no_save:
        return session
    reward = ctx.finish(session)
    if reward:
        console.print(f"+{reward.experience} XP, +{reward.coins} coins (level {ctx.player.level})")
    return session
