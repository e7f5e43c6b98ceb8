"""Rich terminal rendering of match snapshots.

Purely presentational: builds renderables from a :class:`BattleMatch` and never
touches engine state.
"""
from __future__ import annotations
from typing import List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.box import ROUNDED, HEAVY

from .models import BattleMatch, BattleParticipant, MAX_ENERGY, MAX_HEALTH, OPPONENT, PLAYER

console = Console()

RARITY_STYLES = {
    "common": "grey70",
    "rare": "dodger_blue2",
    "epic": "medium_purple",
    "legendary": "gold1",
}


def _bar(cur: int, max_val: int, width: int = 20) -> Text:
    cur = max(0, min(cur, max_val))
    ratio = cur / max_val if max_val > 0 else 0
    filled = int(round(ratio * width))
    if ratio > 0.5:
        color = "green"
    elif ratio > 0.2:
        color = "yellow"
    else:
        color = "red"
    bar = Text("█" * filled, style=color)
    bar.append("░" * (width - filled), style="grey37")
    bar.append(f" {cur}/{max_val}")
    return bar


def hand_table(p: BattleParticipant, *, show_cards: bool = True) -> Table:
    t = Table(box=ROUNDED, show_header=True, header_style="bold")
    t.add_column("#", justify="right")
    t.add_column("Card")
    t.add_column("Cost", justify="right")
    t.add_column("ATK/HP", justify="center")
    t.add_column("Abilities")
    for i, c in enumerate(p.hand, 1):
        if not show_cards:
            t.add_row(str(i), "?", "", "", "")
            continue
        cost_style = "bold" if c.cost <= p.energy else "dim"
        t.add_row(
            str(i),
            Text(c.name, style=RARITY_STYLES.get(c.rarity, "")),
            Text(str(c.cost), style=cost_style),
            f"{c.attack}/{c.health}" if c.kind == "creature" else c.kind,
            ", ".join(c.abilities),
        )
    return t


def participant_panel(p: BattleParticipant, *, active: bool, show_hand: bool) -> Panel:
    lines = Table.grid(padding=(0, 1))
    lines.add_row("Health", _bar(p.health, MAX_HEALTH))
    lines.add_row("Energy", _bar(p.energy, MAX_ENERGY, width=10))
    lines.add_row("Deck", f"{len(p.draw_pile)} cards")
    if p.board:
        lines.add_row("Board", ", ".join(f"{b.name} ({b.current_health})" for b in p.board))
    if p.effects:
        lines.add_row("Effects", ", ".join(f"{k} {v}" for k, v in sorted(p.effects.items())))
    parts = [lines]
    if p.hand:
        parts.append(hand_table(p, show_cards=show_hand))
    title = f"[bold]{p.name}[/bold]" + (" [green]◀ to act[/green]" if active else "")
    return Panel(Group(*parts), title=title, box=HEAVY if active else ROUNDED)


def log_panel(match: BattleMatch, lines: int = 6) -> Panel:
    tail = match.log[-lines:] if match.log else ["(no actions yet)"]
    return Panel("\n".join(tail), title="Battle log", box=ROUNDED)


def status_text(match: BattleMatch) -> str:
    if not match.is_over:
        return f"Round {match.turn_count}: {match.side(match.turn).name}'s turn"
    winner = match.side(match.winner)  # type: ignore[arg-type]
    suffix = " (surrender)" if match.reason == "surrendered" else ""
    return f"{winner.name} wins{suffix}!"


def render_match(match: BattleMatch, *, reveal_opponent: bool = False) -> Group:
    return Group(
        participant_panel(match.opponent, active=match.turn == OPPONENT and not match.is_over,
                          show_hand=reveal_opponent),
        log_panel(match),
        participant_panel(match.player, active=match.turn == PLAYER and not match.is_over, show_hand=True),
        Text(status_text(match), style="bold"),
    )


def draw(match: BattleMatch, *, out: Optional[Console] = None, reveal_opponent: bool = False):
    (out or console).print(render_match(match, reveal_opponent=reveal_opponent))


def new_log_lines(before: BattleMatch, after: BattleMatch) -> List[str]:
    return after.log[len(before.log):]
