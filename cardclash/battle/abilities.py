"""Ability tag parsing and effect handlers.

Tags are plain strings on card templates: ``"Taunt"`` (flag) or
``"Heal:5"`` (magnitude). Handlers are looked up by name; a tag with no
handler and no keyword meaning resolves as a logged no-op so new content can
ship before the engine learns about it.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, TYPE_CHECKING
import re

from .models import BattleMatch, MAX_ENERGY, other_side

if TYPE_CHECKING:
    from .engine import BattleEngine

_TAG_RE = re.compile(r"^\s*([A-Za-z][A-Za-z _-]*?)\s*(?::\s*(-?\d+)\s*)?$")

# Flag abilities carried by creatures; no numeric effect on their own
KEYWORDS = frozenset({"Taunt", "Flying", "Quick", "Freeze", "Shield", "Poison", "Burn", "Heal"})

# Magnitude abilities that go into the owner's standing effect bag
PERSISTENT = frozenset({"Shield", "Poison"})

# Bag entry fed by an artifact's attack stat
POWER = "Power"


@dataclass(frozen=True)
class Ability:
    name: str
    amount: Optional[int] = None
    raw: str = ""

    @property
    def is_flag(self) -> bool:
        return self.amount is None


def parse_ability(tag: str) -> Optional[Ability]:
    """Parse ``Name`` / ``Name:amount``. Returns None for malformed tags."""
    m = _TAG_RE.match(tag or "")
    if not m:
        return None
    name, amount = m.group(1), m.group(2)
    if amount is not None and int(amount) < 0:
        return None
    return Ability(name=name, amount=int(amount) if amount is not None else None, raw=tag)


def is_keyword(ability: Optional[Ability]) -> bool:
    return ability is not None and ability.is_flag and ability.name in KEYWORDS


# ---------------------------------------------------------------------------
# On-cast handlers: (engine, match, acting side, amount) -> None
# ---------------------------------------------------------------------------
Handler = Callable[["BattleEngine", BattleMatch, str, int], None]


def _heal(engine: "BattleEngine", match: BattleMatch, side: str, amount: int):
    healed = engine.apply_heal(match, side, amount)
    match.log.append(f"{match.side(side).name} heals {healed} (health {match.side(side).health}).")


def _burn(engine: "BattleEngine", match: BattleMatch, side: str, amount: int):
    target = other_side(side)
    dealt = engine.apply_damage(match, side, target, amount)
    match.log.append(f"Burn deals {dealt} damage to {match.side(target).name}.")


def _draw(engine: "BattleEngine", match: BattleMatch, side: str, amount: int):
    drawn = match.side(side).draw(amount)
    match.log.append(f"{match.side(side).name} draws {len(drawn)} card(s).")


def _energy(engine: "BattleEngine", match: BattleMatch, side: str, amount: int):
    p = match.side(side)
    before = p.energy
    p.energy = min(MAX_ENERGY, p.energy + amount)
    match.log.append(f"{p.name} gains {p.energy - before} energy.")


def _persist(name: str) -> Handler:
    def handler(engine: "BattleEngine", match: BattleMatch, side: str, amount: int):
        p = match.side(side)
        p.effects[name] = p.effects.get(name, 0) + amount
        match.log.append(f"{p.name} gains {name} {amount} (now {p.effects[name]}).")
    return handler


ON_CAST: Dict[str, Handler] = {
    "Heal": _heal,
    "Burn": _burn,
    "Damage": _burn,
    "Draw": _draw,
    "Energy": _energy,
}
ON_CAST.update({name: _persist(name) for name in PERSISTENT})

__all__ = ["Ability", "parse_ability", "is_keyword", "KEYWORDS", "PERSISTENT", "POWER", "ON_CAST"]
