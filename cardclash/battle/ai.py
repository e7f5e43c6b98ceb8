from __future__ import annotations
from typing import Optional

from .abilities import parse_ability
from .engine import BattleEngine
from .models import BattleMatch, Card, MAX_HEALTH


def score_card(card: Card, health: int) -> int:
    score = card.attack
    for tag in card.abilities:
        ab = parse_ability(tag)
        if ab is None or ab.amount is None:
            continue
        if ab.name in ("Burn", "Damage", "Poison"):
            score += ab.amount
        elif ab.name == "Heal":
            score += min(ab.amount, MAX_HEALTH - health)
        elif ab.name in ("Shield", "Draw", "Energy"):
            score += ab.amount
    return score


def choose_card(match: BattleMatch, side: str) -> Optional[Card]:
    """Best affordable card by immediate value; ties go to the cheaper card."""
    playable = BattleEngine.playable_cards(match, side)
    if not playable:
        return None
    health = match.side(side).health
    best = None
    best_key = None
    for c in playable:
        key = (score_card(c, health), -c.cost)
        if best_key is None or key > best_key:
            best_key = key
            best = c
    return best
