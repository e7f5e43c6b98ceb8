"""Card catalog loading and procedural card/deck generation.

The starter catalog is a JSON document under ``assets/cards`` validated against
``schema/card.schema.json``. Generated cards and opponent decks take an explicit
``random.Random`` so a seed reproduces them exactly.
"""
from __future__ import annotations
import json
import random
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import jsonschema

from cardclash.core.errors import DataLoadError, ValidationError
from cardclash.core.logging import logger
from cardclash.core.paths import CARD_SCHEMA, STARTER_CARDS
from cardclash.battle.models import Card, Deck, KINDS, MIN_DECK_SIZE

# Rarity roll thresholds (cumulative): common 60%, rare 25%, epic 12%, legendary 3%
RARITY_PROBABILITIES: Tuple[Tuple[str, float], ...] = (
    ("common", 0.60),
    ("rare", 0.25),
    ("epic", 0.12),
    ("legendary", 0.03),
)

GENERATED_ABILITIES = ("Taunt", "Quick", "Flying", "Burn", "Heal", "Shield", "Poison")

_PREFIXES = ("Ancient", "Mystic", "Dark", "Golden", "Shadow", "Crystal", "Storm")
_NOUNS = {
    "creature": ("Warrior", "Mage", "Dragon", "Knight", "Archer", "Beast", "Spirit"),
    "spell": ("Bolt", "Shield", "Heal", "Curse", "Blast", "Ward", "Strike"),
    "artifact": ("Sword", "Shield", "Orb", "Ring", "Amulet", "Crown", "Staff"),
}
_DESCRIPTIONS = {
    "creature": (
        "A mighty warrior ready for battle",
        "Swift and deadly in combat",
        "Protects allies with unwavering loyalty",
        "Strikes fear into enemies",
    ),
    "spell": (
        "Unleash magical energy",
        "Bend reality to your will",
        "Channel ancient powers",
        "Cast devastating magic",
    ),
    "artifact": (
        "A legendary item of power",
        "Enchanted with mystical properties",
        "Forged by ancient masters",
        "Holds incredible magical energy",
    ),
}

OPPONENT_NAMES = ("AI Warrior", "Shadow Master", "Crystal Mage", "Fire Knight", "Ice Queen")


@lru_cache(maxsize=None)
def _schema() -> Dict:
    try:
        return json.loads(CARD_SCHEMA.read_text())
    except (OSError, ValueError) as e:
        raise DataLoadError(str(CARD_SCHEMA), str(e)) from e


def validate_catalog(data: Dict, path: Path | str = "<memory>"):
    try:
        jsonschema.validate(data, _schema())
    except jsonschema.ValidationError as e:
        raise DataLoadError(str(path), f"schema: {e.message}") from e


@lru_cache(maxsize=8)
def _load(path: Path) -> Tuple[Card, ...]:
    try:
        raw = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        raise DataLoadError(str(path), str(e)) from e
    validate_catalog(raw, path)
    try:
        cards = tuple(Card.from_json(c) for c in raw["cards"])
    except ValidationError as e:
        raise DataLoadError(str(path), str(e)) from e
    ids = [c.id for c in cards]
    if len(set(ids)) != len(ids):
        raise DataLoadError(str(path), "duplicate card ids")
    logger.debug("CatalogLoaded", file=str(path), count=len(cards))
    return cards


def load_catalog(path: Optional[Path] = None) -> List[Card]:
    return list(_load(Path(path) if path else STARTER_CARDS))


def get_card(card_id: str, path: Optional[Path] = None) -> Card:
    for c in load_catalog(path):
        if c.id == card_id:
            return c
    raise KeyError(card_id)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def roll_rarity(rng: random.Random) -> str:
    r = rng.random()
    acc = 0.0
    for rarity, p in RARITY_PROBABILITIES:
        acc += p
        if r < acc:
            return rarity
    return RARITY_PROBABILITIES[-1][0]


def _roll_ability(rng: random.Random, cost: int) -> str:
    name = rng.choice(GENERATED_ABILITIES)
    if name in ("Burn", "Heal"):
        return f"{name}:{rng.randint(1, max(1, cost // 2))}"
    if name in ("Shield", "Poison"):
        return f"{name}:1"
    return name


def generate_random_cards(count: int, rng: random.Random, *, id_prefix: str = "random") -> List[Card]:
    cards: List[Card] = []
    for i in range(count):
        rarity = roll_rarity(rng)
        kind = rng.choice(KINDS)
        cost = rng.randint(1, 8)
        spell = kind == "spell"
        cards.append(Card(
            id=f"{id_prefix}-{i}",
            name=f"{rng.choice(_PREFIXES)} {rng.choice(_NOUNS[kind])}",
            description=rng.choice(_DESCRIPTIONS[kind]),
            cost=cost,
            attack=0 if spell else rng.randint(1, cost),
            health=0 if kind != "creature" else rng.randint(1, cost),
            rarity=rarity,
            kind=kind,
            abilities=(_roll_ability(rng, cost),),
        ))
    return cards


def generate_random_deck(cards: List[Card], rng: random.Random, *, size: int = MIN_DECK_SIZE,
                         name: str = "Main Deck") -> Deck:
    pool = list(cards)
    rng.shuffle(pool)
    return Deck(name=name, cards=tuple(pool[:size]), id=f"deck-{rng.randrange(10**8):08d}")


def starter_collection(rng: random.Random) -> List[Card]:
    """Catalog cards plus fifteen generated ones, enough for a legal first deck."""
    return load_catalog() + generate_random_cards(15, rng)


def generate_opponents(rng: random.Random) -> List[Dict[str, object]]:
    """Named AI opponents, each with a generated 20-card deck."""
    opponents: List[Dict[str, object]] = []
    for i, name in enumerate(OPPONENT_NAMES):
        cards = generate_random_cards(20, rng, id_prefix=f"opp{i}")
        opponents.append({
            "id": f"opponent-{i}",
            "name": name,
            "level": rng.randint(1, 10),
            "deck": generate_random_deck(cards, rng, name=f"{name}'s Deck"),
        })
    return opponents


__all__ = [
    "load_catalog", "get_card", "validate_catalog", "roll_rarity", "generate_random_cards",
    "generate_random_deck", "starter_collection", "generate_opponents", "OPPONENT_NAMES",
]
