"""Card, deck and battle-state data classes.

Cards and decks are template data and never change during a match. Everything
that does change (health, energy, hand, board) lives on :class:`BattleParticipant`
inside a :class:`BattleMatch`.
"""
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from cardclash.core.errors import InvalidDeckError, ValidationError

STARTING_HEALTH = 100
MAX_HEALTH = 100
STARTING_ENERGY = 3
MAX_ENERGY = 10
ENERGY_PER_TURN = 1
STARTING_HAND_SIZE = 5
MIN_DECK_SIZE = 20
MAX_DECK_SIZE = 30
TURN_TIME_LIMIT = 30  # seconds, enforced by the caller's timer

RARITIES = ("common", "rare", "epic", "legendary")
KINDS = ("creature", "spell", "artifact")

PLAYER = "player"
OPPONENT = "opponent"
SIDES = (PLAYER, OPPONENT)

IN_PROGRESS = "in_progress"
PLAYER_WON = "player_won"
OPPONENT_WON = "opponent_won"

REASON_HEALTH = "health"
REASON_SURRENDERED = "surrendered"

WIN_STATUS = {PLAYER: PLAYER_WON, OPPONENT: OPPONENT_WON}


def other_side(side: str) -> str:
    return OPPONENT if side == PLAYER else PLAYER


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    cost: int
    attack: int = 0
    health: int = 0
    rarity: str = "common"
    kind: str = "creature"
    abilities: Tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self):
        for stat in ("cost", "attack", "health"):
            if int(getattr(self, stat)) < 0:
                raise ValidationError(f"Card '{self.id}' has negative {stat}")
        if self.rarity not in RARITIES:
            raise ValidationError(f"Card '{self.id}' has unknown rarity '{self.rarity}'")
        if self.kind not in KINDS:
            raise ValidationError(f"Card '{self.id}' has unknown kind '{self.kind}'")
        # Accept lists from JSON but keep the template hashable
        if not isinstance(self.abilities, tuple):
            object.__setattr__(self, "abilities", tuple(self.abilities))

    def to_json(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "cost": self.cost,
            "attack": self.attack,
            "health": self.health,
            "rarity": self.rarity,
            "type": self.kind,
            "abilities": list(self.abilities),
        }

    @classmethod
    def from_json(cls, data: Dict[str, object]) -> "Card":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            cost=int(data.get("cost", 0)),  # type: ignore[arg-type]
            attack=int(data.get("attack", 0)),  # type: ignore[arg-type]
            health=int(data.get("health", 0)),  # type: ignore[arg-type]
            rarity=str(data.get("rarity", "common")),
            kind=str(data.get("type", data.get("kind", "creature"))),
            abilities=tuple(data.get("abilities") or ()),  # type: ignore[arg-type]
            description=str(data.get("description", "")),
        )


@dataclass
class Deck:
    name: str
    cards: Tuple[Card, ...] = ()
    id: str = ""
    is_active: bool = True

    def __post_init__(self):
        self.cards = tuple(self.cards)
        if not self.id:
            self.id = f"deck-{self.name.lower().replace(' ', '-')}"

    def __len__(self) -> int:
        return len(self.cards)

    def validate_for_play(self):
        """Raise InvalidDeckError unless the deck respects the player build limits."""
        n = len(self.cards)
        if n < MIN_DECK_SIZE:
            raise InvalidDeckError(f"Deck '{self.name}' has {n} cards; minimum is {MIN_DECK_SIZE}")
        if n > MAX_DECK_SIZE:
            raise InvalidDeckError(f"Deck '{self.name}' has {n} cards; maximum is {MAX_DECK_SIZE}")

    def card_count(self, card_id: str) -> int:
        return sum(1 for c in self.cards if c.id == card_id)

    def stats(self) -> Dict[str, object]:
        total_cost = sum(c.cost for c in self.cards)
        avg = round(total_cost / len(self.cards), 1) if self.cards else 0.0
        return {
            "count": len(self.cards),
            "average_cost": avg,
            "kinds": dict(Counter(c.kind for c in self.cards)),
        }

    def to_json(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "is_active": self.is_active,
                "cards": [c.to_json() for c in self.cards]}

    @classmethod
    def from_json(cls, data: Dict[str, object]) -> "Deck":
        cards = tuple(Card.from_json(c) for c in data.get("cards", []))  # type: ignore[union-attr]
        return cls(name=str(data.get("name", "Deck")), cards=cards,
                   id=str(data.get("id", "")), is_active=bool(data.get("is_active", True)))


def build_deck(name: str, cards, *, deck_id: str = "") -> Deck:
    """Create a player-built deck, enforcing the size limits."""
    deck = Deck(name=name, cards=tuple(cards), id=deck_id)
    deck.validate_for_play()
    return deck


@dataclass
class BoardCreature:
    card: Card
    current_health: int
    keywords: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.card.name


@dataclass
class BattleParticipant:
    name: str
    health: int = STARTING_HEALTH
    energy: int = STARTING_ENERGY
    hand: List[Card] = field(default_factory=list)
    draw_pile: List[Card] = field(default_factory=list)
    board: List[BoardCreature] = field(default_factory=list)
    discard: List[Card] = field(default_factory=list)
    effects: Dict[str, int] = field(default_factory=dict)
    damage_dealt: int = 0

    def find_in_hand(self, card_id: str) -> Optional[int]:
        for i, c in enumerate(self.hand):
            if c.id == card_id:
                return i
        return None

    def draw(self, count: int = 1) -> List[Card]:
        drawn: List[Card] = []
        for _ in range(count):
            if not self.draw_pile:
                break
            card = self.draw_pile.pop(0)
            self.hand.append(card)
            drawn.append(card)
        return drawn

    def effect(self, name: str) -> int:
        return self.effects.get(name, 0)

    def is_defeated(self) -> bool:
        return self.health <= 0


@dataclass
class BattleMatch:
    player: BattleParticipant
    opponent: BattleParticipant
    turn: str = PLAYER
    turn_count: int = 1
    log: List[str] = field(default_factory=list)
    status: str = IN_PROGRESS
    reason: Optional[str] = None
    seed: Optional[int] = None

    def side(self, name: str) -> BattleParticipant:
        if name == PLAYER:
            return self.player
        if name == OPPONENT:
            return self.opponent
        raise KeyError(name)

    @property
    def is_over(self) -> bool:
        return self.status != IN_PROGRESS

    @property
    def winner(self) -> Optional[str]:
        if self.status == PLAYER_WON:
            return PLAYER
        if self.status == OPPONENT_WON:
            return OPPONENT
        return None


__all__ = [
    "Card", "Deck", "BoardCreature", "BattleParticipant", "BattleMatch", "build_deck", "other_side",
    "PLAYER", "OPPONENT", "SIDES", "IN_PROGRESS", "PLAYER_WON", "OPPONENT_WON",
    "REASON_HEALTH", "REASON_SURRENDERED", "WIN_STATUS",
    "STARTING_HEALTH", "MAX_HEALTH", "STARTING_ENERGY", "MAX_ENERGY", "ENERGY_PER_TURN",
    "STARTING_HAND_SIZE", "MIN_DECK_SIZE", "MAX_DECK_SIZE", "TURN_TIME_LIMIT",
]
