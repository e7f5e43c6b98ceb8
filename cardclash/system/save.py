from __future__ import annotations
import json, os, time
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import List, Dict, Any, Optional
import random

from cardclash.core.logging import logger
from cardclash.battle.models import Card, Deck, MIN_DECK_SIZE
from cardclash.core.errors import InvalidDeckError

SAVE_DIR_NAME = ".cardclash_saves"
PROFILE_FILENAME = "profile.json"

STARTING_COINS = 500
STARTING_GEMS = 50

@dataclass
class PlayerStats:
    games_played: int = 0
    games_won: int = 0
    total_damage_dealt: int = 0
    favorite_card: str | None = None

@dataclass
class Player:
    id: str = "player-1"
    name: str = "Player"
    level: int = 1
    experience: int = 0
    coins: int = STARTING_COINS
    gems: int = STARTING_GEMS
    cards: List[Card] = field(default_factory=list)
    decks: List[Deck] = field(default_factory=list)
    stats: PlayerStats = field(default_factory=PlayerStats)
    last_save_ts: float = 0.0
    version: int = 1

    def active_deck(self) -> Optional[Deck]:
        for d in self.decks:
            if d.is_active:
                return d
        return self.decks[0] if self.decks else None

    def set_active_deck(self, deck: Deck):
        """Replace (by id) or append ``deck`` and make it the only active one."""
        deck.validate_for_play()
        deck.is_active = True
        kept = [d for d in self.decks if d.id != deck.id]
        for d in kept:
            d.is_active = False
        self.decks = kept + [deck]

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "experience": self.experience,
            "coins": self.coins,
            "gems": self.gems,
            "cards": [c.to_json() for c in self.cards],
            "decks": [d.to_json() for d in self.decks],
            "stats": asdict(self.stats),
            "last_save_ts": self.last_save_ts,
            "version": self.version,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Player":
        # Backward-compatible fill
        stats_raw = data.get("stats", {}) or {}
        stats = PlayerStats(
            games_played=stats_raw.get("games_played", stats_raw.get("gamesPlayed", 0)),
            games_won=stats_raw.get("games_won", stats_raw.get("gamesWon", 0)),
            total_damage_dealt=stats_raw.get("total_damage_dealt", stats_raw.get("totalDamageDealt", 0)),
            favorite_card=stats_raw.get("favorite_card", stats_raw.get("favoriteCard")),
        )
        return cls(
            id=data.get("id", "player-1"),
            name=data.get("name", "Player"),
            level=data.get("level", 1),
            experience=data.get("experience", 0),
            coins=data.get("coins", STARTING_COINS),
            gems=data.get("gems", STARTING_GEMS),
            cards=[Card.from_json(c) for c in data.get("cards", [])],
            decks=[Deck.from_json(d) for d in data.get("decks", [])],
            stats=stats,
            last_save_ts=data.get("last_save_ts", 0.0),
            version=data.get("version", 1),
        )


def new_player(name: str = "Player", rng: random.Random | None = None) -> Player:
    """First-time profile: starter collection plus a generated active deck."""
    from cardclash.data.cards import starter_collection, generate_random_deck
    rng = rng or random.Random()
    cards = starter_collection(rng)
    deck = generate_random_deck(cards, rng)
    return Player(name=name, cards=cards, decks=[deck])


def ensure_playable_deck(player: Player, rng: random.Random) -> Deck:
    """Return the active deck, rebuilding it when it breaks the size limits.

    Old or hand-edited profiles can carry no cards or an undersized deck; the
    collection is topped up with the starter set before a new deck is dealt.
    """
    from cardclash.data.cards import starter_collection, generate_random_deck
    deck = player.active_deck()
    if deck is not None:
        try:
            deck.validate_for_play()
            return deck
        except InvalidDeckError as e:
            logger.warn("ActiveDeckInvalid", deck=deck.id, error=str(e))
    if len(player.cards) < MIN_DECK_SIZE:
        player.cards = player.cards + starter_collection(rng)
    rebuilt = generate_random_deck(player.cards, rng)
    player.set_active_deck(rebuilt)
    logger.info("ActiveDeckRebuilt", deck=rebuilt.id, cards=len(rebuilt))
    return rebuilt


def _save_dir() -> Path:
    home = Path(os.path.expanduser("~"))
    path = home / SAVE_DIR_NAME
    path.mkdir(parents=True, exist_ok=True)
    return path

def _profile_path() -> Path:
    return _save_dir() / PROFILE_FILENAME


def save_player(player: Player) -> Path:
    """Write the single profile file."""
    player.last_save_ts = time.time()
    path = _profile_path()
    path.write_text(json.dumps(player.to_json(), indent=2))
    logger.info("ProfileSaved", file=str(path))
    return path


def load_player(default_name: str = "Player") -> Player:
    """Load the saved profile, or create a fresh one when none is readable."""
    path = _profile_path()
    if path.exists():
        try:
            data = json.loads(path.read_text())
            player = Player.from_json(data)
            logger.debug("ProfileLoaded", file=str(path))
            return player
        except Exception as e:
            logger.error("ProfileLoadFailed", file=str(path), error=str(e))
    return new_player(default_name)


def delete_profile() -> None:
    p = _profile_path()
    if p.exists():
        p.unlink()
        logger.debug("ProfileDeleted", file=str(p))
