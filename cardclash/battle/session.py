"""Session orchestration around a single match.

Holds the current :class:`BattleMatch` snapshot, forwards actions to the
engine, drives the turn timer and lets the AI play either side.
"""
from __future__ import annotations
from typing import Callable, List, Optional, Union
import random

from .ai import choose_card
from .engine import BattleEngine, SeedLike
from .models import BattleMatch, Card, Deck, OPPONENT, PLAYER, TURN_TIME_LIMIT

STALEMATE = "stalemate"
_MAX_PLAYS_PER_TURN = 50


class BattleSession:
    def __init__(self, player_deck: Union[Deck, List[Card]], opponent_deck: Union[Deck, List[Card]],
                 seed: SeedLike = None, *, engine: Optional[BattleEngine] = None,
                 turn_time_limit: int = TURN_TIME_LIMIT, player_name: str = "Player",
                 opponent_name: str = "Opponent"):
        self.engine = engine or BattleEngine()
        self.turn_time_limit = turn_time_limit
        self.elapsed = 0.0
        self.history: List[BattleMatch] = []
        self._listeners: List[Callable[[BattleMatch], None]] = []
        self.match = self.engine.start_match(player_deck, opponent_deck, seed,
                                             player_name=player_name, opponent_name=opponent_name)
        self.history.append(self.match)

    @property
    def log(self) -> List[str]:
        return self.match.log

    def on_update(self, fn: Callable[[BattleMatch], None]):
        self._listeners.append(fn)

    def _set(self, match: BattleMatch) -> BattleMatch:
        turn_changed = match.turn != self.match.turn
        self.match = match
        self.history.append(match)
        if turn_changed:
            self.elapsed = 0.0
        for fn in self._listeners:
            fn(match)
        return match

    # --- Actions ---------------------------------------------------------
    def play(self, card_id: str, side: str = PLAYER) -> BattleMatch:
        return self._set(self.engine.play_card(self.match, side, card_id))

    def end_turn(self) -> BattleMatch:
        return self._set(self.engine.end_turn(self.match))

    def surrender(self, side: str = PLAYER) -> BattleMatch:
        return self._set(self.engine.surrender(self.match, side))

    def tick(self, seconds: float) -> bool:
        """Advance the turn timer; returns True if the turn was force-ended."""
        if self.match.is_over or self.turn_time_limit <= 0:
            return False
        self.elapsed += seconds
        if self.elapsed < self.turn_time_limit:
            return False
        self._set(self.engine.force_end_turn(self.match))
        self.elapsed = 0.0
        return True

    # --- AI --------------------------------------------------------------
    def ai_turn(self, side: str) -> List[Card]:
        """Let the AI play ``side``'s current turn, then end it."""
        played: List[Card] = []
        for _ in range(_MAX_PLAYS_PER_TURN):
            card = choose_card(self.match, side)
            if card is None:
                break
            self.play(card.id, side)
            played.append(card)
        if not self.match.is_over:
            self.end_turn()
        return played

    def opponent_turn(self) -> List[Card]:
        return self.ai_turn(OPPONENT) if self.match.turn == OPPONENT else []

    def run_auto(self, max_turns: int = 200) -> str:
        while not self.match.is_over and self.match.turn_count <= max_turns:
            self.ai_turn(self.match.turn)
        return self.outcome()

    def outcome(self) -> str:
        if self.match.is_over:
            return self.match.status
        return STALEMATE

    @classmethod
    def vs_generated_opponent(cls, player_deck: Deck, rng: random.Random, index: int = 0,
                              **kwargs) -> "BattleSession":
        from cardclash.data.cards import generate_opponents
        opponents = generate_opponents(rng)
        opp = opponents[index % len(opponents)]
        return cls(player_deck, opp["deck"], rng.randrange(2**32),  # type: ignore[arg-type]
                   opponent_name=str(opp["name"]), **kwargs)


__all__ = ["BattleSession", "STALEMATE"]
