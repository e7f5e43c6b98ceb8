"""Battle resolution engine.

Each action takes a :class:`BattleMatch`, validates it, and resolves against a
deep copy, so the caller's value is never mutated and a rejected action leaves
it exactly as it was. The engine keeps no per-match state; the optional
callbacks let a presentation layer react to the snapshots it returns.
"""
from __future__ import annotations
from typing import Callable, Iterable, List, Optional, Union
import copy
import random

from cardclash.core.errors import (
    CardNotInHandError, IllegalActionError, InsufficientEnergyError,
    InvalidDeckError, MatchAlreadyEndedError,
)
from cardclash.core.logging import logger
from .abilities import ON_CAST, PERSISTENT, POWER, is_keyword, parse_ability
from .models import (
    BattleMatch, BattleParticipant, BoardCreature, Card, Deck,
    ENERGY_PER_TURN, IN_PROGRESS, MAX_ENERGY, MAX_HEALTH, OPPONENT, PLAYER,
    REASON_HEALTH, REASON_SURRENDERED, SIDES, STARTING_ENERGY, STARTING_HAND_SIZE,
    STARTING_HEALTH, WIN_STATUS, other_side,
)

MatchCallback = Callable[[BattleMatch], None]
SeedLike = Union[int, random.Random, None]

# Artifact magnitudes that feed another bag entry
_ARTIFACT_ALIASES = {"Burn": POWER, "Damage": POWER}
# Bag entries that do something
_STANDING = PERSISTENT | {"Heal", POWER}


def _deck_cards(deck: Union[Deck, Iterable[Card]]) -> List[Card]:
    if isinstance(deck, Deck):
        return list(deck.cards)
    return list(deck)


class BattleEngine:
    def __init__(self, on_snapshot: Optional[MatchCallback] = None,
                 on_status_change: Optional[MatchCallback] = None):
        self.on_snapshot = on_snapshot
        self.on_status_change = on_status_change

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start_match(self, player_deck: Union[Deck, Iterable[Card]], opponent_deck: Union[Deck, Iterable[Card]],
                    seed: SeedLike = None, *, player_name: str = "Player",
                    opponent_name: str = "Opponent") -> BattleMatch:
        """Shuffle both decks with ``seed`` and deal opening hands.

        The same seed always yields the same hands and draw piles.
        """
        p_cards = _deck_cards(player_deck)
        o_cards = _deck_cards(opponent_deck)
        if not p_cards:
            raise InvalidDeckError("Player deck is empty")
        if not o_cards:
            raise InvalidDeckError("Opponent deck is empty")
        rng = seed if isinstance(seed, random.Random) else random.Random(seed)
        rng.shuffle(p_cards)
        rng.shuffle(o_cards)

        def _participant(name: str, pile: List[Card]) -> BattleParticipant:
            p = BattleParticipant(name=name, health=STARTING_HEALTH, energy=STARTING_ENERGY, draw_pile=pile)
            p.draw(STARTING_HAND_SIZE)
            return p

        match = BattleMatch(
            player=_participant(player_name, p_cards),
            opponent=_participant(opponent_name, o_cards),
            seed=seed if isinstance(seed, int) else None,
        )
        logger.info("MatchStart", player=player_name, opponent=opponent_name, seed=match.seed)
        self._notify(match, IN_PROGRESS)
        return match

    def play_card(self, match: BattleMatch, side: str, card_id: str) -> BattleMatch:
        self._ensure_in_progress(match)
        self._ensure_turn(match, side)
        actor = match.side(side)
        idx = actor.find_in_hand(card_id)
        if idx is None:
            raise CardNotInHandError(side, card_id)
        card = actor.hand[idx]
        if card.cost > actor.energy:
            raise InsufficientEnergyError(card.cost, actor.energy)

        m = copy.deepcopy(match)
        actor = m.side(side)
        actor.energy -= card.cost
        actor.hand.pop(idx)
        m.log.append(f"{actor.name} plays {card.name} ({card.kind}, cost {card.cost}); energy {actor.energy}.")
        logger.debug("PlayCard", side=side, card=card.id, cost=card.cost)

        if card.kind == "creature":
            self._summon(m, side, card)
        elif card.kind == "spell":
            self._cast_spell(m, side, card)
        else:
            self._equip_artifact(m, side, card)

        self._notify(m, match.status)
        return m

    def end_turn(self, match: BattleMatch, *, forced: bool = False) -> BattleMatch:
        self._ensure_in_progress(match)
        m = copy.deepcopy(match)
        ender = m.side(m.turn)
        if forced:
            m.log.append(f"{ender.name}'s turn timer expired.")
        m.log.append(f"Turn ended ({ender.name}).")

        m.turn = other_side(m.turn)
        if m.turn == PLAYER:
            m.turn_count += 1
        actor = m.side(m.turn)
        actor.energy = min(MAX_ENERGY, actor.energy + ENERGY_PER_TURN)
        drawn = actor.draw(1)
        if drawn:
            m.log.append(f"{actor.name} draws a card.")
        m.log.append(f"Round {m.turn_count}: {actor.name} to act with {actor.energy} energy.")
        logger.debug("EndTurn", next=m.turn, round=m.turn_count, forced=forced)

        self._start_of_turn_effects(m, m.turn)
        self._notify(m, match.status)
        return m

    def force_end_turn(self, match: BattleMatch) -> BattleMatch:
        """Entry point for the caller's turn timer; same as :meth:`end_turn`."""
        return self.end_turn(match, forced=True)

    def surrender(self, match: BattleMatch, side: str) -> BattleMatch:
        self._ensure_in_progress(match)
        if side not in SIDES:
            raise IllegalActionError(f"Unknown side '{side}'")
        m = copy.deepcopy(match)
        winner = other_side(side)
        m.status = WIN_STATUS[winner]
        m.reason = REASON_SURRENDERED
        m.log.append(f"{m.side(side).name} surrenders. {m.side(winner).name} wins.")
        self._notify(m, match.status)
        return m

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @staticmethod
    def playable_cards(match: BattleMatch, side: str) -> List[Card]:
        if match.is_over or match.turn != side:
            return []
        p = match.side(side)
        return [c for c in p.hand if c.cost <= p.energy]

    # ------------------------------------------------------------------
    # Health changes (shared with ability handlers)
    # ------------------------------------------------------------------
    def apply_damage(self, match: BattleMatch, source: str, target: str, amount: int) -> int:
        if match.is_over or amount <= 0:
            return 0
        victim = match.side(target)
        dealt = max(0, int(amount) - victim.effect("Shield"))
        dealt = min(dealt, victim.health)
        victim.health -= dealt
        match.side(source).damage_dealt += dealt
        if victim.is_defeated():
            match.status = WIN_STATUS[source]
            match.reason = REASON_HEALTH
            match.log.append(f"{victim.name} is defeated! {match.side(source).name} wins.")
        return dealt

    def apply_heal(self, match: BattleMatch, side: str, amount: int) -> int:
        p = match.side(side)
        old = p.health
        p.health = min(MAX_HEALTH, p.health + max(0, int(amount)))
        return p.health - old

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def _summon(self, m: BattleMatch, side: str, card: Card):
        actor = m.side(side)
        keywords = tuple(a.name for a in map(parse_ability, card.abilities) if is_keyword(a))  # type: ignore[union-attr]
        actor.board.append(BoardCreature(card=card, current_health=card.health, keywords=keywords))
        m.log.append(f"{card.name} enters {actor.name}'s board ({card.attack}/{card.health}).")
        if card.attack > 0:
            self._strike(m, side, card.name, card.attack + actor.effect(POWER))
        self._resolve_abilities(m, side, card)

    def _cast_spell(self, m: BattleMatch, side: str, card: Card):
        if card.attack > 0:
            self._strike(m, side, card.name, card.attack + m.side(side).effect(POWER))
        self._resolve_abilities(m, side, card)
        m.side(side).discard.append(card)

    def _equip_artifact(self, m: BattleMatch, side: str, card: Card):
        actor = m.side(side)
        if card.attack > 0:
            actor.effects[POWER] = actor.effect(POWER) + card.attack
            m.log.append(f"{card.name} grants {actor.name} +{card.attack} power.")
        for tag in card.abilities:
            ab = parse_ability(tag)
            if ab is None:
                self._unknown(m, card, tag)
            elif ab.is_flag:
                m.log.append(f"{card.name}: {ab.name} has no standing effect.")
            else:
                key = _ARTIFACT_ALIASES.get(ab.name, ab.name)
                if key not in _STANDING:
                    self._unknown(m, card, tag)
                    continue
                actor.effects[key] = actor.effect(key) + ab.amount  # type: ignore[operator]
                m.log.append(f"{card.name} grants {actor.name} {key} {ab.amount}.")
        actor.discard.append(card)

    def _strike(self, m: BattleMatch, side: str, source_name: str, amount: int):
        target = other_side(side)
        dealt = self.apply_damage(m, side, target, amount)
        m.log.append(f"{source_name} deals {dealt} damage to {m.side(target).name} (health {m.side(target).health}).")

    def _resolve_abilities(self, m: BattleMatch, side: str, card: Card):
        for tag in card.abilities:
            if m.is_over:
                break
            ab = parse_ability(tag)
            if ab is None:
                self._unknown(m, card, tag)
            elif ab.is_flag:
                if is_keyword(ab):
                    m.log.append(f"{card.name} has {ab.name}.")
                else:
                    self._unknown(m, card, tag)
            elif ab.name in ON_CAST:
                ON_CAST[ab.name](self, m, side, ab.amount)  # type: ignore[arg-type]
            else:
                self._unknown(m, card, tag)

    def _unknown(self, m: BattleMatch, card: Card, tag: str):
        m.log.append(f"{card.name}: ability '{tag}' has no effect.")
        logger.warn("UnknownAbility", card=card.id, tag=tag)

    def _start_of_turn_effects(self, m: BattleMatch, side: str):
        owner = m.side(side)
        heal = owner.effect("Heal")
        if heal:
            healed = self.apply_heal(m, side, heal)
            m.log.append(f"{owner.name}'s artifacts restore {healed} health.")
        poison = owner.effect("Poison")
        if poison:
            target = other_side(side)
            dealt = self.apply_damage(m, side, target, poison)
            m.log.append(f"Poison deals {dealt} damage to {m.side(target).name}.")

    # ------------------------------------------------------------------
    # Guards & notification
    # ------------------------------------------------------------------
    @staticmethod
    def _ensure_in_progress(match: BattleMatch):
        if match.is_over:
            raise MatchAlreadyEndedError(f"Match already ended ({match.status})")

    @staticmethod
    def _ensure_turn(match: BattleMatch, side: str):
        if side not in SIDES:
            raise IllegalActionError(f"Unknown side '{side}'")
        if side != match.turn:
            raise IllegalActionError(f"It is the {match.turn}'s turn, not the {side}'s")

    def _notify(self, m: BattleMatch, previous_status: str):
        if m.status != previous_status:
            logger.info("MatchEnd", status=m.status, reason=m.reason, rounds=m.turn_count)
            if self.on_status_change:
                self.on_status_change(m)
        if self.on_snapshot:
            self.on_snapshot(m)


battle_engine = BattleEngine()

__all__ = ["BattleEngine", "battle_engine", "PLAYER", "OPPONENT"]
