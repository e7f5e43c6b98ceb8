import random
import pytest
from cardclash.battle.engine import BattleEngine
from cardclash.battle.models import Deck, IN_PROGRESS, PLAYER
from cardclash.core.errors import InvalidDeckError
from tests.builders import fillers


def test_same_seed_gives_identical_hands_and_piles(scenario_deck):
    engine = BattleEngine()
    opp = fillers(20, prefix='opp')
    a = engine.start_match(scenario_deck, opp, 42)
    b = engine.start_match(scenario_deck, opp, 42)
    assert a.player.hand == b.player.hand
    assert a.player.draw_pile == b.player.draw_pile
    assert a.opponent.hand == b.opponent.hand
    assert a.opponent.draw_pile == b.opponent.draw_pile


def test_different_seed_changes_order(scenario_deck):
    engine = BattleEngine()
    opp = fillers(20, prefix='opp')
    a = engine.start_match(scenario_deck, opp, 1)
    b = engine.start_match(scenario_deck, opp, 2)
    assert (a.player.hand + a.player.draw_pile) != (b.player.hand + b.player.draw_pile)


def test_initial_state(scenario_deck):
    m = BattleEngine().start_match(Deck('Mine', tuple(scenario_deck)), fillers(20, prefix='opp'), 42)
    for side in (m.player, m.opponent):
        assert side.health == 100
        assert side.energy == 3
        assert len(side.hand) == 5
        assert len(side.draw_pile) == 15
        assert side.board == []
    assert m.turn == PLAYER
    assert m.turn_count == 1
    assert m.log == []
    assert m.status == IN_PROGRESS
    assert m.seed == 42


def test_start_does_not_touch_source_deck(scenario_deck):
    original = list(scenario_deck)
    BattleEngine().start_match(scenario_deck, fillers(20, prefix='opp'), 7)
    assert scenario_deck == original


def test_injected_rng_is_used(scenario_deck):
    engine = BattleEngine()
    opp = fillers(20, prefix='opp')
    a = engine.start_match(scenario_deck, opp, random.Random(99))
    b = engine.start_match(scenario_deck, opp, random.Random(99))
    assert a.player.hand == b.player.hand
    assert a.seed is None


def test_short_deck_deals_what_it_has():
    m = BattleEngine().start_match(fillers(3), fillers(20, prefix='opp'), 1)
    assert len(m.player.hand) == 3
    assert m.player.draw_pile == []


@pytest.mark.parametrize("player,opponent", [([], fillers(5)), (fillers(5), [])])
def test_empty_deck_rejected(player, opponent):
    with pytest.raises(InvalidDeckError):
        BattleEngine().start_match(player, opponent, 1)
