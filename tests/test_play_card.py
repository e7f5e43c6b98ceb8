import copy
import pytest
from cardclash.battle.models import PLAYER, OPPONENT, PLAYER_WON, REASON_HEALTH
from cardclash.core.errors import (
    CardNotInHandError, IllegalActionError, InsufficientEnergyError, MatchAlreadyEndedError,
)
from tests.builders import FIRE_DRAGON, creature, spell, fillers


def test_fire_dragon_scenario(engine, scenario_deck):
    m = engine.start_match(scenario_deck, fillers(20, prefix='opp'), 42)
    assert m.opponent.health == 100
    # Pass full rounds until the dragon is in hand and affordable
    while m.player.find_in_hand('dragon-1') is None or m.player.energy < 6:
        m = engine.end_turn(engine.end_turn(m))
    m = engine.play_card(m, PLAYER, 'dragon-1')
    assert m.opponent.health == 92
    assert len(m.player.board) == 1
    dragon = m.player.board[0]
    assert dragon.card == FIRE_DRAGON
    assert dragon.current_health == 8
    assert dragon.keywords == ('Flying', 'Burn')


def test_cost_deducted_and_single_copy_removed(engine, make_match):
    twin = creature('twin', cost=2, attack=1, health=1)
    m = make_match([twin, twin, creature('other')], player_energy=5)
    after = engine.play_card(m, PLAYER, 'twin')
    assert after.player.energy == 3
    assert [c.id for c in after.player.hand] == ['twin', 'other']


def test_play_returns_new_match_and_keeps_input(engine, make_match):
    m = make_match([creature('grunt', attack=3)])
    snapshot = copy.deepcopy(m)
    after = engine.play_card(m, PLAYER, 'grunt')
    assert m == snapshot
    assert after is not m
    assert after.opponent.health == 97


def test_insufficient_energy_leaves_state(engine, make_match):
    m = make_match([creature('big', cost=3, attack=5)], player_energy=2)
    with pytest.raises(InsufficientEnergyError) as ei:
        engine.play_card(m, PLAYER, 'big')
    assert ei.value.required == 3 and ei.value.available == 2
    assert m.player.energy == 2
    assert [c.id for c in m.player.hand] == ['big']


def test_wrong_turn(engine, make_match):
    m = make_match(opponent_hand=[creature('x')])
    with pytest.raises(IllegalActionError):
        engine.play_card(m, OPPONENT, 'x')


def test_unknown_side(engine, make_match):
    m = make_match([creature('x')])
    with pytest.raises(IllegalActionError):
        engine.play_card(m, 'spectator', 'x')


def test_card_not_in_hand(engine, make_match):
    m = make_match([creature('x')])
    with pytest.raises(CardNotInHandError):
        engine.play_card(m, PLAYER, 'missing')


def test_spell_is_discarded_not_on_board(engine, make_match):
    m = make_match([spell('bolt', abilities=['Burn:4'])])
    after = engine.play_card(m, PLAYER, 'bolt')
    assert after.player.board == []
    assert [c.id for c in after.player.discard] == ['bolt']
    assert after.opponent.health == 96


def test_zero_attack_creature_deals_no_damage(engine, make_match):
    m = make_match([creature('wall', attack=0, health=6)])
    after = engine.play_card(m, PLAYER, 'wall')
    assert after.opponent.health == 100
    assert after.player.board[0].current_health == 6


def test_lethal_play_ends_match(engine, make_match):
    m = make_match([creature('finisher', attack=8), creature('spare')], opponent_health=5)
    after = engine.play_card(m, PLAYER, 'finisher')
    assert after.status == PLAYER_WON
    assert after.reason == REASON_HEALTH
    assert after.opponent.health == 0
    frozen = copy.deepcopy(after)
    with pytest.raises(MatchAlreadyEndedError):
        engine.play_card(after, PLAYER, 'spare')
    with pytest.raises(MatchAlreadyEndedError):
        engine.end_turn(after)
    assert after == frozen


def test_resolution_stops_after_lethal(engine, make_match):
    m = make_match([creature('striker', attack=10, abilities=['Burn:3', 'Heal:5'])],
                   opponent_health=10, player_health=50)
    after = engine.play_card(m, PLAYER, 'striker')
    assert after.status == PLAYER_WON
    assert after.player.health == 50  # Heal never resolved


def test_log_entry_describes_play(engine, make_match):
    m = make_match([creature('grunt', cost=2, attack=3)])
    after = engine.play_card(m, PLAYER, 'grunt')
    assert any('plays Grunt' in line for line in after.log)
    assert any('deals 3 damage' in line for line in after.log)
