import copy
import pytest
from cardclash.battle.models import PLAYER, OPPONENT, MAX_ENERGY
from cardclash.core.errors import MatchAlreadyEndedError
from tests.builders import fillers


def test_turn_passes_and_round_counts(engine, make_match):
    m = make_match(opponent_pile=fillers(3, prefix='o'), player_pile=fillers(3))
    m = engine.end_turn(m)
    assert m.turn == OPPONENT
    assert m.turn_count == 1
    m = engine.end_turn(m)
    assert m.turn == PLAYER
    assert m.turn_count == 2


def test_incoming_side_gains_energy_and_draws(engine, make_match):
    m = make_match(opponent_pile=fillers(2, prefix='o'), opponent_energy=3)
    after = engine.end_turn(m)
    assert after.opponent.energy == 4
    assert [c.id for c in after.opponent.hand] == ['o-0']
    assert [c.id for c in after.opponent.draw_pile] == ['o-1']
    # outgoing side is untouched
    assert after.player.energy == m.player.energy


def test_energy_never_exceeds_cap(engine, make_match):
    m = make_match(player_energy=MAX_ENERGY, opponent_energy=MAX_ENERGY)
    for _ in range(6):
        m = engine.end_turn(m)
        assert m.player.energy <= MAX_ENERGY
        assert m.opponent.energy <= MAX_ENERGY
    assert m.player.energy == MAX_ENERGY


def test_empty_pile_skips_draw(engine, make_match):
    m = make_match()
    after = engine.end_turn(m)
    assert after.opponent.hand == []
    assert after.status == 'in_progress'
    assert not any('draws a card' in line for line in after.log)


def test_end_turn_does_not_mutate_input(engine, make_match):
    m = make_match(opponent_pile=fillers(1, prefix='o'))
    snapshot = copy.deepcopy(m)
    engine.end_turn(m)
    assert m == snapshot


def test_forced_end_turn_is_logged(engine, make_match):
    m = make_match()
    after = engine.force_end_turn(m)
    assert after.turn == OPPONENT
    assert any('turn timer expired' in line for line in after.log)
    plain = engine.end_turn(m)
    assert not any('timer' in line for line in plain.log)


def test_end_turn_after_surrender_rejected(engine, make_match):
    m = engine.surrender(make_match(), PLAYER)
    with pytest.raises(MatchAlreadyEndedError):
        engine.end_turn(m)
    with pytest.raises(MatchAlreadyEndedError):
        engine.force_end_turn(m)
