import pytest
from cardclash.battle.models import BattleMatch, BattleParticipant
from cardclash.battle.engine import BattleEngine
from tests.builders import FIRE_DRAGON, HEALING_POTION, fillers


@pytest.fixture
def engine():
    return BattleEngine()


@pytest.fixture
def make_match():
    """Build a match directly, bypassing the shuffle, for resolution tests."""
    def _make(player_hand=(), opponent_hand=(), *, player_energy=10, opponent_energy=3,
              player_health=100, opponent_health=100, player_pile=(), opponent_pile=(), turn='player'):
        return BattleMatch(
            player=BattleParticipant(name='Player', health=player_health, energy=player_energy,
                                     hand=list(player_hand), draw_pile=list(player_pile)),
            opponent=BattleParticipant(name='Opponent', health=opponent_health, energy=opponent_energy,
                                       hand=list(opponent_hand), draw_pile=list(opponent_pile)),
            turn=turn,
        )
    return _make


@pytest.fixture
def scenario_deck():
    return [FIRE_DRAGON, HEALING_POTION] + fillers(18)


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point profile and settings files at a temporary home directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path
