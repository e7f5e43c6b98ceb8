import json
import random
from cardclash import cli
from cardclash.battle.session import STALEMATE
from cardclash.battle.models import Deck
from cardclash.system.save import Player, new_player, save_player
from cardclash.system.settings import Settings
from tests.builders import fillers


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.seed is None and args.opponent == 0
    assert not args.auto and not args.no_save


def test_auto_run_without_saving(home):
    session = cli.run(["--auto", "--seed", "7", "--no-save"])
    assert session.outcome() in ("player_won", "opponent_won", STALEMATE)
    assert not (home / ".cardclash_saves" / "profile.json").exists()


def test_same_seed_same_match(home):
    save_player(new_player("Tester", random.Random(1)))
    a = cli.run(["--auto", "--seed", "7", "--no-save"])
    b = cli.run(["--auto", "--seed", "7", "--no-save"])
    assert a.history[0].player.hand == b.history[0].player.hand
    assert a.match.log == b.match.log


def test_finish_saves_rewards(home):
    ctx = cli.GameContext(Settings.load())
    session = ctx.new_session(seed=3, opponent=1)
    session.surrender()
    reward = ctx.finish(session)
    assert reward.experience == 25
    assert ctx.last_result is session.match
    assert (home / ".cardclash_saves" / "profile.json").exists()


def test_finish_ignores_running_match(home):
    ctx = cli.GameContext(Settings.load())
    session = ctx.new_session(seed=3)
    assert ctx.finish(session) is None


def test_legacy_profile_gets_a_playable_deck(home):
    save_dir = home / ".cardclash_saves"
    save_dir.mkdir()
    (save_dir / "profile.json").write_text(json.dumps({"name": "Old", "stats": {"gamesPlayed": 4}}))
    ctx = cli.GameContext(Settings.load())
    session = ctx.new_session(seed=1)
    deck = ctx.player.active_deck()
    assert len(deck) == 20
    assert [d.id for d in ctx.player.decks] == [deck.id]
    assert len(session.match.player.hand) == 5
    assert len(session.match.player.draw_pile) == 15


def test_undersized_saved_deck_is_rebuilt(home):
    save_player(Player(name="Tiny", cards=fillers(3), decks=[Deck("Tiny", tuple(fillers(3)), id="tiny")]))
    ctx = cli.GameContext(Settings.load())
    session = ctx.new_session(seed=1)
    assert len(ctx.player.active_deck()) == 20
    assert ctx.player.active_deck().id != "tiny"
    assert len(session.match.player.hand) + len(session.match.player.draw_pile) == 20


def _scripted_input(monkeypatch, answers):
    prompts = []
    it = iter(answers)

    def fake_input(prompt=""):
        prompts.append(prompt)
        return next(it)
    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


def test_hot_seat_when_auto_opponent_off(home, monkeypatch):
    ctx = cli.GameContext(Settings.load(), player=new_player("Ash", random.Random(1)))
    ctx.settings.data.auto_opponent = False
    session = ctx.new_session(seed=5)
    prompts = _scripted_input(monkeypatch, ["e", "s"])
    cli.play_interactive(ctx, session)
    assert session.match.status == "player_won"
    assert session.match.reason == "surrendered"
    assert prompts[1].startswith(session.match.opponent.name)


def test_ai_plays_opponent_by_default(home, monkeypatch):
    ctx = cli.GameContext(Settings.load(), player=new_player("Ash", random.Random(1)))
    session = ctx.new_session(seed=5)
    prompts = _scripted_input(monkeypatch, ["e", "s"])
    cli.play_interactive(ctx, session)
    assert session.match.status == "opponent_won"
    assert len(prompts) == 2
    assert all(p.startswith("Ash") for p in prompts)
