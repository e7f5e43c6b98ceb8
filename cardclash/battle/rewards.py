"""Post-match reward policy and player level curve.

Rewards are applied by the caller once a match is over; the engine itself
knows nothing about coins or experience.

  win                  -> +100 XP, +50 coins
  loss                 -> +50 XP,  +10 coins
  player surrendered   -> +25 XP,  +10 coins
"""
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cardclash.core.errors import ValidationError
from cardclash.core.logging import logger
from .models import BattleMatch, PLAYER, REASON_SURRENDERED

if TYPE_CHECKING:
    from cardclash.system.save import Player

EXP_PER_LEVEL = 1000

@dataclass(frozen=True)
class Reward:
    experience: int
    coins: int

WIN_REWARD = Reward(experience=100, coins=50)
LOSS_REWARD = Reward(experience=50, coins=10)
SURRENDER_REWARD = Reward(experience=25, coins=10)


def level_for_experience(experience: int) -> int:
    return max(0, int(experience)) // EXP_PER_LEVEL + 1


def experience_for_next_level(level: int) -> int:
    return max(1, int(level)) * EXP_PER_LEVEL


def reward_for(match: BattleMatch) -> Reward:
    if not match.is_over:
        raise ValidationError("Cannot reward a match that is still in progress")
    if match.winner == PLAYER:
        return WIN_REWARD
    if match.reason == REASON_SURRENDERED:
        return SURRENDER_REWARD
    return LOSS_REWARD


def _favorite_card(match: BattleMatch) -> str | None:
    side = match.player
    played = [c.name for c in side.discard] + [b.card.name for b in side.board]
    if not played:
        return None
    return Counter(played).most_common(1)[0][0]


def apply_match_result(player: "Player", match: BattleMatch) -> Reward:
    """Fold a finished match into ``player``; returns the reward granted."""
    reward = reward_for(match)
    player.experience += reward.experience
    player.coins += reward.coins
    old_level = player.level
    player.level = level_for_experience(player.experience)
    stats = player.stats
    stats.games_played += 1
    if match.winner == PLAYER:
        stats.games_won += 1
    stats.total_damage_dealt += match.player.damage_dealt
    fav = _favorite_card(match)
    if fav:
        stats.favorite_card = fav
    logger.info("RewardApplied", status=match.status, xp=reward.experience, coins=reward.coins)
    if player.level > old_level:
        logger.info("LevelUp", level=player.level)
    return reward

__all__ = ["Reward", "WIN_REWARD", "LOSS_REWARD", "SURRENDER_REWARD", "reward_for",
           "apply_match_result", "level_for_experience", "experience_for_next_level"]
