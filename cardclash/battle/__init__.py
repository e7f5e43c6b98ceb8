"""
Battle package.
- models.py (Card, Deck, BattleParticipant, BattleMatch)
- abilities.py (ability tag grammar & effect handlers)
- engine.py (match lifecycle & resolution pipeline)
- session.py (turn timer, AI-driven turns)
- ai.py (card choice)
- rewards.py (post-match policy)
- render.py (rich terminal view)
"""
from .engine import BattleEngine, battle_engine
__all__ = ["BattleEngine", "battle_engine"]
