"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class CardClashError(Exception):
    pass

class DataLoadError(CardClashError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail

class ValidationError(CardClashError):
    pass

class InvalidDeckError(ValidationError):
    """Deck cannot be used to start a match (empty, or outside build limits)."""

# --- Battle actions --------------------------------------------------------

class BattleError(CardClashError):
    pass

class IllegalActionError(BattleError):
    """Action attempted out of turn or for an unknown side."""

class CardNotInHandError(BattleError):
    def __init__(self, side: str, card_id: str):
        super().__init__(f"Card '{card_id}' is not in the {side}'s hand")
        self.side = side
        self.card_id = card_id

class InsufficientEnergyError(BattleError):
    def __init__(self, required: int, available: int):
        super().__init__(f"Card costs {required} energy but only {available} available")
        self.required = required
        self.available = available

class MatchAlreadyEndedError(BattleError):
    pass
