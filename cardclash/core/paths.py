"""
Centralized path helpers (works with the current flat layout).
"""
from __future__ import annotations
from pathlib import Path

# This file lives at cardclash/core/paths.py
ROOT = Path(__file__).resolve().parents[2]   # project root (one up from 'cardclash')
ASSETS = ROOT / "assets"
CARDS = ASSETS / "cards"
STARTER_CARDS = CARDS / "starter.json"
SCHEMA = ROOT / "schema"
CARD_SCHEMA = SCHEMA / "card.schema.json"
