"""Card Clash: deterministic card-battle simulator."""
__version__ = "0.1.0"
