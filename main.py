#!/usr/bin/env python3
"""
Card Clash - terminal edition

Thin wrapper around :mod:`cardclash.cli`.

To run: python main.py [--seed N] [--auto]
"""

from cardclash.cli import run

if __name__ == "__main__":
    run()
