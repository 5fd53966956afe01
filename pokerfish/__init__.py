"""
Pokerfish - Texas Hold'em Table with Heuristic Opponents

A single-table Texas Hold'em game with:
- Pure Python game core (hand evaluation, betting state machine)
- Personality-driven decision agents with configurable difficulty
- FastAPI + WebSocket table server that paces agent turns

Usage:
    from pokerfish.core import Card, Deck, TexasHoldemGame
    from pokerfish.agents import HeuristicAgent
"""

__version__ = "0.2.0"

from pokerfish.core.card import Card, Deck
from pokerfish.core.player import Player
from pokerfish.core.game import TexasHoldemGame
from pokerfish.core.hand import HandRank, evaluate_hand

__all__ = [
    "Card",
    "Deck",
    "Player",
    "TexasHoldemGame",
    "HandRank",
    "evaluate_hand",
    "__version__",
]
