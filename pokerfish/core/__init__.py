"""
Pokerfish Core - Pure Python Texas Hold'em Game Logic

This module contains all game logic without any network dependencies.
"""

from pokerfish.core.card import Card, Deck, DeckExhaustedError
from pokerfish.core.player import Player, PlayerState
from pokerfish.core.hand import HandRank, HandResult, evaluate_hand, compare_hands
from pokerfish.core.rules import Action, ActionType, GamePhase
from pokerfish.core.game import (
    TexasHoldemGame, ActionResult, HandSummary, HandStartError, IllegalActionError,
)
from pokerfish.core.view import StateView, TableView

__all__ = [
    "Card",
    "Deck",
    "DeckExhaustedError",
    "Player",
    "PlayerState",
    "HandRank",
    "HandResult",
    "evaluate_hand",
    "compare_hands",
    "Action",
    "ActionType",
    "GamePhase",
    "TexasHoldemGame",
    "ActionResult",
    "HandSummary",
    "HandStartError",
    "IllegalActionError",
    "StateView",
    "TableView",
]
