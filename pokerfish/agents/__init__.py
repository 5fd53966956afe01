"""
Pokerfish Agents - Seat Controllers

This module provides the base agent interface, the personality-driven
heuristic agent and simple baseline agents.
"""

from pokerfish.agents.base import BaseAgent, HumanAgent
from pokerfish.agents.profiles import (
    Personality, Difficulty, PERSONALITIES, DIFFICULTIES, get_personality, get_difficulty,
)
from pokerfish.agents.heuristic import HeuristicAgent, BoardTexture, analyze_board_texture
from pokerfish.agents.random_agent import RandomAgent, CallAgent

__all__ = [
    "BaseAgent",
    "HumanAgent",
    "Personality",
    "Difficulty",
    "PERSONALITIES",
    "DIFFICULTIES",
    "get_personality",
    "get_difficulty",
    "HeuristicAgent",
    "BoardTexture",
    "analyze_board_texture",
    "RandomAgent",
    "CallAgent",
]
