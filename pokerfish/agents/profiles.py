"""
Agent personalities and difficulty levels.

A personality shapes what hands an agent plays and how it bets; the
difficulty level controls how often it blunders and how well it sizes bets.
Both records are immutable and shared between agents.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Personality:
    """
    Playing style parameters.

    Attributes:
        vpip: Share of hands played voluntarily; also the chance of playing
            a marginal preflop hand
        pfr: Preflop raise frequency
        aggression: Chance of turning a call into a raise
        bluff_freq: Chance of bluffing when the spot allows it
        call_threshold: Minimum strength to call postflop
        raise_threshold: Minimum strength to raise postflop
    """
    name: str
    description: str
    vpip: float
    pfr: float
    aggression: float
    bluff_freq: float
    call_threshold: float
    raise_threshold: float

    @property
    def is_tight(self) -> bool:
        return self.call_threshold > 0.5

    @property
    def is_passive(self) -> bool:
        return self.aggression < 0.3


@dataclass(frozen=True)
class Difficulty:
    """
    Skill level parameters.

    Attributes:
        skill_mod: Bet sizing accuracy; amounts are scaled by 0.5 + 0.5 * skill_mod
        error_rate: Chance of a deliberate mistake per decision
        bluff_detection: Reserved for opponent modelling
    """
    level: int
    skill_mod: float
    error_rate: float
    bluff_detection: float


DEFAULT_PERSONALITY = "tight"
DEFAULT_DIFFICULTY = 3
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5

PERSONALITIES: Dict[str, Personality] = {
    "tight": Personality(
        name="Tight",
        description="Plays only strong hands, folds weak hands quickly",
        vpip=0.15, pfr=0.12, aggression=0.3, bluff_freq=0.05,
        call_threshold=0.6, raise_threshold=0.8,
    ),
    "loose": Personality(
        name="Loose",
        description="Plays many hands, likes to see flops",
        vpip=0.35, pfr=0.18, aggression=0.4, bluff_freq=0.15,
        call_threshold=0.3, raise_threshold=0.6,
    ),
    "aggressive": Personality(
        name="Aggressive",
        description="Bets and raises frequently, applies pressure",
        vpip=0.25, pfr=0.22, aggression=0.7, bluff_freq=0.25,
        call_threshold=0.4, raise_threshold=0.5,
    ),
    "passive": Personality(
        name="Passive",
        description="Calls often, rarely bets or raises",
        vpip=0.28, pfr=0.08, aggression=0.2, bluff_freq=0.03,
        call_threshold=0.35, raise_threshold=0.85,
    ),
    "maniac": Personality(
        name="Maniac",
        description="Extremely aggressive, unpredictable play style",
        vpip=0.45, pfr=0.35, aggression=0.9, bluff_freq=0.4,
        call_threshold=0.25, raise_threshold=0.3,
    ),
}

DIFFICULTIES: Dict[int, Difficulty] = {
    1: Difficulty(level=1, skill_mod=0.3, error_rate=0.3, bluff_detection=0.2),    # Beginner
    2: Difficulty(level=2, skill_mod=0.5, error_rate=0.2, bluff_detection=0.4),    # Novice
    3: Difficulty(level=3, skill_mod=0.7, error_rate=0.15, bluff_detection=0.6),   # Amateur
    4: Difficulty(level=4, skill_mod=0.85, error_rate=0.1, bluff_detection=0.8),   # Expert
    5: Difficulty(level=5, skill_mod=1.0, error_rate=0.05, bluff_detection=0.9),   # Professional
}


def get_personality(name: str) -> Personality:
    """
    Look up a personality by name (case-insensitive).

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return PERSONALITIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown personality {name!r}, expected one of {sorted(PERSONALITIES)}"
        ) from None


def get_difficulty(level: int) -> Difficulty:
    """Difficulty record for a level, clamped to 1-5."""
    return DIFFICULTIES[max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(level)))]
