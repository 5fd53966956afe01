"""
Player class for Texas Hold'em.

Manages one seat's state:
- Stack (chip count), persistent across hands
- Hole cards
- Current bet in the round and total invested in the hand
- Player state (active, folded, all-in, out)
- Seat configuration (human or agent, personality and difficulty)
"""

from __future__ import annotations
from typing import List, Optional
from dataclasses import dataclass, field
from enum import Enum, auto

from pokerfish.core.card import Card


class PlayerState(Enum):
    """Player states during a hand."""
    ACTIVE = auto()       # Still in the hand, can act
    FOLDED = auto()       # Has folded
    ALL_IN = auto()       # All-in, no more actions
    OUT = auto()          # No chips at hand start, not dealt in


@dataclass
class Player:
    """
    A seat at the table.

    Attributes:
        player_id: Unique identifier for the player
        stack: Current chip count
        seat: Seat position at the table (0-indexed)
        name: Display name
        hole_cards: The player's private cards (0 or 2)
        current_bet: Amount bet in the current betting round
        total_bet: Total amount invested in the current hand
        state: Current player state
        is_agent: True when decisions come from a decision agent
        personality: Personality name for agent seats
        difficulty: Difficulty level (1-5) for agent seats
    """
    player_id: str
    stack: int
    seat: int = 0
    name: str = ""
    hole_cards: List[Card] = field(default_factory=list)
    current_bet: int = 0
    total_bet: int = 0
    state: PlayerState = PlayerState.ACTIVE
    is_agent: bool = False
    personality: Optional[str] = None
    difficulty: Optional[int] = None

    # Has acted in the current betting round
    has_acted: bool = False
    last_action: Optional[str] = None

    def __post_init__(self) -> None:
        if self.stack < 0:
            raise ValueError("Stack cannot be negative")
        if not self.name:
            self.name = f"Player {self.player_id}"

    def reset_for_new_hand(self) -> None:
        """Reset per-hand fields; only seats with chips are dealt in."""
        self.hole_cards = []
        self.current_bet = 0
        self.total_bet = 0
        self.has_acted = False
        self.last_action = None
        self.state = PlayerState.ACTIVE if self.stack > 0 else PlayerState.OUT

    def reset_for_new_round(self) -> None:
        """Reset per-round fields for a new betting round."""
        self.current_bet = 0
        self.has_acted = False

    def deal_card(self, card: Card) -> None:
        self.hole_cards.append(card)

    def bet(self, amount: int) -> int:
        """
        Move chips from the stack into the current bet.

        Returns:
            Actual amount bet (less than asked when it puts the seat all-in)
        """
        if amount <= 0:
            return 0

        actual_amount = min(amount, self.stack)
        self.stack -= actual_amount
        self.current_bet += actual_amount
        self.total_bet += actual_amount

        if self.stack == 0:
            self.state = PlayerState.ALL_IN

        return actual_amount

    def fold(self) -> None:
        self.state = PlayerState.FOLDED
        self.has_acted = True
        self.last_action = "FOLD"

    def check(self) -> None:
        self.has_acted = True
        self.last_action = "CHECK"

    def call(self, amount_to_call: int) -> int:
        """
        Call the current bet.

        Returns:
            Actual amount called (may be all-in)
        """
        actual = self.bet(amount_to_call)
        self.has_acted = True
        self.last_action = f"ALL-IN ${self.total_bet}" if self.is_all_in else f"CALL ${actual}"
        return actual

    def raise_by(self, amount_to_call: int, raise_amount: int) -> int:
        """
        Call and raise by raise_amount on top.

        Returns:
            Actual amount added (capped at the stack)
        """
        actual = self.bet(amount_to_call + raise_amount)
        self.has_acted = True
        if self.is_all_in:
            self.last_action = f"ALL-IN ${self.total_bet}"
        else:
            self.last_action = f"RAISE ${self.current_bet}"
        return actual

    @property
    def is_folded(self) -> bool:
        return self.state == PlayerState.FOLDED

    @property
    def is_all_in(self) -> bool:
        return self.state == PlayerState.ALL_IN

    @property
    def is_active(self) -> bool:
        """Dealt into the current hand (had chips when it started)."""
        return self.state != PlayerState.OUT

    @property
    def is_in_hand(self) -> bool:
        """Still contesting the pot (not folded, not out)."""
        return self.state in (PlayerState.ACTIVE, PlayerState.ALL_IN)

    @property
    def can_act(self) -> bool:
        return self.state == PlayerState.ACTIVE and self.stack > 0

    @property
    def status_tag(self) -> str:
        if self.state == PlayerState.FOLDED:
            return "FOLDED"
        if self.state == PlayerState.ALL_IN:
            return "ALL-IN"
        if self.state == PlayerState.OUT:
            return "OUT"
        return "ACTIVE"

    def __repr__(self) -> str:
        return (
            f"Player({self.player_id}, stack={self.stack}, "
            f"bet={self.current_bet}, state={self.state.name})"
        )

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"{self.name} [{cards_str}] ${self.stack}"
