"""
Texas Hold'em Rules and Constants.

Seat positions are computed over the seats that are dealt in, walking
clockwise (increasing seat index, wrapping) from the dealer button:

1. Small blind is the first dealt-in seat after the button, big blind the
   next one. With every seat dealt in, the first preflop actor is three
   seats after the button.

2. Postflop, the first dealt-in seat after the button acts first.

3. Minimum raise: a raise increment must be at least the previous raise
   increment in the round, and never less than the big blind. An all-in
   for less is allowed but does not grow the minimum.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence


class GamePhase(Enum):
    """Phases of a Texas Hold'em hand. Transitions are strictly linear."""
    WAITING = auto()      # Before the first hand
    PREFLOP = auto()      # After hole cards dealt, before flop
    FLOP = auto()         # After 3 community cards
    TURN = auto()         # After 4th community card
    RIVER = auto()        # After 5th community card
    SHOWDOWN = auto()     # Pot awarded, hand complete


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"


@dataclass(frozen=True)
class Action:
    """
    A seat's decision.

    For RAISE, amount is the increment above the amount needed to call,
    not the total bet.
    """
    type: ActionType
    amount: int = 0

    @classmethod
    def fold(cls) -> Action:
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> Action:
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls) -> Action:
        return cls(ActionType.CALL)

    @classmethod
    def raise_by(cls, amount: int) -> Action:
        return cls(ActionType.RAISE, amount)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Action:
        """Build from {"action": "RAISE", "amount": 40}."""
        action_type = ActionType(str(data.get("action", "")).upper())
        return cls(action_type, data.get("amount") or 0)

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.type.value, "amount": self.amount}

    def __str__(self) -> str:
        if self.type == ActionType.RAISE:
            return f"RAISE {self.amount}"
        return self.type.value


# Default game settings
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
DEFAULT_BUY_IN = 1000
DEFAULT_THINKING_TIME = 1.0  # seconds
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5
BURN_CARDS = 3
DECK_SIZE = 52

# Street order after preflop: (phase, cards revealed)
STREETS = (
    (GamePhase.FLOP, FLOP_CARDS),
    (GamePhase.TURN, TURN_CARDS),
    (GamePhase.RIVER, RIVER_CARDS),
)


def max_cards_needed(num_players: int) -> int:
    """Most cards a hand with num_players dealt in can consume."""
    return num_players * HOLE_CARDS + BURN_CARDS + TOTAL_COMMUNITY_CARDS


def next_seat(
    start: int,
    num_seats: int,
    predicate: Callable[[int], bool],
) -> Optional[int]:
    """
    First seat strictly after start (clockwise) that satisfies predicate.

    Wraps around and may return start itself as the last candidate.
    """
    for offset in range(1, num_seats + 1):
        seat = (start + offset) % num_seats
        if predicate(seat):
            return seat
    return None


def get_blind_positions(dealt_in: Sequence[bool], dealer_position: int) -> tuple:
    """
    Small and big blind seats.

    Args:
        dealt_in: Per-seat flags, True for seats with chips this hand
        dealer_position: Seat of the dealer button

    Returns:
        Tuple of (small_blind_position, big_blind_position)
    """
    if sum(1 for flag in dealt_in if flag) < MIN_PLAYERS:
        raise ValueError("Need at least 2 players")
    n = len(dealt_in)
    sb_pos = next_seat(dealer_position, n, lambda s: dealt_in[s])
    bb_pos = next_seat(sb_pos, n, lambda s: dealt_in[s])
    return sb_pos, bb_pos


def get_first_to_act_preflop(
    can_act: Sequence[bool],
    big_blind_position: int,
) -> Optional[int]:
    """First seat able to act after the big blind."""
    return next_seat(big_blind_position, len(can_act), lambda s: can_act[s])


def get_first_to_act_postflop(
    can_act: Sequence[bool],
    dealer_position: int,
) -> Optional[int]:
    """First seat able to act after the dealer button."""
    return next_seat(dealer_position, len(can_act), lambda s: can_act[s])


def calculate_min_raise(last_raise_amount: int, big_blind: int) -> int:
    """
    Minimum raise increment above the current bet.

    The previous raise increment in the round, never less than the big blind.
    """
    return max(last_raise_amount, big_blind)


def is_valid_raise(
    raise_amount: int,
    amount_to_call: int,
    last_raise_amount: int,
    big_blind: int,
    player_stack: int,
) -> bool:
    """
    Check if a raise increment is legal.

    A raise is valid if it is at least the minimum increment, or if the seat
    is putting its whole stack in.
    """
    if raise_amount <= 0:
        return False
    if amount_to_call + raise_amount >= player_stack:
        return True
    return raise_amount >= calculate_min_raise(last_raise_amount, big_blind)


def legal_action_types(amount_to_call: int, player_stack: int) -> List[ActionType]:
    """Action types available to a seat that can act."""
    actions = [ActionType.FOLD]
    if amount_to_call == 0:
        actions.append(ActionType.CHECK)
    else:
        actions.append(ActionType.CALL)
    if player_stack > amount_to_call:
        actions.append(ActionType.RAISE)
    return actions
