"""
Read-only views of a game.

StateView is the snapshot a decision agent sees for its own seat: public
table state plus that seat's hole cards, never another seat's.

TableView is the presentation feed: everything a renderer needs to draw the
table for one viewer, with other seats' cards masked until showdown.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pokerfish.core.card import Card
from pokerfish.core.rules import GamePhase


@dataclass(frozen=True)
class SeatView:
    """Public state of one seat."""
    seat: int
    player_id: str
    name: str
    stack: int
    current_bet: int
    total_bet: int
    folded: bool
    all_in: bool
    active: bool
    is_agent: bool = False

    @property
    def in_hand(self) -> bool:
        return self.active and not self.folded


@dataclass(frozen=True)
class StateView:
    """Immutable game snapshot handed to a decision agent."""
    seat: int
    hole_cards: Tuple[Card, ...]
    community_cards: Tuple[Card, ...]
    pot: int
    current_bet: int
    call_amount: int
    min_raise: int
    players: Tuple[SeatView, ...]
    phase: GamePhase
    small_blind: int
    big_blind: int
    dealer_position: int = 0
    hand_number: int = 0

    @property
    def me(self) -> SeatView:
        return self.players[self.seat]

    @property
    def stack(self) -> int:
        return self.me.stack

    @property
    def active_opponents(self) -> List[SeatView]:
        """Opponents still contesting the pot."""
        return [p for p in self.players if p.seat != self.seat and p.in_hand]


@dataclass(frozen=True)
class SeatViewModel:
    """One seat as a renderer shows it."""
    seat: int
    name: str
    stack: int
    bet: int
    cards: Tuple[Optional[str], ...]
    status: str
    is_dealer: bool = False
    is_agent: bool = False
    last_action: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seat": self.seat,
            "name": self.name,
            "stack": self.stack,
            "bet": self.bet,
            "cards": list(self.cards),
            "status": self.status,
            "is_dealer": self.is_dealer,
            "is_agent": self.is_agent,
            "last_action": self.last_action,
        }


@dataclass(frozen=True)
class TableView:
    """Presentation model of the whole table for one viewer."""
    hand_number: int
    phase: str
    pot: int
    community_cards: Tuple[str, ...]
    seats: Tuple[SeatViewModel, ...]
    current_seat: Optional[int]
    legal_actions: Tuple[Dict[str, Any], ...] = ()
    result: Optional[Dict[str, Any]] = None
    event: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "phase": self.phase,
            "pot": self.pot,
            "community_cards": list(self.community_cards),
            "seats": [s.to_dict() for s in self.seats],
            "current_seat": self.current_seat,
            "legal_actions": list(self.legal_actions),
            "result": self.result,
            "event": self.event,
        }
