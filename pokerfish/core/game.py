"""
Texas Hold'em Game Engine - State Machine Implementation.

This module implements the core game logic for Texas Hold'em poker.
It handles:
- Hand lifecycle (phases: preflop, flop, turn, river, showdown)
- Player actions (fold, check, call, raise)
- Blind posting and dealer button rotation
- Betting-round completion and street dealing
- Showdown ranking and pot award (single pot, split on ties)

The engine owns all mutable state. Agents only ever see StateView
snapshots, and renderers subscribe through add_listener().
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
import logging
import random

from pokerfish.core.card import Card, Deck, new_shuffled_deck
from pokerfish.core.player import Player, PlayerState
from pokerfish.core.hand import HandResult, get_best_five_card_hand, get_hand_description
from pokerfish.core.rules import (
    Action, ActionType, GamePhase, STREETS,
    get_blind_positions, get_first_to_act_preflop, get_first_to_act_postflop,
    calculate_min_raise, is_valid_raise, legal_action_types, max_cards_needed, next_seat,
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, DEFAULT_BUY_IN, DECK_SIZE,
    HOLE_CARDS, MIN_PLAYERS, MAX_PLAYERS,
)
from pokerfish.core.view import SeatView, SeatViewModel, StateView, TableView


logger = logging.getLogger(__name__)

Listener = Callable[["TexasHoldemGame", str], None]

BETTING_PHASES = (GamePhase.PREFLOP, GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER)


class HandStartError(RuntimeError):
    """A hand cannot be started with the current table."""


class IllegalActionError(ValueError):
    """An action was submitted out of turn or breaks the betting rules."""


@dataclass
class ActionResult:
    """Result of a player action."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0


@dataclass
class ActionRecord:
    """One applied action, for the per-hand log."""
    seat: int
    player_id: str
    action_type: ActionType
    amount: int  # Chips moved into the pot
    raise_amount: int  # Increment of the round maximum (raises only)
    is_all_in: bool
    phase: GamePhase


@dataclass
class HandSummary:
    """Outcome of a finished hand."""
    hand_number: int
    pot: int
    winners: List[Dict[str, Any]]
    uncontested: bool
    shown_hands: Dict[int, HandResult] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "pot": self.pot,
            "winners": self.winners,
            "uncontested": self.uncontested,
            "shown_hands": {
                str(seat): result.to_dict() for seat, result in self.shown_hands.items()
            },
        }


class TexasHoldemGame:
    """
    Texas Hold'em game engine implementing a state machine.

    Usage:
        game = TexasHoldemGame(num_players=6, big_blind=20, small_blind=10)
        game.start_hand()

        while game.is_hand_running():
            seat = game.current_player_index
            action = choose(game.get_state_view(seat))  # From UI or agent
            game.take_action(seat, action)

        winners = game.get_winners()
    """

    def __init__(
        self,
        num_players: int = 2,
        big_blind: int = DEFAULT_BIG_BLIND,
        small_blind: int = DEFAULT_SMALL_BLIND,
        buy_in: int = DEFAULT_BUY_IN,
        player_ids: Optional[Sequence[str]] = None,
        names: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize a new Texas Hold'em game.

        Args:
            num_players: Number of seats (2-10)
            big_blind: Big blind amount
            small_blind: Small blind amount
            buy_in: Starting stack for each player
            player_ids: Optional list of player IDs
            names: Optional display names
            rng: Random source for shuffling; seed it for reproducible deals
        """
        if num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
            raise ValueError(f"Number of players must be {MIN_PLAYERS}-{MAX_PLAYERS}")
        if small_blind <= 0 or big_blind < small_blind:
            raise ValueError("Blinds must be positive with big blind >= small blind")

        self.big_blind = big_blind
        self.small_blind = small_blind
        self.buy_in = buy_in
        self.rng = rng or random.Random()

        if player_ids is None:
            player_ids = [str(i) for i in range(num_players)]
        if len(player_ids) != num_players:
            raise ValueError("player_ids must have one entry per seat")
        names = list(names) if names else [""] * num_players

        self.players: List[Player] = [
            Player(player_id=pid, stack=buy_in, seat=i, name=names[i])
            for i, pid in enumerate(player_ids)
        ]

        self.deck = Deck(shuffle=False, rng=self.rng)
        self.community_cards: List[Card] = []
        self.phase = GamePhase.WAITING
        self.hand_number = 0

        # The first hand moves the button onto seat 0
        self.dealer_position = num_players - 1
        self.small_blind_position = 0
        self.big_blind_position = 0
        self.current_player_index = 0

        self.pot = 0
        self.last_raise_amount = 0

        self.action_log: List[ActionRecord] = []
        self.last_result: Optional[HandSummary] = None
        self._listeners: List[Listener] = []

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def num_active_players(self) -> int:
        """Number of players still contesting the pot."""
        return sum(1 for p in self.players if p.is_in_hand)

    @property
    def current_player(self) -> Optional[Player]:
        """The player whose turn it is to act."""
        if not self.is_hand_running():
            return None
        return self.players[self.current_player_index]

    @property
    def pot_total(self) -> int:
        return self.pot

    @property
    def hand_token(self) -> int:
        """Identity of the current hand; changes every time a hand starts."""
        return self.hand_number

    def is_game_running(self) -> bool:
        """At least two players have chips."""
        return sum(1 for p in self.players if p.stack > 0) >= MIN_PLAYERS

    def is_hand_running(self) -> bool:
        return self.phase in BETTING_PHASES

    def total_chips(self) -> int:
        """Chips on the table: every stack plus the pot."""
        return sum(p.stack for p in self.players) + self.pot

    def get_player(self, seat: int) -> Player:
        return self.players[seat]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Register a callback fired as listener(game, event) after each mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(self, event)

    # ------------------------------------------------------------------
    # Hand lifecycle
    # ------------------------------------------------------------------

    def start_hand(self) -> int:
        """
        Start a new hand.

        Returns:
            The new hand token

        Raises:
            HandStartError: If a hand is running, fewer than two players have
                chips, or the table would need more cards than the deck holds
        """
        if self.is_hand_running():
            raise HandStartError("A hand is already in progress")

        with_chips = sum(1 for p in self.players if p.stack > 0)
        if with_chips < MIN_PLAYERS:
            logger.warning("Cannot start hand: not enough players with chips")
            raise HandStartError("Need at least 2 players with chips")
        if max_cards_needed(with_chips) > DECK_SIZE:
            logger.warning(f"Cannot start hand: {with_chips} players exceed the deck")
            raise HandStartError(f"{with_chips} players need more than {DECK_SIZE} cards")

        self.hand_number += 1
        logger.info(f"Starting hand #{self.hand_number}")

        self.deck = new_shuffled_deck(self.rng)
        self.community_cards = []
        self.pot = 0
        self.last_raise_amount = 0
        self.action_log = []
        self.last_result = None

        for player in self.players:
            player.reset_for_new_hand()

        self._move_dealer_button()
        self._post_blinds()
        self._deal_hole_cards()

        self.phase = GamePhase.PREFLOP
        self._setup_betting_round()
        self._notify("hand_start")

        self._progress()
        return self.hand_number

    def _move_dealer_button(self) -> None:
        """Move the dealer button to the next player with chips and place the blinds."""
        dealt_in = [p.is_active for p in self.players]
        self.dealer_position = next_seat(
            self.dealer_position, self.num_players, lambda s: dealt_in[s]
        )
        self.small_blind_position, self.big_blind_position = get_blind_positions(
            dealt_in, self.dealer_position
        )

    def _post_blinds(self) -> None:
        """Post small and big blinds, clamped to the posters' stacks."""
        sb_player = self.players[self.small_blind_position]
        bb_player = self.players[self.big_blind_position]

        sb_amount = sb_player.bet(self.small_blind)
        sb_player.last_action = f"SB ${sb_amount}"
        self.pot += sb_amount

        bb_amount = bb_player.bet(self.big_blind)
        bb_player.last_action = f"BB ${bb_amount}"
        self.pot += bb_amount

        self.last_raise_amount = self.big_blind
        logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")
        self._notify("blinds")

    def _deal_hole_cards(self) -> None:
        """Deal one card per dealt-in seat per pass, two passes, starting left of the button."""
        order = [
            (self.dealer_position + offset) % self.num_players
            for offset in range(1, self.num_players + 1)
        ]
        for _ in range(HOLE_CARDS):
            for seat in order:
                player = self.players[seat]
                if player.is_active:
                    player.deal_card(self.deck.draw())
        logger.debug("Hole cards dealt")
        self._notify("deal")

    def _setup_betting_round(self) -> None:
        """Reset round state and point at the first seat to act."""
        if self.phase == GamePhase.PREFLOP:
            for player in self.players:
                player.has_acted = False
        else:
            for player in self.players:
                player.reset_for_new_round()
            self.last_raise_amount = 0

        can_act = [p.can_act for p in self.players]
        if self.phase == GamePhase.PREFLOP:
            first = get_first_to_act_preflop(can_act, self.big_blind_position)
        else:
            first = get_first_to_act_postflop(can_act, self.dealer_position)

        self.current_player_index = first if first is not None else self.dealer_position

    def get_round_max_bet(self) -> int:
        """Highest bet in the current round."""
        return max((p.current_bet for p in self.players), default=0)

    def is_betting_round_complete(self) -> bool:
        """
        Check if the current betting round is complete.

        Complete when at most one player is left in the hand, or when every
        player who can still act has acted this round and matched the highest
        bet. All-in players are exempt. When at most one player can still act
        and owes nothing there is nobody left to bet against.
        """
        in_hand = [p for p in self.players if p.is_in_hand]
        if len(in_hand) <= 1:
            return True

        round_max = self.get_round_max_bet()
        contenders = [p for p in in_hand if not p.is_all_in]

        if len(contenders) <= 1 and all(p.current_bet >= round_max for p in contenders):
            return True

        for player in contenders:
            if not player.has_acted:
                return False
            if player.current_bet != round_max:
                return False
        return True

    def _progress(self) -> None:
        """Advance through completed rounds until a seat must act or the hand ends."""
        while self.is_hand_running():
            if self.num_active_players <= 1:
                self._showdown()
                return

            if self.is_betting_round_complete():
                self._end_betting_round()
                continue

            player = self.players[self.current_player_index]
            if player.can_act:
                return

            following = next_seat(
                self.current_player_index, self.num_players,
                lambda s: self.players[s].can_act,
            )
            if following is None:
                self._end_betting_round()
                continue
            self.current_player_index = following

    def _advance_turn(self) -> None:
        """Move the turn pointer to the next seat that can act."""
        following = next_seat(
            self.current_player_index, self.num_players,
            lambda s: self.players[s].can_act,
        )
        if following is not None:
            self.current_player_index = following

    def _end_betting_round(self) -> None:
        """Close the round, then deal the next street or go to showdown."""
        for player in self.players:
            player.reset_for_new_round()

        if self.phase == GamePhase.RIVER:
            self._showdown()
            return

        self._deal_next_street()
        self._setup_betting_round()

    def _deal_next_street(self) -> None:
        """Burn one card and reveal the next street."""
        streets_done = BETTING_PHASES.index(self.phase)
        next_phase, num_cards = STREETS[streets_done]

        self.deck.burn()
        revealed = self.deck.deal(num_cards)
        self.community_cards.extend(revealed)
        self.phase = next_phase

        logger.debug(f"{next_phase.name} dealt: {' '.join(str(c) for c in revealed)}")
        self._notify("street")

    def _showdown(self) -> None:
        """Award the pot and finish the hand."""
        pot = self.pot
        self.phase = GamePhase.SHOWDOWN
        for player in self.players:
            player.current_bet = 0

        contenders = [p for p in self.players if p.is_in_hand]
        if len(contenders) == 1:
            winner = contenders[0]
            winner.stack += pot
            winners = [{
                "seat": winner.seat,
                "player_id": winner.player_id,
                "amount": pot,
                "hand_type": "UNCONTESTED",
                "description": "All other players folded",
                "cards": [],
            }]
            self.last_result = HandSummary(self.hand_number, pot, winners, uncontested=True)
            logger.info(f"Hand #{self.hand_number}: {winner.name} wins {pot} uncontested")
        else:
            shown = {
                p.seat: get_best_five_card_hand(p.hole_cards, self.community_cards)
                for p in contenders
            }
            best = max(shown.values())
            winner_seats = [seat for seat, result in shown.items() if result == best]
            payouts = self._split_pot(pot, winner_seats)

            winners = []
            for seat in winner_seats:
                player = self.players[seat]
                player.stack += payouts[seat]
                winners.append({
                    "seat": seat,
                    "player_id": player.player_id,
                    "amount": payouts[seat],
                    "hand_type": shown[seat].rank.name,
                    "description": get_hand_description(shown[seat]),
                    "cards": [str(c) for c in shown[seat].cards],
                })
            self.last_result = HandSummary(
                self.hand_number, pot, winners, uncontested=False, shown_hands=shown
            )
            logger.info(
                f"Hand #{self.hand_number} showdown: "
                + ", ".join(f"{w['player_id']} wins {w['amount']} ({w['description']})" for w in winners)
            )

        self.pot = 0
        self._notify("showdown")

    def _split_pot(self, pot: int, winner_seats: List[int]) -> Dict[int, int]:
        """
        Split the pot evenly between winners.

        Odd chips go one at a time to winners in seat order starting left of
        the button.
        """
        share, remainder = divmod(pot, len(winner_seats))
        payouts = {seat: share for seat in winner_seats}
        for offset in range(1, self.num_players + 1):
            if remainder == 0:
                break
            seat = (self.dealer_position + offset) % self.num_players
            if seat in payouts:
                payouts[seat] += 1
                remainder -= 1
        return payouts

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def take_action(self, seat: int, action: Action) -> ActionResult:
        """
        Apply an action for the seat on turn.

        Args:
            seat: Seat submitting the action; must be the current actor
            action: The action; RAISE amounts are increments above the call

        Returns:
            ActionResult describing what was applied

        Raises:
            IllegalActionError: Out of turn, no hand running, or the action
                breaks the betting rules. The game state is left unchanged.
        """
        if not self.is_hand_running():
            raise IllegalActionError("No hand in progress")
        if seat != self.current_player_index:
            raise IllegalActionError(
                f"Seat {seat} cannot act, seat {self.current_player_index} is on turn"
            )

        player = self.players[seat]
        if not player.can_act:
            raise IllegalActionError(f"Seat {seat} cannot act")

        round_max_before = self.get_round_max_bet()
        result = self._execute_action(player, action)

        self.action_log.append(ActionRecord(
            seat=seat,
            player_id=player.player_id,
            action_type=result.action_type,
            amount=result.amount,
            raise_amount=max(0, player.current_bet - round_max_before),
            is_all_in=player.is_all_in,
            phase=self.phase,
        ))
        logger.debug(f"Seat {seat} ({player.name}): {result.message}")
        self._notify("action")

        self._advance_turn()
        self._progress()
        return result

    def _execute_action(self, player: Player, action: Action) -> ActionResult:
        """Validate then apply one action."""
        chips_to_call = self.get_round_max_bet() - player.current_bet

        if action.type == ActionType.FOLD:
            player.fold()
            return ActionResult(True, "Folded", ActionType.FOLD, 0)

        if action.type == ActionType.CHECK:
            if chips_to_call > 0:
                raise IllegalActionError(f"Cannot check, must call ${chips_to_call}")
            player.check()
            return ActionResult(True, "Checked", ActionType.CHECK, 0)

        if action.type == ActionType.CALL:
            if chips_to_call <= 0:
                player.check()
                return ActionResult(True, "Checked", ActionType.CHECK, 0)
            actual = player.call(chips_to_call)
            self.pot += actual
            return ActionResult(True, f"Called ${actual}", ActionType.CALL, actual)

        if action.type == ActionType.RAISE:
            amount = action.amount
            if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
                raise IllegalActionError(f"Raise amount must be a positive integer, got {amount!r}")

            if not is_valid_raise(
                amount, chips_to_call, self.last_raise_amount, self.big_blind, player.stack
            ):
                min_raise = self.get_min_raise_increment()
                raise IllegalActionError(
                    f"Minimum raise is ${min_raise} above the call (got ${amount})"
                )

            round_max = self.get_round_max_bet()
            actual = player.raise_by(chips_to_call, amount)
            self.pot += actual

            increment = player.current_bet - round_max
            if increment > 0:
                if increment >= self.get_min_raise_increment():
                    self.last_raise_amount = increment
                self._reopen_action(player)
                return ActionResult(True, f"Raised to ${player.current_bet}", ActionType.RAISE, actual)

            # Stack too short to get past the call
            return ActionResult(True, f"Called ${actual} (all-in)", ActionType.CALL, actual)

        raise IllegalActionError(f"Unknown action: {action.type}")

    def _reopen_action(self, raiser: Player) -> None:
        """Everyone else must act again after a raise."""
        for player in self.players:
            if player is not raiser and player.can_act:
                player.has_acted = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_call_amount(self, seat: int) -> int:
        """Chips the seat needs to match the round maximum."""
        return max(0, self.get_round_max_bet() - self.players[seat].current_bet)

    def get_min_raise_increment(self) -> int:
        return calculate_min_raise(self.last_raise_amount, self.big_blind)

    def get_legal_actions(self, seat: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Legal actions for a seat (default: the seat on turn).

        Returns:
            List of action dicts with type and constraints
        """
        if seat is None:
            seat = self.current_player_index
        if not self.is_hand_running() or seat != self.current_player_index:
            return []

        player = self.players[seat]
        if not player.can_act:
            return []

        chips_to_call = self.get_call_amount(seat)
        actions: List[Dict[str, Any]] = []
        for action_type in legal_action_types(chips_to_call, player.stack):
            if action_type == ActionType.CALL:
                actions.append({"type": "CALL", "amount": min(chips_to_call, player.stack)})
            elif action_type == ActionType.RAISE:
                max_raise = player.stack - chips_to_call
                actions.append({
                    "type": "RAISE",
                    "min": min(self.get_min_raise_increment(), max_raise),
                    "max": max_raise,
                })
            else:
                actions.append({"type": action_type.value})
        return actions

    def get_state_view(self, seat: int) -> StateView:
        """Immutable snapshot for the decision agent playing this seat."""
        return StateView(
            seat=seat,
            hole_cards=tuple(self.players[seat].hole_cards),
            community_cards=tuple(self.community_cards),
            pot=self.pot,
            current_bet=self.get_round_max_bet(),
            call_amount=self.get_call_amount(seat),
            min_raise=self.get_min_raise_increment(),
            players=tuple(
                SeatView(
                    seat=p.seat,
                    player_id=p.player_id,
                    name=p.name,
                    stack=p.stack,
                    current_bet=p.current_bet,
                    total_bet=p.total_bet,
                    folded=p.is_folded,
                    all_in=p.is_all_in,
                    active=p.is_active,
                    is_agent=p.is_agent,
                )
                for p in self.players
            ),
            phase=self.phase,
            small_blind=self.small_blind,
            big_blind=self.big_blind,
            dealer_position=self.dealer_position,
            hand_number=self.hand_number,
        )

    def get_table_view(self, viewer_seat: Optional[int] = None, event: str = "") -> TableView:
        """
        Presentation model for a viewer.

        Hole cards are shown for the viewer's own seat, and for every seat
        that reached a contested showdown.
        """
        shown_seats = set()
        if self.last_result is not None and not self.last_result.uncontested:
            shown_seats = set(self.last_result.shown_hands)

        seats = []
        for p in self.players:
            visible = p.seat == viewer_seat or p.seat in shown_seats
            cards = tuple(str(c) if visible else None for c in p.hole_cards)
            if self.is_hand_running() and p.seat == self.current_player_index:
                status = "TO ACT"
            elif p.state == PlayerState.ACTIVE:
                status = "WAITING"
            else:
                status = p.status_tag
            seats.append(SeatViewModel(
                seat=p.seat,
                name=p.name,
                stack=p.stack,
                bet=p.current_bet,
                cards=cards,
                status=status,
                is_dealer=p.seat == self.dealer_position,
                is_agent=p.is_agent,
                last_action=p.last_action,
            ))

        current_seat = self.current_player_index if self.is_hand_running() else None
        return TableView(
            hand_number=self.hand_number,
            phase=self.phase.name,
            pot=self.pot,
            community_cards=tuple(str(c) for c in self.community_cards),
            seats=tuple(seats),
            current_seat=current_seat,
            legal_actions=tuple(self.get_legal_actions()) if current_seat is not None else (),
            result=self.last_result.to_dict() if self.last_result else None,
            event=event,
        )

    def get_winners(self) -> List[Dict[str, Any]]:
        """Winner information after the hand is complete."""
        if self.phase != GamePhase.SHOWDOWN or self.last_result is None:
            return []
        return self.last_result.winners
