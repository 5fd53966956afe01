"""
Pytest configuration and shared fixtures for Pokerfish tests.
"""

import random

import pytest
from pokerfish.core.card import Card, Deck, Rank, Suit, full_deck, parse_cards
from pokerfish.core.player import Player
from pokerfish.core.game import TexasHoldemGame
from pokerfish.core.rules import Action, GamePhase
from pokerfish.core.view import SeatView, StateView


@pytest.fixture
def deck():
    """Create a fresh shuffled deck."""
    return Deck(shuffle=True, rng=random.Random(42))


@pytest.fixture
def unshuffled_deck():
    """Create a fresh unshuffled deck."""
    return Deck(shuffle=False)


@pytest.fixture
def sample_player():
    """Create a sample player with 1000 chips."""
    return Player(player_id="test_player", stack=1000, seat=0)


@pytest.fixture
def two_player_game():
    """Create a 2-player game (heads-up)."""
    return TexasHoldemGame(
        num_players=2,
        big_blind=20,
        small_blind=10,
        buy_in=1000,
        rng=random.Random(1),
    )


@pytest.fixture
def three_player_game():
    """Create a 3-player game."""
    return TexasHoldemGame(
        num_players=3,
        big_blind=20,
        small_blind=10,
        buy_in=1000,
        rng=random.Random(2),
    )


@pytest.fixture
def six_player_game():
    """Create a 6-player game."""
    return TexasHoldemGame(
        num_players=6,
        big_blind=20,
        small_blind=10,
        buy_in=1000,
        rng=random.Random(3),
    )


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return parse_cards("T♠ J♠ Q♠ K♠ A♠")


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]


@pytest.fixture
def rig_board():
    """
    Return a function fixing the hole cards and the board of a started hand.

    rig(game, {seat: "As Ah"}, "2d 7c 9d Jc 4h") replaces the given seats'
    hole cards and stacks the deck so the flop, turn and river come out as
    given, with burns in between.
    """
    def rig(game, hole_cards, board):
        used = []
        for seat, cards in hole_cards.items():
            game.players[seat].hole_cards = parse_cards(cards)
            used.extend(game.players[seat].hole_cards)
        board_cards = parse_cards(board)
        used.extend(board_cards)
        for player in game.players:
            used.extend(player.hole_cards)

        filler = [c for c in full_deck() if c not in used]
        order = [filler[0], *board_cards[:3], filler[1], board_cards[3], filler[2], board_cards[4]]
        game.deck = Deck.from_cards(order + filler[3:])
    return rig


def _check_down(game):
    """Check or call every decision until the hand is over."""
    while game.is_hand_running():
        seat = game.current_player_index
        if game.get_call_amount(seat) > 0:
            game.take_action(seat, Action.call())
        else:
            game.take_action(seat, Action.check())


@pytest.fixture
def check_down():
    return _check_down


@pytest.fixture
def make_view():
    """
    Return a function building a StateView for seat 0 without a game.

    make_view("As Ah", "2d 7c 9d", pot=100, call=20) gives a flop view with
    one opponent still in the hand. The phase follows the board size.
    """
    phases = {0: GamePhase.PREFLOP, 3: GamePhase.FLOP, 4: GamePhase.TURN, 5: GamePhase.RIVER}

    def build(hole, board="", pot=100, call=0, stack=1000, min_raise=20, opponents=1):
        community = tuple(parse_cards(board)) if board else ()
        seats = [
            SeatView(
                seat=seat, player_id=str(seat), name=f"Player {seat}",
                stack=stack if seat == 0 else 1000, current_bet=0, total_bet=0,
                folded=False, all_in=False, active=True,
            )
            for seat in range(opponents + 1)
        ]
        return StateView(
            seat=0,
            hole_cards=tuple(parse_cards(hole)),
            community_cards=community,
            pot=pot,
            current_bet=call,
            call_amount=call,
            min_raise=min_raise,
            players=tuple(seats),
            phase=phases[len(community)],
            small_blind=10,
            big_blind=20,
        )
    return build
