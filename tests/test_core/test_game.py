"""
Tests for Texas Hold'em game engine.
"""

import dataclasses
import random

import pytest
from pokerfish.agents.random_agent import RandomAgent
from pokerfish.core.game import (
    HandStartError, IllegalActionError, TexasHoldemGame,
)
from pokerfish.core.player import PlayerState
from pokerfish.core.rules import Action, ActionType, GamePhase


class TestGameInitialization:
    """Tests for game initialization."""

    def test_create_two_player_game(self, two_player_game):
        assert two_player_game.num_players == 2
        assert len(two_player_game.players) == 2

    def test_invalid_player_count(self):
        """Test that invalid player counts raise errors."""
        with pytest.raises(ValueError):
            TexasHoldemGame(num_players=1)
        with pytest.raises(ValueError):
            TexasHoldemGame(num_players=11)

    def test_invalid_blinds(self):
        with pytest.raises(ValueError):
            TexasHoldemGame(small_blind=0)
        with pytest.raises(ValueError):
            TexasHoldemGame(small_blind=20, big_blind=10)

    def test_player_ids_must_match_seats(self):
        with pytest.raises(ValueError):
            TexasHoldemGame(num_players=3, player_ids=["a", "b"])

    def test_initial_state(self, two_player_game):
        """Test initial game state."""
        assert two_player_game.phase == GamePhase.WAITING
        assert not two_player_game.is_hand_running()
        assert two_player_game.is_game_running()
        assert two_player_game.total_chips() == 2000
        assert two_player_game.current_player is None


class TestStartHand:
    """Tests for starting a hand."""

    def test_start_hand_returns_token(self, two_player_game):
        assert two_player_game.start_hand() == 1
        assert two_player_game.phase == GamePhase.PREFLOP
        assert two_player_game.is_hand_running()

    def test_players_receive_cards(self, two_player_game):
        two_player_game.start_hand()
        for player in two_player_game.players:
            assert len(player.hole_cards) == 2
        assert two_player_game.deck.remaining == 48

    def test_blinds_posted(self, two_player_game):
        """Test that blinds go into bets and the pot."""
        game = two_player_game
        game.start_hand()

        assert game.dealer_position == 0
        assert game.small_blind_position == 1
        assert game.big_blind_position == 0
        assert game.players[1].current_bet == 10
        assert game.players[0].current_bet == 20
        assert game.pot_total == 30
        assert game.get_round_max_bet() == 20

    def test_first_actor_is_after_big_blind(self, six_player_game):
        """Test that preflop action starts three seats after the dealer."""
        game = six_player_game
        game.start_hand()

        assert (game.dealer_position, game.small_blind_position, game.big_blind_position) == (0, 1, 2)
        assert game.current_player_index == 3
        assert game.current_player is game.players[3]

    def test_cannot_start_during_hand(self, two_player_game):
        two_player_game.start_hand()
        with pytest.raises(HandStartError):
            two_player_game.start_hand()
        assert two_player_game.hand_number == 1

    def test_refused_start_changes_nothing(self, two_player_game):
        """Test that a table with one funded seat cannot start a hand."""
        game = two_player_game
        game.players[1].stack = 0

        with pytest.raises(HandStartError):
            game.start_hand()

        assert game.hand_number == 0
        assert game.phase == GamePhase.WAITING
        assert game.players[0].stack == 1000
        assert not game.is_game_running()

    def test_dealer_button_rotates(self, two_player_game):
        game = two_player_game
        game.start_hand()
        game.take_action(1, Action.fold())

        assert game.start_hand() == 2
        assert game.dealer_position == 1
        assert game.small_blind_position == 0
        assert game.big_blind_position == 1
        assert game.current_player_index == 0


class TestActions:
    """Tests for applying actions."""

    def test_fold_ends_heads_up_hand(self, two_player_game):
        game = two_player_game
        game.start_hand()

        result = game.take_action(1, Action.fold())

        assert result.success
        assert result.action_type == ActionType.FOLD
        assert game.phase == GamePhase.SHOWDOWN
        assert not game.is_hand_running()
        assert game.players[0].stack == 1010
        assert game.players[1].stack == 990
        assert game.pot_total == 0

    def test_big_blind_gets_option(self, two_player_game):
        """Test that a limp does not end the round before the big blind acts."""
        game = two_player_game
        game.start_hand()

        result = game.take_action(1, Action.call())
        assert result.action_type == ActionType.CALL
        assert result.amount == 10
        assert game.phase == GamePhase.PREFLOP
        assert game.current_player_index == 0

        game.take_action(0, Action.check())
        assert game.phase == GamePhase.FLOP
        assert len(game.community_cards) == 3
        assert game.current_player_index == 1
        assert all(p.current_bet == 0 for p in game.players)
        assert game.pot_total == 40

    def test_call_with_nothing_to_call_is_check(self, two_player_game):
        game = two_player_game
        game.start_hand()
        game.take_action(1, Action.call())

        result = game.take_action(0, Action.call())
        assert result.action_type == ActionType.CHECK
        assert result.amount == 0
        assert game.players[0].stack == 980

    def test_postflop_round_goes_around(self, two_player_game):
        """Test that one check does not close a postflop round."""
        game = two_player_game
        game.start_hand()
        game.take_action(1, Action.call())
        game.take_action(0, Action.check())

        game.take_action(1, Action.check())
        assert game.phase == GamePhase.FLOP
        assert game.current_player_index == 0

        game.take_action(0, Action.check())
        assert game.phase == GamePhase.TURN
        assert len(game.community_cards) == 4

    def test_check_facing_bet_rejected(self, two_player_game):
        game = two_player_game
        game.start_hand()

        with pytest.raises(IllegalActionError):
            game.take_action(1, Action.check())

        assert game.pot_total == 30
        assert game.current_player_index == 1
        assert game.players[1].stack == 990

    def test_action_out_of_turn_rejected(self, two_player_game):
        game = two_player_game
        game.start_hand()
        with pytest.raises(IllegalActionError):
            game.take_action(0, Action.call())

    def test_action_without_hand_rejected(self, two_player_game):
        with pytest.raises(IllegalActionError):
            two_player_game.take_action(0, Action.check())

    def test_malformed_raise_amounts_rejected(self, two_player_game):
        game = two_player_game
        game.start_hand()

        for amount in (-5, 0, 2.5, True):
            with pytest.raises(IllegalActionError):
                game.take_action(1, Action(ActionType.RAISE, amount))

        assert game.pot_total == 30

    def test_min_raise_enforced(self, six_player_game):
        """Test that raises must be at least the last raise increment."""
        game = six_player_game
        game.start_hand()

        with pytest.raises(IllegalActionError):
            game.take_action(3, Action.raise_by(10))

        result = game.take_action(3, Action.raise_by(20))
        assert result.action_type == ActionType.RAISE
        assert game.players[3].current_bet == 40
        assert game.get_min_raise_increment() == 20

        game.take_action(4, Action.raise_by(30))
        assert game.players[4].current_bet == 70
        assert game.get_min_raise_increment() == 30

        with pytest.raises(IllegalActionError):
            game.take_action(5, Action.raise_by(20))

    def test_raise_reopens_action(self, three_player_game):
        """Test that everyone must respond to a raise."""
        game = three_player_game
        game.start_hand()
        game.take_action(0, Action.call())
        game.take_action(1, Action.call())

        assert game.current_player_index == 2
        game.take_action(2, Action.raise_by(20))
        assert game.phase == GamePhase.PREFLOP
        assert game.current_player_index == 0

        game.take_action(0, Action.call())
        assert game.phase == GamePhase.PREFLOP
        game.take_action(1, Action.call())

        assert game.phase == GamePhase.FLOP
        assert game.pot_total == 120

    def test_raise_larger_than_stack_goes_all_in(self, two_player_game):
        game = two_player_game
        game.start_hand()

        game.take_action(1, Action.raise_by(5000))
        assert game.players[1].stack == 0
        assert game.players[1].state == PlayerState.ALL_IN
        assert game.players[1].current_bet == 1000

    def test_pot_tracks_total_bets(self, three_player_game):
        game = three_player_game
        game.start_hand()
        game.take_action(0, Action.raise_by(40))
        game.take_action(1, Action.call())

        assert game.pot_total == sum(p.total_bet for p in game.players)
        assert game.total_chips() == 3000

    def test_action_log(self, two_player_game):
        game = two_player_game
        game.start_hand()
        game.take_action(1, Action.raise_by(20))

        record = game.action_log[-1]
        assert record.seat == 1
        assert record.action_type == ActionType.RAISE
        assert record.amount == 30
        assert record.raise_amount == 20
        assert record.phase == GamePhase.PREFLOP


class TestRoundCompletion:
    """Tests for the betting round completion check."""

    def test_round_incomplete_mid_round(self, three_player_game):
        game = three_player_game
        game.start_hand()
        game.take_action(0, Action.call())

        assert not game.is_betting_round_complete()
        assert not game.is_betting_round_complete()

    def test_check_is_idempotent(self, two_player_game):
        """Test that asking twice never changes the answer or the state."""
        game = two_player_game
        game.start_hand()
        game.take_action(1, Action.call())
        game.take_action(0, Action.check())
        game.take_action(1, Action.check())

        snapshot = [(p.current_bet, p.has_acted, p.state) for p in game.players]
        first = game.is_betting_round_complete()
        second = game.is_betting_round_complete()

        assert first == second
        assert snapshot == [(p.current_bet, p.has_acted, p.state) for p in game.players]


class TestListeners:
    """Tests for state-changed notifications."""

    def test_events_over_a_hand(self, two_player_game, check_down):
        game = two_player_game
        events = []
        game.add_listener(lambda g, event: events.append(event))

        game.start_hand()
        check_down(game)

        assert {"hand_start", "blinds", "deal", "action", "street", "showdown"} <= set(events)
        assert events.count("street") == 3
        assert events[-1] == "showdown"

    def test_remove_listener(self, two_player_game):
        game = two_player_game
        events = []

        def listener(g, event):
            events.append(event)

        game.add_listener(listener)
        game.remove_listener(listener)
        game.start_hand()
        assert events == []


class TestViews:
    """Tests for agent and presentation views."""

    def test_state_view(self, two_player_game):
        game = two_player_game
        game.start_hand()
        view = game.get_state_view(1)

        assert view.seat == 1
        assert view.hole_cards == tuple(game.players[1].hole_cards)
        assert view.community_cards == ()
        assert view.pot == 30
        assert view.current_bet == 20
        assert view.call_amount == 10
        assert view.min_raise == 20
        assert view.phase == GamePhase.PREFLOP
        assert view.me.stack == 990
        assert view.stack == 990
        assert [p.seat for p in view.active_opponents] == [0]
        assert not hasattr(view.players[0], "hole_cards")

    def test_state_view_is_frozen(self, two_player_game):
        two_player_game.start_hand()
        view = two_player_game.get_state_view(1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            view.pot = 0

    def test_table_view_masks_other_seats(self, two_player_game):
        game = two_player_game
        game.start_hand()
        view = game.get_table_view(viewer_seat=0)

        assert all(card is not None for card in view.seats[0].cards)
        assert view.seats[1].cards == (None, None)
        assert view.current_seat == 1
        assert view.seats[1].status == "TO ACT"
        assert view.seats[0].status == "WAITING"
        assert view.seats[0].is_dealer
        assert view.phase == "PREFLOP"
        assert [a["type"] for a in view.legal_actions] == ["FOLD", "CALL", "RAISE"]

    def test_table_view_reveals_showdown(self, two_player_game, check_down):
        game = two_player_game
        game.start_hand()
        check_down(game)
        view = game.get_table_view()

        assert all(card is not None for seat in view.seats for card in seat.cards)
        assert view.result is not None
        assert view.current_seat is None
        assert len(view.community_cards) == 5

    def test_table_view_keeps_cards_hidden_when_uncontested(self, two_player_game):
        game = two_player_game
        game.start_hand()
        game.take_action(1, Action.fold())
        view = game.get_table_view()

        assert view.seats[0].cards == (None, None)
        assert view.seats[1].status == "FOLDED"
        assert view.result["uncontested"]

    def test_table_view_to_dict(self, two_player_game):
        two_player_game.start_hand()
        data = two_player_game.get_table_view(viewer_seat=1, event="test").to_dict()

        assert data["event"] == "test"
        assert data["hand_number"] == 1
        assert len(data["seats"]) == 2
        assert data["seats"][0]["cards"] == [None, None]

    def test_legal_actions(self, two_player_game):
        game = two_player_game
        game.start_hand()

        assert game.get_legal_actions() == [
            {"type": "FOLD"},
            {"type": "CALL", "amount": 10},
            {"type": "RAISE", "min": 20, "max": 980},
        ]
        assert game.get_legal_actions(0) == []


class TestChipConservation:
    """Tests that chips are never created or destroyed."""

    @staticmethod
    def _play_hand(game, agents, total):
        while game.is_hand_running():
            seat = game.current_player_index
            action = agents[seat].act(game.get_state_view(seat))
            game.take_action(seat, action)
            assert game.total_chips() == total
            assert game.pot_total == sum(p.total_bet for p in game.players)

    def test_random_play_conserves_chips(self):
        for seed in range(10):
            game = TexasHoldemGame(num_players=4, rng=random.Random(seed))
            agents = [
                RandomAgent(str(i), rng=random.Random(seed * 10 + i)) for i in range(4)
            ]
            total = game.total_chips()

            for _ in range(25):
                if not game.is_game_running():
                    break
                before = sum(p.stack for p in game.players)
                game.start_hand()
                self._play_hand(game, agents, total)

                assert sum(p.stack for p in game.players) == before
                assert game.pot_total == 0
                result = game.last_result
                assert sum(w["amount"] for w in result.winners) == result.pot
