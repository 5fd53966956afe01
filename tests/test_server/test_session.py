"""
Tests for table sessions and deferred agent turns.
"""

import pytest
from pokerfish.agents.heuristic import HeuristicAgent
from pokerfish.core.game import HandStartError, IllegalActionError
from pokerfish.core.rules import Action
from pokerfish.server.schemas import SeatConfig, TableConfig
from pokerfish.server.session import TableManager, TableSession


class FakeHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Records deferred calls so tests decide when they run."""

    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback):
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def run_next(self):
        handle = next(h for h in self.handles if not h.cancelled)
        self.handles.remove(handle)
        handle.callback()


def immediate(delay, callback):
    callback()


class StubbornAgent(HeuristicAgent):
    """Always checks, even facing a bet."""

    def act(self, view):
        return Action.check()


class WatchingAgent(HeuristicAgent):
    """Keeps every view it is shown."""

    def __init__(self, player_id):
        super().__init__(player_id)
        self.seen = []

    def observe(self, view):
        self.seen.append(view)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def session(scheduler):
    """Default table: human on seat 0, three agents."""
    return TableSession("table-1", TableConfig(seed=11), scheduler=scheduler)


@pytest.fixture
def heads_up_config():
    return TableConfig(
        seats=[SeatConfig(kind="human", name="You"), SeatConfig(personality="loose")],
        seed=3,
    )


class TestSessionSetup:
    """Tests for building a table from its configuration."""

    def test_seats(self, session):
        names = [p.name for p in session.game.players]
        assert names == ["You", "Tight 1", "Loose 2", "Aggressive 3"]
        assert not session.is_agent_seat(0)
        assert session.is_agent_seat(1)
        assert not session.is_agent_seat(9)
        assert session.game.players[1].is_agent
        assert session.game.players[1].personality == "tight"

    def test_summary(self, session):
        summary = session.summary()
        assert summary["table_id"] == "table-1"
        assert summary["seats"][0] == {
            "seat": 0, "name": "You", "kind": "human", "personality": None, "difficulty": None,
        }
        assert summary["seats"][3]["personality"] == "aggressive"


class TestAgentTurns:
    """Tests for deferred agent decisions."""

    def test_agent_turn_is_scheduled(self, session, scheduler):
        session.start_hand()

        assert session.game.current_player_index == 3
        assert len(scheduler.handles) == 1
        assert scheduler.handles[0].delay == 1.0
        assert session.game.action_log == []

    def test_agent_acts_when_callback_runs(self, session, scheduler):
        session.start_hand()
        scheduler.run_next()

        assert [r.seat for r in session.game.action_log] == [3]
        assert session.game.current_player_index == 0
        assert scheduler.handles == []

    def test_callback_for_seat_off_turn_is_ignored(self, session, scheduler):
        session.start_hand()
        handle = scheduler.handles[0]
        handle.callback()
        handle.callback()

        assert len(session.game.action_log) == 1

    def test_callback_from_previous_hand_is_ignored(self, heads_up_config, scheduler):
        session = TableSession("t", heads_up_config, scheduler=scheduler)
        session.start_hand()
        stale = scheduler.handles[0]

        # End the hand behind the scheduler's back
        session.game.take_action(1, Action.fold())
        session.start_hand()

        assert stale.cancelled
        assert session.game.current_player_index == 0
        stale.callback()
        assert session.game.action_log == []
        assert session.hand_token == 2

    def test_close_cancels_pending_turn(self, session, scheduler):
        session.start_hand()
        session.close()
        assert scheduler.handles[0].cancelled

    def test_illegal_agent_choice_falls_back(self, session, scheduler):
        session.agents[3] = StubbornAgent("seat-3")
        session.start_hand()
        scheduler.run_next()

        assert session.game.players[3].is_folded
        assert session.game.current_player_index == 0

    def test_agents_only_table_plays_out(self):
        config = TableConfig(seats=[SeatConfig(personality=p) for p in ("tight", "loose", "maniac")], seed=5)
        session = TableSession("t", config, scheduler=immediate)

        session.start_hand()

        assert not session.game.is_hand_running()
        assert session.game.last_result is not None
        assert session.game.total_chips() == 3000
        assert sum(session.get_agent_stats(s)["decisions"] for s in range(3)) > 0

    def test_seeded_tables_repeat(self):
        def play(seed):
            config = TableConfig(seats=[SeatConfig(personality="maniac")] * 4, seed=seed)
            session = TableSession("t", config, scheduler=immediate)
            for _ in range(3):
                if session.game.is_game_running():
                    session.start_hand()
            return [(r.seat, r.action_type, r.amount) for r in session.game.action_log]

        assert play(21) == play(21)


class TestHumanActions:
    """Tests for actions submitted by people."""

    def test_human_then_agent(self, scheduler):
        config = TableConfig(seats=[SeatConfig(personality="loose"), SeatConfig(kind="human")], seed=8)
        session = TableSession("t", config, scheduler=scheduler)
        session.start_hand()

        # Heads-up the small blind (seat 1) acts first
        assert scheduler.handles == []
        result = session.submit_action(1, Action.call())
        assert result.success
        assert len(scheduler.handles) == 1

        with pytest.raises(IllegalActionError):
            session.submit_action(0, Action.check())

        scheduler.run_next()
        assert [r.seat for r in session.game.action_log] == [1, 0]

    def test_out_of_turn(self, session):
        session.start_hand()
        with pytest.raises(IllegalActionError):
            session.submit_action(0, Action.call())

    def test_start_during_hand(self, session):
        session.start_hand()
        with pytest.raises(HandStartError):
            session.start_hand()


class TestSubscribers:
    """Tests for the pushed state feed."""

    def test_initial_state(self, session):
        queue = session.subscribe(0)
        message = queue.get_nowait()
        assert message["type"] == "state"
        assert message["event"] == "subscribed"
        assert message["hand_number"] == 0

    def test_events_are_pushed(self, session):
        queue = session.subscribe(0)
        queue.get_nowait()
        session.start_hand()

        messages = [queue.get_nowait() for _ in range(queue.qsize())]
        assert {"blinds", "deal", "hand_start"} <= {m["event"] for m in messages}

        last = messages[-1]
        assert all(card is not None for card in last["seats"][0]["cards"])
        assert last["seats"][1]["cards"] == [None, None]

    def test_unsubscribe(self, session):
        queue = session.subscribe()
        queue.get_nowait()
        session.unsubscribe(queue)
        session.start_hand()
        assert queue.empty()


class TestObservers:
    """Tests for agents following the table between their turns."""

    def test_agents_observe_every_event(self, session, scheduler):
        watcher = WatchingAgent("seat-2")
        session.agents[2] = watcher
        session.start_hand()

        assert len(watcher.seen) >= 3
        assert all(view.seat == 2 for view in watcher.seen)
        assert watcher.seen[-1].hole_cards == tuple(session.game.players[2].hole_cards)

        seen = len(watcher.seen)
        scheduler.run_next()
        assert len(watcher.seen) > seen
        assert watcher.seen[-1].pot == session.game.pot

    def test_closed_table_stops_observing(self, session):
        watcher = WatchingAgent("seat-2")
        session.agents[2] = watcher
        session.close()
        session.game.start_hand()
        assert watcher.seen == []


class TestAgentStats:
    def test_stats_for_agent(self, session):
        stats = session.get_agent_stats(1)
        assert stats["seat"] == 1
        assert stats["name"] == "Tight 1"
        assert stats["personality"] == "Tight"
        assert stats["decisions"] == 0

    def test_no_stats_for_human(self, session):
        with pytest.raises(KeyError):
            session.get_agent_stats(0)
        with pytest.raises(KeyError):
            session.get_agent_stats(9)


class TestTableManager:
    """Tests for the table registry."""

    def test_create_and_get(self):
        manager = TableManager(scheduler=immediate)
        first = manager.create_table(TableConfig())
        second = manager.create_table(TableConfig())

        assert (first.table_id, second.table_id) == ("table-1", "table-2")
        assert manager.get_table("table-2") is second

    def test_unknown_table(self):
        with pytest.raises(KeyError):
            TableManager().get_table("table-9")

    def test_close(self):
        manager = TableManager(scheduler=immediate)
        session = manager.create_table(TableConfig())
        manager.create_table(TableConfig())

        manager.close_table(session.table_id)
        assert session.table_id not in manager.tables

        manager.close_all()
        assert manager.tables == {}
