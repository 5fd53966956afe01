"""
Table sessions: one game plus the controllers of its seats.

A TableSession drives agent seats on a deferred schedule and pushes a
presentation view to every subscriber after each game event. TableManager
keeps the sessions of a running server.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Tuple
import asyncio
import itertools
import logging
import random

from pokerfish.agents.base import BaseAgent, HumanAgent
from pokerfish.agents.heuristic import HeuristicAgent
from pokerfish.core.game import ActionResult, IllegalActionError, TexasHoldemGame
from pokerfish.core.rules import Action
from pokerfish.server.schemas import TableConfig


logger = logging.getLogger(__name__)

# scheduler(delay_seconds, callback) -> handle with cancel(), or None
Scheduler = Callable[[float, Callable[[], None]], Any]


def loop_scheduler(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    """Run callback on the running event loop after delay seconds."""
    return asyncio.get_running_loop().call_later(delay, callback)


class TableSession:
    """
    A table being played.

    Human seats act through submit_action(). Agent seats are asked for a
    decision thinking_time seconds after their turn comes up. Every deferred
    turn carries the hand token it was issued for and is dropped if the
    table has moved on by the time it runs.
    """

    def __init__(
        self,
        table_id: str,
        config: TableConfig,
        scheduler: Optional[Scheduler] = None,
    ):
        self.table_id = table_id
        self.config = config
        self.thinking_time = config.thinking_time
        self._scheduler = scheduler or loop_scheduler
        self._pending: Any = None
        self._subscribers: List[Tuple[asyncio.Queue, Optional[int]]] = []

        rng = random.Random(config.seed)
        names = [
            seat.name or (f"Player {i}" if seat.is_human else f"{seat.personality.title()} {i}")
            for i, seat in enumerate(config.seats)
        ]
        self.game = TexasHoldemGame(
            num_players=len(config.seats),
            big_blind=config.big_blind,
            small_blind=config.small_blind,
            buy_in=config.buy_in,
            player_ids=[f"seat-{i}" for i in range(len(config.seats))],
            names=names,
            rng=rng,
        )

        self.agents: Dict[int, BaseAgent] = {}
        for i, seat in enumerate(config.seats):
            player = self.game.players[i]
            if seat.is_human:
                self.agents[i] = HumanAgent(player.player_id, player.name)
                continue
            player.is_agent = True
            player.personality = seat.personality
            player.difficulty = seat.difficulty
            agent_rng = random.Random(f"{config.seed}-{i}") if config.seed is not None else random.Random()
            self.agents[i] = HeuristicAgent(
                player.player_id,
                personality=seat.personality,
                difficulty=seat.difficulty,
                rng=agent_rng,
                name=player.name,
            )

        self.game.add_listener(self._on_game_event)

    @property
    def hand_token(self) -> int:
        return self.game.hand_token

    def is_agent_seat(self, seat: int) -> bool:
        return isinstance(self.agents.get(seat), HeuristicAgent)

    # ------------------------------------------------------------------
    # Hand flow
    # ------------------------------------------------------------------

    def start_hand(self) -> int:
        """
        Start a new hand and schedule the first agent turn.

        Raises:
            HandStartError: If the game refuses to start
        """
        token = self.game.start_hand()
        self._cancel_pending()
        logger.info(f"Table {self.table_id}: hand #{token} started")

        for agent in self.agents.values():
            agent.on_hand_start(token)

        self._after_action()
        return token

    def submit_action(self, seat: int, action: Action) -> ActionResult:
        """
        Apply a human seat's action.

        Raises:
            IllegalActionError: If the seat is played by an agent or the game
                rejects the action
        """
        if self.is_agent_seat(seat):
            raise IllegalActionError(f"Seat {seat} is played by an agent")
        result = self.game.take_action(seat, action)
        self._after_action()
        return result

    def _after_action(self) -> None:
        if self.game.is_hand_running():
            self._schedule_agent_turn()
        elif self.game.last_result is not None:
            result = self.game.last_result.to_dict()
            for agent in self.agents.values():
                agent.on_hand_end(result)

    def _schedule_agent_turn(self) -> None:
        seat = self.game.current_player_index
        if not self.is_agent_seat(seat):
            return
        token = self.hand_token
        self._pending = self._scheduler(
            self.thinking_time, lambda: self._run_agent_turn(token, seat)
        )

    def _run_agent_turn(self, token: int, seat: int) -> None:
        """Deferred agent decision; a no-op when the hand or turn has moved on."""
        if token != self.hand_token or not self.game.is_hand_running():
            logger.debug(f"Table {self.table_id}: dropping stale turn for hand #{token}")
            return
        if self.game.current_player_index != seat:
            logger.debug(f"Table {self.table_id}: seat {seat} is no longer on turn")
            return
        self._pending = None

        agent = self.agents[seat]
        action = agent.act(self.game.get_state_view(seat))
        try:
            self.game.take_action(seat, action)
        except IllegalActionError as e:
            logger.warning(f"Table {self.table_id}: {agent.name} chose {action}: {e}")
            fallback = Action.check() if self.game.get_call_amount(seat) == 0 else Action.fold()
            self.game.take_action(seat, fallback)
        self._after_action()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    # ------------------------------------------------------------------
    # Views and subscribers
    # ------------------------------------------------------------------

    def get_view(self, seat: Optional[int] = None, event: str = "") -> Dict[str, Any]:
        return self.game.get_table_view(viewer_seat=seat, event=event).to_dict()

    def get_agent_stats(self, seat: int) -> Dict[str, Any]:
        """
        Statistics of the heuristic agent on a seat.

        Raises:
            KeyError: If the seat is not played by a heuristic agent
        """
        agent = self.agents.get(seat)
        if not isinstance(agent, HeuristicAgent):
            raise KeyError(f"Seat {seat} has no agent")
        return {"seat": seat, "name": agent.name, **agent.get_stats()}

    def subscribe(self, seat: Optional[int] = None) -> asyncio.Queue:
        """Queue receiving a state message after every game event, starting with the current one."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append((queue, seat))
        queue.put_nowait({"type": "state", **self.get_view(seat, "subscribed")})
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers = [(q, s) for q, s in self._subscribers if q is not queue]

    def _on_game_event(self, game: TexasHoldemGame, event: str) -> None:
        for seat, agent in self.agents.items():
            agent.observe(game.get_state_view(seat))
        for queue, seat in self._subscribers:
            queue.put_nowait({"type": "state", **self.get_view(seat, event)})

    def close(self) -> None:
        self._cancel_pending()
        self.game.remove_listener(self._on_game_event)
        self._subscribers = []

    def summary(self) -> Dict[str, Any]:
        return {
            "table_id": self.table_id,
            "seats": [
                {
                    "seat": i,
                    "name": self.game.players[i].name,
                    "kind": seat.kind,
                    "personality": seat.personality if not seat.is_human else None,
                    "difficulty": seat.difficulty if not seat.is_human else None,
                }
                for i, seat in enumerate(self.config.seats)
            ],
            "small_blind": self.config.small_blind,
            "big_blind": self.config.big_blind,
            "buy_in": self.config.buy_in,
            "thinking_time": self.thinking_time,
        }


class TableManager:
    """
    Manages the tables of a server.

    Usage:
        manager = TableManager()
        session = manager.create_table(TableConfig())
        manager.get_table(session.table_id).start_hand()
    """

    def __init__(self, scheduler: Optional[Scheduler] = None):
        self.tables: Dict[str, TableSession] = {}
        self._scheduler = scheduler
        self._counter = itertools.count(1)

    def create_table(self, config: TableConfig) -> TableSession:
        table_id = f"table-{next(self._counter)}"
        session = TableSession(table_id, config, scheduler=self._scheduler)
        self.tables[table_id] = session
        logger.info(
            f"Created {table_id} with {len(config.seats)} seats "
            f"(blinds {config.small_blind}/{config.big_blind})"
        )
        return session

    def get_table(self, table_id: str) -> TableSession:
        """
        Raises:
            KeyError: If no such table exists
        """
        return self.tables[table_id]

    def close_table(self, table_id: str) -> None:
        session = self.tables.pop(table_id)
        session.close()
        logger.info(f"Closed {table_id}")

    def close_all(self) -> None:
        for table_id in list(self.tables):
            self.close_table(table_id)
