"""
Base Agent Interface for Pokerfish.

This module defines the abstract base class for all seat controllers.
An agent receives an immutable StateView of its own seat and returns an
Action; it never touches the game directly.

Usage:
    class MyAgent(BaseAgent):
        def act(self, view):
            if view.call_amount == 0:
                return Action.check()
            return Action.call()
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pokerfish.core.rules import Action
from pokerfish.core.view import StateView


class BaseAgent(ABC):
    """
    Abstract base class for poker agents.

    Attributes:
        player_id: Unique identifier for this agent
        name: Human-readable name
    """

    def __init__(self, player_id: str, name: Optional[str] = None):
        self.player_id = player_id
        self.name = name or f"Agent-{player_id}"

    @abstractmethod
    def act(self, view: StateView) -> Action:
        """
        Choose an action for the seat on turn.

        Args:
            view: Snapshot of the table as this seat sees it

        Returns:
            The chosen Action. RAISE amounts are increments above the call.
        """

    def observe(self, view: StateView) -> None:
        """
        Observe a state change.

        Called whenever the game state changes. Override this method if your
        agent builds beliefs from what it sees.
        """

    def reset(self) -> None:
        """
        Reset the agent's internal state for a new game.

        Override this method if your agent maintains state between hands.
        """

    def on_hand_start(self, hand_number: int) -> None:
        """
        Called when a new hand starts.

        Args:
            hand_number: The hand number
        """

    def on_hand_end(self, result: Dict[str, Any]) -> None:
        """
        Called when a hand ends.

        Args:
            result: HandSummary.to_dict() of the finished hand
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.player_id}, {self.name})"


class HumanAgent(BaseAgent):
    """
    Placeholder agent for human players.

    This agent doesn't make decisions automatically - it's used
    to mark a seat as controlled by a human player.
    """

    def __init__(self, player_id: str, name: Optional[str] = None):
        super().__init__(player_id, name or f"Human-{player_id}")

    def act(self, view: StateView) -> Action:
        """
        Human action is provided externally.

        This method should not be called directly - human actions
        come through the API/WebSocket.
        """
        raise NotImplementedError("Human actions should come through the API")
