"""
Simple baseline agents.

RandomAgent makes random legal moves and CallAgent always checks or calls.
Both are useful for testing the game loop and as opponents that need no
tuning.
"""

import random
from typing import Optional

from pokerfish.agents.base import BaseAgent
from pokerfish.core.rules import Action
from pokerfish.core.view import StateView


class RandomAgent(BaseAgent):
    """
    An agent that selects random legal actions.

    The agent has configurable tendencies:
    - fold_probability: How likely to fold when facing a bet
    - raise_probability: How likely to raise vs call
    """

    def __init__(
        self,
        player_id: str,
        name: Optional[str] = None,
        fold_probability: float = 0.1,
        raise_probability: float = 0.3,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the random agent.

        Args:
            player_id: Unique identifier
            name: Optional name
            fold_probability: Probability of folding (0-1)
            raise_probability: Probability of raising vs calling (0-1)
            rng: Random source; seed it for reproducible play
        """
        super().__init__(player_id, name or f"Random-{player_id}")
        self.fold_probability = fold_probability
        self.raise_probability = raise_probability
        self.rng = rng or random.Random()

    def act(self, view: StateView) -> Action:
        """
        Select a random legal action.

        Never folds when checking is free, and never raises for more than
        the stack allows.
        """
        roll = self.rng.random()

        if view.call_amount > 0 and roll < self.fold_probability:
            return Action.fold()

        max_raise = view.stack - view.call_amount
        if max_raise > 0 and roll < self.fold_probability + self.raise_probability:
            min_raise = min(view.min_raise, max_raise)
            return Action.raise_by(self.rng.randint(min_raise, max_raise))

        if view.call_amount == 0:
            return Action.check()
        return Action.call()


class CallAgent(BaseAgent):
    """
    An agent that always calls (or checks).

    Useful for testing and as a simple baseline.
    """

    def __init__(self, player_id: str, name: Optional[str] = None):
        super().__init__(player_id, name or f"Caller-{player_id}")

    def act(self, view: StateView) -> Action:
        """Always check or call."""
        if view.call_amount == 0:
            return Action.check()
        return Action.call()
