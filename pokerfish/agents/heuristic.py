"""
Heuristic decision agent.

HeuristicAgent plays a seat from a personality and a difficulty level. A
decision runs through a fixed pipeline of small stages, each taking the
decision so far and returning a new one:

1. Base decision from hand strength and pot odds
2. Personality adjustment (aggression, passivity, tightness)
3. Difficulty noise (occasional mistakes, bet sizing accuracy)
4. Bluff override on scary boards
5. Legalization against the table limits

Every random draw comes from the agent's random.Random, so a seeded agent
replays the same decisions for the same views.
"""

from __future__ import annotations
from collections import Counter, deque
from dataclasses import dataclass, replace
from typing import Any, Deque, Dict, Optional, Sequence, Union
import logging
import random

from pokerfish.agents.base import BaseAgent
from pokerfish.agents.profiles import (
    Difficulty, Personality, DEFAULT_DIFFICULTY, DEFAULT_PERSONALITY,
    get_difficulty, get_personality,
)
from pokerfish.core.card import Card, Rank
from pokerfish.core.hand import get_hand_strength
from pokerfish.core.rules import Action, ActionType, GamePhase
from pokerfish.core.view import StateView


logger = logging.getLogger(__name__)

HISTORY_SIZE = 50

# Preflop thresholds on the adjusted chart strength
PREFLOP_RAISE_STRENGTH = 0.8
PREFLOP_CALL_STRENGTH = 0.6
PREFLOP_SPECULATIVE_STRENGTH = 0.4

# Raise size multiplier by phase
RAISE_SIZE_MULTIPLIERS = {
    GamePhase.PREFLOP: 3.0,
    GamePhase.FLOP: 0.7,
    GamePhase.TURN: 0.8,
    GamePhase.RIVER: 0.9,
}
PREFLOP_RAISE_STACK_SHARE = 0.1
BLUFF_STACK_SHARE = 0.3
MAX_BLUFF_OPPONENTS = 2


@dataclass(frozen=True)
class Decision:
    """A decision in progress; amount is in chips and may still be fractional."""
    action: ActionType
    amount: float = 0.0
    is_bluff: bool = False


@dataclass(frozen=True)
class DecisionRecord:
    """One past decision, kept for statistics only."""
    action: ActionType
    strength: float
    phase: GamePhase
    pot: int


@dataclass(frozen=True)
class BoardTexture:
    """How dangerous the community cards look."""
    scary: bool = False
    flush_draw: bool = False
    straight_draw: bool = False
    pairs: int = 0


def analyze_board_texture(community_cards: Sequence[Card]) -> BoardTexture:
    """
    Assess the board for flush, straight and paired-rank danger.

    Fewer than three cards is never scary.
    """
    if len(community_cards) < 3:
        return BoardTexture()

    suit_counts = Counter(c.suit for c in community_cards)
    flush_draw = max(suit_counts.values()) >= 3

    rank_counts = Counter(int(c.rank) for c in community_cards)
    pairs = sum(1 for count in rank_counts.values() if count >= 2)

    straight_draw = _has_straight_draw(sorted(rank_counts))

    return BoardTexture(
        scary=flush_draw or straight_draw or pairs > 0,
        flush_draw=flush_draw,
        straight_draw=straight_draw,
        pairs=pairs,
    )


def _has_straight_draw(unique_ranks: Sequence[int]) -> bool:
    """Any three distinct ranks within a span of four, or an Ace with a wheel card."""
    for i in range(len(unique_ranks) - 2):
        if unique_ranks[i + 2] - unique_ranks[i] <= 4:
            return True
    if Rank.ACE in unique_ranks and any(r <= Rank.FIVE for r in unique_ranks):
        return True
    return False


def preflop_strength(hole_cards: Sequence[Card]) -> float:
    """
    Chart strength of two hole cards in [0, 1].

    Pocket pairs run from 0.5 (deuces) to 0.95 (aces). Other hands scale
    with the sum of their ranks up to 0.6, plus small bonuses for being
    suited or connected.
    """
    if len(hole_cards) != 2:
        return 0.0

    high, low = sorted((int(c.rank) for c in hole_cards), reverse=True)
    if high == low:
        return 0.5 + (high - Rank.TWO) / 12 * 0.45

    strength = (high + low - 4) / 24 * 0.6
    if is_suited(hole_cards):
        strength += 0.05
    if high - low == 1:
        strength += 0.03
    return strength


def is_pocket_pair(hole_cards: Sequence[Card]) -> bool:
    return len(hole_cards) == 2 and hole_cards[0].rank == hole_cards[1].rank


def is_suited(hole_cards: Sequence[Card]) -> bool:
    return len(hole_cards) == 2 and hole_cards[0].suit == hole_cards[1].suit


def is_suited_connector(hole_cards: Sequence[Card]) -> bool:
    if not is_suited(hole_cards):
        return False
    return abs(hole_cards[0].rank - hole_cards[1].rank) == 1


def pocket_pair_bonus(strength: float) -> float:
    """Extra strength for a pocket pair, larger for bigger pairs."""
    if strength > 0.8:
        return 0.1
    if strength > 0.6:
        return 0.05
    if strength > 0.4:
        return 0.02
    return 0.0


class HeuristicAgent(BaseAgent):
    """
    Rule-based agent with a personality and a difficulty level.

    Attributes:
        personality: Immutable playing style record
        difficulty: Immutable skill level record
        rng: Random source for every probabilistic choice
        history: Most recent decisions, for statistics only
    """

    def __init__(
        self,
        player_id: str,
        personality: Union[str, Personality] = DEFAULT_PERSONALITY,
        difficulty: Union[int, Difficulty] = DEFAULT_DIFFICULTY,
        rng: Optional[random.Random] = None,
        name: Optional[str] = None,
    ):
        """
        Initialize the agent.

        Args:
            player_id: Unique identifier
            personality: Personality name or record
            difficulty: Difficulty level (1-5, clamped) or record
            rng: Random source; seed it for reproducible play
            name: Optional display name
        """
        if isinstance(personality, str):
            personality = get_personality(personality)
        if isinstance(difficulty, int):
            difficulty = get_difficulty(difficulty)

        super().__init__(player_id, name or f"{personality.name}-{player_id}")
        self.personality = personality
        self.difficulty = difficulty
        self.rng = rng or random.Random()

        self.history: Deque[DecisionRecord] = deque(maxlen=HISTORY_SIZE)
        self._decisions = 0
        self._voluntary = 0
        self._aggressive = 0

    def act(self, view: StateView) -> Action:
        return self.decide(view)

    def decide(self, view: StateView, rng: Optional[random.Random] = None) -> Action:
        """
        Choose a legal action for the seat in view.

        Args:
            view: Snapshot for this agent's seat
            rng: Override random source for this decision

        Returns:
            An action the game accepts: never a check facing a bet, and never
            a raise committing more than the stack
        """
        rng = rng or self.rng
        strength = self.evaluate_strength(view)

        decision = self._base_decision(view, strength, rng)
        decision = self._apply_personality(decision, view, strength, rng)
        decision = self._apply_difficulty(decision, strength, rng)
        if self._should_bluff(view, strength, rng):
            decision = self._bluff(view, rng) or decision

        action = self._legalize(decision, view)
        self._record(action, strength, view)

        logger.debug(
            f"{self.name} ({self.personality.name}) strength={strength:.2f} -> {action}"
            + (" [bluff]" if decision.is_bluff else "")
        )
        return action

    def evaluate_strength(self, view: StateView) -> float:
        """Heuristic strength; preflop uses the starting-hand chart."""
        if view.phase == GamePhase.PREFLOP or not view.community_cards:
            return self._preflop_strength(view.hole_cards)
        return get_hand_strength(view.hole_cards, view.community_cards)

    def _preflop_strength(self, hole_cards: Sequence[Card]) -> float:
        strength = preflop_strength(hole_cards)
        if is_pocket_pair(hole_cards):
            strength += pocket_pair_bonus(strength)
        if self.personality.vpip > 0.3 and is_suited_connector(hole_cards):
            strength += 0.05
        return min(strength, 1.0)

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _base_decision(self, view: StateView, strength: float, rng: random.Random) -> Decision:
        """Continue, raise or fold from strength alone."""
        if view.phase == GamePhase.PREFLOP:
            if strength >= PREFLOP_RAISE_STRENGTH:
                return Decision(ActionType.RAISE, self._raise_size(strength, view))
            if strength >= PREFLOP_CALL_STRENGTH:
                return Decision(ActionType.CALL)
            if strength >= PREFLOP_SPECULATIVE_STRENGTH and rng.random() < self.personality.vpip:
                return Decision(ActionType.CALL)
            return Decision(ActionType.FOLD)

        call = view.call_amount
        pot_odds = call / (view.pot + call) if call > 0 else 0.0

        if strength >= self.personality.raise_threshold:
            return Decision(ActionType.RAISE, self._raise_size(strength, view))
        if strength >= self.personality.call_threshold or (
            pot_odds > 0 and (1 - strength) < pot_odds * 2
        ):
            return Decision(ActionType.CALL)
        return Decision(ActionType.FOLD)

    def _apply_personality(
        self, decision: Decision, view: StateView, strength: float, rng: random.Random
    ) -> Decision:
        # Aggressive upgrade
        if rng.random() < self.personality.aggression and decision.action == ActionType.CALL:
            if strength > 0.5:
                decision = Decision(ActionType.RAISE, self._raise_size(strength, view))

        # Passive downgrade
        if self.personality.is_passive and decision.action == ActionType.RAISE:
            if strength < 0.9:
                decision = Decision(ActionType.CALL)

        # Tight fold of marginal hands facing a big bet
        if self.personality.is_tight and strength < 0.6:
            if decision.action != ActionType.FOLD and view.call_amount > view.pot * 0.3:
                decision = Decision(ActionType.FOLD)

        return decision

    def _apply_difficulty(self, decision: Decision, strength: float, rng: random.Random) -> Decision:
        if rng.random() < self.difficulty.error_rate:
            if decision.action == ActionType.FOLD and strength > 0.6:
                return Decision(ActionType.CALL)
            if decision.action == ActionType.RAISE and strength < 0.4:
                return Decision(ActionType.FOLD)
            if decision.action == ActionType.CALL and strength < 0.3:
                return Decision(ActionType.FOLD)

        if decision.action == ActionType.RAISE:
            skill_factor = 0.5 + 0.5 * self.difficulty.skill_mod
            decision = replace(decision, amount=decision.amount * skill_factor)
        return decision

    def _should_bluff(self, view: StateView, strength: float, rng: random.Random) -> bool:
        if strength > 0.7:
            return False
        if rng.random() > self.personality.bluff_freq:
            return False
        if len(view.active_opponents) > MAX_BLUFF_OPPONENTS:
            return False
        texture = analyze_board_texture(view.community_cards)
        return texture.scary and view.phase != GamePhase.PREFLOP

    def _bluff(self, view: StateView, rng: random.Random) -> Optional[Decision]:
        """Raise 60-100% of the pot, never more than 30% of the stack.

        Returns None when that cap is below the minimum raise; a short stack
        keeps its earlier decision instead of bluffing for more than the cap.
        """
        size = view.pot * (0.6 + rng.random() * 0.4)
        size = min(size, view.stack * BLUFF_STACK_SHARE)
        if size < view.min_raise:
            return None
        return Decision(ActionType.RAISE, size, is_bluff=True)

    def _legalize(self, decision: Decision, view: StateView) -> Action:
        """Map a decision onto an action the game accepts."""
        call = view.call_amount

        if decision.action == ActionType.FOLD:
            return Action.check() if call == 0 else Action.fold()

        if decision.action == ActionType.RAISE:
            max_raise = view.stack - call
            if max_raise > 0:
                amount = max(int(round(decision.amount)), view.min_raise)
                return Action.raise_by(min(amount, max_raise))

        return Action.check() if call == 0 else Action.call()

    def _raise_size(self, strength: float, view: StateView) -> float:
        """Raise increment in chips, growing with strength and aggression."""
        multiplier = RAISE_SIZE_MULTIPLIERS.get(view.phase, RAISE_SIZE_MULTIPLIERS[GamePhase.FLOP])
        size_multiplier = (1 + strength * multiplier) * (1 + self.personality.aggression * 0.3)

        if view.phase == GamePhase.PREFLOP:
            size = view.big_blind * size_multiplier
            return min(size, view.stack * PREFLOP_RAISE_STACK_SHARE)
        return view.pot * 0.5 * size_multiplier

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def _record(self, action: Action, strength: float, view: StateView) -> None:
        self._decisions += 1
        if action.type != ActionType.FOLD:
            self._voluntary += 1
        if action.type == ActionType.RAISE:
            self._aggressive += 1
        self.history.append(DecisionRecord(action.type, strength, view.phase, view.pot))

    def get_stats(self) -> Dict[str, Any]:
        """
        Descriptive play statistics.

        Returns:
            Dictionary with decisions, vpip (share of non-fold decisions),
            aggression (share of raises), personality and difficulty
        """
        decisions = self._decisions or 1
        return {
            "decisions": self._decisions,
            "vpip": round(self._voluntary / decisions, 2),
            "aggression": round(self._aggressive / decisions, 2),
            "personality": self.personality.name,
            "difficulty": self.difficulty.level,
            "recent": len(self.history),
        }

    def reset(self) -> None:
        self.history.clear()
        self._decisions = 0
        self._voluntary = 0
        self._aggressive = 0
