"""
Hand Evaluation for Texas Hold'em.

This module scores 5-7 cards and returns the best 5-card hand as a
HandResult: a category (1 = High Card ... 10 = Royal Flush), an ordered
kicker tuple whose meaning depends on the category, and the contributing
cards. Results are totally ordered by (category, kickers), so the best of
several hands is simply max().

Hand Rankings (best to worst):
10. Royal Flush: A♠ K♠ Q♠ J♠ T♠
9. Straight Flush: 5 consecutive cards of same suit
8. Four of a Kind: 4 cards of same rank
7. Full House: 3 of a kind + pair
6. Flush: 5 cards of same suit
5. Straight: 5 consecutive cards
4. Three of a Kind: 3 cards of same rank
3. Two Pair: 2 different pairs
2. One Pair: 2 cards of same rank
1. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel), which is 5-high.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from functools import total_ordering
from itertools import combinations
from enum import IntEnum
from collections import Counter

from pokerfish.core.card import Card, Rank


class HandRank(IntEnum):
    """Hand categories, higher is better."""
    ROYAL_FLUSH = 10
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


HAND_RANK_NAMES = {
    HandRank.ROYAL_FLUSH: "Royal Flush",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "Pair",
    HandRank.HIGH_CARD: "High Card",
}

# Base heuristic strength per category, used only by the decision agents
BASE_STRENGTH: Dict[HandRank, float] = {
    HandRank.HIGH_CARD: 0.0,
    HandRank.ONE_PAIR: 0.2,
    HandRank.TWO_PAIR: 0.4,
    HandRank.THREE_OF_A_KIND: 0.55,
    HandRank.STRAIGHT: 0.65,
    HandRank.FLUSH: 0.72,
    HandRank.FULL_HOUSE: 0.82,
    HandRank.FOUR_OF_A_KIND: 0.91,
    HandRank.STRAIGHT_FLUSH: 0.97,
    HandRank.ROYAL_FLUSH: 1.0,
}
MAX_KICKER_BONUS = 0.05

HAND_SIZE = 5
WHEEL_RANKS = (Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO, Rank.ACE)


@total_ordering
@dataclass(frozen=True, eq=False)
class HandResult:
    """
    The score of a hand.

    Attributes:
        rank: Hand category
        kickers: Tie-break ranks, most significant first
        cards: The cards that make the hand (5 for a complete hand)
    """
    rank: HandRank
    kickers: Tuple[int, ...]
    cards: Tuple[Card, ...]

    @property
    def name(self) -> str:
        return HAND_RANK_NAMES[self.rank]

    @property
    def key(self) -> Tuple[int, Tuple[int, ...]]:
        """Sort key: category, then kickers padded to five places."""
        padded = tuple(self.kickers) + (0,) * (HAND_SIZE - len(self.kickers))
        return int(self.rank), padded

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: HandResult) -> bool:
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def to_dict(self) -> dict:
        return {
            "rank": int(self.rank),
            "name": self.name,
            "kickers": list(self.kickers),
            "cards": [str(c) for c in self.cards],
            "description": get_hand_description(self),
        }


def evaluate_hand(cards: Sequence[Card]) -> HandResult:
    """
    Evaluate a poker hand (5-7 cards).

    Every 5-card subset is scored and the maximum kept; among equal subsets
    the first one found is returned.

    Raises:
        ValueError: If not 5-7 cards provided
    """
    if len(cards) < HAND_SIZE or len(cards) > 7:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")

    if len(cards) == HAND_SIZE:
        return _classify(cards)

    best: Optional[HandResult] = None
    for combo in combinations(cards, HAND_SIZE):
        result = _classify(combo)
        if best is None or result > best:
            best = result
    return best


def get_best_five_card_hand(
    hole_cards: Sequence[Card],
    community_cards: Sequence[Card] = (),
) -> HandResult:
    """
    Best hand from hole and community cards.

    With fewer than five cards available (preflop) the partial hand is
    classified as-is: only pairs, trips, quads and high cards can appear.
    """
    all_cards = list(hole_cards) + list(community_cards)
    if not all_cards:
        raise ValueError("Cannot evaluate an empty hand")
    if len(all_cards) < HAND_SIZE:
        return _classify(all_cards)
    return evaluate_hand(all_cards)


def compare_hands(hand1: HandResult, hand2: HandResult) -> int:
    """
    Compare two hand results.

    Returns:
        1 if hand1 wins, -1 if hand2 wins, 0 if tie
    """
    if hand1.key > hand2.key:
        return 1
    if hand1.key < hand2.key:
        return -1
    return 0


def get_hand_strength(
    hole_cards: Sequence[Card],
    community_cards: Sequence[Card] = (),
) -> float:
    """
    Heuristic strength in [0, 1] for the decision agents.

    Category base value plus up to 0.05 for the top kicker. Never used to
    decide a showdown.
    """
    result = get_best_five_card_hand(hole_cards, community_cards)
    strength = BASE_STRENGTH[result.rank]
    if result.kickers:
        strength += result.kickers[0] / Rank.ACE * MAX_KICKER_BONUS
    return min(strength, 1.0)


def _classify(cards: Iterable[Card]) -> HandResult:
    """Classify up to five cards, strongest category first."""
    ordered = sorted(cards, key=lambda c: c.rank, reverse=True)
    ranks = [int(c.rank) for c in ordered]
    rank_counts = Counter(ranks)

    is_flush = len(ordered) == HAND_SIZE and len({c.suit for c in ordered}) == 1
    straight_high = _straight_high(ranks) if len(ordered) == HAND_SIZE else None

    if is_flush and straight_high is not None:
        cards_out = _straight_order(ordered, straight_high)
        if straight_high == Rank.ACE:
            return HandResult(HandRank.ROYAL_FLUSH, (int(Rank.ACE),), cards_out)
        return HandResult(HandRank.STRAIGHT_FLUSH, (straight_high,), cards_out)

    # Ranks grouped by multiplicity, then by rank: [(rank, count), ...]
    groups = sorted(rank_counts.items(), key=lambda rc: (rc[1], rc[0]), reverse=True)
    counts = [count for _, count in groups]
    grouped_cards = tuple(_sort_by_count(ordered, rank_counts))

    if counts[0] == 4:
        kickers = [r for r, _ in groups[1:]][:1]
        return HandResult(HandRank.FOUR_OF_A_KIND, (groups[0][0], *kickers), grouped_cards)

    if counts[0] == 3 and len(counts) > 1 and counts[1] >= 2:
        return HandResult(HandRank.FULL_HOUSE, (groups[0][0], groups[1][0]), grouped_cards)

    if is_flush:
        return HandResult(HandRank.FLUSH, tuple(ranks), tuple(ordered))

    if straight_high is not None:
        return HandResult(HandRank.STRAIGHT, (straight_high,), _straight_order(ordered, straight_high))

    if counts[0] == 3:
        kickers = sorted((r for r, c in groups[1:]), reverse=True)[:2]
        return HandResult(HandRank.THREE_OF_A_KIND, (groups[0][0], *kickers), grouped_cards)

    if counts[0] == 2 and len(counts) > 1 and counts[1] == 2:
        high_pair, low_pair = groups[0][0], groups[1][0]
        kickers = [r for r, _ in groups[2:]][:1]
        return HandResult(HandRank.TWO_PAIR, (high_pair, low_pair, *kickers), grouped_cards)

    if counts[0] == 2:
        kickers = sorted((r for r, _ in groups[1:]), reverse=True)[:3]
        return HandResult(HandRank.ONE_PAIR, (groups[0][0], *kickers), grouped_cards)

    return HandResult(HandRank.HIGH_CARD, tuple(ranks), tuple(ordered))


def _straight_high(ranks: List[int]) -> Optional[int]:
    """High card of a five-rank straight, 5 for the wheel, else None."""
    unique = sorted(set(ranks), reverse=True)
    if len(unique) != HAND_SIZE:
        return None
    if unique[0] - unique[4] == 4:
        return unique[0]
    if unique == [int(r) for r in (Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO)]:
        return int(Rank.FIVE)
    return None


def _straight_order(cards: List[Card], straight_high: int) -> Tuple[Card, ...]:
    """Straight cards high to low, with the Ace last in a wheel."""
    if straight_high == Rank.FIVE:
        by_rank = {c.rank: c for c in cards}
        return tuple(by_rank[r] for r in WHEEL_RANKS)
    return tuple(cards)


def _sort_by_count(cards: List[Card], rank_counts: Counter) -> List[Card]:
    """Sort cards by count (descending), then by rank (descending)."""
    return sorted(cards, key=lambda c: (rank_counts[int(c.rank)], c.rank), reverse=True)


def get_hand_description(result: HandResult) -> str:
    """Human-readable description of a scored hand."""
    k = result.kickers
    if result.rank == HandRank.ROYAL_FLUSH:
        return "Royal Flush"
    elif result.rank == HandRank.STRAIGHT_FLUSH:
        return f"Straight Flush, {_rank_name(k[0])} high"
    elif result.rank == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(k[0])}"
    elif result.rank == HandRank.FULL_HOUSE:
        return f"Full House, {_plural(k[0])} full of {_plural(k[1])}"
    elif result.rank == HandRank.FLUSH:
        return f"Flush, {_rank_name(k[0])} high"
    elif result.rank == HandRank.STRAIGHT:
        if k[0] == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(k[0])} high"
    elif result.rank == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(k[0])}"
    elif result.rank == HandRank.TWO_PAIR:
        return f"Two Pair, {_plural(k[0])} and {_plural(k[1])}"
    elif result.rank == HandRank.ONE_PAIR:
        return f"Pair of {_plural(k[0])}"
    return f"High Card, {_rank_name(k[0])}"


_RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}


def _rank_name(rank: int) -> str:
    return _RANK_NAMES[Rank(rank)]


def _plural(rank: int) -> str:
    name = _rank_name(rank)
    return name + "es" if name == "Six" else name + "s"
