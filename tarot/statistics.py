"""Orientation statistics over the whole deck."""

from dataclasses import dataclass
from enum import Enum
from itertools import groupby
from typing import Any, Iterable

from tarot.cards import Card

MIN_RUN_LENGTH = 3


class Orientation(Enum):
    """Which way up a card lies."""

    UPRIGHT = "up"
    REVERSED = "rev"

    @classmethod
    def of(cls, card: Card) -> "Orientation":
        return cls.REVERSED if card.reversed else cls.UPRIGHT


@dataclass(frozen=True)
class Run:
    """A stretch of consecutive cards lying the same way up."""

    orientation: Orientation
    length: int


@dataclass(frozen=True)
class DeckStatistics:
    """Reversal counts and orientation runs for the deck."""

    total: int
    reversed: int
    reversal_rate: str
    run_count: int
    longest_reversed_run: int
    longest_upright_run: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dict for display."""
        return {
            "total": self.total,
            "reversed": self.reversed,
            "reversalRate": self.reversal_rate,
            "runCount": self.run_count,
            "longestReversedRun": self.longest_reversed_run,
            "longestUprightRun": self.longest_upright_run,
        }


def find_runs(cards: Iterable[Card], min_length: int = MIN_RUN_LENGTH) -> list[Run]:
    """
    Find maximal same-orientation runs.

    Args:
        cards: Cards in deck order
        min_length: Shortest run worth reporting

    Returns:
        Runs of at least ``min_length`` cards, in order of appearance
    """
    runs = []
    for orientation, group in groupby(cards, key=Orientation.of):
        length = sum(1 for _ in group)
        if length >= min_length:
            runs.append(Run(orientation, length))
    return runs


def format_reversal_rate(reversed_count: int, total: int) -> str:
    """Percentage with one decimal, or ``"0"`` for an empty deck."""
    if not total:
        return "0"
    return f"{reversed_count / total * 100:.1f}"


def compute_statistics(cards: Iterable[Card]) -> DeckStatistics:
    """
    Compute statistics over cards in deck order.

    Callers pass library, spread and discard concatenated in that order.
    """
    cards = list(cards)
    total = len(cards)
    reversed_count = sum(1 for c in cards if c.reversed)
    runs = find_runs(cards)

    def longest(orientation: Orientation) -> int:
        return max((r.length for r in runs if r.orientation is orientation), default=0)

    return DeckStatistics(
        total=total,
        reversed=reversed_count,
        reversal_rate=format_reversal_rate(reversed_count, total),
        run_count=len(runs),
        longest_reversed_run=longest(Orientation.REVERSED),
        longest_upright_run=longest(Orientation.UPRIGHT),
    )


def deck_string(cards: Iterable[Card]) -> str:
    """Comma-separated card labels, reversed cards marked ``(R)``."""
    return ", ".join(card.label for card in cards)
