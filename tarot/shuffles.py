"""
Hand-shuffle simulations.

Each function rearranges a list of cards in place using the supplied random
source. No card is ever added, dropped or duplicated; only order and (for
strip turnovers) orientation change.
"""

import math
from dataclasses import dataclass
from random import Random

from tarot.cards import Card

DEFAULT_STICKINESS = 0.5
DEFAULT_CUT_JITTER = 15

# Cumulative thresholds for dropping 1, 2 or 3 cards per riffle step (55/30/15).
_CLUMP_THRESHOLDS = ((0.55, 1), (0.85, 2))
_MAX_CLUMP = 3

STRIP_TURNOVER_CHANCE = 0.1
MIN_STRIP_SIZE = 5
CUT_PROBABILITY = 0.6


@dataclass(frozen=True)
class ShuffleOptions:
    """Realism knobs for the riffle."""

    stickiness: float = DEFAULT_STICKINESS
    cut_jitter: float = DEFAULT_CUT_JITTER

    def __post_init__(self) -> None:
        if not 0.0 <= self.stickiness <= 1.0:
            raise ValueError("Stickiness must be between 0 and 1")
        if self.cut_jitter < 0:
            raise ValueError("Cut jitter cannot be negative")


@dataclass(frozen=True)
class Strip:
    """A packet as it was placed back by ``strip_shuffle``."""

    cards: tuple[Card, ...]
    turned_over: bool


def _clump_size(rng: Random) -> int:
    r = rng.random()
    for threshold, size in _CLUMP_THRESHOLDS:
        if r < threshold:
            return size
    return _MAX_CLUMP


def riffle(
    cards: list[Card],
    rng: Random,
    stickiness: float = DEFAULT_STICKINESS,
    cut_jitter: float = DEFAULT_CUT_JITTER,
) -> None:
    """
    Riffle the cards once.

    The deck is split near the middle (off by up to ``cut_jitter`` cards) and
    the halves are interleaved in clumps of one to three cards. After each
    clump the dropping hand stays the same with probability ``stickiness``.

    Args:
        cards: Cards to shuffle, replaced in place
        rng: Random source
        stickiness: Chance that the same half drops the next clump
        cut_jitter: Maximum deviation of the split from the midpoint
    """
    n = len(cards)
    split = math.floor(n / 2 + rng.uniform(-cut_jitter, cut_jitter))
    split = max(0, min(n, split))

    halves = (cards[:split], cards[split:])
    positions = [0, 0]
    merged: list[Card] = []
    active = 0 if rng.random() < 0.5 else 1

    while len(merged) < n:
        if rng.random() > stickiness:
            active = 1 - active
        if positions[active] >= len(halves[active]):
            active = 1 - active

        source = halves[active]
        start = positions[active]
        stop = min(start + _clump_size(rng), len(source))
        merged.extend(source[start:stop])
        positions[active] = stop

    cards[:] = merged


def strip_shuffle(cards: list[Card], rng: Random) -> list[Strip]:
    """
    Overhand strip shuffle.

    Cuts the deck into 4-7 packets of roughly even size (at least five cards
    each while enough remain, the last packet taking whatever is left) and
    stacks them back in random order. Each packet has a 10% chance of being
    turned over as it is placed, which reverses its order and flips every
    card in it.

    Returns:
        The packets in the order they were placed, top first
    """
    count = 4 + rng.randrange(4)
    base = len(cards) // count
    remaining = list(cards)
    packets: list[list[Card]] = []

    for _ in range(count - 1):
        jitter = math.floor(rng.random() * 10 - 5)
        size = max(MIN_STRIP_SIZE, min(base + jitter, len(remaining) - MIN_STRIP_SIZE))
        packets.append(remaining[:size])
        del remaining[:size]
    packets.append(remaining)

    placed: list[Strip] = []
    stacked: list[Card] = []
    while packets:
        packet = packets.pop(rng.randrange(len(packets)))
        turned = rng.random() < STRIP_TURNOVER_CHANCE
        if turned:
            packet.reverse()
            for card in packet:
                card.flip()
        stacked.extend(packet)
        if packet:
            placed.append(Strip(cards=tuple(packet), turned_over=turned))

    cards[:] = stacked
    return placed


def cut(cards: list[Card], rng: Random, probability: float = CUT_PROBABILITY) -> int | None:
    """
    Single table cut.

    With the given probability, lift the top 25%-75% of the deck and put it
    underneath.

    Returns:
        Number of cards moved from top to bottom, or None if the deck was not cut
    """
    if rng.random() >= probability:
        return None

    index = math.floor(len(cards) * (0.25 + rng.random() * 0.5))
    cards[:] = cards[index:] + cards[:index]
    return index
