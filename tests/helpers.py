"""Shared test helpers and hypothesis strategies."""

from hypothesis import strategies as st

from tarot.cards import CANONICAL_NAMES, Card


def names(cards):
    """Card names in order."""
    return [c.name for c in cards]


# Hypothesis strategies for property-based testing
@st.composite
def card_lists(draw, min_size=0, max_size=78):
    """A slice of the canonical deck with random orientations."""
    size = draw(st.integers(min_value=min_size, max_value=max_size))
    chosen = draw(st.permutations(CANONICAL_NAMES))[:size]
    flags = draw(st.lists(st.booleans(), min_size=size, max_size=size))
    return [Card(name, reversed=flag) for name, flag in zip(chosen, flags)]
