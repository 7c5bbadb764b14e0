"""Pytest fixtures for tarot deck tests."""

import pytest
from random import Random

from tarot.cards import canonical_cards
from tarot.engine import DeckEngine
from tarot.persistence import InMemoryDeckStore
from tarot.piles import PileStore


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def cards():
    """A fresh canonical deck as a plain list."""
    return canonical_cards()


@pytest.fixture
def fresh_piles():
    """All 78 cards upright in the library."""
    return PileStore.fresh()


@pytest.fixture
def store():
    """Empty in-memory deck store."""
    return InMemoryDeckStore()


@pytest.fixture
def engine(store, rng):
    """An initialized engine on an in-memory store."""
    e = DeckEngine(store=store, rng=rng)
    e.init()
    return e

