"""Tarot deck engine - 100% UI-agnostic."""

from tarot.cards import CANONICAL_NAMES, DECK_SIZE, Card
from tarot.engine import DeckEngine, EventType, ResetOutcome
from tarot.exceptions import EngineNotInitializedError, InvariantViolation, PersistenceError
from tarot.piles import CardView, PileSnapshot, PileStore
from tarot.spreads import SPREADS, SpreadLayout, SpreadPosition, get_spread
from tarot.statistics import DeckStatistics

__all__ = [
    "CANONICAL_NAMES",
    "DECK_SIZE",
    "Card",
    "CardView",
    "DeckEngine",
    "DeckStatistics",
    "EngineNotInitializedError",
    "EventType",
    "InvariantViolation",
    "PersistenceError",
    "PileSnapshot",
    "PileStore",
    "ResetOutcome",
    "SPREADS",
    "SpreadLayout",
    "SpreadPosition",
    "get_spread",
]
