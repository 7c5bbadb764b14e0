"""Deck engine and its lifecycle and event types."""

from tarot.engine.events import DeckEvent, EventEmitter, EventType
from tarot.engine.state import EngineState, ResetOutcome
from tarot.engine.engine import DeckEngine

__all__ = [
    "DeckEvent",
    "EventEmitter",
    "EventType",
    "EngineState",
    "ResetOutcome",
    "DeckEngine",
]
