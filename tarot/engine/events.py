"""Deck change notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of deck events."""

    # Lifecycle
    DECK_INITIALIZED = auto()
    DECK_RESTORED = auto()
    DECK_RESET = auto()

    # Pile movement
    DECK_SHUFFLED = auto()
    CARDS_DEALT = auto()
    CARD_REVEALED = auto()
    SPREAD_CLEARED = auto()

    # Reset confirmation
    RESET_CONFIRMATION_REQUIRED = auto()
    RESET_DECLINED = auto()

    # Errors
    SAVE_FAILED = auto()


@dataclass(frozen=True)
class DeckEvent:
    """
    Immutable deck event.

    Events are how presentation layers learn that the piles changed without
    holding references into the engine's state.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[DeckEvent], None]


class EventEmitter:
    """
    Simple event emitter for deck events.

    Allows subscribing to specific event types or all events.
    """

    def __init__(self, history_limit: int = 200) -> None:
        """
        Initialize the event emitter.

        Args:
            history_limit: Number of most recent events kept in history
        """
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[DeckEvent] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Unsubscribe from events. Unknown handlers are ignored.

        Args:
            handler: Handler to remove
            event_type: Event type it was subscribed to, or None for all events
        """
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: DeckEvent) -> None:
        """
        Emit an event to all subscribers.

        Type-specific handlers run first, then catch-all handlers.

        Args:
            event: The event to emit
        """
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            del self._event_history[0]

        for handler in self._handlers.get(event.event_type, []):
            handler(event)
        for handler in self._handlers.get(None, []):
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> DeckEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event payload

        Returns:
            The emitted event
        """
        event = DeckEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[DeckEvent]:
        """Return the event history, oldest first."""
        return self._event_history.copy()

    def clear_history(self) -> None:
        """Clear event history."""
        self._event_history.clear()
