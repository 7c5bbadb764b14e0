"""Exception types raised by the deck engine."""


class TarotError(Exception):
    """Base class for deck engine errors."""


class PersistenceError(TarotError):
    """
    The storage backend failed to read, write or delete the deck record.

    The in-memory piles stay valid when this is raised from a save; only the
    durable copy is stale.
    """


class EngineNotInitializedError(TarotError):
    """An operation was invoked before ``DeckEngine.init()``."""

    def __init__(self) -> None:
        super().__init__("Deck engine not initialized; call init() first")


class InvariantViolation(AssertionError):
    """The 78-card population was broken. Always a programming defect."""
