"""Engine lifecycle states."""

from enum import Enum, auto


class EngineState(Enum):
    """
    Deck engine states.

    Flow: UNINITIALIZED → READY ⇄ AWAITING_RESET_CONFIRMATION
    """

    # Constructed, piles not loaded yet
    UNINITIALIZED = auto()

    # Piles loaded or freshly built
    READY = auto()

    # reset() was requested and is waiting for the caller's answer
    AWAITING_RESET_CONFIRMATION = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class ResetOutcome(Enum):
    """What a call to ``DeckEngine.reset`` did."""

    CONFIRMATION_REQUIRED = auto()
    DECLINED = auto()
    RESET = auto()
