"""Card model and the canonical 78-card tarot population."""

from dataclasses import dataclass
from enum import Enum, auto


class Arcana(Enum):
    """Major or minor arcana."""

    MAJOR = auto()
    MINOR = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Suit(Enum):
    """Minor arcana suits, in canonical deck order."""

    WANDS = "Wands"
    CUPS = "Cups"
    SWORDS = "Swords"
    PENTACLES = "Pentacles"

    def __str__(self) -> str:
        return self.value


MAJOR_ARCANA: tuple[str, ...] = (
    "The Fool",
    "The Magician",
    "The High Priestess",
    "The Empress",
    "The Emperor",
    "The Hierophant",
    "The Lovers",
    "The Chariot",
    "Strength",
    "The Hermit",
    "Wheel of Fortune",
    "Justice",
    "The Hanged Man",
    "Death",
    "Temperance",
    "The Devil",
    "The Tower",
    "The Star",
    "The Moon",
    "The Sun",
    "Judgement",
    "The World",
)

MINOR_RANKS: tuple[str, ...] = (
    "Ace",
    "Two",
    "Three",
    "Four",
    "Five",
    "Six",
    "Seven",
    "Eight",
    "Nine",
    "Ten",
    "Page",
    "Knight",
    "Queen",
    "King",
)

CANONICAL_NAMES: tuple[str, ...] = MAJOR_ARCANA + tuple(
    f"{rank} of {suit.value}" for suit in Suit for rank in MINOR_RANKS
)

DECK_SIZE = 78

assert len(CANONICAL_NAMES) == DECK_SIZE, f"Deck has {len(CANONICAL_NAMES)} cards, not 78"

_MAJOR_SET = frozenset(MAJOR_ARCANA)
_SUIT_BY_NAME = {suit.value: suit for suit in Suit}


@dataclass(slots=True)
class Card:
    """
    One physical card.

    The name never changes; orientation and visibility do. ``face_up`` is only
    meaningful while the card lies in the spread, ``None`` means it was never
    placed there.
    """

    name: str
    reversed: bool = False
    face_up: bool | None = None

    def __str__(self) -> str:
        return self.label

    @property
    def label(self) -> str:
        """Name with an ``(R)`` marker when reversed."""
        return f"{self.name} (R)" if self.reversed else self.name

    @property
    def arcana(self) -> Arcana:
        return Arcana.MAJOR if self.name in _MAJOR_SET else Arcana.MINOR

    @property
    def suit(self) -> Suit | None:
        """Suit for minor arcana, ``None`` for trumps."""
        _, sep, suit = self.name.rpartition(" of ")
        if not sep:
            return None
        return _SUIT_BY_NAME.get(suit)

    def flip(self) -> None:
        """Turn the card over end-to-end."""
        self.reversed = not self.reversed


def canonical_cards() -> list[Card]:
    """Return a fresh, upright deck in canonical order."""
    return [Card(name) for name in CANONICAL_NAMES]
