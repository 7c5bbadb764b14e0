"""The three piles sharing the deck: library, spread and discard."""

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from tarot.cards import CANONICAL_NAMES, DECK_SIZE, Card, canonical_cards
from tarot.exceptions import InvariantViolation

_CANONICAL_COUNTS = Counter(CANONICAL_NAMES)


@dataclass(frozen=True)
class CardView:
    """Read-only copy of a card's state."""

    name: str
    reversed: bool
    face_up: bool | None = None

    @classmethod
    def of(cls, card: Card) -> "CardView":
        return cls(card.name, card.reversed, card.face_up)


@dataclass(frozen=True)
class PileSnapshot:
    """Immutable view of all three piles at one point in time."""

    library: tuple[CardView, ...]
    spread: Mapping[str, CardView]
    discard: tuple[CardView, ...]

    @property
    def total(self) -> int:
        return len(self.library) + len(self.spread) + len(self.discard)


@dataclass
class PileStore:
    """
    Library, spread and discard piles.

    The library front (index 0) is the next card dealt. The spread maps a
    spread position id to the card lying there. Between them the piles always
    hold the full canonical population, each name exactly once.
    """

    library: list[Card] = field(default_factory=list)
    spread: dict[str, Card] = field(default_factory=dict)
    discard: list[Card] = field(default_factory=list)

    @classmethod
    def fresh(cls) -> "PileStore":
        """All 78 cards upright in the library, in canonical order."""
        return cls(library=canonical_cards())

    def __len__(self) -> int:
        return len(self.library) + len(self.spread) + len(self.discard)

    def __iter__(self) -> Iterator[Card]:
        """Iterate library, then spread values, then discard."""
        yield from self.library
        yield from self.spread.values()
        yield from self.discard

    @property
    def total(self) -> int:
        return len(self)

    def population_errors(self) -> list[str]:
        """Describe every way the piles differ from the canonical population."""
        errors = []
        if len(self) != DECK_SIZE:
            errors.append(f"expected {DECK_SIZE} cards, found {len(self)}")

        counts = Counter(card.name for card in self)
        missing = sorted(name for name in _CANONICAL_COUNTS if counts[name] == 0)
        duplicated = sorted(name for name, n in counts.items() if n > 1)
        unknown = sorted(name for name in counts if name not in _CANONICAL_COUNTS)
        if missing:
            errors.append(f"missing: {', '.join(missing)}")
        if duplicated:
            errors.append(f"duplicated: {', '.join(duplicated)}")
        if unknown:
            errors.append(f"unknown: {', '.join(unknown)}")
        return errors

    def is_complete(self) -> bool:
        """Check the population invariant without raising."""
        return not self.population_errors()

    def check_invariant(self) -> None:
        """Raise InvariantViolation if the population is broken."""
        errors = self.population_errors()
        if errors:
            raise InvariantViolation("Deck population broken: " + "; ".join(errors))

    def gather_into_library(self) -> list[Card]:
        """
        Move every spread and discard card to the back of the library.

        Returns:
            The cards that were moved, spread cards first
        """
        returned = [*self.spread.values(), *self.discard]
        self.spread.clear()
        self.discard.clear()
        self.library.extend(returned)
        return returned

    def discard_spread(self) -> list[Card]:
        """Move every spread card to the discard pile."""
        cleared = list(self.spread.values())
        self.spread.clear()
        self.discard.extend(cleared)
        return cleared

    def snapshot(self) -> PileSnapshot:
        return PileSnapshot(
            library=tuple(CardView.of(c) for c in self.library),
            spread=MappingProxyType({pos: CardView.of(c) for pos, c in self.spread.items()}),
            discard=tuple(CardView.of(c) for c in self.discard),
        )
