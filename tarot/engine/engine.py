"""Deck engine: the single owner of the piles."""

import logging
from random import Random
from typing import Any, Callable, Iterable, Mapping, Union

from transitions import Machine

from tarot.cards import DECK_SIZE, Card
from tarot.engine.events import DeckEvent, EventEmitter, EventType
from tarot.engine.state import EngineState, ResetOutcome
from tarot.exceptions import EngineNotInitializedError, PersistenceError
from tarot.persistence import DeckStore, LoadStatus
from tarot.piles import CardView, PileSnapshot, PileStore
from tarot.shuffles import ShuffleOptions, cut, riffle, strip_shuffle
from tarot.spreads import SpreadPosition
from tarot.statistics import DeckStatistics, compute_statistics, deck_string

logger = logging.getLogger(__name__)

# Chance that a card coming back from the table gets turned while handled
WEAR_FLIP_CHANCE = 0.05
# Otherwise riffle, strip, riffle
TRIPLE_RIFFLE_CHANCE = 0.7

RESET_PROMPT = "Restore deck to original order?"

PositionLike = Union[SpreadPosition, Mapping[str, Any], str]


def _position_id(position: PositionLike) -> str:
    if isinstance(position, str):
        return position
    if isinstance(position, Mapping):
        return str(position["id"])
    return position.id


class DeckEngine:
    """
    Tarot deck engine.

    Owns the library, spread and discard piles, shuffles them like a person
    would and writes the piles to the store after every change. Nothing else
    mutates the piles; readers get snapshots.

    The engine is not thread-safe. Callers sharing one engine between threads
    must hold a single lock for the whole of each call.
    """

    STATES = [s.name.lower() for s in EngineState]

    TRANSITIONS = [
        {"trigger": "mark_ready", "source": "*", "dest": "ready"},
        {
            "trigger": "await_reset_confirmation",
            "source": ["ready", "awaiting_reset_confirmation"],
            "dest": "awaiting_reset_confirmation",
        },
    ]

    def __init__(
        self,
        store: DeckStore,
        rng: Random | None = None,
        options: ShuffleOptions | None = None,
        check_invariants: bool = True,
    ) -> None:
        """
        Create an engine. Call ``init()`` before anything else.

        Args:
            store: Where the piles are persisted
            rng: Random number generator for reproducible shuffles
            options: Riffle realism knobs
            check_invariants: Verify the 78-card population after every change
        """
        self.store = store
        self.options = options or ShuffleOptions()
        self.check_invariants = check_invariants
        self._rng = rng or Random()
        self._piles = PileStore()
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="uninitialized",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> EngineState:
        """Get current engine state as enum."""
        return EngineState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[DeckEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to deck events."""
        self.events.subscribe(handler, event_type)

    # Lifecycle

    def init(self) -> bool:
        """
        Restore the saved piles, or start from a fresh deck.

        A saved record is adopted only if it holds the complete population.
        Anything else (missing, unparseable, wrong card count) is replaced by
        78 upright cards in canonical order, which are saved immediately.
        Safe to call repeatedly.

        Returns:
            True if saved piles were restored
        """
        result = self.store.load()

        if result.status is LoadStatus.LOADED and result.piles is not None:
            problems = result.piles.population_errors()
            if not problems:
                self._piles = result.piles
                self.mark_ready()
                logger.info(
                    "Restored deck: %d in library, %d in spread, %d in discard",
                    len(self._piles.library),
                    len(self._piles.spread),
                    len(self._piles.discard),
                )
                self.events.emit_new(EventType.DECK_RESTORED, total=len(self._piles))
                return True
            logger.warning("Ignoring saved deck: %s", "; ".join(problems))

        self._piles = PileStore.fresh()
        self.mark_ready()
        logger.info("Built fresh deck (saved state %s)", result.status.name.lower())
        self._commit(EventType.DECK_INITIALIZED, previous=result.status.name)
        return False

    def reset(self, confirmed: bool | None = None) -> ResetOutcome:
        """
        Restore the deck to canonical order, in two phases.

        Called without an answer, the engine records a pending request, emits
        RESET_CONFIRMATION_REQUIRED and changes nothing. The caller asks the
        user and calls again with their answer.

        Args:
            confirmed: The user's consent, or None to request it

        Returns:
            What happened
        """
        if self.state is EngineState.UNINITIALIZED:
            raise EngineNotInitializedError()

        if confirmed is None:
            self.await_reset_confirmation()
            self.events.emit_new(EventType.RESET_CONFIRMATION_REQUIRED, prompt=RESET_PROMPT)
            return ResetOutcome.CONFIRMATION_REQUIRED

        if not confirmed:
            self.mark_ready()
            self.events.emit_new(EventType.RESET_DECLINED)
            return ResetOutcome.DECLINED

        self.store.clear()
        self._piles = PileStore.fresh()
        self.mark_ready()
        logger.info("Deck reset to canonical order")
        self._commit(EventType.DECK_RESET)
        return ResetOutcome.RESET

    # Pile operations

    def shuffle_all(self) -> None:
        """
        Gather every card into the library and shuffle it.

        Cards coming back from the spread and discard may get turned while
        handled. The library is then riffled three times, or riffled, strip
        shuffled and riffled again, and finally maybe cut.
        """
        self._require_ready()
        summary = self._gather_and_shuffle()
        self._commit(EventType.DECK_SHUFFLED, **summary)

    def deal(self, positions: Iterable[PositionLike]) -> Mapping[str, CardView]:
        """
        Deal a fresh spread.

        The previous spread goes to the discard, the whole deck is reshuffled,
        then one card per position is taken from the library front and laid
        face down. If the library runs out the remaining positions stay empty.

        Args:
            positions: Ordered spread positions (SpreadPosition, {"id": ...} or id)

        Returns:
            The new spread by position id

        Raises:
            ValueError: If a position id appears more than once
        """
        self._require_ready()
        ids = [_position_id(p) for p in positions]
        duplicates = sorted({pos_id for pos_id in ids if ids.count(pos_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate spread positions: {', '.join(duplicates)}")

        self._piles.discard_spread()
        self._gather_and_shuffle()

        library = self._piles.library
        for pos_id in ids:
            if not library:
                logger.warning("Library exhausted; %s left empty", pos_id)
                break
            card = library.pop(0)
            card.face_up = False
            self._piles.spread[pos_id] = card

        logger.info("Dealt %d cards", len(self._piles.spread))
        self._commit(EventType.CARDS_DEALT, positions=list(self._piles.spread))
        return self.snapshot().spread

    def reveal(self, position_id: str) -> CardView:
        """
        Turn a spread card face up.

        Raises:
            KeyError: If no card lies at that position
        """
        self._require_ready()
        try:
            card = self._piles.spread[position_id]
        except KeyError:
            raise KeyError(f"No card at position: {position_id}") from None

        card.face_up = True
        self._commit(EventType.CARD_REVEALED, position=position_id, card=card.label)
        return CardView.of(card)

    def clear_spread(self) -> int:
        """
        Move the spread to the discard pile.

        Returns:
            Number of cards moved
        """
        self._require_ready()
        cleared = self._piles.discard_spread()
        self._commit(EventType.SPREAD_CLEARED, count=len(cleared))
        return len(cleared)

    # Read-only views

    def snapshot(self) -> PileSnapshot:
        """Return an immutable copy of the piles."""
        return self._piles.snapshot()

    def card_at(self, position_id: str) -> CardView | None:
        """Card lying at a spread position, or None."""
        card = self._piles.spread.get(position_id)
        return CardView.of(card) if card is not None else None

    def revealed_positions(self) -> list[str]:
        """Ids of spread positions whose card is face up."""
        return [pos for pos, card in self._piles.spread.items() if card.face_up]

    def statistics(self) -> DeckStatistics:
        """Reversal and run statistics over library, spread and discard."""
        return compute_statistics(self._piles)

    def deck_string(self) -> str:
        """All cards in library, spread, discard order."""
        return deck_string(self._piles)

    @property
    def total(self) -> int:
        return len(self._piles)

    # Internals

    def _require_ready(self) -> None:
        if self.state is EngineState.UNINITIALIZED:
            raise EngineNotInitializedError()
        if self.state is EngineState.AWAITING_RESET_CONFIRMATION:
            logger.debug("Pending reset request dropped")
            self.mark_ready()

    def _riffle(self, cards: list[Card]) -> None:
        riffle(cards, self._rng, self.options.stickiness, self.options.cut_jitter)

    def _gather_and_shuffle(self) -> dict[str, Any]:
        """Merge all piles into the library and shuffle it. Does not save."""
        returned = self._piles.gather_into_library()
        worn = 0
        for card in returned:
            if self._rng.random() < WEAR_FLIP_CHANCE:
                card.flip()
                worn += 1

        library = self._piles.library
        turned_strips = 0
        if self._rng.random() < TRIPLE_RIFFLE_CHANCE:
            method = "riffle"
            for _ in range(3):
                self._riffle(library)
        else:
            method = "riffle-strip-riffle"
            self._riffle(library)
            strips = strip_shuffle(library, self._rng)
            turned_strips = sum(1 for s in strips if s.turned_over)
            self._riffle(library)

        cut_at = cut(library, self._rng)
        logger.debug(
            "Shuffled %d cards (%s, %d returned, %d worn, %d strips turned, cut at %s)",
            len(library),
            method,
            len(returned),
            worn,
            turned_strips,
            cut_at,
        )
        return {
            "method": method,
            "returned": len(returned),
            "worn": worn,
            "turned_strips": turned_strips,
            "cut": cut_at,
        }

    def _commit(self, event_type: EventType, **data: Any) -> None:
        """Check the population, persist, then announce the change."""
        if self.check_invariants:
            self._piles.check_invariant()
        elif len(self._piles) != DECK_SIZE:
            logger.error("Deck holds %d cards", len(self._piles))

        try:
            self.store.save(self._piles)
        except PersistenceError as e:
            logger.error("Deck state not saved after %s: %s", event_type.name, e)
            self.events.emit_new(EventType.SAVE_FAILED, operation=event_type.name, error=str(e))
            raise

        # Subscribers see the change only once the record is written
        self.events.emit_new(event_type, **data)
