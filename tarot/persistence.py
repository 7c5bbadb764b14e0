"""Deck record persistence with file, Redis and in-memory backends."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

import redis
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tarot.cards import Card
from tarot.exceptions import PersistenceError
from tarot.piles import PileStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "tarotDeck"


class PersistedCard(BaseModel):
    """Card as stored: ``{name, reversed, faceUp?}``."""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    name: str
    reversed: bool
    face_up: bool | None = Field(default=None, alias="faceUp")


class PersistedDeck(BaseModel):
    """The whole record: three piles."""

    model_config = ConfigDict(strict=True)

    library: list[PersistedCard]
    spread: dict[str, PersistedCard]
    discard: list[PersistedCard]


class LoadStatus(Enum):
    """Outcome of reading the deck record."""

    NOT_FOUND = auto()
    CORRUPT = auto()
    LOADED = auto()


@dataclass(frozen=True)
class LoadResult:
    """Load status plus the restored piles when status is LOADED."""

    status: LoadStatus
    piles: PileStore | None = None

    @property
    def found(self) -> bool:
        return self.status is LoadStatus.LOADED


def _serialize_card(card: Card) -> dict[str, Any]:
    """Serialize a card to a dict, omitting faceUp when unset."""
    data: dict[str, Any] = {"name": card.name, "reversed": card.reversed}
    if card.face_up is not None:
        data["faceUp"] = card.face_up
    return data


def _deserialize_card(data: PersistedCard) -> Card:
    return Card(name=data.name, reversed=data.reversed, face_up=data.face_up)


def serialize_piles(piles: PileStore) -> str:
    """Encode the piles as the JSON deck record."""
    return json.dumps(
        {
            "library": [_serialize_card(c) for c in piles.library],
            "spread": {pos: _serialize_card(c) for pos, c in piles.spread.items()},
            "discard": [_serialize_card(c) for c in piles.discard],
        }
    )


def deserialize_piles(raw: str | bytes) -> PileStore:
    """
    Decode a JSON deck record.

    Raises:
        ValueError: If the record is not valid JSON or has the wrong shape
    """
    record = PersistedDeck.model_validate_json(raw)
    return PileStore(
        library=[_deserialize_card(c) for c in record.library],
        spread={pos: _deserialize_card(c) for pos, c in record.spread.items()},
        discard=[_deserialize_card(c) for c in record.discard],
    )


class DeckStore(ABC):
    """
    Abstract deck record store.

    Subclasses move raw JSON text in and out of a backend; this class owns the
    record format. Backend failures surface as PersistenceError.
    """

    @abstractmethod
    def read_raw(self) -> str | None:
        """Return the stored record, or None if there is none."""
        ...

    @abstractmethod
    def write_raw(self, raw: str) -> None:
        """Store the record, replacing any previous one."""
        ...

    @abstractmethod
    def delete_raw(self) -> None:
        """Remove the record. Removing a missing record is not an error."""
        ...

    def save(self, piles: PileStore) -> None:
        """Overwrite the stored record with the current piles."""
        self.write_raw(serialize_piles(piles))

    def load(self) -> LoadResult:
        """
        Read the stored record.

        The 78-card population is not checked here; callers decide whether a
        loaded record is usable.
        """
        raw = self.read_raw()
        if raw is None:
            return LoadResult(LoadStatus.NOT_FOUND)
        try:
            piles = deserialize_piles(raw)
        except ValidationError as e:
            logger.warning("Deck record is corrupt (%d validation errors)", e.error_count())
            return LoadResult(LoadStatus.CORRUPT)
        return LoadResult(LoadStatus.LOADED, piles)

    def clear(self) -> None:
        """Delete the stored record."""
        self.delete_raw()


class InMemoryDeckStore(DeckStore):
    """In-memory store for tests and throwaway sessions."""

    def __init__(self, key: str = DEFAULT_KEY, records: dict[str, str] | None = None) -> None:
        self.key = key
        self.records: dict[str, str] = records if records is not None else {}

    def read_raw(self) -> str | None:
        return self.records.get(self.key)

    def write_raw(self, raw: str) -> None:
        self.records[self.key] = raw

    def delete_raw(self) -> None:
        self.records.pop(self.key, None)


class JsonFileDeckStore(DeckStore):
    """
    Keeps the record in a local JSON file.

    Writes go through a temporary file in the same directory and are moved
    into place, so a crash mid-write never leaves a truncated record.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def read_raw(self) -> str | None:
        try:
            with open(self.path, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Cannot read deck state from {self.path}: {e}") from e

    def write_raw(self, raw: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(raw)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Cannot write deck state to {self.path}: {e}") from e

    def delete_raw(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceError(f"Cannot delete deck state at {self.path}: {e}") from e


class RedisDeckStore(DeckStore):
    """Redis-backed store."""

    def __init__(self, redis_client: redis.Redis, key: str = DEFAULT_KEY) -> None:
        self._redis = redis_client
        self.key = key

    def read_raw(self) -> str | None:
        try:
            data = self._redis.get(self.key)
        except redis.RedisError as e:
            raise PersistenceError(f"Cannot read deck state from Redis: {e}") from e
        if data is None:
            return None
        return data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data

    def write_raw(self, raw: str) -> None:
        try:
            self._redis.set(self.key, raw)
        except redis.RedisError as e:
            raise PersistenceError(f"Cannot write deck state to Redis: {e}") from e

    def delete_raw(self) -> None:
        try:
            self._redis.delete(self.key)
        except redis.RedisError as e:
            raise PersistenceError(f"Cannot delete deck state from Redis: {e}") from e
