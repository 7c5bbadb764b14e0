"""Deck session: the process-wide engine and the lock that serializes it."""

import logging
import threading
from contextlib import contextmanager
from random import Random
from typing import Iterator

import redis

from config import AppConfig, config
from tarot.engine import DeckEngine
from tarot.persistence import (
    DeckStore,
    InMemoryDeckStore,
    JsonFileDeckStore,
    RedisDeckStore,
)
from tarot.shuffles import ShuffleOptions

logger = logging.getLogger(__name__)


def create_store(app_config: AppConfig) -> DeckStore:
    """
    Build the deck store selected by configuration.

    An unreachable Redis server falls back to the JSON file store.
    """
    storage = app_config.storage

    if storage.backend == "memory":
        return InMemoryDeckStore(key=storage.key)

    if storage.backend == "redis":
        client = redis.Redis.from_url(app_config.redis.url)
        try:
            client.ping()
        except redis.RedisError as e:
            logger.warning(
                "Redis at %s unavailable (%s); using file store %s",
                app_config.redis.url,
                e,
                storage.path,
            )
        else:
            logger.info("Deck state stored in Redis under key %r", storage.key)
            return RedisDeckStore(client, key=storage.key)
    elif storage.backend != "file":
        raise ValueError(f"Unknown storage backend: {storage.backend}")

    logger.info("Deck state stored in %s", storage.path)
    return JsonFileDeckStore(storage.path)


def create_engine(app_config: AppConfig | None = None) -> DeckEngine:
    """Build an engine from configuration. The caller runs ``init()``."""
    app_config = app_config or config
    shuffle = app_config.shuffle
    return DeckEngine(
        store=create_store(app_config),
        rng=Random(shuffle.seed) if shuffle.seed is not None else Random(),
        options=ShuffleOptions(stickiness=shuffle.stickiness, cut_jitter=shuffle.cut_jitter),
        check_invariants=app_config.check_invariants,
    )


class DeckSession:
    """
    One engine shared by all requests.

    Sync endpoints run in a thread pool, and deal/shuffle are multi-step
    transitions, so every engine call happens inside ``locked()``.
    """

    def __init__(self, engine: DeckEngine) -> None:
        self.engine = engine
        self._lock = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[DeckEngine]:
        """Hold the session lock for the duration of one engine operation."""
        with self._lock:
            yield self.engine


# Global deck session
_deck_session: DeckSession | None = None
_create_lock = threading.Lock()


def get_deck_session() -> DeckSession:
    """Get or create the deck session, initializing the engine on first use."""
    global _deck_session
    with _create_lock:
        if _deck_session is None:
            engine = create_engine()
            engine.init()
            _deck_session = DeckSession(engine)
    return _deck_session


def set_deck_session(session: DeckSession | None) -> None:
    """Replace the global session. None forces re-creation on next use."""
    global _deck_session
    with _create_lock:
        _deck_session = session
