"""Tests for deck record serialization and stores."""

import json
import os

import pytest
import redis
from unittest.mock import MagicMock

from tarot.cards import CANONICAL_NAMES, Card
from tarot.exceptions import PersistenceError
from tarot.persistence import (
    InMemoryDeckStore,
    JsonFileDeckStore,
    LoadStatus,
    RedisDeckStore,
    deserialize_piles,
    serialize_piles,
)
from tarot.piles import PileStore


@pytest.fixture
def dealt_piles():
    """Piles with something in every pile."""
    piles = PileStore.fresh()
    first = piles.library.pop(0)
    first.face_up = True
    first.reversed = True
    second = piles.library.pop(0)
    second.face_up = False
    piles.spread = {"pos1": first, "pos2": second}
    piles.discard.append(piles.library.pop())
    return piles


class TestRecordFormat:
    """Tests for the JSON record shape."""

    def test_record_shape(self, dealt_piles):
        """Test the three top-level fields and card fields."""
        record = json.loads(serialize_piles(dealt_piles))

        assert set(record) == {"library", "spread", "discard"}
        assert len(record["library"]) == 75
        assert record["spread"]["pos1"] == {"name": "The Fool", "reversed": True, "faceUp": True}
        assert record["spread"]["pos2"] == {
            "name": "The Magician",
            "reversed": False,
            "faceUp": False,
        }
        assert record["discard"] == [{"name": "King of Pentacles", "reversed": False}]

    def test_face_up_omitted_when_unset(self):
        """Test library cards carry no faceUp field."""
        record = json.loads(serialize_piles(PileStore.fresh()))
        assert "faceUp" not in record["library"][0]

    def test_roundtrip_preserves_piles(self, dealt_piles):
        """Test deserializing restores pile membership and flags."""
        restored = deserialize_piles(serialize_piles(dealt_piles))

        assert [c.name for c in restored.library] == [c.name for c in dealt_piles.library]
        assert restored.spread["pos1"] == Card("The Fool", reversed=True, face_up=True)
        assert restored.spread["pos2"] == Card("The Magician", face_up=False)
        assert restored.discard[0].face_up is None
        restored.check_invariant()

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "",
            "null",
            "[]",
            '{"library": [], "spread": {}}',
            '{"library": [{"name": "The Fool"}], "spread": {}, "discard": []}',
            '{"library": [{"name": "The Fool", "reversed": "yes"}], "spread": {}, "discard": []}',
            '{"library": {}, "spread": [], "discard": []}',
        ],
    )
    def test_wrong_shape_rejected(self, raw):
        """Test malformed records raise ValueError."""
        with pytest.raises(ValueError):
            deserialize_piles(raw)


class TestInMemoryDeckStore:
    """Tests for the in-memory store."""

    def test_load_missing(self, store):
        """Test an empty store reports not found."""
        result = store.load()
        assert result.status is LoadStatus.NOT_FOUND
        assert result.piles is None
        assert not result.found

    def test_save_then_load(self, store, dealt_piles):
        """Test saved piles load back."""
        store.save(dealt_piles)
        result = store.load()
        assert result.status is LoadStatus.LOADED
        assert len(result.piles) == 78

    def test_save_overwrites(self, store, dealt_piles):
        """Test a second save replaces the first."""
        store.save(PileStore.fresh())
        store.save(dealt_piles)
        assert len(store.load().piles.spread) == 2

    def test_load_does_not_check_population(self, store):
        """Test a short but well-formed record still loads."""
        store.save(PileStore(library=[Card("The Fool")]))
        result = store.load()
        assert result.status is LoadStatus.LOADED
        assert len(result.piles) == 1

    def test_corrupt_record(self, store):
        """Test unparseable data reports corrupt."""
        store.records[store.key] = "{broken"
        assert store.load().status is LoadStatus.CORRUPT

    def test_clear(self, store, dealt_piles):
        """Test clearing removes the record, twice is fine."""
        store.save(dealt_piles)
        store.clear()
        store.clear()
        assert store.load().status is LoadStatus.NOT_FOUND

    def test_default_key(self):
        """Test the record lives under tarotDeck."""
        store = InMemoryDeckStore()
        store.save(PileStore.fresh())
        assert list(store.records) == ["tarotDeck"]


class TestJsonFileDeckStore:
    """Tests for the JSON file store."""

    def test_missing_file(self, tmp_path):
        """Test a missing file reports not found."""
        store = JsonFileDeckStore(str(tmp_path / "deck.json"))
        assert store.load().status is LoadStatus.NOT_FOUND

    def test_save_creates_directories(self, tmp_path, dealt_piles):
        """Test saving into a new directory."""
        path = tmp_path / "nested" / "deck.json"
        store = JsonFileDeckStore(str(path))

        store.save(dealt_piles)

        assert path.exists()
        assert json.loads(path.read_text())["spread"]["pos1"]["name"] == "The Fool"
        assert [p.name for p in path.parent.iterdir()] == ["deck.json"]

    def test_roundtrip(self, tmp_path, dealt_piles):
        """Test loading what was saved."""
        store = JsonFileDeckStore(str(tmp_path / "deck.json"))
        store.save(dealt_piles)
        result = store.load()
        assert result.status is LoadStatus.LOADED
        assert [c.name for c in result.piles] == [c.name for c in dealt_piles]

    def test_corrupt_file(self, tmp_path):
        """Test garbage in the file reports corrupt."""
        path = tmp_path / "deck.json"
        path.write_bytes(b"\xff\xfe garbage")
        assert JsonFileDeckStore(str(path)).load().status is LoadStatus.CORRUPT

    def test_clear(self, tmp_path):
        """Test clearing deletes the file and tolerates absence."""
        path = tmp_path / "deck.json"
        store = JsonFileDeckStore(str(path))
        store.save(PileStore.fresh())
        store.clear()
        assert not path.exists()
        store.clear()

    def test_write_failure_raises(self, tmp_path):
        """Test an unwritable location surfaces PersistenceError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonFileDeckStore(str(blocker / "deck.json"))

        with pytest.raises(PersistenceError, match="Cannot write deck state"):
            store.save(PileStore.fresh())

    def test_read_failure_raises(self, tmp_path):
        """Test reading a directory surfaces PersistenceError."""
        directory = tmp_path / "deck.json"
        os.mkdir(directory)
        with pytest.raises(PersistenceError, match="Cannot read deck state"):
            JsonFileDeckStore(str(directory)).load()


class TestRedisDeckStore:
    """Tests for the Redis store against a mocked client."""

    def test_save_uses_key(self):
        """Test records are written under the configured key."""
        client = MagicMock()
        store = RedisDeckStore(client, key="tarotDeck")

        store.save(PileStore.fresh())

        key, raw = client.set.call_args.args
        assert key == "tarotDeck"
        assert [c["name"] for c in json.loads(raw)["library"]] == list(CANONICAL_NAMES)

    def test_load_decodes_bytes(self):
        """Test byte responses are decoded."""
        client = MagicMock()
        client.get.return_value = serialize_piles(PileStore.fresh()).encode("utf-8")

        result = RedisDeckStore(client).load()

        client.get.assert_called_once_with("tarotDeck")
        assert result.status is LoadStatus.LOADED

    def test_load_missing(self):
        """Test a missing key reports not found."""
        client = MagicMock()
        client.get.return_value = None
        assert RedisDeckStore(client).load().status is LoadStatus.NOT_FOUND

    def test_load_undecodable_bytes(self):
        """Test bytes that are not UTF-8 report corrupt."""
        client = MagicMock()
        client.get.return_value = b"\xff\xfe garbage"
        assert RedisDeckStore(client).load().status is LoadStatus.CORRUPT

    def test_write_failure_raises(self):
        """Test Redis errors surface as PersistenceError."""
        client = MagicMock()
        client.set.side_effect = redis.ConnectionError("connection refused")

        with pytest.raises(PersistenceError, match="connection refused"):
            RedisDeckStore(client).save(PileStore.fresh())

    def test_clear_deletes_key(self):
        """Test clear deletes the key."""
        client = MagicMock()
        RedisDeckStore(client, key="custom").clear()
        client.delete.assert_called_once_with("custom")
