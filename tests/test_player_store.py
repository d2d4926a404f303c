"""Tests for player persistence and key-value backends."""
import json
import pytest
from unittest.mock import MagicMock, patch

from tourney_bank.bank.models import Player
from tourney_bank.state.backends import MemoryBackend, create_backend
from tourney_bank.state.player_store import PlayerStore
from tourney_bank.state.redis_client import RedisClient, redis_client


class TestPlayerStoreDefaults:
    """Test values read before anything is saved."""

    def test_defaults(self, store):
        assert store.get_player_name(3) == "Player 3"
        assert store.get_player_buy_in(3) is False
        assert store.get_player_out(3) is False
        assert store.get_player_paid_out(3) is False
        assert store.get_player_rebuys(3) == 0
        assert store.get_player_addons(3) == 0
        assert store.get_player_eliminated_by(3) is None
        assert store.get_elimination_order() == []

    def test_load_default_player(self, store):
        assert store.load_player(2) == Player.default(2)


class TestPlayerStoreWrites:
    """Test saving and loading player fields."""

    def test_save_and_load_player(self, store):
        player = Player(
            id=2,
            name="Dana",
            bought_in=True,
            eliminated=True,
            paid_out=False,
            rebuy_count=3,
            addon_count=1,
            eliminated_by=4,
        )

        store.save_player(player)

        assert store.load_player(2) == player

    def test_clearing_eliminator(self, store):
        store.save_player_eliminated_by(1, 2)
        store.save_player_eliminated_by(1, None)
        assert store.get_player_eliminated_by(1) is None

    def test_invalid_eliminator_reads_as_none(self, store, backend):
        backend.set_json("test:bank:player_eliminated_by:1", 0)
        assert store.get_player_eliminated_by(1) is None

    def test_eliminator_dropped_for_active_player(self, store):
        store.save_player_eliminated_by(1, 2)
        assert store.load_player(1).eliminated_by is None

    def test_counts_clamped_on_load(self, store):
        store.save_player_rebuys(1, 500)
        store.save_player_addons(1, -2)

        player = store.load_player(1)

        assert player.rebuy_count == 20
        assert player.addon_count == 0

    def test_clear_all_purchases(self, store):
        store.save_player_rebuys(1, 2)
        store.save_player_rebuys(2, 1)
        store.save_player_addons(1, 1)

        store.clear_all_rebuys()

        assert store.get_player_rebuys(1) == 0
        assert store.get_player_rebuys(2) == 0
        assert store.get_player_addons(1) == 1

        store.clear_all_addons()
        assert store.get_player_addons(1) == 0


class TestEliminationOrderPersistence:
    """Test elimination order storage."""

    def test_sanitized_on_save(self, store):
        stored = store.save_elimination_order([3, 0, 3, -1, 2])

        assert stored == [3, 2]
        assert store.get_elimination_order() == [3, 2]

    def test_invalid_entries_dropped_on_read(self, store, backend):
        backend.set_json("test:bank:elimination_order", [2, "x", -4, 1])
        assert store.get_elimination_order() == [2, 1]


class TestReset:
    """Test default-state detection and reset."""

    def test_default_state(self, store):
        assert store.is_in_default_state(4)

    @pytest.mark.parametrize("change", [
        lambda s: s.save_player_name(2, "Eve"),
        lambda s: s.save_player_buy_in(2, True),
        lambda s: s.save_player_out(2, True),
        lambda s: s.save_player_paid_out(2, True),
        lambda s: s.save_player_rebuys(2, 1),
        lambda s: s.save_player_addons(2, 1),
        lambda s: s.save_player_eliminated_by(2, 1),
    ])
    def test_any_change_leaves_default_state(self, store, change):
        change(store)
        assert not store.is_in_default_state(4)

    def test_changes_beyond_player_count_ignored(self, store):
        store.save_player_buy_in(6, True)
        assert store.is_in_default_state(4)

    def test_reset_all(self, store, settings):
        store.save_player_name(1, "Eve")
        store.save_player_out(2, True)
        store.save_elimination_order([2])
        settings.set_buy_in(75.0)

        store.reset_all()

        assert store.is_in_default_state(4)
        assert store.get_elimination_order() == []
        assert settings.get_buy_in() == 75.0

    def test_prefixes_are_isolated(self, backend):
        first = PlayerStore(backend, prefix="a")
        second = PlayerStore(backend, prefix="b")

        first.save_player_name(1, "Eve")

        assert second.get_player_name(1) == "Player 1"


class TestMemoryBackend:
    """Test the in-memory backend."""

    def test_json_round_trip(self):
        backend = MemoryBackend()
        backend.set_json("k", {"a": [1, 2]})
        assert backend.get_json("k") == {"a": [1, 2]}

    def test_missing_key(self):
        assert MemoryBackend().get_json("missing") is None

    def test_keys_and_delete(self):
        backend = MemoryBackend()
        backend.set_json("p:1", 1)
        backend.set_json("p:2", 2)
        backend.set_json("q:1", 3)

        assert sorted(backend.keys("p:")) == ["p:1", "p:2"]

        backend.delete("p:1", "missing")
        assert not backend.exists("p:1")
        assert backend.exists("p:2")


class TestRedisClient:
    """Test the Redis wrapper against a mocked connection."""

    @pytest.fixture
    def mock_redis(self, monkeypatch):
        mock = MagicMock()
        monkeypatch.setattr(redis_client, "_redis", mock)
        return mock

    def test_singleton(self):
        assert RedisClient() is redis_client

    def test_requires_connect(self, monkeypatch):
        monkeypatch.setattr(redis_client, "_redis", None)
        with pytest.raises(RuntimeError):
            redis_client.get("key")

    def test_get_json(self, mock_redis):
        mock_redis.get.return_value = json.dumps([1, 2])

        assert redis_client.get_json("key") == [1, 2]
        mock_redis.get.assert_called_once_with("key")

    def test_get_json_missing(self, mock_redis):
        mock_redis.get.return_value = None
        assert redis_client.get_json("key") is None

    def test_set_json(self, mock_redis):
        redis_client.set_json("key", {"a": 1})
        mock_redis.set.assert_called_once_with("key", '{"a": 1}')

    def test_delete_without_keys_skips_call(self, mock_redis):
        redis_client.delete()
        mock_redis.delete.assert_not_called()

    def test_keys_scans_prefix(self, mock_redis):
        mock_redis.scan_iter.return_value = iter(["t:bank:x"])

        assert redis_client.keys("t:bank:") == ["t:bank:x"]
        mock_redis.scan_iter.assert_called_once_with(match="t:bank:*")

    def test_exists(self, mock_redis):
        mock_redis.exists.return_value = 1
        assert redis_client.exists("key") is True

    def test_player_store_over_redis(self, mock_redis):
        store = PlayerStore(redis_client, prefix="t")
        mock_redis.get.return_value = json.dumps("Frank")

        assert store.get_player_name(1) == "Frank"
        mock_redis.get.assert_called_with("t:bank:player_name:1")

    def test_connect_uses_configured_url(self, monkeypatch):
        monkeypatch.setattr(redis_client, "_redis", None)
        with patch("tourney_bank.state.redis_client.Redis") as redis_cls:
            redis_client.connect("redis://example:6379")

        redis_cls.from_url.assert_called_once_with(
            "redis://example:6379", encoding="utf-8", decode_responses=True
        )


class TestCreateBackend:
    """Test backend selection."""

    def test_memory(self):
        assert isinstance(create_backend("memory"), MemoryBackend)

    def test_redis_connects(self):
        with patch.object(redis_client, "connect") as connect:
            assert create_backend("redis") is redis_client
        connect.assert_called_once()

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_backend("sqlite")
