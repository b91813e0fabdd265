"""Unit tests for the key-value store strategies and the component factory."""

import asyncio

import pytest

from adtax.core.config import Settings
from adtax.core.factory import ComponentFactory
from adtax.db.session import close_db, get_session_maker
from adtax.interfaces.store import StoreError
from adtax.strategies.naming_engine import NameComposer
from adtax.strategies.stores import InMemoryKeyValueStore, SQLKeyValueStore


@pytest.fixture
def sqlite_settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'kv.db'}",
        store_type="sql",
        log_dir=tmp_path / "logs",
    )


# =============================================================================
# In-Memory Store Tests
# =============================================================================


class TestInMemoryKeyValueStore:
    """Test suite for InMemoryKeyValueStore."""

    @pytest.fixture
    def store(self):
        return InMemoryKeyValueStore()

    def test_set_get_delete(self, store):
        async def run_test():
            assert await store.get("config:s1") is None

            await store.set("config:s1", {"separator": "_"})
            assert await store.get("config:s1") == {"separator": "_"}

            await store.set("config:s1", {"separator": "-"})
            assert await store.get("config:s1") == {"separator": "-"}

            await store.delete("config:s1")
            await store.delete("config:s1")
            assert await store.get("config:s1") is None

        asyncio.run(run_test())

    def test_values_are_copied(self, store):
        async def run_test():
            history = [{"fileName": "a"}]
            await store.set("names:s1", history)
            history.append({"fileName": "b"})

            loaded = await store.get("names:s1")
            loaded.append({"fileName": "c"})

            assert await store.get("names:s1") == [{"fileName": "a"}]

        asyncio.run(run_test())

    def test_expired_key_reads_as_missing(self, store):
        async def run_test():
            await store.set("key_meta:k1", {"name": "old"}, ttl_seconds=-1)
            await store.set("key_meta:k2", {"name": "fresh"}, ttl_seconds=3600)

            assert await store.get("key_meta:k1") is None
            assert await store.get("key_meta:k2") == {"name": "fresh"}

        asyncio.run(run_test())


# =============================================================================
# SQL Store Tests
# =============================================================================


class TestSQLKeyValueStore:
    """Test suite for SQLKeyValueStore against a file-backed SQLite database."""

    def test_set_get_delete(self, sqlite_settings):
        async def run_test():
            store = SQLKeyValueStore(get_session_maker(sqlite_settings), sqlite_settings)
            try:
                await store.initialize()

                assert await store.get("names:s1") is None

                await store.set("names:s1", [{"fileName": "a", "metadata": {}, "timestamp": 1}])
                await store.set("names:s1", [{"fileName": "b", "metadata": {}, "timestamp": 2}])
                assert await store.get("names:s1") == [{"fileName": "b", "metadata": {}, "timestamp": 2}]

                await store.delete("names:s1")
                await store.delete("names:s1")
                assert await store.get("names:s1") is None
            finally:
                await store.close()

        asyncio.run(run_test())

    def test_expired_key_reads_as_missing(self, sqlite_settings):
        async def run_test():
            store = SQLKeyValueStore(get_session_maker(sqlite_settings), sqlite_settings)
            try:
                await store.initialize()
                await store.set("api_key:abc", {"keyId": "k1"}, ttl_seconds=-1)
                await store.set("api_key:def", {"keyId": "k2"}, ttl_seconds=3600)

                assert await store.get("api_key:abc") is None
                assert await store.get("api_key:def") == {"keyId": "k2"}
            finally:
                await store.close()

        asyncio.run(run_test())

    def test_backend_failure_raises_store_error(self, sqlite_settings):
        """Test that a missing table surfaces as StoreError."""

        async def run_test():
            store = SQLKeyValueStore(get_session_maker(sqlite_settings), sqlite_settings)
            try:
                with pytest.raises(StoreError):
                    await store.get("config:s1")
            finally:
                await close_db()

        asyncio.run(run_test())


# =============================================================================
# Component Factory Tests
# =============================================================================


class TestComponentFactory:
    """Test suite for ComponentFactory."""

    @pytest.fixture
    def factory(self, tmp_path):
        return ComponentFactory(Settings(store_type="memory", log_dir=tmp_path))

    def test_store_from_settings_is_cached(self, factory):
        store = factory.get_store()

        assert isinstance(store, InMemoryKeyValueStore)
        assert factory.get_store() is store

    def test_sql_store_from_settings(self, sqlite_settings):
        sql_factory = ComponentFactory(sqlite_settings)
        try:
            assert isinstance(sql_factory.get_store(), SQLKeyValueStore)
        finally:
            asyncio.run(close_db())

    def test_explicit_store_type_overrides_settings(self, sqlite_settings):
        assert isinstance(ComponentFactory(sqlite_settings).get_store("memory"), InMemoryKeyValueStore)

    def test_unknown_store_type(self, factory):
        with pytest.raises(ValueError, match="Unknown store type"):
            factory.get_store("redis")

    def test_store_type_is_normalized(self, tmp_path):
        assert Settings(store_type=" Memory ", log_dir=tmp_path).store_type == "memory"

    def test_naming_components(self, factory):
        assert isinstance(factory.get_composer(), NameComposer)
        assert factory.get_composer() is factory.get_composer()

        factory.clear_cache()
        assert factory.get_parser() is not None
        assert factory.get_aggregator() is not None
