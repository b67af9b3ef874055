import pytest

from cyf_blog.utils import cache as cache_module
from cyf_blog.utils.cache import MemoryCache, email_verify_key


@pytest.mark.asyncio
async def test_memory_cache_round_trip():
    store = MemoryCache()

    await store.set("greeting", "hello", 30)
    assert await store.get("greeting") == "hello"

    await store.delete("greeting")
    assert await store.get("greeting") is None


@pytest.mark.asyncio
async def test_memory_cache_expires(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(cache_module.time, "monotonic", lambda: clock[0])
    store = MemoryCache()

    await store.set("key", "value", 300)
    clock[0] += 299
    assert await store.get("key") == "value"
    clock[0] += 1
    assert await store.get("key") is None


@pytest.mark.asyncio
async def test_memory_cache_without_ttl_keeps_value(monkeypatch):
    clock = [0.0]
    monkeypatch.setattr(cache_module.time, "monotonic", lambda: clock[0])
    store = MemoryCache()

    await store.set("key", "value")
    clock[0] += 10 ** 6
    assert await store.get("key") == "value"

    await store.clear()
    assert await store.get("key") is None


def test_email_verify_key():
    assert email_verify_key("abc123") == "email_verify__abc123"


def test_build_cache_defaults_to_memory():
    assert isinstance(cache_module.build_cache(), MemoryCache)


@pytest.mark.asyncio
async def test_memory_cache_set_sweeps_expired_entries(monkeypatch):
    clock = [0.0]
    monkeypatch.setattr(cache_module.time, "monotonic", lambda: clock[0])
    store = MemoryCache()

    await store.set(email_verify_key("gone"), "true", 300)
    await store.set("forever", "value")
    clock[0] += 301
    await store.set("fresh", "value", 300)

    assert email_verify_key("gone") not in store._store
    assert set(store._store) == {"forever", "fresh"}
