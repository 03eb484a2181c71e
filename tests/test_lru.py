import pytest

from word_chains.lru import LRUCache


def test_evicts_least_recently_used():
    cache = LRUCache(2)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1
    cache.put("c", 3)
    assert "b" not in cache
    assert cache.keys() == ["a", "c"]
    assert len(cache) == 2


def test_put_existing_refreshes():
    cache = LRUCache(2)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.put("a", 10)
    cache.put("c", 3)
    assert cache.get("a") == 10
    assert cache.get("b") is None


def test_clear():
    cache = LRUCache(3)
    cache.put("b", 2)
    cache.clear()
    assert len(cache) == 0


def test_invalid_size():
    with pytest.raises(ValueError):
        LRUCache(0)
