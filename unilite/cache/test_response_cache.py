from unilite.cache import ResponseCache, cache_key


def test_cache_key_combines_user_and_type():
    assert cache_key("21CS001", "attendance") == "21CS001-attendance"


def test_miss_then_hit():
    cache = ResponseCache()
    assert cache.get("u-fees") is None
    cache.put("u-fees", "Pending: 0")
    assert cache.get("u-fees") == "Pending: 0"
    assert "u-fees" in cache

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == "50.0%"
    assert stats["maxsize"] is None


def test_put_overwrites():
    cache = ResponseCache()
    cache.put("k", 1)
    cache.put("k", 2)
    assert cache.get("k") == 2
    assert len(cache) == 1


def test_bounded_cache_evicts_least_recently_used():
    cache = ResponseCache(maxsize=2)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.get("a")
    cache.put("c", 3)

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2


def test_clear_resets_entries_and_counters():
    cache = ResponseCache()
    cache.put("a", 1)
    cache.get("a")
    cache.get("missing")
    cache.clear()

    assert len(cache) == 0
    assert cache.stats() == {
        "size": 0,
        "maxsize": None,
        "hits": 0,
        "misses": 0,
        "hit_rate": "0.0%",
    }
