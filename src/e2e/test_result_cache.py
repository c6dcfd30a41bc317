import threading

import pytest

from namedir.cache import ResultCache, query_signature


def test_evicts_least_recently_used():
    c = ResultCache(2)
    c.set("a", 1)
    c.set("b", 2)
    c.set("c", 3)
    assert c.get("a") is None
    assert c.get("b") == 2 and c.get("c") == 3
    assert len(c) == 2


def test_get_protects_key_from_eviction():
    c = ResultCache(2)
    c.set("a", 1)
    c.set("b", 2)
    assert c.get("a") == 1
    c.set("c", 3)
    assert "a" in c
    assert "b" not in c


def test_set_existing_key_replaces_and_promotes():
    c = ResultCache(2)
    c.set("a", 1)
    c.set("b", 2)
    c.set("a", 10)
    c.set("c", 3)
    assert c.get("a") == 10
    assert c.get("b") is None


def test_clear_and_counters():
    c = ResultCache(3)
    c.set("a", 1)
    c.get("a")
    c.get("zzz")
    assert (c.hits, c.misses) == (1, 1)
    c.clear()
    assert len(c) == 0
    assert c.get("a") is None


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        ResultCache(0)


def test_independent_instances():
    a, b = ResultCache(2), ResultCache(2)
    a.set("k", 1)
    assert b.get("k") is None


def test_signature_ignores_argument_order_and_letter_case():
    k1 = query_signature("page", page=1, limit=10, letter="a", search=None)
    k2 = query_signature("page", search=None, letter="A", limit=10, page=1)
    assert k1 == k2
    assert query_signature("page", page=1, limit=10, search="") == query_signature("page", page=1, limit=10)


def test_signature_distinguishes_query_shapes():
    base = query_signature("page", page=1, limit=10)
    assert base != query_signature("page", page=2, limit=10)
    assert base != query_signature("page", page=1, limit=20)
    assert base != query_signature("page", page=1, limit=10, letter="B")
    assert base != query_signature("page", page=1, limit=10, search="tazi")
    assert query_signature("search", page=1, limit=10, search="tazi") != query_signature(
        "page", page=1, limit=10, search="tazi"
    )


def test_concurrent_access_keeps_capacity():
    c = ResultCache(50)
    errors = []

    def worker(n: int) -> None:
        try:
            for i in range(500):
                key = f"{n}-{i % 120}"
                c.set(key, i)
                c.get(key)
        except Exception as exc:  # pragma: no cover
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert not errors
    assert len(c) == 50
