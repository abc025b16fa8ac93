"""Tests for DiscoveryCache and the finder's field/method caches."""

import threading
from typing import Annotated

import pytest

from memberfinder import DiscoveryCache, Marker, ReflectionFinder
from memberfinder.protocols import MemberCacheProtocol


class Inject(Marker):
    pass


class Service:
    repo: Annotated[object, Inject()]

    @Inject()
    def start(self):
        pass


@pytest.fixture
def cache():
    return DiscoveryCache("fields")


@pytest.fixture
def finder():
    return ReflectionFinder()


class TestDiscoveryCache:

    def test_implements_protocol(self, cache):
        assert isinstance(cache, MemberCacheProtocol)

    def test_round_trip(self, cache):
        members = ["a", "b"]
        cache.set("key", members)

        assert cache.get("key") == members
        assert cache.exists("key")

    def test_unset_key_is_absent(self, cache):
        assert cache.get("missing") is None
        assert not cache.exists("missing")

    def test_empty_list_is_a_valid_entry(self, cache):
        cache.set("empty", [])

        assert cache.get("empty") == []

    def test_stored_list_is_isolated_from_callers(self, cache):
        members = ["a"]
        cache.set("key", members)
        members.append("b")

        returned = cache.get("key")
        returned.append("c")

        assert cache.get("key") == ["a"]

    def test_set_replaces_entry(self, cache):
        cache.set("key", ["a"])
        cache.set("key", ["b"])

        assert cache.get("key") == ["b"]
        assert len(cache) == 1

    def test_stats_count_hits_and_misses(self, cache):
        cache.set("key", ["a"])
        cache.get("key")
        cache.get("key")
        cache.get("other")

        stats = cache.get_stats()
        assert stats == {"name": "fields", "total_keys": 1, "hits": 2, "misses": 1}

    def test_concurrent_writers_do_not_lose_entries(self, cache):
        def writer(worker: int):
            for i in range(200):
                cache.set(f"{worker}:{i}", [i])

        threads = [threading.Thread(target=writer, args=(w,)) for w in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 8 * 200


class TestFinderCaches:

    def test_field_cache_round_trip(self, finder):
        fields = finder.find_fields(Service, Inject)
        key = finder.cache_key(Service, Inject)

        finder.set_field_cache(key, fields)

        assert finder.get_field_cache(key) == fields

    def test_method_cache_round_trip(self, finder):
        methods = finder.find_methods(Service, Inject)
        key = finder.cache_key(Service, Inject)

        finder.set_method_cache(key, methods)

        assert finder.get_method_cache(key) == methods

    def test_unset_keys_are_absent(self, finder):
        assert finder.get_field_cache("nope") is None
        assert finder.get_method_cache("nope") is None

    def test_field_and_method_caches_are_independent(self, finder):
        key = finder.cache_key(Service, Inject)
        finder.set_field_cache(key, finder.find_fields(Service, Inject))

        assert finder.get_method_cache(key) is None

    def test_caller_chosen_keys_are_accepted(self, finder):
        finder.set_field_cache("all-injectables", finder.find_fields(Service, Inject))

        assert [f.name for f in finder.get_field_cache("all-injectables")] == ["repo"]

    def test_caches_are_per_finder(self):
        first, second = ReflectionFinder(), ReflectionFinder()
        first.set_field_cache("key", [])

        assert second.get_field_cache("key") is None

    def test_concurrent_first_use_creates_one_cache(self, finder):
        barrier = threading.Barrier(16)
        seen = []

        def worker():
            barrier.wait()
            seen.append(finder._obtain_field_cache())

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(c) for c in seen}) == 1
        assert seen[0] is finder._obtain_field_cache()
