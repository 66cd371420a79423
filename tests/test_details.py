"""Tests for the detail bundle cache."""
import pytest

from conftest import make_bundle
from pokehunt.constants import CACHE_TTL, DEGRADED_DETAIL_MESSAGE
from pokehunt.exceptions import CatalogFetchError
from pokehunt.models import DetailBundle
from pokehunt.utils.cache import CacheStore
from pokehunt.utils.details import DetailCache
from pokehunt.utils.storage import MemoryStorage


class BrokenStorage(MemoryStorage):
    async def set_string(self, key, value):
        raise OSError("quota exceeded")


@pytest.fixture
def details(catalog, cache):
    return DetailCache(catalog, cache)


@pytest.mark.asyncio
async def test_fresh_load_is_written_back(details, cache):
    result = await details.load(25)

    assert not result.degraded
    assert result.bundle.entry.id == 25

    await details.drain()
    record = await cache.get(details.key_for(25))
    assert DetailBundle.from_dict(record.value) == result.bundle


@pytest.mark.asyncio
async def test_detail_keys_use_the_shared_scope(details):
    assert details.key_for(25) == "cache:pokemon:detail:shared:25"


@pytest.mark.asyncio
async def test_cached_bundle_is_shown_before_the_fresh_one(details, catalog, cache):
    await cache.put(details.key_for(1), make_bundle(1, "Cached text.").to_dict())
    catalog.details[1] = make_bundle(1, "Fresh text.")
    results = []
    details.subscribe(results.append)

    result = await details.load(1)

    assert results[0].provisional is True
    assert results[0].bundle.flavor_text == "Cached text."
    assert result.bundle.flavor_text == "Fresh text."
    assert results[-1] == result


@pytest.mark.asyncio
async def test_stale_bundle_is_served_when_offline(details, catalog, cache, clock):
    cached = make_bundle(4, "Old but gold.")
    await cache.put(details.key_for(4), cached.to_dict())
    clock.advance(CACHE_TTL + 1)
    catalog.fail = True

    result = await details.load(4)

    assert result.degraded is True
    assert result.bundle == cached
    assert result.message == DEGRADED_DETAIL_MESSAGE


@pytest.mark.asyncio
async def test_offline_without_cache_is_an_error(details, catalog):
    catalog.fail = True

    with pytest.raises(CatalogFetchError):
        await details.load(150)


@pytest.mark.asyncio
async def test_skip_cache_goes_straight_to_the_network(details, catalog, cache):
    await cache.put(details.key_for(1), make_bundle(1, "Cached text.").to_dict())
    catalog.details[1] = make_bundle(1, "Fresh text.")
    results = []
    details.subscribe(results.append)

    result = await details.load(1, skip_cache=True)

    assert [r.provisional for r in results] == [False]
    assert result.bundle.flavor_text == "Fresh text."


@pytest.mark.asyncio
async def test_skip_cache_still_fails_loudly_offline(details, catalog, cache):
    await cache.put(details.key_for(1), make_bundle(1).to_dict())
    catalog.fail = True

    with pytest.raises(CatalogFetchError):
        await details.load(1, skip_cache=True)


@pytest.mark.asyncio
async def test_failed_write_back_does_not_fail_the_load(catalog, clock):
    details = DetailCache(catalog, CacheStore(BrokenStorage(), clock=clock))

    result = await details.load(7)
    await details.drain()

    assert result.bundle.entry.id == 7
    assert not result.degraded
