import asyncio

import pytest

from cache_manager import PlaylistCache
from services.source_aggregator import SourceAggregator
from services.source_registry import SourceRegistry

from tests.conftest import BlockingFetcher, MOVIES_M3U, MOVIES_URL, SHOWS_M3U, SHOWS_URL


def make_cache(fetcher, clock, urls=(MOVIES_URL, SHOWS_URL), ttl=300):
    return PlaylistCache(SourceAggregator(fetcher), SourceRegistry(urls), ttl_seconds=ttl, clock=clock)


async def test_get_within_ttl_returns_same_snapshot(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock)

    first = await cache.get()
    clock.advance(299)
    second = await cache.get()

    assert first is second
    assert len(fetcher.calls) == 2
    assert len(first.entries) == 3
    assert first.fetched_at == clock.now - 299


async def test_expired_snapshot_is_refreshed(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock)

    first = await cache.get()
    clock.advance(300)
    second = await cache.get()

    assert second is not first
    assert len(fetcher.calls) == 4


async def test_force_refresh_fetches_every_source(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock)
    await cache.get()

    await cache.get(force_refresh=True)

    assert fetcher.calls == [MOVIES_URL, SHOWS_URL, MOVIES_URL, SHOWS_URL]


async def test_total_failure_keeps_previous_snapshot(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock)
    previous = await cache.get()
    fetcher.fail(MOVIES_URL)
    fetcher.fail(SHOWS_URL)

    current = await cache.get(force_refresh=True)

    assert current is previous
    assert cache.status_tracker.refresh.total_failures == 1
    assert cache.status_tracker.refresh.last_error == 'all sources failed'


async def test_total_failure_without_snapshot_returns_empty(fetcher, clock) -> None:
    fetcher.fail(MOVIES_URL)
    fetcher.fail(SHOWS_URL)
    cache = make_cache(fetcher, clock)

    snapshot = await cache.get()

    assert snapshot.entries == ()
    assert snapshot.index == {}
    assert cache.is_fresh() is False


async def test_failed_refresh_does_not_count_as_fresh(fetcher, clock) -> None:
    fetcher.fail(MOVIES_URL)
    fetcher.fail(SHOWS_URL)
    cache = make_cache(fetcher, clock)

    await cache.get()
    await cache.get()

    assert len(fetcher.calls) == 4


async def test_unexpected_source_error_keeps_other_sources(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock)
    previous = await cache.get()
    fetcher.documents[MOVIES_URL] = RuntimeError('boom')

    current = await cache.get(force_refresh=True)

    assert current is not previous
    assert [e.id for e in current.entries] == ['vod-2-1']
    assert current.sources[0].error == 'boom'


async def test_aggregator_exception_keeps_previous_snapshot(fetcher, clock) -> None:
    class ExplodingAggregator(SourceAggregator):
        async def aggregate(self, urls):
            raise RuntimeError('boom')

    cache = make_cache(fetcher, clock)
    previous = await cache.get()
    cache.aggregator = ExplodingAggregator(fetcher)

    current = await cache.get(force_refresh=True)

    assert current is previous
    assert cache.status_tracker.refresh.last_error == 'boom'


async def test_partial_failure_builds_new_snapshot(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock)
    await cache.get()
    fetcher.fail(MOVIES_URL)

    snapshot = await cache.get(force_refresh=True)

    assert [e.id for e in snapshot.entries] == ['vod-2-1']
    assert set(snapshot.index) == {'vod-2-1'}


async def test_concurrent_callers_share_one_refresh(clock) -> None:
    fetcher = BlockingFetcher({MOVIES_URL: MOVIES_M3U, SHOWS_URL: SHOWS_M3U})
    cache = make_cache(fetcher, clock)

    tasks = [asyncio.create_task(cache.get(force_refresh=True)) for _ in range(3)]
    await fetcher.started.wait()
    for _ in range(3):
        await asyncio.sleep(0)
    assert cache.get_stats()['refresh_in_progress'] is True
    fetcher.release()
    snapshots = await asyncio.gather(*tasks)

    assert fetcher.calls == [MOVIES_URL, SHOWS_URL]
    assert snapshots[0] is snapshots[1] is snapshots[2]


async def test_source_changes_wait_for_next_refresh(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock, urls=(MOVIES_URL,))
    first = await cache.get()

    cache.sources.add(SHOWS_URL)
    same = await cache.get()
    refreshed = await cache.get(force_refresh=True)

    assert same is first
    assert [e.id for e in refreshed.entries] == ['vod-1-1', 'vod-1-2', 'vod-2-1']


async def test_get_stats(fetcher, clock) -> None:
    cache = make_cache(fetcher, clock)
    assert cache.get_stats()['fetched_at'] is None

    await cache.get()
    clock.advance(10)
    stats = cache.get_stats()

    assert stats['entry_count'] == 3
    assert stats['source_count'] == 2
    assert stats['age_seconds'] == pytest.approx(10)
    assert stats['fresh'] is True
    assert [s['ok'] for s in stats['last_refresh_sources']] == [True, True]
