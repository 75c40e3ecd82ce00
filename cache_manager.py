#!/usr/bin/env python3
"""
In-memory playlist cache with configurable TTL

Holds one immutable Snapshot. A refresh builds a new Snapshot and replaces
the reference in a single assignment; a failed refresh keeps the old one.
"""

import asyncio
import time
import logging
from typing import Any, Callable, Dict

from models.playlist import Snapshot
from services.source_aggregator import SourceAggregator
from services.source_registry import SourceRegistry
from utils.status_tracker import StatusTracker


DEFAULT_TTL_SECONDS = 300


class PlaylistCache:
    """TTL cache around the source aggregator with a single in-flight refresh"""

    def __init__(self, aggregator: SourceAggregator, sources: SourceRegistry,
                 ttl_seconds: float = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.time,
                 status_tracker: StatusTracker = None):
        self.logger = logging.getLogger('vodarr.cache')
        self.aggregator = aggregator
        self.sources = sources
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.status_tracker = status_tracker or aggregator.status_tracker or StatusTracker()
        if aggregator.status_tracker is None:
            aggregator.status_tracker = self.status_tracker

        self._snapshot = Snapshot.empty()
        self._has_snapshot = False
        # Bumped after every refresh attempt so waiters can tell one finished
        self._generation = 0
        self._refresh_lock = asyncio.Lock()

    @property
    def snapshot(self) -> Snapshot:
        """Current snapshot without any freshness check"""
        return self._snapshot

    def is_fresh(self) -> bool:
        """True when a snapshot exists and is younger than the TTL"""
        if not self._has_snapshot:
            return False
        return self.clock() - self._snapshot.fetched_at < self.ttl_seconds

    async def get(self, force_refresh: bool = False) -> Snapshot:
        """
        Return the cached snapshot, refreshing it when stale or forced

        Callers arriving while a refresh is running wait for that refresh
        and get its result instead of starting another one.

        Args:
            force_refresh: Fetch every source regardless of the TTL

        Returns:
            The newest snapshot; the previous one if the refresh failed
        """
        if not force_refresh and self.is_fresh():
            self.logger.debug(f"Cache hit: {len(self._snapshot.entries)} entries")
            return self._snapshot

        generation = self._generation
        async with self._refresh_lock:
            if self._generation != generation:
                self.logger.debug("Joined a refresh that finished while waiting")
                return self._snapshot

            await self._refresh(force_refresh)
            return self._snapshot

    async def _refresh(self, forced: bool) -> None:
        """Run one aggregation and swap the snapshot in on success"""
        urls = self.sources.list()
        reason = 'forced' if forced else ('expired' if self._has_snapshot else 'initial')
        self.logger.info(f"Refreshing playlist cache ({reason}, {len(urls)} sources)")
        start_time = time.time()

        try:
            result = await self.aggregator.aggregate(urls)
        except Exception as e:
            self.logger.error(f"Playlist refresh failed, keeping previous snapshot: {e}")
            self._finish_failed(start_time, str(e))
            return
        finally:
            self._generation += 1

        if result.all_failed:
            self.logger.error(
                f"All {len(result.sources)} playlist sources failed, "
                f"serving {len(self._snapshot.entries)} cached entries"
            )
            self._finish_failed(start_time, 'all sources failed')
            return

        self._snapshot = Snapshot.build(result.entries, fetched_at=self.clock(), sources=result.sources)
        self._has_snapshot = True

        duration = time.time() - start_time
        self.status_tracker.refresh_completed(True, duration, entry_count=len(result.entries))
        self.logger.info(f"Cached {len(result.entries)} entries (refresh took {duration:.2f}s)")

    def _finish_failed(self, start_time: float, error: str) -> None:
        self.status_tracker.refresh_completed(False, time.time() - start_time, error=error)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        snapshot = self._snapshot
        age = self.clock() - snapshot.fetched_at if self._has_snapshot else None
        return {
            'entry_count': len(snapshot.entries),
            'source_count': len(self.sources),
            'fetched_at': snapshot.fetched_at if self._has_snapshot else None,
            'age_seconds': age,
            'ttl_seconds': self.ttl_seconds,
            'fresh': self.is_fresh(),
            'refresh_in_progress': self._refresh_lock.locked(),
            'last_refresh_sources': [
                {'url': source.url, 'ok': source.ok, 'entry_count': source.entry_count, 'error': source.error}
                for source in snapshot.sources
            ]
        }
