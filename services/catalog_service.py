#!/usr/bin/env python3
"""
Catalog service
The operations the serving layer calls: list, look up, resolve, and manage sources
"""

import logging
from typing import Any, Dict, List, Optional, Union

from cache_manager import PlaylistCache
from clients.client_playlist import PlaylistSourceClient, TextFetcher
from models.playlist import (
    Entry,
    NotFound,
    RefreshCompleted,
    RefreshTrigger,
    ResolvedStream,
    Snapshot,
)
from services.config_service import ConfigService
from services.source_aggregator import SourceAggregator
from services.source_registry import SourceRegistry
from utils.status_tracker import StatusTracker


CatalogItem = Union[RefreshTrigger, Entry]
StreamResult = Union[ResolvedStream, RefreshCompleted, NotFound]


class CatalogService:
    """Query facade over the playlist cache"""

    def __init__(self, cache: PlaylistCache, sources: SourceRegistry,
                 id_prefix: str = 'vod-', include_refresh_entry: bool = True,
                 fetcher: Optional[TextFetcher] = None):
        self.logger = logging.getLogger('vodarr.catalog')
        self.cache = cache
        self.sources = sources
        self.include_refresh_entry = include_refresh_entry
        self.fetcher = fetcher
        self.refresh_trigger = RefreshTrigger(id=f"{id_prefix}reload")

    async def list_all(self, group: Optional[str] = None) -> List[CatalogItem]:
        """
        List catalog items in snapshot order

        Args:
            group: Only return entries with this group label

        Returns:
            Entries, preceded by the reload item on the unfiltered catalog
        """
        snapshot = await self.cache.get()
        if group is not None:
            return [entry for entry in snapshot.entries if entry.group_label == group]

        items: List[CatalogItem] = []
        if self.include_refresh_entry:
            items.append(self.refresh_trigger)
        items.extend(snapshot.entries)
        return items

    async def list_groups(self) -> List[str]:
        """Distinct group labels in first-seen order"""
        snapshot = await self.cache.get()
        groups = []
        for entry in snapshot.entries:
            if entry.group_label and entry.group_label not in groups:
                groups.append(entry.group_label)
        return groups

    async def get_by_id(self, entry_id: str) -> Union[Entry, NotFound]:
        snapshot = await self.cache.get()
        entry = snapshot.get(entry_id)
        if entry is None:
            self.logger.debug(f"Entry not found: {entry_id}")
            return NotFound(entry_id)
        return entry

    async def resolve_stream(self, entry_id: str) -> StreamResult:
        """
        Resolve a catalog id to a playable stream

        The reload item forces one refresh and reports the result instead
        of returning a stream.
        """
        if entry_id == self.refresh_trigger.id:
            snapshot = await self.force_refresh()
            return RefreshCompleted(entry_count=len(snapshot.entries), fetched_at=snapshot.fetched_at)

        result = await self.get_by_id(entry_id)
        if isinstance(result, NotFound):
            return result
        return ResolvedStream(entry_id=result.id, url=result.media_url, title=result.title)

    async def force_refresh(self) -> Snapshot:
        self.logger.info("Manual playlist refresh requested")
        return await self.cache.get(force_refresh=True)

    def add_source(self, url: str) -> str:
        """Append a playlist source; takes effect on the next refresh"""
        return self.sources.add(url)

    def remove_source(self, index: int) -> str:
        """Remove the source at a 0-based position; takes effect on the next refresh"""
        removed = self.sources.remove(index)
        self.cache.status_tracker.forget_source(removed)
        return removed

    def list_sources(self) -> List[str]:
        return self.sources.list()

    def get_status(self) -> Dict[str, Any]:
        """Cache statistics plus refresh and per-source history"""
        status = self.cache.status_tracker.get_status()
        status['cache'] = self.cache.get_stats()
        status['health'] = self.cache.status_tracker.get_health_status()['status']
        return status

    async def close(self):
        """Close the fetcher if it holds resources"""
        close = getattr(self.fetcher, 'close', None)
        if close is not None:
            await close()


def build_catalog_service(config: ConfigService, fetcher: Optional[TextFetcher] = None,
                          clock=None) -> CatalogService:
    """
    Wire the catalog from configuration

    Args:
        config: Configuration service
        fetcher: Text fetcher; a PlaylistSourceClient when not given
        clock: Time source for the cache (defaults to time.time)

    Returns:
        CatalogService ready to serve
    """
    id_prefix = config.get('ENTRY_ID_PREFIX') or 'vod-'
    if fetcher is None:
        fetcher = PlaylistSourceClient(user_agent=config.get('HTTP_USER_AGENT'))

    tracker = StatusTracker()
    sources = SourceRegistry(config.get_source_urls())
    aggregator = SourceAggregator(
        fetcher,
        timeout=config.get_float('FETCH_TIMEOUT_SECONDS', 10.0),
        concurrent=config.get('FETCH_CONCURRENTLY'),
        id_prefix=id_prefix,
        default_poster=config.get('DEFAULT_POSTER_URL'),
        default_background=config.get('DEFAULT_BACKGROUND_URL'),
        status_tracker=tracker,
    )

    cache_kwargs = {'clock': clock} if clock is not None else {}
    cache = PlaylistCache(
        aggregator,
        sources,
        ttl_seconds=config.get_int('CACHE_TTL_SECONDS', 300),
        status_tracker=tracker,
        **cache_kwargs
    )

    return CatalogService(
        cache,
        sources,
        id_prefix=id_prefix,
        include_refresh_entry=config.get('INCLUDE_REFRESH_ENTRY'),
        fetcher=fetcher,
    )
