#!/usr/bin/env python3
"""
Source aggregator
Fetches every configured playlist, parses each one and merges the results
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from clients.client_playlist import TextFetcher
from models.playlist import DEFAULT_BACKGROUND_URL, DEFAULT_POSTER_URL, Entry, SourceResult
from utils.http_client import SourceFetchError
from utils.playlist_parser import DEFAULT_ID_PREFIX, parse_playlist
from utils.status_tracker import StatusTracker


DEFAULT_FETCH_TIMEOUT = 10.0


@dataclass(frozen=True)
class AggregationResult:
    """Merged entries plus how each source fared"""
    entries: Tuple[Entry, ...]
    sources: Tuple[SourceResult, ...]

    @property
    def all_failed(self) -> bool:
        """True when sources were configured and none of them could be fetched"""
        return bool(self.sources) and not any(source.ok for source in self.sources)

    @property
    def failed_count(self) -> int:
        return sum(1 for source in self.sources if not source.ok)


class SourceAggregator:
    """Builds one collision-free entry list out of several playlist sources"""

    def __init__(self, fetcher: TextFetcher, timeout: float = DEFAULT_FETCH_TIMEOUT,
                 concurrent: bool = True, id_prefix: str = DEFAULT_ID_PREFIX,
                 default_poster: str = DEFAULT_POSTER_URL,
                 default_background: str = DEFAULT_BACKGROUND_URL,
                 status_tracker: Optional[StatusTracker] = None):
        self.fetcher = fetcher
        self.timeout = timeout
        self.concurrent = concurrent
        self.id_prefix = id_prefix
        self.default_poster = default_poster
        self.default_background = default_background
        self.status_tracker = status_tracker
        self.logger = logging.getLogger('vodarr.aggregator')

    def make_entry_id(self, source_index: int, ordinal: int) -> str:
        """Id encoding the 1-based source number and the per-source ordinal"""
        return f"{self.id_prefix}{source_index + 1}-{ordinal}"

    async def aggregate(self, urls: Sequence[str]) -> AggregationResult:
        """
        Fetch and parse all sources

        Args:
            urls: Source URLs in priority order

        Returns:
            AggregationResult with entries in source order, then ordinal
        """
        urls = list(urls)
        start_time = time.time()

        if self.concurrent:
            outcomes = await asyncio.gather(
                *(self._collect_source(index, url) for index, url in enumerate(urls))
            )
        else:
            outcomes = []
            for index, url in enumerate(urls):
                outcomes.append(await self._collect_source(index, url))

        entries: List[Entry] = []
        results: List[SourceResult] = []
        for source_entries, result in outcomes:
            entries.extend(source_entries)
            results.append(result)

        aggregation = AggregationResult(entries=tuple(entries), sources=tuple(results))
        self.logger.info(
            f"Aggregated {len(entries)} entries from {len(urls) - aggregation.failed_count}/{len(urls)} "
            f"sources in {time.time() - start_time:.2f}s"
        )
        return aggregation

    async def _collect_source(self, index: int, url: str) -> Tuple[List[Entry], SourceResult]:
        """Fetch and parse one source; a failure yields no entries"""
        try:
            text = await asyncio.wait_for(self.fetcher.fetch_text(url, self.timeout), timeout=self.timeout)
        except asyncio.TimeoutError:
            return self._failed(index, url, f"timed out after {self.timeout:.0f}s")
        except SourceFetchError as e:
            return self._failed(index, url, e.reason)
        except Exception as e:
            return self._failed(index, url, str(e) or e.__class__.__name__)

        parsed = parse_playlist(
            text,
            source_index=index,
            id_prefix=self.id_prefix,
            default_poster=self.default_poster,
            default_background=self.default_background,
        )
        entries = [entry.with_id(self.make_entry_id(index, entry.ordinal)) for entry in parsed]

        if self.status_tracker:
            self.status_tracker.source_fetched(url, success=True, entry_count=len(entries))
        self.logger.debug(f"Source #{index + 1} ({url}) produced {len(entries)} entries")
        return entries, SourceResult(url=url, source_index=index, ok=True, entry_count=len(entries))

    def _failed(self, index: int, url: str, reason: str) -> Tuple[List[Entry], SourceResult]:
        self.logger.warning(f"Skipping playlist source #{index + 1} ({url}): {reason}")
        if self.status_tracker:
            self.status_tracker.source_fetched(url, success=False, error=reason)
        return [], SourceResult(url=url, source_index=index, ok=False, error=reason)
