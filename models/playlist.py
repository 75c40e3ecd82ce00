#!/usr/bin/env python3
"""
Playlist data model

Entries are frozen once built. A refresh never edits an existing Entry or
Snapshot; it builds new ones and the cache swaps the reference.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


DEFAULT_POSTER_URL = 'https://dl.strem.io/addon-logo.png'
DEFAULT_BACKGROUND_URL = 'https://dl.strem.io/addon-background.jpg'

# Content type reported to the media client for every entry
ENTRY_TYPE = 'movie'


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ExtinfAttributes:
    """Attributes of an #EXTINF directive

    The parser only reads the named fields; every other key lands in ``extra``.
    """
    title_override: Optional[str] = None
    poster: Optional[str] = None
    group: Optional[str] = None
    extra: Mapping[str, str] = field(default_factory=_empty_mapping, hash=False)

    @classmethod
    def from_pairs(cls, pairs: Dict[str, str]) -> 'ExtinfAttributes':
        """Build from a raw key/value mapping"""
        remaining = dict(pairs)
        return cls(
            title_override=remaining.pop('tvg-name', None) or None,
            poster=remaining.pop('tvg-logo', None) or None,
            group=remaining.pop('group-title', None) or None,
            extra=MappingProxyType(remaining),
        )

    def as_dict(self) -> Dict[str, str]:
        """Flatten back to the raw key/value form"""
        result = dict(self.extra)
        if self.title_override is not None:
            result['tvg-name'] = self.title_override
        if self.poster is not None:
            result['tvg-logo'] = self.poster
        if self.group is not None:
            result['group-title'] = self.group
        return result


@dataclass(frozen=True)
class Entry:
    """One playable item from a playlist document"""
    id: str
    title: str
    media_url: str
    ordinal: int
    source_index: int = 0
    group_label: Optional[str] = None
    poster_url: str = DEFAULT_POSTER_URL
    background_url: str = DEFAULT_BACKGROUND_URL
    attributes: Mapping[str, str] = field(default_factory=_empty_mapping, hash=False)

    def __post_init__(self):
        if not self.media_url:
            raise ValueError(f"Entry {self.id!r} has no media URL")

    def with_id(self, entry_id: str) -> 'Entry':
        """Return a copy carrying a different id"""
        return Entry(
            id=entry_id,
            title=self.title,
            media_url=self.media_url,
            ordinal=self.ordinal,
            source_index=self.source_index,
            group_label=self.group_label,
            poster_url=self.poster_url,
            background_url=self.background_url,
            attributes=self.attributes,
        )

    def to_meta(self) -> Dict[str, Any]:
        """Minimal catalog/meta dictionary for the media client"""
        meta = {
            'id': self.id,
            'type': ENTRY_TYPE,
            'name': self.title,
            'poster': self.poster_url,
            'background': self.background_url,
            'description': self.title,
        }
        if self.group_label:
            meta['genres'] = [self.group_label]
        return meta

    def to_stream(self) -> Dict[str, str]:
        """Minimal stream dictionary for the media client"""
        return {'url': self.media_url, 'title': self.title}


@dataclass(frozen=True)
class RefreshTrigger:
    """Catalog pseudo-entry that asks for a manual reload when resolved"""
    id: str
    title: str = 'Reload playlist'
    poster_url: str = DEFAULT_POSTER_URL
    background_url: str = DEFAULT_BACKGROUND_URL

    def to_meta(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': ENTRY_TYPE,
            'name': self.title,
            'poster': self.poster_url,
            'background': self.background_url,
            'description': 'Fetch the playlist sources again',
        }


@dataclass(frozen=True)
class SourceResult:
    """Outcome of fetching one source during a refresh"""
    url: str
    source_index: int
    ok: bool
    entry_count: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class Snapshot:
    """Timestamped, immutable set of entries plus their id index

    Always built through ``build()`` so the index matches the entries.
    """
    fetched_at: float
    entries: Tuple[Entry, ...]
    index: Mapping[str, Entry] = field(compare=False, hash=False)
    sources: Tuple[SourceResult, ...] = ()

    @classmethod
    def build(cls, entries, fetched_at: float, sources=()) -> 'Snapshot':
        entries = tuple(entries)
        index = {}
        for entry in entries:
            if entry.id in index:
                raise ValueError(f"Duplicate entry id in snapshot: {entry.id}")
            index[entry.id] = entry
        return cls(
            fetched_at=fetched_at,
            entries=entries,
            index=MappingProxyType(index),
            sources=tuple(sources),
        )

    @classmethod
    def empty(cls) -> 'Snapshot':
        return cls.build((), fetched_at=0.0)

    def get(self, entry_id: str) -> Optional[Entry]:
        return self.index.get(entry_id)


@dataclass(frozen=True)
class ResolvedStream:
    """A catalog id resolved to something playable"""
    entry_id: str
    url: str
    title: str

    def to_stream(self) -> Dict[str, str]:
        return {'url': self.url, 'title': self.title}


@dataclass(frozen=True)
class RefreshCompleted:
    """Returned instead of a stream when the reload pseudo-entry is resolved"""
    entry_count: int
    fetched_at: float

    @property
    def title(self) -> str:
        return f"Playlist reloaded ({self.entry_count} items)"


@dataclass(frozen=True)
class NotFound:
    """Lookup result for an id that is not in the current snapshot"""
    entry_id: str

    def __bool__(self):
        return False
