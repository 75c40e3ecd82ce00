#!/usr/bin/env python3
"""
M3U Playlist Parser
Turns raw playlist text into ordered, normalized entries

Parsing is best effort: fragments that cannot form a complete entry are
skipped, never raised.
"""

import logging
import re
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, NamedTuple, Tuple

from models.playlist import (
    DEFAULT_BACKGROUND_URL,
    DEFAULT_POSTER_URL,
    Entry,
    ExtinfAttributes,
)

logger = logging.getLogger('vodarr.playlist_parser')

METADATA_MARKER = '#EXTINF:'
DEFAULT_ID_PREFIX = 'vod-'

# key="value" or key='value'; keys follow the tvg-*/group-title convention
_ATTRIBUTE_PATTERN = re.compile(r'([A-Za-z0-9_-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')')
_LINE_SPLIT_PATTERN = re.compile(r'\r?\n')


class LineKind(Enum):
    METADATA = 'metadata'
    OTHER_DIRECTIVE = 'other_directive'
    PLAYABLE = 'playable'
    BLANK = 'blank'


class ClassifiedLine(NamedTuple):
    kind: LineKind
    payload: str = ''


def classify_line(line: str) -> ClassifiedLine:
    """
    Classify one line of a playlist document

    Args:
        line: Raw line text (trimmed here)

    Returns:
        ClassifiedLine; METADATA carries the text after the marker,
        PLAYABLE carries the trimmed line
    """
    line = line.strip()
    if not line:
        return ClassifiedLine(LineKind.BLANK)
    if line.startswith(METADATA_MARKER):
        return ClassifiedLine(LineKind.METADATA, line[len(METADATA_MARKER):])
    if line.startswith('#'):
        return ClassifiedLine(LineKind.OTHER_DIRECTIVE, line)
    return ClassifiedLine(LineKind.PLAYABLE, line)


def extract_attribute_pairs(segment: str) -> Dict[str, str]:
    """Collect key="value" pairs from a directive segment (last duplicate wins)"""
    pairs = {}
    for match in _ATTRIBUTE_PATTERN.finditer(segment):
        key = match.group(1)
        value = match.group(2) if match.group(2) is not None else match.group(3)
        pairs[key] = value
    return pairs


def extract_attributes(remainder: str) -> Tuple[ExtinfAttributes, str]:
    """
    Split an #EXTINF remainder into attributes and display name

    The display name is everything after the last comma, since quoted
    attribute values may contain commas themselves.

    Args:
        remainder: Text after the #EXTINF: marker

    Returns:
        Tuple of (attributes, display name); display name may be empty
    """
    attributes_segment, comma, display_name = remainder.rpartition(',')
    if not comma:
        return ExtinfAttributes(), remainder.strip()

    pairs = extract_attribute_pairs(attributes_segment)
    return ExtinfAttributes.from_pairs(pairs), display_name.strip()


def parse_playlist(text: str, source_index: int = 0, id_prefix: str = DEFAULT_ID_PREFIX,
                   default_poster: str = DEFAULT_POSTER_URL,
                   default_background: str = DEFAULT_BACKGROUND_URL) -> List[Entry]:
    """
    Parse one playlist document into entries

    Args:
        text: Raw document text
        source_index: Position of the source this text came from
        id_prefix: Prefix for generated ids ({prefix}{ordinal})
        default_poster: Poster used when the directive has no tvg-logo
        default_background: Background image for every entry

    Returns:
        Entries in document order, ordinals starting at 1
    """
    entries: List[Entry] = []
    pending = None
    discarded = 0

    if text.startswith('\ufeff'):
        text = text[1:]

    for raw_line in _LINE_SPLIT_PATTERN.split(text):
        classified = classify_line(raw_line)

        if classified.kind is LineKind.METADATA:
            if pending is not None:
                discarded += 1
            pending = extract_attributes(classified.payload)

        elif classified.kind is LineKind.PLAYABLE:
            if pending is None:
                discarded += 1
                continue

            attributes, display_name = pending
            pending = None
            ordinal = len(entries) + 1
            entries.append(Entry(
                id=f"{id_prefix}{ordinal}",
                title=attributes.title_override or display_name or f"Video {ordinal}",
                media_url=classified.payload,
                ordinal=ordinal,
                source_index=source_index,
                group_label=attributes.group,
                poster_url=attributes.poster or default_poster,
                background_url=default_background,
                attributes=MappingProxyType(attributes.as_dict()),
            ))

    if pending is not None:
        discarded += 1

    if discarded:
        logger.debug(f"Skipped {discarded} incomplete playlist fragments (source {source_index})")
    logger.debug(f"Parsed {len(entries)} entries from source {source_index}")
    return entries
