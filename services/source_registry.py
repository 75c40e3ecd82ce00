#!/usr/bin/env python3
"""
Playlist source list
Ordered URLs the aggregator fetches; changing it never triggers a refresh
"""

import logging
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse


class SourceListError(ValueError):
    """Invalid change requested on the source list"""


class InvalidSourceError(SourceListError):
    """URL rejected by validate_source_url()"""


class SourceIndexError(SourceListError):
    """No source at the requested position"""


SUPPORTED_SCHEMES = ('http', 'https')


def validate_source_url(url: str) -> Dict[str, Optional[str]]:
    """
    Check that a URL can be used as a playlist source

    Args:
        url: Playlist URL string

    Returns:
        dict with keys:
            - url: Normalized (trimmed) URL or None
            - valid: Boolean indicating if URL is valid
            - error: Error message if invalid
    """
    if not url or not isinstance(url, str) or not url.strip():
        return {'url': None, 'valid': False, 'error': 'Invalid URL provided'}

    url = url.strip()
    parsed = urlparse(url)

    if parsed.scheme.lower() not in SUPPORTED_SCHEMES:
        return {
            'url': url,
            'valid': False,
            'error': f"Unsupported URL scheme '{parsed.scheme}'. Only http and https playlists are supported."
        }

    if not parsed.netloc:
        return {'url': url, 'valid': False, 'error': 'URL has no host'}

    return {'url': url, 'valid': True, 'error': None}


class SourceRegistry:
    """Ordered, in-memory list of playlist source URLs"""

    def __init__(self, urls: Iterable[str] = ()):
        self.logger = logging.getLogger('vodarr.sources')
        self._urls: List[str] = []
        for url in urls:
            self.add(url)

    def list(self) -> List[str]:
        """Copy of the current source URLs in order"""
        return list(self._urls)

    def add(self, url: str) -> str:
        """
        Append a source

        Returns:
            The normalized URL that was added

        Raises:
            InvalidSourceError: URL is malformed or already configured
        """
        result = validate_source_url(url)
        if not result['valid']:
            raise InvalidSourceError(result['error'])

        url = result['url']
        if url in self._urls:
            raise InvalidSourceError(f"Source already configured: {url}")

        # Swap in a new list so readers iterating the old one are unaffected
        self._urls = self._urls + [url]
        self.logger.info(f"Added playlist source #{len(self._urls)}: {url}")
        return url

    def remove(self, index: int) -> str:
        """
        Remove the source at a 0-based position

        Returns:
            The URL that was removed

        Raises:
            SourceIndexError: index is out of range
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._urls):
            raise SourceIndexError(f"No playlist source at index {index} ({len(self._urls)} configured)")

        removed = self._urls[index]
        self._urls = self._urls[:index] + self._urls[index + 1:]
        self.logger.info(f"Removed playlist source: {removed}")
        return removed

    def __len__(self):
        return len(self._urls)

    def __iter__(self):
        return iter(list(self._urls))
