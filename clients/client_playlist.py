#!/usr/bin/env python3
"""
Playlist source client
Fetches raw M3U documents over HTTP
"""

from typing import Protocol

from clients.client_base import BaseSourceClient
from utils.http_client import HTTPClientUtils


DEFAULT_USER_AGENT = 'Vodarr'


class TextFetcher(Protocol):
    """Anything that can fetch a document as text

    Implementations raise ``utils.http_client.SourceFetchError`` on failure;
    any other exception also counts as a failed source.
    """

    async def fetch_text(self, url: str, timeout: float) -> str:
        ...


class PlaylistSourceClient(BaseSourceClient):
    """aiohttp-backed TextFetcher for playlist documents"""
    
    def __init__(self, user_agent: str = DEFAULT_USER_AGENT):
        headers = HTTPClientUtils.create_headers(
            user_agent=HTTPClientUtils.create_user_agent(user_agent)
        )
        super().__init__('playlist_client', headers=headers)
    
    async def fetch_text(self, url: str, timeout: float) -> str:
        """Fetch one playlist document, raising SourceFetchError on failure"""
        session = self._ensure_session()
        self.request_count += 1
        return await HTTPClientUtils.fetch_text(
            session=session,
            url=url,
            timeout=timeout,
            logger=self.logger
        )
