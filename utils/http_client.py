#!/usr/bin/env python3
"""
Common HTTP Client Utilities
Shared HTTP functionality for playlist source clients
"""

import aiohttp
import asyncio
import logging
from typing import Dict, Optional


class SourceFetchError(Exception):
    """A playlist source could not be fetched (network, timeout or bad status)"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class HTTPClientUtils:
    """Common HTTP utilities for source clients"""

    @staticmethod
    async def fetch_text(
        session: aiohttp.ClientSession,
        url: str,
        timeout: float = 10.0,
        headers: Dict[str, str] = None,
        logger: logging.Logger = None
    ) -> str:
        """
        Fetch a text document with a bounded timeout

        No retries are made; a failed source is simply skipped until the
        next refresh.

        Args:
            session: aiohttp session
            url: Document URL
            timeout: Total timeout for this request in seconds
            headers: Request headers
            logger: Logger instance

        Returns:
            Response body decoded as text

        Raises:
            SourceFetchError: on timeout, connection error or non-2xx status
        """
        try:
            client_timeout = aiohttp.ClientTimeout(total=timeout)
            async with session.get(url, headers=headers, timeout=client_timeout) as response:
                if not 200 <= response.status < 300:
                    raise SourceFetchError(url, f"HTTP {response.status}")

                text = await response.text(errors='replace')
                if logger:
                    logger.debug(f"Fetched {url} (status {response.status}, {len(text)} chars)")
                return text

        except asyncio.TimeoutError:
            raise SourceFetchError(url, f"timed out after {timeout:.0f}s")
        except aiohttp.ClientError as e:
            raise SourceFetchError(url, str(e) or e.__class__.__name__)

    @staticmethod
    def create_user_agent(user_agent: str, contact: str = None) -> str:
        """Create user agent string"""
        if contact:
            return f'{user_agent} ({contact})'
        return user_agent

    @staticmethod
    def create_headers(user_agent: Optional[str] = None, **kwargs) -> Dict[str, str]:
        """Create common headers for playlist requests"""
        headers = {'Accept': 'audio/x-mpegurl, application/x-mpegurl, text/plain, */*'}

        if user_agent:
            headers['User-Agent'] = user_agent

        headers.update(kwargs)
        return headers
