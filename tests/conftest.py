"""
Shared fixtures for the Vodarr test suite
"""

import asyncio

import pytest

from utils.http_client import SourceFetchError


MOVIES_URL = 'http://playlists.test/movies.m3u'
SHOWS_URL = 'http://playlists.test/shows.m3u'
BROKEN_URL = 'http://playlists.test/broken.m3u'

MOVIES_M3U = """#EXTM3U
#EXTINF:-1 tvg-name="Big Buck Bunny" tvg-logo="http://img.test/bbb.png" group-title="Animation",bbb
http://media.test/bbb.mp4
#EXTINF:-1 group-title="Documentary",Planet Earth
http://media.test/earth.mp4
"""

SHOWS_M3U = """#EXTM3U
#EXTINF:-1 group-title="Animation",Pilot
http://media.test/pilot.mp4
"""


class FakeFetcher:
    """In-memory TextFetcher that records every fetch"""

    def __init__(self, documents=None):
        self.documents = dict(documents or {})
        self.calls = []
        self.closed = False

    async def fetch_text(self, url, timeout):
        self.calls.append(url)
        document = self.documents.get(url)
        if isinstance(document, BaseException):
            raise document
        if document is None:
            raise SourceFetchError(url, 'HTTP 404')
        return document

    def fail(self, url, reason='connection refused'):
        self.documents[url] = SourceFetchError(url, reason)

    async def close(self):
        self.closed = True


class BlockingFetcher(FakeFetcher):
    """FakeFetcher that holds every fetch until release() is called"""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.started = asyncio.Event()
        self._release = asyncio.Event()

    async def fetch_text(self, url, timeout):
        self.started.set()
        await self._release.wait()
        return await super().fetch_text(url, timeout)

    def release(self):
        self._release.set()


class FakeClock:
    """Manually advanced replacement for time.time"""

    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fetcher():
    return FakeFetcher({MOVIES_URL: MOVIES_M3U, SHOWS_URL: SHOWS_M3U})


@pytest.fixture
def clock():
    return FakeClock()
