import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from clients.client_playlist import PlaylistSourceClient
from utils.http_client import SourceFetchError


PLAYLIST_BODY = '#EXTM3U\n#EXTINF:-1,Clip\nhttp://media.test/clip.mp4\n'


async def playlist_handler(request):
    return web.Response(text=PLAYLIST_BODY, content_type='audio/x-mpegurl')


async def missing_handler(request):
    return web.Response(status=404, text='not here')


async def slow_handler(request):
    await asyncio.sleep(1)
    return web.Response(text=PLAYLIST_BODY)


async def agent_handler(request):
    return web.Response(text=request.headers.get('User-Agent', ''))


@pytest.fixture
async def server():
    app = web.Application()
    app.router.add_get('/list.m3u', playlist_handler)
    app.router.add_get('/missing.m3u', missing_handler)
    app.router.add_get('/slow.m3u', slow_handler)
    app.router.add_get('/agent', agent_handler)
    async with TestServer(app) as test_server:
        yield test_server


async def test_fetch_text(server) -> None:
    async with PlaylistSourceClient() as client:
        text = await client.fetch_text(str(server.make_url('/list.m3u')), timeout=5)

    assert text == PLAYLIST_BODY
    assert client.session is None


async def test_fetch_sends_user_agent(server) -> None:
    async with PlaylistSourceClient(user_agent='TestAgent') as client:
        text = await client.fetch_text(str(server.make_url('/agent')), timeout=5)

    assert text == 'TestAgent'


async def test_non_success_status_raises(server) -> None:
    async with PlaylistSourceClient() as client:
        with pytest.raises(SourceFetchError) as excinfo:
            await client.fetch_text(str(server.make_url('/missing.m3u')), timeout=5)

    assert excinfo.value.reason == 'HTTP 404'


async def test_timeout_raises(server) -> None:
    async with PlaylistSourceClient() as client:
        with pytest.raises(SourceFetchError) as excinfo:
            await client.fetch_text(str(server.make_url('/slow.m3u')), timeout=0.1)

    assert 'timed out' in excinfo.value.reason


async def test_connection_error_raises() -> None:
    client = PlaylistSourceClient()
    try:
        with pytest.raises(SourceFetchError):
            await client.fetch_text('http://127.0.0.1:1/list.m3u', timeout=2)
        assert client.get_stats()['total_requests_made'] == 1
    finally:
        await client.close()
