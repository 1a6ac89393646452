import asyncio
import httpx
import pytest

from core.exceptions import FetchError
from core.utils.http import MolyDownloader, RetryPolicy

def download(downloader, url, method="GET"):
    return asyncio.run(downloader.download_url(url, method))

def test_download_resolves_relative_url(fake_moly, downloader):
    fake_moly.add_page('/konyvek/solaris', '<html>Solaris</html>')

    assert download(downloader, '/konyvek/solaris') == '<html>Solaris</html>'
    assert fake_moly.requests == ['/konyvek/solaris']

def test_retryable_status_is_retried(fake_moly, downloader):
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.fail_with('/lista/1', 500, 429)

    assert download(downloader, '/lista/1') == 'ok'
    assert len(fake_moly.requests) == 3

def test_retries_run_out(fake_moly, downloader):
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.fail_with('/lista/1', 503, 503, 503)

    with pytest.raises(FetchError) as exc_info:
        download(downloader, '/lista/1')

    # First attempt plus two retries
    assert len(fake_moly.requests) == 3
    assert exc_info.value.status_code == 503
    assert exc_info.value.url == 'https://moly.hu/lista/1'
    assert exc_info.value.to_dict()['code'] == 'FETCH_ERROR'

def test_not_found_is_retried_then_fails(fake_moly, downloader):
    with pytest.raises(FetchError) as exc_info:
        download(downloader, '/konyvek/nincs')

    assert len(fake_moly.requests) == 3
    assert exc_info.value.status_code == 404

@pytest.mark.parametrize('status_code', [301, 430, 451])
def test_non_retryable_status_fails_at_once(fake_moly, downloader, status_code):
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.fail_with('/lista/1', status_code)

    with pytest.raises(FetchError) as exc_info:
        download(downloader, '/lista/1')

    assert fake_moly.requests == ['/lista/1']
    assert exc_info.value.status_code == status_code

def test_method_outside_policy_is_not_retried(fake_moly, downloader):
    fake_moly.fail_with('/lista/1', 500)

    with pytest.raises(FetchError):
        download(downloader, '/lista/1', method='HEAD')

    assert fake_moly.requests == ['/lista/1']

def test_network_error_is_retried(fake_moly, downloader):
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.connect_errors['/lista/1'] = 2

    assert download(downloader, '/lista/1') == 'ok'
    assert len(fake_moly.requests) == 3

def test_network_error_retries_run_out(fake_moly, downloader):
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.connect_errors['/lista/1'] = 10

    with pytest.raises(FetchError) as exc_info:
        download(downloader, '/lista/1')

    assert len(fake_moly.requests) == 3
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

def test_network_errors_and_statuses_share_retries(fake_moly, downloader):
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.connect_errors['/lista/1'] = 1
    fake_moly.fail_with('/lista/1', 503, 503)

    with pytest.raises(FetchError) as exc_info:
        download(downloader, '/lista/1')

    assert len(fake_moly.requests) == 3
    assert exc_info.value.status_code == 503

def test_default_policy_caps_mixed_failures(fake_moly):
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.connect_errors['/lista/1'] = 5
    fake_moly.fail_with('/lista/1', 503, 503, 503, 503, 503)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake_moly.handler)) as client:
            downloader = MolyDownloader(retry_policy=RetryPolicy(delay=0), client=client)
            return await downloader.download_url('/lista/1')

    with pytest.raises(FetchError) as exc_info:
        asyncio.run(run())

    # First attempt plus five retries
    assert len(fake_moly.requests) == 6
    assert exc_info.value.status_code == 503

def test_retry_waits_between_attempts(fake_moly, monkeypatch):
    sleeps = []

    async def fake_sleep(delay):
        sleeps.append(delay)

    monkeypatch.setattr('core.utils.http.asyncio.sleep', fake_sleep)
    fake_moly.add_page('/lista/1', 'ok')
    fake_moly.fail_with('/lista/1', 500, 500)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake_moly.handler)) as client:
            downloader = MolyDownloader(retry_policy=RetryPolicy(delay=0.1), client=client)
            return await downloader.download_url('/lista/1')

    assert asyncio.run(run()) == 'ok'
    assert sleeps == [0.1, 0.1]

def test_concurrent_requests_are_bounded(retry_policy):
    in_flight = 0
    max_in_flight = 0

    async def handler(request):
        nonlocal in_flight, max_in_flight
        in_flight += 1
        max_in_flight = max(max_in_flight, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return httpx.Response(200, text='ok')

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            downloader = MolyDownloader(retry_policy=retry_policy, max_concurrency=2, client=client)
            return await asyncio.gather(*(downloader.download_url(f'/konyvek/{i}') for i in range(6)))

    assert asyncio.run(run()) == ['ok'] * 6
    assert max_in_flight == 2

def test_absolute_url():
    downloader = MolyDownloader(base_url='https://moly.hu/', client=httpx.AsyncClient())

    assert downloader.absolute_url('/konyvek/solaris') == 'https://moly.hu/konyvek/solaris'
    assert downloader.absolute_url('https://moly.hu/polc/1?page=2') == 'https://moly.hu/polc/1?page=2'

def test_owned_client_is_closed():
    async def run():
        async with MolyDownloader() as downloader:
            client = downloader.client
        return client

    assert asyncio.run(run()).is_closed

def test_shared_client_is_left_open():
    client = httpx.AsyncClient()

    async def run():
        async with MolyDownloader(client=client):
            pass

    asyncio.run(run())
    assert not client.is_closed

@pytest.mark.parametrize('status_code, expected', [
    (100, True), (199, True), (200, False), (301, False),
    (400, True), (404, True), (429, True), (430, False),
    (499, False), (500, True), (599, True),
])
def test_retry_policy_status_ranges(status_code, expected):
    assert RetryPolicy().should_retry_status(status_code) is expected

def test_retry_policy_methods():
    policy = RetryPolicy()
    assert policy.should_retry_method('get')
    assert policy.should_retry_method('PATCH')
    assert not policy.should_retry_method('HEAD')
