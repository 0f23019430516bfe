# WholeCell API client unit tests
import base64

import httpx
import pytest
from unittest.mock import AsyncMock

from app.core.exceptions import WholeCellAPIError, WholeCellConfigError
from app.services.wholecell.client import WholeCellClient


def _page(records, page, pages):
    return httpx.Response(200, json={"data": records, "page": page, "pages": pages})


@pytest.fixture
def http_get(mocker):
    """Patch httpx.AsyncClient and return the mocked `get` coroutine."""
    mock_client = mocker.patch("httpx.AsyncClient")
    get = AsyncMock()
    mock_client.return_value.__aenter__.return_value.get = get
    return get


@pytest.fixture
def sleep(mocker):
    return mocker.patch("app.services.wholecell.client.asyncio.sleep", new_callable=AsyncMock)


@pytest.fixture
def client():
    return WholeCellClient(app_key="test_key", app_secret="test_secret")


"""
1. Credentials
"""

@pytest.mark.asyncio
async def test_missing_credentials_fail_before_any_request(http_get):
    client = WholeCellClient(app_key="", app_secret="")

    with pytest.raises(WholeCellConfigError) as exc_info:
        await client.fetch_all()

    assert str(exc_info.value) == (
        "WholeCell API credentials not configured. "
        "Please set WHOLECELL_APP_KEY and WHOLECELL_APP_SECRET."
    )
    assert exc_info.value.missing == ["WHOLECELL_APP_KEY", "WHOLECELL_APP_SECRET"]
    http_get.assert_not_called()


@pytest.mark.asyncio
async def test_missing_secret_only_names_secret():
    client = WholeCellClient(app_key="test_key", app_secret=None)

    with pytest.raises(WholeCellConfigError) as exc_info:
        client.check_credentials()

    assert exc_info.value.missing == ["WHOLECELL_APP_SECRET"]


@pytest.mark.asyncio
async def test_requests_use_basic_auth(client, http_get):
    http_get.return_value = _page([], 1, 1)

    await client.fetch_page(1)

    _, kwargs = http_get.call_args
    expected = base64.b64encode(b"test_key:test_secret").decode()
    assert kwargs["headers"]["Authorization"] == f"Basic {expected}"


"""
2. Pagination and pacing
"""

@pytest.mark.asyncio
async def test_fetch_all_concatenates_pages_in_order(client, http_get, sleep):
    http_get.side_effect = [
        _page([{"id": 1}, {"id": 2}], 1, 3),
        _page([{"id": 3}], 2, 3),
        _page([{"id": 4}], 3, 3),
    ]

    records = await client.fetch_all(status="Needs eBay Draft", updated_since="2024-03-01T00:00:00+00:00")

    assert [r["id"] for r in records] == [1, 2, 3, 4]
    assert http_get.call_count == 3
    pages = [call.kwargs["params"]["page"] for call in http_get.call_args_list]
    assert pages == ["1", "2", "3"]
    first_params = http_get.call_args_list[0].kwargs["params"]
    assert first_params["status"] == "Needs eBay Draft"
    assert first_params["updated_since"] == "2024-03-01T00:00:00+00:00"


@pytest.mark.asyncio
async def test_fetch_all_sleeps_between_pages_only(client, http_get, sleep):
    http_get.side_effect = [_page([{"id": n}], n, 3) for n in (1, 2, 3)]

    await client.fetch_all()

    assert sleep.await_count == 2
    for call in sleep.await_args_list:
        assert call.args[0] >= 0.5


@pytest.mark.asyncio
async def test_single_page_does_not_sleep(client, http_get, sleep):
    http_get.return_value = _page([{"id": 1}], 1, 1)

    records = await client.fetch_all()

    assert len(records) == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_filters_omitted_when_not_given(client, http_get, sleep):
    http_get.return_value = _page([], 1, 1)

    await client.fetch_all()

    params = http_get.call_args.kwargs["params"]
    assert params == {"page": "1"}


def test_request_delay_never_below_rate_limit():
    client = WholeCellClient("k", "s", request_delay=0.1)
    assert client.request_delay == 0.5


"""
3. Failures
"""

@pytest.mark.asyncio
async def test_failure_mid_fetch_aborts_whole_fetch(client, http_get, sleep):
    http_get.side_effect = [
        _page([{"id": 1}], 1, 3),
        httpx.Response(500, text="boom"),
    ]

    with pytest.raises(WholeCellAPIError) as exc_info:
        await client.fetch_all()

    assert exc_info.value.status_code == 500
    assert str(exc_info.value) == "WholeCell API error: 500 - boom"
    assert http_get.call_count == 2


@pytest.mark.asyncio
async def test_network_error_is_wrapped(client, http_get):
    http_get.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(WholeCellAPIError) as exc_info:
        await client.fetch_page(1)

    assert "network error" in str(exc_info.value)
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_timeout_is_wrapped(client, http_get):
    http_get.side_effect = httpx.ReadTimeout("timed out")

    with pytest.raises(WholeCellAPIError) as exc_info:
        await client.fetch_page(1)

    assert "timed out" in str(exc_info.value)


"""
4. Photos
"""

@pytest.mark.asyncio
async def test_fetch_photos_unknown_record_returns_empty(client, http_get):
    http_get.return_value = httpx.Response(404, text="not found")

    assert await client.fetch_photos(42) == []


@pytest.mark.asyncio
async def test_fetch_photos_returns_photo_list(client, http_get):
    photos = [{"id": 1, "url": "https://cdn.example.com/1.jpg"}]
    http_get.return_value = httpx.Response(200, json={"photos": photos})

    assert await client.fetch_photos(42) == photos
    url = http_get.call_args.args[0]
    assert url.endswith("/inventories/42/photos")
