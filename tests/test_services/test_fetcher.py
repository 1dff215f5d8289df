"""Tests for PageFetcher."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx
from httpx import Response

from phonecrawl.exceptions.custom import ForbiddenHostError, NetworkFailureError
from phonecrawl.mappers.url_normalizer import allowed_hosts
from phonecrawl.services.fetcher import MAX_BODY, PageFetcher

HOSTS = allowed_hosts("https://example.com")


def _html(body: str) -> str:
    return f"<html><body>{body}</body></html>"


@respx.mock
async def test_fetch_returns_html(fetcher):
    respx.get("https://example.com/").mock(
        return_value=Response(
            200,
            html=_html("<p>Hello</p>"),
            headers={"content-type": "text/html"},
        )
    )
    page = await fetcher.fetch("https://example.com/", HOSTS)
    assert page.status_code == 200
    assert "Hello" in page.html
    assert page.url == "https://example.com/"


@respx.mock
async def test_fetch_sends_user_agent(http_client):
    route = respx.get("https://example.com/").mock(
        return_value=Response(200, html=_html(""), headers={"content-type": "text/html"})
    )
    fetcher = PageFetcher(http_client, max_delay=0, user_agent="test-agent/2.0")
    await fetcher.fetch("https://example.com/", HOSTS)
    assert route.calls.last.request.headers["User-Agent"] == "test-agent/2.0"


@respx.mock
async def test_fetch_non_html_has_empty_body(fetcher):
    respx.get("https://example.com/logo.png").mock(
        return_value=Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})
    )
    page = await fetcher.fetch("https://example.com/logo.png", HOSTS)
    assert page.html == ""


@respx.mock
async def test_fetch_oversized_has_empty_body(fetcher):
    respx.get("https://example.com/").mock(
        return_value=Response(
            200,
            content=b"a" * (MAX_BODY + 1),
            headers={"content-type": "text/html"},
        )
    )
    page = await fetcher.fetch("https://example.com/", HOSTS)
    assert page.html == ""


@respx.mock
async def test_fetch_http_error_status(fetcher):
    respx.get("https://example.com/").mock(return_value=Response(404, text="not found"))
    with pytest.raises(NetworkFailureError) as exc_info:
        await fetcher.fetch("https://example.com/", HOSTS)
    assert exc_info.value.status_code == 404


@respx.mock
async def test_fetch_connection_error(fetcher):
    respx.get("https://example.com/").mock(side_effect=httpx.ConnectError("connection refused"))
    with pytest.raises(NetworkFailureError) as exc_info:
        await fetcher.fetch("https://example.com/", HOSTS)
    assert "connection refused" in exc_info.value.message


@respx.mock
async def test_fetch_timeout(fetcher):
    respx.get("https://example.com/").mock(side_effect=httpx.ReadTimeout("timed out"))
    with pytest.raises(NetworkFailureError):
        await fetcher.fetch("https://example.com/", HOSTS)


async def test_fetch_rejects_disallowed_host_without_request(fetcher):
    with respx.mock(assert_all_called=False) as respx_mock:
        route = respx_mock.get("https://other.com/")
        with pytest.raises(ForbiddenHostError):
            await fetcher.fetch("https://other.com/", HOSTS)
    assert not route.called


@respx.mock
async def test_fetch_follows_redirect_to_www(fetcher):
    respx.get("https://example.com/").mock(
        return_value=Response(301, headers={"Location": "https://www.example.com/"})
    )
    respx.get("https://www.example.com/").mock(
        return_value=Response(200, html=_html("<p>Home</p>"), headers={"content-type": "text/html"})
    )
    page = await fetcher.fetch("https://example.com/", HOSTS)
    assert page.url == "https://www.example.com/"
    assert "Home" in page.html


@respx.mock
async def test_fetch_rejects_redirect_off_domain(fetcher):
    respx.get("https://example.com/").mock(
        return_value=Response(302, headers={"Location": "https://parked-domains.net/"})
    )
    respx.get("https://parked-domains.net/").mock(
        return_value=Response(200, html=_html(""), headers={"content-type": "text/html"})
    )
    with pytest.raises(ForbiddenHostError):
        await fetcher.fetch("https://example.com/", HOSTS)


@respx.mock
async def test_fetch_waits_random_delay(http_client):
    respx.get("https://example.com/").mock(
        return_value=Response(200, html=_html(""), headers={"content-type": "text/html"})
    )
    fetcher = PageFetcher(http_client, max_delay=5.0)

    with (
        patch("phonecrawl.services.fetcher.random.uniform", return_value=2.5) as uniform,
        patch("phonecrawl.services.fetcher.asyncio.sleep", new_callable=AsyncMock) as sleep,
    ):
        await fetcher.fetch("https://example.com/", HOSTS)

    uniform.assert_called_once_with(0, 5.0)
    sleep.assert_awaited_once_with(2.5)


@respx.mock
async def test_fetch_without_delay_does_not_sleep(fetcher):
    respx.get("https://example.com/").mock(
        return_value=Response(200, html=_html(""), headers={"content-type": "text/html"})
    )
    with patch("phonecrawl.services.fetcher.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await fetcher.fetch("https://example.com/", HOSTS)
    sleep.assert_not_awaited()


# --- HEAD check ---


@respx.mock
async def test_check_returns_status(fetcher):
    respx.head("https://example.com").mock(return_value=Response(200))
    assert await fetcher.check("https://example.com") == 200


@respx.mock
async def test_check_returns_error_status(fetcher):
    respx.head("https://example.com").mock(return_value=Response(503))
    assert await fetcher.check("https://example.com") == 503


@respx.mock
async def test_check_network_failure(fetcher):
    respx.head("https://example.com").mock(side_effect=httpx.ConnectError("dns failure"))
    with pytest.raises(NetworkFailureError):
        await fetcher.check("https://example.com")
