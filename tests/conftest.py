import httpx
import pytest
from httpx import ASGITransport

from phonecrawl.services.crawler import DomainCrawler
from phonecrawl.services.fetcher import PageFetcher


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("MAX_REQUEST_DELAY", "0")
    monkeypatch.setenv("WORKERS", "4")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")


@pytest.fixture
async def http_client():
    async with httpx.AsyncClient() as c:
        yield c


@pytest.fixture
def fetcher(http_client):
    return PageFetcher(http_client, max_delay=0)


@pytest.fixture
def crawler(fetcher):
    return DomainCrawler(fetcher)


@pytest.fixture
async def client(mock_env):
    from phonecrawl.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c

