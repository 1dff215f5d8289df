import asyncio
import logging
import random

import httpx

from phonecrawl.exceptions.custom import ForbiddenHostError, InvalidURLError, NetworkFailureError
from phonecrawl.mappers.url_normalizer import is_allowed
from phonecrawl.schemas.crawl import FetchedPage

logger = logging.getLogger(__name__)

MAX_BODY = 2 * 1024 * 1024  # 2 MB
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_DELAY = 5.0
DEFAULT_USER_AGENT = "phonecrawl/1.0"


def _describe(exc: httpx.HTTPError) -> str:
    return str(exc) or type(exc).__name__


class PageFetcher:
    """GET pages for one crawl at a time, with a random pre-request delay.

    Every request is restricted to a set of allowed hosts; a redirect that
    leaves them fails the fetch.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT,
        max_delay: float = DEFAULT_MAX_DELAY,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._client = client
        self._timeout = timeout
        self._max_delay = max_delay
        self._user_agent = user_agent

    async def _rate_limit(self) -> None:
        # Random delay to lower the chance of getting blocked
        if self._max_delay > 0:
            await asyncio.sleep(random.uniform(0, self._max_delay))

    async def fetch(self, url: str, hosts: list[str]) -> FetchedPage:
        if not is_allowed(url, hosts):
            raise ForbiddenHostError(url, hosts)

        await self._rate_limit()
        logger.info("Visiting %s", url)

        try:
            resp = await self._client.get(
                url,
                follow_redirects=True,
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
            )
        except httpx.InvalidURL as exc:
            raise InvalidURLError(f"invalid URL: {exc}", url=url) from exc
        except httpx.HTTPError as exc:
            raise NetworkFailureError(_describe(exc), url=url) from exc

        for hop in (*resp.history, resp):
            if not is_allowed(str(hop.url), hosts):
                raise ForbiddenHostError(str(hop.url), hosts)

        if not resp.is_success:
            raise NetworkFailureError(
                f"HTTP {resp.status_code} for {url}", url=url, status_code=resp.status_code,
            )

        page = FetchedPage(url=str(resp.url), status_code=resp.status_code)

        content_type = resp.headers.get("content-type", "")
        if "html" not in content_type:
            logger.debug("Skipping non-HTML %s (content-type: %s)", url, content_type)
            return page

        if len(resp.content) > MAX_BODY:
            logger.debug("Skipping oversized page %s (%d bytes)", url, len(resp.content))
            return page

        page.html = resp.text
        return page

    async def check(self, url: str) -> int:
        """Send a HEAD request and return the response status code."""
        try:
            resp = await self._client.head(
                url,
                follow_redirects=True,
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
            )
        except httpx.InvalidURL as exc:
            raise InvalidURLError(f"invalid URL: {exc}", url=url) from exc
        except httpx.HTTPError as exc:
            raise NetworkFailureError(_describe(exc), url=url) from exc

        logger.info("HEAD %s - %d", url, resp.status_code)
        return resp.status_code
