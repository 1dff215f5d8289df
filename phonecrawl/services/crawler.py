import logging
from urllib.parse import urldefrag, urljoin, urlparse, urlsplit

from phonecrawl.exceptions.custom import CrawlError
from phonecrawl.mappers.phone_extractor import extract_page
from phonecrawl.mappers.phone_resolver import sanitize_phone_numbers
from phonecrawl.mappers.url_normalizer import allowed_hosts, is_allowed, parse_url
from phonecrawl.schemas.crawl import CrawlState, FetchedPage, PageContent
from phonecrawl.services.fetcher import PageFetcher

logger = logging.getLogger(__name__)

# Maximum number of pages fetched for each domain
MAX_PAGES_PER_DOMAIN = 10

# Nav links worth visiting first, in priority order
_PRIORITY_NEEDLES = ("contact", "about")


def _link_target(link: str) -> str:
    parts = urlsplit(link)
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


def splice_link(links: list[str], needle: str) -> tuple[list[str], str | None]:
    """Return (remaining, link) for the first link whose path or query contains `needle`."""
    for index, link in enumerate(links):
        if needle in _link_target(link):
            return links[:index] + links[index + 1:], link
    return links, None


def select_next_link(links: list[str]) -> tuple[list[str], str | None]:
    """Pick the next link to visit: a contact page, an about page, else FIFO."""
    for needle in _PRIORITY_NEEDLES:
        remaining, found = splice_link(links, needle)
        if found is not None:
            return remaining, found

    if links:
        return links[1:], links[0]
    return links, None


def canonical_link(url: str) -> str:
    url, _ = urldefrag(url)
    parsed = urlparse(url)
    if not parsed.path:
        parsed = parsed._replace(path="/")
    return parsed.geturl()


class DomainCrawler:
    """Crawl one domain at a time looking for phone numbers.

    Starting at the domain root, each fetched page is scanned for numbers and
    <nav> links. The crawl stops as soon as a number is found, the page budget
    is spent, or no unvisited links are left. Numbers are then validated and
    deduplicated.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        page_budget: int = MAX_PAGES_PER_DOMAIN,
        validate_numbers: bool = True,
    ):
        self._fetcher = fetcher
        self._page_budget = max(page_budget, 1)
        self._validate_numbers = validate_numbers

    async def crawl(self, domain: str) -> CrawlState:
        root = canonical_link(parse_url(domain))
        hosts = allowed_hosts(root)
        state = CrawlState(seen_links={root})

        # The root page must load; its failure fails the whole domain
        page = await self._fetcher.fetch(root, hosts)
        self._collect(state, root, page, hosts)

        while (next_link := self._decide(state)) is not None:
            try:
                page = await self._fetcher.fetch(next_link, hosts)
            except CrawlError as exc:
                logger.warning("Failed to fetch %s: %s", next_link, exc.message)
                state.visited_links.append(next_link)
                continue
            self._collect(state, next_link, page, hosts)

        state.phone_numbers, state.rejected = sanitize_phone_numbers(
            state.phone_numbers, validate=self._validate_numbers,
        )
        logger.info(
            "Crawled %s: %d pages, %d phone numbers (%d rejected)",
            root, len(state.visited_links), len(state.phone_numbers), len(state.rejected),
        )
        return state

    def _collect(self, state: CrawlState, url: str, page: FetchedPage, hosts: list[str]) -> None:
        content = extract_page(page.html) if page.html else PageContent()
        state.phone_numbers.extend(content.phone_numbers)

        # A redirected page must not be fetched again under its final URL
        state.seen_links.add(canonical_link(page.url))

        for href in content.nav_links:
            link = canonical_link(urljoin(page.url, href.strip()))
            if link in state.seen_links or not is_allowed(link, hosts):
                continue
            state.seen_links.add(link)
            state.discovered_links.append(link)

        state.visited_links.append(url)

    def _decide(self, state: CrawlState) -> str | None:
        if state.enough_info() or state.exceeded_page_limit(self._page_budget):
            return None
        state.discovered_links, next_link = select_next_link(state.discovered_links)
        return next_link
