import logging
from collections.abc import Callable

from phonecrawl.mappers.report_builder import ScrapeReport, build_check_response
from phonecrawl.schemas.crawl import CrawlResult
from phonecrawl.schemas.responses import CheckResponse, DomainResult, ScrapeResponse
from phonecrawl.services.crawler import DomainCrawler
from phonecrawl.services.dispatcher import (
    check_urls,
    default_worker_count,
    scrape_domains,
)
from phonecrawl.services.fetcher import PageFetcher

logger = logging.getLogger(__name__)


class ScrapeService:
    def __init__(
        self,
        crawler: DomainCrawler,
        fetcher: PageFetcher,
        workers: int = 0,
    ):
        self._crawler = crawler
        self._fetcher = fetcher
        self._workers = workers or default_worker_count()

    @property
    def crawler(self) -> DomainCrawler:
        return self._crawler

    def _worker_count(self, workers: int | None) -> int:
        # An explicit count, 0 included, is passed on for the pool to clamp
        return self._workers if workers is None else workers

    async def run(
        self,
        domains: list[str],
        workers: int | None = None,
        on_result: Callable[[DomainResult], None] | None = None,
    ) -> ScrapeResponse:
        """Crawl `domains` and summarize the results in completion order."""
        report = ScrapeReport()

        def handle(result: CrawlResult) -> None:
            domain_result = report.add(result)
            if on_result is not None:
                on_result(domain_result)

        await scrape_domains(domains, self._worker_count(workers), self._crawler, handle)

        response = report.build()
        logger.info(
            "Collected phone numbers for %d of %d domain(s), %d failed",
            response.with_phone_numbers, response.total_domains, response.failed,
        )
        return response

    async def check(self, domains: list[str], workers: int | None = None) -> CheckResponse:
        """HEAD-check `domains`; results keep input order."""
        results = await check_urls(domains, self._worker_count(workers), self._fetcher)
        return build_check_response(results)
