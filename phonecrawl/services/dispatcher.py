import asyncio
import inspect
import logging
import os
from collections.abc import Awaitable, Callable
from typing import Any

from phonecrawl.exceptions.custom import CrawlError
from phonecrawl.mappers.url_normalizer import parse_url
from phonecrawl.schemas.crawl import CheckResult, CrawlResult, DomainJob
from phonecrawl.services.crawler import DomainCrawler
from phonecrawl.services.fetcher import PageFetcher

logger = logging.getLogger(__name__)

ResultHandler = Callable[[Any], Awaitable[None] | None]

_DONE = object()


def default_worker_count() -> int:
    return 20 * (os.cpu_count() or 1)


async def _call_handler(handle_result: ResultHandler | None, result: Any) -> None:
    if handle_result is None:
        return
    outcome = handle_result(result)
    if inspect.isawaitable(outcome):
        await outcome


async def run_pool(
    urls: list[str],
    workers: int,
    job_fn: Callable[[DomainJob], Awaitable[Any]],
    handle_result: ResultHandler | None = None,
) -> int:
    """Run `job_fn` over `urls` with a fixed number of worker tasks.

    Every job is queued up front; each worker takes one job at a time and
    pushes exactly one result. `handle_result` sees results in completion
    order. `job_fn` must not raise. Returns the number of results handled.
    """
    if workers <= 0:
        workers = 1

    jobs: asyncio.Queue[DomainJob] = asyncio.Queue(maxsize=len(urls))
    # One extra slot for the end-of-results marker
    results: asyncio.Queue = asyncio.Queue(maxsize=len(urls) + 1)

    for ordinal, url in enumerate(urls):
        jobs.put_nowait(DomainJob(ordinal=ordinal, url=url))

    async def worker() -> None:
        while True:
            try:
                job = jobs.get_nowait()
            except asyncio.QueueEmpty:
                return
            results.put_nowait(await job_fn(job))

    async def supervise(tasks: list[asyncio.Task]) -> None:
        try:
            await asyncio.gather(*tasks)
        finally:
            results.put_nowait(_DONE)

    tasks = [asyncio.create_task(worker()) for _ in range(workers)]
    supervisor = asyncio.create_task(supervise(tasks))

    handled = 0
    try:
        while (result := await results.get()) is not _DONE:
            handled += 1
            await _call_handler(handle_result, result)
    finally:
        await supervisor

    return handled


async def scrape_domains(
    urls: list[str],
    workers: int,
    crawler: DomainCrawler,
    handle_result: ResultHandler | None = None,
) -> None:
    """Crawl every domain, passing each CrawlResult to `handle_result`.

    Results arrive in completion order, not input order. A failing domain
    yields a result with `error` set and never affects the others.
    """

    async def scrape_job(job: DomainJob) -> CrawlResult:
        try:
            info = await crawler.crawl(job.url)
        except CrawlError as exc:
            logger.warning("Failed request to domain %s: %s", job.url, exc.message)
            return CrawlResult(url=job.url, error=exc)
        except Exception as exc:
            logger.exception("Unexpected error crawling %s", job.url)
            return CrawlResult(url=job.url, error=CrawlError(str(exc), url=job.url))
        return CrawlResult(url=job.url, info=info)

    handled = await run_pool(urls, workers, scrape_job, handle_result)
    logger.info("Scraped %d domains", handled)


async def check_urls(
    urls: list[str],
    workers: int,
    fetcher: PageFetcher,
    handle_result: ResultHandler | None = None,
) -> list[CheckResult]:
    """HEAD-check every URL. The returned list follows input order."""
    slots: list[CheckResult | None] = [None] * len(urls)

    async def check_job(job: DomainJob) -> CheckResult:
        try:
            status = await fetcher.check(parse_url(job.url))
        except CrawlError as exc:
            logger.warning("Failed request to domain %s: %s", job.url, exc.message)
            return CheckResult(ordinal=job.ordinal, url=job.url, error=exc)
        return CheckResult(ordinal=job.ordinal, url=job.url, status=status)

    async def collect(result: CheckResult) -> None:
        slots[result.ordinal] = result
        await _call_handler(handle_result, result)

    await run_pool(urls, workers, check_job, collect)
    return slots


def filter_successful_domains(results: list[CheckResult]) -> list[str]:
    """URLs of the domains that answered HEAD with 200."""
    return [r.url for r in results if r.status == 200]
