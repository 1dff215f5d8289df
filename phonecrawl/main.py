from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from phonecrawl.config import Settings, configure_logging
from phonecrawl.exceptions.custom import CSVError, InvalidURLError
from phonecrawl.exceptions.handlers import csv_error_handler, invalid_url_error_handler
from phonecrawl.jobs import JobStore
from phonecrawl.routers.scrape import router as scrape_router
from phonecrawl.services.crawler import DomainCrawler
from phonecrawl.services.fetcher import PageFetcher
from phonecrawl.services.scrape import ScrapeService


def build_scrape_service(client: httpx.AsyncClient, settings: Settings) -> ScrapeService:
    fetcher = PageFetcher(
        client,
        timeout=settings.request_timeout,
        max_delay=settings.max_request_delay,
        user_agent=settings.user_agent,
    )
    crawler = DomainCrawler(
        fetcher,
        page_budget=settings.page_budget,
        validate_numbers=settings.validate_phone_numbers,
    )
    return ScrapeService(crawler, fetcher, workers=settings.workers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    configure_logging(settings.log_level)

    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        app.state.scrape_service = build_scrape_service(client, settings)
        app.state.job_store = JobStore()
        yield


app = FastAPI(title="phonecrawl", lifespan=lifespan)

app.add_exception_handler(InvalidURLError, invalid_url_error_handler)
app.add_exception_handler(CSVError, csv_error_handler)

app.include_router(scrape_router)
