from typing import Annotated

from fastapi import Depends, Request

from phonecrawl.jobs import JobStore
from phonecrawl.services.scrape import ScrapeService


def get_scrape_service(request: Request) -> ScrapeService:
    return request.app.state.scrape_service


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


ScrapeDep = Annotated[ScrapeService, Depends(get_scrape_service)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
