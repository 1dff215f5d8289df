import asyncio
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from phonecrawl.dependencies import JobStoreDep, ScrapeDep
from phonecrawl.jobs import JobStore
from phonecrawl.mappers.domains_csv import parse_domains_csv
from phonecrawl.mappers.url_normalizer import parse_url
from phonecrawl.schemas.responses import (
    CheckResponse,
    JobStatusResponse,
    JobSubmittedResponse,
    ScrapeResponse,
)
from phonecrawl.services.scrape import ScrapeService

logger = logging.getLogger(__name__)

router = APIRouter()


class ScrapeRequest(BaseModel):
    domains: list[str] = Field(min_length=1)
    workers: int | None = None


class CSVScrapeRequest(BaseModel):
    content: str  # "domain" header, one domain per line
    workers: int | None = None


async def _run_scrape(
    job_id: str,
    service: ScrapeService,
    store: JobStore,
    request: ScrapeRequest,
) -> None:
    store.mark_running(job_id)
    try:
        result = await service.run(
            request.domains,
            workers=request.workers,
            on_result=lambda _: store.record_progress(job_id),
        )
        store.mark_completed(job_id, result)
    except Exception as exc:
        logger.exception("Scrape job %s failed", job_id)
        store.mark_failed(job_id, str(exc))


@router.post("/scrape", response_model=JobSubmittedResponse, status_code=202)
async def submit_scrape(
    request: ScrapeRequest,
    service: ScrapeDep,
    store: JobStoreDep,
) -> JobSubmittedResponse:
    job = store.create_job(domain_count=len(request.domains))
    asyncio.create_task(_run_scrape(job.job_id, service, store, request))
    return JobSubmittedResponse(
        job_id=job.job_id,
        status=job.status,
        message=f"Scrape job submitted for {len(request.domains)} domain(s)",
    )


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job_status(job_id: str, store: JobStoreDep) -> JobStatusResponse:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobStatusResponse(**job.model_dump())


@router.post("/scrape/sync", response_model=ScrapeResponse)
async def scrape_sync(request: ScrapeRequest, service: ScrapeDep) -> ScrapeResponse:
    return await service.run(request.domains, workers=request.workers)


@router.post("/scrape/csv", response_model=JobSubmittedResponse, status_code=202)
async def submit_scrape_csv(
    request: CSVScrapeRequest,
    service: ScrapeDep,
    store: JobStoreDep,
) -> JobSubmittedResponse:
    # CSVError propagates to its exception handler (400)
    domains = parse_domains_csv(request.content)
    return await submit_scrape(
        ScrapeRequest(domains=domains, workers=request.workers), service, store,
    )


@router.post("/check", response_model=CheckResponse)
async def check_domains(request: ScrapeRequest, service: ScrapeDep) -> CheckResponse:
    return await service.check(request.domains, workers=request.workers)


@router.get("/normalize")
async def normalize_domain(domain: str) -> dict:
    # InvalidURLError propagates to its exception handler (422)
    return {"domain": domain, "url": parse_url(domain)}
