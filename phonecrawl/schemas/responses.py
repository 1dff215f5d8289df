from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from phonecrawl.schemas.phone import PhoneCandidate, RejectedNumber


class DomainResult(BaseModel):
    url: str
    phone_numbers: list[PhoneCandidate] = []
    visited_link_count: int = 0
    rejected_numbers: list[RejectedNumber] = []
    error: str | None = None


class ScrapeResponse(BaseModel):
    total_domains: int
    with_phone_numbers: int
    failed: int
    results: list[DomainResult]  # completion order


class DomainStatus(BaseModel):
    url: str
    status: int | None = None
    error: str | None = None


class CheckResponse(BaseModel):
    total_domains: int
    reachable: int
    results: list[DomainStatus]  # input order


class JobSubmittedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    created_at: datetime
    finished_at: datetime | None = None
    domain_count: int = 0
    domains_done: int = 0
    result: ScrapeResponse | None = None
    error: str | None = None
