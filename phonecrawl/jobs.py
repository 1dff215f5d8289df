from __future__ import annotations

import uuid
from collections import deque
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel

from phonecrawl.schemas.responses import ScrapeResponse

DEFAULT_MAX_JOBS = 1000


class JobStatus(StrEnum):
    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"


class ScrapeJob(BaseModel):
    job_id: str
    status: JobStatus
    created_at: datetime
    finished_at: datetime | None = None
    domain_count: int = 0
    domains_done: int = 0
    result: ScrapeResponse | None = None
    error: str | None = None

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.completed, JobStatus.failed)


class JobStore:
    """In-memory registry of background scrape jobs.

    Holds at most `max_jobs` entries; once over the limit the jobs that
    finished first are dropped. Pending and running jobs are always kept.
    """

    def __init__(self, max_jobs: int = DEFAULT_MAX_JOBS) -> None:
        self._jobs: dict[str, ScrapeJob] = {}
        self._finished: deque[str] = deque()
        self._max_jobs = max_jobs

    def _prune(self) -> None:
        while len(self._jobs) > self._max_jobs and self._finished:
            self._jobs.pop(self._finished.popleft(), None)

    def _finish(self, job: ScrapeJob, status: JobStatus) -> None:
        job.status = status
        job.finished_at = datetime.now(timezone.utc)
        self._finished.append(job.job_id)

    def create_job(self, domain_count: int = 0) -> ScrapeJob:
        job = ScrapeJob(
            job_id=uuid.uuid4().hex[:12],
            status=JobStatus.pending,
            created_at=datetime.now(timezone.utc),
            domain_count=domain_count,
        )
        self._jobs[job.job_id] = job
        self._prune()
        return job

    def get_job(self, job_id: str) -> ScrapeJob | None:
        return self._jobs.get(job_id)

    def mark_running(self, job_id: str) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.running

    def record_progress(self, job_id: str) -> None:
        """Count one more domain as done for a running job."""
        if job := self._jobs.get(job_id):
            job.domains_done += 1

    def mark_completed(self, job_id: str, result: ScrapeResponse) -> None:
        job = self._jobs.get(job_id)
        if job is None or job.finished:
            return
        job.result = result
        job.domains_done = result.total_domains
        self._finish(job, JobStatus.completed)

    def mark_failed(self, job_id: str, error: str) -> None:
        job = self._jobs.get(job_id)
        if job is None or job.finished:
            return
        job.error = error
        self._finish(job, JobStatus.failed)
