from phonecrawl.schemas.crawl import CheckResult, CrawlResult
from phonecrawl.schemas.responses import (
    CheckResponse,
    DomainResult,
    DomainStatus,
    ScrapeResponse,
)


def to_domain_result(result: CrawlResult) -> DomainResult:
    if result.error is not None:
        return DomainResult(url=result.url, error=result.error.message)

    info = result.info
    return DomainResult(
        url=result.url,
        phone_numbers=info.phone_numbers,
        visited_link_count=len(info.visited_links),
        rejected_numbers=info.rejected,
    )


class ScrapeReport:
    """Accumulates crawl results as they complete."""

    def __init__(self) -> None:
        self._results: list[DomainResult] = []
        self._with_phone_numbers = 0
        self._failed = 0

    def add(self, result: CrawlResult) -> DomainResult:
        domain_result = to_domain_result(result)
        self._results.append(domain_result)
        if domain_result.error is not None:
            self._failed += 1
        elif domain_result.phone_numbers:
            self._with_phone_numbers += 1
        return domain_result

    @property
    def with_phone_numbers(self) -> int:
        return self._with_phone_numbers

    @property
    def failed(self) -> int:
        return self._failed

    def build(self) -> ScrapeResponse:
        return ScrapeResponse(
            total_domains=len(self._results),
            with_phone_numbers=self._with_phone_numbers,
            failed=self._failed,
            results=list(self._results),
        )


def build_check_response(results: list[CheckResult]) -> CheckResponse:
    statuses = [
        DomainStatus(
            url=r.url,
            status=r.status,
            error=r.error.message if r.error is not None else None,
        )
        for r in results
    ]
    return CheckResponse(
        total_domains=len(statuses),
        reachable=sum(1 for s in statuses if s.status == 200),
        results=statuses,
    )
