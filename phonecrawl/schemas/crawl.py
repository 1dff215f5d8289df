from pydantic import BaseModel, ConfigDict

from phonecrawl.exceptions.custom import CrawlError
from phonecrawl.schemas.phone import PhoneCandidate, RejectedNumber


class DomainJob(BaseModel):
    ordinal: int
    url: str


class FetchedPage(BaseModel):
    url: str  # final URL, after redirects
    status_code: int
    html: str = ""  # empty for non-HTML or oversized responses


class PageContent(BaseModel):
    phone_numbers: list[PhoneCandidate] = []
    nav_links: list[str] = []  # raw hrefs, document order


class CrawlState(BaseModel):
    phone_numbers: list[PhoneCandidate] = []
    visited_links: list[str] = []  # fetch order
    discovered_links: list[str] = []  # not visited yet
    seen_links: set[str] = set()
    rejected: list[RejectedNumber] = []

    def enough_info(self) -> bool:
        return len(self.phone_numbers) > 0

    def exceeded_page_limit(self, page_budget: int) -> bool:
        return len(self.visited_links) >= page_budget


class CrawlResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    url: str
    info: CrawlState = CrawlState()
    error: CrawlError | None = None


class CheckResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    ordinal: int
    url: str
    status: int | None = None
    error: CrawlError | None = None
