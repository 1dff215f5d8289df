import logging
import re

from bs4 import BeautifulSoup

from phonecrawl.schemas.crawl import PageContent
from phonecrawl.schemas.phone import PhoneCandidate, PhoneConfidence

logger = logging.getLogger(__name__)

HREF_TEL_PREFIX = "tel:"

# North American numbers: optional +country code, optional (area code),
# 3-3-4 digits with space/dot/hyphen separators
_PHONE_RE = re.compile(r"(\+\d{1,2}\s)?[\s.-]*\(?\d{3}\)?[\s.-]*\d{3}[\s.-]*\d{4}")

# "phone" close before a match raises confidence
_PHONE_PREFIX_RE = re.compile(r"\b(phone|telephone)\b", re.IGNORECASE)
_PREFIX_WINDOW = 12


def match_phone_numbers(text: str) -> list[PhoneCandidate]:
    """Scan free text for phone numbers.

    Matches preceded (within 12 characters) by "phone" or "telephone" are
    tagged regex_match_with_prefix, the rest regex_match.
    """
    return match_text_segments([text])


def match_text_segments(segments: list[str]) -> list[PhoneCandidate]:
    """Scan each segment on its own, so a number never spans two segments.

    The prefix window looks back across earlier segments, which are joined
    with a single space.
    """
    text = " ".join(segments)
    candidates: list[PhoneCandidate] = []

    offset = 0
    for segment in segments:
        for match in _PHONE_RE.finditer(segment):
            start = offset + match.start()
            prefix = text[max(0, start - _PREFIX_WINDOW):start]

            confidence = PhoneConfidence.regex_match
            if _PHONE_PREFIX_RE.search(prefix):
                confidence = PhoneConfidence.regex_match_with_prefix

            candidates.append(PhoneCandidate(number=match.group().strip(), confidence=confidence))
        offset += len(segment) + 1

    return candidates


def candidate_from_href_tel(href: str) -> PhoneCandidate | None:
    if not href.startswith(HREF_TEL_PREFIX):
        return None
    number = href[len(HREF_TEL_PREFIX):].strip()
    if not number:
        return None
    return PhoneCandidate(number=number, confidence=PhoneConfidence.href_tel)


def extract_page(html: str) -> PageContent:
    """Extract phone candidates and <nav> link hrefs from an HTML document."""
    soup = BeautifulSoup(html, "html.parser")

    # Inline code must not leak into the visible text
    for tag in soup.find_all(["script", "style"]):
        tag.decompose()

    phones: list[PhoneCandidate] = []

    body = soup.body or soup
    # One text node at a time: digits in sibling elements never merge
    phones.extend(match_text_segments(list(body.strings)))

    for a in soup.find_all("a", href=True):
        candidate = candidate_from_href_tel(a["href"])
        if candidate is not None:
            phones.append(candidate)

    nav_links: list[str] = []
    for nav in soup.find_all("nav"):
        for a in nav.find_all("a", href=True):
            nav_links.append(a["href"])

    logger.debug("Extracted %d phone candidates, %d nav links", len(phones), len(nav_links))
    return PageContent(phone_numbers=phones, nav_links=nav_links)
