import logging
from pathlib import Path

from pydantic import BaseModel

from phonecrawl.exceptions.custom import (
    CSVError,
    EmptyCSVError,
    InvalidCSVHeaderError,
    InvalidCSVLinesError,
    InvalidURLError,
)
from phonecrawl.mappers.url_normalizer import parse_url

logger = logging.getLogger(__name__)

DOMAINS_HEADER = "domain"

# Don't flood the output when most of a file is broken
MAX_INVALID_CSV_LINES = 20


class InvalidCSVLine(BaseModel):
    index: int
    line: str
    reason: str


def parse_domains_csv(text: str) -> list[str]:
    """Parse a single-column "domain" CSV into normalized URLs.

    Blank lines are skipped. Lines that fail URL normalization are collected
    (up to MAX_INVALID_CSV_LINES) and raised together as InvalidCSVLinesError,
    which also carries the lines that did parse.
    """
    results: list[str] = []
    invalid: list[InvalidCSVLine] = []

    for index, raw_line in enumerate(text.splitlines()):
        line = raw_line.strip()

        if index == 0:
            if line != DOMAINS_HEADER:
                raise InvalidCSVHeaderError(f"csv file has invalid header: expected '{DOMAINS_HEADER}'")
            continue

        if not line:
            continue

        try:
            results.append(parse_url(line))
        except InvalidURLError as exc:
            if len(invalid) < MAX_INVALID_CSV_LINES:
                invalid.append(InvalidCSVLine(index=index, line=line, reason=exc.message))

    if invalid:
        raise InvalidCSVLinesError(invalid, results)

    if not results:
        raise EmptyCSVError()

    return results


def load_domains_from_file(path: str | Path) -> list[str]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CSVError(f"cannot read file: {exc.strerror}", path=str(path)) from exc

    try:
        domains = parse_domains_csv(text)
    except InvalidCSVLinesError as exc:
        raise InvalidCSVLinesError(exc.lines, exc.results, path=str(path)) from exc
    except EmptyCSVError as exc:
        raise EmptyCSVError(path=str(path)) from exc
    except InvalidCSVHeaderError as exc:
        raise InvalidCSVHeaderError(exc.message, path=str(path)) from exc

    logger.info("Loaded %d domains from %s", len(domains), path)
    return domains
