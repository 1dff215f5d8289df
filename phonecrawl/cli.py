import argparse
import asyncio
import logging
import sys

import httpx

from phonecrawl.config import Settings, configure_logging
from phonecrawl.exceptions.custom import CrawlError, CSVError, InvalidCSVLinesError
from phonecrawl.main import build_scrape_service
from phonecrawl.mappers.domains_csv import load_domains_from_file
from phonecrawl.schemas.responses import DomainResult

logger = logging.getLogger(__name__)


def _print_domain_result(result: DomainResult) -> None:
    if result.error is not None:
        return
    if result.phone_numbers:
        numbers = ", ".join(p.number for p in result.phone_numbers)
        print(f"{result.url}: {numbers}")


def _print_csv_error(exc: CSVError) -> None:
    print(f"Error: {exc}", file=sys.stderr)
    if isinstance(exc, InvalidCSVLinesError):
        for line in exc.lines:
            print(f"Invalid line {line.index} {line.line!r}: {line.reason}", file=sys.stderr)


async def _scrape(args: argparse.Namespace, settings: Settings) -> int:
    domains = load_domains_from_file(args.csv_path)
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        service = build_scrape_service(client, settings)
        response = await service.run(domains, workers=args.workers, on_result=_print_domain_result)

    if response.with_phone_numbers > 0:
        print(f"Collected phone numbers for {response.with_phone_numbers} domain(s)")
    if response.failed > 0:
        print(f"Failed to scrape {response.failed} domain(s)")
    return 0


async def _check(args: argparse.Namespace, settings: Settings) -> int:
    domains = load_domains_from_file(args.csv_path)
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        service = build_scrape_service(client, settings)
        response = await service.check(domains, workers=args.workers)

    for status in response.results:
        if status.error is not None:
            print(f"Failed request to domain {status.url!r}: {status.error}")
        else:
            print(f"HEAD {status.url!r} - {status.status}")
    return 0


async def _phone(args: argparse.Namespace, settings: Settings) -> int:
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        service = build_scrape_service(client, settings)
        try:
            state = await service.crawler.crawl(args.url)
        except CrawlError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1

    for phone in state.phone_numbers:
        print(f"{phone.number}\t{phone.confidence.label}")
    for rejected in state.rejected:
        logger.debug("Rejected %r: %s", rejected.number, rejected.reason)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phonecrawl", description="Scrape domains for phone numbers")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape = subparsers.add_parser("scrape", aliases=["s"], help="Scrape domains from a CSV file")
    scrape.add_argument("csv_path", help="CSV file to load domain names from")
    scrape.add_argument("--workers", type=int, default=None,
                        help="number of concurrent workers (defaults to 20 * CPU count)")
    scrape.set_defaults(handler=_scrape)

    check = subparsers.add_parser("check", help="Send a HEAD request to each domain in a CSV file")
    check.add_argument("csv_path", help="CSV file to load domain names from")
    check.add_argument("--workers", type=int, default=None)
    check.set_defaults(handler=_check)

    phone = subparsers.add_parser("phone", help="Scrape phone numbers from a single domain")
    phone.add_argument("url")
    phone.set_defaults(handler=_phone)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings.log_level)

    try:
        return asyncio.run(args.handler(args, settings))
    except CSVError as exc:
        _print_csv_error(exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
