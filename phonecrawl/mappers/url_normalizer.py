from urllib.parse import urlparse

from phonecrawl.exceptions.custom import InvalidURLError

_ALLOWED_SCHEMES = ("http", "https")


def parse_url(raw_url: str) -> str:
    """Normalize a domain string into an absolute http(s) URL.

    A bare hostname is treated as https. Raises InvalidURLError for empty
    input, unparsable URLs, a missing host, or any scheme besides http/https.
    """
    raw_url = (raw_url or "").strip()
    if not raw_url:
        raise InvalidURLError("missing URL host", url=raw_url)

    if "://" not in raw_url:
        raw_url = f"https://{raw_url}"

    try:
        parsed = urlparse(raw_url)
        host, port = parsed.hostname, parsed.port
    except ValueError as exc:
        raise InvalidURLError(f"invalid URL: {exc}", url=raw_url) from exc

    if not host:
        raise InvalidURLError(f"missing URL host: {raw_url}", url=raw_url)
    if port == 0:
        raise InvalidURLError(f"invalid URL port: {raw_url}", url=raw_url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise InvalidURLError(f"invalid URL scheme: {parsed.scheme}", url=raw_url)

    return parsed.geturl()


def allowed_hosts(url: str) -> list[str]:
    """Hosts a crawl of `url` may request: the host and its www. variant."""
    host = urlparse(url).netloc.lower()
    hosts = [host]
    # Sites commonly redirect to their "www." subdomain
    if not host.startswith("www."):
        hosts.append(f"www.{host}")
    return hosts


def is_allowed(url: str, hosts: list[str]) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in _ALLOWED_SCHEMES and parsed.netloc.lower() in hosts
