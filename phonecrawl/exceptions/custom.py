class CrawlError(Exception):
    def __init__(self, message: str, url: str | None = None):
        self.message = message
        self.url = url
        super().__init__(message)


class InvalidURLError(CrawlError):
    pass


class NetworkFailureError(CrawlError):
    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, url=url)


class ForbiddenHostError(CrawlError):
    def __init__(self, url: str, allowed: list[str]):
        self.allowed = allowed
        super().__init__(f"Forbidden host for {url} (allowed: {', '.join(allowed)})", url=url)


class PhoneValidationError(Exception):
    def __init__(self, number: str, reason: str = "invalid phone number"):
        self.number = number
        self.reason = reason
        super().__init__(f"{reason}: {number}")


class CSVError(Exception):
    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(f"{path} - {message}" if path else message)


class InvalidCSVHeaderError(CSVError):
    pass


class EmptyCSVError(CSVError):
    def __init__(self, path: str | None = None):
        super().__init__("empty CSV", path=path)


class InvalidCSVLinesError(CSVError):
    def __init__(self, lines: list, results: list[str], path: str | None = None):
        self.lines = lines
        self.results = results
        super().__init__(f"{len(lines)} invalid CSV lines", path=path)
