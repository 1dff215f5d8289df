import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import CSVError, InvalidCSVLinesError, InvalidURLError

logger = logging.getLogger(__name__)


async def invalid_url_error_handler(_request: Request, exc: InvalidURLError) -> JSONResponse:
    logger.warning("Invalid URL %r: %s", exc.url, exc.message)
    return JSONResponse(
        status_code=422,
        content={"detail": f"Invalid URL: {exc.message}"},
    )


async def csv_error_handler(_request: Request, exc: CSVError) -> JSONResponse:
    logger.error("CSV error: %s", exc)
    content: dict = {"detail": f"CSV error: {exc.message}"}
    if isinstance(exc, InvalidCSVLinesError):
        content["invalid_lines"] = [line.model_dump() for line in exc.lines]
    return JSONResponse(status_code=400, content=content)
