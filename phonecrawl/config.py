import logging
import sys

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    log_level: str = "INFO"
    workers: int = 0  # 0 = 20 x CPU count
    page_budget: int = 10
    max_request_delay: float = 5.0
    request_timeout: float = 10.0
    validate_phone_numbers: bool = True
    user_agent: str = "phonecrawl/1.0"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
