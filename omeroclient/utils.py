import logging
import ssl
import sys
from functools import cache

import certifi
import rich
from rich.console import Console
from rich.progress import Progress

logger = logging.getLogger(__name__)


def snake_to_camel_case(snake_case_name: str) -> str:
    parts = snake_case_name.split("_")
    return parts[0] + "".join(part.title() for part in parts[1:])


@cache
def get_ssl_context() -> ssl.SSLContext:
    cafile = certifi.where()
    ssl_context = ssl.create_default_context(cafile=cafile)
    ssl_context.cafile = cafile  # type: ignore
    return ssl_context


def setup_logging(verbose: bool = False) -> None:
    console_log_level = logging.DEBUG if verbose else logging.INFO

    logging_formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(console_log_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_log_level)
    console.setFormatter(logging_formatter)
    root_logger.addHandler(console)

    # httpx logs every request on INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_rich_progress(disable: bool = False) -> Progress:
    return Progress(
        "[progress.description]{task.description:<20}",
        rich.progress.BarColumn(),
        "[progress.percentage]{task.percentage:>3.0f}%",
        rich.progress.DownloadColumn(),
        "|",
        rich.progress.TimeRemainingColumn(),
        console=Console(stderr=True),
        disable=disable,
    )
