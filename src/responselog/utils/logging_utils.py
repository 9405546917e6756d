import logging
import time
from contextlib import contextmanager
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Configure logging with rich output.

    Log records go to stderr so that reports written to stdout stay
    machine readable.

    Args:
        verbose: Enable DEBUG level
        console: Console to render to, defaults to a stderr console
    """
    level = logging.DEBUG if verbose else logging.INFO
    console = console or Console(stderr=True)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@contextmanager
def log_duration(
    logger: Union[str, logging.Logger],
    message: str,
    level: int = logging.DEBUG,
):
    """Log duration of code block.

    Args:
        logger: Logger name or instance
        message: Message template with {duration}
        level: Log level
    """
    if isinstance(logger, str):
        logger = logging.getLogger(logger)

    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        logger.log(level, message.format(duration=f"{duration:.3f}s"))
