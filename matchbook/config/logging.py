"""Loguru setup for the matchbook CLI.

Modules log through ``get_logger(__name__)``; the CLI callback calls
``setup_loguru_logger`` once per invocation.
"""

from pathlib import Path
import sys
from typing import Any

from loguru import logger

from .settings import settings

SERVICE_NAME = "matchbook"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> "
    "<cyan>{extra[module]}</cyan> {message}"
)


def setup_loguru_logger(verbose: bool = False) -> None:
    """Send logs to stderr and to a JSON lines file.

    Args:
        verbose: Log DEBUG to the console and include variable values in tracebacks
    """
    logger.remove()
    logger.configure(extra={"service": SERVICE_NAME, "module": SERVICE_NAME})

    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.logging.console_level,
        format=CONSOLE_FORMAT,
        backtrace=verbose,
        diagnose=verbose,
    )

    log_file = Path(settings.logging.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level=settings.logging.file_level,
        serialize=True,
        rotation="5 MB",
        retention=5,
        catch=True,
    )


def get_logger(name: str) -> Any:
    """Logger bound to the calling module, e.g. ``get_logger(__name__)``."""
    return logger.bind(module=name, service=SERVICE_NAME)
