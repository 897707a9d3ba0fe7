"""Shared helpers for the CLI commands."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV_VAR = "GITSCRIBE_LOG_LEVEL"


def setup_logging(*, is_verbose: bool) -> None:
    """Configure logging based on verbosity.

    Warnings and errors are shown by default. ``--verbose`` enables debug
    output; otherwise $GITSCRIBE_LOG_LEVEL may choose another level.

    Args:
        is_verbose: Whether to enable debug logging.
    """
    if is_verbose:
        log_level = "DEBUG"
    else:
        log_level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = "WARNING"

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_time=is_verbose,
                show_path=is_verbose,
            )
        ],
    )

    # Keep SDK request logging quiet unless asked for
    if not is_verbose:
        for name in ("httpx", "httpcore", "openai", "anthropic"):
            logging.getLogger(name).setLevel(logging.WARNING)


def mask_secret(value: Optional[str]) -> str:
    """Mask an API key for display.

    Environment references like ``${OPENAI_API_KEY}`` are shown as is.
    """
    if not value:
        return "not set"
    if value.startswith("${") and value.endswith("}"):
        return value
    if len(value) > 12:
        return value[:8] + "..." + value[-4:]
    return "***"
