"""Utility functions for blogue."""

import re
import sys
from pathlib import Path
from typing import TypeAlias, Union

from loguru import logger
from unidecode import unidecode

FilePath: TypeAlias = Union[Path, str]


def generate_slug(title: str) -> str:
    """Generate a URL slug from a post title.

    Transliterates to ASCII, lowercases, and joins runs of anything that is
    not a letter or digit with a single hyphen.

    Args:
        title: Post title

    Returns:
        Slug, e.g. "Crème Brûlée: A Guide" -> "creme-brulee-a-guide"
    """
    text = unidecode(title).lower()
    text = re.sub(r"['\u2019]", "", text)
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")


def setup_logging(log_level: str = "INFO", log_file: FilePath | None = None) -> None:  # pragma: no cover
    """
    Configure logging for the application.

    Args:
        log_level: Minimum level for the stderr sink
        log_file: Optional path for a rotating file sink
    """
    # Remove default handler and any existing handlers
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format="<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level="DEBUG",
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    logger.debug(f"Logging configured: level={log_level}, file={log_file}")
