"""Utilities for file operations."""

from pathlib import Path
from typing import Any

import aiofiles
import frontmatter
from loguru import logger

from blogue.utils import FilePath


class FileError(Exception):
    """Base exception for file operations."""

    pass


class FileWriteError(FileError):
    """Raised when file operations fail."""

    pass


class ParseError(FileError):
    """Raised when parsing file content fails."""

    pass


async def write_file_atomic(path: FilePath, content: str) -> None:
    """
    Write file with atomic operation using temporary file.

    Uses aiofiles for true async I/O (non-blocking).

    Args:
        path: Target file path (Path or string)
        content: Content to write

    Raises:
        FileWriteError: If write operation fails
    """
    path_obj = Path(path)
    temp_path = path_obj.with_suffix(path_obj.suffix + ".tmp")

    try:
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(temp_path, mode="w", encoding="utf-8") as f:
            await f.write(content)

        # Atomic rename
        temp_path.replace(path_obj)
        logger.debug(f"Wrote file atomically: {path_obj} ({len(content)} chars)")
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        logger.error(f"Failed to write file {path_obj}: {e}")
        raise FileWriteError(f"Failed to write file {path}: {e}") from e


def has_frontmatter(content: str) -> bool:
    """
    Check if content contains a YAML frontmatter block.

    Args:
        content: Content to check

    Returns:
        True if content has frontmatter markers (---), False otherwise
    """
    if not content:
        return False

    content = content.lstrip("\ufeff").strip()
    if not content.startswith("---"):
        return False

    return "---" in content[3:]


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """
    Parse YAML frontmatter from content.

    Unquoted YAML dates load as `datetime.date`/`datetime.datetime`,
    quoted ones stay strings.

    Args:
        content: Markdown content, with or without frontmatter

    Returns:
        Tuple of (metadata, body). Metadata is empty when there is no frontmatter.

    Raises:
        ParseError: If the frontmatter block is not valid YAML or not a mapping
    """
    try:
        post = frontmatter.loads(content)
    except Exception as e:
        # yaml.YAMLError for bad syntax, TypeError/ValueError for non-mapping blocks
        raise ParseError(f"Invalid frontmatter: {e}") from e

    return dict(post.metadata), post.content


def dump_post(metadata: dict[str, Any], body: str) -> str:
    """
    Serialize metadata and body to markdown with a YAML frontmatter block.

    Keys keep their insertion order. Dates and datetimes are written
    unquoted, date-looking strings are quoted.

    Args:
        metadata: Frontmatter values
        body: Markdown body

    Returns:
        Markdown text
    """
    if not metadata:
        return body

    post = frontmatter.Post(body)
    post.metadata.update(metadata)
    return frontmatter.dumps(post, sort_keys=False) + "\n"


def list_markdown_files(
    directory: FilePath, extensions: tuple[str, ...] = (".md",)
) -> list[Path]:
    """
    List markdown files directly inside a directory, newest first.

    Files are ordered by modification time (most recent first), then by name.

    Args:
        directory: Directory to list
        extensions: File extensions to include (case-insensitive)

    Returns:
        Matching file paths
    """
    wanted = {ext.lower() for ext in extensions}
    files = [
        path
        for path in Path(directory).iterdir()
        if path.is_file() and path.suffix.lower() in wanted
    ]
    return sorted(files, key=lambda p: (-p.stat().st_mtime, p.name))


def read_post(path: FilePath) -> tuple[dict[str, Any], str]:
    """
    Read and parse a markdown file.

    Raises:
        FileNotFoundError: If the file does not exist
        ParseError: If the frontmatter is invalid
    """
    path_obj = Path(path)
    if not path_obj.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return parse_frontmatter(path_obj.read_text(encoding="utf-8"))
