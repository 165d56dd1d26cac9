"""Utility functions for Inkwell.

This module contains small helpers used throughout the Inkwell codebase:
string processing, path handling and date extraction.

Key functions:
    slugify: Convert titles and filenames to URL slugs.
    titleize: Convert filenames to human-readable titles.
    strip_date_prefix: Remove a YYYY-MM-DD- prefix from a filename stem.
    extract_date_from_name: Extract date from filename prefix.
    parse_date: Parse an explicit front-matter date string.
    is_markdown: Check if a path is a Markdown file.
    is_html: Check if a path is a plain HTML file.
    ensure_clean_dir: Ensure a directory exists and is empty.
    join_root_url: Join a base URL with a path.
"""

from __future__ import annotations

import re
import shutil
import unicodedata
from datetime import datetime, timezone
from pathlib import Path

MARKDOWN_SUFFIXES = (".md", ".markdown")

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
)


def _has_date_prefix(parts: list[str]) -> bool:
    return len(parts) >= 4 and all(p.isdigit() for p in parts[:3])


def strip_date_prefix(name: str) -> str:
    """Remove a ``YYYY-MM-DD-`` prefix from a filename stem.

    Args:
        name: Filename stem.

    Returns:
        The stem without its date prefix, or the stem unchanged.
    """
    parts = name.split("-")
    if _has_date_prefix(parts):
        return "-".join(parts[3:])
    return name


def slugify(name: str) -> str:
    """Convert a title or filename stem to a slug, dropping any date prefix.

    Accented characters are folded to ASCII before everything outside
    ``[a-z0-9]`` collapses to single hyphens.

    Args:
        name: Title or filename stem.

    Returns:
        URL-friendly slug, ``"index"`` when nothing usable remains.
    """
    cleaned = strip_date_prefix(name)
    cleaned = unicodedata.normalize("NFKD", cleaned)
    cleaned = cleaned.encode("ascii", "ignore").decode("ascii")
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("2019-08-21-akka-streams.md")
        'Akka Streams'
    """
    base = strip_date_prefix(Path(filename).stem)
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def extract_date_from_name(name: str) -> datetime | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        datetime object if a valid date prefix is found, None otherwise.
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return datetime(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def parse_date(value: str) -> datetime | None:
    """Parse a front-matter date string.

    Timezone-aware values are converted to UTC and returned naive, so
    every parsed date can be compared with every other one.

    Args:
        value: Date string such as ``2019-08-21`` or
            ``2019-08-21 10:30:00 +0200``.

    Returns:
        Naive datetime, or None if the value matches no known format.
    """
    text = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    return None


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True for ``.md`` and ``.markdown`` files (case-insensitive).
    """
    return path.suffix.lower() in MARKDOWN_SUFFIXES


def is_html(path: Path) -> bool:
    """Check if a path is a plain HTML file."""
    return path.suffix.lower() in (".html", ".htm")


def is_document(path: Path) -> bool:
    return is_markdown(path) or is_html(path)


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com/', 'about/')
        'https://example.com/about/'
    """
    if not root_url:
        return path if path.startswith("/") else f"/{path}"
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"
