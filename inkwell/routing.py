"""Permalink routing for Inkwell.

Every document is served at exactly one permalink. An explicit
``permalink`` in the front matter always wins; otherwise the permalink is
expanded from a pattern chosen by the document's layout:

- posts: ``/:year/:month/:day/:slug/`` (``/posts/:slug/`` when undated)
- pages: ``/:slug/``

``:slug`` is the slugified title, or the slugified filename (date prefix
removed) when the document has no title. ``index`` files map to their
directory.

Key class:
- PermalinkRouter: resolves permalinks, builds the route table and maps
  permalinks to files in the output directory.
"""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from .errors import BuildError, PermalinkCollisionError
from .utils import slugify, strip_date_prefix

if TYPE_CHECKING:
    from .documents import Document

logger = logging.getLogger(__name__)

DEFAULT_POST_PATTERN = "/:year/:month/:day/:slug/"
DEFAULT_PAGE_PATTERN = "/:slug/"
UNDATED_POST_PATTERN = "/posts/:slug/"

_PLACEHOLDER_RE = re.compile(r":(year|month|day|slug|title|categories)\b")


def normalize_permalink(permalink: str) -> str:
    """Normalize a permalink to a root-relative path.

    Collapses duplicate slashes and ``.`` segments, ensures a leading
    slash and keeps a trailing slash when one was given.

    Args:
        permalink: Raw permalink string.

    Returns:
        Normalized permalink such as ``/about/``.
    """
    value = permalink.strip()
    if not value or value == "/":
        return "/"
    trailing = value.endswith("/")
    normalized = posixpath.normpath("/" + value.lstrip("/"))
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if trailing and normalized != "/":
        normalized += "/"
    return normalized


def document_slug(document: Document) -> str:
    """Slug used for default permalinks.

    Args:
        document: Document to derive the slug for.

    Returns:
        Slugified title, or the slugified filename stem without date prefix.
    """
    if document.title:
        return slugify(document.title)
    return slugify(strip_date_prefix(document.rel_path.stem))


class PermalinkRouter:
    """Resolves permalinks and detects collisions.

    Attributes:
        post_pattern: Pattern for posts without an explicit permalink.
        page_pattern: Pattern for pages without an explicit permalink.
        reserved: Permalinks owned by generated files (e.g. the feed).
    """

    def __init__(
        self,
        post_pattern: str = DEFAULT_POST_PATTERN,
        page_pattern: str = DEFAULT_PAGE_PATTERN,
        reserved: Iterable[str] = (),
    ):
        self.post_pattern = post_pattern
        self.page_pattern = page_pattern
        self.reserved = {normalize_permalink(p) for p in reserved}

    def resolve(self, document: Document) -> str:
        """Resolve the permalink for a document.

        Args:
            document: Document to route.

        Returns:
            Normalized permalink.
        """
        if document.permalink:
            return normalize_permalink(document.permalink)

        rel = PurePosixPath(document.rel_path.as_posix())
        if rel.stem == "index" and document.is_page:
            parent = rel.parent.as_posix()
            return normalize_permalink("/" if parent == "." else f"/{parent}/")

        if document.is_post:
            pattern = self.post_pattern if document.date else UNDATED_POST_PATTERN
        else:
            pattern = self.page_pattern
        return normalize_permalink(self.expand(pattern, document))

    def expand(self, pattern: str, document: Document) -> str:
        """Substitute ``:placeholders`` in a permalink pattern.

        Args:
            pattern: Pattern such as ``/:year/:month/:slug/``.
            document: Document supplying the values.

        Returns:
            The expanded (not yet normalized) permalink.
        """
        date = document.date
        slug = document_slug(document)
        folder = PurePosixPath(document.rel_path.as_posix()).parent
        categories = "/".join(
            part for part in folder.parts if part not in ("_posts", "_drafts")
        )
        values = {
            "year": f"{date:%Y}" if date else "",
            "month": f"{date:%m}" if date else "",
            "day": f"{date:%d}" if date else "",
            "slug": slug,
            "title": slug,
            "categories": categories,
        }
        return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], pattern)

    def route(self, documents: Iterable[Document]) -> dict[str, Document]:
        """Build the permalink table for a collection of documents.

        Two permalinks collide when they name the same output file, so
        ``/about``, ``/about/`` and ``/about/index.html`` all claim
        ``about/index.html``.

        Args:
            documents: Documents to route. Each one's ``url`` is used when set,
                otherwise it is resolved.

        Returns:
            Mapping from permalink to Document, in input order.

        Raises:
            PermalinkCollisionError: If two documents share an output file or
                a document claims a reserved permalink.
        """
        reserved = {self.output_path(p, Path()): p for p in self.reserved}
        claimed: dict[Path, Document] = {}
        routes: dict[str, Document] = {}
        for document in documents:
            permalink = document.url or self.resolve(document)
            target = self.output_path(permalink, Path())
            if target in reserved:
                raise PermalinkCollisionError(
                    permalink, Path(reserved[target].lstrip("/")), document.source
                )
            existing = claimed.get(target)
            if existing is not None:
                raise PermalinkCollisionError(
                    permalink, existing.source, document.source
                )
            claimed[target] = document
            routes[permalink] = document
            logger.debug("Routed %s -> %s", document.rel_path, permalink)
        return routes

    def output_path(self, permalink: str, output_dir: Path) -> Path:
        """Map a permalink to the file it is written to.

        ``/about/`` becomes ``about/index.html``; ``/404.html`` stays a file.
        A permalink without an extension is treated as a directory.

        Args:
            permalink: Normalized permalink.
            output_dir: Build output directory.

        Returns:
            Path of the output file.

        Raises:
            BuildError: If the permalink escapes the output directory.
        """
        relative = permalink.strip("/")
        if ".." in PurePosixPath(relative).parts:
            raise BuildError(Path(permalink), "permalink escapes the output directory")
        if not relative:
            return output_dir / "index.html"
        if permalink.endswith("/") or not PurePosixPath(relative).suffix:
            return output_dir / relative / "index.html"
        return output_dir / relative
