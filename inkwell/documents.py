"""Content loading for Inkwell.

This module discovers source documents, parses their front matter and
builds immutable Document objects. A Site groups the documents of one
build and partitions them into pages and posts.

Key classes:
- Layout: The two kinds of document, ``page`` and ``post``.
- Document: Frozen dataclass for one source file.
- Site: The documents of a build plus the site configuration.
- DocumentLoader: Finds document and static files under the source root.
- DocumentBuilder: Turns one source file into a Document.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from .frontmatter import parse_frontmatter
from .routing import PermalinkRouter, document_slug
from .utils import extract_date_from_name, is_document, parse_date, titleize

logger = logging.getLogger(__name__)

POSTS_DIR = "_posts"
DRAFTS_DIR = "_drafts"


class Layout(str, Enum):
    PAGE = "page"
    POST = "post"


@dataclass(frozen=True)
class Document:
    """A source document with its metadata.

    Attributes:
        layout: Whether this is a page or a post.
        title: Title from the front matter, if any.
        permalink: Explicit permalink from the front matter, if any.
        description: Short description from the front matter, if any.
        date: Publication date from the front matter or filename prefix.
        body: Raw text following the front matter.
        source: Path to the source file.
        rel_path: Source path relative to the source root.
        metadata: All front-matter keys as strings.
        url: Resolved permalink.
        draft: Whether the document was loaded from ``_drafts``.
    """

    layout: Layout
    title: str | None
    permalink: str | None
    description: str | None
    date: datetime | None
    body: str
    source: Path
    rel_path: Path
    metadata: dict[str, str] = field(default_factory=dict, compare=False)
    url: str = ""
    draft: bool = False

    @property
    def is_post(self) -> bool:
        return self.layout is Layout.POST

    @property
    def is_page(self) -> bool:
        return self.layout is Layout.PAGE

    @property
    def slug(self) -> str:
        return document_slug(self)

    @property
    def display_title(self) -> str:
        return self.title or titleize(self.rel_path.name)

    @property
    def keywords(self) -> list[str]:
        raw = self.metadata.get("keywords", "")
        return [word.strip() for word in raw.split(",") if word.strip()]

    @property
    def comments(self) -> bool:
        return self.metadata.get("comments", "").strip().lower() == "true"


@dataclass
class Site:
    """All documents of a build.

    Attributes:
        documents: Documents in load order.
        config: Site configuration from ``_config.yml``.
    """

    documents: list[Document]
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def pages(self) -> list[Document]:
        return [d for d in self.documents if d.is_page]

    @property
    def posts(self) -> list[Document]:
        return [d for d in self.documents if d.is_post]


class DocumentLoader:
    """Finds source files under the source root.

    Directories starting with ``_`` or ``.`` are internal and skipped,
    except ``_posts`` (and ``_drafts`` when drafts are requested). The
    build destination and configured excludes are skipped too.

    Attributes:
        source_dir: Root of the source tree.
        exclude: File or directory names to ignore.
        destination: Build output directory, never read as input.
    """

    def __init__(
        self,
        source_dir: Path,
        exclude: Iterable[str] = (),
        destination: Path | None = None,
    ):
        self.source_dir = source_dir
        self.exclude = set(exclude)
        self.destination = destination

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List document files in sorted order.

        Args:
            include_drafts: Whether to include ``_drafts``.

        Returns:
            Paths of Markdown and HTML documents.
        """
        return [
            path
            for path in self._walk(include_drafts)
            if is_document(path)
        ]

    def iter_static_files(self) -> list[Path]:
        """List files that are copied to the output unchanged."""
        return [path for path in self._walk(False) if not is_document(path)]

    def _walk(self, include_drafts: bool) -> list[Path]:
        allowed = {POSTS_DIR}
        if include_drafts:
            allowed.add(DRAFTS_DIR)
        files: list[Path] = []
        for path in sorted(self.source_dir.rglob("*")):
            if path.is_dir():
                continue
            rel = path.relative_to(self.source_dir)
            if self._is_ignored(path, rel, allowed):
                continue
            files.append(path)
        return files

    def _is_ignored(self, path: Path, rel: Path, allowed: set[str]) -> bool:
        if self.destination is not None and path.is_relative_to(self.destination):
            return True
        if any(part in self.exclude for part in rel.parts):
            return True
        for part in rel.parts[:-1]:
            if part.startswith(("_", ".")) and part not in allowed:
                return True
        return rel.name.startswith(("_", "."))


class DocumentBuilder:
    """Builds Document objects from source files.

    Attributes:
        source_dir: Root of the source tree.
        router: Router used to resolve each document's URL.
    """

    def __init__(self, source_dir: Path, router: PermalinkRouter | None = None):
        self.source_dir = source_dir
        self.router = router or PermalinkRouter()

    def build(self, path: Path, draft: bool = False) -> Document:
        """Build a Document from a source file.

        Args:
            path: Path to the source file.
            draft: Whether the file comes from ``_drafts``.

        Returns:
            Document with its URL resolved.
        """
        rel = path.relative_to(self.source_dir)
        text = path.read_text(encoding="utf-8")
        metadata, body = parse_frontmatter(text)

        document = Document(
            layout=self._layout(metadata, rel),
            title=metadata.get("title") or None,
            permalink=metadata.get("permalink") or None,
            description=metadata.get("description") or None,
            date=self._date(metadata, rel),
            body=body,
            source=path,
            rel_path=rel,
            metadata=metadata,
            draft=draft,
        )
        return replace(document, url=self.router.resolve(document))

    def _layout(self, metadata: dict[str, str], rel: Path) -> Layout:
        in_posts = bool(rel.parts) and rel.parts[0] in (POSTS_DIR, DRAFTS_DIR)
        default = Layout.POST if in_posts else Layout.PAGE
        value = metadata.get("layout", "").strip().lower()
        if not value:
            return default
        try:
            return Layout(value)
        except ValueError:
            logger.warning(
                "%s: unknown layout %r, using %r", rel, value, default.value
            )
            return default

    def _date(self, metadata: dict[str, str], rel: Path) -> datetime | None:
        explicit = metadata.get("date", "").strip()
        if explicit:
            parsed = parse_date(explicit)
            if parsed is not None:
                return parsed
            logger.warning("%s: could not parse date %r", rel, explicit)
        return extract_date_from_name(rel.stem)


def load_site(
    source_dir: Path,
    config: dict[str, Any] | None = None,
    router: PermalinkRouter | None = None,
    include_drafts: bool = False,
    destination: Path | None = None,
) -> Site:
    """Load every document under the source root.

    Args:
        source_dir: Root of the source tree.
        config: Site configuration.
        router: Router used to resolve URLs.
        include_drafts: Whether to include ``_drafts``.
        destination: Build output directory to skip.

    Returns:
        Site with documents in sorted path order.
    """
    config = config or {}
    loader = DocumentLoader(source_dir, config.get("exclude") or (), destination)
    builder = DocumentBuilder(source_dir, router)
    documents = []
    for path in loader.iter_files(include_drafts):
        rel = path.relative_to(source_dir)
        documents.append(builder.build(path, draft=rel.parts[0] == DRAFTS_DIR))
    logger.info("Loaded %d documents from %s", len(documents), source_dir)
    return Site(documents=documents, config=config)
