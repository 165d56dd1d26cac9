"""Template rendering engine for Inkwell.

Layouts live in ``_layouts/`` and partials in ``_includes/``. A document is
rendered through the layout named after its kind (``post.html`` or
``page.html``), falling back to ``default.html`` and finally to the bare
body.

Templates see:
- ``site``: the configuration plus ``pages``, ``posts`` and ``documents``
  collections.
- ``page``: the Document being rendered.
- ``content``: the rendered body, marked safe.
- ``url_for``: builds site URLs honouring ``baseurl``.
- ``pygments_css``: stylesheet for highlighted code blocks.

Bodies of HTML documents are templates too, so an ``index.html`` can loop
over ``site.posts``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup
from pygments.formatters import HtmlFormatter

from .collections import DocumentCollection
from .documents import Document
from .utils import join_root_url

logger = logging.getLogger(__name__)

LAYOUTS_DIR = "_layouts"
INCLUDES_DIR = "_includes"


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        source_dir: Root of the source tree.
        config: Site configuration.
        env: Jinja2 environment.
        documents: Collection of every document in the build.
    """

    def __init__(self, source_dir: Path, config: dict[str, Any]):
        """Initialize the template engine.

        Args:
            source_dir: Root of the source tree.
            config: Site configuration.
        """
        self.source_dir = source_dir
        self.config = config
        self.env = Environment(
            loader=FileSystemLoader(
                [source_dir / LAYOUTS_DIR, source_dir / INCLUDES_DIR]
            ),
            autoescape=select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )
        self.documents = DocumentCollection([])
        self._install_globals()

    def _install_globals(self) -> None:
        self.env.globals["site"] = self._site_context()
        self.env.globals["url_for"] = self._url_for
        self.env.globals["pygments_css"] = self._pygments_css

    def _site_context(self) -> dict[str, Any]:
        published = self.documents.published()
        return {
            **self.config,
            "documents": published,
            "pages": published.pages(),
            "posts": published.posts().sorted(),
        }

    @staticmethod
    def _pygments_css() -> str:
        return HtmlFormatter().get_style_defs(".highlight")

    def update_collections(self, documents: Iterable[Document]) -> None:
        """Replace the document collections seen by templates.

        Args:
            documents: Every document of the build.
        """
        self.documents = DocumentCollection(documents)
        self.env.globals["site"] = self._site_context()

    def _url_for(self, path: str) -> str:
        """Generate a site URL for a path, applying ``baseurl``.

        Args:
            path: Site-relative path or absolute URL.

        Returns:
            Root-relative URL, or the URL unchanged when already absolute.
        """
        if path.startswith(("http://", "https://", "//")):
            return path
        baseurl = str(self.config.get("baseurl") or "").strip("/")
        return join_root_url(f"/{baseurl}" if baseurl else "", path)

    def render_document(self, document: Document, content: str) -> str:
        """Render a document body inside its layout.

        Args:
            document: Document to render.
            content: Rendered body HTML.

        Returns:
            Complete HTML page.
        """
        template = self._resolve_layout_template(document.layout.value)
        return template.render(page=document, content=Markup(content))

    def _resolve_layout_template(self, layout: str):
        """Resolve the layout template, falling back to ``default``.

        Args:
            layout: Layout name.

        Returns:
            Jinja2 Template object.
        """
        for name in (f"{layout}.html", "default.html"):
            try:
                return self.env.get_template(name)
            except TemplateNotFound:
                continue
        logger.debug("No layout for %r; rendering body only", layout)
        return self.env.from_string("{{ content }}")

    def render_body(self, document: Document, content: str) -> str:
        """Render an HTML document body as a template.

        HTML sources may use template tags, for example to list
        ``site.posts`` on the home page.

        Args:
            document: Document whose body is rendered.
            content: HTML body source.

        Returns:
            Rendered HTML body.
        """
        return self.env.from_string(content).render(page=document)
