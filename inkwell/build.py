"""Site building functionality for Inkwell.

This module contains the core logic for building a static site from source
files. It loads configuration, loads and routes documents, renders them
through their layouts and writes the output tree and the feed.

Key functions:
- build_site: Main function to build the entire site.
- load_config: Loads site configuration from _config.yml.
- create_router: Builds a PermalinkRouter from the configuration.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateError, TemplateSyntaxError

from .documents import Document, DocumentLoader, Site, load_site
from .errors import BuildError, ConfigError, PermalinkCollisionError
from .feeds import DEFAULT_FEED_PATH, write_feed
from .protocols import TemplateRenderer
from .renderers import RendererRegistry, default_renderer_registry
from .routing import DEFAULT_PAGE_PATTERN, DEFAULT_POST_PATTERN, PermalinkRouter
from .templates import TemplateEngine
from .utils import ensure_clean_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "_config.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "title": "",
    "description": "",
    "url": "",
    "baseurl": "",
    "author": "",
    "destination": "_site",
    "feed_path": DEFAULT_FEED_PATH,
    "permalink": {
        "post": DEFAULT_POST_PATTERN,
        "page": DEFAULT_PAGE_PATTERN,
    },
    "exclude": ["README.md", "Gemfile", "Gemfile.lock", "node_modules", "vendor"],
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        site: The loaded site.
        routes: Mapping from permalink to Document.
        output_dir: Directory where the site was built.
        feed_path: Path of the written feed.
    """

    site: Site
    routes: dict[str, Document]
    output_dir: Path
    feed_path: Path

    @property
    def documents(self) -> list[Document]:
        return self.site.documents


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from _config.yml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML.
    """
    config_path = project_root / CONFIG_FILENAME
    config = {**DEFAULT_CONFIG, "permalink": dict(DEFAULT_CONFIG["permalink"])}
    if not config_path.exists():
        return config
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(config_path, f"invalid YAML: {exc}") from exc
    if not isinstance(loaded, dict):
        logger.warning("%s does not contain a mapping; using defaults", config_path)
        return config

    permalink = loaded.pop("permalink", None)
    config.update(loaded)
    if isinstance(permalink, dict):
        config["permalink"].update(permalink)
    elif isinstance(permalink, str):
        config["permalink"]["post"] = permalink
    return config


def create_router(config: dict[str, Any]) -> PermalinkRouter:
    """Create the permalink router described by the configuration.

    Args:
        config: Site configuration.

    Returns:
        Router with the configured patterns; the feed path is reserved.
    """
    patterns = config.get("permalink") or {}
    return PermalinkRouter(
        post_pattern=patterns.get("post") or DEFAULT_POST_PATTERN,
        page_pattern=patterns.get("page") or DEFAULT_PAGE_PATTERN,
        reserved=[config.get("feed_path") or DEFAULT_FEED_PATH],
    )


def build_site(
    project_root: Path,
    include_drafts: bool = False,
    clean_output: bool = True,
    output_dir_override: Path | None = None,
    renderer_registry: RendererRegistry | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to include documents from ``_drafts``.
        clean_output: Whether to wipe the output directory before building.
        output_dir_override: Optional output directory instead of the
            configured ``destination``.
        renderer_registry: Optional custom renderer registry.

    Returns:
        BuildResult with the site, its routes and the output directory.

    Raises:
        BuildError: If a document cannot be rendered, or two sources (documents
            or static files) would write the same output file.
    """
    project_root = project_root.resolve()
    config = load_config(project_root)
    output_dir = (
        output_dir_override or (project_root / config["destination"])
    ).resolve()

    router = create_router(config)
    site = load_site(
        project_root,
        config,
        router=router,
        include_drafts=include_drafts,
        destination=output_dir,
    )
    routes = router.route(site.documents)
    targets = {
        permalink: router.output_path(permalink, output_dir) for permalink in routes
    }
    static_files = _collect_static_files(project_root, output_dir, config, targets, routes)

    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    registry = renderer_registry or default_renderer_registry
    engine = TemplateEngine(project_root, config)
    engine.update_collections(site.documents)
    for permalink, document in routes.items():
        rendered = _render_document(engine, registry, document)
        target = targets[permalink]
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(rendered, encoding="utf-8")
        logger.debug("Wrote %s", target)

    _copy_static_files(static_files)
    feed_path = write_feed(output_dir, site, config)
    logger.info("Built %d documents into %s", len(routes), output_dir)
    return BuildResult(
        site=site, routes=routes, output_dir=output_dir, feed_path=feed_path
    )


def _render_document(
    engine: TemplateRenderer, registry: RendererRegistry, document: Document
) -> str:
    renderer = registry.get_renderer(document.source)
    try:
        body = renderer.render(document.body) if renderer else document.body
        if renderer is not None and renderer.source_type == "html":
            body = engine.render_body(document, body)
        return engine.render_document(document, body)
    except TemplateSyntaxError as exc:
        raise BuildError(
            document.source,
            f"Template syntax error in {exc.name or 'template'} on line {exc.lineno}: {exc.message}",
            exc,
        ) from exc
    except TemplateError as exc:
        raise BuildError(document.source, _format_error_message(exc), exc) from exc


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    if error_type == "UndefinedError":
        return f"Undefined variable: {exc}"
    return f"{error_type}: {exc}"


def _collect_static_files(
    project_root: Path,
    output_dir: Path,
    config: dict[str, Any],
    targets: dict[str, Path],
    routes: dict[str, Document],
) -> list[tuple[Path, Path]]:
    """Pair each static file with its destination in the output.

    Args:
        project_root: Root of the source tree.
        output_dir: Build output directory.
        config: Site configuration.
        targets: Output file of every routed permalink.
        routes: Mapping from permalink to Document.

    Returns:
        ``(source, destination)`` pairs, in walk order.

    Raises:
        PermalinkCollisionError: If a static file would overwrite a
            rendered document.
    """
    owners = {target: permalink for permalink, target in targets.items()}
    loader = DocumentLoader(project_root, config.get("exclude") or (), output_dir)
    feed_target = output_dir / (config.get("feed_path") or DEFAULT_FEED_PATH).lstrip("/")
    copies = []
    for source in loader.iter_static_files():
        dest = output_dir / source.relative_to(project_root)
        if dest == feed_target:
            logger.warning("%s is replaced by the generated feed", source)
            continue
        permalink = owners.get(dest)
        if permalink is not None:
            raise PermalinkCollisionError(permalink, routes[permalink].source, source)
        copies.append((source, dest))
    return copies


def _copy_static_files(copies: list[tuple[Path, Path]]) -> None:
    """Copy non-document files (stylesheets, images) into the output."""
    for source, dest in copies:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
