"""Command-line interface for Inkwell.

This module defines the CLI commands using the Click framework.

Commands:
- new: Scaffold a new Inkwell blog.
- build: Build the site into the destination directory.
- post: Create a new post, prompting for details when none are given.
- routes: List every permalink and the document behind it.
"""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .errors import BuildError, ConfigError, PermalinkCollisionError
from .log import setup_logging
from .utils import slugify, strip_date_prefix

# Project skeleton copied by `inkwell new`
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold"


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output")
def cli(verbose: bool):
    """Inkwell static blog generator."""
    setup_logging(verbose)


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new Inkwell blog."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Inkwell blog created at {target}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include posts from _drafts")
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Write the site here instead of the configured destination",
)
def build(drafts: bool, output_dir: Path | None):
    """Build the site into the destination directory."""
    project_root = Path.cwd()
    from .build import build_site

    try:
        result = build_site(
            project_root, include_drafts=drafts, output_dir_override=output_dir
        )
    except BuildError as exc:
        _report_build_error(project_root, exc)
        raise SystemExit(1) from None
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Built {len(result.routes)} documents into {result.output_dir}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include posts from _drafts")
def routes(drafts: bool):
    """List every permalink and its source document."""
    project_root = Path.cwd()
    from .build import create_router, load_config
    from .documents import load_site

    try:
        config = load_config(project_root)
        router = create_router(config)
        site = load_site(
            project_root,
            config,
            router=router,
            include_drafts=drafts,
            destination=(project_root / config["destination"]).resolve(),
        )
        table = router.route(site.documents)
    except BuildError as exc:
        _report_build_error(project_root, exc)
        raise SystemExit(1) from None
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    width = max((len(p) for p in table), default=0)
    for permalink, document in sorted(table.items()):
        click.echo(f"{permalink.ljust(width)}  {document.rel_path.as_posix()}")


@cli.command()
@click.argument("title", required=False)
@click.option("--description", default=None, help="Short description for the feed")
@click.option("--draft", is_flag=True, help="Create the post in _drafts")
def post(title: str | None, description: str | None, draft: bool):
    """Create a new post."""
    project_root = Path.cwd()

    if title is None:
        title = questionary.text(
            "Post title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        ).ask()
        if title is None:
            raise click.Abort()
        if description is None:
            description = questionary.text(
                "Description (optional):", style=_questionary_style()
            ).ask()
            if description is None:
                raise click.Abort()

    title = title.strip()
    slug = slugify(title)
    now = datetime.now()
    if draft:
        target_dir = project_root / "_drafts"
        filename = f"{slug}.md"
    else:
        target_dir = project_root / "_posts"
        filename = f"{now:%Y-%m-%d}-{slug}.md"
    target_path = target_dir / filename

    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )
    existing = _existing_slugs(target_dir)
    if slug in existing:
        raise click.ClickException(
            f"A post with slug '{slug}' already exists: {existing[slug]}"
        )

    metadata = {"layout": "post", "title": title}
    if description:
        metadata["description"] = description.strip()
    if not draft:
        metadata["date"] = f"{now:%Y-%m-%d %H:%M:%S}"
    header = yaml.safe_dump(
        metadata, allow_unicode=True, sort_keys=False, default_flow_style=False
    )

    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(f"---\n{header}---\n\n", encoding="utf-8")
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _report_build_error(project_root: Path, exc: BuildError) -> None:
    """Print a build error with the offending file(s)."""
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    if isinstance(exc, PermalinkCollisionError):
        click.echo(click.style(f"  Permalink: {exc.permalink}", fg="yellow"), err=True)
        click.echo(
            click.style(f"  File: {_relative(project_root, exc.first)}", fg="yellow"),
            err=True,
        )
        click.echo(
            click.style(f"  File: {_relative(project_root, exc.second)}", fg="yellow"),
            err=True,
        )
        click.echo("  Error: two documents resolve to the same permalink", err=True)
        return
    click.echo(
        click.style(f"  File: {_relative(project_root, exc.source_path)}", fg="yellow"),
        err=True,
    )
    click.echo(f"  Error: {exc.message}", err=True)


def _relative(project_root: Path, path: Path) -> str:
    try:
        return path.relative_to(project_root.resolve()).as_posix()
    except ValueError:
        return str(path)


def _existing_slugs(folder: Path) -> dict[str, str]:
    """Map slugs of existing posts in a folder to their filenames."""
    slugs: dict[str, str] = {}
    if folder.exists():
        for f in sorted(folder.iterdir()):
            if f.is_file() and f.suffix in (".md", ".markdown"):
                slugs[slugify(strip_date_prefix(f.stem))] = f.name
    return slugs


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Create the directory structure and files for a new Inkwell blog.

    Args:
        root: Root directory for the new blog.
    """
    for src_path in _SCAFFOLD_DIR.rglob("*"):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(_SCAFFOLD_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
