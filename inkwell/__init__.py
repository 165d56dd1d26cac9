"""Inkwell static blog generator.

Inkwell builds a static blog from a Jekyll-style source tree: Markdown and
HTML documents with front matter, dated posts under ``_posts/``, Jinja2
layouts under ``_layouts/`` and an RSS feed of the posts.

The main entry point is the CLI module, which provides commands for
scaffolding new projects, creating posts and building sites.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
