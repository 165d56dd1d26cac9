"""Feed generation for Inkwell.

The feed lists posts only, newest first. Entries are produced lazily by
:func:`iter_feed`; :func:`render_feed` turns them into RSS 2.0 XML through a
Jinja2 template with XML autoescaping, so titles such as ``Akka & HBase``
come out well-formed.

The channel's ``lastBuildDate`` is the date of the newest entry rather than
the wall clock, which keeps repeated builds of the same input identical.

Functions:
    iter_feed: Yield feed entries for the posts of a site.
    render_feed: Render entries as RSS XML.
    write_feed: Render and write the feed into the output directory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any, NamedTuple

from jinja2 import Environment, select_autoescape

from .documents import Site
from .utils import join_root_url

logger = logging.getLogger(__name__)

DEFAULT_FEED_PATH = "feed.xml"
RFC_822 = "%a, %d %b %Y %H:%M:%S +0000"

FEED_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
<channel>
<title>{{ title }}</title>
<link>{{ link }}</link>
<description>{{ description }}</description>
<atom:link href="{{ self_link }}" rel="self" type="application/rss+xml"/>
{%- if last_build %}
<lastBuildDate>{{ last_build }}</lastBuildDate>
{%- endif %}
{%- for item in items %}
<item>
<title>{{ item.title }}</title>
<link>{{ item.link }}</link>
<guid isPermaLink="true">{{ item.link }}</guid>
<description>{{ item.description }}</description>
<pubDate>{{ item.pub_date }}</pubDate>
</item>
{%- endfor %}
</channel>
</rss>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True))


class FeedEntry(NamedTuple):
    """One syndicated post."""

    title: str
    permalink: str
    description: str
    date: datetime


def iter_feed(site: Site) -> Iterator[FeedEntry]:
    """Yield feed entries for the posts of a site, newest first.

    Documents that are not posts are never included, and neither are drafts.
    Posts without a title or a date are skipped with a warning.

    Args:
        site: Loaded site.

    Yields:
        FeedEntry tuples sorted by date descending, then by permalink.
    """
    eligible = []
    for document in site.posts:
        if document.draft:
            continue
        if not document.title:
            logger.warning("%s: post has no title; left out of feed", document.rel_path)
            continue
        if document.date is None:
            logger.warning("%s: post has no date; left out of feed", document.rel_path)
            continue
        eligible.append(document)

    eligible.sort(key=lambda d: d.url)
    eligible.sort(key=lambda d: d.date, reverse=True)
    for document in eligible:
        yield FeedEntry(
            title=document.title,
            permalink=document.url,
            description=document.description or "",
            date=document.date,
        )


def render_feed(entries: Iterable[FeedEntry], config: dict[str, Any]) -> str:
    """Render feed entries as RSS 2.0.

    Args:
        entries: Entries in the order they should appear.
        config: Site configuration; ``url``, ``baseurl``, ``title``,
            ``description`` and ``feed_path`` are used.

    Returns:
        RSS XML document.
    """
    base_url = _site_root(config)
    feed_path = config.get("feed_path") or DEFAULT_FEED_PATH
    items = []
    for entry in entries:
        items.append(
            {
                "title": entry.title,
                "link": join_root_url(base_url, entry.permalink),
                "description": entry.description or entry.title,
                "pub_date": entry.date.strftime(RFC_822),
            }
        )
    template = _env.from_string(FEED_TEMPLATE)
    return template.render(
        title=config.get("title") or "Inkwell Feed",
        link=join_root_url(base_url, "/"),
        description=config.get("description") or "",
        self_link=join_root_url(base_url, feed_path),
        last_build=items[0]["pub_date"] if items else "",
        items=items,
    )


def write_feed(output_dir: Path, site: Site, config: dict[str, Any]) -> Path:
    """Render the feed for a site and write it to the output directory.

    Args:
        output_dir: Build output directory.
        site: Loaded site.
        config: Site configuration.

    Returns:
        Path of the written feed file.
    """
    target = output_dir / (config.get("feed_path") or DEFAULT_FEED_PATH).lstrip("/")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_feed(iter_feed(site), config), encoding="utf-8")
    return target


def _site_root(config: dict[str, Any]) -> str:
    url = str(config.get("url") or "").rstrip("/")
    baseurl = str(config.get("baseurl") or "").strip("/")
    if baseurl:
        return f"{url}/{baseurl}"
    return url
