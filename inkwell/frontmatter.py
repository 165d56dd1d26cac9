"""Front-matter parsing for Inkwell.

A document may start with a metadata block::

    ---
    layout: post
    title: Akka Streams in practice
    permalink: /akka-streams/
    ---
    Body text...

Everything between the two ``---`` delimiter lines is metadata; everything
after the closing delimiter line is the body, kept byte for byte.

Values are always strings. The block is read with PyYAML's ``BaseLoader``,
which resolves no tags, so ``comments: true`` stays ``"true"``. Blocks that
are not valid YAML (an unquoted ``title: Akka: the basics``) fall back to
splitting each line on its first colon.
"""

from __future__ import annotations

import logging
import re

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"

_OPEN_RE = re.compile(r"\A---[ \t]*\r?\n")
_CLOSE_RE = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)
_LINE_RE = re.compile(r"^\s*([A-Za-z0-9_][\w-]*)\s*:\s?(.*?)\s*$")


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split raw text into its metadata block and body.

    Args:
        text: Raw document text.

    Returns:
        Tuple of (block text or None, body). The block is None when the
        text has no opening delimiter or the block is never closed; the
        body is then the whole text.
    """
    opening = _OPEN_RE.match(text)
    if not opening:
        return None, text
    closing = _CLOSE_RE.search(text, opening.end())
    if not closing:
        logger.warning("Unterminated front matter block; treating as body")
        return None, text
    return text[opening.end() : closing.start()], text[closing.end() :]


def parse_frontmatter(text: str) -> tuple[dict[str, str], str]:
    """Extract string metadata and body from a document.

    Args:
        text: Raw document text.

    Returns:
        Tuple of (metadata dict, body). Metadata is empty when there is no
        well-formed block.
    """
    block, body = split_frontmatter(text)
    if block is None:
        return {}, body
    return parse_metadata_block(block), body


def parse_metadata_block(block: str) -> dict[str, str]:
    """Parse the text between the delimiters into a flat string mapping."""
    if not block.strip():
        return {}
    try:
        loaded = yaml.load(block, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        logger.debug("Front matter is not valid YAML; reading key: value lines")
        return _parse_lines(block)
    if not isinstance(loaded, dict):
        return _parse_lines(block)

    metadata: dict[str, str] = {}
    for key, value in loaded.items():
        if isinstance(value, str):
            metadata[str(key)] = value
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            metadata[str(key)] = ", ".join(value)
        elif value is None:
            metadata[str(key)] = ""
        else:
            logger.warning("Ignoring nested front matter value for %r", key)
    return metadata


def _parse_lines(block: str) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for line in block.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        match = _LINE_RE.match(line)
        if not match:
            logger.warning("Ignoring front matter line %r", line)
            continue
        metadata[match.group(1)] = _unquote(match.group(2))
    return metadata


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value
