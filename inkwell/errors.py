"""Error types raised by Inkwell.

All errors derive from InkwellError so callers (the CLI in particular) can
catch a single base class. BuildError carries the source file that caused
the failure; PermalinkCollisionError names both conflicting documents.
"""

from __future__ import annotations

from pathlib import Path


class InkwellError(Exception):
    """Base class for all Inkwell errors."""


class ConfigError(InkwellError):
    """Raised when _config.yml cannot be read."""

    def __init__(self, config_path: Path, message: str):
        self.config_path = config_path
        self.message = message
        super().__init__(f"{config_path}: {message}")


class BuildError(InkwellError):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class PermalinkCollisionError(BuildError):
    """Two sources resolve to the same permalink.

    Attributes:
        permalink: The contested permalink.
        first: Source that claimed the permalink first.
        second: Source that tried to claim it again.
    """

    def __init__(self, permalink: str, first: Path, second: Path):
        self.permalink = permalink
        self.first = first
        self.second = second
        super().__init__(
            second,
            f"permalink {permalink!r} is already used by {first}",
        )
