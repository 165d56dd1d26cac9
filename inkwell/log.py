"""Logging setup for the Inkwell command line.

Library modules only call ``logging.getLogger(__name__)``; the CLI decides
where records go by calling :func:`setup_logging` once at startup.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for command-line use.

    Args:
        verbose: Log DEBUG records when True, WARNING and above otherwise.

    Calling it again changes the level of the already configured root logger.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger().setLevel(level)
