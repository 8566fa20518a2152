"""Root logger setup for processes embedding the context graph core."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Install one root handler so blocked writes and batch summaries reach the service log.

    A no-op when the root logger already has handlers, unless ``force`` is set.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
