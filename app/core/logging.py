from __future__ import annotations

import logging
from typing import Final


_DEFAULT_FORMAT: Final[str] = "%(levelname)s %(asctime)s %(name)s %(message)s"

_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hpack", "postgrest")


def configure_logging(*, level: str = "INFO") -> None:
    """Configure Python logging once.

    Uvicorn/Gunicorn may also configure handlers; this keeps local + container runs consistent.
    """

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # If handlers already exist, don't clobber them (common under Gunicorn/Uvicorn workers).
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return

    logging.basicConfig(level=level.upper(), format=_DEFAULT_FORMAT)
