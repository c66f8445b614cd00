from __future__ import annotations

import logging
import logging.handlers

from .settings import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the ``folio`` logger hierarchy.

    Console output always; a rotating file when FOLIO_LOG_PATH is set.
    Calling it twice does not stack handlers.
    """
    logger = logging.getLogger("folio")
    logger.setLevel((level or settings.log_level).upper())

    if getattr(logger, "_folio_configured", False):
        return

    formatter = logging.Formatter(_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if settings.log_path is not None:
        settings.log_path.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            settings.log_path,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
        rotating.setFormatter(formatter)
        logger.addHandler(rotating)

    logger._folio_configured = True  # type: ignore[attr-defined]
