from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(name: str, default: int, min_val: int | None = None) -> int:
    """Get integer from environment with optional minimum enforcement."""
    val = int(os.environ.get(name, str(default)))
    if min_val is not None and val < min_val:
        return min_val
    return val


def _env_path(name: str) -> Path | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    """Static settings for the editing engine.

    Every value can be overridden through a FOLIO_* environment variable.
    """

    log_level: str = os.environ.get("FOLIO_LOG_LEVEL", "INFO")
    log_path: Path | None = _env_path("FOLIO_LOG_PATH")
    log_max_bytes: int = _env_int("FOLIO_LOG_MAX_BYTES", 1_000_000)
    log_backup_count: int = _env_int("FOLIO_LOG_BACKUP_COUNT", 3)

    # Quiet period before the store is serialized and emitted.
    autosave_delay_ms: int = _env_int("FOLIO_AUTOSAVE_DELAY_MS", 500, min_val=0)

    # Pastes at or below this length are never decomposed into blocks.
    paste_min_length: int = _env_int("FOLIO_PASTE_MIN_LENGTH", 50, min_val=0)

    # Vertical gap between the selection and the floating toolbar.
    toolbar_offset: int = _env_int("FOLIO_TOOLBAR_OFFSET", 48)

    recent_limit: int = _env_int("FOLIO_RECENT_LIMIT", 3, min_val=1)
    locale: str = os.environ.get("FOLIO_LOCALE", "en")

    @property
    def autosave_delay(self) -> float:
        """Autosave delay in seconds."""
        return self.autosave_delay_ms / 1000.0


settings = Settings()
