from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from subscribarr import config
from subscribarr.models import SyncSettings

# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    log_level = os.environ.get("LOG_LEVEL", config.DEFAULT_LOG_LEVEL)
    log_retention = _as_int(
        os.environ.get("LOG_RETENTION", str(config.DEFAULT_LOG_RETENTION)),
        config.DEFAULT_LOG_RETENTION,
    )

    verbose = _as_bool(os.environ.get("SUBSCRIBARR_VERBOSE", "0"))
    quiet = _as_bool(os.environ.get("SUBSCRIBARR_QUIET", "0"))

    return LoggingEnvironment(
        log_level=log_level,
        log_retention=log_retention,
        verbose=verbose,
        quiet=quiet,
    )


# ------------------------------------------------------------
# Full runtime environment (PIPELINE ONLY)
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        # Logging snapshot (immutable)
        self._logging = get_logging_env()

        # ---- PIPELINE CONTEXT ----
        self.command = os.environ.get("SUBSCRIBARR_COMMAND", "bootstrap")
        self.run_id = os.environ.get("SUBSCRIBARR_RUN_ID", "")
        self.playlist_id = os.environ.get("SUBSCRIBARR_PLAYLIST_ID", "").strip()

        # ---- SYNC TUNABLES ----
        self.window_days = _as_int(
            os.environ.get("SUBSCRIBARR_WINDOW_DAYS", str(config.DEFAULT_WINDOW_DAYS)),
            config.DEFAULT_WINDOW_DAYS,
        )
        self.dry_run = _as_bool(os.environ.get("SUBSCRIBARR_DRY_RUN", "0"))
        self.max_retries = _as_int(
            os.environ.get("SUBSCRIBARR_MAX_RETRIES", str(config.DEFAULT_MAX_RETRIES)),
            config.DEFAULT_MAX_RETRIES,
        )
        self.backoff_base_sec = _as_float(
            os.environ.get(
                "SUBSCRIBARR_BACKOFF_BASE_SEC", str(config.DEFAULT_BACKOFF_BASE_SEC)
            ),
            config.DEFAULT_BACKOFF_BASE_SEC,
        )

    def require_playlist_id(self) -> str:
        if not self.playlist_id:
            raise ConfigError(
                "Missing target playlist: pass PLAYLIST_ID or set SUBSCRIBARR_PLAYLIST_ID"
            )
        return self.playlist_id

    def sync_settings(self) -> SyncSettings:
        if self.window_days < 0:
            raise ConfigError(f"SUBSCRIBARR_WINDOW_DAYS must be >= 0, got {self.window_days}")
        if self.max_retries < 0:
            raise ConfigError(f"SUBSCRIBARR_MAX_RETRIES must be >= 0, got {self.max_retries}")
        if self.backoff_base_sec < 0:
            raise ConfigError(
                f"SUBSCRIBARR_BACKOFF_BASE_SEC must be >= 0, got {self.backoff_base_sec}"
            )

        return SyncSettings(
            window_days=self.window_days,
            insert_enabled=not self.dry_run,
            max_retries=self.max_retries,
            backoff_base_sec=self.backoff_base_sec,
        )

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "Pipeline": {
                "command": self.command,
                "run_id": self.run_id,
                "playlist_id": self.playlist_id or "(unset)",
            },
            "Behavior": {
                "window_days": self.window_days,
                "dry_run": self.dry_run,
                "max_retries": self.max_retries,
                "backoff_base_sec": self.backoff_base_sec,
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
