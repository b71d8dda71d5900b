"""bootstrap.py

Process bootstrap for Subscribarr.

This module is intentionally tiny and side-effectful.

Rules:
1) Only bootstrap is allowed to *mutate* os.environ for shared run context.
2) Call bootstrap_base_env() exactly once at the true entrypoint.
3) Call bootstrap_run_context() after argparse parsing, before init_logging().

Everything else should treat environment variables as the source of truth.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from subscribarr.env import reset_env_caches
from subscribarr.env.paths import env_file


_BOOTSTRAPPED = False


def bootstrap_base_env(dotenv_path: Path | None = None) -> None:
    """Load config/.env (shell variables always win) and stamp a run id."""
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return

    path = dotenv_path or env_file()
    if path.exists():
        load_dotenv(path, override=False)

    os.environ.setdefault(
        "SUBSCRIBARR_RUN_ID",
        datetime.now().strftime("%Y-%m-%d_%H-%M-%S"),
    )

    reset_env_caches()
    _BOOTSTRAPPED = True


def bootstrap_run_context(
    *,
    command: str,
    playlist_id: str | None = None,
    window_days: int | None = None,
    dry_run: bool | None = None,
    max_retries: int | None = None,
    verbose: bool | None = None,
    quiet: bool | None = None,
) -> None:
    """Establish run-scoped context used by logging + the sync stage."""

    os.environ["SUBSCRIBARR_COMMAND"] = command

    if playlist_id:
        os.environ["SUBSCRIBARR_PLAYLIST_ID"] = playlist_id
    if window_days is not None:
        os.environ["SUBSCRIBARR_WINDOW_DAYS"] = str(window_days)
    if dry_run:
        os.environ["SUBSCRIBARR_DRY_RUN"] = "1"
    if max_retries is not None:
        os.environ["SUBSCRIBARR_MAX_RETRIES"] = str(max_retries)

    if verbose is not None:
        os.environ["SUBSCRIBARR_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["SUBSCRIBARR_QUIET"] = "1" if quiet else "0"

    # Context changes must invalidate cached env views.
    reset_env_caches()
