from __future__ import annotations

import os
from pathlib import Path

from subscribarr import config

# ---------------------------------------------------------------------
# Home directory
# ---------------------------------------------------------------------


def home_dir() -> Path:
    """
    Base directory for config/, auth/, logs/ and out/.

    $SUBSCRIBARR_HOME when set, otherwise the working directory the
    command was started from.
    """
    raw = os.environ.get("SUBSCRIBARR_HOME")
    return Path(raw).expanduser().resolve() if raw else Path.cwd().resolve()


# ---------------------------------------------------------------------
# Base directories (override-friendly)
# ---------------------------------------------------------------------


def _resolve_dir(env_var: str, default: Path) -> Path:
    """
    Resolve a directory path from an environment variable or default.
    Ensures the directory exists.

    Resolved on every call so tests and the CLI can repoint directories
    after import.
    """
    raw = os.environ.get(env_var)
    path = Path(raw).expanduser().resolve() if raw else default
    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# Public paths
# ---------------------------------------------------------------------


def logs_dir() -> Path:
    return _resolve_dir("SUBSCRIBARR_LOGS_DIR", home_dir() / "logs")


def auth_dir() -> Path:
    """OAuth tokens and client secrets."""
    return _resolve_dir("SUBSCRIBARR_AUTH_DIR", home_dir() / "auth")


def out_dir() -> Path:
    """Sync reports."""
    return _resolve_dir("SUBSCRIBARR_OUT_DIR", home_dir() / "out")


def env_file() -> Path:
    return home_dir() / "config" / config.ENV_FILE_NAME


# ---------------------------------------------------------------------
# Utility / internal paths
# ---------------------------------------------------------------------


def auth_token_file(filename: str = config.OAUTH_TOKEN_FILE_NAME) -> Path:
    return auth_dir() / filename


def auth_client_secrets_file(filename: str = config.CLIENT_SECRETS_FILE_NAME) -> Path:
    return auth_dir() / filename


def out_file(name: str) -> Path:
    return out_dir() / name


def module_logs_dir(module: str) -> Path:
    """
    Base log directory for a CLI module (e.g. sync, auth).
    """
    path = logs_dir() / module
    path.mkdir(parents=True, exist_ok=True)
    return path
