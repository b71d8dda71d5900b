"""
Process-wide logging.

One run writes one file: <logs>/<command>/<command>-<run_id>.log. The
console gets the same records through rich, unless quiet mode is on.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from subscribarr.env import LoggingEnvironment, get_logging_env
from subscribarr.env.paths import module_logs_dir
from .console import build_console_handler
from .file import build_file_handler, repoint_file_handler
from .retention import enforce_retention
from . import state as _state

# Third-party loggers that are chatty at INFO/DEBUG.
_NOISY = {
    "googleapiclient.discovery_cache": logging.ERROR,
    "googleapiclient": logging.WARNING,
    "google": logging.WARNING,
    "urllib3": logging.WARNING,
}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _root_level(env: LoggingEnvironment) -> int:
    if env.verbose:
        return logging.DEBUG
    lvl = logging.getLevelName(str(env.log_level).upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def run_logfile() -> Path:
    command = os.environ.get("SUBSCRIBARR_COMMAND") or "bootstrap"
    run_id = os.environ.get("SUBSCRIBARR_RUN_ID")
    if not run_id:
        run_id = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        os.environ["SUBSCRIBARR_RUN_ID"] = run_id
    return module_logs_dir(command) / f"{command}-{run_id}.log"


def _install_file_handler(root: logging.Logger, logfile: Path) -> None:
    """Reuse an existing root FileHandler (repointed) so handlers never stack."""
    existing = next(
        (h for h in root.handlers if isinstance(h, logging.FileHandler)), None
    )
    root.handlers.clear()

    if existing is None:
        root.addHandler(build_file_handler(logfile))
    else:
        repoint_file_handler(existing, logfile)
        root.addHandler(existing)


def init_logging() -> Path:
    """
    Attach handlers to the root logger and return the run log path.

    Named loggers propagate to root. Calling this again for the same run
    only re-applies the level; a new command/run id repoints the file.
    """
    env = get_logging_env()
    for name, level in _NOISY.items():
        logging.getLogger(name).setLevel(level)

    root = logging.getLogger()
    level = _root_level(env)
    logfile = run_logfile()

    enforce_retention(logfile.parent, int(env.log_retention))

    if _state.INITIALIZED and _state.LOG_FILE_PATH == logfile:
        root.setLevel(level)
        return logfile

    _install_file_handler(root, logfile)
    root.setLevel(level)
    if not env.quiet:
        root.addHandler(build_console_handler(level))

    _state.INITIALIZED = True
    _state.LOG_FILE_PATH = logfile
    return logfile
