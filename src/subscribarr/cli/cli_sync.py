from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from googleapiclient.errors import HttpError
from rich.table import Table

from subscribarr import config
from subscribarr.auth import AuthFailed, AuthInvalid, get_provider
from subscribarr.branding import SUBSCRIBARR_BANNER, SUBSCRIBARR_SECTION_END
from subscribarr.cli.common import console
from subscribarr.env import ConfigError, get_env
from subscribarr.env.paths import out_file
from subscribarr.logger import get_logger
from subscribarr.models import SyncReport
from subscribarr.stages.sync import SyncFailedError, sync_subscriptions
from subscribarr.utils import validate_playlist_id, write_json
from subscribarr.youtube.api import QuotaExhaustedError, http_reason
from subscribarr.youtube.discovery import DiscoveryError


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


_DEFAULT_REPORT = Path("-")


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def build_sync_parser(subparsers: argparse._SubParsersAction) -> None:
    sync = subparsers.add_parser(
        "sync",
        help="Add recent subscription uploads to a playlist",
    )

    sync.add_argument(
        "playlist_id",
        nargs="?",
        default=None,
        help="Target playlist ID (default: $SUBSCRIBARR_PLAYLIST_ID)",
    )
    sync.add_argument(
        "--days",
        type=_non_negative_int,
        default=None,
        help=f"Look back this many days (default: {config.DEFAULT_WINDOW_DAYS})",
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be added; no playlist writes",
    )
    sync.add_argument(
        "--max-retries",
        type=_non_negative_int,
        default=None,
        help=f"Retries per video on 409 conflicts (default: {config.DEFAULT_MAX_RETRIES})",
    )
    sync.add_argument(
        "--report",
        nargs="?",
        type=Path,
        const=_DEFAULT_REPORT,
        default=None,
        metavar="PATH",
        help="Write the sync report as JSON (bare flag: out/sync-<run id>.json)",
    )
    sync.add_argument("--verbose", action="store_true")
    sync.add_argument("--quiet", action="store_true")


# ------------------------------------------------------------
# Output
# ------------------------------------------------------------


def _render_summary(report: SyncReport) -> Table:
    title = "Sync summary (dry run)" if report.dry_run else "Sync summary"
    table = Table(title=title)
    table.add_column("Outcome")
    table.add_column("Videos", justify="right")

    for outcome, count in report.counts().items():
        style = "red" if outcome == "error" and count else None
        table.add_row(outcome.replace("_", " "), str(count), style=style)
    return table


def _emit(report: SyncReport, report_path: Optional[Path]) -> None:
    log = get_logger("subscribarr")

    if report_path == _DEFAULT_REPORT:
        report_path = out_file(f"sync-{get_env().run_id}.json")

    if report_path is not None:
        write_json(report_path, report.as_dict())
        log.info(f"Report written to {report_path}")

    if not get_env().quiet:
        console().print(_render_summary(report))


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_sync(args: argparse.Namespace) -> int:
    log = get_logger("subscribarr")
    env = get_env()

    try:
        playlist_id = env.require_playlist_id()
        validate_playlist_id(playlist_id)
        settings = env.sync_settings()
    except (ConfigError, ValueError) as e:
        log.error(str(e))
        return config.EXIT_CONFIG_ERROR

    log.info(SUBSCRIBARR_BANNER)
    log.info(f"Playlist: {playlist_id}")
    log.info(
        f"Window: {settings.window_days} days | dry run: {not settings.insert_enabled} "
        f"| max retries: {settings.max_retries}"
    )

    try:
        youtube = get_provider("youtube").build_client()
    except AuthInvalid as e:
        log.error(f"Done: OAuth invalid (reauth required): {e}")
        return config.EXIT_AUTH_INVALID
    except AuthFailed as e:
        log.error(f"Done: could not build YouTube client: {e}")
        return config.EXIT_FAILED

    try:
        report = sync_subscriptions(youtube, playlist_id, settings)
    except SyncFailedError as e:
        log.error(str(e))
        _emit(e.report, args.report)
        log.error(
            f"Done: {len(e.errors)} video(s) failed; the rest of the playlist is up to date"
        )
        return config.EXIT_FAILED
    except QuotaExhaustedError as e:
        log.warning(f"Done: quota exhausted ({e})")
        return config.EXIT_QUOTA_EXHAUSTED
    except (HttpError, DiscoveryError) as e:
        log.error(f"Done: sync aborted: {http_reason(e)}")
        return config.EXIT_FAILED

    _emit(report, args.report)
    log.info(SUBSCRIBARR_SECTION_END())
    log.info("Done: OK (playlist up to date)")
    return config.EXIT_OK
