"""
sync.py

Subscription → playlist sync stage.

- Snapshot the target playlist and list subscribed channels
- Discover each channel's uploads since a fixed threshold
- Drop short-form videos, then videos already in the playlist
- Insert the rest, in discovery order, one at a time
- Return a SyncReport, or raise SyncFailedError if any insert failed

It does NOT:
- track watch history (the Data API exposes none)
- re-read the playlist mid-run
- parallelize channels or inserts
"""

from __future__ import annotations

import json
import time
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from subscribarr.logger import get_logger
from subscribarr.models import SyncReport, SyncSettings, Triage, Video
from subscribarr.youtube.api import YouTubeClient
from subscribarr.youtube.discovery import compute_threshold, discover_channel_videos, format_rfc3339
from subscribarr.youtube.durations import is_short_form
from subscribarr.youtube.playlist import Sleep, fetch_playlist_snapshot, insert_video
from subscribarr.youtube.subscriptions import fetch_subscribed_channels

logger = get_logger(__name__)


# ----------------------------
# Exceptions
# ----------------------------


class SyncError(Exception):
    """Base exception for sync operations."""


class SyncFailedError(SyncError):
    """
    One or more inserts failed.

    Every other video was already inserted: this is a partial success
    and ``report`` holds the full outcome.
    """

    def __init__(self, report: SyncReport):
        self.report = report
        self.errors = report.error
        payload = json.dumps([v.to_dict() for v in report.error], ensure_ascii=False)
        super().__init__(f"Error adding to playlist. {payload}")


# ----------------------------
# Phases
# ----------------------------


def triage_videos(
    videos: Iterable[Video],
    snapshot: Iterable[str],
    seen: Optional[set] = None,
) -> Triage:
    """
    Split discovered videos into shorts, already-present and candidates.

    Short-form wins over playlist membership. Ids in ``seen`` (already
    triaged earlier in the run, e.g. via another channel) are skipped and
    ``seen`` is updated in place.
    """
    present = snapshot if isinstance(snapshot, (set, frozenset)) else set(snapshot)
    seen = seen if seen is not None else set()

    shorts: List[Video] = []
    already: List[Video] = []
    candidates: List[Video] = []

    for v in videos:
        if v.video_id in seen:
            logger.debug(f"Skipping {v.video_id}: already seen this run")
            continue
        seen.add(v.video_id)

        if is_short_form(v.duration or 0):
            logger.info(f"Skipping {v.title} because it's less than 1 minute")
            shorts.append(v)
        elif v.video_id in present:
            logger.debug(f"Already in playlist: {v.video_id} ({v.title})")
            already.append(v)
        else:
            logger.info(f"Queued for playlist: {v.title}")
            candidates.append(v)

    return Triage(
        shorts=tuple(shorts),
        already_in_playlist=tuple(already),
        candidates=tuple(candidates),
    )


def discover_all(
    youtube: YouTubeClient,
    channels: Sequence[str],
    snapshot: Iterable[str],
    threshold: datetime,
) -> Triage:
    """Run discovery + triage for every channel, merging in channel order."""
    present = frozenset(snapshot)
    seen: set = set()

    shorts: List[Video] = []
    already: List[Video] = []
    candidates: List[Video] = []

    for i, channel_id in enumerate(channels, start=1):
        logger.debug(f"Discovering channel {i}/{len(channels)}: {channel_id}")
        videos = discover_channel_videos(youtube, channel_id, threshold)
        t = triage_videos(videos, present, seen)
        shorts.extend(t.shorts)
        already.extend(t.already_in_playlist)
        candidates.extend(t.candidates)

    return Triage(
        shorts=tuple(shorts),
        already_in_playlist=tuple(already),
        candidates=tuple(candidates),
    )


def insert_candidates(
    youtube: YouTubeClient,
    playlist_id: str,
    candidates: Sequence[Video],
    settings: SyncSettings,
    sleep: Sleep = time.sleep,
) -> Tuple[Tuple[Video, ...], Tuple[Video, ...]]:
    """
    Insert candidates strictly in order. Returns (added, errors).
    """
    added: List[Video] = []
    errors: List[Video] = []

    for i, video in enumerate(candidates, start=1):
        logger.debug(f"Insert {i}/{len(candidates)}: {video.video_id}")
        result = insert_video(youtube, playlist_id, video, settings, sleep=sleep)
        if result.ok:
            added.append(result.video)
        else:
            errors.append(result.video)

    return tuple(added), tuple(errors)


def _log_summary(playlist_id: str, threshold: datetime, report: SyncReport) -> None:
    counts: Dict[str, int] = report.counts()
    logger.info("=" * 60)
    logger.info(f"Playlist ID:          {playlist_id}")
    logger.info(f"Published after:      {format_rfc3339(threshold)}")
    logger.info(f"Dry run:              {report.dry_run}")
    logger.info(f"Added:                {counts['added']}")
    logger.info(f"Already in playlist:  {counts['already_in_playlist']}")
    logger.info(f"Shorts skipped:       {counts['short']}")
    logger.info(f"Errors:               {counts['error']}")
    logger.info("=" * 60)


# ----------------------------
# Orchestrator
# ----------------------------


def sync_subscriptions(
    youtube: YouTubeClient,
    playlist_id: str,
    settings: Optional[SyncSettings] = None,
    now: Optional[datetime] = None,
    sleep: Sleep = time.sleep,
) -> SyncReport:
    """
    Add recent long-form uploads from every subscribed channel to a playlist.

    Any failure while reading the playlist, subscriptions or channel
    uploads propagates immediately. Insert failures are collected; if
    there are any, SyncFailedError is raised after all candidates have
    been attempted.
    """
    settings = settings or SyncSettings()
    logger.info(f"Sync starting with playlistId: {playlist_id}")

    # INIT
    threshold = compute_threshold(settings.window_days, now)
    logger.info(f"Looking for videos published after {format_rfc3339(threshold)}")

    # SNAPSHOT
    channels = fetch_subscribed_channels(youtube)
    snapshot = fetch_playlist_snapshot(youtube, playlist_id)

    # DISCOVER
    triage = discover_all(youtube, channels, snapshot, threshold)

    # INSERT
    added, errors = insert_candidates(
        youtube, playlist_id, triage.candidates, settings, sleep=sleep
    )

    # FINALIZE
    report = SyncReport(
        added=added,
        already_in_playlist=triage.already_in_playlist,
        error=errors,
        already_watched=(),
        shorts=triage.shorts,
        dry_run=not settings.insert_enabled,
    )
    _log_summary(playlist_id, threshold, report)

    if report.error:
        raise SyncFailedError(report)
    return report
