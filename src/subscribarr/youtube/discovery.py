"""
discovery.py

Finds recent uploads for one subscribed channel.

This module:
- Searches a channel for videos published after a fixed threshold
- Batch-fetches title + duration for the hits
- Does NOT classify, dedupe or modify playlists
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from subscribarr import config
from subscribarr.logger import get_logger
from subscribarr.models import Video
from subscribarr.youtube.api import YouTubeClient, execute
from subscribarr.youtube.durations import parse_duration_seconds

logger = get_logger(__name__)


class DiscoveryError(Exception):
    """Raised when the API returns an unusable discovery response."""


# ============================================================
# Time threshold
# ============================================================


def compute_threshold(window_days: int, now: Optional[datetime] = None) -> datetime:
    """
    Fixed point in time ``window_days`` before ``now`` (UTC).

    Computed once per run; every channel query reuses it.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc) - timedelta(days=window_days)


def format_rfc3339(dt: datetime) -> str:
    """
    Format for the search.list publishedAfter parameter.

    Examples:
        >>> format_rfc3339(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2024-01-02T03:04:05Z'
    """
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# ============================================================
# Discovery
# ============================================================


def _search_video_ids(
    youtube: YouTubeClient, channel_id: str, published_after: str
) -> List[str]:
    resp = execute(
        youtube.search().list(
            part="id",
            channelId=channel_id,
            publishedAfter=published_after,
            type="video",
            maxResults=config.YOUTUBE_PAGE_SIZE,
        ),
        f"search.list channel={channel_id}",
    )

    ids: List[str] = []
    for item in resp.get("items", []):
        vid = (item.get("id") or {}).get("videoId")
        if isinstance(vid, str) and vid and vid not in ids:
            ids.append(vid)
    return ids


def _to_video(item: Dict[str, Any]) -> Optional[Video]:
    vid = item.get("id")
    if not isinstance(vid, str) or not vid:
        return None

    title = (item.get("snippet") or {}).get("title") or config.UNKNOWN_TITLE
    duration = (item.get("contentDetails") or {}).get("duration") or ""

    return Video(video_id=vid, title=title, duration=parse_duration_seconds(duration))


def discover_channel_videos(
    youtube: YouTubeClient, channel_id: str, published_after: datetime
) -> List[Video]:
    """
    Videos ``channel_id`` published strictly after ``published_after``.

    One search call plus one videos.list call for the whole batch. A
    channel with no recent uploads returns an empty list without the
    metadata call.
    """
    ids = _search_video_ids(youtube, channel_id, format_rfc3339(published_after))
    if not ids:
        logger.debug(f"Channel {channel_id}: no new videos")
        return []

    resp = execute(
        youtube.videos().list(
            part="contentDetails,snippet",
            id=",".join(ids),
            maxResults=config.YOUTUBE_PAGE_SIZE,
        ),
        f"videos.list channel={channel_id}",
    )
    if "items" not in resp:
        raise DiscoveryError(
            f"Failed to fetch video data for channel {channel_id}: items missing"
        )

    videos = [v for v in (_to_video(it) for it in resp["items"]) if v is not None]
    logger.info(f"Channel {channel_id}: {len(videos)} new videos")
    return videos
