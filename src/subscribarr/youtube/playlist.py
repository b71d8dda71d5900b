"""
playlist.py

Target playlist reads and writes.

- fetch_playlist_snapshot(): every video id currently in the playlist
- insert_video(): append one video, retrying on 409 conflicts

Reads are fatal on failure. Writes are isolated per video: a failed
insert is returned as a result, never raised.
"""

from __future__ import annotations

import time
from typing import Any, Callable, FrozenSet, Optional, Set

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from subscribarr import config
from subscribarr.logger import get_logger
from subscribarr.models import InsertResult, SyncSettings, Video, VideoError
from subscribarr.youtube.api import (
    YouTubeClient,
    http_reason,
    is_conflict_error,
    iter_pages,
)

logger = get_logger(__name__)

Sleep = Callable[[float], None]


# ----------------------------
# Snapshot
# ----------------------------


def fetch_playlist_snapshot(youtube: YouTubeClient, playlist_id: str) -> FrozenSet[str]:
    """
    Fetch the ids of all videos in the playlist, following every page.

    A partial snapshot would cause duplicate inserts, so any page failure
    propagates and aborts the run.
    """

    def _request(page_token: Optional[str]) -> Any:
        return youtube.playlistItems().list(
            part="contentDetails,snippet",
            playlistId=playlist_id,
            maxResults=config.YOUTUBE_PAGE_SIZE,
            pageToken=page_token,
        )

    video_ids: Set[str] = set()

    for resp in iter_pages(_request, "playlistItems.list"):
        for item in resp.get("items", []):
            video_id = (item.get("contentDetails") or {}).get("videoId")
            if not isinstance(video_id, str) or not video_id:
                continue
            title = (item.get("snippet") or {}).get("title", "")
            logger.debug(f"existing: {video_id} - {title}")
            video_ids.add(video_id)

    logger.info(f"Playlist {playlist_id} holds {len(video_ids)} videos")
    return frozenset(video_ids)


# ----------------------------
# Insertion
# ----------------------------


def _insert_request(youtube: YouTubeClient, playlist_id: str, video_id: str) -> Any:
    return youtube.playlistItems().insert(
        part="snippet",
        body={
            "snippet": {
                "playlistId": playlist_id,
                "resourceId": {
                    "kind": config.VIDEO_RESOURCE_KIND,
                    "videoId": video_id,
                },
            }
        },
    )


def insert_video(
    youtube: YouTubeClient,
    playlist_id: str,
    video: Video,
    settings: SyncSettings,
    sleep: Sleep = time.sleep,
) -> InsertResult:
    """
    Append ``video`` to the playlist.

    Only a 409 conflict is retried, up to ``settings.max_retries`` times,
    waiting ``backoff_base_sec * 2**retry_count`` before each retry. Any
    other HTTP, transport or credential failure, or a conflict once the
    retries are spent, is returned as a failed InsertResult carrying the
    retry count reached. Anything else propagates.

    Not idempotent: calling twice may add the video twice. Deduplication
    happens against the playlist snapshot before this is called.
    """
    if not settings.insert_enabled:
        logger.info(f"[DRY-RUN] Would add {video.video_id} ({video.title})")
        return InsertResult(video=video, ok=True, skipped=True)

    retry_count = 0

    while True:
        logger.info(f"Attempting to add video {video.video_id} ({video.title}) to playlist")

        try:
            resp = _insert_request(youtube, playlist_id, video.video_id).execute()
        except HttpError as e:
            if is_conflict_error(e) and retry_count < settings.max_retries:
                delay = settings.backoff_delay(retry_count)
                logger.warning(
                    f"Conflict adding {video.video_id}; retrying in {delay:g}s "
                    f"(attempt {retry_count + 1}/{settings.max_retries}): {video.title}"
                )
                sleep(delay)
                retry_count += 1
                continue

            return _failed(video, http_reason(e), retry_count)
        except (GoogleAuthError, OSError) as e:
            return _failed(video, http_reason(e), retry_count)

        if not resp:
            logger.info(f"Empty response for {video.title}")
        else:
            logger.info(
                f"Successfully added to playlist: {video.video_id} title: {video.title}"
            )
        return InsertResult(video=video, ok=True, retry_count=retry_count)


def _failed(video: Video, message: str, retry_count: int) -> InsertResult:
    logger.error(
        f"Error adding to playlist: {video.video_id} title: {video.title} "
        f"(retries={retry_count}): {message}"
    )
    error = VideoError(message=message, retry_count=retry_count)
    return InsertResult(
        video=video.with_error(error),
        ok=False,
        retry_count=retry_count,
        error=error,
    )
