"""
models.py

Value types shared by the sync pipeline.

Every phase receives and returns these explicitly; nothing here holds
run state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from subscribarr import config


class Outcome(str, Enum):
    ADDED = "added"
    ALREADY_IN_PLAYLIST = "already_in_playlist"
    ERROR = "error"
    # The Data API exposes no watch history, so nothing ever lands here.
    ALREADY_WATCHED = "already_watched"
    SHORT = "short"


@dataclass(frozen=True)
class VideoError:
    message: str
    retry_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "retryCount": self.retry_count}


@dataclass(frozen=True)
class Video:
    video_id: str
    title: str = config.UNKNOWN_TITLE
    duration: Optional[int] = None
    error: Optional[VideoError] = None

    def with_error(self, error: VideoError) -> Video:
        return Video(
            video_id=self.video_id,
            title=self.title,
            duration=self.duration,
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.video_id, "title": self.title}
        if self.duration is not None:
            out["duration"] = self.duration
        if self.error is not None:
            out["error"] = self.error.to_dict()
        return out


@dataclass(frozen=True)
class SyncSettings:
    window_days: int = config.DEFAULT_WINDOW_DAYS
    insert_enabled: bool = config.DEFAULT_INSERT_ENABLED
    max_retries: int = config.DEFAULT_MAX_RETRIES
    backoff_base_sec: float = config.DEFAULT_BACKOFF_BASE_SEC

    def backoff_delay(self, retry_count: int) -> float:
        """Delay before retry number ``retry_count + 1`` (no jitter)."""
        return self.backoff_base_sec * (2**retry_count)


@dataclass(frozen=True)
class InsertResult:
    video: Video
    ok: bool
    retry_count: int = 0
    skipped: bool = False
    error: Optional[VideoError] = None


@dataclass(frozen=True)
class Triage:
    """Discovered videos split by classification, in discovery order."""

    shorts: Tuple[Video, ...] = ()
    already_in_playlist: Tuple[Video, ...] = ()
    candidates: Tuple[Video, ...] = ()


@dataclass(frozen=True)
class SyncReport:
    added: Tuple[Video, ...] = ()
    already_in_playlist: Tuple[Video, ...] = ()
    error: Tuple[Video, ...] = ()
    already_watched: Tuple[Video, ...] = ()
    shorts: Tuple[Video, ...] = ()
    dry_run: bool = field(default=False, compare=False)

    def by_outcome(self) -> Dict[Outcome, Tuple[Video, ...]]:
        return {
            Outcome.ADDED: self.added,
            Outcome.ALREADY_IN_PLAYLIST: self.already_in_playlist,
            Outcome.ERROR: self.error,
            Outcome.ALREADY_WATCHED: self.already_watched,
            Outcome.SHORT: self.shorts,
        }

    def counts(self) -> Dict[str, int]:
        return {o.value: len(videos) for o, videos in self.by_outcome().items()}

    def as_dict(self) -> Dict[str, Any]:
        return {
            "added": [v.to_dict() for v in self.added],
            "alreadyInPlaylist": [v.to_dict() for v in self.already_in_playlist],
            "error": [v.to_dict() for v in self.error],
            "alreadyWatched": [v.to_dict() for v in self.already_watched],
            "shorts": [v.to_dict() for v in self.shorts],
        }
