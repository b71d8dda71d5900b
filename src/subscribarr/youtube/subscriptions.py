from __future__ import annotations

from typing import Any, Dict, List, Optional

from subscribarr import config
from subscribarr.logger import get_logger
from subscribarr.youtube.api import YouTubeClient, iter_pages

logger = get_logger(__name__)


def _channel_id(item: Dict[str, Any]) -> Optional[str]:
    rid = (item.get("snippet") or {}).get("resourceId") or {}
    cid = rid.get("channelId")
    return cid if isinstance(cid, str) and cid else None


def fetch_subscribed_channels(youtube: YouTubeClient) -> List[str]:
    """
    Channel ids the authenticated account subscribes to, in server order.

    Follows continuation tokens so accounts with more than one page of
    subscriptions are fully covered.
    """

    def _request(page_token: Optional[str]) -> Any:
        return youtube.subscriptions().list(
            part="snippet",
            mine=True,
            maxResults=config.YOUTUBE_PAGE_SIZE,
            pageToken=page_token,
        )

    channels: List[str] = []
    seen = set()

    for resp in iter_pages(_request, "subscriptions.list"):
        for item in resp.get("items", []):
            cid = _channel_id(item)
            if cid is None or cid in seen:
                continue
            seen.add(cid)
            channels.append(cid)

    logger.info(f"Found {len(channels)} subscribed channels")
    return channels
