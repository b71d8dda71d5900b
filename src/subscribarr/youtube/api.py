"""
api.py

YouTube Data API call helpers.

Responsibilities:
- Executing read requests (fatal on failure, never retried)
- Lazy cursor-following pagination
- HttpError → domain error translation (quota, conflict)

The HTTP transport itself is googleapiclient; a non-success response
surfaces as googleapiclient.errors.HttpError.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterator, Optional, TypeAlias

from googleapiclient.errors import HttpError

from subscribarr import config
from subscribarr.logger import get_logger

logger = get_logger(__name__)

YouTubeClient: TypeAlias = Any
RequestFactory: TypeAlias = Callable[[Optional[str]], Any]


# ============================================================
# Exceptions
# ============================================================


class QuotaExhaustedError(Exception):
    """Raised when the OAuth project's daily quota is exhausted."""


# ============================================================
# Error detection helpers
# ============================================================


def http_status(e: BaseException) -> Optional[int]:
    status = getattr(getattr(e, "resp", None), "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def _is_quota_payload(data: Any) -> bool:
    """
    YouTube quota errors are reliably signaled here:
    error.errors[].reason in ('quotaExceeded', 'dailyLimitExceeded')
    """
    if not isinstance(data, dict):
        return False
    error = data.get("error")
    if not isinstance(error, dict):
        return False
    for err in error.get("errors") or []:
        if isinstance(err, dict) and err.get("reason") in config.QUOTA_REASONS:
            return True
    return False


def _decode_content(e: HttpError) -> str:
    content = getattr(e, "content", b"") or b""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="ignore")
    return str(content)


def is_quota_error(e: BaseException) -> bool:
    if not isinstance(e, HttpError) or http_status(e) != 403:
        return False

    raw = _decode_content(e)
    try:
        if _is_quota_payload(json.loads(raw)):
            return True
    except ValueError:
        pass
    return any(reason in raw for reason in config.QUOTA_REASONS)


def is_conflict_error(e: BaseException) -> bool:
    return isinstance(e, HttpError) and http_status(e) == config.CONFLICT_STATUS


def http_reason(e: BaseException) -> str:
    """Short, log-friendly description of an API failure."""
    if isinstance(e, HttpError):
        reason = getattr(e, "reason", "") or _decode_content(e)[:300]
        status = http_status(e)
        return f"HTTP {status}: {reason}" if reason else f"HTTP {status}"
    return str(e) or type(e).__name__


# ============================================================
# Read helpers
# ============================================================


def execute(request: Any, name: str) -> Dict[str, Any]:
    """
    Execute a read request.

    Any non-success response aborts the caller; quota exhaustion is
    re-raised as QuotaExhaustedError so the CLI can report it distinctly.
    """
    try:
        resp = request.execute()
    except HttpError as e:
        if is_quota_error(e):
            logger.warning(f"{name}: OAuth quota exhausted")
            raise QuotaExhaustedError(f"{name}: OAuth quota exhausted") from e
        logger.error(f"{name} failed: {http_reason(e)}")
        raise

    return resp if isinstance(resp, dict) else {}


def iter_pages(request_factory: RequestFactory, name: str) -> Iterator[Dict[str, Any]]:
    """
    Yield every page of a cursor-paginated list call.

    ``request_factory(page_token)`` builds the request for one page; the
    first page is requested with ``None``. Iteration stops at the first
    page without a ``nextPageToken``. Each call to iter_pages starts over
    from the first page.
    """
    page_token: Optional[str] = None
    page = 0

    while True:
        page += 1
        logger.debug(f"{name}: fetching page {page} (pageToken={page_token})")
        resp = execute(request_factory(page_token), name)
        yield resp

        page_token = resp.get("nextPageToken")
        if not page_token:
            logger.debug(f"{name}: no next page token after page {page}")
            return
