"""
utils.py

Validation and file helpers.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any


def validate_playlist_id(playlist_id: str) -> None:
    """
    Validate playlist ID format.

    Args:
        playlist_id: YouTube playlist ID

    Raises:
        ValueError: If playlist_id is empty or contains invalid characters
    """
    if not playlist_id or not re.match(r"^[A-Za-z0-9_-]+$", playlist_id):
        raise ValueError(
            f"Invalid playlist_id: {playlist_id!r}. "
            f"Must contain only alphanumeric characters, hyphens, and underscores."
        )


def write_json(path: Path, data: Any) -> None:
    """
    Write data to a JSON file atomically (temp file, then rename).

    Raises:
        TypeError: If data is not JSON serializable
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, sort_keys=True)

    tmp_path.replace(path)
