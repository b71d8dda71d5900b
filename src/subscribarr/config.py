"""
config.py

Central configuration for Subscribarr.

This file intentionally contains ONLY:
- Constants
- Tunables
- File names

It must NOT contain:
- Business logic
- API calls
- Reading environment variables

Runtime configuration (env vars, CLI flags) belongs in:
- env/
- bootstrap.py
- cli/
"""

from __future__ import annotations

# ============================================================
# YOUTUBE API: SCOPES / PAGING
# ============================================================

YOUTUBE_OAUTH_SCOPES = ["https://www.googleapis.com/auth/youtube"]

# Max page size for playlistItems.list, subscriptions.list and search.list
YOUTUBE_PAGE_SIZE = 50

VIDEO_RESOURCE_KIND = "youtube#video"

# ============================================================
# ERROR SIGNALS
# ============================================================

# Transient write contention on playlistItems.insert
CONFLICT_STATUS = 409

QUOTA_REASONS = ("quotaExceeded", "dailyLimitExceeded")

# ============================================================
# CLASSIFICATION
# ============================================================

SHORT_FORM_MAX_SEC = 60
UNKNOWN_TITLE = "Unknown Title"

# ============================================================
# SYNC DEFAULTS (env.py / CLI may override)
# ============================================================

DEFAULT_WINDOW_DAYS = 2
DEFAULT_INSERT_ENABLED = True
DEFAULT_MAX_RETRIES = 6
DEFAULT_BACKOFF_BASE_SEC = 2.0

# ============================================================
# FILES
# ============================================================

ENV_FILE_NAME = ".env"
OAUTH_TOKEN_FILE_NAME = "oauth_token.json"
CLIENT_SECRETS_FILE_NAME = "client_secret.json"

# ============================================================
# LOGGING DEFAULTS (logger/ and env/ control actual behavior)
# ============================================================

DEFAULT_LOG_RETENTION = 30
DEFAULT_LOG_LEVEL = "INFO"

# ============================================================
# CLI EXIT CODES
# ============================================================

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_QUOTA_EXHAUSTED = 10
EXIT_AUTH_INVALID = 12
EXIT_FAILED = 20
