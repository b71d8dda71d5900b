from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from subscribarr import config
from subscribarr.auth.base import AuthHealthResult, AuthHealthStatus
from subscribarr.auth.errors import AuthFailed, AuthInvalid
from subscribarr.env.paths import auth_client_secrets_file, auth_token_file
from subscribarr.logger import get_logger
from subscribarr.youtube.api import is_quota_error


class YouTubeOAuthProvider:
    name = "youtube"

    def __init__(self) -> None:
        self._logger = get_logger("subscribarr.auth.youtube")

    def build_client(self) -> Any:
        creds = self._load_or_authenticate()
        try:
            return build("youtube", "v3", credentials=creds, cache_discovery=False)
        except Exception as e:
            self._logger.error(f"Failed to build YouTube client: {e}")
            raise AuthFailed(str(e)) from e

    def health_check(self) -> AuthHealthResult:
        """
        Validates OAuth by making a cheap authenticated request.
        Treats API quota exhaustion as OAuth OK.
        """
        self._logger.info("oauth.check.start")

        try:
            youtube = self.build_client()
            youtube.channels().list(part="id", mine=True, maxResults=1).execute()
        except AuthInvalid as e:
            self._logger.error("oauth.check.auth_invalid", exc_info=e)
            return AuthHealthResult(
                provider=self.name,
                status=AuthHealthStatus.AUTH_INVALID,
                message="OAuth INVALID - reauthentication required",
            )
        except HttpError as e:
            if is_quota_error(e):
                self._logger.warning("oauth.check.ok_quota_exhausted")
                return AuthHealthResult(
                    provider=self.name,
                    status=AuthHealthStatus.OK_API_QUOTA,
                    message="OAuth OK (API quota exhausted)",
                )
            self._logger.error("oauth.check.failed", exc_info=e)
            return self._failed()
        except (AuthFailed, GoogleAuthError, OSError) as e:
            self._logger.error("oauth.check.failed", exc_info=e)
            return self._failed()

        self._logger.info("oauth.check.ok")
        return AuthHealthResult(
            provider=self.name,
            status=AuthHealthStatus.OK,
            message="OAuth OK",
        )

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _failed(self) -> AuthHealthResult:
        return AuthHealthResult(
            provider=self.name,
            status=AuthHealthStatus.FAILED,
            message="OAuth check failed (unexpected error)",
        )

    def _load_or_authenticate(self) -> Credentials:
        token_path = auth_token_file()
        secrets_path = auth_client_secrets_file()

        creds: Optional[Credentials] = None

        if token_path.exists():
            try:
                creds = Credentials.from_authorized_user_file(
                    str(token_path),
                    config.YOUTUBE_OAUTH_SCOPES,
                )
                self._logger.debug("Loaded existing OAuth credentials")
            except ValueError as e:
                self._logger.warning(f"Failed to load existing credentials: {e}")
                creds = None

        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            try:
                self._logger.debug("Refreshing expired OAuth token...")
                creds.refresh(Request())
                self._logger.debug("Successfully refreshed OAuth token")
                self._persist_token(token_path, creds)
                return creds
            except GoogleAuthError as e:
                self._logger.error(f"Failed to refresh token: {e}")
                raise AuthInvalid(str(e)) from e

        if not secrets_path.exists():
            raise AuthInvalid(f"Missing OAuth credentials JSON file: {secrets_path}")

        try:
            self._logger.debug("Starting OAuth authentication flow...")
            flow = InstalledAppFlow.from_client_secrets_file(
                str(secrets_path),
                config.YOUTUBE_OAUTH_SCOPES,
            )
            creds = flow.run_local_server(port=0)
            self._logger.debug("Successfully authenticated with OAuth")
        except Exception as e:
            self._logger.error(f"OAuth authentication failed: {e}")
            raise AuthInvalid(str(e)) from e

        self._persist_token(token_path, creds)
        return creds

    def _persist_token(self, token_path: Path, creds: Credentials) -> None:
        try:
            token_path.write_text(creds.to_json(), encoding="utf-8")
            os.chmod(token_path, 0o600)
            self._logger.debug("Saved OAuth token")
        except OSError as e:
            self._logger.warning(f"Failed to save OAuth token: {e}")
