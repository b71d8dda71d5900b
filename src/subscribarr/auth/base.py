from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol


class AuthHealthStatus(str, Enum):
    OK = "ok"
    OK_API_QUOTA = "ok_api_quota"
    AUTH_INVALID = "auth_invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthHealthResult:
    provider: str
    status: AuthHealthStatus
    message: str

    @property
    def usable(self) -> bool:
        return self.status in (AuthHealthStatus.OK, AuthHealthStatus.OK_API_QUOTA)


class AuthProvider(Protocol):
    """
    Provider interface. Keep it minimal.

    - build_client() returns an authenticated API client, refreshing or
      prompting for login as needed
    - health_check() performs a cheap authenticated call to validate auth
    """

    name: str

    def build_client(self) -> Any: ...

    def health_check(self) -> AuthHealthResult: ...
