from __future__ import annotations

from subscribarr.auth.base import AuthHealthResult, AuthHealthStatus, AuthProvider
from subscribarr.auth.errors import AuthError, AuthFailed, AuthInvalid
from subscribarr.auth.health import check
from subscribarr.auth.registry import get_provider

__all__ = [
    "AuthError",
    "AuthFailed",
    "AuthHealthResult",
    "AuthHealthStatus",
    "AuthInvalid",
    "AuthProvider",
    "check",
    "get_provider",
]
