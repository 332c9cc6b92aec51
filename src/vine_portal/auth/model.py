from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthUser:
    """Identity verified by the hosted auth service."""

    user_id: str
    email: Optional[str] = None
    metadata_name: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    expires_at: Optional[int]
    user: AuthUser
