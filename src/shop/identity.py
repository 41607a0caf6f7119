# adapter over the identity / profile provider; the auth protocol itself lives upstream
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Awaitable, Callable, Optional, Protocol

from shop.models import UserProfile
from utils.logger import get_logger

_logger = get_logger(__name__)

ProfileLoader = Callable[[str], Awaitable[UserProfile]]


@dataclass(frozen=True)
class AuthResult:
    success: bool
    error: Optional[str] = None


class IdentityProvider(Protocol):
    @property
    def current_user(self) -> Optional[str]: ...

    @property
    def profile(self) -> Optional[UserProfile]: ...

    def start_session(self, when: Optional[datetime] = None) -> None: ...

    async def logout(self) -> AuthResult: ...

    async def refresh(self) -> AuthResult: ...


class LocalIdentityProvider:
    """
    In-process identity provider.

    Holds an already authenticated profile. `refresh` re-reads it through
    `loader` when one is given; any exception the loader raises is returned
    as a failed AuthResult instead of propagating.
    """

    def __init__(
        self,
        profile: Optional[UserProfile] = None,
        loader: Optional[ProfileLoader] = None,
    ):
        self._profile = profile
        self._loader = loader

    @classmethod
    def from_env(cls) -> "LocalIdentityProvider":
        email = os.getenv("SHOP_USER_EMAIL", "shopper@example.com")
        profile = UserProfile(
            uid=email,
            email=email,
            first_name=os.getenv("SHOP_USER_FIRST_NAME"),
            last_name=os.getenv("SHOP_USER_LAST_NAME"),
            created_at=datetime.now(),
        )
        return cls(profile)

    @property
    def current_user(self) -> Optional[str]:
        return self._profile.uid if self._profile else None

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile

    def start_session(self, when: Optional[datetime] = None) -> None:
        if self._profile is None:
            return
        self._profile = replace(self._profile, last_login=when or datetime.now())
        _logger.info(f"Session started for {self._profile.uid}")

    async def logout(self) -> AuthResult:
        if self._profile is None:
            return AuthResult(False, "No user is logged in.")
        _logger.info(f"Logging out {self._profile.uid}")
        self._profile = None
        return AuthResult(True)

    async def refresh(self) -> AuthResult:
        if self._profile is None:
            return AuthResult(False, "No user is logged in.")
        if self._loader is None:
            return AuthResult(True)
        try:
            self._profile = await self._loader(self._profile.uid)
        except Exception as exc:
            _logger.error(f"Profile refresh failed: {exc}")
            return AuthResult(False, str(exc) or type(exc).__name__)
        return AuthResult(True)
