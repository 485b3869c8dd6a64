from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Callable

from dinecore.domain.common.ids import UserId
from dinecore.domain.lifecycle.states import ActorRole


@dataclass(frozen=True)
class UserProfile:
    user_id: UserId | None = None
    name: str = ""
    email: str = ""
    phone: str = ""


def _noop() -> None:
    return None


@dataclass(frozen=True)
class SessionContext:
    """Credentials and identity handed to use cases explicitly.

    `on_unauthorized` is called once a remote call comes back 401; clearing
    stored credentials and redirecting to login is the caller's job.
    """

    token: str | None
    profile: UserProfile = field(default_factory=UserProfile)
    role: ActorRole = ActorRole.CUSTOMER
    on_unauthorized: Callable[[], None] = field(default=_noop, compare=False, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def actor_key(self) -> str:
        if self.profile.user_id:
            return str(self.profile.user_id)
        if self.profile.email:
            return self.profile.email
        if self.token:
            return "token:" + hashlib.sha256(self.token.encode("utf-8")).hexdigest()[:32]
        # unauthenticated calls are refused before any keyed action runs
        return f"session:{id(self):x}"
