from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from dinecore.application.ports.action_lock import ActionLock
from dinecore.application.ports.session import SessionContext, UserProfile
from dinecore.application.use_cases.action_guard import ActionGuard, LocalActionLock
from dinecore.domain.common.ids import UserId
from dinecore.domain.lifecycle.machine import UnknownEntityKindError
from dinecore.domain.lifecycle.states import ActorRole, EntityKind
from dinecore.infrastructure.cache.redis_client import redis_url
from dinecore.infrastructure.http.rest_gateway import ADMIN_HEADER, RestApiGateway
from dinecore.infrastructure.locks.redis_lock import RedisActionLock

COLLECTIONS = {
    "orders": EntityKind.ORDER,
    "events": EntityKind.EVENT,
    "reservations": EntityKind.RESERVATION,
}


def kind_from_collection(collection: str) -> EntityKind:
    kind = COLLECTIONS.get(collection.lower())
    if kind is None:
        raise UnknownEntityKindError(collection)
    return kind


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def session_from_request(request: Request) -> SessionContext:
    """The browser keeps the credentials; the BFF only forwards them."""
    role = (
        ActorRole.ADMIN
        if request.headers.get(ADMIN_HEADER, "").lower() == "true"
        else ActorRole.CUSTOMER
    )
    user_id = request.headers.get("X-User-Id")
    return SessionContext(
        token=_bearer_token(request),
        profile=UserProfile(
            user_id=UserId(user_id) if user_id else None,
            name=request.headers.get("X-User-Name", ""),
            email=request.headers.get("X-User-Email", ""),
        ),
        role=role,
    )


def get_gateway() -> RestApiGateway:
    return RestApiGateway()


def _action_lock() -> ActionLock:
    if redis_url():
        return RedisActionLock()
    return LocalActionLock()


@lru_cache(maxsize=1)
def get_action_guard() -> ActionGuard:
    return ActionGuard(lock=_action_lock())
