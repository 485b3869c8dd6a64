"""Guarded status transitions for orders, events and reservations.

Every screen that changes a status asks this module first. The remote store
still has the final say; these rules only stop requests that can never
succeed from leaving the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dinecore.domain.common.errors import TransitionError
from dinecore.domain.lifecycle.states import (
    CANCELLED,
    CUSTOMER_CANCELLABLE,
    STATUS_TYPES,
    TRANSITIONS,
    ActorRole,
    EntityKind,
    Status,
)


class InvalidTransitionError(TransitionError):
    def __init__(self, message: str, current: str | None = None, requested: str | None = None):
        super().__init__(message)
        self.details = {"current": current, "requested": requested}


class ForbiddenTransitionError(TransitionError):
    def __init__(self, message: str, role: str) -> None:
        super().__init__(message)
        self.details = {"role": role}


class UnknownEntityKindError(TransitionError):
    def __init__(self, kind: object) -> None:
        super().__init__(f"unknown entity kind: {kind!r}")
        self.details = {"kind": str(kind)}


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    reason: str | None = None
    error: TransitionError | None = None

    def raise_if_rejected(self) -> None:
        if self.error is not None:
            raise self.error


def parse_kind(kind: EntityKind | str) -> EntityKind:
    if isinstance(kind, EntityKind):
        return kind
    try:
        return EntityKind(str(kind).strip().lower())
    except ValueError as exc:
        raise UnknownEntityKindError(kind) from exc


def parse_role(role: ActorRole | str) -> ActorRole:
    if isinstance(role, ActorRole):
        return role
    try:
        return ActorRole(str(role).strip().lower())
    except ValueError as exc:
        raise ForbiddenTransitionError(f"unknown actor role: {role!r}", role=str(role)) from exc


def parse_status(kind: EntityKind | str, status: Status | str) -> Status:
    entity_kind = parse_kind(kind)
    status_type = STATUS_TYPES[entity_kind]
    if isinstance(status, status_type):
        return status  # type: ignore[return-value]
    raw = status.value if isinstance(status, Enum) else str(status)
    try:
        return status_type(raw.strip().lower())  # type: ignore[return-value]
    except ValueError as exc:
        raise InvalidTransitionError(
            f"unknown {entity_kind.value} status: {raw!r}",
            requested=raw,
        ) from exc


def is_terminal(kind: EntityKind | str, status: Status | str) -> bool:
    entity_kind = parse_kind(kind)
    return not TRANSITIONS[entity_kind][parse_status(entity_kind, status)]


def allowed_targets(
    kind: EntityKind | str,
    current: Status | str,
    role: ActorRole | str = ActorRole.ADMIN,
) -> frozenset[Status]:
    entity_kind = parse_kind(kind)
    current_status = parse_status(entity_kind, current)
    targets = TRANSITIONS[entity_kind][current_status]
    if parse_role(role) == ActorRole.ADMIN:
        return targets
    if current_status in CUSTOMER_CANCELLABLE[entity_kind]:
        return targets & {CANCELLED[entity_kind]}
    return frozenset()


def decide_transition(
    kind: EntityKind | str,
    current: Status | str,
    requested: Status | str,
    role: ActorRole | str,
) -> TransitionDecision:
    try:
        ensure_transition(kind, current, requested, role)
    except TransitionError as exc:
        return TransitionDecision(allowed=False, reason=str(exc), error=exc)
    return TransitionDecision(allowed=True)


def ensure_transition(
    kind: EntityKind | str,
    current: Status | str,
    requested: Status | str,
    role: ActorRole | str,
) -> Status:
    entity_kind = parse_kind(kind)
    actor = parse_role(role)
    current_status = parse_status(entity_kind, current)
    requested_status = parse_status(entity_kind, requested)

    if requested_status not in TRANSITIONS[entity_kind][current_status]:
        raise InvalidTransitionError(
            f"cannot move {entity_kind.value} from status={current_status.value} "
            f"to status={requested_status.value}",
            current=current_status.value,
            requested=requested_status.value,
        )

    if actor == ActorRole.CUSTOMER:
        if requested_status != CANCELLED[entity_kind]:
            raise ForbiddenTransitionError(
                f"customers may only cancel a {entity_kind.value}",
                role=actor.value,
            )
        if current_status not in CUSTOMER_CANCELLABLE[entity_kind]:
            raise ForbiddenTransitionError(
                f"{entity_kind.value} can no longer be cancelled from "
                f"status={current_status.value}",
                role=actor.value,
            )

    return requested_status
