from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from dinecore.application.mappers.entity_mapper import StoredEntity, stored_entity
from dinecore.application.mappers.status_mapper import confirmed_status
from dinecore.application.metrics.lifecycle import record_transition, record_transition_rejected
from dinecore.application.ports.api import RemoteRejectedError, StatusGateway
from dinecore.application.ports.session import SessionContext
from dinecore.application.use_cases.action_guard import ActionGuard, action_key
from dinecore.domain.common.errors import TransitionError
from dinecore.domain.lifecycle.machine import (
    ForbiddenTransitionError,
    InvalidTransitionError,
    decide_transition,
    parse_kind,
    parse_status,
)
from dinecore.domain.lifecycle.states import CANCELLED, ActorRole, EntityKind, Status

logger = logging.getLogger(__name__)


class TransitionRejectedError(TransitionError):
    """The store refused a change the client rules allowed; its state wins, so refresh."""

    refresh_required = True

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = {"upstreamStatus": status_code, "refreshRequired": True}


@dataclass(frozen=True)
class StatusChangeResult:
    kind: EntityKind
    entity_id: str
    previous_status: Status
    status: Status
    entity: StoredEntity | None = field(default=None, compare=False)
    payload: dict[str, Any] = field(default_factory=dict, compare=False)


def _rejection_reason(exc: TransitionError) -> str:
    if isinstance(exc, ForbiddenTransitionError):
        return "forbidden"
    if isinstance(exc, InvalidTransitionError):
        return "invalid"
    return "unknown_kind"


class _StatusChange:
    def __init__(self, gateway: StatusGateway, guard: ActionGuard | None = None) -> None:
        self._gateway = gateway
        self._guard = guard or ActionGuard()

    def _check(
        self,
        kind: EntityKind,
        current: Status | str,
        requested: Status | str,
        role: ActorRole,
    ) -> tuple[Status, Status]:
        decision = decide_transition(kind, current, requested, role)
        if decision.error is not None:
            record_transition_rejected(kind.value, _rejection_reason(decision.error))
            raise decision.error
        return parse_status(kind, current), parse_status(kind, requested)

    async def _send(
        self,
        key: str,
        kind: EntityKind,
        entity_id: str,
        current_status: Status,
        requested_status: Status,
        call,
    ) -> StatusChangeResult:
        try:
            payload = await self._guard.run(key, call)
        except RemoteRejectedError as exc:
            record_transition_rejected(kind.value, "store")
            logger.warning(
                "status_change_rejected",
                extra={
                    "entity_kind": kind.value,
                    "entity_id": entity_id,
                    "status_code": exc.status_code,
                },
            )
            raise TransitionRejectedError(str(exc), status_code=exc.status_code) from exc

        payload = payload or {}
        entity = stored_entity(kind, payload)
        status = confirmed_status(kind, payload, requested_status)
        record_transition(kind.value, current_status.value, status.value)
        logger.info(
            "status_changed",
            extra={
                "entity_kind": kind.value,
                "entity_id": entity_id,
                "from_status": current_status.value,
                "to_status": status.value,
            },
        )
        return StatusChangeResult(
            kind=kind,
            entity_id=entity_id,
            previous_status=current_status,
            status=status,
            entity=entity,
            payload=payload,
        )


class ChangeStatus(_StatusChange):
    """Admin-driven move along the transition table."""

    async def execute(
        self,
        kind: EntityKind | str,
        entity_id: str,
        current_status: Status | str,
        requested_status: Status | str,
        session: SessionContext,
    ) -> StatusChangeResult:
        entity_kind = parse_kind(kind)
        current, requested = self._check(entity_kind, current_status, requested_status, session.role)
        key = action_key("status", entity_kind.value, entity_id)
        return await self._send(
            key,
            entity_kind,
            entity_id,
            current,
            requested,
            lambda: self._gateway.update_status(entity_kind, entity_id, requested.value, session),
        )


class CancelByCustomer(_StatusChange):
    async def execute(
        self,
        kind: EntityKind | str,
        entity_id: str,
        current_status: Status | str,
        session: SessionContext,
    ) -> StatusChangeResult:
        entity_kind = parse_kind(kind)
        cancelled = CANCELLED[entity_kind]
        current, requested = self._check(
            entity_kind, current_status, cancelled, ActorRole.CUSTOMER
        )
        key = action_key("cancel", entity_kind.value, entity_id)

        async def call() -> dict[str, Any]:
            if entity_kind == EntityKind.ORDER:
                await self._gateway.cancel_order(entity_id, session)
                return {"status": cancelled.value}
            return await self._gateway.update_status(
                entity_kind, entity_id, cancelled.value, session
            )

        return await self._send(key, entity_kind, entity_id, current, requested, call)
