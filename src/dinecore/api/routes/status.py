from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from dinecore.api.deps import (
    get_action_guard,
    get_gateway,
    kind_from_collection,
    session_from_request,
)
from dinecore.application.dto.requests import CancelRequest, StatusChangeRequest
from dinecore.application.dto.responses import AllowedTransitionsResponse, StatusChangeResponse
from dinecore.application.ports.api import StatusGateway
from dinecore.application.use_cases.action_guard import ActionGuard
from dinecore.application.use_cases.change_status import (
    CancelByCustomer,
    ChangeStatus,
    StatusChangeResult,
)
from dinecore.domain.lifecycle.machine import (
    allowed_targets,
    is_terminal,
    parse_role,
    parse_status,
)
from dinecore.domain.lifecycle.states import ActorRole

router = APIRouter()


def _to_response(result: StatusChangeResult) -> StatusChangeResponse:
    return StatusChangeResponse(
        kind=result.kind.value,
        entityId=result.entity_id,
        previousStatus=result.previous_status.value,
        status=result.status.value,
        updatedAt=(
            result.entity.updated_at.isoformat()
            if result.entity is not None and result.entity.updated_at is not None
            else None
        ),
    )


@router.get("/v1/{collection}/transitions", response_model=AllowedTransitionsResponse)
def transitions(
    collection: str,
    current_status: str = Query(alias="status"),
    role: str = Query(default=ActorRole.ADMIN.value),
) -> AllowedTransitionsResponse:
    kind = kind_from_collection(collection)
    actor = parse_role(role)
    current = parse_status(kind, current_status)
    return AllowedTransitionsResponse(
        kind=kind.value,
        status=current.value,
        role=actor.value,
        allowed=sorted(target.value for target in allowed_targets(kind, current, actor)),
        terminal=is_terminal(kind, current),
    )


@router.post("/v1/{collection}/{entity_id}/status", response_model=StatusChangeResponse)
async def change_status(
    collection: str,
    entity_id: str,
    request_dto: StatusChangeRequest,
    request: Request,
    gateway: StatusGateway = Depends(get_gateway),
    guard: ActionGuard = Depends(get_action_guard),
) -> StatusChangeResponse:
    result = await ChangeStatus(gateway, guard).execute(
        kind=kind_from_collection(collection),
        entity_id=entity_id,
        current_status=request_dto.current_status,
        requested_status=request_dto.status,
        session=session_from_request(request),
    )
    return _to_response(result)


@router.post("/v1/{collection}/{entity_id}/cancel", response_model=StatusChangeResponse)
async def cancel(
    collection: str,
    entity_id: str,
    request_dto: CancelRequest,
    request: Request,
    gateway: StatusGateway = Depends(get_gateway),
    guard: ActionGuard = Depends(get_action_guard),
) -> StatusChangeResponse:
    result = await CancelByCustomer(gateway, guard).execute(
        kind=kind_from_collection(collection),
        entity_id=entity_id,
        current_status=request_dto.current_status,
        session=session_from_request(request),
    )
    return _to_response(result)
