from __future__ import annotations

from typing import Any

from dinecore.domain.lifecycle.machine import InvalidTransitionError, parse_status
from dinecore.domain.lifecycle.states import EntityKind, Status

_STATUS_KEYS = ("status", "order_status")


def entity_record(payload: dict[str, Any], kind: EntityKind) -> dict[str, Any]:
    data = payload.get("data", payload)
    if isinstance(data, dict) and isinstance(data.get(kind.value), dict):
        return data[kind.value]
    if isinstance(payload.get(kind.value), dict):
        return payload[kind.value]
    return data if isinstance(data, dict) else {}


def confirmed_status(kind: EntityKind, payload: dict[str, Any], requested: Status) -> Status:
    """Status the store reports after an update, or the requested one if it echoes nothing."""
    entity = entity_record(payload, kind)
    for key in _STATUS_KEYS:
        value = entity.get(key)
        if not value:
            continue
        try:
            return parse_status(kind, value)
        except InvalidTransitionError:
            # status="success" style envelopes
            continue
    return requested
