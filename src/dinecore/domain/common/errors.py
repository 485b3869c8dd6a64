from __future__ import annotations

from typing import Any


class ValidationError(Exception):
    """Field-level problem, fixed locally and never sent over the network."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.details: dict[str, Any] = {"field": field} if field else {}


class PolicyViolation(Exception):
    """Business-rule rejection the user can fix by changing input."""

    details: dict[str, Any] = {}


class TransitionError(Exception):
    """A status change that the lifecycle rules do not permit."""

    details: dict[str, Any] = {}
