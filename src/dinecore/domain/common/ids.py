from __future__ import annotations

from typing import NewType

OrderId = NewType("OrderId", str)
EventId = NewType("EventId", str)
ReservationId = NewType("ReservationId", str)
UserId = NewType("UserId", str)
MenuItemId = NewType("MenuItemId", str)
