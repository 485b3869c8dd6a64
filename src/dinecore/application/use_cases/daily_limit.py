from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from dinecore.application.metrics.lifecycle import record_daily_limit_block
from dinecore.application.ports.api import (
    RemoteRejectedError,
    ReservationGateway,
    TransportError,
)
from dinecore.application.ports.session import SessionContext
from dinecore.domain.policies.daily_limit import (
    DAILY_RESERVATION_LIMIT,
    DailyLimitReachedError,
    ensure_below_daily_limit,
)

logger = logging.getLogger(__name__)


class DailyLimitCheckFailedError(TransportError):
    pass


@dataclass(frozen=True)
class DailyBookingCount:
    booking_date: date
    count: int
    limit: int = DAILY_RESERVATION_LIMIT

    @property
    def allowed(self) -> bool:
        return self.count < self.limit


class DailyLimitGuard:
    def __init__(
        self,
        gateway: ReservationGateway,
        limit: int = DAILY_RESERVATION_LIMIT,
    ) -> None:
        self._gateway = gateway
        self._limit = limit

    async def count(self, booking_date: date, session: SessionContext) -> DailyBookingCount:
        """Look the count up again on every call; a failed lookup never reads as zero."""
        try:
            count = await self._gateway.count_daily_reservations(booking_date, session)
        except (TransportError, RemoteRejectedError) as exc:
            logger.warning(
                "daily_limit_check_failed",
                extra={"booking_date": booking_date.isoformat()},
            )
            raise DailyLimitCheckFailedError(
                f"could not verify existing reservations: {exc}",
                status_code=exc.status_code,
            ) from exc
        return DailyBookingCount(booking_date=booking_date, count=count, limit=self._limit)

    async def check(self, booking_date: date, session: SessionContext) -> DailyBookingCount:
        result = await self.count(booking_date, session)
        try:
            ensure_below_daily_limit(booking_date, result.count, self._limit)
        except DailyLimitReachedError:
            record_daily_limit_block()
            raise
        return result
