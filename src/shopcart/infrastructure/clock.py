"""Wall-clock implementation of the Clock port."""

from __future__ import annotations

from datetime import datetime, timezone

from shopcart.domain.service.clock import Clock


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
