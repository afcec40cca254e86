"""Clock port: the decider reads time only through this."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Return the current moment."""
