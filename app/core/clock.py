import logging
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import get_business_timezone

logger = logging.getLogger(__name__)


class BusinessClock:
    """
    Supplies "now" in the business timezone as naive local values.

    All timestamps in the schema are naive business-local datetimes. If the
    configured zone cannot be resolved the clock falls back to the machine's
    local time and says so once.
    """

    def __init__(self, tz_name: Optional[str] = None):
        self.tz_name = tz_name or get_business_timezone()
        try:
            self._tz: Optional[ZoneInfo] = ZoneInfo(self.tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                "Business timezone could not be resolved; using system local time",
                extra={"timezone": self.tz_name},
            )
            self._tz = None

    @property
    def is_fallback(self) -> bool:
        return self._tz is None

    def now(self) -> datetime:
        if self._tz is None:
            current = datetime.now()
        else:
            current = datetime.now(self._tz).replace(tzinfo=None)
        return current.replace(microsecond=0)

    def today(self) -> date:
        return self.now().date()

    def current_time(self) -> time:
        return self.now().time()

    def localize(self, value: Optional[datetime]) -> Optional[datetime]:
        """Bring a client-supplied timestamp onto the naive business-local clock."""
        if value is None or value.tzinfo is None:
            return value
        if self._tz is None:
            return value.astimezone().replace(tzinfo=None)
        return value.astimezone(self._tz).replace(tzinfo=None)


_default_clock: Optional[BusinessClock] = None


def get_clock() -> BusinessClock:
    global _default_clock

    if _default_clock is None or _default_clock.tz_name != get_business_timezone():
        _default_clock = BusinessClock()
    return _default_clock
