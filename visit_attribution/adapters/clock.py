from datetime import UTC, datetime, timedelta


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock frozen at a given instant until advanced."""

    def __init__(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        self._moment = moment

    def now_utc(self) -> datetime:
        return self._moment

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward by timedelta(**kwargs)."""
        self._moment = self._moment + timedelta(**kwargs)
