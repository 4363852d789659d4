# pricewatch/storage/change_history.py

"""Bounded in-memory history of change logs."""

import logging
from collections import deque
from datetime import datetime, timedelta, timezone

from pricewatch.config.settings import Settings
from pricewatch.models.change_log import ChangeLog

logger = logging.getLogger("pricewatch.history")


class ChangeHistory:
    """FIFO ring of the most recent change logs, oldest first.

    Every diff that ran is appended, including zero-change diffs, so
    the history doubles as an audit trail of completed cycles.
    """

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity: int = capacity or Settings.HISTORY_CAPACITY
        self._logs: deque[ChangeLog] = deque(maxlen=self.capacity)

    def __len__(self) -> int:
        return len(self._logs)

    def append(self, change_log: ChangeLog) -> None:
        """Add *change_log*, evicting the oldest entry when full."""
        if len(self._logs) == self.capacity:
            logger.debug(
                "History full (%d), evicting log from %s",
                self.capacity,
                self._logs[0].timestamp.isoformat(),
            )
        self._logs.append(change_log)

    def all(self) -> list[ChangeLog]:
        """Every retained log, oldest first."""
        return list(self._logs)

    def latest(self) -> ChangeLog | None:
        return self._logs[-1] if self._logs else None

    def recent(
        self,
        within_hours: float = 24,
        now: datetime | None = None,
    ) -> list[ChangeLog]:
        """Logs whose timestamp falls inside the last *within_hours*."""
        reference = now or datetime.now(timezone.utc)
        cutoff = reference - timedelta(hours=within_hours)
        return [log for log in self._logs if log.timestamp >= cutoff]

    @staticmethod
    def is_significant(change_log: ChangeLog) -> bool:
        """True when any summary count of *change_log* is nonzero."""
        return change_log.summary.has_changes

    @staticmethod
    def significant(logs: list[ChangeLog]) -> list[ChangeLog]:
        """Filter *logs* down to the ones worth notifying about."""
        return [log for log in logs if ChangeHistory.is_significant(log)]

    def clear(self) -> int:
        """Drop all retained logs.

        Returns the number of logs that were removed.
        """
        count = len(self._logs)
        self._logs.clear()
        logger.info("Change history purged (%d logs removed)", count)
        return count
