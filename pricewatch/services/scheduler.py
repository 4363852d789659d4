# pricewatch/services/scheduler.py

"""Fixed-interval trigger for fetch cycles."""

import asyncio
import logging

from pricewatch.config.settings import Settings
from pricewatch.errors import PriceListUnavailableError
from pricewatch.models.fetch_result import FetchResult
from pricewatch.services.fetch_orchestrator import FetchOrchestrator

logger = logging.getLogger("pricewatch.scheduler")


class FetchScheduler:
    """Triggers a fetch cycle immediately and then every *interval* seconds.

    A failing tick is logged and the loop carries on; only :meth:`stop`
    ends it.  Manual refreshes go through the same orchestrator and so
    share its single-flight guard with the timer.
    """

    def __init__(
        self,
        orchestrator: FetchOrchestrator,
        interval: float | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.interval: float = (
            interval if interval is not None
            else Settings.FETCH_INTERVAL
        )
        self._task: asyncio.Task[None] | None = None
        self.ticks: int = 0
        self.failures: int = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def perform_update(self) -> FetchResult | None:
        """Run one cycle; return ``None`` instead of raising on failure."""
        self.ticks += 1
        try:
            result = await self.orchestrator.fetch_data()
        except PriceListUnavailableError as exc:
            self.failures += 1
            logger.error("Update failed, no data available yet: %s", exc)
            return None
        except Exception as exc:
            self.failures += 1
            logger.error(
                "Update failed unexpectedly: %s", exc, exc_info=True,
            )
            return None

        if result.stale:
            logger.warning(
                "Update served stale data (%s)", result.error,
            )
        elif result.updated:
            logger.info("Update completed, data was refreshed")
        else:
            logger.info("Update completed, no changes detected")
        return result

    async def _loop(self, cycles: int | None) -> None:
        done = 0
        while cycles is None or done < cycles:
            await self.perform_update()
            done += 1
            if cycles is not None and done >= cycles:
                break
            await asyncio.sleep(self.interval)

    def start(self, cycles: int | None = None) -> None:
        """Begin ticking on the running event loop.

        Args:
            cycles: Stop on its own after this many ticks. ``None``
                runs until :meth:`stop`.
        """
        if self.is_running:
            logger.warning("Scheduler is already running")
            return
        logger.info(
            "Starting scheduler with interval %.1fs", self.interval,
        )
        self._task = asyncio.create_task(self._loop(cycles))

    async def stop(self) -> None:
        """Cancel the timer loop and wait for it to wind down."""
        if self._task is None:
            logger.warning("Scheduler is not running")
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Only the loop's own cancellation is expected here
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        logger.info("Scheduler stopped after %d ticks", self.ticks)

    async def wait(self) -> None:
        """Block until a bounded run started with ``cycles`` finishes."""
        if self._task is not None:
            await self._task

    async def manual_update(self) -> FetchResult | None:
        """On-demand refresh outside the timer."""
        logger.info("Performing manual update")
        return await self.perform_update()

    def get_status(self) -> dict[str, object]:
        return {
            "isRunning": self.is_running,
            "interval": self.interval,
            "ticks": self.ticks,
            "failures": self.failures,
            "cacheInfo": self.orchestrator.get_cache_info().to_dict(),
        }
