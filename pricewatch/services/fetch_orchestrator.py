# pricewatch/services/fetch_orchestrator.py

"""Runs fetch cycles: fetch, fingerprint, parse, diff, swap, record."""

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pricewatch.config.settings import Settings
from pricewatch.errors import PriceListUnavailableError
from pricewatch.models.change_log import ChangeLog
from pricewatch.models.fetch_result import CacheInfo, FetchResult
from pricewatch.models.snapshot import Snapshot
from pricewatch.scrapers.fingerprint import fingerprint
from pricewatch.scrapers.price_list_fetcher import (
    FetchError,
    PriceListFetcher,
)
from pricewatch.scrapers.price_list_parser import (
    ParseError,
    PriceListParser,
)
from pricewatch.services.differ import diff
from pricewatch.storage.change_history import ChangeHistory
from pricewatch.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("pricewatch.orchestrator")

Notifier = Callable[[ChangeLog], Any]


@dataclass(frozen=True)
class CycleOutcome:
    """What one fetch cycle produced."""

    updated: bool
    snapshot: Snapshot
    change_log: ChangeLog | None = None
    stale: bool = False
    error: str | None = None


class FetchOrchestrator:
    """Sequences one fetch cycle under a single-flight guard.

    The orchestrator is the only writer of its :class:`SnapshotStore`
    and :class:`ChangeHistory`.  Concurrent triggers (scheduler tick,
    manual refresh) that arrive while a cycle is running wait for that
    cycle and receive its outcome instead of starting another fetch.
    """

    def __init__(
        self,
        source_url: str | None = None,
        fetcher: PriceListFetcher | None = None,
        parser: PriceListParser | None = None,
        store: SnapshotStore | None = None,
        history: ChangeHistory | None = None,
        timeout: float | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.settings = Settings()
        self.source_url = source_url or self.settings.SOURCE_URL
        self.timeout = (
            timeout if timeout is not None
            else self.settings.REQUEST_TIMEOUT
        )
        self.fetcher = fetcher or PriceListFetcher()
        self.parser = parser or PriceListParser()
        self.notifier = notifier
        self._store = store if store is not None else SnapshotStore()
        self._history = (
            history if history is not None else ChangeHistory()
        )
        self._inflight: asyncio.Task[CycleOutcome] | None = None
        self._last_fetch: datetime | None = None

    # ── Read-only accessors for collaborators ────────────

    @property
    def store(self) -> SnapshotStore:
        return self._store

    @property
    def history(self) -> ChangeHistory:
        return self._history

    @property
    def last_fetch(self) -> datetime | None:
        """When the source last delivered a usable document."""
        return self._last_fetch

    # ── Cycle ────────────────────────────────────────────

    def _fallback(
        self,
        prior: Snapshot | None,
        failure: FetchError | ParseError,
    ) -> CycleOutcome:
        """Serve the previous snapshot as stale, or fail if there is none."""
        if prior is None:
            logger.error(
                "Cycle failed and no snapshot is available: %s",
                failure,
            )
            raise PriceListUnavailableError(failure)
        logger.warning(
            "Cycle failed, serving stale snapshot from %s: %s",
            prior.captured_at.isoformat(),
            failure,
        )
        return CycleOutcome(
            updated=False,
            snapshot=prior,
            stale=True,
            error=str(failure),
        )

    async def _notify(self, change_log: ChangeLog) -> None:
        """Hand a significant, non-baseline change log to the notifier."""
        if self.notifier is None or change_log.is_baseline:
            return
        if not self._history.is_significant(change_log):
            return
        try:
            result = self.notifier(change_log)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.error(
                "Notifier failed for change log at %s: %s",
                change_log.timestamp.isoformat(),
                exc,
                exc_info=True,
            )

    async def _cycle(self) -> CycleOutcome:
        prior = self._store.current()

        # The network call is the only blocking step
        fetched = await asyncio.to_thread(
            self.fetcher.fetch, self.source_url, self.timeout
        )
        if isinstance(fetched, FetchError):
            return self._fallback(prior, fetched)

        digest = fingerprint(fetched.content)
        if prior is not None and self._store.fingerprint_matches(digest):
            self._last_fetch = fetched.fetched_at
            logger.info(
                "Document unchanged (fingerprint %s), reusing snapshot",
                digest[:12],
            )
            return CycleOutcome(updated=False, snapshot=prior)

        parsed = self.parser.parse(fetched)
        if isinstance(parsed, ParseError):
            return self._fallback(prior, parsed)

        snapshot = Snapshot(
            products=tuple(parsed.products),
            fingerprint=digest,
            captured_at=fetched.fetched_at,
        )
        change_log = diff(prior, snapshot)
        self._store.replace(snapshot)
        self._history.append(change_log)
        self._last_fetch = fetched.fetched_at

        summary = change_log.summary
        logger.info(
            "Snapshot updated: %d products, %d changes "
            "(+%d price up, %d price down, %d new, %d removed, "
            "%d opened, %d disturbed)",
            len(snapshot),
            len(change_log.records),
            summary.increased,
            summary.decreased,
            summary.new,
            summary.removed,
            summary.opened,
            summary.disturbed,
        )

        await self._notify(change_log)
        return CycleOutcome(
            updated=True,
            snapshot=snapshot,
            change_log=change_log,
        )

    def _release(self, task: "asyncio.Task[CycleOutcome]") -> None:
        if self._inflight is task:
            self._inflight = None

    async def run_cycle(self) -> CycleOutcome:
        """Run a fetch cycle, or join the one already in flight.

        Raises:
            PriceListUnavailableError: The cycle failed and no snapshot
                has ever been obtained.
        """
        task = self._inflight
        if task is None or task.done():
            task = asyncio.create_task(self._cycle())
            self._inflight = task
            task.add_done_callback(self._release)
        else:
            logger.info("Cycle already in flight, joining it")
        return await asyncio.shield(task)

    async def fetch_data(self) -> FetchResult:
        """Run (or join) a cycle and shape it for the API layer."""
        outcome = await self.run_cycle()
        return FetchResult(
            products=outcome.snapshot.products,
            updated=outcome.updated,
            stale=outcome.stale,
            last_update=outcome.snapshot.captured_at,
            last_fetch=self._last_fetch,
            changes=(
                outcome.change_log.records
                if outcome.change_log is not None
                else None
            ),
            error=outcome.error,
        )

    # ── Status queries ───────────────────────────────────

    def get_cached_data(self) -> FetchResult | None:
        """Current snapshot as a result, without triggering a cycle."""
        snapshot = self._store.current()
        if snapshot is None:
            return None
        return FetchResult(
            products=snapshot.products,
            updated=False,
            stale=False,
            last_update=snapshot.captured_at,
            last_fetch=self._last_fetch,
        )

    def get_cache_info(self) -> CacheInfo:
        snapshot = self._store.current()
        return CacheInfo(
            has_data=snapshot is not None,
            last_update=(
                snapshot.captured_at if snapshot is not None else None
            ),
            last_fetch=self._last_fetch,
            data_count=len(snapshot) if snapshot is not None else 0,
        )

    def close(self) -> None:
        """Release the fetcher's HTTP session."""
        self.fetcher.close()
