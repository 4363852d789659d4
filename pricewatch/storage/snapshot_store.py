# pricewatch/storage/snapshot_store.py

"""Holder of the single current price-list snapshot."""

import logging
import threading

from pricewatch.models.snapshot import Snapshot

logger = logging.getLogger("pricewatch.store")


class SnapshotStore:
    """Keeps exactly one current :class:`Snapshot`.

    Snapshots are immutable, so a reader always sees either the old or
    the new one in full.  The lock only orders writers against readers
    that compare fingerprints.
    """

    def __init__(self) -> None:
        self._current: Snapshot | None = None
        self._lock = threading.Lock()

    def current(self) -> Snapshot | None:
        """Return the current snapshot, or ``None`` before the first parse."""
        with self._lock:
            return self._current

    def replace(self, snapshot: Snapshot) -> Snapshot | None:
        """Swap in *snapshot* and return the one it superseded."""
        with self._lock:
            previous = self._current
            self._current = snapshot
        logger.info(
            "Snapshot replaced: %d products, fingerprint %s",
            len(snapshot),
            snapshot.fingerprint[:12],
        )
        return previous

    def fingerprint_matches(self, fingerprint: str) -> bool:
        """True when the current snapshot came from identical bytes."""
        with self._lock:
            return (
                self._current is not None
                and self._current.fingerprint == fingerprint
            )

    def clear(self) -> None:
        """Forget the current snapshot."""
        with self._lock:
            self._current = None
        logger.info("Snapshot store cleared")
