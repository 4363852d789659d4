# pricewatch/models/fetch_result.py

"""Result contracts handed to the API / presentation layer."""

from dataclasses import dataclass
from datetime import datetime

from pricewatch.models.change_log import ChangeRecord
from pricewatch.models.product import Product


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class FetchResult:
    """Products currently known plus how the last cycle went."""

    products: tuple[Product, ...]
    updated: bool
    stale: bool
    last_update: datetime | None
    last_fetch: datetime | None
    changes: tuple[ChangeRecord, ...] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "data": [p.to_dict() for p in self.products],
            "updated": self.updated,
            "stale": self.stale,
            "lastUpdate": _iso(self.last_update),
            "lastFetch": _iso(self.last_fetch),
        }
        if self.changes is not None:
            data["changes"] = [c.to_dict() for c in self.changes]
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class CacheInfo:
    """Lightweight status of the snapshot cache."""

    has_data: bool
    last_update: datetime | None
    last_fetch: datetime | None
    data_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "hasData": self.has_data,
            "lastUpdate": _iso(self.last_update),
            "lastFetch": _iso(self.last_fetch),
            "dataCount": self.data_count,
        }
