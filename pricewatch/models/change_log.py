# pricewatch/models/change_log.py

"""Change records produced by diffing two snapshots."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pricewatch.models.product import ProductKey, ProductStatus

ChangeType = Literal["new", "removed", "price", "status", "both"]
PriceDirection = Literal["increase", "decrease"]


@dataclass(frozen=True)
class PriceChange:
    """Price movement of one product between two snapshots."""

    old: int
    new: int
    delta: int
    direction: PriceDirection

    @property
    def percent(self) -> float:
        """Relative movement in percent, one decimal place."""
        if self.old == 0:
            return 0.0
        return round(self.delta / self.old * 100, 1)

    def to_dict(self) -> dict[str, object]:
        return {
            "old": self.old,
            "new": self.new,
            "delta": self.delta,
            "direction": self.direction,
            "percent": self.percent,
        }


@dataclass(frozen=True)
class StatusChange:
    """Status transition of one product between two snapshots."""

    old: ProductStatus
    new: ProductStatus

    def to_dict(self) -> dict[str, object]:
        return {"old": self.old.to_dict(), "new": self.new.to_dict()}


@dataclass(frozen=True)
class ChangeRecord:
    """How one product differs between the old and the new snapshot.

    ``price`` and ``status`` describe the side that still exists: the
    new snapshot, or the old one for a ``removed`` record.
    """

    category: str
    code: str
    description: str
    change_type: ChangeType
    price: int
    status: ProductStatus
    price_change: PriceChange | None = None
    status_change: StatusChange | None = None

    @property
    def key(self) -> ProductKey:
        return (self.category, self.code)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "category": self.category,
            "code": self.code,
            "description": self.description,
            "changeType": self.change_type,
            "price": self.price,
            "status": self.status.to_dict(),
        }
        if self.price_change is not None:
            data["priceChange"] = self.price_change.to_dict()
        if self.status_change is not None:
            data["statusChange"] = self.status_change.to_dict()
        return data


@dataclass(frozen=True)
class ChangeSummary:
    """Aggregate counts over the records of one change log."""

    increased: int = 0
    decreased: int = 0
    total_increase: int = 0
    total_decrease: int = 0
    opened: int = 0
    disturbed: int = 0
    new: int = 0
    removed: int = 0
    total_products: int = 0

    @property
    def has_changes(self) -> bool:
        """True when any movement count is nonzero."""
        return any((
            self.increased,
            self.decreased,
            self.opened,
            self.disturbed,
            self.new,
            self.removed,
        ))

    def to_dict(self) -> dict[str, object]:
        return {
            "totalProducts": self.total_products,
            "priceChanges": {
                "increased": self.increased,
                "decreased": self.decreased,
                "totalIncrease": self.total_increase,
                "totalDecrease": self.total_decrease,
            },
            "statusChanges": {
                "opened": self.opened,
                "disturbed": self.disturbed,
            },
            "newProducts": self.new,
            "removedProducts": self.removed,
        }


@dataclass(frozen=True)
class ChangeLog:
    """Result of one diff between consecutive snapshots."""

    timestamp: datetime
    records: tuple[ChangeRecord, ...]
    summary: ChangeSummary
    fingerprint: str
    previous_fingerprint: str | None = None

    @property
    def is_baseline(self) -> bool:
        """True for the first diff, taken against no prior snapshot."""
        return self.previous_fingerprint is None

    def to_dict(self) -> dict[str, object]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "changes": [r.to_dict() for r in self.records],
            "summary": self.summary.to_dict(),
        }
