# pricewatch/services/differ.py

"""Pure snapshot comparison."""

from pricewatch.models.change_log import (
    ChangeLog,
    ChangeRecord,
    ChangeSummary,
    ChangeType,
    PriceChange,
    StatusChange,
)
from pricewatch.models.product import Product
from pricewatch.models.snapshot import Snapshot


def _price_change(old: Product, new: Product) -> PriceChange | None:
    if old.price == new.price:
        return None
    delta = new.price - old.price
    return PriceChange(
        old=old.price,
        new=new.price,
        delta=delta,
        direction="increase" if delta > 0 else "decrease",
    )


def _status_change(old: Product, new: Product) -> StatusChange | None:
    if old.status.normalized_text == new.status.normalized_text:
        return None
    return StatusChange(old=old.status, new=new.status)


def _compare(old: Product, new: Product) -> ChangeRecord | None:
    price_change = _price_change(old, new)
    status_change = _status_change(old, new)
    if price_change is None and status_change is None:
        return None

    change_type: ChangeType
    if price_change is not None and status_change is not None:
        change_type = "both"
    elif price_change is not None:
        change_type = "price"
    else:
        change_type = "status"

    return ChangeRecord(
        category=new.category,
        code=new.code,
        description=new.description,
        change_type=change_type,
        price=new.price,
        status=new.status,
        price_change=price_change,
        status_change=status_change,
    )


def _edge_record(product: Product, change_type: ChangeType) -> ChangeRecord:
    return ChangeRecord(
        category=product.category,
        code=product.code,
        description=product.description,
        change_type=change_type,
        price=product.price,
        status=product.status,
    )


def summarize(
    records: list[ChangeRecord], total_products: int,
) -> ChangeSummary:
    """Aggregate counts over *records*."""
    increased = decreased = total_increase = total_decrease = 0
    opened = disturbed = new = removed = 0

    for record in records:
        if record.change_type == "new":
            new += 1
        elif record.change_type == "removed":
            removed += 1

        if record.price_change is not None:
            if record.price_change.direction == "increase":
                increased += 1
                total_increase += record.price_change.delta
            else:
                decreased += 1
                total_decrease += -record.price_change.delta

        change = record.status_change
        if change is not None and change.old.status != change.new.status:
            if change.new.status == "open":
                opened += 1
            elif change.new.status == "disturbance":
                disturbed += 1

    return ChangeSummary(
        increased=increased,
        decreased=decreased,
        total_increase=total_increase,
        total_decrease=total_decrease,
        opened=opened,
        disturbed=disturbed,
        new=new,
        removed=removed,
        total_products=total_products,
    )


def diff(old: Snapshot | None, new: Snapshot) -> ChangeLog:
    """Compare two snapshots and describe every affected product.

    Works over the identity-key index of both sides, so product order
    inside either snapshot has no effect.  Records are sorted by key
    and the log is stamped with ``new.captured_at``; calling this twice
    with the same inputs yields equal logs.
    """
    old_index = old.index() if old is not None else {}
    new_index = new.index()

    records: list[ChangeRecord] = []
    for key in sorted(old_index.keys() | new_index.keys()):
        before = old_index.get(key)
        after = new_index.get(key)
        if before is None and after is not None:
            records.append(_edge_record(after, "new"))
        elif after is None and before is not None:
            records.append(_edge_record(before, "removed"))
        elif before is not None and after is not None:
            record = _compare(before, after)
            if record is not None:
                records.append(record)

    return ChangeLog(
        timestamp=new.captured_at,
        records=tuple(records),
        summary=summarize(records, len(new)),
        fingerprint=new.fingerprint,
        previous_fingerprint=old.fingerprint if old is not None else None,
    )
