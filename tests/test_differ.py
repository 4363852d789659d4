# tests/test_differ.py

"""Tests for snapshot diffing and change summaries."""

import unittest
from datetime import datetime, timezone

from pricewatch.models.product import Product, ProductStatus
from pricewatch.models.snapshot import Snapshot
from pricewatch.services.differ import diff

OPEN = ProductStatus(text="Buka", available=True, status="open")
DOWN = ProductStatus(text="Gangguan", available=False, status="disturbance")

T0 = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)
T1 = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def _product(
    code: str,
    price: int,
    status: ProductStatus = OPEN,
    category: str = "A",
) -> Product:
    return Product(
        category=category,
        code=code,
        description=f"Product {code}",
        price=price,
        status=status,
    )


def _snapshot(
    *products: Product, fp: str = "fp", at: datetime = T1,
) -> Snapshot:
    return Snapshot(products=tuple(products), fingerprint=fp, captured_at=at)


class TestPriceChanges(unittest.TestCase):
    """Price movements are recorded with delta and direction."""

    def test_single_increase(self) -> None:
        """A/1 going from 100 to 150 is one 'price' record."""
        old = _snapshot(_product("1", 100), fp="old", at=T0)
        new = _snapshot(_product("1", 150), fp="new")
        log = diff(old, new)

        self.assertEqual(len(log.records), 1)
        record = log.records[0]
        self.assertEqual(record.change_type, "price")
        assert record.price_change is not None
        self.assertEqual(record.price_change.old, 100)
        self.assertEqual(record.price_change.new, 150)
        self.assertEqual(record.price_change.delta, 50)
        self.assertEqual(record.price_change.direction, "increase")
        self.assertEqual(record.price_change.percent, 50.0)
        self.assertIsNone(record.status_change)

        self.assertEqual(log.summary.increased, 1)
        self.assertEqual(log.summary.total_increase, 50)
        self.assertEqual(log.summary.decreased, 0)
        self.assertEqual(log.summary.total_products, 1)

    def test_decrease_totals_are_positive(self) -> None:
        old = _snapshot(_product("1", 10000), _product("2", 5000))
        new = _snapshot(_product("1", 9000), _product("2", 4500))
        log = diff(old, new)
        self.assertEqual(log.summary.decreased, 2)
        self.assertEqual(log.summary.total_decrease, 1500)
        record = log.records[0]
        assert record.price_change is not None
        self.assertEqual(record.price_change.delta, -1000)
        self.assertEqual(record.price_change.direction, "decrease")
        self.assertEqual(record.price_change.percent, -10.0)

    def test_unchanged_product_not_reported(self) -> None:
        old = _snapshot(_product("1", 100), _product("2", 200))
        new = _snapshot(_product("1", 100), _product("2", 250))
        log = diff(old, new)
        self.assertEqual([r.code for r in log.records], ["2"])


class TestStatusChanges(unittest.TestCase):
    """Status transitions, alone or combined with a price change."""

    def test_status_only(self) -> None:
        old = _snapshot(_product("1", 100, OPEN))
        new = _snapshot(_product("1", 100, DOWN))
        record = diff(old, new).records[0]
        self.assertEqual(record.change_type, "status")
        assert record.status_change is not None
        self.assertEqual(record.status_change.old, OPEN)
        self.assertEqual(record.status_change.new, DOWN)
        self.assertIsNone(record.price_change)

    def test_price_and_status_is_both(self) -> None:
        old = _snapshot(_product("1", 100, DOWN))
        new = _snapshot(_product("1", 120, OPEN))
        log = diff(old, new)
        record = log.records[0]
        self.assertEqual(record.change_type, "both")
        self.assertIsNotNone(record.price_change)
        self.assertIsNotNone(record.status_change)
        self.assertEqual(log.summary.opened, 1)
        self.assertEqual(log.summary.increased, 1)

    def test_case_only_label_change_ignored(self) -> None:
        shouting = ProductStatus(text="BUKA ", available=True, status="open")
        old = _snapshot(_product("1", 100, OPEN))
        new = _snapshot(_product("1", 100, shouting))
        self.assertEqual(diff(old, new).records, ())

    def test_opened_and_disturbed_counts(self) -> None:
        old = _snapshot(
            _product("1", 100, DOWN), _product("2", 100, OPEN),
        )
        new = _snapshot(
            _product("1", 100, OPEN), _product("2", 100, DOWN),
        )
        summary = diff(old, new).summary
        self.assertEqual(summary.opened, 1)
        self.assertEqual(summary.disturbed, 1)

    def test_relabel_within_same_kind_not_counted(self) -> None:
        """'Buka' to 'Normal' is a status record but not an opening."""
        normal = ProductStatus(text="Normal", available=True, status="open")
        old = _snapshot(_product("1", 100, OPEN))
        new = _snapshot(_product("1", 100, normal))
        log = diff(old, new)
        self.assertEqual(log.records[0].change_type, "status")
        self.assertEqual(log.summary.opened, 0)
        self.assertEqual(log.summary.disturbed, 0)


class TestMembershipChanges(unittest.TestCase):
    """Products appearing and disappearing between snapshots."""

    def test_new_and_removed(self) -> None:
        old = _snapshot(_product("1", 100), _product("2", 200))
        new = _snapshot(_product("2", 200), _product("3", 300))
        log = diff(old, new)
        by_code = {r.code: r for r in log.records}

        self.assertEqual(by_code["3"].change_type, "new")
        self.assertEqual(by_code["3"].price, 300)
        self.assertEqual(by_code["1"].change_type, "removed")
        self.assertEqual(by_code["1"].price, 100)
        self.assertNotIn("2", by_code)
        self.assertEqual(log.summary.new, 1)
        self.assertEqual(log.summary.removed, 1)

    def test_same_code_in_other_category_is_distinct(self) -> None:
        old = _snapshot(_product("5", 100, category="TELKOMSEL"))
        new = _snapshot(_product("5", 100, category="XL"))
        types = sorted(r.change_type for r in diff(old, new).records)
        self.assertEqual(types, ["new", "removed"])

    def test_baseline_marks_everything_new(self) -> None:
        new = _snapshot(_product("1", 100), _product("2", 200))
        log = diff(None, new)
        self.assertTrue(log.is_baseline)
        self.assertIsNone(log.previous_fingerprint)
        self.assertEqual(
            [r.change_type for r in log.records], ["new", "new"]
        )
        self.assertEqual(log.summary.new, 2)


class TestDiffProperties(unittest.TestCase):
    """Order independence, completeness and repeatability."""

    def setUp(self) -> None:
        self.old_products = [
            _product("1", 100),
            _product("2", 200, DOWN),
            _product("3", 300),
            _product("9", 900, category="B"),
        ]
        self.new_products = [
            _product("1", 110),
            _product("2", 200, OPEN),
            _product("4", 400),
            _product("9", 900, category="B"),
        ]

    def test_product_order_has_no_effect(self) -> None:
        forward = diff(
            _snapshot(*self.old_products), _snapshot(*self.new_products)
        )
        backward = diff(
            _snapshot(*reversed(self.old_products)),
            _snapshot(*reversed(self.new_products)),
        )
        self.assertEqual(forward.records, backward.records)
        self.assertEqual(forward.summary, backward.summary)

    def test_every_changed_key_appears_exactly_once(self) -> None:
        log = diff(
            _snapshot(*self.old_products), _snapshot(*self.new_products)
        )
        keys = [r.key for r in log.records]
        self.assertEqual(len(keys), len(set(keys)))
        self.assertEqual(
            set(keys), {("A", "1"), ("A", "2"), ("A", "3"), ("A", "4")}
        )

    def test_records_sorted_by_key(self) -> None:
        log = diff(
            _snapshot(*self.old_products), _snapshot(*self.new_products)
        )
        keys = [r.key for r in log.records]
        self.assertEqual(keys, sorted(keys))

    def test_repeatable(self) -> None:
        old = _snapshot(*self.old_products, fp="old", at=T0)
        new = _snapshot(*self.new_products, fp="new")
        self.assertEqual(diff(old, new), diff(old, new))

    def test_log_metadata(self) -> None:
        old = _snapshot(*self.old_products, fp="old", at=T0)
        new = _snapshot(*self.new_products, fp="new", at=T1)
        log = diff(old, new)
        self.assertEqual(log.timestamp, T1)
        self.assertEqual(log.fingerprint, "new")
        self.assertEqual(log.previous_fingerprint, "old")
        self.assertFalse(log.is_baseline)
        self.assertEqual(log.summary.total_products, 4)

    def test_repeated_key_first_occurrence_wins(self) -> None:
        """A snapshot built outside the parser may repeat a key."""
        old = _snapshot(_product("1", 100))
        changed_first = _snapshot(_product("1", 200), _product("1", 100))
        unchanged_first = _snapshot(_product("1", 100), _product("1", 200))

        record = diff(old, changed_first).records[0]
        self.assertEqual(record.change_type, "price")
        assert record.price_change is not None
        self.assertEqual(record.price_change.new, 200)
        self.assertEqual(diff(old, unchanged_first).records, ())

    def test_identical_snapshots_have_no_changes(self) -> None:
        log = diff(
            _snapshot(*self.old_products), _snapshot(*self.old_products)
        )
        self.assertEqual(log.records, ())
        self.assertFalse(log.summary.has_changes)


if __name__ == "__main__":
    unittest.main()
