# pricewatch/filters/product_filter.py

"""Read-only catalog queries over a product list."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pricewatch.models.product import Product

logger = logging.getLogger("pricewatch.filters")


@dataclass(frozen=True)
class CatalogStats:
    """Aggregate figures for a product list."""

    total: int
    available: int
    unavailable: int
    categories: int
    avg_price: int
    min_price: int
    max_price: int

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "available": self.available,
            "unavailable": self.unavailable,
            "categories": self.categories,
            "avgPrice": self.avg_price,
            "priceRange": {"min": self.min_price, "max": self.max_price},
        }


class ProductFilter:
    """Search and grouping helpers used by the API layer."""

    @staticmethod
    def search(
        products: Iterable[Product],
        query: str | None = None,
        category: str | None = None,
    ) -> list[Product]:
        """Case-insensitive substring match on code/description and category.

        Either filter may be omitted; with neither, every product is
        returned.
        """
        needle = (query or "").strip().lower()
        group = (category or "").strip().lower()

        matched: list[Product] = []
        for product in products:
            if group and group not in product.category.lower():
                continue
            if needle and not (
                needle in product.code.lower()
                or needle in product.description.lower()
            ):
                continue
            matched.append(product)

        logger.debug(
            "Search q=%r category=%r matched %d products",
            query,
            category,
            len(matched),
        )
        return matched

    @staticmethod
    def available_only(products: Iterable[Product]) -> list[Product]:
        return [p for p in products if p.status.available]

    @staticmethod
    def categories(products: Iterable[Product]) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(p.category for p in products))

    @staticmethod
    def group_by_category(
        products: Iterable[Product],
    ) -> dict[str, list[Product]]:
        groups: dict[str, list[Product]] = {}
        for product in products:
            groups.setdefault(product.category, []).append(product)
        return groups

    @staticmethod
    def catalog_stats(products: Iterable[Product]) -> CatalogStats:
        items = list(products)
        prices = [p.price for p in items]
        available = sum(1 for p in items if p.status.available)
        return CatalogStats(
            total=len(items),
            available=available,
            unavailable=len(items) - available,
            categories=len(ProductFilter.categories(items)),
            avg_price=round(sum(prices) / len(prices)) if prices else 0,
            min_price=min(prices) if prices else 0,
            max_price=max(prices) if prices else 0,
        )
