# pricewatch/models/snapshot.py

"""Immutable parsed price-list snapshot."""

from dataclasses import dataclass
from datetime import datetime

from pricewatch.models.product import Product, ProductKey


@dataclass(frozen=True)
class Snapshot:
    """Products parsed from one source document at a point in time."""

    products: tuple[Product, ...]
    fingerprint: str
    captured_at: datetime

    def __len__(self) -> int:
        return len(self.products)

    def index(self) -> dict[ProductKey, Product]:
        """Map each identity key to its product; the first occurrence wins."""
        index: dict[ProductKey, Product] = {}
        for product in self.products:
            index.setdefault(product.key, product)
        return index

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(p.category for p in self.products))
