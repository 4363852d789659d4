# pricewatch/models/product.py

"""Product data model for inter-module data flow."""

from dataclasses import dataclass
from typing import Literal

StatusKind = Literal["open", "disturbance", "unknown"]

ProductKey = tuple[str, str]


@dataclass(frozen=True)
class ProductStatus:
    """Availability label of a price-list row."""

    text: str
    available: bool
    status: StatusKind

    @property
    def normalized_text(self) -> str:
        """Lowercased, stripped label used for change comparison."""
        return self.text.strip().lower()

    def to_dict(self) -> dict[str, object]:
        return {
            "text": self.text,
            "available": self.available,
            "status": self.status,
        }


@dataclass(frozen=True)
class Product:
    """Represents a single entry of the published price list."""

    category: str
    code: str
    description: str
    price: int
    status: ProductStatus

    @property
    def key(self) -> ProductKey:
        """Identity key, unique within one snapshot."""
        return (self.category, self.code)

    def to_dict(self) -> dict[str, object]:
        return {
            "category": self.category,
            "code": self.code,
            "description": self.description,
            "price": self.price,
            "status": self.status.to_dict(),
        }
