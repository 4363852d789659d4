# pricewatch/filters/product_validator.py

"""Product validation: drop unusable price-list rows before snapshotting."""

import logging

from pricewatch.config.settings import Settings
from pricewatch.models.product import Product

logger = logging.getLogger("pricewatch.filters")


class ProductValidator:
    """Validate products and drop those with missing or implausible fields."""

    @staticmethod
    def rejection_reason(
        product: Product,
        max_price: int | None = None,
    ) -> str | None:
        """Return why *product* is unusable, or ``None`` if it is valid."""
        ceiling = (
            max_price if max_price is not None
            else Settings.MAX_PLAUSIBLE_PRICE
        )
        if not product.code.strip():
            return "missing code"
        if not product.description.strip():
            return "missing description"
        if product.price <= 0:
            return "non-positive price"
        if product.price > ceiling:
            return "implausible price"
        return None

    @staticmethod
    def validate(
        products: list[Product],
        max_price: int | None = None,
    ) -> tuple[list[Product], int]:
        """Drop products without code/description or with a bad price.

        Returns the valid products and the count of dropped items.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            reason = ProductValidator.rejection_reason(product, max_price)
            if reason is not None:
                logger.debug(
                    "Dropped row (%s): category=%s code=%r price=%d",
                    reason,
                    product.category,
                    product.code,
                    product.price,
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid rows",
                dropped,
            )

        return valid, dropped
