# pricewatch/filters/deduplicator.py

"""Product de-duplication by identity key."""

import logging

from pricewatch.models.product import Product, ProductKey

logger = logging.getLogger("pricewatch.filters")


class ProductDeduplicator:
    """Keep one product per ``(category, code)`` key."""

    @staticmethod
    def deduplicate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Remove repeated keys, keeping the first occurrence.

        Order of the surviving products is preserved.  Returns the
        deduplicated list and the count of removed duplicates.
        """
        seen: set[ProductKey] = set()
        kept: list[Product] = []
        removed = 0

        for product in products:
            if product.key in seen:
                logger.debug(
                    "Duplicate key %s ignored (description=%r)",
                    product.key,
                    product.description,
                )
                removed += 1
                continue
            seen.add(product.key)
            kept.append(product)

        if removed:
            logger.info(
                "Deduplication removed %d duplicate rows",
                removed,
            )

        return kept, removed
