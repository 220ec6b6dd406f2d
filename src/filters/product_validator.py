# src/filters/product_validator.py

"""Catalog record validation: drop invalid records before import."""

import logging
import uuid

from src.models.errors import ValidationError
from src.models.product import Product

logger = logging.getLogger("ecoshop.filters")


class ProductValidator:
    """Parse raw catalog records and drop those that fail validation."""

    @staticmethod
    def validate(
        records: list[object],
    ) -> tuple[list[Product], int]:
        """Parse records into Products, dropping invalid ones.

        A record is dropped when it is not an object, fails
        :meth:`Product.from_dict`, or has a blank name or category.
        Records without an id get a fresh hex UUID.

        Returns the valid products and the count of dropped records.
        """
        valid: list[Product] = []
        dropped = 0

        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.debug(
                    "Dropped record #%d: not an object", index,
                )
                dropped += 1
                continue
            raw = dict(record)
            if raw.get("id") is None and raw.get("_id") is None:
                raw["id"] = uuid.uuid4().hex
            try:
                product = Product.from_dict(raw)
            except ValidationError as exc:
                logger.debug(
                    "Dropped record #%d (name=%s): %s",
                    index,
                    raw.get("name"),
                    exc,
                )
                dropped += 1
                continue
            if not product.name.strip():
                logger.debug(
                    "Dropped record #%d with empty name (id=%s)",
                    index,
                    product.id,
                )
                dropped += 1
                continue
            if not product.category.strip():
                logger.debug(
                    "Dropped record #%d with empty category "
                    "(name=%s)",
                    index,
                    product.name,
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid catalog records",
                dropped,
            )

        return valid, dropped
