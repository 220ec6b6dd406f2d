# src/services/alternative_finder.py

"""Ranks same-category substitutes for a catalog product."""

import asyncio
import logging

from src.config.settings import Settings
from src.models.errors import NotFound, ValidationError
from src.models.product import Product
from src.storage.catalog_db import CatalogDB

logger = logging.getLogger("ecoshop.alternatives")


class AlternativeFinder:
    """Finds more sustainable products in the same category.

    Results come from two queries: products scoring strictly higher
    than the reference (best first), then, if that leaves room, the
    best remaining products in the category whatever their score.
    Scores are read from storage, never recomputed here.
    """

    def __init__(self, catalog: CatalogDB) -> None:
        self.catalog = catalog

    @staticmethod
    def _check_limit(limit: int) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ValidationError(
                f"limit must be an integer, got {limit!r}"
            )
        if limit < 1:
            raise ValidationError(f"limit must be >= 1, got {limit}")
        return min(limit, Settings.MAX_ALTERNATIVES_LIMIT)

    async def find_alternatives(
        self,
        product_id: str,
        limit: int = Settings.DEFAULT_ALTERNATIVES_LIMIT,
    ) -> list[Product]:
        """Return up to *limit* alternatives, primary matches first.

        Raises:
            NotFound: *product_id* is not in the catalog.
            ValidationError: *limit* is not a positive integer.
        """
        limit = self._check_limit(limit)
        reference = await asyncio.to_thread(
            self.catalog.get_product, product_id
        )
        if reference is None:
            raise NotFound(f"Product not found: {product_id}")

        # A null reference score is infinitely low: every scored
        # product in the category counts as strictly better.
        primary = await asyncio.to_thread(
            self._primary_query, reference, limit
        )
        alternatives = list(primary)

        if len(alternatives) < limit:
            selected = [p.id for p in alternatives]
            secondary = await asyncio.to_thread(
                self.catalog.find_in_category,
                reference.category,
                [reference.id, *selected],
                None,
                limit - len(alternatives),
            )
            alternatives.extend(secondary)
            logger.debug(
                "Fallback query added %d alternatives for %s",
                len(secondary),
                product_id,
            )

        logger.info(
            "Found %d alternatives for %s (%d strictly better, "
            "category=%s)",
            len(alternatives),
            product_id,
            len(primary),
            reference.category,
        )
        return alternatives

    def _primary_query(
        self, reference: Product, limit: int,
    ) -> list[Product]:
        if reference.sustainability_score is None:
            candidates = self.catalog.find_in_category(
                reference.category, [reference.id], None, None
            )
            return [
                p for p in candidates
                if p.sustainability_score is not None
            ][:limit]
        return self.catalog.find_in_category(
            reference.category,
            [reference.id],
            reference.sustainability_score,
            limit,
        )
