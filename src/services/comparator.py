# src/services/comparator.py

"""Side-by-side sustainability comparison of two catalog products."""

import asyncio
import logging

from src.config.settings import Settings
from src.models.comparison import (
    CertificationComparison,
    ComparisonResult,
    DetailedMetric,
    MetricComparison,
    ProductSnapshot,
    ValueRatioComparison,
)
from src.models.errors import AIError, ComputationError, NotFound
from src.models.product import Product
from src.services.ai_bridge import AIBridge
from src.storage.catalog_db import CatalogDB

logger = logging.getLogger("ecoshop.comparator")


# ── Metric helpers ───────────────────────────────────────
# Ties go to the first product for every ranked metric.


def _prefer_higher(
    first_id: str, first: float | None,
    second_id: str, second: float | None,
) -> str:
    """Pick the id with the higher value; ``None`` ranks lowest."""
    if second is None:
        return first_id
    if first is None:
        return second_id
    return first_id if first >= second else second_id


def _prefer_lower(
    first_id: str, first: float, second_id: str, second: float,
) -> str:
    return first_id if first <= second else second_id


def _difference(first: float | None, second: float | None) -> float | None:
    if first is None or second is None:
        return None
    return round(first - second, 6)


def value_ratio(product: Product) -> float:
    """Sustainability score per currency unit.

    Raises:
        ComputationError: The price is zero or the score is missing.
    """
    if product.sustainability_score is None:
        raise ComputationError(
            f"Product {product.id} has no sustainability score"
        )
    if product.price == 0:
        raise ComputationError(
            f"Product {product.id} has a zero price"
        )
    return product.sustainability_score / product.price


def certification_partition(
    first: list[str], second: list[str],
) -> tuple[list[str], list[str], list[str]]:
    """Split two certification lists into (only first, only second, shared).

    Order follows the input lists.
    """
    second_set = set(second)
    first_set = set(first)
    unique_first = [c for c in first if c not in second_set]
    unique_second = [c for c in second if c not in first_set]
    shared = [c for c in first if c in second_set]
    return unique_first, unique_second, shared


class Comparator:
    """Computes differential metrics and an AI summary for two products."""

    def __init__(
        self,
        catalog: CatalogDB,
        ai_bridge: AIBridge | None = None,
        fallback_summary: str | None = None,
    ) -> None:
        self.catalog = catalog
        self.ai_bridge = ai_bridge
        self.fallback_summary = (
            fallback_summary or Settings.COMPARISON_SUMMARY_FALLBACK
        )

    # ── Private helpers ──────────────────────────────────

    async def _fetch_pair(
        self, product_id_1: str, product_id_2: str,
    ) -> tuple[Product, Product]:
        product1, product2 = await asyncio.gather(
            asyncio.to_thread(self.catalog.get_product, product_id_1),
            asyncio.to_thread(self.catalog.get_product, product_id_2),
        )
        if product1 is None or product2 is None:
            raise NotFound(
                "One or both products not found: "
                f"{product_id_1}, {product_id_2}"
            )
        return product1, product2

    @staticmethod
    def _compare_value_ratio(
        product1: Product, product2: Product,
    ) -> ValueRatioComparison:
        ratios: list[float | None] = []
        issues: dict[str, str] = {}
        for product in (product1, product2):
            try:
                ratios.append(value_ratio(product))
            except ComputationError as exc:
                logger.info("Value ratio undefined: %s", exc)
                ratios.append(None)
                issues[product.id] = str(exc)
        ratio1, ratio2 = ratios
        better: str | None = None
        if ratio1 is not None and ratio2 is not None:
            better = _prefer_higher(product1.id, ratio1, product2.id, ratio2)
        return ValueRatioComparison(
            product1=ratio1,
            product2=ratio2,
            better_product=better,
            issues=issues,
        )

    @staticmethod
    def _compare_details(
        result: ComparisonResult, product1: Product, product2: Product,
    ) -> None:
        """Fill the detailed sub-metrics both products disclose."""
        profile1 = product1.sustainability
        profile2 = product2.sustainability
        if profile1 is None or profile2 is None:
            return
        id1, id2 = product1.id, product2.id

        carbon1, carbon2 = profile1.carbon_footprint, profile2.carbon_footprint
        if carbon1 is not None and carbon2 is not None:
            result.carbon_footprint = DetailedMetric(
                values={id1: carbon1.value, id2: carbon2.value},
                difference=round(carbon1.value - carbon2.value, 6),
                better_product=_prefer_lower(
                    id1, carbon1.value, id2, carbon2.value
                ),
                unit=carbon1.unit,
            )

        water1, water2 = profile1.water_usage, profile2.water_usage
        if water1 is not None and water2 is not None:
            result.water_usage = DetailedMetric(
                values={id1: water1.value, id2: water2.value},
                difference=round(water1.value - water2.value, 6),
                better_product=_prefer_lower(
                    id1, water1.value, id2, water2.value
                ),
                unit=water1.unit,
            )

        recycled1 = profile1.recycled_materials
        recycled2 = profile2.recycled_materials
        if (
            recycled1 is not None
            and recycled2 is not None
            and recycled1.percentage is not None
            and recycled2.percentage is not None
        ):
            result.recycled_materials = DetailedMetric(
                values={id1: recycled1.percentage, id2: recycled2.percentage},
                difference=round(
                    recycled1.percentage - recycled2.percentage, 6
                ),
                better_product=_prefer_higher(
                    id1, recycled1.percentage, id2, recycled2.percentage
                ),
            )

        certs1, certs2 = profile1.certifications, profile2.certifications
        if certs1 is not None and certs2 is not None:
            unique1, unique2, shared = certification_partition(
                certs1, certs2
            )
            result.certifications = CertificationComparison(
                values={id1: list(certs1), id2: list(certs2)},
                unique_to_prod1=unique1,
                unique_to_prod2=unique2,
                shared=shared,
            )

    async def _summarize(
        self, product1: Product, product2: Product,
    ) -> str:
        """AI summary, or the fallback text on any AI failure."""
        if self.ai_bridge is None:
            return self.fallback_summary
        try:
            return await self.ai_bridge.summarize_comparison(
                product1, product2
            )
        except AIError as exc:
            logger.warning(
                "AI comparison summary unavailable for %s vs %s: %s",
                product1.id,
                product2.id,
                exc,
            )
            return self.fallback_summary

    # ── Public API ───────────────────────────────────────

    async def compare(
        self, product_id_1: str, product_id_2: str,
    ) -> ComparisonResult:
        """Compare two products on score, price, value and footprint.

        Raises:
            NotFound: Either id is missing from the catalog.
        """
        product1, product2 = await self._fetch_pair(
            product_id_1, product_id_2
        )
        score1 = product1.sustainability_score
        score2 = product2.sustainability_score

        result = ComparisonResult(
            product1_id=product1.id,
            product2_id=product2.id,
            products={
                p.id: ProductSnapshot(
                    name=p.name,
                    brand=p.brand,
                    sustainability_score=p.sustainability_score,
                    price=p.price,
                )
                for p in (product1, product2)
            },
            sustainability_score=MetricComparison(
                difference=_difference(score1, score2),
                better_product=_prefer_higher(
                    product1.id, score1, product2.id, score2
                ),
            ),
            price=MetricComparison(
                difference=_difference(product1.price, product2.price),
                better_product=_prefer_lower(
                    product1.id, product1.price,
                    product2.id, product2.price,
                ),
            ),
            value_ratio=self._compare_value_ratio(product1, product2),
        )
        self._compare_details(result, product1, product2)
        result.ai_summary = await self._summarize(product1, product2)

        logger.info(
            "Compared %s vs %s: score winner=%s, price winner=%s",
            product1.id,
            product2.id,
            result.sustainability_score.better_product,
            result.price.better_product,
        )
        return result
