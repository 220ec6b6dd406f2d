# src/services/recommendation_service.py

"""Facade over scoring, alternatives, comparison and AI insight."""

import asyncio
import logging
from pathlib import Path

from src.config.settings import Settings
from src.models.comparison import ComparisonResult
from src.models.errors import NotFound
from src.models.insights import CategoryTips, SustainabilityIndicators
from src.models.product import Product, SustainabilityProfile
from src.scoring.score_calculator import compute_score
from src.services.ai_bridge import AIBridge
from src.services.alternative_finder import AlternativeFinder
from src.services.comparator import Comparator
from src.storage.catalog_db import CatalogDB

logger = logging.getLogger("ecoshop.service")


class RecommendationService:
    """Operations exposed to the CLI and the TUI.

    Holds no per-request state; the catalog is the only shared state.
    Storage calls run in worker threads so the event loop stays free
    while AI requests are in flight.
    """

    def __init__(
        self,
        catalog: CatalogDB,
        ai_bridge: AIBridge,
    ) -> None:
        self.catalog = catalog
        self.ai_bridge = ai_bridge
        self.finder = AlternativeFinder(catalog)
        self.comparator = Comparator(catalog, ai_bridge)

    # ── Recommendations ──────────────────────────────────

    async def get_alternatives(
        self,
        product_id: str,
        limit: int = Settings.DEFAULT_ALTERNATIVES_LIMIT,
    ) -> list[Product]:
        """Rank alternatives and record their ids on the product."""
        alternatives = await self.finder.find_alternatives(
            product_id, limit
        )
        await asyncio.to_thread(
            self.catalog.update_alternatives,
            product_id,
            [p.id for p in alternatives],
        )
        return alternatives

    async def compare_products(
        self, product_id_1: str, product_id_2: str,
    ) -> ComparisonResult:
        return await self.comparator.compare(product_id_1, product_id_2)

    async def get_sustainability_tips(self, category: str) -> CategoryTips:
        return await self.ai_bridge.get_tips(category)

    async def analyze_description(
        self, description: str,
    ) -> SustainabilityIndicators:
        return await self.ai_bridge.analyze_description(description)

    # ── Scoring ──────────────────────────────────────────

    async def calculate_score(self, product_id: str) -> float:
        """Recompute a product's score from its profile and persist it.

        Raises:
            NotFound: *product_id* is not in the catalog.
        """
        product = await asyncio.to_thread(
            self.catalog.get_product, product_id
        )
        if product is None:
            raise NotFound(f"Product not found: {product_id}")
        score = compute_score(product.sustainability)
        await asyncio.to_thread(
            self.catalog.update_score, product_id, score
        )
        return score

    async def recalculate_all_scores(self) -> dict[str, float]:
        """Rescore the whole catalog. Returns ``{product_id: score}``."""
        products = await asyncio.to_thread(self.catalog.list_products)
        scores: dict[str, float] = {}
        for product in products:
            score = compute_score(product.sustainability)
            if score != product.sustainability_score:
                await asyncio.to_thread(
                    self.catalog.update_score, product.id, score
                )
            scores[product.id] = score
        logger.info("Rescored %d products", len(scores))
        return scores

    async def update_sustainability(
        self,
        product_id: str,
        profile: SustainabilityProfile | None,
    ) -> float:
        """Replace a product's profile and store the matching score.

        Raises:
            NotFound: *product_id* is not in the catalog.
        """
        updated = await asyncio.to_thread(
            self.catalog.update_sustainability, product_id, profile
        )
        if not updated:
            raise NotFound(f"Product not found: {product_id}")
        score = compute_score(profile)
        await asyncio.to_thread(
            self.catalog.update_score, product_id, score
        )
        return score

    # ── Catalog ──────────────────────────────────────────

    async def get_product(self, product_id: str) -> Product:
        product = await asyncio.to_thread(
            self.catalog.get_product, product_id
        )
        if product is None:
            raise NotFound(f"Product not found: {product_id}")
        return product

    async def search_products(
        self,
        text: str = "",
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        return await asyncio.to_thread(
            self.catalog.search_products, text, category, limit
        )

    async def list_categories(self) -> list[str]:
        return await asyncio.to_thread(self.catalog.list_categories)

    async def seed_catalog(self, path: Path | None = None) -> int:
        """Replace the catalog with the products in *path*.

        Defaults to the bundled seed file.  Returns the number of
        products imported.  A file that cannot be read leaves the
        current catalog untouched and raises :class:`ValidationError`.
        """
        source = path or Settings.SEED_CATALOG_PATH
        if not source.exists():
            raise NotFound(f"Catalog file not found: {source}")
        imported = await asyncio.to_thread(
            self.catalog.import_catalog_file, source, True
        )
        logger.info(
            "Seeded catalog with %d products from %s", imported, source,
        )
        return imported
