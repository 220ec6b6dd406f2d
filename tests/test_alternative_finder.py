# tests/test_alternative_finder.py

"""Tests for same-category alternative ranking."""

import tempfile
import unittest
from pathlib import Path

from src.config.settings import Settings
from src.models.errors import NotFound, ValidationError
from src.models.product import Product
from src.services.alternative_finder import AlternativeFinder
from src.storage.catalog_db import CatalogDB


def _p(
    product_id: str, score: float | None, category: str = "Home",
) -> Product:
    return Product(
        id=product_id,
        name=product_id,
        price=10.0,
        category=category,
        sustainability_score=score,
    )


class TestAlternativeFinder(unittest.IsolatedAsyncioTestCase):
    """AlternativeFinder.find_alternatives."""

    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.db = CatalogDB(db_path=Path(self._tmpdir.name) / "c.db")
        for product in (
            _p("ref", 60),
            _p("best", 95),
            _p("better", 80),
            _p("tie", 60),
            _p("worse", 40),
            _p("unscored", None),
            _p("other-cat", 99, category="Clothing"),
        ):
            self.db.upsert_product(product)
        self.finder = AlternativeFinder(self.db)

    def tearDown(self) -> None:
        self.db.close()
        self._tmpdir.cleanup()

    async def test_strictly_better_first_then_fill(self) -> None:
        found = await self.finder.find_alternatives("ref", 5)
        self.assertEqual(
            [p.id for p in found],
            ["best", "better", "tie", "worse", "unscored"],
        )

    async def test_limit_respected(self) -> None:
        found = await self.finder.find_alternatives("ref", 2)
        self.assertEqual([p.id for p in found], ["best", "better"])

    async def test_fill_when_primary_short(self) -> None:
        found = await self.finder.find_alternatives("ref", 3)
        self.assertEqual(
            [p.id for p in found], ["best", "better", "tie"]
        )

    async def test_never_contains_reference_or_duplicates(self) -> None:
        for limit in range(1, 10):
            with self.subTest(limit=limit):
                found = await self.finder.find_alternatives("ref", limit)
                ids = [p.id for p in found]
                self.assertNotIn("ref", ids)
                self.assertEqual(len(ids), len(set(ids)))
                self.assertLessEqual(len(ids), limit)
                self.assertTrue(all(p.category == "Home" for p in found))

    async def test_top_product_gets_fallback_only(self) -> None:
        found = await self.finder.find_alternatives("best", 2)
        self.assertEqual([p.id for p in found], ["better", "ref"])

    async def test_unscored_reference_ranks_lowest(self) -> None:
        """Every scored product is better than a null-scored one."""
        found = await self.finder.find_alternatives("unscored", 10)
        self.assertEqual(
            [p.id for p in found],
            ["best", "better", "ref", "tie", "worse"],
        )

    async def test_single_product_category(self) -> None:
        found = await self.finder.find_alternatives("other-cat", 5)
        self.assertEqual(found, [])

    async def test_missing_product_raises(self) -> None:
        with self.assertRaisesRegex(NotFound, "ghost"):
            await self.finder.find_alternatives("ghost", 5)

    async def test_invalid_limits_rejected(self) -> None:
        for bad in (0, -1, 2.5, True):
            with self.subTest(limit=bad):
                with self.assertRaises(ValidationError):
                    await self.finder.find_alternatives(
                        "ref", bad  # type: ignore[arg-type]
                    )

    async def test_limit_capped(self) -> None:
        found = await self.finder.find_alternatives(
            "ref", Settings.MAX_ALTERNATIVES_LIMIT * 10
        )
        self.assertEqual(len(found), 5)

    async def test_default_limit(self) -> None:
        found = await self.finder.find_alternatives("ref")
        self.assertEqual(len(found), Settings.DEFAULT_ALTERNATIVES_LIMIT)


if __name__ == "__main__":
    unittest.main()
