# src/storage/catalog_db.py

"""SQLite-backed product catalog store."""

import json
import logging
import sqlite3
import threading
import uuid
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any, cast

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator
from src.models.errors import ValidationError
from src.models.product import Product, SustainabilityProfile
from src.scoring.score_calculator import compute_score

logger = logging.getLogger("ecoshop.catalog")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id                   TEXT PRIMARY KEY,
    name                 TEXT NOT NULL,
    description          TEXT NOT NULL DEFAULT '',
    price                REAL NOT NULL,
    category             TEXT NOT NULL,
    brand                TEXT NOT NULL DEFAULT '',
    image_url            TEXT NOT NULL DEFAULT '',
    sustainability       TEXT,
    sustainability_score REAL,
    alternatives         TEXT NOT NULL DEFAULT '[]',
    created_at           TEXT NOT NULL,
    updated_at           TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_products_category_score
    ON products(category, sustainability_score);
"""

_COLUMNS = (
    "id, name, description, price, category, brand, image_url, "
    "sustainability, sustainability_score, alternatives, "
    "created_at, updated_at"
)


def _row_to_product(row: sqlite3.Row) -> Product:
    """Rebuild a Product from a ``products`` row."""
    profile_json: str | None = row["sustainability"]
    return Product(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        price=row["price"],
        category=row["category"],
        brand=row["brand"],
        image_url=row["image_url"],
        sustainability=(
            SustainabilityProfile.from_dict(json.loads(profile_json))
            if profile_json
            else None
        ),
        sustainability_score=row["sustainability_score"],
        alternatives=cast(list[str], json.loads(row["alternatives"])),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _escape_like(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )


def _profile_json(profile: SustainabilityProfile | None) -> str | None:
    if profile is None:
        return None
    return json.dumps(profile.to_dict(), ensure_ascii=False)


class CatalogDB:
    """SQLite-backed store for catalog products.

    Services call into it through ``asyncio.to_thread``, so every
    statement runs under a lock on the shared connection.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.CATALOG_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("CatalogDB opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()

    # ── Writing ──────────────────────────────────────────

    def _write_product(self, product: Product) -> None:
        now = datetime.now()
        if not product.id:
            product.id = uuid.uuid4().hex
        product.created_at = product.created_at or now
        product.updated_at = now
        self._conn.execute(
            f"INSERT INTO products ({_COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(id) DO UPDATE SET "
            "name=excluded.name, "
            "description=excluded.description, "
            "price=excluded.price, "
            "category=excluded.category, "
            "brand=excluded.brand, "
            "image_url=excluded.image_url, "
            "sustainability=excluded.sustainability, "
            "sustainability_score=excluded.sustainability_score, "
            "alternatives=excluded.alternatives, "
            "updated_at=excluded.updated_at",
            (
                product.id,
                product.name,
                product.description,
                product.price,
                product.category,
                product.brand,
                product.image_url,
                _profile_json(product.sustainability),
                product.sustainability_score,
                json.dumps(product.alternatives),
                product.created_at.isoformat(),
                product.updated_at.isoformat(),
            ),
        )

    def upsert_product(self, product: Product) -> Product:
        """Insert or replace a product, stamping timestamps.

        Products without an id get a fresh hex UUID.  Returns the
        stored product.
        """
        with self._lock:
            self._write_product(product)
            self._conn.commit()
        logger.debug("Upserted product %s (%s)", product.id, product.name)
        return product

    def _update(self, product_id: str, column: str, value: Any) -> bool:
        with self._lock:
            cur = self._conn.execute(
                f"UPDATE products SET {column} = ?, updated_at = ? "
                "WHERE id = ?",
                (value, datetime.now().isoformat(), product_id),
            )
            self._conn.commit()
        return cur.rowcount > 0

    def update_score(self, product_id: str, score: float) -> bool:
        """Persist a sustainability score. Returns False if no such id."""
        updated = self._update(
            product_id, "sustainability_score", score
        )
        if updated:
            logger.info(
                "Stored score %.2f for product %s", score, product_id
            )
        return updated

    def update_sustainability(
        self,
        product_id: str,
        profile: SustainabilityProfile | None,
    ) -> bool:
        """Replace a product's sustainability profile."""
        return self._update(
            product_id, "sustainability", _profile_json(profile)
        )

    def update_alternatives(
        self, product_id: str, alternative_ids: list[str],
    ) -> bool:
        """Record the ids last suggested as alternatives for a product."""
        return self._update(
            product_id, "alternatives", json.dumps(alternative_ids)
        )

    def delete_all(self) -> int:
        """Remove every product. Returns the number deleted."""
        with self._lock:
            cur = self._conn.execute("DELETE FROM products")
            self._conn.commit()
        logger.info("Catalog cleared (%d products removed)", cur.rowcount)
        return cur.rowcount

    # ── Reading ──────────────────────────────────────────

    def get_product(self, product_id: str) -> Product | None:
        """Point lookup by id; ``None`` when absent."""
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM products WHERE id = ?",
                (product_id,),
            ).fetchone()
        return _row_to_product(row) if row else None

    def get_products(self, product_ids: Iterable[str]) -> list[Product]:
        """Batch lookup. Missing ids are skipped; input order is kept."""
        found: list[Product] = []
        for product_id in product_ids:
            product = self.get_product(product_id)
            if product is not None:
                found.append(product)
        return found

    def find_in_category(
        self,
        category: str,
        exclude_ids: Iterable[str] = (),
        score_above: float | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        """Query one category, best score first.

        Args:
            category: Exact category to match.
            exclude_ids: Ids to leave out of the result.
            score_above: If given, only products whose score is
                strictly greater (null scores never qualify).
            limit: Maximum rows to return; ``None`` for all.

        Null scores sort last; ties are broken by id.
        """
        excluded = list(dict.fromkeys(exclude_ids))
        clauses = ["category = ?"]
        params: list[Any] = [category]
        if excluded:
            marks = ", ".join("?" for _ in excluded)
            clauses.append(f"id NOT IN ({marks})")
            params.extend(excluded)
        if score_above is not None:
            clauses.append("sustainability_score > ?")
            params.append(score_above)
        sql = (
            f"SELECT {_COLUMNS} FROM products "
            f"WHERE {' AND '.join(clauses)} "
            "ORDER BY sustainability_score IS NULL, "
            "sustainability_score DESC, id ASC"
        )
        if limit is not None:
            if limit <= 0:
                return []
            sql += " LIMIT ?"
            params.append(limit)
        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [_row_to_product(r) for r in rows]

    def search_products(
        self,
        text: str = "",
        category: str | None = None,
        limit: int | None = None,
    ) -> list[Product]:
        """Case-insensitive substring search over name, brand and description."""
        clauses: list[str] = []
        params: list[Any] = []
        needle = text.strip().lower()
        if needle:
            clauses.append(
                "(lower(name) LIKE ? ESCAPE '\\' "
                "OR lower(brand) LIKE ? ESCAPE '\\' "
                "OR lower(description) LIKE ? ESCAPE '\\')"
            )
            params.extend([f"%{_escape_like(needle)}%"] * 3)
        if category:
            clauses.append("lower(category) = ?")
            params.append(category.strip().lower())
        where = f"WHERE {' AND '.join(clauses)} " if clauses else ""
        sql = (
            f"SELECT {_COLUMNS} FROM products {where}"
            "ORDER BY category ASC, sustainability_score IS NULL, "
            "sustainability_score DESC, name ASC"
        )
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [_row_to_product(r) for r in rows]

    def list_products(self) -> list[Product]:
        """Return the whole catalog."""
        return self.search_products()

    def list_categories(self) -> list[str]:
        """Return the distinct categories, alphabetically."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT DISTINCT category FROM products "
                "ORDER BY category ASC"
            ).fetchall()
        return [r[0] for r in rows]

    def count(self) -> int:
        with self._lock:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM products"
            ).fetchone()
        return int(row[0])

    # ── Import ───────────────────────────────────────────

    @staticmethod
    def read_catalog_file(filepath: Path) -> list[Product]:
        """Parse, validate and score a JSON list of catalog records.

        Raises:
            ValidationError: The file cannot be read, is not JSON, or
                does not hold a list.
        """
        try:
            with open(filepath, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning(
                "Failed to read catalog file %s: %s", filepath, exc,
            )
            raise ValidationError(
                f"Catalog file {filepath} could not be read: {exc}"
            ) from exc

        if not isinstance(data, list):
            logger.warning(
                "Catalog file %s does not hold a list", filepath,
            )
            raise ValidationError(
                f"Catalog file {filepath} must hold a JSON list"
            )

        records: list[object] = cast(list[object], data)
        products, dropped = ProductValidator.validate(records)
        for product in products:
            product.sustainability_score = compute_score(
                product.sustainability
            )
        logger.debug(
            "Read %d products from %s (%d dropped)",
            len(products), filepath.name, dropped,
        )
        return products

    def import_catalog_file(
        self, filepath: Path, replace: bool = False,
    ) -> int:
        """Import a JSON list of catalog records.

        The file is read and validated before anything is written.
        With *replace* the existing catalog is cleared in the same
        transaction as the inserts.  Returns the number of products
        stored.
        """
        products = self.read_catalog_file(filepath)
        with self._lock:
            try:
                if replace:
                    self._conn.execute("DELETE FROM products")
                for product in products:
                    self._write_product(product)
                self._conn.commit()
            except sqlite3.Error:
                self._conn.rollback()
                logger.error(
                    "Catalog import from %s rolled back", filepath,
                    exc_info=True,
                )
                raise

        logger.info(
            "Catalog import complete: %d products from %s%s",
            len(products),
            filepath.name,
            " (catalog replaced)" if replace else "",
        )
        return len(products)
