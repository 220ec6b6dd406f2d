# src/models/comparison.py

"""Ephemeral result of comparing two catalog products."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ProductSnapshot:
    """The headline figures of one compared product."""

    name: str
    brand: str
    sustainability_score: float | None
    price: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "brand": self.brand,
            "sustainabilityScore": self.sustainability_score,
            "price": self.price,
        }


@dataclass
class MetricComparison:
    """Difference (product 1 minus product 2) and the winning product id."""

    difference: float | None
    better_product: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "difference": self.difference,
            "betterProduct": self.better_product,
        }


@dataclass
class ValueRatioComparison:
    """Score per currency unit for each product.

    A ratio that cannot be computed is ``None`` and the reason is kept
    in ``issues`` keyed by product id; no winner is named then.
    """

    product1: float | None
    product2: float | None
    better_product: str | None
    issues: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "product1": self.product1,
            "product2": self.product2,
            "betterProduct": self.better_product,
        }
        if self.issues:
            data["issues"] = dict(self.issues)
        return data


@dataclass
class DetailedMetric:
    """One numeric sustainability sub-metric compared across both products."""

    values: dict[str, float]
    difference: float
    better_product: str
    unit: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "values": dict(self.values),
            "difference": self.difference,
            "betterProduct": self.better_product,
        }
        if self.unit is not None:
            data["unit"] = self.unit
        return data


@dataclass
class CertificationComparison:
    """Certification lists of both products split into a partition."""

    values: dict[str, list[str]]
    unique_to_prod1: list[str]
    unique_to_prod2: list[str]
    shared: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "values": {k: list(v) for k, v in self.values.items()},
            "uniqueToProd1": list(self.unique_to_prod1),
            "uniqueToProd2": list(self.unique_to_prod2),
            "shared": list(self.shared),
        }


@dataclass
class ComparisonResult:
    """Everything ``Comparator.compare`` works out for a product pair."""

    product1_id: str
    product2_id: str
    products: dict[str, ProductSnapshot]
    sustainability_score: MetricComparison
    price: MetricComparison
    value_ratio: ValueRatioComparison
    carbon_footprint: DetailedMetric | None = None
    water_usage: DetailedMetric | None = None
    recycled_materials: DetailedMetric | None = None
    certifications: CertificationComparison | None = None
    ai_summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON shape served to callers."""
        detailed: dict[str, Any] = {}
        if self.carbon_footprint is not None:
            detailed["carbonFootprint"] = self.carbon_footprint.to_dict()
        if self.water_usage is not None:
            detailed["waterUsage"] = self.water_usage.to_dict()
        if self.recycled_materials is not None:
            detailed["recycledMaterials"] = (
                self.recycled_materials.to_dict()
            )
        if self.certifications is not None:
            detailed["certifications"] = self.certifications.to_dict()
        return {
            "products": {
                pid: snap.to_dict()
                for pid, snap in self.products.items()
            },
            "comparisons": {
                "sustainabilityScore": (
                    self.sustainability_score.to_dict()
                ),
                "price": self.price.to_dict(),
                "valueRatio": self.value_ratio.to_dict(),
            },
            "detailedComparison": detailed,
            "aiSummary": self.ai_summary,
        }
