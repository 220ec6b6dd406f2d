# src/models/product.py

"""Catalog product and sustainability profile models.

Records arrive from the catalog (and from seed / import files) as
camelCase dicts.  ``from_dict`` parses and validates them so that a
malformed field raises :class:`ValidationError` instead of silently
scoring as "absent".  ``to_dict`` writes the same camelCase shape back.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.models.errors import ValidationError

DEFAULT_CARBON_UNIT = "kg CO2e"
DEFAULT_WATER_UNIT = "liters"


# ── Field coercion helpers ───────────────────────────────


def _number(
    value: Any, field_name: str, minimum: float | None = 0.0,
    maximum: float | None = None,
) -> float:
    """Return *value* as a float, enforcing optional bounds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be a number, got {value!r}"
        )
    number = float(value)
    if number != number:  # NaN
        raise ValidationError(f"{field_name} must not be NaN")
    if minimum is not None and number < minimum:
        raise ValidationError(
            f"{field_name} must be >= {minimum:g}, got {number:g}"
        )
    if maximum is not None and number > maximum:
        raise ValidationError(
            f"{field_name} must be <= {maximum:g}, got {number:g}"
        )
    return number


def _text(value: Any, field_name: str, default: str = "") -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {value!r}"
        )
    return value


def _flag(value: Any, field_name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean, got {value!r}"
        )
    return value


def _string_list(value: Any, field_name: str) -> list[str]:
    """Return a de-duplicated list of strings, first occurrence wins."""
    if not isinstance(value, list):
        raise ValidationError(
            f"{field_name} must be a list, got {value!r}"
        )
    seen: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(
                f"{field_name} entries must be strings, got {item!r}"
            )
        if item not in seen:
            seen.append(item)
    return seen


def _mapping(value: Any, field_name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(
            f"{field_name} must be an object, got {value!r}"
        )
    return value


def _timestamp(value: Any, field_name: str) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(
                f"{field_name} is not an ISO timestamp: {value!r}"
            ) from exc
    raise ValidationError(
        f"{field_name} must be an ISO timestamp, got {value!r}"
    )


# ── Sustainability profile ───────────────────────────────


@dataclass
class Measurement:
    """A non-negative quantity with its unit (carbon, water)."""

    value: float
    unit: str

    @classmethod
    def from_dict(
        cls, data: Any, field_name: str, default_unit: str,
    ) -> "Measurement":
        raw = _mapping(data, field_name)
        if raw.get("value") is None:
            raise ValidationError(f"{field_name}.value is required")
        return cls(
            value=_number(raw["value"], f"{field_name}.value"),
            unit=_text(
                raw.get("unit"), f"{field_name}.unit", default_unit
            ) or default_unit,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "unit": self.unit}


@dataclass
class RecycledMaterials:
    """Share of recycled input and which recycled materials are used."""

    percentage: float | None = None
    materials: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @classmethod
    def from_dict(cls, data: Any) -> "RecycledMaterials":
        raw = _mapping(data, "recycledMaterials")
        percentage = raw.get("percentage")
        materials = raw.get("materials")
        return cls(
            percentage=(
                None
                if percentage is None
                else _number(
                    percentage,
                    "recycledMaterials.percentage",
                    minimum=0.0,
                    maximum=100.0,
                )
            ),
            materials=(
                []
                if materials is None
                else _string_list(
                    materials, "recycledMaterials.materials"
                )
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "percentage": self.percentage,
            "materials": list(self.materials),
        }


@dataclass
class SustainabilityProfile:
    """Environmental and ethical attributes attached to a product.

    ``None`` on an optional sub-record means "not disclosed"; it
    contributes nothing to the score and is skipped by the detailed
    comparison.
    """

    carbon_footprint: Measurement | None = None
    water_usage: Measurement | None = None
    recycled_materials: RecycledMaterials | None = None
    certifications: list[str] | None = None
    is_vegan: bool = False
    is_organic: bool = False
    production_country: str = ""
    transportation_method: str = ""
    packaging_type: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "SustainabilityProfile":
        """Parse and validate a camelCase profile record."""
        raw = _mapping(data, "sustainability")
        carbon = raw.get("carbonFootprint")
        water = raw.get("waterUsage")
        recycled = raw.get("recycledMaterials")
        certifications = raw.get("certifications")
        return cls(
            carbon_footprint=(
                None
                if carbon is None
                else Measurement.from_dict(
                    carbon, "carbonFootprint", DEFAULT_CARBON_UNIT
                )
            ),
            water_usage=(
                None
                if water is None
                else Measurement.from_dict(
                    water, "waterUsage", DEFAULT_WATER_UNIT
                )
            ),
            recycled_materials=(
                None
                if recycled is None
                else RecycledMaterials.from_dict(recycled)
            ),
            certifications=(
                None
                if certifications is None
                else _string_list(certifications, "certifications")
            ),
            is_vegan=_flag(raw.get("isVegan"), "isVegan"),
            is_organic=_flag(raw.get("isOrganic"), "isOrganic"),
            production_country=_text(
                raw.get("productionCountry"), "productionCountry"
            ),
            transportation_method=_text(
                raw.get("transportationMethod"),
                "transportationMethod",
            ),
            packaging_type=_text(
                raw.get("packagingType"), "packagingType"
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "isVegan": self.is_vegan,
            "isOrganic": self.is_organic,
            "productionCountry": self.production_country,
            "transportationMethod": self.transportation_method,
            "packagingType": self.packaging_type,
        }
        if self.carbon_footprint is not None:
            data["carbonFootprint"] = self.carbon_footprint.to_dict()
        if self.water_usage is not None:
            data["waterUsage"] = self.water_usage.to_dict()
        if self.recycled_materials is not None:
            data["recycledMaterials"] = (
                self.recycled_materials.to_dict()
            )
        if self.certifications is not None:
            data["certifications"] = list(self.certifications)
        return data


# ── Product ──────────────────────────────────────────────


@dataclass
class Product:
    """A catalog product as read from (and written to) storage."""

    id: str
    name: str
    price: float
    category: str
    brand: str = ""
    description: str = ""
    image_url: str = ""
    sustainability: SustainabilityProfile | None = None
    sustainability_score: float | None = None
    alternatives: list[str] = field(
        default_factory=lambda: list[str]()
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Product":
        """Parse and validate a camelCase catalog record.

        ``id`` may be given as ``id`` or ``_id``.  Raises
        :class:`ValidationError` naming the first bad field.
        """
        raw = _mapping(data, "product")
        product_id = raw.get("id", raw.get("_id"))
        if product_id is None or not str(product_id).strip():
            raise ValidationError("id is required")
        if raw.get("price") is None:
            raise ValidationError("price is required")
        profile = raw.get("sustainability")
        score = raw.get("sustainabilityScore")
        alternatives = raw.get("alternatives")
        return cls(
            id=str(product_id),
            name=_text(raw.get("name"), "name"),
            price=_number(raw["price"], "price"),
            category=_text(raw.get("category"), "category"),
            brand=_text(raw.get("brand"), "brand"),
            description=_text(raw.get("description"), "description"),
            image_url=_text(raw.get("imageUrl"), "imageUrl"),
            sustainability=(
                None
                if profile is None
                else SustainabilityProfile.from_dict(profile)
            ),
            sustainability_score=(
                None
                if score is None
                else _number(
                    score,
                    "sustainabilityScore",
                    minimum=0.0,
                    maximum=100.0,
                )
            ),
            alternatives=(
                []
                if alternatives is None
                else _string_list(alternatives, "alternatives")
            ),
            created_at=_timestamp(raw.get("createdAt"), "createdAt"),
            updated_at=_timestamp(raw.get("updatedAt"), "updatedAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase catalog shape."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "brand": self.brand,
            "imageUrl": self.image_url,
            "sustainability": (
                None
                if self.sustainability is None
                else self.sustainability.to_dict()
            ),
            "sustainabilityScore": self.sustainability_score,
            "alternatives": list(self.alternatives),
            "createdAt": (
                self.created_at.isoformat() if self.created_at else None
            ),
            "updatedAt": (
                self.updated_at.isoformat() if self.updated_at else None
            ),
        }
