# src/models/insights.py

"""Typed views over the structured payloads returned by the AI bridge.

AI output is advisory and loosely shaped, so these parsers keep what
has the expected type and drop the rest.  Only a payload that is not a
JSON object at all is rejected (with :class:`ParseError`).  The decoded
payload is always kept in ``raw``.
"""

from dataclasses import dataclass, field
from typing import Any

from src.models.errors import ParseError
from src.models.product import (
    DEFAULT_CARBON_UNIT,
    DEFAULT_WATER_UNIT,
    Measurement,
    RecycledMaterials,
    SustainabilityProfile,
)


def _require_object(payload: Any, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ParseError(
            f"{what} payload must be a JSON object, "
            f"got {type(payload).__name__}"
        )
    return payload


def _maybe_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, str) and v.strip()]


def _objects(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _maybe_flag(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _measurement(value: Any, default_unit: str) -> Measurement | None:
    if not isinstance(value, dict):
        return None
    number = _maybe_number(value.get("value"))
    if number is None or number < 0:
        return None
    unit = value.get("unit")
    return Measurement(
        value=number,
        unit=unit if isinstance(unit, str) and unit else default_unit,
    )


@dataclass
class SustainabilityIndicators:
    """Sustainability indicators the AI extracted from a description."""

    carbon_footprint: Measurement | None = None
    water_usage: Measurement | None = None
    recycled_percentage: float | None = None
    recycled_materials: list[str] = field(
        default_factory=lambda: list[str]()
    )
    certifications: list[str] = field(
        default_factory=lambda: list[str]()
    )
    is_vegan: bool | None = None
    is_organic: bool | None = None
    sustainability_score: float | None = None
    highlights: list[str] = field(
        default_factory=lambda: list[str]()
    )
    concerns: list[str] = field(
        default_factory=lambda: list[str]()
    )
    raw: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )

    @classmethod
    def from_payload(cls, payload: Any) -> "SustainabilityIndicators":
        data = _require_object(payload, "Sustainability indicators")
        recycled = data.get("recycledMaterials")
        recycled = recycled if isinstance(recycled, dict) else {}
        percentage = _maybe_number(recycled.get("percentage"))
        if percentage is not None and not 0 <= percentage <= 100:
            percentage = None
        score = _maybe_number(data.get("sustainabilityScore"))
        if score is not None:
            score = max(0.0, min(100.0, score))
        return cls(
            carbon_footprint=_measurement(
                data.get("carbonFootprint"), DEFAULT_CARBON_UNIT
            ),
            water_usage=_measurement(
                data.get("waterUsage"), DEFAULT_WATER_UNIT
            ),
            recycled_percentage=percentage,
            recycled_materials=_strings(recycled.get("materials")),
            certifications=_strings(data.get("certifications")),
            is_vegan=_maybe_flag(data.get("isVegan")),
            is_organic=_maybe_flag(data.get("isOrganic")),
            sustainability_score=score,
            highlights=_strings(data.get("sustainabilityHighlights")),
            concerns=_strings(data.get("sustainabilityConcerns")),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "carbonFootprint": (
                self.carbon_footprint.to_dict()
                if self.carbon_footprint
                else None
            ),
            "waterUsage": (
                self.water_usage.to_dict() if self.water_usage else None
            ),
            "recycledMaterials": {
                "percentage": self.recycled_percentage,
                "materials": list(self.recycled_materials),
            },
            "certifications": list(self.certifications),
            "isVegan": self.is_vegan,
            "isOrganic": self.is_organic,
            "sustainabilityScore": self.sustainability_score,
            "sustainabilityHighlights": list(self.highlights),
            "sustainabilityConcerns": list(self.concerns),
        }

    def to_profile(self) -> SustainabilityProfile:
        """Project the indicators onto a profile the scorer understands."""
        recycled: RecycledMaterials | None = None
        if self.recycled_percentage is not None or self.recycled_materials:
            recycled = RecycledMaterials(
                percentage=self.recycled_percentage,
                materials=list(self.recycled_materials),
            )
        return SustainabilityProfile(
            carbon_footprint=self.carbon_footprint,
            water_usage=self.water_usage,
            recycled_materials=recycled,
            certifications=list(dict.fromkeys(self.certifications)),
            is_vegan=bool(self.is_vegan),
            is_organic=bool(self.is_organic),
        )


@dataclass
class Tip:
    """A single buying tip for a category."""

    title: str
    description: str


@dataclass
class GreenwashingWarning:
    """A misleading marketing claim paired with what is actually true."""

    claim: str
    reality: str


@dataclass
class CategoryTips:
    """Sustainability guidance for shoppers in one product category."""

    category: str
    tips: list[Tip] = field(default_factory=lambda: list[Tip]())
    greenwashing_warnings: list[GreenwashingWarning] = field(
        default_factory=lambda: list[GreenwashingWarning]()
    )
    disposal_guidance: str = ""
    sustainable_alternatives: list[str] = field(
        default_factory=lambda: list[str]()
    )
    raw: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )

    @classmethod
    def from_payload(
        cls, payload: Any, category: str,
    ) -> "CategoryTips":
        data = _require_object(payload, "Category tips")
        tips = [
            Tip(
                title=str(t.get("title", "")).strip(),
                description=str(t.get("description", "")).strip(),
            )
            for t in _objects(data.get("tips"))
            if t.get("title")
        ]
        warnings = [
            GreenwashingWarning(
                claim=str(w.get("claim", "")).strip(),
                reality=str(w.get("reality", "")).strip(),
            )
            for w in _objects(data.get("greenwashingWarnings"))
            if w.get("claim")
        ]
        disposal = data.get("disposalGuidance")
        reported_category = data.get("category")
        return cls(
            category=(
                reported_category
                if isinstance(reported_category, str)
                and reported_category.strip()
                else category
            ),
            tips=tips,
            greenwashing_warnings=warnings,
            disposal_guidance=(
                disposal.strip() if isinstance(disposal, str) else ""
            ),
            sustainable_alternatives=_strings(
                data.get("sustainableAlternatives")
            ),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "tips": [
                {"title": t.title, "description": t.description}
                for t in self.tips
            ],
            "greenwashingWarnings": [
                {"claim": w.claim, "reality": w.reality}
                for w in self.greenwashing_warnings
            ],
            "disposalGuidance": self.disposal_guidance,
            "sustainableAlternatives": list(
                self.sustainable_alternatives
            ),
        }
