# src/scoring/score_calculator.py

"""Deterministic 0–100 sustainability score for a product profile.

The model is additive from a neutral baseline of 50:

* recycled materials: ``percentage × 0.2`` (100 % recycled adds 20)
* certifications: 5 points each, no cap before clamping
* organic: +10, vegan: +10
* carbon footprint and water usage: tiered adjustments (see
  :data:`CARBON_TIERS` and :data:`WATER_TIERS`)

The sum is clamped to ``[0, 100]``.  Absent fields contribute nothing,
which means an undisclosed footprint scores the same as one in the
neutral band.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from src.models.product import SustainabilityProfile

logger = logging.getLogger("ecoshop.scoring")

BASELINE_SCORE = 50.0
RECYCLED_WEIGHT = 0.2
CERTIFICATION_BONUS = 5.0
ORGANIC_BONUS = 10.0
VEGAN_BONUS = 10.0
MIN_SCORE = 0.0
MAX_SCORE = 100.0


@dataclass(frozen=True)
class Tier:
    """One band of a tiered adjustment: applies ``delta`` if ``matches``."""

    label: str
    matches: Callable[[float], bool]
    delta: float


# Ordered; the first matching tier wins.  Boundaries are exclusive.
CARBON_TIERS: tuple[Tier, ...] = (
    Tier("carbon < 10", lambda v: v < 10, 10.0),
    Tier("carbon < 50", lambda v: v < 50, 5.0),
    Tier("carbon > 100", lambda v: v > 100, -10.0),
)

WATER_TIERS: tuple[Tier, ...] = (
    Tier("water < 100", lambda v: v < 100, 10.0),
    Tier("water < 500", lambda v: v < 500, 5.0),
    Tier("water > 1000", lambda v: v > 1000, -10.0),
)


def tier_adjustment(value: float, tiers: Sequence[Tier]) -> float:
    """Return the delta of the first tier matching *value*, else 0."""
    for tier in tiers:
        if tier.matches(value):
            return tier.delta
    return 0.0


def clamp_score(score: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def score_breakdown(
    profile: SustainabilityProfile | None,
) -> dict[str, float]:
    """Return every contribution to the score, keyed by name.

    The values sum to the unclamped score.  A ``None`` profile yields
    only the baseline.
    """
    parts: dict[str, float] = {
        "baseline": BASELINE_SCORE,
        "recycledMaterials": 0.0,
        "certifications": 0.0,
        "organic": 0.0,
        "vegan": 0.0,
        "carbonFootprint": 0.0,
        "waterUsage": 0.0,
    }
    if profile is None:
        return parts

    recycled = profile.recycled_materials
    if recycled is not None and recycled.percentage is not None:
        parts["recycledMaterials"] = recycled.percentage * RECYCLED_WEIGHT
    if profile.certifications:
        parts["certifications"] = (
            len(profile.certifications) * CERTIFICATION_BONUS
        )
    if profile.is_organic:
        parts["organic"] = ORGANIC_BONUS
    if profile.is_vegan:
        parts["vegan"] = VEGAN_BONUS
    if profile.carbon_footprint is not None:
        parts["carbonFootprint"] = tier_adjustment(
            profile.carbon_footprint.value, CARBON_TIERS
        )
    if profile.water_usage is not None:
        parts["waterUsage"] = tier_adjustment(
            profile.water_usage.value, WATER_TIERS
        )
    return parts


def compute_score(profile: SustainabilityProfile | None) -> float:
    """Compute the clamped sustainability score for *profile*.

    Pure and total: never raises for a parsed profile.  Rounded to two
    decimals so persisted scores carry no float noise.
    """
    raw = sum(score_breakdown(profile).values())
    score = round(clamp_score(raw), 2)
    logger.debug("Computed score %.2f (raw %.2f)", score, raw)
    return score
