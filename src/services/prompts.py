# src/services/prompts.py

"""Prompt templates sent to the generation service."""

from src.models.product import Product

ANALYZE_DESCRIPTION_PROMPT = """\
Analyze the following product description and extract sustainability indicators:
- Carbon footprint estimation (if mentioned)
- Water usage (if mentioned)
- Recycled materials percentage
- Organic materials
- Sustainable certifications
- Ethical manufacturing practices
- Local production indicators

Product: {description}

Respond with a single JSON object, no markdown, with these fields:
{{
  "carbonFootprint": {{"value": number, "unit": "kg CO2e"}},
  "waterUsage": {{"value": number, "unit": "liters"}},
  "recycledMaterials": {{"percentage": number, "materials": [string]}},
  "certifications": [string],
  "isVegan": boolean,
  "isOrganic": boolean,
  "sustainabilityScore": number (0-100),
  "sustainabilityHighlights": [string],
  "sustainabilityConcerns": [string]
}}
Use null for any value the description gives no basis for.
"""

CATEGORY_TIPS_PROMPT = """\
Provide 3-5 specific sustainability tips for consumers looking to purchase \
products in the "{category}" category.
Focus on:
1. What sustainability features to look for
2. Common greenwashing tactics to avoid
3. How to properly dispose of or recycle the product
4. Alternative more sustainable options in this category

Respond with a single JSON object, no markdown, with this structure:
{{
  "category": "{category}",
  "tips": [
    {{"title": "Tip title", "description": "Detailed explanation"}}
  ],
  "greenwashingWarnings": [
    {{"claim": "Common misleading claim", "reality": "The actual truth"}}
  ],
  "disposalGuidance": "How to properly dispose of these products",
  "sustainableAlternatives": ["Alternative 1", "Alternative 2"]
}}
"""

COMPARISON_SUMMARY_PROMPT = """\
Compare these two products from a sustainability perspective:

Product 1: {name1} by {brand1}
Sustainability Score: {score1}/100
Price: ${price1:.2f}

Product 2: {name2} by {brand2}
Sustainability Score: {score2}/100
Price: ${price2:.2f}
{details}
Provide a brief (3-4 sentences) comparison summary focusing on \
sustainability, which product is more eco-friendly, and whether the price \
difference is justified by the sustainability benefits. Answer in plain \
prose.
"""


def _score_text(product: Product) -> str:
    if product.sustainability_score is None:
        return "N/A"
    return f"{product.sustainability_score:g}"


def _carbon_text(product: Product) -> str:
    profile = product.sustainability
    if profile is None or profile.carbon_footprint is None:
        return "N/A"
    carbon = profile.carbon_footprint
    return f"{carbon.value:g} {carbon.unit}"


def _recycled_text(product: Product) -> str:
    profile = product.sustainability
    if (
        profile is None
        or profile.recycled_materials is None
        or profile.recycled_materials.percentage is None
    ):
        return "N/A"
    return f"{profile.recycled_materials.percentage:g}%"


def build_analysis_prompt(description: str) -> str:
    return ANALYZE_DESCRIPTION_PROMPT.format(description=description.strip())


def build_tips_prompt(category: str) -> str:
    return CATEGORY_TIPS_PROMPT.format(category=category.strip())


def build_comparison_prompt(product1: Product, product2: Product) -> str:
    """Build the summary prompt for a product pair.

    Carbon and recycled-material lines are included only when both
    products carry a sustainability profile.
    """
    details = ""
    if product1.sustainability and product2.sustainability:
        details = (
            "\nCarbon Footprint:\n"
            f"- Product 1: {_carbon_text(product1)}\n"
            f"- Product 2: {_carbon_text(product2)}\n"
            "\nRecycled Materials:\n"
            f"- Product 1: {_recycled_text(product1)}\n"
            f"- Product 2: {_recycled_text(product2)}\n"
        )
    return COMPARISON_SUMMARY_PROMPT.format(
        name1=product1.name,
        brand1=product1.brand or "unknown brand",
        score1=_score_text(product1),
        price1=product1.price,
        name2=product2.name,
        brand2=product2.brand or "unknown brand",
        score2=_score_text(product2),
        price2=product2.price,
        details=details,
    )
