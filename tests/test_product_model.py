# tests/test_product_model.py

"""Tests for the Product and SustainabilityProfile dataclasses."""

import unittest
from datetime import datetime

from src.models.errors import ValidationError
from src.models.product import (
    DEFAULT_CARBON_UNIT,
    DEFAULT_WATER_UNIT,
    Product,
    SustainabilityProfile,
)


def _record(**overrides: object) -> dict[str, object]:
    """A valid camelCase catalog record."""
    record: dict[str, object] = {
        "id": "p1",
        "name": "Organic Cotton T-Shirt",
        "price": 24.99,
        "category": "Clothing",
        "brand": "EcoWear",
        "sustainability": {
            "carbonFootprint": {"value": 2.1, "unit": "kg CO2e"},
            "waterUsage": {"value": 400, "unit": "liters"},
            "recycledMaterials": {"percentage": 0, "materials": []},
            "certifications": ["GOTS", "Fair Trade"],
            "isVegan": True,
            "isOrganic": True,
            "productionCountry": "Portugal",
        },
    }
    record.update(overrides)
    return record


class TestProductModel(unittest.TestCase):
    """Product dataclass unit tests."""

    def test_defaults(self) -> None:
        """Optional fields default to expected values."""
        product = Product(id="x", name="X", price=1.0, category="Home")
        self.assertEqual(product.brand, "")
        self.assertIsNone(product.sustainability)
        self.assertIsNone(product.sustainability_score)
        self.assertEqual(product.alternatives, [])

    def test_from_dict_parses_profile(self) -> None:
        product = Product.from_dict(_record())
        profile = product.sustainability
        assert profile is not None
        assert profile.carbon_footprint is not None
        self.assertEqual(product.id, "p1")
        self.assertEqual(product.price, 24.99)
        self.assertEqual(profile.carbon_footprint.value, 2.1)
        self.assertEqual(profile.certifications, ["GOTS", "Fair Trade"])
        self.assertTrue(profile.is_organic)
        self.assertEqual(profile.production_country, "Portugal")

    def test_underscore_id_accepted(self) -> None:
        record = _record()
        del record["id"]
        record["_id"] = "mongo-id"
        self.assertEqual(Product.from_dict(record).id, "mongo-id")

    def test_missing_id_rejected(self) -> None:
        record = _record()
        del record["id"]
        with self.assertRaises(ValidationError):
            Product.from_dict(record)

    def test_missing_price_rejected(self) -> None:
        record = _record()
        del record["price"]
        with self.assertRaisesRegex(ValidationError, "price"):
            Product.from_dict(record)

    def test_negative_price_rejected(self) -> None:
        with self.assertRaisesRegex(ValidationError, "price"):
            Product.from_dict(_record(price=-1))

    def test_string_price_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            Product.from_dict(_record(price="24.99"))

    def test_score_out_of_range_rejected(self) -> None:
        with self.assertRaisesRegex(ValidationError, "sustainabilityScore"):
            Product.from_dict(_record(sustainabilityScore=101))

    def test_timestamps_parsed(self) -> None:
        product = Product.from_dict(
            _record(createdAt="2024-03-01T10:00:00")
        )
        self.assertEqual(product.created_at, datetime(2024, 3, 1, 10))
        with self.assertRaises(ValidationError):
            Product.from_dict(_record(createdAt="yesterday"))

    def test_to_dict_round_trips_profile(self) -> None:
        product = Product.from_dict(_record())
        again = Product.from_dict(product.to_dict())
        self.assertEqual(again.sustainability, product.sustainability)
        self.assertEqual(product.to_dict()["imageUrl"], "")


class TestSustainabilityProfile(unittest.TestCase):
    """Profile validation: malformed is an error, absent is None."""

    def test_absent_fields_are_none(self) -> None:
        profile = SustainabilityProfile.from_dict({})
        self.assertIsNone(profile.carbon_footprint)
        self.assertIsNone(profile.water_usage)
        self.assertIsNone(profile.recycled_materials)
        self.assertIsNone(profile.certifications)
        self.assertFalse(profile.is_vegan)

    def test_negative_carbon_rejected(self) -> None:
        with self.assertRaisesRegex(ValidationError, "carbonFootprint"):
            SustainabilityProfile.from_dict(
                {"carbonFootprint": {"value": -1}}
            )

    def test_carbon_without_value_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            SustainabilityProfile.from_dict(
                {"carbonFootprint": {"unit": "kg"}}
            )

    def test_default_units(self) -> None:
        profile = SustainabilityProfile.from_dict(
            {"carbonFootprint": {"value": 3}, "waterUsage": {"value": 9}}
        )
        assert profile.carbon_footprint is not None
        assert profile.water_usage is not None
        self.assertEqual(profile.carbon_footprint.unit, DEFAULT_CARBON_UNIT)
        self.assertEqual(profile.water_usage.unit, DEFAULT_WATER_UNIT)

    def test_recycled_percentage_over_100_rejected(self) -> None:
        with self.assertRaisesRegex(ValidationError, "percentage"):
            SustainabilityProfile.from_dict(
                {"recycledMaterials": {"percentage": 120}}
            )

    def test_certifications_must_be_strings(self) -> None:
        with self.assertRaises(ValidationError):
            SustainabilityProfile.from_dict({"certifications": [1, 2]})

    def test_certifications_deduplicated_in_order(self) -> None:
        profile = SustainabilityProfile.from_dict(
            {"certifications": ["GOTS", "B Corp", "GOTS"]}
        )
        self.assertEqual(profile.certifications, ["GOTS", "B Corp"])

    def test_non_boolean_flag_rejected(self) -> None:
        with self.assertRaisesRegex(ValidationError, "isVegan"):
            SustainabilityProfile.from_dict({"isVegan": "yes"})

    def test_to_dict_omits_undisclosed_records(self) -> None:
        data = SustainabilityProfile(is_vegan=True).to_dict()
        self.assertNotIn("carbonFootprint", data)
        self.assertNotIn("certifications", data)
        self.assertTrue(data["isVegan"])


if __name__ == "__main__":
    unittest.main()
