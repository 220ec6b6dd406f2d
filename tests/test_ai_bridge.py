# tests/test_ai_bridge.py

"""Tests for the AI bridge: prompts, timeouts, retries, parsing."""

import asyncio
import json
import unittest

from src.models.errors import ParseError, UpstreamError, ValidationError
from src.models.product import Product, SustainabilityProfile
from src.services.ai_bridge import AIBridge


class FakeClient:
    """Scripted GenerationClient: replays responses or raises errors."""

    def __init__(self, *responses: str | Exception, delay: float = 0.0):
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.delay = delay

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        pass


_INDICATORS = {
    "carbonFootprint": {"value": 2.1, "unit": "kg CO2e"},
    "waterUsage": {"value": 400, "unit": "liters"},
    "recycledMaterials": {"percentage": 0, "materials": []},
    "certifications": ["GOTS", "Fair Trade"],
    "isVegan": True,
    "isOrganic": True,
    "sustainabilityScore": 88,
    "sustainabilityHighlights": ["Organic cotton"],
    "sustainabilityConcerns": [],
}

_TIPS = {
    "category": "Clothing",
    "tips": [
        {"title": "Look for GOTS", "description": "Certified organic."},
        {"description": "untitled tips are skipped"},
    ],
    "greenwashingWarnings": [
        {"claim": "Eco-friendly", "reality": "Unregulated term."}
    ],
    "disposalGuidance": "Donate or textile-recycle.",
    "sustainableAlternatives": ["Second-hand"],
}


def _product(product_id: str, score: float | None) -> Product:
    return Product(
        id=product_id,
        name=product_id.title(),
        price=10.0,
        category="Home",
        brand="Acme",
        sustainability_score=score,
    )


class TestAnalyzeDescription(unittest.IsolatedAsyncioTestCase):
    """AIBridge.analyze_description."""

    async def test_parses_indicators(self) -> None:
        client = FakeClient("Here you go:\n" + json.dumps(_INDICATORS))
        bridge = AIBridge(client)
        result = await bridge.analyze_description("An organic tee")
        assert result.carbon_footprint is not None
        self.assertEqual(result.carbon_footprint.value, 2.1)
        self.assertEqual(result.certifications, ["GOTS", "Fair Trade"])
        self.assertTrue(result.is_organic)
        self.assertEqual(result.sustainability_score, 88)
        self.assertIn("An organic tee", client.prompts[0])

    async def test_indicators_project_to_profile(self) -> None:
        bridge = AIBridge(FakeClient(json.dumps(_INDICATORS)))
        result = await bridge.analyze_description("tee")
        profile = result.to_profile()
        self.assertIsInstance(profile, SustainabilityProfile)
        self.assertTrue(profile.is_vegan)

    async def test_score_clamped(self) -> None:
        payload = dict(_INDICATORS, sustainabilityScore=140)
        bridge = AIBridge(FakeClient(json.dumps(payload)))
        result = await bridge.analyze_description("tee")
        self.assertEqual(result.sustainability_score, 100)

    async def test_brace_less_response_raises_parse_error(self) -> None:
        client = FakeClient("Sorry, I can't analyse that product.")
        bridge = AIBridge(client)
        with self.assertRaises(ParseError):
            await bridge.analyze_description("tee")
        # Parse errors are not retried.
        self.assertEqual(len(client.prompts), 1)

    async def test_non_object_payload_raises_parse_error(self) -> None:
        """A block that decodes to something other than an object."""
        bridge = AIBridge(FakeClient('{"a": 1}'))
        bridge.extractor = _ListExtractor()
        with self.assertRaises(ParseError):
            await bridge.analyze_description("tee")

    async def test_empty_description_rejected(self) -> None:
        client = FakeClient()
        with self.assertRaises(ValidationError):
            await AIBridge(client).analyze_description("   ")
        self.assertEqual(client.prompts, [])


class _ListExtractor:
    def extract(self, text: str) -> object:
        return [text]


class TestTips(unittest.IsolatedAsyncioTestCase):
    """AIBridge.get_tips."""

    async def test_parses_tips(self) -> None:
        client = FakeClient(json.dumps(_TIPS))
        tips = await AIBridge(client).get_tips("Clothing")
        self.assertEqual(tips.category, "Clothing")
        self.assertEqual([t.title for t in tips.tips], ["Look for GOTS"])
        self.assertEqual(tips.greenwashing_warnings[0].claim, "Eco-friendly")
        self.assertEqual(tips.sustainable_alternatives, ["Second-hand"])
        self.assertIn('"Clothing"', client.prompts[0])

    async def test_malformed_lists_yield_empty_sections(self) -> None:
        client = FakeClient(json.dumps({
            "tips": 5,
            "greenwashingWarnings": "none",
            "disposalGuidance": "Compost it.",
        }))
        tips = await AIBridge(client).get_tips("Home")
        self.assertEqual(tips.category, "Home")
        self.assertEqual(tips.tips, [])
        self.assertEqual(tips.greenwashing_warnings, [])
        self.assertEqual(tips.disposal_guidance, "Compost it.")

    async def test_non_object_list_entries_skipped(self) -> None:
        client = FakeClient(json.dumps({
            "tips": ["loose text", {"title": "Refill", "description": ""}],
        }))
        tips = await AIBridge(client).get_tips("Home")
        self.assertEqual([t.title for t in tips.tips], ["Refill"])

    async def test_empty_category_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            await AIBridge(FakeClient()).get_tips("")


class TestRetriesAndTimeouts(unittest.IsolatedAsyncioTestCase):
    """Upstream failures are retried once; timeouts are upstream errors."""

    async def test_upstream_error_retried_once(self) -> None:
        client = FakeClient(
            UpstreamError("503"), json.dumps(_TIPS)
        )
        tips = await AIBridge(client).get_tips("Clothing")
        self.assertEqual(len(tips.tips), 1)
        self.assertEqual(len(client.prompts), 2)

    async def test_gives_up_after_retry(self) -> None:
        client = FakeClient(UpstreamError("503"), UpstreamError("503"))
        with self.assertRaises(UpstreamError):
            await AIBridge(client).get_tips("Clothing")
        self.assertEqual(len(client.prompts), 2)

    async def test_timeout_becomes_upstream_error(self) -> None:
        client = FakeClient("late", "late", delay=0.5)
        bridge = AIBridge(client, timeout=0.01, max_retries=0)
        with self.assertRaisesRegex(UpstreamError, "timed out"):
            await bridge.analyze_description("tee")

    async def test_unexpected_client_error_wrapped(self) -> None:
        client = FakeClient(RuntimeError("socket closed"))
        bridge = AIBridge(client, max_retries=0)
        with self.assertRaises(UpstreamError):
            await bridge.summarize_comparison(
                _product("a", 80), _product("b", 60)
            )


class TestSummarizeComparison(unittest.IsolatedAsyncioTestCase):
    """AIBridge.summarize_comparison."""

    async def test_returns_prose(self) -> None:
        client = FakeClient("  Product A is greener.  ")
        summary = await AIBridge(client).summarize_comparison(
            _product("a", 80), _product("b", None)
        )
        self.assertEqual(summary, "Product A is greener.")
        self.assertIn("80/100", client.prompts[0])
        self.assertIn("N/A/100", client.prompts[0])

    async def test_empty_summary_raises_parse_error(self) -> None:
        client = FakeClient("   ")
        with self.assertRaises(ParseError):
            await AIBridge(client).summarize_comparison(
                _product("a", 80), _product("b", 60)
            )


if __name__ == "__main__":
    unittest.main()
