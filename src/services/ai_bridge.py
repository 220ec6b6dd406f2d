# src/services/ai_bridge.py

"""Adapter between structured requests and the generation service.

Each operation builds a prompt, sends it through the injected
:class:`GenerationClient` under a timeout, and (for the structured
operations) decodes the payload with the injected
:class:`PayloadExtractor`.
"""

import asyncio
import logging
from typing import Any

from src.config.settings import Settings
from src.models.errors import ParseError, UpstreamError, ValidationError
from src.models.insights import CategoryTips, SustainabilityIndicators
from src.models.product import Product
from src.services.ai_client import GenerationClient
from src.services.payload_extractor import (
    BraceBlockExtractor,
    PayloadExtractor,
)
from src.services.prompts import (
    build_analysis_prompt,
    build_comparison_prompt,
    build_tips_prompt,
)

logger = logging.getLogger("ecoshop.ai")


class AIBridge:
    """Turns descriptions, categories and product pairs into AI output."""

    def __init__(
        self,
        client: GenerationClient,
        extractor: PayloadExtractor | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_backoff: float | None = None,
    ) -> None:
        self.client = client
        self.extractor: PayloadExtractor = (
            extractor or BraceBlockExtractor()
        )
        self.timeout = Settings.AI_TIMEOUT if timeout is None else timeout
        self.max_retries = (
            Settings.AI_MAX_RETRIES if max_retries is None else max_retries
        )
        self.retry_backoff = (
            Settings.AI_RETRY_BACKOFF
            if retry_backoff is None
            else retry_backoff
        )

    # ── Private helpers ──────────────────────────────────

    async def _generate_once(self, prompt: str) -> str:
        """One bounded call; every failure surfaces as UpstreamError."""
        try:
            return await asyncio.wait_for(
                self.client.generate(prompt), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            raise UpstreamError(
                f"Generation service timed out after {self.timeout:g}s"
            ) from exc
        except UpstreamError:
            raise
        except Exception as exc:
            logger.warning(
                "Unexpected generation client failure: %s",
                exc,
                exc_info=True,
            )
            raise UpstreamError(
                f"Generation service error: {exc}"
            ) from exc

    async def _generate(self, prompt: str, operation: str) -> str:
        """Call the service, retrying upstream failures with backoff."""
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                text = await self._generate_once(prompt)
                logger.debug(
                    "%s: received %d chars on attempt %d",
                    operation,
                    len(text),
                    attempt,
                )
                return text
            except UpstreamError as exc:
                if attempt >= attempts:
                    logger.error(
                        "%s failed after %d attempt(s): %s",
                        operation,
                        attempt,
                        exc,
                    )
                    raise
                delay = self.retry_backoff * attempt
                logger.warning(
                    "%s attempt %d failed (%s), retrying in %.1fs",
                    operation,
                    attempt,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)
        raise UpstreamError(f"{operation}: no attempts were made")

    async def _generate_payload(self, prompt: str, operation: str) -> Any:
        text = await self._generate(prompt, operation)
        return self.extractor.extract(text)

    # ── Operations ───────────────────────────────────────

    async def analyze_description(
        self, description: str,
    ) -> SustainabilityIndicators:
        """Extract sustainability indicators from a product description.

        Raises:
            ValidationError: *description* is empty.
            UpstreamError: The service failed or timed out.
            ParseError: The response held no decodable JSON object.
        """
        if not description or not description.strip():
            raise ValidationError("Product description is required")
        payload = await self._generate_payload(
            build_analysis_prompt(description), "analyze_description"
        )
        return SustainabilityIndicators.from_payload(payload)

    async def get_tips(self, category: str) -> CategoryTips:
        """Fetch shopper guidance for a product category."""
        if not category or not category.strip():
            raise ValidationError("Category is required")
        payload = await self._generate_payload(
            build_tips_prompt(category), "get_tips"
        )
        return CategoryTips.from_payload(payload, category.strip())

    async def summarize_comparison(
        self, product1: Product, product2: Product,
    ) -> str:
        """Return a short prose comparison of two products."""
        text = await self._generate(
            build_comparison_prompt(product1, product2),
            "summarize_comparison",
        )
        if not text.strip():
            raise ParseError("AI comparison summary was empty")
        return text.strip()
