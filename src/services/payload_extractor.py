# src/services/payload_extractor.py

"""Pull a structured JSON payload out of free-text AI responses."""

import json
import logging
from typing import Any, Protocol

from src.models.errors import ParseError

logger = logging.getLogger("ecoshop.ai")


class PayloadExtractor(Protocol):
    """Strategy that turns an AI response into a decoded payload."""

    def extract(self, text: str) -> Any:
        """Return the decoded payload or raise :class:`ParseError`."""
        ...


def find_brace_block(text: str) -> str | None:
    """Return the first balanced ``{...}`` region of *text*, or ``None``.

    Braces inside JSON string literals (including escaped quotes) do not
    count towards the balance.  An opening brace that is never closed
    is skipped and scanning resumes at the next one.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        start = text.find("{", start + 1)
    return None


class BraceBlockExtractor:
    """Decode the first balanced brace-delimited block in the response."""

    def extract(self, text: str) -> Any:
        block = find_brace_block(text or "")
        if block is None:
            logger.warning(
                "No brace-delimited block in AI response "
                "(%d chars)",
                len(text or ""),
            )
            raise ParseError(
                "AI response did not contain a JSON object"
            )
        try:
            return json.loads(block)
        except json.JSONDecodeError as exc:
            logger.warning(
                "AI response block is not valid JSON: %s", exc,
            )
            raise ParseError(
                f"AI response JSON could not be decoded: {exc}"
            ) from exc
