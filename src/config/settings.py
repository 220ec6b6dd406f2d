# src/config/settings.py

"""Central configuration for the ecoshop engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the ecoshop engine."""

    # --- AI collaborator ---
    AI_MODEL: str = os.getenv("ECOSHOP_AI_MODEL", "gpt-4o-mini")
    AI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    AI_BASE_URL: str | None = os.getenv("OPENAI_BASE_URL") or None
    AI_TIMEOUT: float = 20.0            # Seconds before an AI call is abandoned
    AI_MAX_RETRIES: int = 1             # Extra attempts after an upstream failure
    AI_RETRY_BACKOFF: float = 1.5       # Seconds, multiplied by attempt number
    AI_TEMPERATURE: float = 0.2
    AI_MAX_TOKENS: int = 1200

    # --- Comparison ---
    COMPARISON_SUMMARY_FALLBACK: str = (
        "AI-powered comparison currently unavailable."
    )

    # --- Alternatives ---
    DEFAULT_ALTERNATIVES_LIMIT: int = 5
    MAX_ALTERNATIVES_LIMIT: int = 50

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv(
        "ECOSHOP_CONSOLE_LOG_LEVEL", "WARNING"
    ).upper()

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    CATALOG_DB_PATH: Path = DATA_DIR / "catalog.db"
    SEED_CATALOG_PATH: Path = DATA_DIR / "seed_products.json"
    LOGS_DIR: Path = BASE_DIR / "logs"
