# main.py

"""Entry point for the ecoshop application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("ecoshop.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="ecoshop",
        description="Sustainability scoring and recommendation engine.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--db",
        default=None,
        dest="db_path",
        help=f"Catalog database (default: {Settings.CATALOG_DB_PATH}).",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    seed = sub.add_parser(
        "seed", help="Replace the catalog with sample products."
    )
    seed.add_argument(
        "path", nargs="?", default=None,
        help="JSON catalog file (default: bundled seed data).",
    )

    score = sub.add_parser(
        "score", help="Recompute and store a product's score."
    )
    score.add_argument("product_id")

    sub.add_parser("rescore", help="Recompute every product's score.")

    alternatives = sub.add_parser(
        "alternatives", help="Suggest more sustainable alternatives."
    )
    alternatives.add_argument("product_id")
    alternatives.add_argument(
        "-n",
        "--limit",
        type=int,
        default=Settings.DEFAULT_ALTERNATIVES_LIMIT,
        help=(
            "Maximum alternatives "
            f"(default: {Settings.DEFAULT_ALTERNATIVES_LIMIT})."
        ),
    )

    compare = sub.add_parser("compare", help="Compare two products.")
    compare.add_argument("product_id_1")
    compare.add_argument("product_id_2")

    tips = sub.add_parser(
        "tips", help="AI sustainability tips for a category."
    )
    tips.add_argument("category")

    analyze = sub.add_parser(
        "analyze", help="AI analysis of a product description."
    )
    analyze.add_argument("description")

    search = sub.add_parser("search", help="Search the catalog.")
    search.add_argument("text", nargs="?", default="")
    search.add_argument(
        "-c", "--category", default=None, help="Restrict to a category."
    )
    return parser


def _run_tui(db_path: Path | None) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import EcoShopApp

    try:
        app = EcoShopApp(db_path=db_path)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("ecoshop TUI shutting down")


async def _run_cli(args: argparse.Namespace) -> int:
    """Build the service, run one command, and release resources."""
    from src.cli.runner import run_command
    from src.services.ai_bridge import AIBridge
    from src.services.ai_client import OpenAIGenerationClient
    from src.services.recommendation_service import RecommendationService
    from src.storage.catalog_db import CatalogDB

    catalog = CatalogDB(Path(args.db_path) if args.db_path else None)
    client = OpenAIGenerationClient()
    service = RecommendationService(catalog, AIBridge(client))
    try:
        return await run_command(service, args)
    finally:
        await client.close()
        catalog.close()


def main() -> None:
    """Route to TUI (no command) or a headless CLI command."""
    log_file = setup_logging()
    logger.info("ecoshop starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        _run_tui(Path(args.db_path) if args.db_path else None)
    else:
        sys.exit(asyncio.run(_run_cli(args)))


if __name__ == "__main__":
    main()
