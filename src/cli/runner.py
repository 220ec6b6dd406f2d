# src/cli/runner.py

"""Headless CLI commands built on the recommendation service."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from src.models.comparison import ComparisonResult
from src.models.errors import EcoShopError
from src.models.insights import CategoryTips, SustainabilityIndicators
from src.models.product import Product
from src.scoring.score_calculator import compute_score, score_breakdown
from src.services.recommendation_service import RecommendationService

logger = logging.getLogger("ecoshop.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _emit_json(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _score_text(score: float | None) -> str:
    return "N/A" if score is None else f"{score:g}"


def _winner(result: ComparisonResult, product_id: str | None) -> str:
    if product_id is None:
        return "—"
    return result.products[product_id].name


# ── Table rendering ──────────────────────────────────────


def _print_products(products: list[Product], title: str) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=40)
    table.add_column("Brand", style="magenta")
    table.add_column("Category")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Score", justify="right", style="bold")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.id,
            p.name,
            p.brand or "—",
            p.category,
            f"{p.price:,.2f}",
            _score_text(p.sustainability_score),
        )

    Console().print(table)


def _print_comparison(result: ComparisonResult) -> None:
    id1, id2 = result.product1_id, result.product2_id
    snap1, snap2 = result.products[id1], result.products[id2]

    table = Table(
        title=f"{snap1.name} vs {snap2.name}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Metric", style="bold")
    table.add_column(snap1.name, justify="right")
    table.add_column(snap2.name, justify="right")
    table.add_column("Better", style="green")

    table.add_row(
        "Sustainability score",
        _score_text(snap1.sustainability_score),
        _score_text(snap2.sustainability_score),
        _winner(result, result.sustainability_score.better_product),
    )
    table.add_row(
        "Price",
        f"{snap1.price:,.2f}",
        f"{snap2.price:,.2f}",
        _winner(result, result.price.better_product),
    )
    ratio = result.value_ratio
    table.add_row(
        "Score per unit price",
        "N/A" if ratio.product1 is None else f"{ratio.product1:.2f}",
        "N/A" if ratio.product2 is None else f"{ratio.product2:.2f}",
        _winner(result, ratio.better_product),
    )
    for label, metric in (
        ("Carbon footprint", result.carbon_footprint),
        ("Water usage", result.water_usage),
        ("Recycled materials %", result.recycled_materials),
    ):
        if metric is None:
            continue
        unit = f" {metric.unit}" if metric.unit else ""
        table.add_row(
            label,
            f"{metric.values[id1]:g}{unit}",
            f"{metric.values[id2]:g}{unit}",
            _winner(result, metric.better_product),
        )
    if result.certifications is not None:
        certs = result.certifications
        table.add_row(
            "Certifications",
            ", ".join(certs.values[id1]) or "—",
            ", ".join(certs.values[id2]) or "—",
            f"shared: {', '.join(certs.shared) or 'none'}",
        )

    console = Console()
    console.print(table)
    for product_id, issue in ratio.issues.items():
        _err.print(f"[yellow]{product_id}: {issue}[/yellow]")
    console.print(f"\n[bold]Summary:[/bold] {result.ai_summary}")


def _print_tips(tips: CategoryTips) -> None:
    console = Console()
    console.print(f"[bold cyan]Sustainability tips: {tips.category}[/bold cyan]")
    for idx, tip in enumerate(tips.tips, 1):
        console.print(f"[bold]{idx}. {tip.title}[/bold]\n   {tip.description}")
    if tips.greenwashing_warnings:
        table = Table(title="Greenwashing warnings", show_lines=True)
        table.add_column("Claim", style="yellow")
        table.add_column("Reality")
        for warning in tips.greenwashing_warnings:
            table.add_row(warning.claim, warning.reality)
        console.print(table)
    if tips.disposal_guidance:
        console.print(f"[bold]Disposal:[/bold] {tips.disposal_guidance}")
    if tips.sustainable_alternatives:
        console.print(
            "[bold]Alternatives:[/bold] "
            + ", ".join(tips.sustainable_alternatives)
        )


def _print_indicators(indicators: SustainabilityIndicators) -> None:
    table = Table(
        title="Sustainability indicators",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Indicator", style="bold")
    table.add_column("Value")

    def measured(value: Any) -> str:
        return "N/A" if value is None else f"{value.value:g} {value.unit}"

    def flag(value: bool | None) -> str:
        return "N/A" if value is None else ("yes" if value else "no")

    table.add_row("Carbon footprint", measured(indicators.carbon_footprint))
    table.add_row("Water usage", measured(indicators.water_usage))
    table.add_row(
        "Recycled materials",
        "N/A"
        if indicators.recycled_percentage is None
        else f"{indicators.recycled_percentage:g}%",
    )
    table.add_row(
        "Certifications", ", ".join(indicators.certifications) or "—"
    )
    table.add_row("Vegan", flag(indicators.is_vegan))
    table.add_row("Organic", flag(indicators.is_organic))
    table.add_row(
        "AI sustainability score",
        _score_text(indicators.sustainability_score),
    )
    table.add_row(
        "Rule-based score",
        _score_text(compute_score(indicators.to_profile())),
    )
    table.add_row("Highlights", "\n".join(indicators.highlights) or "—")
    table.add_row("Concerns", "\n".join(indicators.concerns) or "—")
    Console().print(table)


# ── Commands ─────────────────────────────────────────────


async def cli_seed(
    service: RecommendationService, path: Path | None = None,
) -> int:
    """Replace the catalog with a seed file (default: bundled sample)."""
    imported = await service.seed_catalog(path)
    if not imported:
        _err.print("[yellow]No products imported.[/yellow]")
        return 1
    _err.print(f"[green]✓ Seeded {imported} products[/green]")
    return 0


async def cli_score(
    service: RecommendationService, product_id: str, output_format: str,
) -> int:
    score = await service.calculate_score(product_id)
    if output_format == "json":
        _emit_json({"productId": product_id, "sustainabilityScore": score})
        return 0

    product = await service.get_product(product_id)
    table = Table(
        title=f"{product.name}: {score:g}/100",
        title_style="bold cyan",
    )
    table.add_column("Component")
    table.add_column("Points", justify="right", style="green")
    for component, points in score_breakdown(
        product.sustainability
    ).items():
        if points:
            table.add_row(component, f"{points:+g}")
    Console().print(table)
    return 0


async def cli_rescore(
    service: RecommendationService, output_format: str,
) -> int:
    scores = await service.recalculate_all_scores()
    if output_format == "json":
        _emit_json(scores)
        return 0
    table = Table(title="Recomputed scores", title_style="bold cyan")
    table.add_column("Product", style="dim")
    table.add_column("Score", justify="right", style="green")
    for product_id, score in scores.items():
        table.add_row(product_id, f"{score:g}")
    Console().print(table)
    _err.print(f"[green]✓ Rescored {len(scores)} products[/green]")
    return 0


async def cli_alternatives(
    service: RecommendationService,
    product_id: str,
    limit: int,
    output_format: str,
) -> int:
    alternatives = await service.get_alternatives(product_id, limit)
    if not alternatives:
        _err.print(
            f"[yellow]No alternatives found for {product_id}.[/yellow]"
        )
    if output_format == "json":
        _emit_json([p.to_dict() for p in alternatives])
    elif alternatives:
        _print_products(alternatives, f"Alternatives to {product_id}")
    return 0


async def cli_compare(
    service: RecommendationService,
    product_id_1: str,
    product_id_2: str,
    output_format: str,
) -> int:
    result = await service.compare_products(product_id_1, product_id_2)
    if output_format == "json":
        _emit_json(result.to_dict())
    else:
        _print_comparison(result)
    return 0


async def cli_tips(
    service: RecommendationService, category: str, output_format: str,
) -> int:
    _err.print(f"[dim]Asking for {category} tips...[/dim]")
    tips = await service.get_sustainability_tips(category)
    if output_format == "json":
        _emit_json(tips.to_dict())
    else:
        _print_tips(tips)
    return 0


async def cli_analyze(
    service: RecommendationService, description: str, output_format: str,
) -> int:
    _err.print("[dim]Analyzing description...[/dim]")
    indicators = await service.analyze_description(description)
    if output_format == "json":
        _emit_json(indicators.to_dict())
    else:
        _print_indicators(indicators)
    return 0


async def cli_search(
    service: RecommendationService,
    text: str,
    category: str | None,
    output_format: str,
) -> int:
    """Search the catalog; exit code 1 when nothing matches."""
    products = await service.search_products(text, category)
    if not products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1
    if output_format == "json":
        _emit_json([p.to_dict() for p in products])
    else:
        _print_products(products, "Catalog")
    return 0


async def run_command(
    service: RecommendationService, args: Any,
) -> int:
    """Dispatch a parsed subcommand and map domain errors to exit codes."""
    fmt: str = args.output_format
    try:
        if args.command == "seed":
            return await cli_seed(
                service, Path(args.path) if args.path else None
            )
        if args.command == "score":
            return await cli_score(service, args.product_id, fmt)
        if args.command == "rescore":
            return await cli_rescore(service, fmt)
        if args.command == "alternatives":
            return await cli_alternatives(
                service, args.product_id, args.limit, fmt
            )
        if args.command == "compare":
            return await cli_compare(
                service, args.product_id_1, args.product_id_2, fmt
            )
        if args.command == "tips":
            return await cli_tips(service, args.category, fmt)
        if args.command == "analyze":
            return await cli_analyze(service, args.description, fmt)
        if args.command == "search":
            return await cli_search(service, args.text, args.category, fmt)
    except EcoShopError as exc:
        logger.error("%s failed: %s", args.command, exc)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    _err.print(f"[red]Unknown command: {args.command}[/red]")
    return 2
