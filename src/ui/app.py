# src/ui/app.py

"""Terminal UI for browsing the catalog and its sustainability data."""

import logging
from pathlib import Path
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.models.comparison import ComparisonResult
from src.models.errors import EcoShopError
from src.models.insights import CategoryTips
from src.models.product import Product
from src.services.ai_bridge import AIBridge
from src.services.ai_client import OpenAIGenerationClient
from src.services.recommendation_service import RecommendationService
from src.storage.catalog_db import CatalogDB

logger = logging.getLogger("ecoshop.ui")


def _score_cell(score: float | None) -> Text:
    if score is None:
        return Text("N/A", style="dim")
    if score >= 80:
        style = "bold green"
    elif score >= 50:
        style = "yellow"
    else:
        style = "red"
    return Text(f"{score:g}", style=style)


def describe_product(product: Product) -> str:
    """Multi-line summary of a product's sustainability profile."""
    lines = [
        f"[bold]{product.name}[/bold] ({product.brand or 'unknown brand'})",
        f"Category: {product.category}   Price: {product.price:,.2f}",
        "Score: "
        + (
            "N/A"
            if product.sustainability_score is None
            else f"{product.sustainability_score:g}/100"
        ),
    ]
    profile = product.sustainability
    if profile is None:
        lines.append("[dim]No sustainability data[/dim]")
        return "\n".join(lines)
    if profile.carbon_footprint is not None:
        carbon = profile.carbon_footprint
        lines.append(f"Carbon: {carbon.value:g} {carbon.unit}")
    if profile.water_usage is not None:
        water = profile.water_usage
        lines.append(f"Water: {water.value:g} {water.unit}")
    recycled = profile.recycled_materials
    if recycled is not None and recycled.percentage is not None:
        lines.append(f"Recycled: {recycled.percentage:g}%")
    if profile.certifications:
        lines.append("Certified: " + ", ".join(profile.certifications))
    flags = [
        label
        for label, on in (
            ("organic", profile.is_organic),
            ("vegan", profile.is_vegan),
        )
        if on
    ]
    if flags:
        lines.append("Also: " + ", ".join(flags))
    return "\n".join(lines)


def describe_comparison(result: ComparisonResult) -> str:
    names = {pid: snap.name for pid, snap in result.products.items()}

    def winner(product_id: str | None) -> str:
        return names.get(product_id, "—") if product_id else "—"

    lines = [
        "[bold]"
        + " vs ".join(names[pid] for pid in (
            result.product1_id, result.product2_id
        ))
        + "[/bold]",
        f"More sustainable: {winner(result.sustainability_score.better_product)}",
        f"Cheaper: {winner(result.price.better_product)}",
        f"Better value: {winner(result.value_ratio.better_product)}",
    ]
    if result.carbon_footprint is not None:
        lines.append(
            f"Lower carbon: {winner(result.carbon_footprint.better_product)}"
        )
    if result.water_usage is not None:
        lines.append(
            f"Less water: {winner(result.water_usage.better_product)}"
        )
    if result.certifications is not None and result.certifications.shared:
        lines.append(
            "Shared certifications: "
            + ", ".join(result.certifications.shared)
        )
    lines.append("")
    lines.append(result.ai_summary)
    return "\n".join(lines)


def describe_tips(tips: CategoryTips) -> str:
    lines = [f"[bold]Tips for {tips.category}[/bold]"]
    lines.extend(
        f"• {tip.title}: {tip.description}" for tip in tips.tips
    )
    for warning in tips.greenwashing_warnings:
        lines.append(
            f"[yellow]⚠ {warning.claim}[/yellow] → {warning.reality}"
        )
    if tips.disposal_guidance:
        lines.append(f"Disposal: {tips.disposal_guidance}")
    return "\n".join(lines)


class EcoShopApp(App[object]):
    """Terminal UI for the ecoshop sustainability engine."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "alternatives", "Alternatives"),
        Binding("m", "mark_compare", "Compare"),
        Binding("t", "tips", "Tips"),
        Binding("s", "rescore", "Rescore"),
    ]

    def __init__(
        self,
        service: RecommendationService | None = None,
        db_path: Path | None = None,
    ) -> None:
        super().__init__()
        self._client: OpenAIGenerationClient | None = None
        self._catalog: CatalogDB | None = None
        if service is None:
            self._catalog = CatalogDB(db_path)
            self._client = OpenAIGenerationClient()
            service = RecommendationService(
                self._catalog, AIBridge(self._client)
            )
        self.service = service
        self.products: list[Product] = []
        self.compare_mark: Product | None = None
        self.details_text: str = ""

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🌱 EcoShop sustainability browser", id="title"),
            Horizontal(
                Input(
                    placeholder="Search name, brand or description...",
                    id="search_input",
                ),
                Input(placeholder="Category", id="category_input"),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            Horizontal(
                cast(
                    DataTable[str | Text],
                    DataTable(
                        id="results_table",
                        zebra_stripes=True,
                        cursor_type="row",
                    ),
                ),
                Static("", id="details"),
                id="body",
            ),
            id="main_container",
        )
        yield Footer()

    async def on_mount(self) -> None:
        """Configure the table and show the whole catalog."""
        self._table().add_columns(
            "Name", "Brand", "Category", "Price", "Score"
        )
        await self.perform_search()

    async def on_unmount(self) -> None:
        if self._client is not None:
            await self._client.close()
        if self._catalog is not None:
            self._catalog.close()

    # ── Helpers ──────────────────────────────────────────

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )

    def _set_status(self, message: str) -> None:
        self.query_one("#status", Static).update(message)

    def show_details(self, text: str) -> None:
        self.details_text = text
        self.query_one("#details", Static).update(text)

    def selected_product(self) -> Product | None:
        row = self._table().cursor_row
        if 0 <= row < len(self.products):
            return self.products[row]
        return None

    def _require_selection(self) -> Product | None:
        product = self.selected_product()
        if product is None:
            self.notify("Select a product first", severity="warning")
        return product

    def _report(self, action: str, exc: EcoShopError) -> None:
        logger.error("%s failed: %s", action, exc)
        self.notify(f"{action} failed: {exc}", severity="error")

    # ── Events ───────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id in ("search_input", "category_input"):
            await self.perform_search()

    def on_data_table_row_highlighted(
        self, event: DataTable.RowHighlighted
    ) -> None:
        if 0 <= event.cursor_row < len(self.products):
            self.show_details(
                describe_product(self.products[event.cursor_row])
            )

    async def perform_search(self) -> None:
        """Query the catalog with the current search box values."""
        text = self.query_one("#search_input", Input).value.strip()
        category = (
            self.query_one("#category_input", Input).value.strip() or None
        )
        self.products = await self.service.search_products(text, category)
        self.populate_table()
        if self.products:
            self._set_status(f"✅ {len(self.products)} products")
            self._table().focus()
        else:
            self._set_status("❌ No products found")

    def populate_table(self, cursor_row: int = 0) -> None:
        """Fill the DataTable with the current products."""
        table = self._table()
        table.clear()
        for p in self.products:
            table.add_row(
                p.name[:50],
                p.brand,
                p.category,
                f"{p.price:,.2f}",
                _score_cell(p.sustainability_score),
                key=p.id,
            )
        if self.products:
            table.move_cursor(
                row=min(cursor_row, len(self.products) - 1)
            )

    # ── Actions ──────────────────────────────────────────

    async def action_alternatives(self) -> None:
        """Show more sustainable products in the same category."""
        product = self._require_selection()
        if product is None:
            return
        try:
            alternatives = await self.service.get_alternatives(product.id)
        except EcoShopError as exc:
            self._report("Alternatives", exc)
            return
        if not alternatives:
            self.show_details(
                f"No alternatives for [bold]{product.name}[/bold]"
            )
            return
        lines = [f"[bold]Alternatives to {product.name}[/bold]"]
        lines.extend(
            f"{idx}. {alt.name} ({alt.brand}): "
            + (
                "N/A"
                if alt.sustainability_score is None
                else f"{alt.sustainability_score:g}"
            )
            for idx, alt in enumerate(alternatives, 1)
        )
        self.show_details("\n".join(lines))

    async def action_mark_compare(self) -> None:
        """Mark a product, then compare it with the next one marked."""
        product = self._require_selection()
        if product is None:
            return
        if self.compare_mark is None:
            self.compare_mark = product
            self.notify(
                f"Marked {product.name}; select another and press m"
            )
            return
        if self.compare_mark.id == product.id:
            self.compare_mark = None
            self.notify("Comparison mark cleared")
            return

        first, self.compare_mark = self.compare_mark, None
        self._set_status(f"⚖ Comparing {first.name} and {product.name}...")
        try:
            result = await self.service.compare_products(
                first.id, product.id
            )
        except EcoShopError as exc:
            self._report("Comparison", exc)
            return
        self.show_details(describe_comparison(result))
        self._set_status("✅ Comparison ready")

    async def action_tips(self) -> None:
        """Show AI buying tips for the selected product's category."""
        product = self._require_selection()
        if product is None:
            return
        self._set_status(f"💡 Fetching {product.category} tips...")
        try:
            tips = await self.service.get_sustainability_tips(
                product.category
            )
        except EcoShopError as exc:
            self._report("Tips", exc)
            self._set_status("❌ Tips unavailable")
            return
        self.show_details(describe_tips(tips))
        self._set_status("✅ Tips ready")

    async def action_rescore(self) -> None:
        """Recompute the selected product's score from its profile."""
        product = self._require_selection()
        if product is None:
            return
        row = self._table().cursor_row
        try:
            score = await self.service.calculate_score(product.id)
        except EcoShopError as exc:
            self._report("Rescore", exc)
            return
        product.sustainability_score = score
        self.populate_table(cursor_row=row)
        self.notify(f"{product.name}: score {score:g}")
