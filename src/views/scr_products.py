from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Input, Label, Select

from shop.catalog import FetchResult
from shop.models import Product
from shop.query import FilterCriteria, SortOption
from utils.messages import CartChangedMessage, CatalogUpdatedMessage
from utils.pure import money
from views.base_screen import BaseScreen

CATEGORY_OPTIONS = [("Electronics", "1"), ("Clothing", "2"), ("Home", "3")]
PRICE_OPTIONS = [("$0 - $50", "0-50"), ("$50 - $200", "50-200"), ("$200 - $500", "200-500")]
SORT_OPTIONS = [
    ("Price: Low -> High", SortOption.PRICE_ASC.value),
    ("Price: High -> Low", SortOption.PRICE_DESC.value),
    ("Newest", SortOption.NEWEST.value),
]


def _selected(select: Select):
    return None if select.value is Select.BLANK else select.value


class ProductsScreen(BaseScreen):
    """
    Catalog browsing: server search, server filter/sort, and a local
    refine box that narrows whatever is currently loaded.
    """

    # shown in footer only; Enter on the table is handled by RowSelected
    BINDINGS = [
        Binding("enter", "noop", "Add to Cart", show=True, key_display="⏎"),
    ]

    def __init__(self):
        super().__init__()
        self._visible: List[Product] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-search"):
            yield Input(placeholder="Search products...", id="input-search")
            yield Button("Search", id="btn-search", variant="primary")
        with Horizontal(id="hort-filters"):
            yield Select(CATEGORY_OPTIONS, prompt="All Categories", id="sel-category")
            yield Select(PRICE_OPTIONS, prompt="All Prices", id="sel-price")
            yield Select(SORT_OPTIONS, prompt="Sort By", id="sel-sort")
            yield Button("Apply Filters", id="btn-filter")
        yield Input(placeholder="Narrow the list below...", id="input-refine")
        yield DataTable(id="table-products")
        yield Label("", id="label-product-cnt")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "Rating", "Stock")

        if self.app.state.catalog.products:
            self.render_products()
        else:
            self.load_all()

        self.query_one("#input-search").focus()

    def action_noop(self) -> None:
        pass

    # ---------------------------
    # Retrieval
    # ---------------------------

    @work()
    async def load_all(self) -> None:
        await self._run(self.app.state.catalog.load_all(), "Loading products failed")

    @on(Input.Submitted, "#input-search")
    @on(Button.Pressed, "#btn-search")
    @work()
    async def handle_search(self) -> None:
        text = self.query_one("#input-search", Input).value
        await self._run(self.app.state.catalog.search(text), "Search failed")

    @on(Button.Pressed, "#btn-filter")
    @work()
    async def handle_filter(self) -> None:
        criteria = FilterCriteria(
            category_id=_selected(self.query_one("#sel-category", Select)),
            price_band=_selected(self.query_one("#sel-price", Select)),
            sort=_selected(self.query_one("#sel-sort", Select)),
        )
        await self._run(self.app.state.catalog.filter(criteria), "Filter failed")

    async def _run(self, pending, failure_caption: str) -> None:
        table = self.query_one(DataTable)
        table.loading = True
        result: FetchResult = await pending
        table.loading = self.app.state.catalog.busy

        if result.stale:
            return
        error = f"{failure_caption}: {result.error}" if not result.ok else ""
        self.post_message(CatalogUpdatedMessage(result.ok, error))

    @on(CatalogUpdatedMessage)
    def handle_catalog_updated(self, message: CatalogUpdatedMessage) -> None:
        if not message.ok:
            self.notify(message.error, severity="error")
        self.render_products()

    # ---------------------------
    # Display
    # ---------------------------

    @on(Input.Changed, "#input-refine")
    def render_products(self) -> None:
        refine_text = self.query_one("#input-refine", Input).value
        self._visible = self.app.state.catalog.refine(refine_text)

        table = self.query_one(DataTable)
        table.clear()
        for p in self._visible:
            table.add_row(
                p.name, p.category_name, money(p.price), f"{p.rating:g}", p.stock
            )

        total = len(self.app.state.catalog.products)
        self.query_one("#label-product-cnt", Label).update(
            f"Showing {len(self._visible)} of {total} products"
        )

    @on(DataTable.RowSelected, "#table-products")
    def handle_add_to_cart(self, event: DataTable.RowSelected) -> None:
        if not 0 <= event.cursor_row < len(self._visible):
            return
        product = self._visible[event.cursor_row]
        line = self.app.state.cart.add(product)
        self.notify(f"{product.name} added to cart! ({line.quantity} in cart)")
        self.app.post_message(CartChangedMessage())
