from typing import List

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import DataTable, MarkdownViewer

from shop.models import Order
from utils.messages import ModeSwitchedMessage, NewOrderMessage
from utils.pure import generate_markdown_table, money
from views.base_screen import BaseScreen


class OrdersScreen(BaseScreen):
    """
    Orders placed in this session, newest first, with a detail pane for the
    highlighted order.
    """

    BINDINGS = [
        Binding("up,down", "noop", "Browse Orders", show=True, key_display="↑↓"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order No", "Date", "Items", "Total", "Status")
        self.handle_refresh()

    def action_noop(self) -> None:
        pass

    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @on(NewOrderMessage)
    def handle_refresh(self) -> None:
        self._orders = self.app.state.orders.history
        table = self.query_one(DataTable)
        table.clear()
        for o in self._orders:
            table.add_row(
                o.id,
                o.created_at.strftime("%Y-%m-%d %H:%M"),
                o.item_count,
                money(o.total),
                o.status.capitalize(),
            )
        self._render_detail(self._orders[0] if self._orders else None)

    @on(DataTable.RowHighlighted, "#table-orders")
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        if 0 <= event.cursor_row < len(self._orders):
            self._render_detail(self._orders[event.cursor_row])

    def _render_detail(self, order: Order | None) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if order is None:
            viewer.document.update("### No orders yet.")
            return

        header = (
            f"### Order #{order.id}\n"
            f"Date: {order.created_at:%Y-%m-%d %H:%M}  \n"
            f"Status: {order.status}\n\n"
        )
        rows = [
            [line.name, line.quantity, money(line.price), money(line.subtotal)]
            for line in order.lines
        ]
        table = generate_markdown_table(
            ["Product", "Qty", "Unit Price", "Line Total"], rows, ["l", "r", "r", "r"]
        )
        footer = f"\n\n**Total:** {money(order.total)}"
        viewer.document.update(header + table + footer)
