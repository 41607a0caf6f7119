from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Label, Rule

from shop.models import CartLine
from shop.orders import EmptyCartError
from utils.messages import CartChangedMessage, ModeSwitchedMessage, NewOrderMessage
from utils.pure import money
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal


class CartScreen(BaseScreen):
    """
    Cart lines with quantity controls, running total and checkout
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-cart")
        with Horizontal(id="hort-line-actions"):
            yield Button("-", id="btn-sub-qty")
            yield Button("+", id="btn-add-qty")
            yield Button("Remove", id="btn-remove", variant="warning")
        yield Label("Total: $0.00", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Product", "Unit Price", "Qty", "Subtotal")
        self.handle_cart_change()

    @on(CartChangedMessage)
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    def handle_cart_change(self) -> None:
        cart = self.app.state.cart
        table = self.query_one(DataTable)
        cursor = table.cursor_row

        table.clear()
        for line in cart:
            table.add_row(
                line.name,
                money(line.price),
                line.quantity,
                money(line.subtotal),
                key=str(line.product_id),
            )
        if cart.lines:
            table.move_cursor(row=min(cursor, len(cart) - 1))

        self.query_one("#label-cart-total", Label).update(
            f"Total: {money(cart.total())}"
        )
        self.set_class(not cart.lines, "no-items")

    def _selected_line(self) -> Optional[CartLine]:
        lines = self.app.state.cart.lines
        row = self.query_one(DataTable).cursor_row
        if 0 <= row < len(lines):
            return lines[row]
        return None

    @on(Button.Pressed, "#btn-add-qty")
    @on(Button.Pressed, "#btn-sub-qty")
    def handle_qty_step(self, event: Button.Pressed) -> None:
        line = self._selected_line()
        if line is None:
            return
        step = 1 if event.button.id == "btn-add-qty" else -1
        self.app.state.cart.set_quantity(line.product_id, line.quantity + step)
        self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-remove")
    @work()
    async def handle_remove_item(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        if await self.app.push_screen_wait(
            DialogModal(
                f"Remove {line.name} from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            self.app.state.cart.remove(line.product_id)
            self.post_message(CartChangedMessage())
            self.notify("Item removed from cart.", severity="information")

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if not self.app.state.cart.lines:
            self.app.notify("Cart is empty.", severity="warning")
            return

        if await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        ):
            self.app.state.cart.clear()
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-checkout")
    @work()
    async def handle_checkout(self) -> None:
        cart = self.app.state.cart
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Place order for {money(cart.total())}?",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        try:
            order = self.app.state.orders.checkout(cart)
        except EmptyCartError as exc:
            self.app.notify(str(exc), severity="warning")
            return

        self.notify(f"Order placed successfully! Order number {order.id}.")
        self.post_message(CartChangedMessage())
        self.app.post_message(NewOrderMessage(order.id))
