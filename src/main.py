from typing import Optional

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from shop.identity import LocalIdentityProvider
from utils.logger import get_logger
from utils.messages import (
    CartChangedMessage,
    ModeSwitchedMessage,
    QuitRequestedMessage,
    UserLogoutMessage,
)
from utils.state import SessionState
from views.base_screen import Sidebar
from views.scr_cart import CartScreen
from views.scr_orders import OrdersScreen
from views.scr_products import ProductsScreen
from views.scr_profile import ProfileScreen

_logger = get_logger(__name__)


class StorefrontApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "products": ProductsScreen,
        "cart": CartScreen,
        "orders": OrdersScreen,
        "profile": ProfileScreen,
    }

    MODE_LABELS = {
        "products": "Products",
        "cart": "Cart",
        "orders": "Orders",
        "profile": "Profile",
    }

    CSS_PATH = "styles/storefront.tcss"

    state: SessionState

    def __init__(self, state: Optional[SessionState] = None):
        super().__init__()
        self.state = state or SessionState(identity=LocalIdentityProvider.from_env())

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.state.start_session()
        self.post_message(ModeSwitchedMessage(self.current_mode, "products"))
        await self.switch_mode("products")

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(CartChangedMessage)
    def handle_cart_changed(self) -> None:
        for sidebar in self.screen.query(Sidebar):
            sidebar.refresh_badge()

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        result = await self.state.end_session()
        if not result.success:
            self.notify(f"Logout failed: {result.error}", severity="error")
            return
        _logger.info("Logged out, closing storefront.")
        self.exit()

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        if self.state.uid:
            await self.state.end_session()
        self.exit()


def run() -> None:
    StorefrontApp().run()


if __name__ == "__main__":
    run()
