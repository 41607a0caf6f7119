import time
from datetime import datetime
from typing import Callable, List, Optional

from shop.cart import Cart
from shop.models import Order
from utils.logger import get_logger

_logger = get_logger(__name__)


class EmptyCartError(ValueError):
    """Checkout was attempted with nothing in the cart."""


class OrderBook:
    """
    Order history for one session, most recent first.

    checkout() is the only thing that moves state from the cart into the
    history. It never awaits, so callers can't observe a cleared cart
    without the matching order.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or datetime.now
        self._history: List[Order] = []
        self._last_id = 0

    @property
    def history(self) -> List[Order]:
        return list(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def _next_id(self) -> int:
        # millisecond timestamp, bumped when two checkouts share a millisecond
        self._last_id = max(time.time_ns() // 1_000_000, self._last_id + 1)
        return self._last_id

    def checkout(self, cart: Cart) -> Order:
        if not len(cart):
            raise EmptyCartError("Your cart is empty!")

        order = Order(
            id=self._next_id(),
            lines=tuple(cart.lines),
            total=cart.total(),
            created_at=self._clock(),
        )
        cart.clear()
        self._history.insert(0, order)
        _logger.info(
            f"Order {order.id} placed: {order.item_count} items, ${order.total:.2f}"
        )
        return order

    def get(self, order_id: int) -> Optional[Order]:
        for order in self._history:
            if order.id == order_id:
                return order
        return None

    def clear(self) -> None:
        self._history.clear()
