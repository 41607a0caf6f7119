from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from shop.cart import Cart
from shop.catalog import CatalogReconciler
from shop.identity import AuthResult, IdentityProvider
from shop.orders import OrderBook


@dataclass
class SessionState:
    """
    Everything owned by one shopper session, handed to the app and its screens.

    Fields:
      - identity: upstream identity / profile provider
      - catalog: catalog snapshot and retrieval
      - cart: current cart
      - orders: orders placed in this session, newest first
    """

    identity: IdentityProvider
    catalog: CatalogReconciler = field(default_factory=CatalogReconciler)
    cart: Cart = field(default_factory=Cart)
    orders: OrderBook = field(default_factory=OrderBook)

    @property
    def uid(self) -> Optional[str]:
        return self.identity.current_user

    def start_session(self, when: Optional[datetime] = None) -> None:
        self.identity.start_session(when)

    async def end_session(self) -> AuthResult:
        """
        Log out through the identity provider. Session-owned data is dropped
        only when the logout succeeds.
        """
        result = await self.identity.logout()
        if not result.success:
            return result
        self.cart.clear()
        self.orders.clear()
        self.catalog.clear()
        await self.catalog.close()
        return result
