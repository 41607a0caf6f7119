import unittest

import httpx
from textual.widgets import DataTable

from main import StorefrontApp
from shop.catalog import CatalogReconciler
from shop.identity import LocalIdentityProvider
from shop.models import UserProfile
from shop.service import CatalogService
from utils.messages import CatalogUpdatedMessage
from utils.state import SessionState

PRODUCTS = [
    {"id": 10, "name": "Kettle", "description": "1.7L", "price": 30, "stock": 2, "rating": 4},
    {"id": 11, "name": "Teapot", "description": "Ceramic", "price": 20, "stock": 5, "rating": 5},
]


class StorefrontAppTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(200, json=PRODUCTS))
        self.state = SessionState(
            identity=LocalIdentityProvider(UserProfile(uid="u-1", email="a@example.com")),
            catalog=CatalogReconciler(
                CatalogService("http://catalog.test", transport=transport)
            ),
        )

    async def asyncTearDown(self):
        await self.state.catalog.close()

    async def test_products_load_and_add_to_cart(self):
        app = StorefrontApp(self.state)
        async with app.run_test() as pilot:
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            self.assertEqual(len(self.state.catalog.products), 2)
            table = app.screen.query_one("#table-products", DataTable)
            self.assertEqual(table.row_count, 2)

            table.focus()
            await pilot.press("enter")
            await pilot.pause()
            self.assertEqual(len(self.state.cart), 1)
            self.assertEqual(self.state.cart.lines[0].name, "Kettle")
            self.assertIsNotNone(self.state.identity.profile.last_login)

    async def test_catalog_update_redraws_product_table(self):
        app = StorefrontApp(self.state)
        async with app.run_test() as pilot:
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()
            table = app.screen.query_one("#table-products", DataTable)
            self.assertEqual(table.row_count, 2)

            self.state.catalog.clear()
            app.screen.post_message(CatalogUpdatedMessage(False, "Search failed: offline"))
            await pilot.pause()
            self.assertEqual(table.row_count, 0)


if __name__ == "__main__":
    unittest.main()
