import asyncio
import unittest

import httpx

from shop.catalog import CatalogReconciler, refine
from shop.models import Product
from shop.query import FilterCriteria, compose_all
from shop.service import CatalogService, CatalogServiceError

BASE_URL = "http://catalog.test"

PRODUCTS = [
    {
        "id": 1,
        "name": "Desk Lamp",
        "description": "LED lamp with dimmer",
        "price": 35.5,
        "stock": 4,
        "rating": 4.5,
        "category": {"id": 3, "name": "Home"},
        "image": "lamp.png",
    },
    {
        "id": 2,
        "name": "Hoodie",
        "description": "Warm cotton hoodie",
        "price": "49.99",
        "stock": 10,
        "rating": 4.1,
        "category": {"id": 2, "name": "Clothing"},
    },
    {"id": 3, "name": "Headphones", "description": "Noise cancelling", "price": 199},
]


class FakeCatalog:
    """Routes requests to canned responses and records every request."""

    def __init__(self):
        self.requests = []
        self.routes = {
            "/products/": lambda req: httpx.Response(200, json=PRODUCTS),
            "/search": lambda req: httpx.Response(200, json={"results": PRODUCTS[:1]}),
            "/products/filter": lambda req: httpx.Response(200, json=PRODUCTS[1:]),
        }

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes[request.url.path](request)
        if asyncio.iscoroutine(response):
            response = await response
        return response


class CatalogTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.fake = FakeCatalog()
        self.service = CatalogService(BASE_URL, transport=httpx.MockTransport(self.fake))
        self.catalog = CatalogReconciler(self.service)

    async def asyncTearDown(self):
        await self.catalog.close()

    def names(self):
        return [p.name for p in self.catalog.products]

    # ---------- Retrieval ----------

    async def test_load_all_replaces_snapshot(self):
        result = await self.catalog.load_all()
        self.assertTrue(result.ok)
        self.assertEqual(result.count, 3)
        self.assertEqual(self.names(), ["Desk Lamp", "Hoodie", "Headphones"])
        self.assertFalse(self.catalog.busy)

        lamp, hoodie, phones = self.catalog.products
        self.assertEqual(lamp.category.name, "Home")
        self.assertEqual(hoodie.price, 49.99)
        self.assertIsNone(phones.category)
        self.assertEqual(phones.category_name, "Uncategorized")

    async def test_blank_search_equals_load_all(self):
        await self.catalog.search("   ")
        via_search = self.catalog.products
        await self.catalog.load_all()
        self.assertEqual(via_search, self.catalog.products)
        self.assertEqual({r.url.path for r in self.fake.requests}, {"/products/"})

    async def test_search_sends_trimmed_query(self):
        result = await self.catalog.search("  lamp ")
        self.assertTrue(result.ok)
        self.assertEqual(self.names(), ["Desk Lamp"])
        self.assertEqual(self.fake.requests[-1].url.params["query"], "lamp")

    async def test_search_unexpected_shape_resets_snapshot(self):
        await self.catalog.load_all()
        self.fake.routes["/search"] = lambda req: httpx.Response(200, json={"items": []})
        result = await self.catalog.search("lamp")
        self.assertTrue(result.ok)
        self.assertEqual(self.catalog.products, [])

        await self.catalog.load_all()
        self.fake.routes["/search"] = lambda req: httpx.Response(200, json=PRODUCTS)
        await self.catalog.search("lamp")
        self.assertEqual(self.catalog.products, [])

    async def test_search_malformed_records_reset_snapshot(self):
        await self.catalog.load_all()
        self.fake.routes["/search"] = lambda req: httpx.Response(
            200, json={"results": [{"name": "no id"}, 5]}
        )
        result = await self.catalog.search("lamp")
        self.assertTrue(result.ok)
        self.assertEqual(result.count, 0)
        self.assertEqual(self.catalog.products, [])
        self.assertFalse(self.catalog.busy)

    async def test_filter_sends_only_present_params(self):
        result = await self.catalog.filter(FilterCriteria(sort="newest"))
        self.assertTrue(result.ok)
        self.assertEqual(self.names(), ["Hoodie", "Headphones"])
        request = self.fake.requests[-1]
        self.assertEqual(request.url.path, "/products/filter")
        self.assertEqual(dict(request.url.params), {"sort_by": "newest"})

    async def test_filter_with_band_and_category(self):
        await self.catalog.filter(FilterCriteria(category_id="1", price_band="0-50"))
        params = self.fake.requests[-1].url.params
        self.assertEqual(params["min_price"], "0")
        self.assertEqual(params["max_price"], "50")
        self.assertEqual(params["category_id"], "1")
        self.assertNotIn("sort_by", params)

    # ---------- Failures ----------

    async def test_http_error_keeps_snapshot(self):
        await self.catalog.load_all()
        before = self.catalog.products
        self.fake.routes["/products/filter"] = lambda req: httpx.Response(500)

        result = await self.catalog.filter(FilterCriteria(category_id="2"))
        self.assertFalse(result.ok)
        self.assertIn("500", result.error)
        self.assertEqual(self.catalog.products, before)
        self.assertFalse(self.catalog.busy)

    async def test_unknown_sort_key_is_reported(self):
        await self.catalog.load_all()
        result = await self.catalog.filter(FilterCriteria(sort="rating"))
        self.assertFalse(result.ok)
        self.assertIn("rating", result.error)
        self.assertEqual(len(self.catalog.products), 3)
        self.assertFalse(self.catalog.busy)
        self.assertNotIn("/products/filter", {r.url.path for r in self.fake.requests})

    async def test_transport_error_keeps_snapshot(self):
        await self.catalog.load_all()

        def boom(req):
            raise httpx.ConnectError("connection refused", request=req)

        self.fake.routes["/search"] = boom
        result = await self.catalog.search("lamp")
        self.assertFalse(result.ok)
        self.assertEqual(len(self.catalog.products), 3)
        self.assertFalse(self.catalog.busy)

    async def test_non_list_listing_is_failure(self):
        await self.catalog.load_all()
        self.fake.routes["/products/"] = lambda req: httpx.Response(200, json={"oops": 1})
        result = await self.catalog.load_all()
        self.assertFalse(result.ok)
        self.assertEqual(len(self.catalog.products), 3)

    async def test_invalid_json_raises_service_error(self):
        self.fake.routes["/products/"] = lambda req: httpx.Response(200, text="<html>")
        with self.assertRaises(CatalogServiceError):
            await self.service.fetch(compose_all())

    # ---------- Concurrency ----------

    async def test_busy_while_in_flight(self):
        release = asyncio.Event()
        started = asyncio.Event()

        async def slow(req):
            started.set()
            await release.wait()
            return httpx.Response(200, json=PRODUCTS)

        self.fake.routes["/products/"] = slow
        task = asyncio.create_task(self.catalog.load_all())
        await started.wait()
        self.assertTrue(self.catalog.busy)
        release.set()
        await task
        self.assertFalse(self.catalog.busy)

    async def test_late_response_from_older_request_is_dropped(self):
        release = asyncio.Event()
        started = asyncio.Event()

        async def slow_search(req):
            started.set()
            await release.wait()
            return httpx.Response(200, json={"results": PRODUCTS})

        self.fake.routes["/search"] = slow_search
        older = asyncio.create_task(self.catalog.search("everything"))
        await started.wait()

        newer = await self.catalog.filter(FilterCriteria(price_band="0-50"))
        self.assertTrue(newer.ok)
        self.assertFalse(newer.stale)
        self.assertTrue(self.catalog.busy)

        release.set()
        stale = await older
        self.assertTrue(stale.stale)
        self.assertEqual(self.names(), ["Hoodie", "Headphones"])
        self.assertFalse(self.catalog.busy)

    # ---------- Refinement ----------

    async def test_refine(self):
        await self.catalog.load_all()
        self.assertEqual(self.catalog.refine(""), self.catalog.products)
        self.assertEqual(self.catalog.refine("xyz-no-match"), [])
        self.assertEqual([p.id for p in self.catalog.refine("LAMP")], [1])
        # matches on description too
        self.assertEqual([p.id for p in self.catalog.refine("cotton")], [2])
        self.assertEqual(len(self.catalog.products), 3)


class RefineTestCase(unittest.TestCase):
    def test_refine_keeps_order_and_is_pure(self):
        products = [
            Product(id=i, name=n, description=d, price=1, stock=1, rating=0)
            for i, (n, d) in enumerate(
                [("Red Mug", ""), ("Plate", "goes with the red mug"), ("Fork", "")]
            )
        ]
        snapshot = list(products)
        self.assertEqual([p.id for p in refine(products, "mug")], [0, 1])
        self.assertEqual(products, snapshot)


if __name__ == "__main__":
    unittest.main()
