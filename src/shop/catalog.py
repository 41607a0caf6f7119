from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

from shop.models import Product
from shop.query import (
    FilterCriteria,
    RetrievalRequest,
    compose_all,
    compose_filter,
    compose_search,
)
from shop.service import CatalogService, CatalogServiceError
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one catalog retrieval.

    ok=False means the request failed and the snapshot was left as it was.
    stale=True means a newer request was issued meanwhile, so this response
    was dropped without touching the snapshot.
    """

    ok: bool
    error: Optional[str] = None
    stale: bool = False
    count: int = 0


def refine(products: Iterable[Product], text: str) -> List[Product]:
    """Products whose name or description contains `text`, ignoring case."""
    needle = (text or "").lower()
    if not needle:
        return list(products)
    return [
        p
        for p in products
        if needle in p.name.lower() or needle in p.description.lower()
    ]


def _decode_products(records: Sequence[Any]) -> List[Product]:
    products = []
    for raw in records:
        if not isinstance(raw, dict) or "id" not in raw:
            raise CatalogServiceError(f"Malformed product record: {raw!r}")
        products.append(Product.from_dict(raw))
    return products


def _as_list(data: Any) -> List[Product]:
    if not isinstance(data, list):
        raise CatalogServiceError(
            f"Expected a list of products, got {type(data).__name__}"
        )
    return _decode_products(data)


def _search_results(data: Any) -> List[Product]:
    # anything other than {"results": [...]} of well-formed records counts as "no results"
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        try:
            return _decode_products(data["results"])
        except CatalogServiceError as exc:
            _logger.warning(f"Search results are malformed ({exc}); clearing products.")
            return []
    _logger.warning("Search response has no results list; clearing products.")
    return []


class CatalogReconciler:
    """
    Owns the catalog snapshot and the busy flag.

    Every retrieval takes a sequence token; only the response to the most
    recently issued request may replace the snapshot, so a slow earlier
    request can't overwrite newer results.
    """

    def __init__(self, service: Optional[CatalogService] = None):
        self.service = service or CatalogService()
        self._products: List[Product] = []
        self._issued = 0
        self._in_flight = 0

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    @property
    def busy(self) -> bool:
        return self._in_flight > 0

    async def load_all(self) -> FetchResult:
        return await self._retrieve(compose_all(), _as_list)

    async def search(self, text: str) -> FetchResult:
        request = compose_search(text)
        if request.is_fetch_all:
            return await self.load_all()
        return await self._retrieve(request, _search_results)

    async def filter(self, criteria: FilterCriteria) -> FetchResult:
        try:
            request = compose_filter(criteria)
        except ValueError as exc:
            _logger.error(f"Invalid filter criteria {criteria}: {exc}")
            return FetchResult(ok=False, error=str(exc))
        return await self._retrieve(request, _as_list)

    def refine(self, text: str) -> List[Product]:
        return refine(self._products, text)

    def clear(self) -> None:
        self._products = []

    async def close(self) -> None:
        await self.service.close()

    async def _retrieve(
        self,
        request: RetrievalRequest,
        extract: Callable[[Any], List[Product]],
    ) -> FetchResult:
        self._issued += 1
        token = self._issued
        self._in_flight += 1
        try:
            data = await self.service.fetch(request)
            products = extract(data)
        except CatalogServiceError as exc:
            _logger.error(f"Catalog retrieval {request.describe()} failed: {exc}")
            return FetchResult(ok=False, error=str(exc), stale=token != self._issued)
        finally:
            self._in_flight -= 1

        if token != self._issued:
            _logger.debug(
                f"Dropping response #{token} for {request.describe()}, "
                f"#{self._issued} is newer."
            )
            return FetchResult(ok=True, stale=True, count=len(products))

        self._products = products
        _logger.info(f"Loaded {len(products)} products from {request.describe()}")
        return FetchResult(ok=True, count=len(products))
