# HTTP access to the catalog service; everything else talks to it through CatalogService
import os
from typing import Any, Optional

import httpx

from shop.query import RetrievalRequest
from utils.logger import get_logger

_logger = get_logger(__name__)

API_URL = os.getenv("SHOP_API_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("SHOP_REQUEST_TIMEOUT", "30"))


class CatalogServiceError(Exception):
    """Raised when a catalog request fails at the transport, status or decoding level."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CatalogService:
    """
    Thin async client for the catalog endpoints.

    Usage:
        service = CatalogService()
        data = await service.fetch(compose_search("lamp"))
        await service.close()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: catalog root, defaults to SHOP_API_URL
            timeout: per-request timeout in seconds, defaults to SHOP_REQUEST_TIMEOUT
            transport: optional httpx transport, used to fake the service in tests
        """
        self.base_url = (base_url or API_URL).rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else REQUEST_TIMEOUT,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._http_client.aclose()

    async def fetch(self, request: RetrievalRequest) -> Any:
        """Issue a GET for `request` and return the decoded JSON body."""
        _logger.debug(f"GET {request.describe()}")
        try:
            response = await self._http_client.get(
                request.path, params=list(request.params)
            )
        except httpx.HTTPError as exc:
            raise CatalogServiceError(f"Request to {request.path} failed: {exc}") from exc

        if response.status_code >= 400:
            raise CatalogServiceError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise CatalogServiceError(
                f"Response from {request.path} is not valid JSON"
            ) from exc
