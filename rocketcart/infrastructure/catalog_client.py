import logging

import httpx
from pydantic import ValidationError

from rocketcart.domain.cart.errors import ProductLookupError
from rocketcart.domain.cart.line_items import ProductInfo, StockInfo

logger = logging.getLogger(__name__)


class HttpCatalogClient:
    """
    Catalog and inventory queries against the storefront REST API.

    Endpoints:
    - GET /products/{id} -> {id, title, price, image}
    - GET /stock/{id}    -> {id, amount}

    Every failure (404, other HTTP status, transport error, malformed body)
    surfaces as ProductLookupError. No retries: the cart operation fails
    and the caller reissues it.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def get_product(self, product_id: int) -> ProductInfo:
        data = await self._fetch(f"/products/{product_id}", product_id)
        try:
            product = ProductInfo.model_validate(data)
        except ValidationError as e:
            raise ProductLookupError(f"Malformed product payload for {product_id}") from e

        if product.product_id != product_id:
            raise ProductLookupError(
                f"Catalog returned product {product.product_id} for {product_id}"
            )
        return product

    async def get_stock(self, product_id: int) -> StockInfo:
        data = await self._fetch(f"/stock/{product_id}", product_id)
        try:
            return StockInfo.model_validate(data)
        except ValidationError as e:
            raise ProductLookupError(f"Malformed stock payload for {product_id}") from e

    async def _fetch(self, path: str, product_id: int) -> dict:
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise ProductLookupError(f"Product {product_id} not found") from e
            logger.error(f"Catalog service returned {e.response.status_code} for {path}")
            raise ProductLookupError(
                f"Catalog service returned {e.response.status_code} for {path}"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Failed to reach catalog service at {self.base_url}: {e}")
            raise ProductLookupError(f"Failed to fetch {path}: {str(e)}") from e
        except ValueError as e:
            # response body is not JSON
            raise ProductLookupError(f"Invalid response body for {path}") from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpCatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
