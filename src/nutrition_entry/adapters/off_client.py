"""Open Food Facts search client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_entry.domain.errors import SearchUnavailable

_SEARCH_FIELDS = "product_name,nutriments,serving_size,code"


class FoodSearchClient(Protocol):
    """Interface for remote food database searches."""

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> list[dict[str, object]]:
        """Search products by free text and return raw product records."""


@dataclass
class HttpxOpenFoodFactsClient(FoodSearchClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 8.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 8.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout_seconds=timeout_seconds,
        )

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> list[dict[str, object]]:
        """Run a simple text search.

        Transport failures, non-2xx statuses and undecodable bodies raise
        ``SearchUnavailable``. A well-formed body without a product list is an
        empty result.
        """
        url = f"{self.base_url}/cgi/search.pl"
        try:
            response = await self.http_client.get(
                url,
                params={
                    "search_terms": query,
                    "search_simple": 1,
                    "action": "process",
                    "json": 1,
                    "page_size": page_size,
                    "fields": _SEARCH_FIELDS,
                },
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise SearchUnavailable(f"Food search failed: {exc}") from exc
        except ValueError as exc:
            raise SearchUnavailable("Food search returned malformed JSON") from exc

        if not isinstance(payload, dict):
            return []
        products = payload.get("products")
        if not isinstance(products, list):
            return []
        return [product for product in products if isinstance(product, dict)]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
