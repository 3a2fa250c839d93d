"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from food_resolver.adapters.http_errors import raise_unavailable
from food_resolver.domain.errors import CatalogConfigurationError, ExternalUnavailable

PROVIDER = "fdc"


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0
    data_types: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str,
        timeout_seconds: float = 10.0,
        data_types: tuple[str, ...] = (),
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        if not api_key:
            raise CatalogConfigurationError("FDC API key is not configured")
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
            data_types=data_types,
        )

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query."""
        body: dict[str, object] = {"query": query, "pageSize": page_size}
        if self.data_types:
            body["dataType"] = list(self.data_types)
        try:
            response = await self.http_client.post(
                f"{self.base_url}/foods/search",
                params={"api_key": self.api_key},
                json=body,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise_unavailable(PROVIDER, exc)
        except ValueError as exc:
            raise ExternalUnavailable(PROVIDER, "malformed response") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
