"""Spoonacular recipe API client, used as a fallback nutrition source."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from food_resolver.adapters.http_errors import raise_unavailable
from food_resolver.domain.errors import CatalogConfigurationError, ExternalUnavailable

PROVIDER = "spoonacular"


class SpoonacularClient(Protocol):
    """Interface for Spoonacular recipe searches."""

    async def search_recipes(self, query: str, number: int = 10) -> dict[str, object]:
        """Search recipes with nutrition and return raw API data."""


@dataclass
class HttpxSpoonacularClient(SpoonacularClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 10.0
    ) -> "HttpxSpoonacularClient":
        """Create a Spoonacular client with a managed httpx session."""
        if not api_key:
            raise CatalogConfigurationError("Spoonacular API key is not configured")
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_recipes(self, query: str, number: int = 10) -> dict[str, object]:
        """Search recipes by title, including per-serving nutrition."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/recipes/complexSearch",
                params={
                    "apiKey": self.api_key,
                    "query": query,
                    "number": number,
                    "addRecipeNutrition": "true",
                },
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
