"""Tests for container wiring."""

import asyncio

import pytest

from food_resolver.containers import build_container
from food_resolver.domain.errors import CatalogConfigurationError
from food_resolver.services.external_catalog import FallbackCatalog


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.resolution_service is not None
    assert container.correction_learner.catalog is container.food_catalog_service
    assert isinstance(container.external_catalog, FallbackCatalog)
    assert len(container.external_catalog.catalogs) == 1
    asyncio.run(container.close_resources())


def test_build_container_adds_spoonacular_fallback(settings) -> None:
    container = build_container(
        settings.model_copy(update={"spoonacular_api_key": "spoon"})
    )

    assert len(container.external_catalog.catalogs) == 2
    asyncio.run(container.close_resources())


def test_build_container_requires_fdc_key(settings) -> None:
    with pytest.raises(CatalogConfigurationError):
        build_container(settings.model_copy(update={"fdc_api_key": ""}))
