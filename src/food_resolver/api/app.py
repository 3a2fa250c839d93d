"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from food_resolver.api.models import (
    CorrectionRequest,
    ManualFoodRequest,
    ResolveBatchRequest,
)
from food_resolver.app_logging import configure_logging
from food_resolver.containers import AppContainer
from food_resolver.domain.errors import StorageError
from food_resolver.domain.foods import NutrientRecord


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(StorageError)
    async def storage_error_handler(_request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Food catalog storage failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Food catalog is temporarily unavailable."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/resolve")
    async def resolve_food(
        request: Request,
        name: str = Query(min_length=1),
        detected_by_ai: bool = False,
    ) -> dict[str, object]:
        """Resolve a food name; a null food means the user should enter it manually."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.resolution_service.resolve(
            name, detected_by_ai=detected_by_ai
        )
        return {"food": _serialize(record)}

    @app.post("/foods/resolve-batch")
    async def resolve_batch(
        payload: ResolveBatchRequest, request: Request
    ) -> dict[str, object]:
        """Resolve several food names concurrently."""
        state_container: AppContainer = request.app.state.container
        results = await state_container.resolution_service.resolve_many(
            payload.names, detected_by_ai=payload.detected_by_ai
        )
        return {"foods": {name: _serialize(record) for name, record in results.items()}}

    @app.post("/foods/corrections")
    async def learn_correction(
        payload: CorrectionRequest, request: Request
    ) -> dict[str, object]:
        """Store a user's correction of an AI-detected food."""
        state_container: AppContainer = request.app.state.container
        record = state_container.correction_learner.learn(
            payload.ai_detected_name,
            payload.user_corrected_name,
            payload.nutrition.to_profile(),
        )
        return {"food": _serialize(record)}

    @app.post("/foods/manual")
    async def save_manual_food(
        payload: ManualFoodRequest, request: Request
    ) -> dict[str, object]:
        """Store a manually entered food."""
        state_container: AppContainer = request.app.state.container
        record = state_container.food_catalog_service.save_manual(
            payload.name, payload.nutrition.to_profile(), brand=payload.brand
        )
        return {"food": _serialize(record)}

    @app.get("/foods/popular")
    async def popular_foods(
        request: Request, limit: int = Query(default=10, ge=1, le=100)
    ) -> dict[str, object]:
        """Return the most used foods for quick-add suggestions."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.food_catalog_service.most_popular(limit)
        return {"foods": [food.to_payload() for food in foods]}

    return app


def _serialize(record: NutrientRecord | None) -> dict[str, object] | None:
    if record is None:
        return None
    return record.to_payload()
