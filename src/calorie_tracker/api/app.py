"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.meals import router as meals_router
from calorie_tracker.api.profile import router as profile_router
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.errors import MealAnalysisError, PersistenceError, ValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(meals_router)
    app.include_router(profile_router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(MealAnalysisError)
    async def analysis_error_handler(
        request: Request, exc: MealAnalysisError
    ) -> JSONResponse:
        if exc.code == MealAnalysisError.NOT_FOOD:
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={"detail": str(exc), "code": exc.code},
            )
        logger.warning("Meal analysis failed (%s): %s", exc.code, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc), "code": exc.code},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error("Persistence failure for %s: %s", exc.key, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc), "key": exc.key},
        )

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        """Health check; degraded when a store's latest write failed."""
        state_container: AppContainer = request.app.state.container
        failed = [
            store.storage_key
            for store in state_container.stores()
            if store.last_error is not None
        ]
        if failed:
            return {"status": "degraded", "unsaved": failed}
        return {"status": "ok"}

    return app
