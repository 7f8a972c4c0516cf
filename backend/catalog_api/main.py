"""FastAPI application bootstrap: routers, middleware and startup wiring."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from catalog_api.api.errors import register_exception_handlers
from catalog_api.api.middleware import AccessLogMiddleware
from catalog_api.api.routers import health, products
from catalog_api.core.config import Settings, get_settings
from catalog_api.core.health import HealthState
from catalog_api.db.session import DatabaseUnavailableError, create_schema, open_engine
from catalog_api.repositories.interfaces import ProductOps
from catalog_api.repositories.product_repository import SqlProductRepository

logger = logging.getLogger(__name__)


def _connect_repository(settings: Settings) -> SqlProductRepository:
    engine = open_engine(settings)
    if settings.db_create_schema:
        try:
            create_schema(engine)
        except SQLAlchemyError as e:
            engine.dispose()
            raise DatabaseUnavailableError(f"Cannot create product table: {e}") from e
    return SqlProductRepository(engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store once and flip the health flag accordingly."""
    state = app.state
    owned_repository = None

    if state.repository is not None:
        state.health.mark_healthy()
    else:
        try:
            owned_repository = await run_in_threadpool(_connect_repository, state.settings)
        except DatabaseUnavailableError as e:
            logger.error(f"{e}: db cluster unavailable!")
            state.health.mark_unhealthy()
        else:
            state.repository = owned_repository
            state.health.mark_healthy()

    logger.info("Server started")
    try:
        yield
    finally:
        if owned_repository is not None:
            owned_repository.engine.dispose()
            logger.info("Database connections closed")


def create_app(
    settings: Settings | None = None,
    repository: ProductOps | None = None,
) -> FastAPI:
    """Instantiate the FastAPI app.

    When ``repository`` is given the store is not probed at startup and the
    service starts healthy.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.state.settings = settings
    app.state.repository = repository
    app.state.health = HealthState()

    register_exception_handlers(app)
    app.add_middleware(AccessLogMiddleware)

    app.include_router(products.router, prefix="/product", tags=["products"])
    app.include_router(health.router)

    return app


app = create_app()
