"""
Application entry point.
Run with:  uvicorn catalog_api.main:app --reload

⚠️  DEVELOPMENT NOTE:
    A default admin user is seeded on startup while SEED_ADMIN is true
    (see catalog_api/db/seeder.py). Disable it before deploying to production.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from catalog_api.core.logging_config import configure_logging
from fastapi.middleware.cors import CORSMiddleware

from catalog_api.core.config import settings
from catalog_api.core.exceptions import CatalogError, InternalError
from catalog_api.api.v1.router import api_router
from catalog_api.db.database import init_db
from catalog_api.db.seeder import seed_admin

configure_logging()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    logger = logging.getLogger(__name__)
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Catalog backend with role-based access for admins, "
            "coordinadores and auxiliares."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── Middleware ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error handlers ──────────────────────────────────────────────────────
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        logger.info(
            "%s %s -> %s %s",
            request.method,
            request.url.path,
            exc.status_code,
            type(exc).__name__,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(exc.to_content()),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content=error.to_content())

    # ── Routers ─────────────────────────────────────────────────────────────
    app.include_router(api_router)

    # ── Startup / shutdown events ───────────────────────────────────────────
    @app.on_event("startup")
    def on_startup() -> None:
        """Initialize the database and, in development, the admin account."""
        logger.info("Initializing database and seed data")
        init_db()
        if settings.SEED_ADMIN:
            seed_admin()

    return app


app = create_app()
