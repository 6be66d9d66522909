from fastapi import FastAPI

from listings_query.entrypoints.http.exception_handlers import register_exception_handlers
from listings_query.entrypoints.http.routes.health import router as health_router
from listings_query.entrypoints.http.routes.listings import router as listings_router


def build_app() -> FastAPI:
    app = FastAPI(
        title="Listings Query API",
        description="""
        Search advisory and CPA practice listings.

        ## Features
        - One search endpoint across generic, advisor and CPA listings
        - Shared filter vocabulary plus market-specific filters

        ## Authentication
        Handled upstream; the gateway forwards the caller in `X-User-Id`.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc alternative
        openapi_url="/openapi.json",  # OpenAPI schema
    )

    # Register global exception handlers
    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(listings_router, prefix="/v1")

    return app


app = build_app()
