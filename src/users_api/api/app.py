"""
Main FastAPI application for the users API
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database import init_database
from ..database.connection import dispose_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting users API...")
    init_database()

    from ..validation import (
        ValidationError,
        get_startup_recommendations,
        is_production,
        validate_startup_configuration,
    )

    validation_results = await validate_startup_configuration()

    if not validation_results["overall_valid"]:
        logger.error(
            "Application configuration validation failed - some features may not work properly",
            database_errors=validation_results["database"]["errors"],
            schema_errors=validation_results["schema"]["errors"],
        )
        if is_production():
            raise ValidationError("Critical configuration validation failed in production")

    recommendations = get_startup_recommendations(validation_results)
    if recommendations:
        logger.info("Configuration recommendations", recommendations=recommendations)

    yield

    logger.info("Shutting down users API...")
    await dispose_database()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Users API",
        description="GraphQL API for creating, reading, updating and deleting users",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    # GraphQL endpoint (allow disabling for tests)
    if not os.getenv("USERS_API_DISABLE_GRAPHQL"):
        from ..graphql.schema import create_graphql_router, validate_schema

        # Fail fast: the server must not start with a broken schema
        logger.info("Validating GraphQL schema...")
        validate_schema()

        app.include_router(create_graphql_router(), prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "users_api.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
