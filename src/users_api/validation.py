"""
Configuration validation for the users API.

This module provides validation functions to ensure the application
is properly configured before startup.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect

from .config import settings
from .database.connection import check_database_connection, get_async_engine, get_database_url
from .dbmodels import target_metadata
from .logging import get_logger

logger = get_logger(__name__)


class ValidationError(Exception):
    """Raised when application validation fails."""

    pass


def is_production() -> bool:
    return settings.environment.lower() in ("production", "prod")


async def validate_database_connection() -> dict[str, Any]:
    """
    Validate that the database is accessible and responsive.

    Returns a dictionary with validation results and connection details.
    """
    results = {
        "valid": True,
        "warnings": [],
        "errors": [],
        "connection_info": None,
    }

    success, error_message = await check_database_connection()

    if success:
        results["connection_info"] = {
            "status": "connected",
            "message": "Database connection successful",
        }
        logger.info("Database connection validation successful")
    else:
        results["valid"] = False
        results["errors"].append(error_message)
        logger.error("Database connection validation failed", error=error_message)

    if is_production() and get_database_url().startswith("sqlite"):
        warning = "SQLite database configured in production - use PostgreSQL instead"
        results["warnings"].append(warning)
        logger.warning(warning)

    return results


async def validate_database_schema() -> dict[str, Any]:
    """
    Validate that every table the models need has been created.
    """
    results = {
        "valid": True,
        "warnings": [],
        "errors": [],
        "missing_tables": [],
    }

    async with get_async_engine().connect() as conn:
        existing = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    missing = sorted(set(target_metadata.tables) - set(existing))
    if missing:
        results["valid"] = False
        results["missing_tables"] = missing
        results["errors"].append(f"Missing database tables: {', '.join(missing)}")
        logger.error("Database schema validation failed", missing_tables=missing)
    else:
        logger.info("Database schema validation successful")

    return results


async def validate_startup_configuration() -> dict[str, Any]:
    """
    Comprehensive startup validation.

    Called during application startup to ensure all critical
    configuration is valid.
    """
    logger.info("Starting application configuration validation")

    db_results = await validate_database_connection()

    if db_results["valid"]:
        schema_results = await validate_database_schema()
    else:
        logger.warning("Skipping schema validation due to database connection failure")
        schema_results = {
            "valid": False,
            "warnings": [],
            "errors": ["Skipped due to database connection failure"],
            "missing_tables": [],
        }

    combined_results = {
        "overall_valid": db_results["valid"] and schema_results["valid"],
        "database": db_results,
        "schema": schema_results,
        "environment": {
            "environment": settings.environment,
            "debug": settings.debug,
        },
    }

    if combined_results["overall_valid"]:
        logger.info("Application configuration validation completed successfully")
    else:
        logger.error(
            "Application configuration validation failed",
            errors=db_results["errors"] + schema_results["errors"],
        )

    all_warnings = db_results["warnings"] + schema_results["warnings"]
    if all_warnings:
        logger.warning("Configuration warnings detected", warnings=all_warnings)

    return combined_results


def get_startup_recommendations(validation_results: dict[str, Any]) -> list[str]:
    """
    Generate startup recommendations based on validation results.
    """
    recommendations = []

    if not validation_results.get("database", {}).get("valid", False):
        recommendations.append(
            "Database connection failed - check USERS_API_DATABASE_URL and that the server is up"
        )
        return recommendations

    if validation_results["schema"].get("missing_tables"):
        recommendations.append("Run `users-api-migrate upgrade` to create the database schema")

    if not validation_results["overall_valid"]:
        recommendations.append("Fix configuration errors before deploying to production")

    return recommendations
