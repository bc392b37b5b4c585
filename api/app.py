"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.routes import claims, generate, health, update_root
from api.errors import (
    APIError,
    airdrop_error_handler,
    api_error_handler,
    generic_error_handler,
    request_validation_handler,
)
from core.schemas.errors import AirdropException


# Configure logging; respects AIRDROP_LOG_LEVEL env var and airdrop.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or airdrop.json, defaulting to INFO."""
    raw = os.getenv("AIRDROP_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "airdrop.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError, AttributeError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Airdrop API",
        description="""
HTTP API for the cumulative Merkle airdrop engine.

## Endpoints

- **POST /generate-merkle** - Build the tree for an allocation list
- **POST /update-merkle** - Publish a root to the token contract
- **GET /claims/{address}** - Claim status and proof for an address
- **GET /health** - Health check

## Amounts

Allocations are cumulative lifetime entitlements, as decimal strings in wei.
The claimable amount is always `allocation - claimed`.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(AirdropException, airdrop_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(generate.router)
    app.include_router(update_root.router)
    app.include_router(claims.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
