# src/nedapay/main.py
"""Main entry point for the NEDApay authentication API."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nedapay.api.v1 import stellar_auth_router, system_router, users_router
from nedapay.core.settings import settings
from nedapay.db.session import create_tables
from nedapay.services.challenge_auth import build_challenge_authenticator

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="NEDApay API",
    description="Stellar challenge-response authentication for the iTZS wallet",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# The authenticator owns every outstanding challenge for this process.
app.state.challenge_authenticator = build_challenge_authenticator(settings)

# Include API routers
app.include_router(stellar_auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    create_tables()
    logger.info(
        "%s %s started (network=%s, challenge store=%s)",
        settings.app_name,
        settings.app_version,
        settings.stellar_network,
        settings.challenge_store_backend,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "NEDApay API",
        "version": settings.app_version,
        "description": "Stellar challenge-response authentication for the iTZS wallet",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("nedapay.main:app", host="0.0.0.0", port=3000, reload=settings.debug)
