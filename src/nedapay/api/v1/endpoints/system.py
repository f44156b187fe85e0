"""System and transparency endpoints for the NEDApay API."""

from __future__ import annotations

import time

import redis
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from nedapay.api.v1.dependencies import AuthenticatorDep, SessionDep
from nedapay.core.settings import settings

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/config")
def get_public_config(authenticator: AuthenticatorDep) -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "auth": {
            "challenge_ttl_seconds": int(authenticator.ttl.total_seconds()),
            "challenge_store": settings.challenge_store_backend,
            "jwt_algorithm": settings.jwt_algorithm,
            "access_token_expire_minutes": settings.access_token_expire_minutes,
        },
        "stellar": {
            "network": settings.stellar_network,
            "horizon_url": settings.horizon_url,
            "asset_code": settings.asset_code,
        },
    }


@router.get("/health")
def get_system_health(db: SessionDep, authenticator: AuthenticatorDep) -> dict[str, object]:
    """Health check covering the database and the challenge store."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {e}"

    try:
        outstanding = authenticator.outstanding()
        store_status = "healthy"
    except redis.RedisError as e:
        outstanding = None
        store_status = f"unhealthy: {e}"

    healthy = db_status == "healthy" and store_status == "healthy"
    return {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": int(time.time()),
        "components": {
            "database": db_status,
            "challenge_store": store_status,
        },
        "outstanding_challenges": outstanding,
        "version": settings.app_version,
    }
