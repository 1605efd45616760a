"""Health check routes: liveness, readiness, and general health."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
def health_check(request: Request) -> dict[str, Any]:
    """Application health check endpoint."""
    settings = getattr(request.app.state, "settings", None)
    env = settings.app_env if settings else "unknown"
    store = "stub" if settings is None or settings.uses_stub_store else "http"

    return {
        "status": "ok",
        "environment": env,
        "ticket_store": store,
    }


@router.get("/health/live")
def liveness_probe() -> dict[str, Any]:
    """Liveness probe: is the process alive and responding?"""
    return {"status": "alive"}


@router.get("/health/ready")
def readiness_probe(request: Request) -> dict[str, Any]:
    """Readiness probe: is the ticket view mounted and serving state?

    The last query's outcome is reported but does not affect readiness;
    a failed query is a user-visible error, not an outage of this service.
    """
    controller = getattr(request.app.state, "controller", None)
    if controller is None or not controller.is_mounted:
        return JSONResponse(
            content={"status": "not_ready", "checks": {"view": {"status": "not_mounted"}}},
            status_code=503,
        )
    return {
        "status": "ready",
        "checks": {"view": {"status": "mounted", "state": controller.state.kind}},
    }
