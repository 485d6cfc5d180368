# council/api/health.py
"""
Health check endpoints.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/healthz")
async def healthz():
    """Simple health check."""
    return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/api/health")
async def api_health(request: Request):
    """API health check, including whether the council is switched on."""
    action = request.app.state.council
    return {
        "status": "healthy",
        "council_enabled": action.settings.council.enabled,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
