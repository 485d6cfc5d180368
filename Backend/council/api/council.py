# council/api/council.py
"""
LLM Council routes.
"""
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel
from typing import List, Optional

from council.core.logging import log
from council.core.types import RunStatus

router = APIRouter(prefix="/api/council", tags=["Council"])


class RunRequest(BaseModel):
    target: str


class RunResponse(BaseModel):
    status: str
    target: str
    run_id: Optional[str] = None
    failed_stage: Optional[str] = None
    message: str = ""
    artifacts: List[str] = []
    ideas: int = 0
    executions: int = 0
    winner: Optional[str] = None


class OpenRouterModelInfo(BaseModel):
    id: str
    name: str
    context_length: int
    is_free: bool


@router.post("/runs", response_model=RunResponse)
async def start_run(data: RunRequest, request: Request):
    """
    Run the council on a document in the content store.

    Blocks until the run settles and returns its outcome.
    """
    action = request.app.state.council
    target = data.target.strip()

    if not target or not action.store.exists(target):
        raise HTTPException(status_code=404, detail=f"Target not found: {data.target}")

    if action.registry.is_running(target):
        raise HTTPException(status_code=409, detail="Council already running on this file")

    log("API", f"Council run requested for {target}")
    outcome = await action.run_council(target)

    if outcome.status == RunStatus.ALREADY_RUNNING:
        raise HTTPException(status_code=409, detail=outcome.message)

    return RunResponse(**outcome.to_dict())


@router.get("/runs/active")
async def active_runs(request: Request):
    """Targets with a council run currently in flight."""
    return {"active": request.app.state.council.registry.active()}


@router.post("/openrouter/models/refresh")
async def refresh_openrouter_models(request: Request):
    """Re-fetch the OpenRouter model list into the settings cache."""
    action = request.app.state.council
    models = await action.runner.adapter.refresh_openrouter_models(force=True)
    return {
        "count": len(models),
        "free": sum(1 for model in models if model.is_free),
        "last_fetched": action.settings.openrouter.last_fetched,
        "models": [
            OpenRouterModelInfo(
                id=model.id,
                name=model.name,
                context_length=model.context_length,
                is_free=model.is_free,
            ).model_dump()
            for model in models
        ],
    }
