# council/main.py
"""
LLM Council Backend
"""
import os
import uvicorn
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from dotenv import load_dotenv
load_dotenv()

from council.actions.llm_council import CouncilAction
from council.core.config import Settings, settings as default_settings
from council.core.logging import log
from council.lib.file_system import FileSystemStore
from council.lib.notify import LogNotifier
from council.api import health, council as council_routes


def create_app(settings: Optional[Settings] = None, action: Optional[CouncilAction] = None) -> FastAPI:
    """Build the FastAPI app around one CouncilAction (one content store, one run registry)."""
    settings = settings or default_settings
    if action is None:
        store = FileSystemStore(settings.content.root)
        action = CouncilAction(store, LogNotifier(), settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown."""
        log("API", "🚀 LLM Council starting...")
        log("API", "🔑 Environment check", {
            "gemini": bool(settings.llm.gemini_api_key),
            "openai": bool(settings.llm.openai_api_key),
            "anthropic": bool(settings.llm.anthropic_api_key),
            "openrouter": bool(settings.llm.openrouter_api_key),
        })
        if isinstance(action.store, FileSystemStore):
            Path(action.store.root).mkdir(parents=True, exist_ok=True)
        yield
        log("API", "🔌 Shutting down...")

    app = FastAPI(
        title="LLM Council",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.council = action

    cors_origins_str = os.getenv("CORS_ORIGINS", "*")
    cors_origins = cors_origins_str.split(",") if cors_origins_str != "*" else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(council_routes.router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run(
        "council.main:app",
        host="0.0.0.0",
        port=default_settings.port,
        reload=default_settings.debug,
    )


if __name__ == "__main__":
    run()
