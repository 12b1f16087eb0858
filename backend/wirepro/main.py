"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wirepro.config import get_settings
from wirepro.infrastructure.dependencies import get_knowledge_loader
from wirepro.infrastructure.logging.log_config import setup_logging
from wirepro.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, preload the knowledge base."""
    setup_logging()

    store = get_knowledge_loader().get()
    if store.is_empty:
        logger.warning(
            "Knowledge base is empty (dir=%s) — answers rely on keyword analysis only",
            get_settings().knowledge_path,
        )
    app.state.knowledge_store = store

    yield


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wirepro.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
