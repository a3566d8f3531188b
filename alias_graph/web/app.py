"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from alias_graph.web.api import router
from alias_graph.web.api_analysis import router as analysis_router


def create_app() -> FastAPI:
    app = FastAPI(title="alias-graph", version="0.1.0")

    app.include_router(router)
    app.include_router(analysis_router)

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    return app
