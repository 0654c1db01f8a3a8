#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
PySkin: skin preview service
=============================
Entry point.  Start with:
    uvicorn pyskin.main:app --reload
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pyskin.core.config import get_settings
from pyskin.routes import skins

API = "/api/v1"


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Render skins (templates with subskins, inheritance and filters)",
        debug=settings.debug,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────
    app.include_router(skins.router, prefix=API)

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/api/docs",
        }

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


# -----------------------------------------------------------------------------
