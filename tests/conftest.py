#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Test fixtures
=============
Every test gets its own skin directory (pytest ``tmp_path``), a scope and a
factory over it.  The HTTP client is wired to that factory through
FastAPI's dependency overrides.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ── Env vars must be set before importing pyskin modules ─────────────────────
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SKIN_ROOT", tempfile.mkdtemp())

from pyskin.main import create_app
from pyskin.routes.skins import get_skin_factory
from pyskin.services.resources import ResourceScope
from pyskin.services.skins import SkinFactory


# -----------------------------------------------------------------------------

def write_skin(root: Path, name: str, text: str) -> Path:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# -----------------------------------------------------------------------------

@pytest.fixture
def skin_dir(tmp_path: Path) -> Path:
    root = tmp_path / "skins"
    root.mkdir()
    return root


@pytest.fixture
def make_skin(skin_dir: Path):
    """Write a skin file below the test skin directory."""
    def _make(name: str, text: str) -> Path:
        return write_skin(skin_dir, name, text)
    return _make


@pytest.fixture
def scope(skin_dir: Path) -> ResourceScope:
    return ResourceScope(skin_dir)


@pytest.fixture
def factory(scope: ResourceScope) -> SkinFactory:
    return SkinFactory(scope, cache=True)


# ── HTTP client over the ASGI app ────────────────────────────────────────────
@pytest_asyncio.fixture
async def client(factory: SkinFactory) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()
    app.dependency_overrides[get_skin_factory] = lambda: factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
