#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Skins router
============
POST   /api/v1/render            — render "path[#subskin]" against a JSON context
GET    /api/v1/skins/{path}      — structure of a skin (parent, subskins)
GET    /api/v1/filters           — names of the builtin filters
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from pyskin.schemas import RenderRequest, RenderResponse, SkinInfo
from pyskin.services.skins import (
    FilterNamespace,
    HandlerKind,
    SkinCycleError,
    SkinFactory,
    SkinNotFoundError,
    SkinSyntaxError,
    get_engine,
    get_factory,
    render_to_string,
)

# -----------------------------------------------------------------------------

router = APIRouter(tags=["skins"])


def get_skin_factory() -> SkinFactory:
    return get_factory()


# -----------------------------------------------------------------------------

@router.post("/render", response_model=RenderResponse)
async def render_skin(
    data: RenderRequest,
    factory: SkinFactory = Depends(get_skin_factory),
):
    try:
        output = render_to_string(data.skin, data.context, factory=factory)
    except SkinNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except (SkinSyntaxError, SkinCycleError) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return {"skin": data.skin, "output": output}


# -----------------------------------------------------------------------------

@router.get("/skins/{path:path}", response_model=SkinInfo)
async def get_skin_info(
    path: str,
    factory: SkinFactory = Depends(get_skin_factory),
):
    try:
        skin = factory.get_skin(path)
    except SkinNotFoundError:
        raise HTTPException(status_code=404, detail=f"Skin '{path}' not found")
    except (SkinSyntaxError, SkinCycleError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return {
        "path": path,
        "parent": skin.parent.source if skin.parent is not None else None,
        "subskins": skin.subskin_names(),
        "main_parts": len(skin.main_parts),
    }


# -----------------------------------------------------------------------------

@router.get("/filters", response_model=list[str])
async def list_filters():
    return get_engine().registry.registered_names(HandlerKind.FILTER, FilterNamespace)
