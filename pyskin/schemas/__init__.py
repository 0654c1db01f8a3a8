"""
Pydantic v2 schemas for request validation and response serialisation.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Rendering
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderRequest(BaseModel):
    skin: str = Field(..., min_length=1, max_length=512, description="path[#subskin]")
    context: dict[str, Any] = Field(default_factory=dict)


# -----------------------------------------------------------------------------

class RenderResponse(BaseModel):
    skin: str
    output: str


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Skins
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class SkinInfo(BaseModel):
    path: str
    parent: Optional[str] = None
    subskins: list[str] = []
    main_parts: int = 0
