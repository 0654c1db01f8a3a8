"""
PySkin: skin (template) rendering engine with subskins, inheritance,
macro dispatch and filter chains.
"""

from .services.skins import (
    Buffer,
    MacroTag,
    RenderContext,
    Skin,
    SkinEngine,
    SkinFactory,
    UnknownSkinError,
    parse_skin,
    render,
    render_to_string,
)

__version__ = "0.1.0"

__all__ = [
    "Buffer",
    "MacroTag",
    "RenderContext",
    "Skin",
    "SkinEngine",
    "SkinFactory",
    "UnknownSkinError",
    "parse_skin",
    "render",
    "render_to_string",
]
