"""
Skin subsystem public API.
"""

from .buffer import Buffer
from .builtins import default_registry, register_all_builtins
from .context import RenderContext
from .engine import Renderer, SkinEngine, get_engine
from .errors import (
    SkinCycleError,
    SkinError,
    SkinNotFoundError,
    SkinSyntaxError,
    UnknownSkinError,
)
from .factory import SkinFactory, get_factory
from .parser import parse_skin
from .registry import FILTERS, FilterNamespace, HandlerKind, HandlerRegistry, handler_registry
from .render import render, render_to_string, resolve_skin
from .skin import Skin
from .tags import MacroTag

__all__ = [
    "Buffer",
    "FILTERS",
    "FilterNamespace",
    "HandlerKind",
    "HandlerRegistry",
    "MacroTag",
    "RenderContext",
    "Renderer",
    "Skin",
    "SkinCycleError",
    "SkinEngine",
    "SkinError",
    "SkinFactory",
    "SkinNotFoundError",
    "SkinSyntaxError",
    "UnknownSkinError",
    "default_registry",
    "get_engine",
    "get_factory",
    "handler_registry",
    "parse_skin",
    "register_all_builtins",
    "render",
    "render_to_string",
    "resolve_skin",
]
