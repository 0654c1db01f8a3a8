"""
Top-level render entry point.

    render(skin, context, buffer=buf)                    — a Skin (or anything with .render)
    render("page.skin", context, scope)                  — load and render main skin
    render("page.skin#item", context, scope)             — load and render one subskin

Anything else raises UnknownSkinError before a single byte is written.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pyskin.services.resources import ResourceScope

from .buffer import Buffer
from .engine import SkinEngine
from .errors import UnknownSkinError
from .factory import SkinFactory, get_factory
from .skin import Skin

logger = logging.getLogger(__name__)


def resolve_skin(skin_or_path: Any, scope: Optional[ResourceScope] = None,
                 factory: Optional[SkinFactory] = None) -> Optional[Any]:
    """
    Turn a render argument into something renderable.

    Returns None when a ``path#name`` reference names a subskin the
    template does not define.
    """
    if isinstance(skin_or_path, str):
        path, _, subskin = skin_or_path.partition("#")
        if factory is None:
            factory = get_factory() if scope is None else SkinFactory(scope)
        skin = factory.get_skin(path)
        if subskin:
            view = skin.get_subskin(subskin)
            if view is None:
                logger.warning("Subskin %r not found in %s", subskin, path)
            return view
        return skin

    if callable(getattr(skin_or_path, "render", None)):
        return skin_or_path

    raise UnknownSkinError(skin_or_path)


def render(skin_or_path: Any, context: Any = None, scope: Optional[ResourceScope] = None,
           buffer: Optional[Buffer] = None, *, engine: Optional[SkinEngine] = None,
           factory: Optional[SkinFactory] = None) -> Buffer:
    """Render a skin, a skin path or any object with a ``render`` method into ``buffer``."""
    skin = resolve_skin(skin_or_path, scope, factory)
    buffer = buffer if buffer is not None else Buffer()
    if skin is None:
        return buffer
    if isinstance(skin, Skin):
        skin.render(context, buffer, engine=engine)
    else:
        skin.render(context, buffer)
    return buffer


def render_to_string(skin_or_path: Any, context: Any = None,
                     scope: Optional[ResourceScope] = None, **kwargs) -> str:
    return render(skin_or_path, context, scope, **kwargs).getvalue()
