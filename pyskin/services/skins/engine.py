"""
SkinEngine
==========
Walks a skin's part sequence, writing literals to the buffer and
evaluating macro tags against the render context.

Macro evaluation
----------------
1. remember the buffer length
2. evaluate the macro expression; handlers may write to the buffer
   directly and/or return a value
3. run the filter chain left to right.  Before each filter, anything
   written since step 1 is cut back out of the buffer and prepended to the
   carried value, so a filter always sees the full text produced so far
4. write the final value if it is visible (not None and not "")

Expression resolution
---------------------
``a.b.c`` walks ``a`` and ``b`` through the namespace (render context for
macros, the filter table for filters), stopping quietly at the first
missing value.  ``c`` is then resolved through the handler registry for the
type of the object reached, or read as a plain member.  Anything that
cannot be resolved returns the input value unchanged.

When the render context wraps a caller object, a top-level name is looked
up against that object's type before the context's own.  Builtins only
answer macro names, never filter names.

Nesting depth is bounded by ``max_render_depth``; exceeding it raises
SkinCycleError instead of overflowing the interpreter stack.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from contextvars import ContextVar
from functools import lru_cache
from typing import Any, Optional

from pyskin.core.config import get_settings

from .buffer import Buffer
from .context import RenderContext
from .errors import SkinCycleError
from .registry import FILTERS, HandlerKind, HandlerRegistry
from .skin import Skin
from .tags import MacroTag, PartSequence

logger = logging.getLogger(__name__)

_render_depth: ContextVar[int] = ContextVar("pyskin_render_depth", default=0)


def is_visible(value: Any) -> bool:
    return value is not None and value != ""


# ---------------------------------------------------------------------------

class Renderer:
    """
    Handle given to macro, filter and builtin handlers: the skin currently
    being rendered, the engine rendering it and the buffer it writes to.
    Handlers may write output directly with ``write()`` instead of (or as
    well as) returning a value.
    """

    __slots__ = ("engine", "skin", "buffer")

    def __init__(self, engine: "SkinEngine", skin: Skin, buffer: Buffer) -> None:
        self.engine = engine
        self.skin = skin
        self.buffer = buffer

    def write(self, *parts) -> None:
        self.buffer.write(*parts)

    def render(self, context: Any, buffer: Buffer) -> Buffer:
        return self.engine.render(self.skin, context, buffer)

    def render_subskin(self, name: str, context: Any, buffer: Buffer) -> Buffer:
        return self.engine.render_subskin(self.skin, name, context, buffer)

    def get_subskin(self, name: str) -> Optional[Skin]:
        return self.skin.get_subskin(name)

    def evaluate_parameter(self, value: Any, context: RenderContext, label: str = "param") -> Any:
        return self.engine.get_evaluated_parameter(self, value, context, label)

    def __repr__(self) -> str:
        return f"<Renderer {self.skin!r}>"


# ---------------------------------------------------------------------------

class SkinEngine:

    def __init__(self, registry: Optional[HandlerRegistry] = None, *,
                 filters: Any = FILTERS, max_depth: Optional[int] = None) -> None:
        if registry is None:
            from .builtins import default_registry
            registry = default_registry()
        self.registry = registry
        self.filters = filters
        self.max_depth = max_depth if max_depth is not None else get_settings().max_render_depth

    # ----------------------------------------------------------------- public

    def render(self, skin: Skin, context: Any = None, buffer: Optional[Buffer] = None) -> Buffer:
        """Render the main sequence of ``skin`` (or the inherited one)."""
        buffer = buffer if buffer is not None else Buffer()
        self._render_parts(skin, skin.get_skin_parts(), RenderContext.of(context), buffer)
        return buffer

    def render_subskin(self, skin: Skin, name: str, context: Any = None,
                       buffer: Optional[Buffer] = None) -> Buffer:
        """Render subskin ``name`` of ``skin`` (or the inherited one)."""
        buffer = buffer if buffer is not None else Buffer()
        self._render_parts(skin, skin.get_skin_parts(name), RenderContext.of(context), buffer)
        return buffer

    # ---------------------------------------------------------------- walking

    def _render_parts(self, skin: Skin, parts: Optional[PartSequence],
                      context: RenderContext, buffer: Buffer) -> None:
        if not parts:
            return

        depth = _render_depth.get()
        if depth >= self.max_depth:
            raise SkinCycleError(
                f"Render depth limit ({self.max_depth}) reached in {skin!r}; "
                "check for a subskin that renders itself"
            )
        token = _render_depth.set(depth + 1)
        try:
            renderer = Renderer(self, skin, buffer)
            for part in parts:
                if isinstance(part, MacroTag):
                    if part.name:
                        self.evaluate_macro(renderer, part, context, buffer)
                else:
                    buffer.write(part)
        finally:
            _render_depth.reset(token)

    # ------------------------------------------------------------- evaluation

    def evaluate_macro(self, renderer: Renderer, macro: MacroTag,
                       context: RenderContext, buffer: Buffer) -> None:
        mark = buffer.length
        value = self.evaluate_expression(renderer, macro, context, HandlerKind.MACRO,
                                         None, context, buffer)
        visible = is_visible(value)
        wrote_something = buffer.length > mark

        for filter_tag in macro.filters:
            # filters always get a defined input value
            if not visible:
                value = ""
            if wrote_something:
                written = buffer.truncate(mark)
                value = written + str(value) if visible else written
            value = self.evaluate_expression(renderer, filter_tag, self.filters, HandlerKind.FILTER,
                                             value, context, buffer)
            visible = is_visible(value)
            wrote_something = buffer.length > mark

        if visible:
            buffer.write(value)

    def evaluate_expression(self, renderer: Renderer, tag: MacroTag, namespace: Any,
                            kind: HandlerKind, value: Any, context: RenderContext,
                            buffer: Buffer) -> Any:
        logger.debug("evaluating %s expression: %s", kind.value, tag)

        if kind is HandlerKind.MACRO:
            builtin = self.registry.get_builtin(tag.name)
            if builtin is not None:
                return builtin(tag, renderer, context, buffer)

        path = tag.name.split(".")
        last = path[-1]
        elem = namespace
        for segment in path[:-1]:
            elem = _member(elem, segment)
            if elem is None:
                break

        if elem is not None:
            owner, handler = self._find_handler(elem, last, kind)
            if handler is not None:
                if value is None:
                    return handler(owner, tag, renderer, context)
                return handler(owner, value, tag, renderer, context)
            if value is None:
                member = _member(elem, last)
                if member is not None:
                    return member(tag, renderer, context) if callable(member) else member

        # unresolved: hand the input back untouched
        return value

    def _find_handler(self, elem: Any, name: str, kind: HandlerKind) -> tuple[Any, Any]:
        """Handler for ``name`` on ``elem``; a context tries its root object's type first."""
        if isinstance(elem, RenderContext):
            root = elem.root
            if root is not None:
                handler = self.registry.find(root, name, kind)
                if handler is not None:
                    return root, handler
        return elem, self.registry.find(elem, name, kind)

    def get_evaluated_parameter(self, renderer: Renderer, value: Any,
                                context: RenderContext, label: str = "param") -> Any:
        """Evaluate ``value`` first if it is a nested macro tag."""
        if not isinstance(value, MacroTag):
            return value

        logger.debug("%s: evaluating nested macro %s", label, value)
        scratch = Buffer()
        renderer = Renderer(self, renderer.skin, scratch)
        if value.filters:
            self.evaluate_macro(renderer, value, context, scratch)
            result = scratch.getvalue()
        else:
            result = self.evaluate_expression(renderer, value, context, HandlerKind.MACRO,
                                              None, context, scratch)
            if not is_visible(result) and scratch.length:
                result = scratch.getvalue()
        logger.debug("%s: evaluated nested macro, got %r", label, result)
        return result


# ---------------------------------------------------------------------------

def _member(elem: Any, name: str) -> Any:
    """Read one path segment from ``elem``; None when it does not exist."""
    if not name or name.startswith("_"):
        return None
    if isinstance(elem, Mapping):
        return elem.get(name)
    if isinstance(elem, Sequence) and not isinstance(elem, str) and name.isdigit():
        index = int(name)
        return elem[index] if index < len(elem) else None
    return getattr(elem, name, None)


@lru_cache
def get_engine() -> SkinEngine:
    """Process-wide engine over the default handler registry."""
    return SkinEngine()
