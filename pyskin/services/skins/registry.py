"""
HandlerRegistry: central store of macro, filter and builtin handlers.

Macros and filters are registered against the type of the object they
hang off, so ``<% page.title %>`` resolves ``page`` from the context and
then looks up the ``title`` macro registered for ``type(page)`` (walking
the MRO).  Top-level names are looked up against :class:`RenderContext`;
filters are looked up against :class:`FilterNamespace`.

Handler signatures:
    macro:   def handler(obj, tag, renderer, context) -> value | None
    filter:  def handler(obj, value, tag, renderer, context) -> value
    builtin: def handler(tag, renderer, context, buffer) -> value | None

Register with the decorators:
    @registry.macro(Page, "title")
    def page_title(page, tag, renderer, context):
        return page.title.strip()

    @registry.filter("shout")
    def shout(ns, value, tag, renderer, context):
        return str(value).upper() + "!"
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


Handler = Callable[..., Any]


class HandlerKind(str, enum.Enum):
    MACRO = "macro"
    FILTER = "filter"


class FilterNamespace:
    """Owner type for the builtin filter table."""

    def __repr__(self) -> str:
        return "<filters>"


FILTERS = FilterNamespace()


class HandlerRegistry:
    def __init__(self) -> None:
        self._handlers: dict[tuple[type, str, HandlerKind], Handler] = {}
        self._builtins: dict[str, Handler] = {}

    # ---------------------------------------------------------------- register

    def macro(self, owner: type, name: str):
        """Decorator that registers a macro handler for ``owner`` objects."""
        def decorator(fn: Handler) -> Handler:
            self.add(owner, name, HandlerKind.MACRO, fn)
            return fn
        return decorator

    def filter(self, name: str, owner: type = FilterNamespace):
        """Decorator that registers a filter handler (builtin filter table by default)."""
        def decorator(fn: Handler) -> Handler:
            self.add(owner, name, HandlerKind.FILTER, fn)
            return fn
        return decorator

    def builtin(self, name: str):
        """Decorator that registers an engine builtin, consulted before path lookup."""
        def decorator(fn: Handler) -> Handler:
            self._builtins[name] = fn
            logger.debug("Registered builtin: %s", name)
            return fn
        return decorator

    def add(self, owner: type, name: str, kind: HandlerKind, fn: Handler) -> None:
        self._handlers[(owner, name, HandlerKind(kind))] = fn
        logger.debug("Registered %s handler: %s.%s", kind.value, owner.__name__, name)

    # ------------------------------------------------------------------ lookup

    def find(self, obj: Any, name: str, kind: HandlerKind) -> Optional[Handler]:
        """Return the handler for ``name`` on ``obj``'s type or one of its bases."""
        for klass in type(obj).__mro__:
            handler = self._handlers.get((klass, name, kind))
            if handler is not None:
                return handler
        return None

    def get_builtin(self, name: str) -> Optional[Handler]:
        return self._builtins.get(name)

    def has(self, owner: type, name: str, kind: HandlerKind = HandlerKind.MACRO) -> bool:
        return (owner, name, kind) in self._handlers

    # ---------------------------------------------------------- introspection

    def registered_names(self, kind: HandlerKind, owner: Optional[type] = None) -> list[str]:
        return sorted(
            name for (klass, name, k) in self._handlers
            if k == kind and (owner is None or klass is owner)
        )

    def builtin_names(self) -> list[str]:
        return sorted(self._builtins)

    def copy(self) -> "HandlerRegistry":
        other = HandlerRegistry()
        other._handlers = dict(self._handlers)
        other._builtins = dict(self._builtins)
        return other


# Singleton shared across the application
handler_registry = HandlerRegistry()
