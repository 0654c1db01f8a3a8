"""
Built-in macro registrations.

Builtins are consulted before any context lookup, so a context value
named ``render`` never shadows the render macro.

RENDER
------
<% render "item" %>                                  — render subskin "item" once
<% render "item" bind={title: <% page.title %>} %>   — with extra context values
<% render "item" on=<% page.tags %> as="tag" %>      — once per key/value pair

Inside the subskin, ``key`` holds the current key (index for lists) and
``value`` (or the name given by ``as``) the current value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any, Iterator

from . import filters
from .registry import HandlerRegistry, handler_registry

logger = logging.getLogger(__name__)


def register(registry: HandlerRegistry) -> None:

    @registry.builtin("render")
    def render_builtin(tag, renderer, context, buffer) -> None:
        skin = renderer.evaluate_parameter(tag.get_parameter("skin", 0), context, "render:skin")
        bind = renderer.evaluate_parameter(tag.get_parameter("bind"), context, "render:bind")
        on = renderer.evaluate_parameter(tag.get_parameter("on"), context, "render:on")
        as_name = renderer.evaluate_parameter(tag.get_parameter("as"), context, "render:as")

        if not skin:
            logger.warning("render: no subskin name given in %s", tag)
            return None

        sub_context = context.clone()
        if isinstance(bind, Mapping):
            for name, value in bind.items():
                sub_context[name] = renderer.evaluate_parameter(value, context, "render:bind:value")

        if on is None:
            renderer.render_subskin(skin, sub_context, buffer)
            return None

        for key, value in _pairs(on):
            logger.debug("render: %s key=%r", skin, key)
            item_context = sub_context.clone()
            item_context["key"] = key
            item_context[as_name or "value"] = value
            renderer.render_subskin(skin, item_context, buffer)
        return None


def _pairs(on: Any) -> Iterator[tuple[Any, Any]]:
    if isinstance(on, Mapping):
        return iter(on.items())
    if isinstance(on, Iterable) and not isinstance(on, (str, bytes)):
        return enumerate(on)
    logger.warning("render: cannot iterate over %r", on)
    return iter(())


# -----------------------------------------------------------------------------

def register_all_builtins(registry: HandlerRegistry) -> None:
    """Register the render macro and the builtin filter table."""
    register(registry)
    filters.register(registry)


@lru_cache
def default_registry() -> HandlerRegistry:
    register_all_builtins(handler_registry)
    return handler_registry
