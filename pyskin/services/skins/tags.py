"""
Skin parts
==========
A parsed skin is an ordered sequence of parts.  Each part is either a
literal ``str`` or a :class:`MacroTag`.

A MacroTag describes one macro invocation::

    <% page.title "fallback" encoding="html" | uppercase | truncate limit=20 %>

    name        "page.title"
    positional  ("fallback",)
    named       {"encoding": "html"}
    filters     (MacroTag("uppercase"), MacroTag("truncate", named={"limit": 20}))

Parameter values may themselves be MacroTags (nested macros), lists or
mappings; the engine evaluates nested macros lazily when a handler reads
them through ``Renderer.evaluate_parameter``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class MacroTag:
    name: str
    positional: tuple = ()
    named: Mapping[str, Any] = field(default_factory=dict)
    filters: tuple["MacroTag", ...] = ()

    # ----------------------------------------------------------------- params

    def get_parameter(self, key: Union[int, str], fallback_index: Optional[int] = None) -> Any:
        """
        Return a parameter by position or by name.

        ``get_parameter(0)`` reads the first positional parameter.
        ``get_parameter("name", 0)`` reads the named parameter ``name`` and
        falls back to positional parameter 0 when it is absent.
        Returns None when nothing matches.
        """
        if isinstance(key, int):
            return self._positional(key)
        if key in self.named:
            return self.named[key]
        if fallback_index is not None:
            return self._positional(fallback_index)
        return None

    def _positional(self, index: int) -> Any:
        if 0 <= index < len(self.positional):
            return self.positional[index]
        return None

    @property
    def filter(self) -> Optional["MacroTag"]:
        """First link of the filter chain, or None."""
        return self.filters[0] if self.filters else None

    def with_filters(self, *filters: "MacroTag") -> "MacroTag":
        return MacroTag(self.name, self.positional, dict(self.named), tuple(filters))

    # ---------------------------------------------------------------- display

    def __str__(self) -> str:
        pieces = [self.name] if self.name else []
        pieces.extend(_format_value(v) for v in self.positional)
        pieces.extend(f"{k}={_format_value(v)}" for k, v in self.named.items())
        for f in self.filters:
            pieces.append("| " + str(f)[3:-3])
        return "<% " + " ".join(pieces) + " %>"


def _format_value(value: Any) -> str:
    if isinstance(value, MacroTag):
        return str(value)
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{k}: {_format_value(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


SkinPart = Union[str, MacroTag]
PartSequence = tuple  # tuple[SkinPart, ...]


def is_macro(part: SkinPart) -> bool:
    return isinstance(part, MacroTag)
