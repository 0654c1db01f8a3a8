"""
RenderContext
=============
The data a skin is rendered against.  An ordered mapping of local values
plus an optional parent context that answers reads for missing keys.

A context may also wrap a caller's object (its ``root``).  Names that are
not set locally are read from the root's public attributes, properties and
methods included, and top-level macro handlers are looked up against the
root's type.

``clone()`` returns an empty child whose reads fall through to this
context, so a child can shadow values without touching the caller's
context.  ``overlay(**values)`` is ``clone()`` followed by assignment.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Iterator, Optional

_MISSING = object()


class RenderContext(MutableMapping):

    def __init__(self, values: Optional[Mapping[str, Any]] = None, *,
                 parent: Optional["RenderContext"] = None, root: Any = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self._parent = parent
        self._root = root

    @classmethod
    def of(cls, context: Any) -> "RenderContext":
        """Coerce a caller-supplied context into a RenderContext."""
        if isinstance(context, RenderContext):
            return context
        if context is None:
            return cls()
        if isinstance(context, Mapping):
            return cls(context)
        return cls(root=context)

    # ---------------------------------------------------------------- derive

    @property
    def parent(self) -> Optional["RenderContext"]:
        return self._parent

    @property
    def root(self) -> Any:
        """The wrapped caller object, inherited from parent contexts; None if there is none."""
        ctx: Optional[RenderContext] = self
        while ctx is not None:
            if ctx._root is not None:
                return ctx._root
            ctx = ctx._parent
        return None

    def clone(self) -> "RenderContext":
        return RenderContext(parent=self)

    def overlay(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "RenderContext":
        child = self.clone()
        if values:
            child._values.update(values)
        child._values.update(kwargs)
        return child

    # --------------------------------------------------------------- mapping

    def __getitem__(self, key: str) -> Any:
        ctx: Optional[RenderContext] = self
        while ctx is not None:
            value = ctx._values.get(key, _MISSING)
            if value is _MISSING and ctx._root is not None:
                value = _attribute(ctx._root, key)
            if value is not _MISSING:
                return value
            ctx = ctx._parent
        raise KeyError(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        # only local values can be removed; inherited ones stay visible
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        ctx: Optional[RenderContext] = self
        chain = []
        while ctx is not None:
            chain.append(ctx)
            ctx = ctx._parent
        # outermost first so keys keep the order they were first defined in
        for ctx in reversed(chain):
            keys = list(ctx._values)
            if ctx._root is not None:
                keys.extend(k for k in getattr(ctx._root, "__dict__", {}) if not k.startswith("_"))
            for key in keys:
                if key not in seen:
                    seen.add(key)
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, key: object) -> bool:
        try:
            self[key]
        except KeyError:
            return False
        return True

    def local_items(self):
        return self._values.items()

    def to_dict(self) -> dict[str, Any]:
        return {k: self[k] for k in self}

    def __repr__(self) -> str:
        if self._root is not None:
            return f"RenderContext({self._values!r}, root={self._root!r})"
        return f"RenderContext({self.to_dict()!r})"


def _attribute(obj: Any, name: Any) -> Any:
    if not isinstance(name, str) or not name or name.startswith("_"):
        return _MISSING
    return getattr(obj, name, _MISSING)
