"""
Skin
====
A compiled template: one main part sequence, a mapping of named subskins
and an optional parent skin.

The structure lives in a single immutable :class:`SkinData`.  A
:class:`Skin` is a view over it: ``(data, key)`` where ``key`` selects the
active sequence (``None`` for the main one).  ``get_subskin`` therefore
never copies anything; it just returns another view over the same data.

Inheritance
-----------
``get_skin_parts`` is the only fallback algorithm:

    * no name  → the active sequence, or the parent's main sequence when the
                 active one is empty
    * a name   → this skin's subskin of that name, or the parent's
    * nothing found and no parent → None (rendering is a no-op)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from .tags import PartSequence, SkinPart

if TYPE_CHECKING:
    from .buffer import Buffer
    from .engine import SkinEngine


@dataclass(frozen=True)
class SkinData:
    main: PartSequence = ()
    subskins: Mapping[str, PartSequence] = field(default_factory=dict)
    parent: Optional["Skin"] = None
    source: Optional[str] = None


class Skin:

    __slots__ = ("_data", "_key")

    def __init__(
        self,
        main_parts: Iterable[SkinPart] = (),
        subskins: Optional[Mapping[str, Iterable[SkinPart]]] = None,
        parent: Optional["Skin"] = None,
        *,
        source: Optional[str] = None,
    ) -> None:
        frozen = {name: tuple(parts) for name, parts in (subskins or {}).items()}
        self._data = SkinData(tuple(main_parts), MappingProxyType(frozen), parent, source)
        self._key: Optional[str] = None

    @classmethod
    def _view(cls, data: SkinData, key: Optional[str]) -> "Skin":
        view = cls.__new__(cls)
        view._data = data
        view._key = key
        return view

    # ------------------------------------------------------------- structure

    @property
    def name(self) -> Optional[str]:
        """Subskin name this view is rooted at, None for the main skin."""
        return self._key

    @property
    def source(self) -> Optional[str]:
        return self._data.source

    @property
    def parent(self) -> Optional["Skin"]:
        return self._data.parent

    @property
    def main_parts(self) -> PartSequence:
        """The active sequence of this view, without inheritance."""
        if self._key is None:
            return self._data.main
        return self._data.subskins[self._key]

    @property
    def subskins(self) -> Mapping[str, PartSequence]:
        return self._data.subskins

    def subskin_names(self) -> list[str]:
        return list(self._data.subskins)

    def has_subskin(self, name: str) -> bool:
        return name in self._data.subskins

    # ----------------------------------------------------------- inheritance

    def get_skin_parts(self, name: Optional[str] = None) -> Optional[PartSequence]:
        parts = self.main_parts if not name else self._data.subskins.get(name)
        if parts is None or (not name and len(parts) == 0):
            parent = self._data.parent
            return parent.get_skin_parts(name) if parent is not None else None
        return parts

    def get_subskin(self, name: str) -> Optional["Skin"]:
        """View rooted at this skin's own subskin ``name``; None when absent here."""
        if name not in self._data.subskins:
            return None
        return Skin._view(self._data, name)

    # ------------------------------------------------------------- rendering

    def render(self, context: Any = None, buffer: Optional["Buffer"] = None,
               engine: Optional["SkinEngine"] = None) -> "Buffer":
        return _engine(engine).render(self, context, buffer)

    def render_subskin(self, name: str, context: Any = None, buffer: Optional["Buffer"] = None,
                       engine: Optional["SkinEngine"] = None) -> "Buffer":
        return _engine(engine).render_subskin(self, name, context, buffer)

    # --------------------------------------------------------------- display

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Skin):
            return NotImplemented
        return self._data is other._data and self._key == other._key

    def __hash__(self) -> int:
        return hash((id(self._data), self._key))

    def __repr__(self) -> str:
        label = self._data.source or "<string>"
        if self._key is not None:
            label += "#" + self._key
        return f"<Skin {label}>"


def _engine(engine: Optional["SkinEngine"]) -> "SkinEngine":
    if engine is not None:
        return engine
    from .engine import get_engine
    return get_engine()
