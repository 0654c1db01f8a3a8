"""
SkinFactory
===========
Builds :class:`Skin` objects from parsed parts, handling the two
structural directives:

    <% extends "base.skin" %>    parent skin; looked up next to the current
                                 skin first, then through the scope
    <% subskin "item" %>         everything up to the next directive goes
                                 into the subskin "item" (last one wins)

A trailing whitespace-only literal is dropped from the main sequence, so a
skin that only declares subskins still inherits its parent's main content.

Built skins are cached per resource path and rebuilt when the file, or any
file in its extends chain, changes modification time.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Optional, Union

from pyskin.core.config import get_settings
from pyskin.services.resources import Resource, ResourceScope

from .errors import SkinCycleError, SkinNotFoundError
from .parser import parse_skin
from .skin import Skin
from .tags import MacroTag, SkinPart

logger = logging.getLogger(__name__)

Stamps = tuple  # tuple[tuple[Resource, float], ...]


class SkinFactory:

    def __init__(self, scope: Optional[ResourceScope] = None, *, cache: Optional[bool] = None) -> None:
        self.scope = scope if scope is not None else ResourceScope()
        self.cache_enabled = get_settings().cache_skins if cache is None else cache
        self._cache: dict[str, tuple[Stamps, Skin]] = {}
        self._building: list[str] = []
        # one frame per skin under construction, collecting the stamps of its extends chain
        self._stamps: list[list[tuple[Resource, float]]] = []

    # ----------------------------------------------------------------- public

    def get_skin(self, path: str) -> Skin:
        """Look ``path`` up through the scope and build (or reuse) its skin."""
        return self.create_skin(self.scope.get_resource(path))

    def create_skin(self, resource_or_text: Union[Resource, str]) -> Skin:
        """Build a skin from a resource, or from skin text given as a string."""
        if isinstance(resource_or_text, str):
            logger.debug("creating skin from text")
            return self.build(parse_skin(resource_or_text))

        resource = resource_or_text
        if not resource.exists():
            raise SkinNotFoundError(str(resource))

        key = str(resource.path)
        if self.cache_enabled:
            cached = self._cache.get(key)
            if cached is not None and _is_fresh(cached[0]):
                logger.debug("skin cache hit: %s", key)
                self._record(cached[0])
                return cached[1]

        if key in self._building:
            chain = " -> ".join(self._building + [key])
            raise SkinCycleError(f"Circular extends: {chain}")

        logger.debug("creating skin: %s", key)
        self._building.append(key)
        self._stamps.append([(resource, resource.mtime)])
        try:
            skin = self.build(parse_skin(resource.read_text(), source=key), resource)
        finally:
            self._building.pop()
            stamps = tuple(self._stamps.pop())

        if self.cache_enabled:
            self._cache[key] = (stamps, skin)
        self._record(stamps)
        return skin

    def build(self, parts: Iterable[SkinPart], resource: Optional[Resource] = None) -> Skin:
        """Split a part stream into main/subskin sequences and resolve ``extends``."""
        main: list[SkinPart] = []
        subskins: dict[str, list[SkinPart]] = {}
        current = main
        parent: Optional[Skin] = None

        for part in parts:
            if isinstance(part, MacroTag) and part.name == "extends":
                path = part.get_parameter(0)
                if path is None or path == "":
                    logger.warning("extends without a path in %s", resource or "<string>")
                    continue
                parent = self._load_parent(path, resource)
            elif isinstance(part, MacroTag) and part.name == "subskin":
                name = part.get_parameter("name", 0)
                if name is None or name == "":
                    logger.warning("subskin without a name in %s", resource or "<string>")
                    continue
                current = []
                subskins[str(name)] = current
            else:
                current.append(part)

        # trailing whitespace must not block inheritance of the parent's main skin
        if main and isinstance(main[-1], str) and main[-1].strip() == "":
            main.pop()

        return Skin(main, subskins, parent, source=str(resource.path) if resource else None)

    def clear(self) -> None:
        self._cache.clear()

    # ---------------------------------------------------------------- private

    def _record(self, stamps: Stamps) -> None:
        # a parent's stamps become part of the child being built
        if self._stamps:
            self._stamps[-1].extend(stamps)

    def _load_parent(self, path, resource: Optional[Resource]) -> Skin:
        path = str(path)
        parent_resource = None
        if resource is not None:
            parent_resource = resource.parent_repository.get_resource(path)
        if parent_resource is None or not parent_resource.exists():
            parent_resource = self.scope.get_resource(path)
        logger.debug("extends %s -> %s", resource, parent_resource)
        return self.create_skin(parent_resource)


def _is_fresh(stamps: Stamps) -> bool:
    return all(resource.mtime == mtime for resource, mtime in stamps)


# -----------------------------------------------------------------------------

@lru_cache
def get_factory() -> SkinFactory:
    """Process-wide factory over the configured ``skin_root``."""
    return SkinFactory()
