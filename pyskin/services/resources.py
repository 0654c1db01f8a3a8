#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Resource lookup
===============
Locates skin files on disk.

    Repository   — a directory; resolves paths relative to its root
    Resource     — one file inside a repository
    ResourceScope — ordered list of repositories; first existing match wins

Paths that would escape a repository's boundary (``../../etc/passwd``)
resolve to a resource that never exists.  A resource's
``parent_repository`` is the directory it lives in, so a skin can refer
to siblings (``<% extends "base.skin" %>``) without knowing where it was
loaded from.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pyskin.core.config import get_settings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# -----------------------------------------------------------------------------

class Resource:

    def __init__(self, path: Path, repository: "Repository", *, contained: bool = True) -> None:
        self.path = path
        self.repository = repository
        self._contained = contained

    @property
    def name(self) -> str:
        return self.path.name

    def exists(self) -> bool:
        return self._contained and self.path.is_file()

    @property
    def mtime(self) -> float:
        return self.path.stat().st_mtime if self.exists() else 0.0

    def read_text(self) -> str:
        if not self.exists():
            raise FileNotFoundError(str(self.path))
        return self.path.read_text(encoding=self.repository.encoding)

    @property
    def parent_repository(self) -> "Repository":
        return Repository(
            self.path.parent,
            boundary=self.repository.boundary,
            encoding=self.repository.encoding,
            extension=self.repository.extension,
        )

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"<Resource {self.path}>"


# -----------------------------------------------------------------------------

class Repository:

    def __init__(
        self,
        root: PathLike,
        *,
        boundary: Optional[PathLike] = None,
        encoding: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        self.root = Path(root).resolve()
        self.boundary = Path(boundary).resolve() if boundary is not None else self.root
        self.encoding = encoding or settings.skin_encoding
        self.extension = settings.skin_extension if extension is None else extension

    def get_resource(self, path: PathLike) -> Resource:
        resource = self._resolve(str(path))
        if not resource.exists() and self.extension and not str(path).endswith(self.extension):
            with_ext = self._resolve(str(path) + self.extension)
            if with_ext.exists():
                return with_ext
        return resource

    def _resolve(self, path: str) -> Resource:
        candidate = (self.root / path.lstrip("/")).resolve()
        contained = candidate == self.boundary or candidate.is_relative_to(self.boundary)
        if not contained:
            logger.warning("Resource path escapes repository %s: %s", self.boundary, path)
        return Resource(candidate, self, contained=contained)

    def __repr__(self) -> str:
        return f"<Repository {self.root}>"


# -----------------------------------------------------------------------------

class ResourceScope:
    """Searches several repositories in order (e.g. app skins, then defaults)."""

    def __init__(self, *roots: Union[PathLike, Repository], **options) -> None:
        if not roots:
            roots = (get_settings().skin_root,)
        self.repositories = [
            r if isinstance(r, Repository) else Repository(r, **options)
            for r in roots
        ]

    def get_resource(self, path: PathLike) -> Resource:
        for repository in self.repositories:
            resource = repository.get_resource(path)
            if resource.exists():
                return resource
        return self.repositories[0].get_resource(path)

    def __repr__(self) -> str:
        return f"<ResourceScope {[str(r.root) for r in self.repositories]}>"


# -----------------------------------------------------------------------------
