"""
Skin errors
-----------
Only a handful of conditions abort a render.  Every other kind of "not
found" (missing context path, missing filter, missing subskin) degrades to
an empty contribution instead of raising.
"""

from __future__ import annotations

from typing import Optional


class SkinError(Exception):
    pass


class UnknownSkinError(SkinError, TypeError):
    """The top-level render argument is neither a skin nor a path string."""

    def __init__(self, value) -> None:
        super().__init__(f"Unknown skin object: {value!r}")
        self.value = value


class SkinNotFoundError(SkinError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Skin resource not found: {path}")
        self.path = path


class SkinCycleError(SkinError, RecursionError):
    pass


class SkinSyntaxError(SkinError, ValueError):

    def __init__(self, message: str, line: int, column: int, source: Optional[str] = None) -> None:
        where = f"{source}:" if source else ""
        super().__init__(f"{message} at {where}{line}:{column}")
        self.line = line
        self.column = column
        self.source = source
