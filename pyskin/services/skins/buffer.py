"""
Output buffer
-------------
Append-only text sink with a position marker.  ``truncate(mark)`` removes
and returns everything written since ``mark``; filter chains rely on it to
recapture what a macro wrote directly.
"""

from __future__ import annotations

import io


class Buffer:

    def __init__(self, *parts) -> None:
        self._io = io.StringIO()
        self.write(*parts)

    def write(self, *parts) -> "Buffer":
        for part in parts:
            if part is None:
                continue
            self._io.write(part if isinstance(part, str) else str(part))
        return self

    append = write

    @property
    def length(self) -> int:
        return self._io.tell()

    def __len__(self) -> int:
        return self.length

    def truncate(self, mark: int) -> str:
        """Cut the buffer back to ``mark`` and return the removed text."""
        if mark < 0 or mark > self.length:
            raise ValueError(f"truncate mark {mark} outside buffer of length {self.length}")
        removed = self._io.getvalue()[mark:]
        self._io.seek(mark)
        self._io.truncate(mark)
        return removed

    def getvalue(self) -> str:
        return self._io.getvalue()

    def __str__(self) -> str:
        return self.getvalue()

    def __repr__(self) -> str:
        return f"Buffer(length={self.length})"
