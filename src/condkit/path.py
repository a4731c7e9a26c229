"""Path resolution for `$.a.b[0].c` style paths."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, List

ROOT_PREFIX = "$."

_INDEX_RE = re.compile(r"\[([0-9]+)\]")


def split_path(path: str) -> List[str]:
    """Return the segments of a path.

    The optional ``$.`` root marker is dropped and every ``[N]`` index becomes
    its own segment, so ``$.posts[1].title`` yields ``["posts", "1", "title"]``.
    """
    if path.startswith(ROOT_PREFIX):
        path = path[len(ROOT_PREFIX) :]
    return _INDEX_RE.sub(r".\1", path).split(".")


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(segment)
    if isinstance(current, (list, tuple)):
        if not (segment.isascii() and segment.isdigit()):
            return None
        if len(segment) > 1 and segment.startswith("0"):
            return None
        idx = int(segment)
        if idx >= len(current):
            return None
        return current[idx]
    return None


def get_value(obj: Any, path: str) -> Any:
    """Resolve ``path`` against ``obj``.

    Returns ``None`` when any segment is missing, indexes past the end of a
    list, or would traverse into a scalar. Never raises for a string path.
    """
    current = obj
    for segment in split_path(path):
        if current is None:
            return None
        current = _step(current, segment)
    return current
