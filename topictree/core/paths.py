# topictree/core/paths.py
from __future__ import annotations

from topictree.core.errors import InvalidTopicPathError

__all__ = ["SEPARATOR", "ROOT_PATH", "splitPath", "joinPath"]

SEPARATOR = "."
ROOT_PATH = ""



def splitPath(path: str) -> list[str]:
    """
    Splits a dotted topic path into its segments.

    Examples:
      - "foo"         -> ["foo"]
      - "foo.bar.baz" -> ["foo", "bar", "baz"]

    Raises TypeError for non-string paths and InvalidTopicPathError when any
    segment is empty (leading/trailing or doubled separators).
    """
    if not isinstance(path, str):
        raise TypeError(f"Topic path must be a str, got {type(path).__name__}")
    parts = path.split(SEPARATOR)
    if any(part == "" for part in parts):
        raise InvalidTopicPathError(path, "path contains empty segment(s)")
    return parts



def joinPath(parentPath: str, name: str) -> str:
    """Children of the root take their bare name as path."""
    return f"{parentPath}{SEPARATOR}{name}" if parentPath else name

