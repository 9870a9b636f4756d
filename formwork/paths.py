"""Diagnostic paths.

A path names a location in the value tree for error reporting only; it is
never used for lookup. The root is ``None``.
"""
from __future__ import annotations

import re

_INDEX = re.compile(r"0|[1-9][0-9]*")


def join_path(parent: str | None, key: str | int) -> str:
    """Child path of ``key`` under ``parent``: ``"key"`` at the root, else ``"parent.key"``."""
    return str(key) if parent is None else f"{parent}.{key}"


def display_path(path: str | None) -> str:
    """Render a path for humans; the root renders as ``$``."""
    return "$" if path is None or path == "" else path


def is_index(key: str | int) -> bool:
    """Whether a field identifier reads as a non-negative integer (a list index)."""
    return _INDEX.fullmatch(str(key)) is not None


def required_message(key: str | int) -> str:
    """Message for a missing required field, phrased as an index where it reads as one."""
    kind = "index" if is_index(key) else "field"
    return f'Please provide required {kind} "{key}".'
