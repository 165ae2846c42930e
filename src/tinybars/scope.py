"""Render-time scope frames, dotted-path lookup, and value coercions."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RootFrame:
    """Outermost frame: a private copy of the caller's context."""

    bindings: dict[str, Any]


@dataclass(frozen=True, slots=True)
class LoopFrame:
    """One iteration of an #each block."""

    item: Any
    index: int
    parent: Scope


Scope = RootFrame | LoopFrame

_LOOP_KEYS = ("this", "index")


def root_scope(context: Mapping[str, Any] | None) -> RootFrame:
    return RootFrame(dict(context) if context else {})


def child_scope(parent: Scope, item: Any, index: int) -> LoopFrame:
    return LoopFrame(item, index, parent)


def lookup(scope: Scope, path: str) -> Any:
    """Resolve a dotted path against the scope chain.

    Every frame is checked in two tiers before moving outward: first the
    frame's own keys (the context keys on the root, ``this`` and ``index``
    on a loop frame), then the keys of the loop item when it is
    object-typed. The first hit is resolved through the remaining segments
    and returned, even if that yields None.
    """
    if not path:
        return None
    first, *rest = path.split(".")

    frame: Scope | None = scope
    while frame is not None:
        if isinstance(frame, RootFrame):
            if first in frame.bindings:
                return _traverse(frame.bindings[first], rest)
            frame = None
        else:
            if first in _LOOP_KEYS:
                head = frame.item if first == "this" else frame.index
                return _traverse(head, rest)
            if _is_object(frame.item) and _has(frame.item, first):
                return _traverse(_get(frame.item, first), rest)
            frame = frame.parent
    return None


def _traverse(value: Any, parts: list[str]) -> Any:
    for part in parts:
        if value is None:
            return None
        value = _get(value, part)
    return value


def _is_object(value: Any) -> bool:
    return value is not None and not isinstance(value, (str, int, float, bool))


def _index(key: str) -> int | None:
    # isdigit() alone also accepts superscripts, which int() rejects
    if key.isascii() and key.isdigit():
        return int(key)
    return None


def _has(value: Any, key: str) -> bool:
    if isinstance(value, Mapping):
        return key in value
    if isinstance(value, (list, tuple)):
        index = _index(key)
        return key == "length" or (index is not None and index < len(value))
    if key.startswith("_"):
        return False
    return hasattr(value, key)


def _get(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key)
    if isinstance(value, (list, tuple, str)):
        if key == "length":
            return len(value)
        if isinstance(value, str):
            return None
        index = _index(key)
        if index is not None and index < len(value):
            return value[index]
        return None
    if isinstance(value, (int, float, bool)) or key.startswith("_"):
        return None
    return getattr(value, key, None)


def is_truthy(value: Any) -> bool:
    """Falsy: None, False, 0, NaN and the empty string. Containers are truthy."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def to_text(value: Any) -> str:
    """Canonical string form of a context value; None renders as ''."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)
