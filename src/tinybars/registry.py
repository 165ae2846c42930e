"""Helper and partial registries consulted at render time."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from tinybars.ast import Program
from tinybars.parser import parse

HelperFn = Callable[..., Any]


@dataclass
class HelperRegistry:
    """Maps helper names to callables invoked as ``fn(scope, *args)``."""

    _helpers: dict[str, HelperFn] = field(default_factory=dict)

    def register(self, name: str, fn: HelperFn | None = None) -> Any:
        """Register *fn* under *name*; without *fn*, return a decorator."""
        if fn is not None:
            self._helpers[name] = fn
            return fn

        def decorator(func: HelperFn) -> HelperFn:
            self._helpers[name] = func
            return func

        return decorator

    def unregister(self, name: str) -> None:
        self._helpers.pop(name, None)

    def get(self, name: str) -> HelperFn | None:
        return self._helpers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._helpers


@dataclass
class PartialRegistry:
    """Maps partial names to compiled programs and their source text."""

    _partials: dict[str, tuple[Program, str]] = field(default_factory=dict)

    def register(self, name: str, template: str | Program) -> Program:
        """Register a partial. Source text is parsed here, so syntax errors
        surface at registration rather than at render time."""
        if isinstance(template, Program):
            program, source = template, ""
        else:
            program, source = parse(template, f"{name}.hbs"), template
        self._partials[name] = (program, source)
        return program

    def unregister(self, name: str) -> None:
        self._partials.pop(name, None)

    def get(self, name: str) -> Program | None:
        entry = self._partials.get(name)
        return entry[0] if entry is not None else None

    def source(self, name: str) -> str:
        """Source text of a registered partial, '' when built from a Program."""
        entry = self._partials.get(name)
        return entry[1] if entry is not None else ""

    def __contains__(self, name: object) -> bool:
        return name in self._partials
