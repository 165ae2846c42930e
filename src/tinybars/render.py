"""Tree-walking renderer: turns a Program and a context into text."""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tinybars.ast import (
    EachStatement,
    Helper,
    IfStatement,
    Node,
    Partial,
    Program,
    RawVariable,
    Text,
    Variable,
)
from tinybars.errors import RenderError
from tinybars.registry import HelperRegistry, PartialRegistry
from tinybars.scope import Scope, child_scope, is_truthy, lookup, root_scope, to_text
from tinybars.tokens import Span


def render_depth_limit() -> int:
    """Combined block and partial nesting allowed for one render.

    A nesting level costs at most five interpreter frames, so the budget is
    an eighth of the recursion limit (125 under the default of 1000).
    """
    return max(1, sys.getrecursionlimit() // 8)


@dataclass
class RenderContext:
    """State carried through one render call."""

    helpers: HelperRegistry
    partials: PartialRegistry
    source: str
    partial_stack: list[str] = field(default_factory=list)
    max_partial_depth: int = 16
    depth: int = 0
    max_depth: int = field(default_factory=render_depth_limit)

    def descend(self, span: Span) -> None:
        if self.depth >= self.max_depth:
            raise RenderError(
                f"render depth limit ({self.max_depth}) exceeded",
                span,
                self.source,
                partial_stack=list(self.partial_stack),
            )
        self.depth += 1


@dataclass(frozen=True)
class Template:
    """A compiled template. Calling it renders a context to text.

    The registries are looked up on every call, so helpers and partials
    registered after compilation are picked up by the next render.
    """

    program: Program
    helpers: HelperRegistry = field(default_factory=HelperRegistry)
    partials: PartialRegistry = field(default_factory=PartialRegistry)
    source: str = ""
    max_partial_depth: int = 16

    def __call__(self, context: Mapping[str, Any] | None = None) -> str:
        ctx = RenderContext(
            helpers=self.helpers,
            partials=self.partials,
            source=self.source,
            max_partial_depth=self.max_partial_depth,
        )
        return _render_nodes(self.program.body, root_scope(context), ctx)

    def render(self, context: Mapping[str, Any] | None = None) -> str:
        return self(context)


def compile_program(
    program: Program,
    *,
    helpers: HelperRegistry | None = None,
    partials: PartialRegistry | None = None,
    source: str = "",
) -> Template:
    """Wrap a parsed Program in a reusable render function."""
    return Template(
        program,
        helpers if helpers is not None else HelperRegistry(),
        partials if partials is not None else PartialRegistry(),
        source,
    )


def render(
    program: Program,
    context: Mapping[str, Any] | None = None,
    *,
    helpers: HelperRegistry | None = None,
    partials: PartialRegistry | None = None,
) -> str:
    """Render a Program once."""
    return compile_program(program, helpers=helpers, partials=partials)(context)


# ---------------------------------------------------------------------------
# Node dispatch
# ---------------------------------------------------------------------------


def _render_nodes(nodes: tuple[Node, ...], scope: Scope, ctx: RenderContext) -> str:
    return "".join(_render_node(node, scope, ctx) for node in nodes)


def _render_node(node: Node, scope: Scope, ctx: RenderContext) -> str:
    if isinstance(node, Text):
        return node.value
    if isinstance(node, (Variable, RawVariable)):
        return to_text(lookup(scope, node.path))
    if isinstance(node, IfStatement):
        if not is_truthy(lookup(scope, node.test)):
            return ""
        ctx.descend(node.span)
        try:
            return _render_nodes(node.body, scope, ctx)
        finally:
            ctx.depth -= 1
    if isinstance(node, EachStatement):
        return _render_each(node, scope, ctx)
    if isinstance(node, Helper):
        return _render_helper(node, scope, ctx)
    if isinstance(node, Partial):
        return _render_partial(node, scope, ctx)
    raise TypeError(f"unknown AST node: {type(node).__name__}")


def _render_each(node: EachStatement, scope: Scope, ctx: RenderContext) -> str:
    items = lookup(scope, node.source)
    if not isinstance(items, (list, tuple)):
        return ""
    ctx.descend(node.span)
    try:
        return "".join(
            _render_nodes(node.body, child_scope(scope, item, index), ctx)
            for index, item in enumerate(items)
        )
    finally:
        ctx.depth -= 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_ARG_RE = re.compile(r'"((?:[^"\\]|\\.)*)"|\'((?:[^\'\\]|\\.)*)\'|(\S+)')
_INT_RE = re.compile(r"-?\d+")
_FLOAT_RE = re.compile(r"-?(?:\d+\.\d*|\.\d+)(?:[eE][-+]?\d+)?|-?\d+[eE][-+]?\d+")
_LITERALS: dict[str, Any] = {"true": True, "false": False, "null": None}


def _unescape(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text)


def resolve_args(raw: str, scope: Scope) -> list[Any]:
    """Parse a raw helper argument string into values.

    Quoted strings, integers, floats, true/false/null are literals; any other
    word is a dotted path resolved against *scope*.
    """
    values: list[Any] = []
    for match in _ARG_RE.finditer(raw):
        double, single, word = match.groups()
        if double is not None:
            values.append(_unescape(double))
        elif single is not None:
            values.append(_unescape(single))
        elif word in _LITERALS:
            values.append(_LITERALS[word])
        elif _INT_RE.fullmatch(word):
            values.append(int(word))
        elif _FLOAT_RE.fullmatch(word):
            values.append(float(word))
        else:
            values.append(lookup(scope, word))
    return values


def _render_helper(node: Helper, scope: Scope, ctx: RenderContext) -> str:
    fn = ctx.helpers.get(node.name)
    if fn is None:
        return ""
    args = resolve_args(node.args, scope)
    try:
        result = fn(scope, *args)
    except Exception as exc:
        raise RenderError(
            f"helper '{node.name}' failed: {exc}",
            node.span,
            ctx.source,
            partial_stack=list(ctx.partial_stack),
        ) from exc
    return to_text(result)


# ---------------------------------------------------------------------------
# Partials
# ---------------------------------------------------------------------------


def _render_partial(node: Partial, scope: Scope, ctx: RenderContext) -> str:
    program = ctx.partials.get(node.name)
    if program is None:
        return ""

    if len(ctx.partial_stack) >= ctx.max_partial_depth:
        raise RenderError(
            f"partial depth limit ({ctx.max_partial_depth}) exceeded",
            node.span,
            ctx.source,
            partial_stack=list(ctx.partial_stack),
        )

    ctx.descend(node.span)
    outer_source = ctx.source
    ctx.partial_stack.append(node.name)
    ctx.source = ctx.partials.source(node.name)
    try:
        return _render_nodes(program.body, scope, ctx)
    finally:
        ctx.source = outer_source
        ctx.partial_stack.pop()
        ctx.depth -= 1
