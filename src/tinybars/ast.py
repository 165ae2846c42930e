"""AST node types for parsed templates."""

from __future__ import annotations

from dataclasses import dataclass

from tinybars.tokens import Span


@dataclass(frozen=True, slots=True)
class Text:
    """Literal output."""

    value: str
    span: Span


@dataclass(frozen=True, slots=True)
class Variable:
    """Interpolation of a dotted lookup path: {{user.name}}."""

    path: str
    span: Span


@dataclass(frozen=True, slots=True)
class RawVariable:
    """Triple-stash interpolation: {{{user.name}}}.

    Renders exactly like Variable; kept distinct so an escaping policy can
    tell them apart.
    """

    path: str
    span: Span


@dataclass(frozen=True, slots=True)
class Helper:
    """Helper call with its unparsed argument string."""

    name: str
    args: str
    span: Span


@dataclass(frozen=True, slots=True)
class Partial:
    """Reference to a registered sub-template."""

    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class IfStatement:
    """{{#if test}} ... {{/if}}"""

    test: str
    body: tuple[Node, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class EachStatement:
    """{{#each source}} ... {{/each}}"""

    source: str
    body: tuple[Node, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class Program:
    """Root node."""

    body: tuple[Node, ...]
    span: Span


Node = Text | Variable | RawVariable | Helper | Partial | IfStatement | EachStatement
