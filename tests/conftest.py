"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any

import pytest

import tinybars
from tinybars.ast import Node, Program
from tinybars.lexer import tokenize
from tinybars.parser import parse
from tinybars.registry import HelperRegistry, PartialRegistry
from tinybars.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Program."""

    def _parse(source: str, filename: str = "test.hbs") -> Program:
        return parse(source, filename)

    return _parse


@pytest.fixture
def render_source():
    """Return a helper that compiles source and renders it once."""

    def _render(
        source: str,
        context: dict[str, Any] | None = None,
        helpers: HelperRegistry | None = None,
        partials: PartialRegistry | None = None,
    ) -> str:
        return tinybars.compile(source, helpers=helpers, partials=partials)(context)

    return _render


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def node_types(nodes: tuple[Node, ...]) -> list[str]:
    """Return the class names of a node sequence."""
    return [type(n).__name__ for n in nodes]
