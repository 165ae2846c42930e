"""tinybars parser — converts a token stream into an AST."""

from __future__ import annotations

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
from tinybars.errors import ParseError
from tinybars.lexer import tokenize
from tinybars.tokens import Position, Span, Token, TokenType

# Deepest block nesting accepted; parsing and rendering both recurse per level.
MAX_NESTING_DEPTH = 100

_BLOCKS = ("if", "each")


class Parser:
    """One-pass recursive descent parser for template token streams."""

    def __init__(self, tokens: list[Token], source: str = "") -> None:
        self._tokens = tokens
        self._source = source
        self._pos = 0
        self._open_blocks: list[Token] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _error(self, message: str, span: Span) -> ParseError:
        return ParseError(message, span, self._source)

    # ------------------------------------------------------------------
    # Program level
    # ------------------------------------------------------------------

    def parse(self) -> Program:
        body: list[Node] = []
        while self._peek() is not None:
            body.append(self._walk())

        if self._tokens:
            span = Span(self._tokens[0].span.start, self._tokens[-1].span.end)
        else:
            origin = Position(1, 1, 0)
            span = Span(origin, origin)
        return Program(tuple(body), span)

    def _walk(self) -> Node:
        tok = self._advance()

        if tok.type == TokenType.TEXT:
            return Text(tok.value, tok.span)
        if tok.type == TokenType.VARIABLE:
            return Variable(tok.value, tok.span)
        if tok.type == TokenType.RAW_VARIABLE:
            return RawVariable(tok.value, tok.span)
        if tok.type == TokenType.HELPER:
            return Helper(tok.value, tok.argument, tok.span)
        if tok.type == TokenType.PARTIAL:
            return Partial(tok.value, tok.span)
        if tok.type == TokenType.BLOCK_START:
            return self._parse_block(tok)
        if tok.type == TokenType.BLOCK_END:
            if self._open_blocks:
                expected = self._open_blocks[-1].value
                raise self._error(
                    f"mismatched '{tok.raw}', expected '{{{{/{expected}}}}}'", tok.span
                )
            raise self._error(f"unexpected '{tok.raw}' with no open block", tok.span)

        raise self._error(f"unknown token: {tok.raw!r}", tok.span)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _parse_block(self, start: Token) -> IfStatement | EachStatement:
        name = start.value
        if name not in _BLOCKS:
            raise self._error(f"unknown block '{{{{#{name}}}}}'", start.span)
        if not start.argument:
            raise self._error(f"'{{{{#{name}}}}}' requires an expression", start.span)
        if len(self._open_blocks) >= MAX_NESTING_DEPTH:
            raise self._error(
                f"blocks nested deeper than {MAX_NESTING_DEPTH} levels", start.span
            )

        self._open_blocks.append(start)
        body: list[Node] = []
        while True:
            tok = self._peek()
            if tok is None:
                raise self._error(f"unclosed block '{{{{#{name}}}}}'", start.span)
            if tok.type == TokenType.BLOCK_END and tok.value == name:
                break
            body.append(self._walk())
        end = self._advance()
        self._open_blocks.pop()

        span = Span(start.span.start, end.span.end)
        if name == "if":
            return IfStatement(start.argument, tuple(body), span)
        return EachStatement(start.argument, tuple(body), span)


def parse_tokens(tokens: list[Token], source: str = "") -> Program:
    """Build a Program from an already tokenized template."""
    return Parser(tokens, source).parse()


def parse(source: str, filename: str = "template.hbs") -> Program:
    """Convenience function: tokenize and parse source text."""
    tokens = tokenize(source, filename)
    return Parser(tokens, source).parse()
