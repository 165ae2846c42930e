"""tinybars lexer — converts template text into a flat token stream."""

from __future__ import annotations

from tinybars.errors import UnclosedTagError
from tinybars.tokens import Position, Span, Token, TokenType, line_starts, position_at

_OPEN = "{{"
_CLOSE = "}}"
_RAW_OPEN = "{{{"
_RAW_CLOSE = "}}}"


class Lexer:
    """Tokenize template source into a list of Token objects.

    The cursor is an explicit offset threaded through the ``_lex_*`` methods:
    each one takes the current offset and returns the offset after the
    consumed input. The instance only holds the immutable source and the
    tokens emitted so far.
    """

    def __init__(self, source: str, filename: str = "template.hbs") -> None:
        self._source = source
        self._filename = filename
        self._starts = line_starts(source)
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        pos = 0
        while pos < len(self._source):
            pos = self._lex_from(pos)
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _position(self, offset: int) -> Position:
        return position_at(self._source, offset, self._starts)

    def _emit(
        self,
        tt: TokenType,
        value: str,
        start: int,
        end: int,
        argument: str = "",
    ) -> Token:
        span = Span(self._position(start), self._position(end))
        tok = Token(tt, value, self._source[start:end], span, argument)
        self._tokens.append(tok)
        return tok

    def _error(self, message: str, offset: int) -> UnclosedTagError:
        return UnclosedTagError(message, self._position(offset), self._source)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _lex_from(self, pos: int) -> int:
        """Emit the text before the next tag and the tag itself."""
        open_at = self._source.find(_OPEN, pos)
        if open_at == -1:
            self._emit(TokenType.TEXT, self._source[pos:], pos, len(self._source))
            return len(self._source)

        if open_at > pos:
            self._emit(TokenType.TEXT, self._source[pos:open_at], pos, open_at)

        if self._source.startswith(_RAW_OPEN, open_at):
            return self._lex_raw_tag(open_at)
        return self._lex_tag(open_at)

    def _lex_raw_tag(self, open_at: int) -> int:
        close = self._source.find(_RAW_CLOSE, open_at + len(_RAW_OPEN))
        if close == -1:
            raise self._error("unclosed triple-stash tag", open_at)
        end = close + len(_RAW_CLOSE)
        inner = self._source[open_at + len(_RAW_OPEN) : close].strip()
        self._emit(TokenType.RAW_VARIABLE, inner, open_at, end)
        return end

    def _lex_tag(self, open_at: int) -> int:
        close = self._source.find(_CLOSE, open_at + len(_OPEN))
        if close == -1:
            raise self._error("unclosed tag", open_at)
        end = close + len(_CLOSE)
        inner = self._source[open_at + len(_OPEN) : close].strip()

        # Empty tags pass through as literal text
        if not inner:
            self._emit(TokenType.TEXT, "{{}}", open_at, end)
            return end

        lead = inner[0]
        if lead == "#":
            words = inner[1:].split()
            name = words[0] if words else ""
            self._emit(TokenType.BLOCK_START, name, open_at, end, " ".join(words[1:]))
        elif lead == "/":
            self._emit(TokenType.BLOCK_END, inner[1:].strip(), open_at, end)
        elif lead == ">":
            self._emit(TokenType.PARTIAL, inner[1:].strip(), open_at, end)
        elif " " in inner:
            name, _, args = inner.partition(" ")
            self._emit(TokenType.HELPER, name.strip(), open_at, end, args.strip())
        else:
            self._emit(TokenType.VARIABLE, inner, open_at, end)
        return end


def tokenize(source: str, filename: str = "template.hbs") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()
