"""Error types with formatted source context."""

from __future__ import annotations

from tinybars.tokens import Position, Span


def _snippet(
    message: str,
    filename: str,
    source: str,
    start: Position,
    underline_len: int,
) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


def _span_underline(span: Span, source: str) -> int:
    """Underline the full span when on one line, otherwise to end of line."""
    if span.end.line == span.start.line:
        return max(1, span.end.column - span.start.column)
    lines = source.splitlines()
    line_idx = span.start.line - 1
    line_len = len(lines[line_idx]) if 0 <= line_idx < len(lines) else 0
    return max(1, line_len - span.start.column + 1)


class UnclosedTagError(Exception):
    """Raised when a ``{{`` or ``{{{`` opener has no matching closer."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    @property
    def offset(self) -> int:
        return self.position.offset

    @property
    def width(self) -> int:
        """Length of the unclosed opener: 3 for a triple-stash, else 2."""
        return 3 if self.source.startswith("{{{", self.position.offset) else 2

    def format(self, filename: str = "template.hbs") -> str:
        return _snippet(self.message, filename, self.source, self.position, self.width)


class ParseError(Exception):
    """Raised on the first parse error, with span and source context."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "template.hbs") -> str:
        return _snippet(
            self.message,
            filename,
            self.source,
            self.span.start,
            _span_underline(self.span, self.source),
        )


class RenderError(Exception):
    """Raised on render failures that are not missing data."""

    def __init__(
        self,
        message: str,
        span: Span,
        source: str,
        partial_stack: list[str] | None = None,
    ) -> None:
        self.message = message
        self.span = span
        self.source = source
        self.partial_stack = partial_stack or []
        super().__init__(self.format())

    def format(self, filename: str = "template.hbs") -> str:
        result = _snippet(
            self.message,
            filename,
            self.source,
            self.span.start,
            _span_underline(self.span, self.source),
        )
        if self.partial_stack:
            chain = " -> ".join(f"> {name}" for name in self.partial_stack)
            result += f"\n  in partial chain: {chain}"
        return result
