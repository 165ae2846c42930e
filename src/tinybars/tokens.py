"""Token types, data structures, and source position helpers."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    TEXT = auto()  # literal text between tags, or a literal {{}}
    VARIABLE = auto()  # {{path}}
    RAW_VARIABLE = auto()  # {{{path}}}
    BLOCK_START = auto()  # {{#name expr}}
    BLOCK_END = auto()  # {{/name}}
    PARTIAL = auto()  # {{> name}}
    HELPER = auto()  # {{name args}}


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token.

    ``value`` holds the text, the dotted path, the block name, the partial
    name or the helper name depending on ``type``. ``argument`` holds the raw
    block expression or the raw helper argument string. ``raw`` is the exact
    source slice the token covers.
    """

    type: TokenType
    value: str
    raw: str
    span: Span
    argument: str = ""


def line_starts(source: str) -> list[int]:
    """Return the offsets at which each line of *source* begins."""
    starts = [0]
    for idx, ch in enumerate(source):
        if ch == "\n":
            starts.append(idx + 1)
    return starts


def position_at(source: str, offset: int, starts: list[int] | None = None) -> Position:
    """Convert a character offset into a line/column Position."""
    if starts is None:
        starts = line_starts(source)
    line_idx = bisect_right(starts, offset) - 1
    return Position(line_idx + 1, offset - starts[line_idx] + 1, offset)
