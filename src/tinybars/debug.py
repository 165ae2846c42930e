"""--debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

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


def dump_ast(program: Program, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Program\n")
    for node in program.body:
        _dump_node(node, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    if isinstance(node, Text):
        f.write(f"{_indent(depth)}Text({node.value!r})\n")
    elif isinstance(node, Variable):
        f.write(f"{_indent(depth)}Variable {node.path}\n")
    elif isinstance(node, RawVariable):
        f.write(f"{_indent(depth)}RawVariable {node.path}\n")
    elif isinstance(node, Helper):
        f.write(f"{_indent(depth)}Helper {node.name} args={node.args!r}\n")
    elif isinstance(node, Partial):
        f.write(f"{_indent(depth)}Partial {node.name}\n")
    elif isinstance(node, IfStatement):
        f.write(f"{_indent(depth)}If {node.test}\n")
        for child in node.body:
            _dump_node(child, depth + 1, f)
    elif isinstance(node, EachStatement):
        f.write(f"{_indent(depth)}Each {node.source}\n")
        for child in node.body:
            _dump_node(child, depth + 1, f)
