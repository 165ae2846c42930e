"""tinybars Handlebars-style template compiler."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tinybars.registry import HelperRegistry, PartialRegistry
    from tinybars.render import Template

__version__ = "0.1.0"


def compile(
    source: str,
    filename: str = "template.hbs",
    helpers: HelperRegistry | None = None,
    partials: PartialRegistry | None = None,
) -> Template:
    """Tokenize and parse template source into a reusable render function."""
    from tinybars.parser import parse
    from tinybars.render import compile_program

    program = parse(source, filename)
    return compile_program(program, helpers=helpers, partials=partials, source=source)
