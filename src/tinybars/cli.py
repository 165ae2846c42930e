"""Command-line interface for tinybars."""

from __future__ import annotations

import argparse
import json
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tinybars.errors import ParseError, RenderError, UnclosedTagError


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    template_file: Path
    output_file: Path | None
    context: dict[str, Any]
    partials: dict[str, Path]
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="tinybars",
        description="Render a Handlebars-style template",
    )
    p.add_argument("template", help="Template file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-c",
        "--context",
        metavar="FILE",
        help="JSON file holding the context object",
    )
    p.add_argument(
        "-s",
        "--set",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a string context value (repeatable)",
    )
    p.add_argument(
        "-p",
        "--partial",
        action="append",
        default=[],
        metavar="NAME=FILE",
        help="Register a partial template (repeatable)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover tinybars.toml)",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-render")
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def parse_assignment(s: str, what: str = "set") -> tuple[str, str]:
    """Parse a NAME=VALUE string into (name, value)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid {what} format (expected NAME=VALUE): {s}")
    name, _, value = s.partition("=")
    return name, value


def load_config(config_path: Path | None, template_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else template_dir / "tinybars.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def load_context_file(path: Path) -> dict[str, Any]:
    """Load a JSON context file; the top level must be an object."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise argparse.ArgumentTypeError(f"cannot read context file {path}: {exc}") from None
    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError(f"context file {path} must hold a JSON object")
    return data


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < context file < CLI flags.
    """
    template_file = Path(args.template)
    template_dir = template_file.parent
    if not template_dir.parts:
        template_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, template_dir)
    config_dir = config_path.parent if config_path is not None else template_dir

    # Context: config < context file < CLI
    context: dict[str, Any] = {}
    cfg_context = config.get("context")
    if isinstance(cfg_context, dict):
        context.update(cfg_context)
    if args.context:
        context.update(load_context_file(Path(args.context)))
    for raw in args.set:
        name, value = parse_assignment(raw, "set")
        context[name] = value

    # Partials: config < CLI
    partials: dict[str, Path] = {}
    cfg_partials = config.get("partials")
    if isinstance(cfg_partials, dict):
        for name, path in cfg_partials.items():
            partials[str(name)] = config_dir / str(path)
    for raw in args.partial:
        name, path = parse_assignment(raw, "partial")
        partials[name] = Path(path)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        template_file=template_file,
        output_file=output_file,
        context=context,
        partials=partials,
        watch=args.watch,
        debug=args.debug,
    )


def render_file(options: CliOptions) -> str:
    """Read, compile, and render a template file."""
    from tinybars import compile
    from tinybars.debug import dump_ast
    from tinybars.registry import PartialRegistry

    partials = PartialRegistry()
    for name, path in options.partials.items():
        partials.register(name, path.read_text(encoding="utf-8"))

    source = options.template_file.read_text(encoding="utf-8")
    template = compile(source, str(options.template_file), partials=partials)

    if options.debug:
        dump_ast(template.program, file=sys.stderr)

    return template(options.context)


def _write(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def _watched_files(options: CliOptions) -> list[Path]:
    return [options.template_file, *options.partials.values()]


def watch_loop(options: CliOptions) -> None:
    """Poll the template and its partials for changes, re-render on each modification."""
    last_mtimes: dict[Path, float] = {}
    print(f"Watching {options.template_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtimes = {p: p.stat().st_mtime for p in _watched_files(options)}
            except OSError:
                time.sleep(0.5)
                continue
            if mtimes != last_mtimes:
                last_mtimes = mtimes
                try:
                    _write(options, render_file(options))
                    print(f"Rendered {options.template_file}", file=sys.stderr)
                except (UnclosedTagError, ParseError, RenderError) as exc:
                    print(str(exc), file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        text = render_file(options)
    except (UnclosedTagError, ParseError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except RenderError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    _write(options, text)
    return 0


def run() -> None:
    """Console-script wrapper around main()."""
    sys.exit(main())
