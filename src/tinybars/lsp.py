"""Minimal LSP server for tinybars templates — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from tinybars import __version__
from tinybars.errors import ParseError, UnclosedTagError
from tinybars.parser import parse

server = LanguageServer(
    "tinybars-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _diagnostic(start: Position, end: Position, message: str) -> Diagnostic:
    return Diagnostic(
        range=Range(start=start, end=end),
        message=message,
        severity=DiagnosticSeverity.Error,
        source="tinybars",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex and parse the template and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        parse(source, filename)
    except UnclosedTagError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(
            _diagnostic(
                Position(line=line, character=col),
                Position(line=line, character=col + exc.width),
                exc.message,
            )
        )
    except ParseError as exc:
        diagnostics.append(
            _diagnostic(
                Position(line=exc.span.start.line - 1, character=exc.span.start.column - 1),
                Position(line=exc.span.end.line - 1, character=exc.span.end.column - 1),
                exc.message,
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
