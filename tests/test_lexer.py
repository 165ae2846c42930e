"""Test tag classification, text runs, and token spans."""

import pytest

from tinybars.errors import UnclosedTagError
from tinybars.tokens import TokenType

from .conftest import assert_types, assert_values


class TestText:
    def test_empty_source(self, lex):
        assert lex("") == []

    def test_plain_text(self, lex):
        tokens = lex("hello world")
        assert_types(tokens, [TokenType.TEXT])
        assert tokens[0].value == "hello world"

    def test_single_brace_is_text(self, lex):
        tokens = lex("a { b } c")
        assert_types(tokens, [TokenType.TEXT])

    def test_text_around_tag(self, lex):
        tokens = lex("a{{x}}b")
        assert_types(tokens, [TokenType.TEXT, TokenType.VARIABLE, TokenType.TEXT])
        assert_values(tokens, ["a", "x", "b"])

    def test_adjacent_tags_have_no_empty_text(self, lex):
        tokens = lex("{{a}}{{b}}")
        assert_types(tokens, [TokenType.VARIABLE, TokenType.VARIABLE])


class TestVariables:
    def test_variable(self, lex):
        tokens = lex("{{title}}")
        assert_types(tokens, [TokenType.VARIABLE])
        assert tokens[0].value == "title"

    def test_variable_trimmed(self, lex):
        tokens = lex("{{  user.name  }}")
        assert tokens[0].value == "user.name"

    def test_this_path(self, lex):
        tokens = lex("{{this.name}}")
        assert_types(tokens, [TokenType.VARIABLE])
        assert tokens[0].value == "this.name"

    def test_triple_stash(self, lex):
        tokens = lex("{{{ body }}}")
        assert_types(tokens, [TokenType.RAW_VARIABLE])
        assert tokens[0].value == "body"

    def test_triple_stash_keeps_spaces_inside(self, lex):
        tokens = lex("{{{a b}}}")
        assert_types(tokens, [TokenType.RAW_VARIABLE])
        assert tokens[0].value == "a b"


class TestEmptyTag:
    def test_empty_tag_is_literal_text(self, lex):
        tokens = lex("a{{}}b")
        assert_types(tokens, [TokenType.TEXT, TokenType.TEXT, TokenType.TEXT])
        assert_values(tokens, ["a", "{{}}", "b"])

    def test_whitespace_only_tag_is_literal_empty_tag(self, lex):
        tokens = lex("{{   }}")
        assert_types(tokens, [TokenType.TEXT])
        assert tokens[0].value == "{{}}"
        assert tokens[0].raw == "{{   }}"


class TestBlocks:
    def test_block_start(self, lex):
        tokens = lex("{{#if isLogged}}")
        assert_types(tokens, [TokenType.BLOCK_START])
        assert tokens[0].value == "if"
        assert tokens[0].argument == "isLogged"

    def test_block_start_expression_rejoined(self, lex):
        tokens = lex("{{#each   items \t more   words}}")
        assert tokens[0].value == "each"
        assert tokens[0].argument == "items more words"

    def test_block_start_without_expression(self, lex):
        tokens = lex("{{#if}}")
        assert tokens[0].value == "if"
        assert tokens[0].argument == ""

    def test_block_end(self, lex):
        tokens = lex("{{/ each }}")
        assert_types(tokens, [TokenType.BLOCK_END])
        assert tokens[0].value == "each"

    def test_custom_block_name(self, lex):
        tokens = lex("{{#with user}}")
        assert tokens[0].value == "with"
        assert tokens[0].argument == "user"


class TestPartialsAndHelpers:
    def test_partial(self, lex):
        tokens = lex("{{> header }}")
        assert_types(tokens, [TokenType.PARTIAL])
        assert tokens[0].value == "header"

    def test_partial_without_space(self, lex):
        tokens = lex("{{>footer}}")
        assert tokens[0].value == "footer"

    def test_helper(self, lex):
        tokens = lex('{{format date "short"}}')
        assert_types(tokens, [TokenType.HELPER])
        assert tokens[0].value == "format"
        assert tokens[0].argument == 'date "short"'

    def test_helper_args_trimmed(self, lex):
        tokens = lex("{{upper    name }}")
        assert tokens[0].value == "upper"
        assert tokens[0].argument == "name"

    def test_tab_does_not_make_helper(self, lex):
        tokens = lex("{{a\tb}}")
        assert_types(tokens, [TokenType.VARIABLE])


class TestSpans:
    def test_offsets(self, lex):
        tokens = lex("ab{{x}}c")
        assert [(t.span.start.offset, t.span.end.offset) for t in tokens] == [
            (0, 2),
            (2, 7),
            (7, 8),
        ]

    def test_lossless_coverage(self, lex):
        source = "<h1>{{title}}</h1>\n{{#if a}}{{{raw}}}{{}}{{> p}}{{h x}}{{/if}}tail"
        tokens = lex(source)
        assert "".join(t.raw for t in tokens) == source
        for prev, nxt in zip(tokens, tokens[1:]):
            assert prev.span.end.offset == nxt.span.start.offset

    def test_line_and_column(self, lex):
        tokens = lex("line one\n  {{x}}")
        var = tokens[1]
        assert var.span.start.line == 2
        assert var.span.start.column == 3


class TestUnclosed:
    def test_unclosed_tag(self, lex):
        with pytest.raises(UnclosedTagError, match="unclosed tag") as exc_info:
            lex("ab{{foo")
        assert exc_info.value.offset == 2

    def test_unclosed_triple_stash(self, lex):
        with pytest.raises(UnclosedTagError, match="unclosed triple-stash tag") as exc_info:
            lex("{{{foo}}")
        assert exc_info.value.offset == 0

    def test_unclosed_after_valid_tags(self, lex):
        with pytest.raises(UnclosedTagError) as exc_info:
            lex("{{a}}\n{{b")
        assert exc_info.value.position.line == 2
        assert exc_info.value.position.column == 1
