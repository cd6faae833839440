"""Tests for blogue.schema.lexer -- tokenizing content config sources."""

import pytest

from blogue.schema.errors import SchemaSyntaxError
from blogue.schema.lexer import SchemaLexer, TokenType


def _types(text: str) -> list[TokenType]:
    return [t.type for t in SchemaLexer(text).tokenize()]


def _values(text: str) -> list[str]:
    return [t.value for t in SchemaLexer(text).tokenize() if t.type != TokenType.EOF]


class TestLiterals:
    def test_double_and_single_quoted_strings(self):
        tokens = SchemaLexer("\"blog\" 'posts'").tokenize()
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "blog"
        assert tokens[1].value == "posts"

    def test_string_escapes(self):
        tokens = SchemaLexer(r"'it\'s\n'").tokenize()
        assert tokens[0].value == "it's\n"

    def test_numbers(self):
        assert _values("42 3.14 1e3 0xFF 1_000") == ["42", "3.14", "1e3", "0xFF", "1_000"]

    def test_bigint_suffix_is_dropped(self):
        assert _values("10n") == ["10"]

    def test_plain_template_literal(self):
        tokens = SchemaLexer("`hello`").tokenize()
        assert tokens[0].type == TokenType.TEMPLATE
        assert tokens[0].value == "hello"

    def test_interpolated_template_literal(self):
        tokens = SchemaLexer("`a${ {b: 1}.b }c`").tokenize()
        assert tokens[0].type == TokenType.TEMPLATE_EXPR
        assert tokens[1].type == TokenType.EOF


class TestRegexLiterals:
    def test_regex_argument(self):
        tokens = SchemaLexer("regex(/^[a-z0-9-]+$/)").tokenize()
        assert tokens[2].type == TokenType.REGEX
        assert tokens[2].value == "/^[a-z0-9-]+$/"
        assert tokens[3].type == TokenType.RPAREN

    def test_quote_inside_regex_is_not_a_string(self):
        tokens = SchemaLexer('regex(/^[^"]+$/)').tokenize()
        assert tokens[2].type == TokenType.REGEX
        assert tokens[2].value == '/^[^"]+$/'

    def test_slash_inside_class_and_flags(self):
        assert _values(r"(/[/\]]+\//gi)") == ["(", r"/[/\]]+\//gi", ")"]

    def test_division_after_identifier(self):
        tokens = SchemaLexer("a / b / c").tokenize()
        assert [t.type for t in tokens[:5]] == [
            TokenType.IDENTIFIER,
            TokenType.OPERATOR,
            TokenType.IDENTIFIER,
            TokenType.OPERATOR,
            TokenType.IDENTIFIER,
        ]

    def test_division_after_closing_paren(self):
        assert _types("(x) / 2")[3] == TokenType.OPERATOR

    def test_regex_after_return_keyword(self):
        assert _types("return /a/")[1] == TokenType.REGEX


class TestPunctuationAndOperators:
    def test_arrow_and_spread(self):
        assert _types("=> ...")[:2] == [TokenType.ARROW, TokenType.SPREAD]

    def test_strict_equality_is_one_operator(self):
        tokens = SchemaLexer("a === b").tokenize()
        assert tokens[1].type == TokenType.OPERATOR
        assert tokens[1].value == "==="

    def test_assignment_is_equals_punctuation(self):
        assert _types("a = b")[1] == TokenType.EQUALS

    def test_optional_chaining_is_a_dot(self):
        tokens = SchemaLexer("a?.b").tokenize()
        assert tokens[1].type == TokenType.DOT

    def test_ternary_with_decimal_is_not_optional_chaining(self):
        tokens = SchemaLexer("a?.5:1").tokenize()
        assert tokens[1].type == TokenType.QUESTION

    def test_object_literal(self):
        assert _types("{ a: 1, }") == [
            TokenType.LBRACE,
            TokenType.IDENTIFIER,
            TokenType.COLON,
            TokenType.NUMBER,
            TokenType.COMMA,
            TokenType.RBRACE,
            TokenType.EOF,
        ]


class TestCommentsAndPositions:
    def test_line_and_block_comments_are_skipped(self):
        assert _values("a // note\n/* block\n comment */ b") == ["a", "b"]

    def test_positions_track_lines(self):
        tokens = SchemaLexer("a\n  b").tokenize()
        assert (tokens[1].line, tokens[1].column) == (2, 3)

    def test_byte_order_mark_is_whitespace(self):
        assert _values("\ufeffconst") == ["const"]


class TestErrors:
    def test_unterminated_string(self):
        with pytest.raises(SchemaSyntaxError, match="Unterminated string"):
            SchemaLexer("'abc").tokenize()

    def test_unterminated_block_comment(self):
        with pytest.raises(SchemaSyntaxError, match="Unterminated block comment"):
            SchemaLexer("/* never closed").tokenize()

    def test_unterminated_regex(self):
        with pytest.raises(SchemaSyntaxError, match="Unterminated regular expression"):
            SchemaLexer("regex(/abc\n)").tokenize()

    def test_unexpected_character(self):
        with pytest.raises(SchemaSyntaxError) as exc_info:
            SchemaLexer("a \\ b").tokenize()
        assert exc_info.value.line == 1
        assert exc_info.value.column == 3
