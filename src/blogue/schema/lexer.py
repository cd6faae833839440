"""
Lexical analyzer (tokenizer) for content collection config sources.

Covers the JavaScript/TypeScript subset that shows up in content configs:
imports, `const` bindings, object and array literals, call chains, arrow
functions and type annotations. Operators the parser has no use for are
still tokenized so unsupported expressions can be skipped cleanly.
"""

from dataclasses import dataclass
from enum import Enum, auto

from blogue.schema.errors import SchemaSyntaxError


class TokenType(Enum):
    """Token types for config sources."""

    # Literals
    STRING = auto()
    TEMPLATE = auto()  # `...` without interpolation
    TEMPLATE_EXPR = auto()  # `...${expr}...`
    NUMBER = auto()
    REGEX = auto()  # /pattern/flags

    # Identifiers (keywords are identifiers, the parser checks values)
    IDENTIFIER = auto()

    # Punctuation
    LBRACE = auto()
    RBRACE = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()
    DOT = auto()
    QUESTION = auto()
    EQUALS = auto()
    ARROW = auto()  # =>
    SPREAD = auto()  # ...

    # Everything else (+, ===, &&, <, |, ...)
    OPERATOR = auto()

    # Special
    EOF = auto()


@dataclass
class Token:
    """A token in the config source."""

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    "?": TokenType.QUESTION,
    "=": TokenType.EQUALS,
}

# Longest first so "===" wins over "=="
MULTI_CHAR_OPERATORS = (
    "...",
    "===",
    "!==",
    "**=",
    "??=",
    "&&=",
    "||=",
    ">>>",
    "=>",
    "?.",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "??",
    "**",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "<<",
    ">>",
)

SINGLE_CHAR_OPERATORS = frozenset("+-*/%!<>&|^~@#")

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}

# After these a "/" starts a regular expression, not a division
REGEX_PRECEDING_TYPES = frozenset(
    {
        TokenType.LPAREN,
        TokenType.LBRACKET,
        TokenType.LBRACE,
        TokenType.COMMA,
        TokenType.SEMICOLON,
        TokenType.COLON,
        TokenType.QUESTION,
        TokenType.EQUALS,
        TokenType.ARROW,
        TokenType.SPREAD,
        TokenType.OPERATOR,
    }
)
REGEX_PRECEDING_KEYWORDS = frozenset(
    {"return", "typeof", "case", "in", "of", "new", "delete", "void", "throw", "yield", "await"}
)


class SchemaLexer:
    """Tokenizer for content config sources."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the entire input."""
        while self.pos < len(self.text):
            self._skip_whitespace()
            if self.pos >= len(self.text):
                break

            if not self._try_tokenize_one():
                raise SchemaSyntaxError(
                    f"Unexpected character '{self.text[self.pos]}'", self.line, self.column
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        return self.tokens

    def _try_tokenize_one(self) -> bool:
        """Try to tokenize one token. Returns True if successful."""
        # Comments must come before operators so "//" is not two slashes
        if self._match_comment():
            return True

        if self._match_regex():
            return True

        if self._match_string():
            return True

        if self._match_template():
            return True

        if self._match_number():
            return True

        if self._match_identifier():
            return True

        # Operators before punctuation so "=>" and "..." are not split
        if self._match_operator():
            return True

        if self._match_punctuation():
            return True

        return False

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _advance_char(self) -> str:
        char = self.text[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip_whitespace(self):
        """Skip whitespace but track newlines."""
        while self.pos < len(self.text) and self.text[self.pos] in " \t\r\n\ufeff":
            self._advance_char()

    def _match_comment(self) -> bool:
        """Match comments (// or /* */)."""
        two_char = self.text[self.pos : self.pos + 2]
        if two_char == "//":
            while self.pos < len(self.text) and self.text[self.pos] != "\n":
                self._advance_char()
            return True

        if two_char == "/*":
            start_line, start_col = self.line, self.column
            end = self.text.find("*/", self.pos + 2)
            if end == -1:
                raise SchemaSyntaxError("Unterminated block comment", start_line, start_col)
            while self.pos < end + 2:
                self._advance_char()
            return True

        return False

    def _regex_allowed(self) -> bool:
        """True when a "/" here begins an operand rather than dividing one."""
        if not self.tokens:
            return True
        previous = self.tokens[-1]
        if previous.type == TokenType.IDENTIFIER:
            return previous.value in REGEX_PRECEDING_KEYWORDS
        return previous.type in REGEX_PRECEDING_TYPES

    def _match_regex(self) -> bool:
        """Match a regular expression literal, flags included."""
        if self.text[self.pos] != "/" or not self._regex_allowed():
            return False

        start_line, start_col = self.line, self.column
        value = self._advance_char()
        in_class = False
        while True:
            if self.pos >= len(self.text) or self.text[self.pos] == "\n":
                raise SchemaSyntaxError("Unterminated regular expression", start_line, start_col)
            char = self._advance_char()
            value += char
            if char == "\\":
                if self.pos < len(self.text) and self.text[self.pos] != "\n":
                    value += self._advance_char()
            elif char == "[":
                in_class = True
            elif char == "]":
                in_class = False
            elif char == "/" and not in_class:
                break

        while self.pos < len(self.text) and self.text[self.pos].isalpha():
            value += self._advance_char()

        self.tokens.append(Token(TokenType.REGEX, value, start_line, start_col))
        return True

    def _match_string(self) -> bool:
        """Match single or double quoted string literals."""
        if self.text[self.pos] not in ('"', "'"):
            return False

        quote = self.text[self.pos]
        start_line, start_col = self.line, self.column
        self._advance_char()

        value = ""
        while self.pos < len(self.text) and self.text[self.pos] != quote:
            char = self.text[self.pos]
            if char == "\n":
                raise SchemaSyntaxError("Unterminated string", start_line, start_col)
            if char == "\\":
                self._advance_char()
                if self.pos < len(self.text):
                    escaped = self._advance_char()
                    value += ESCAPES.get(escaped, escaped)
            else:
                value += self._advance_char()

        if self.pos >= len(self.text):
            raise SchemaSyntaxError("Unterminated string", start_line, start_col)

        self._advance_char()  # Skip closing quote
        self.tokens.append(Token(TokenType.STRING, value, start_line, start_col))
        return True

    def _match_template(self) -> bool:
        """Match template literals, tracking ${...} interpolation depth."""
        if self.text[self.pos] != "`":
            return False

        start_line, start_col = self.line, self.column
        self._advance_char()

        value = ""
        interpolated = False
        while self.pos < len(self.text) and self.text[self.pos] != "`":
            if self.text[self.pos] == "\\":
                self._advance_char()
                if self.pos < len(self.text):
                    escaped = self._advance_char()
                    value += ESCAPES.get(escaped, escaped)
            elif self.text[self.pos] == "$" and self._peek(1) == "{":
                interpolated = True
                value += self._consume_interpolation(start_line, start_col)
            else:
                value += self._advance_char()

        if self.pos >= len(self.text):
            raise SchemaSyntaxError("Unterminated template literal", start_line, start_col)

        self._advance_char()  # Skip closing backtick
        token_type = TokenType.TEMPLATE_EXPR if interpolated else TokenType.TEMPLATE
        self.tokens.append(Token(token_type, value, start_line, start_col))
        return True

    def _consume_interpolation(self, start_line: int, start_col: int) -> str:
        """Consume a `${...}` block verbatim, including nested braces."""
        raw = self._advance_char() + self._advance_char()  # "${"
        depth = 1
        while self.pos < len(self.text) and depth > 0:
            char = self.text[self.pos]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            raw += self._advance_char()
        if depth > 0:
            raise SchemaSyntaxError("Unterminated template interpolation", start_line, start_col)
        return raw

    def _match_number(self) -> bool:
        """Match numeric literals (decimal, exponent, hex, numeric separators)."""
        char = self.text[self.pos]
        if not char.isdigit():
            return False

        start_line, start_col = self.line, self.column
        value = ""

        if char == "0" and self._peek(1) in ("x", "X", "o", "O", "b", "B"):
            value += self._advance_char() + self._advance_char()
            while self.pos < len(self.text) and (
                self.text[self.pos].isalnum() or self.text[self.pos] == "_"
            ):
                value += self._advance_char()
            self.tokens.append(Token(TokenType.NUMBER, value, start_line, start_col))
            return True

        while self.pos < len(self.text) and (
            self.text[self.pos].isdigit() or self.text[self.pos] == "_"
        ):
            value += self._advance_char()

        if self._peek() == "." and self._peek(1).isdigit():
            value += self._advance_char()
            while self.pos < len(self.text) and (
                self.text[self.pos].isdigit() or self.text[self.pos] == "_"
            ):
                value += self._advance_char()

        if self._peek() in ("e", "E") and (
            self._peek(1).isdigit() or (self._peek(1) in "+-" and self._peek(2).isdigit())
        ):
            value += self._advance_char()
            if self._peek() in "+-":
                value += self._advance_char()
            while self.pos < len(self.text) and self.text[self.pos].isdigit():
                value += self._advance_char()

        # BigInt suffix
        if self._peek() == "n":
            self._advance_char()

        self.tokens.append(Token(TokenType.NUMBER, value, start_line, start_col))
        return True

    def _match_identifier(self) -> bool:
        """Match identifiers and keywords."""
        char = self.text[self.pos]
        if not (char.isalpha() or char in ("_", "$")):
            return False

        start_line, start_col = self.line, self.column
        value = ""
        while self.pos < len(self.text) and (
            self.text[self.pos].isalnum() or self.text[self.pos] in ("_", "$")
        ):
            value += self._advance_char()

        self.tokens.append(Token(TokenType.IDENTIFIER, value, start_line, start_col))
        return True

    def _match_operator(self) -> bool:
        """Match operators, including the ones with dedicated token types."""
        start_line, start_col = self.line, self.column

        for op in MULTI_CHAR_OPERATORS:
            if self.text.startswith(op, self.pos):
                # "?." followed by a digit is a ternary with a decimal, not optional chaining
                if op == "?." and self._peek(2).isdigit():
                    continue
                for _ in op:
                    self._advance_char()
                if op == "=>":
                    token_type = TokenType.ARROW
                elif op == "...":
                    token_type = TokenType.SPREAD
                elif op == "?.":
                    token_type = TokenType.DOT
                else:
                    token_type = TokenType.OPERATOR
                self.tokens.append(Token(token_type, op, start_line, start_col))
                return True

        char = self.text[self.pos]
        if char in SINGLE_CHAR_OPERATORS:
            self._advance_char()
            self.tokens.append(Token(TokenType.OPERATOR, char, start_line, start_col))
            return True

        return False

    def _match_punctuation(self) -> bool:
        """Match punctuation."""
        char = self.text[self.pos]
        token_type = PUNCTUATION.get(char)
        if token_type is None:
            return False

        self.tokens.append(Token(token_type, char, self.line, self.column))
        self._advance_char()
        return True
