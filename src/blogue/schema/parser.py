"""
Parser for content collection config sources.

Converts tokens into a ModuleNode: every top-level variable binding with
its initializer expression, the imports, and the `collections` export
mapping. Statements that cannot carry a collection (type aliases,
interfaces, functions, side-effect code) are skipped with balanced
delimiter tracking, so an unbalanced file still fails loudly.
"""

from blogue.schema.ast import (
    ArrayExpression,
    ArrowFunction,
    BooleanLiteral,
    CallExpression,
    ExpressionNode,
    Identifier,
    MemberExpression,
    ModuleNode,
    NullLiteral,
    NumericLiteral,
    ObjectExpression,
    ObjectProperty,
    StringLiteral,
    UnsupportedNode,
    VariableBinding,
)
from blogue.schema.errors import SchemaSyntaxError
from blogue.schema.lexer import SchemaLexer, Token, TokenType

DECLARATION_KEYWORDS = frozenset({"const", "let", "var"})

# Keywords that start a new statement when they open a line at depth 0
STATEMENT_KEYWORDS = frozenset(
    {
        "import",
        "export",
        "const",
        "let",
        "var",
        "function",
        "class",
        "interface",
        "type",
        "enum",
        "declare",
        "async",
    }
)

OPENERS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
}
CLOSERS = frozenset(OPENERS.values())

EXPRESSION_STOPS = frozenset(
    {
        TokenType.COMMA,
        TokenType.SEMICOLON,
        TokenType.RPAREN,
        TokenType.RBRACE,
        TokenType.RBRACKET,
        TokenType.EOF,
    }
)


class SchemaParser:
    """Parser for content collection config sources."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    @classmethod
    def parse(cls, source_text: str) -> ModuleNode:
        """Parse a config source string into a ModuleNode."""
        lexer = SchemaLexer(source_text)
        tokens = lexer.tokenize()
        parser = cls(tokens)
        return parser.parse_module()

    @classmethod
    def parse_expression_text(cls, expression_text: str) -> ExpressionNode:
        """Parse a single expression, e.g. `z.string().optional()`."""
        tokens = SchemaLexer(expression_text).tokenize()
        parser = cls(tokens)
        expression = parser._parse_expression()
        if not parser._is_at_end():
            raise SchemaSyntaxError(
                f"Unexpected token after expression: {parser._current().value}",
                parser._current().line,
                parser._current().column,
            )
        return expression

    def parse_module(self) -> ModuleNode:
        """Parse the complete module."""
        module = ModuleNode()

        while not self._is_at_end():
            if self._check(TokenType.SEMICOLON):
                self._advance()
                continue

            if self._check_keyword("import") and not self._peek_is(1, TokenType.LPAREN):
                self._parse_import(module)
            elif self._check_keyword("export"):
                self._parse_export(module)
            elif self._check_any_keyword(DECLARATION_KEYWORDS):
                self._parse_declarations(module, exported=False)
            else:
                self._skip_statement()

        # `const collections = {...}; export { collections };`
        if module.collection_exports is None:
            local = next(
                (src for name, src in module.export_names.items() if name == "collections"),
                None,
            )
            binding = module.bindings.get(local) if local else None
            if binding is not None and isinstance(binding.init, ObjectExpression):
                module.collection_exports = self._collection_mapping(binding.init)

        return module

    # --- Statements ---

    def _parse_import(self, module: ModuleNode) -> None:
        """Parse `import ... from '...'`, recording local names."""
        self._advance()  # import

        # `import type {...}` carries no runtime bindings
        if self._check_keyword("type") and not self._peek_is(1, TokenType.COMMA):
            if not self._peek_keyword(1, "from"):
                self._skip_statement()
                return

        # Side-effect import: import './styles.css'
        if self._check(TokenType.STRING):
            self._advance()
            self._consume_optional(TokenType.SEMICOLON)
            return

        names: list[tuple[str, str]] = []  # (local, imported)
        while not self._is_at_end() and not self._check_keyword("from"):
            if self._check(TokenType.LBRACE):
                self._advance()
                while not self._check(TokenType.RBRACE) and not self._is_at_end():
                    if self._check_keyword("type") and self._peek_is(1, TokenType.IDENTIFIER):
                        self._advance()
                    imported = self._expect(TokenType.IDENTIFIER, "Expected import name").value
                    local = imported
                    if self._check_keyword("as"):
                        self._advance()
                        local = self._expect(TokenType.IDENTIFIER, "Expected alias after 'as'").value
                    names.append((local, imported))
                    if not self._consume_optional(TokenType.COMMA):
                        break
                self._expect(TokenType.RBRACE, "Expected '}' in import list")
            elif self._check(TokenType.OPERATOR) and self._current().value == "*":
                self._advance()
                if self._check_keyword("as"):
                    self._advance()
                local = self._expect(TokenType.IDENTIFIER, "Expected namespace name").value
                names.append((local, "*"))
            elif self._check(TokenType.IDENTIFIER):
                local = self._advance().value
                names.append((local, "default"))
            elif self._check(TokenType.COMMA):
                self._advance()
            else:
                raise SchemaSyntaxError(
                    f"Unexpected token in import: {self._current().value}",
                    self._current().line,
                    self._current().column,
                )

        self._expect_keyword("from")
        source = self._expect(TokenType.STRING, "Expected module path after 'from'").value
        for local, imported in names:
            module.imports[local] = (source, imported)
        self._consume_optional(TokenType.SEMICOLON)

    def _parse_export(self, module: ModuleNode) -> None:
        """Parse an export statement."""
        self._advance()  # export

        if self._check_any_keyword(DECLARATION_KEYWORDS):
            self._parse_declarations(module, exported=True)
            return

        # export { a, b as c } [from '...']
        if self._check(TokenType.LBRACE):
            self._advance()
            exported: dict[str, str] = {}
            while not self._check(TokenType.RBRACE) and not self._is_at_end():
                if self._check_keyword("type") and self._peek_is(1, TokenType.IDENTIFIER):
                    self._advance()
                local = self._expect(TokenType.IDENTIFIER, "Expected export name").value
                name = local
                if self._check_keyword("as"):
                    self._advance()
                    name = self._expect(TokenType.IDENTIFIER, "Expected alias after 'as'").value
                exported[name] = local
                if not self._consume_optional(TokenType.COMMA):
                    break
            self._expect(TokenType.RBRACE, "Expected '}' in export list")
            if self._check_keyword("from"):
                # Re-exports do not bind anything in this module
                self._advance()
                self._expect(TokenType.STRING, "Expected module path after 'from'")
            else:
                module.export_names.update(exported)
            self._consume_optional(TokenType.SEMICOLON)
            return

        # export default ..., export function ..., export type ...
        self._skip_statement()

    def _parse_declarations(self, module: ModuleNode, exported: bool) -> None:
        """Parse `const a = ..., b = ...`."""
        self._advance()  # const / let / var

        while True:
            start = self._current()
            name: str | None = None
            if self._check(TokenType.IDENTIFIER):
                name = self._advance().value
            elif self._check(TokenType.LBRACE) or self._check(TokenType.LBRACKET):
                # Destructuring declarations never define a collection
                self._skip_balanced()
            else:
                raise SchemaSyntaxError(
                    f"Expected binding name, got {start.value!r}", start.line, start.column
                )

            # Definite assignment (`let x!: T`) and type annotation
            if self._check(TokenType.OPERATOR) and self._current().value == "!":
                self._advance()
            if self._check(TokenType.COLON):
                self._advance()
                self._skip_type({TokenType.EQUALS})

            init: ExpressionNode | None = None
            if self._check(TokenType.EQUALS):
                self._advance()
                init = self._parse_expression()

            if name is not None:
                module.bindings[name] = VariableBinding(
                    name=name, init=init, exported=exported, line=start.line
                )
                if name == "collections" and exported and isinstance(init, ObjectExpression):
                    module.collection_exports = self._collection_mapping(init)

            if not self._consume_optional(TokenType.COMMA):
                break

        self._consume_optional(TokenType.SEMICOLON)

    @staticmethod
    def _collection_mapping(node: ObjectExpression) -> dict[str, str]:
        """Map public collection name -> binding name from `{ blog, news: newsCollection }`."""
        mapping: dict[str, str] = {}
        for prop in node.properties:
            if isinstance(prop.value, Identifier):
                mapping[prop.key] = prop.value.name
            else:
                mapping[prop.key] = prop.key
        return mapping

    def _skip_statement(self) -> None:
        """Skip one statement, keeping delimiters balanced."""
        start_line = self._current().line
        first = True
        while not self._is_at_end():
            token = self._current()
            if token.type == TokenType.SEMICOLON:
                self._advance()
                return
            if (
                not first
                and token.type == TokenType.IDENTIFIER
                and token.value in STATEMENT_KEYWORDS
                and token.line > start_line
                and self._starts_line(self.pos)
            ):
                return
            if token.type in OPENERS:
                self._skip_balanced()
            elif token.type in CLOSERS:
                raise SchemaSyntaxError(
                    f"Unbalanced delimiter '{token.value}'", token.line, token.column
                )
            else:
                self._advance()
            first = False

    # --- Expressions ---

    def _parse_expression(self) -> ExpressionNode:
        """Parse an expression; compound expressions become UnsupportedNode."""
        start = self._current()

        if self._is_arrow_function():
            expression = self._parse_arrow_function()
        else:
            expression = self._parse_postfix_expression(self._parse_primary_expression())

        # TypeScript `as const`, `as Foo`, `satisfies Foo`
        while self._check_keyword("as") or self._check_keyword("satisfies"):
            self._advance()
            self._skip_type(set())

        if not self._at_expression_end():
            # Binary, ternary, assignment: not part of any schema we model
            self._skip_expression_rest()
            return UnsupportedNode(kind="CompoundExpression", text=start.value)

        return expression

    def _at_expression_end(self) -> bool:
        token = self._current()
        if token.type in EXPRESSION_STOPS:
            return True
        # Automatic semicolon insertion before a new statement
        return (
            token.type == TokenType.IDENTIFIER
            and token.value in STATEMENT_KEYWORDS
            and self._starts_line(self.pos)
        )

    def _skip_expression_rest(self) -> None:
        while not self._at_expression_end():
            if self._current().type in OPENERS:
                self._skip_balanced()
            else:
                self._advance()

    def _parse_primary_expression(self) -> ExpressionNode:
        """Parse primary expression (literals, identifiers, object/array literals)."""
        token = self._current()

        if self._check(TokenType.STRING) or self._check(TokenType.TEMPLATE):
            self._advance()
            return StringLiteral(value=token.value)

        if self._check(TokenType.TEMPLATE_EXPR):
            self._advance()
            return UnsupportedNode(kind="TemplateLiteral", text=token.value)

        if self._check(TokenType.REGEX):
            self._advance()
            return UnsupportedNode(kind="RegExpLiteral", text=token.value)

        if self._check(TokenType.NUMBER):
            self._advance()
            return NumericLiteral(value=self._parse_number(token))

        if self._check(TokenType.OPERATOR) and token.value in ("-", "+"):
            if self._peek_is(1, TokenType.NUMBER):
                self._advance()
                number = self._parse_number(self._advance())
                return NumericLiteral(value=-number if token.value == "-" else number)

        if self._check(TokenType.OPERATOR) and token.value in ("!", "-", "+", "~"):
            self._advance()
            self._parse_postfix_expression(self._parse_primary_expression())
            return UnsupportedNode(kind="UnaryExpression", text=token.value)

        if self._check(TokenType.IDENTIFIER):
            if token.value in ("true", "false"):
                self._advance()
                return BooleanLiteral(value=token.value == "true")
            if token.value in ("null", "undefined"):
                self._advance()
                return NullLiteral()
            if token.value in ("new", "typeof", "await", "void"):
                self._advance()
                self._parse_postfix_expression(self._parse_primary_expression())
                return UnsupportedNode(kind=f"{token.value.capitalize()}Expression")
            if token.value == "function":
                self._advance()
                if self._check(TokenType.IDENTIFIER):
                    self._advance()
                self._skip_balanced()  # params
                if self._check(TokenType.COLON):
                    self._advance()
                    self._skip_type({TokenType.LBRACE})
                self._skip_balanced()  # body
                return UnsupportedNode(kind="FunctionExpression")
            self._advance()
            return Identifier(name=token.value)

        if self._check(TokenType.LBRACE):
            return self._parse_object_expression()

        if self._check(TokenType.LBRACKET):
            return self._parse_array_expression()

        if self._check(TokenType.LPAREN):
            self._advance()
            expression = self._parse_expression()
            self._expect(TokenType.RPAREN, "Expected ')' after expression")
            return expression

        raise SchemaSyntaxError(f"Unexpected token: {token.value!r}", token.line, token.column)

    def _parse_postfix_expression(self, expression: ExpressionNode) -> ExpressionNode:
        """Parse member access, calls and index access following a primary."""
        while True:
            if self._check(TokenType.DOT):
                self._advance()
                name = self._expect(TokenType.IDENTIFIER, "Expected property name after '.'")
                expression = MemberExpression(object=expression, property=name.value)
            elif self._check(TokenType.LPAREN):
                self._advance()
                arguments = self._parse_arguments(TokenType.RPAREN)
                self._expect(TokenType.RPAREN, "Expected ')' after function arguments")
                expression = CallExpression(callee=expression, arguments=arguments)
            elif self._check(TokenType.LBRACKET):
                self._advance()
                index = self._parse_expression()
                self._expect(TokenType.RBRACKET, "Expected ']' after index")
                if isinstance(index, (StringLiteral, NumericLiteral)):
                    expression = MemberExpression(
                        object=expression, property=str(index.value), computed=True
                    )
                else:
                    expression = UnsupportedNode(kind="ComputedMemberExpression")
            elif (
                self._check(TokenType.OPERATOR)
                and self._current().value == "!"
                and self._peek_type(1) in (EXPRESSION_STOPS | {TokenType.DOT, TokenType.LPAREN})
            ):
                # Non-null assertion
                self._advance()
            else:
                return expression

    def _parse_arguments(self, closer: TokenType) -> list[ExpressionNode]:
        """Parse comma separated expressions up to `closer`; spreads are dropped."""
        arguments: list[ExpressionNode] = []
        while not self._check(closer) and not self._is_at_end():
            if self._check(TokenType.SPREAD):
                self._advance()
                self._parse_expression()
            else:
                arguments.append(self._parse_expression())
            if not self._consume_optional(TokenType.COMMA):
                break
        return arguments

    def _parse_object_expression(self) -> ObjectExpression:
        """Parse `{ key: value, shorthand, 'quoted': value }`."""
        self._expect(TokenType.LBRACE, "Expected '{'")
        properties: list[ObjectProperty] = []

        while not self._check(TokenType.RBRACE) and not self._is_at_end():
            if self._check(TokenType.SPREAD):
                self._advance()
                self._parse_expression()
            else:
                prop = self._parse_object_property()
                if prop is not None:
                    properties.append(prop)

            if self._consume_optional(TokenType.COMMA):
                continue
            if not self._check(TokenType.RBRACE):
                raise SchemaSyntaxError(
                    f"Expected ',' or '}}' in object literal, got {self._current().value!r}",
                    self._current().line,
                    self._current().column,
                )

        self._expect(TokenType.RBRACE, "Expected '}' to close object literal")
        return ObjectExpression(properties=properties)

    def _parse_object_property(self) -> ObjectProperty | None:
        token = self._current()
        key: str | None
        if self._check(TokenType.IDENTIFIER) or self._check(TokenType.STRING):
            key = self._advance().value
        elif self._check(TokenType.NUMBER):
            key = str(self._parse_number(self._advance()))
        elif self._check(TokenType.LBRACKET):
            self._advance()
            computed = self._parse_expression()
            self._expect(TokenType.RBRACKET, "Expected ']' after computed key")
            key = str(computed.value) if isinstance(computed, (StringLiteral, NumericLiteral)) else None
        else:
            raise SchemaSyntaxError(
                f"Unexpected token in object literal: {token.value!r}", token.line, token.column
            )

        if self._check(TokenType.COLON):
            self._advance()
            value = self._parse_expression()
        elif self._check(TokenType.LPAREN):
            # Method shorthand: key() { ... }
            self._skip_balanced()
            if self._check(TokenType.COLON):
                self._advance()
                self._skip_type({TokenType.LBRACE})
            self._skip_balanced()
            value = UnsupportedNode(kind="ObjectMethod", text=key or "")
        elif token.type == TokenType.IDENTIFIER:
            return ObjectProperty(key=token.value, value=Identifier(name=token.value), shorthand=True)
        else:
            raise SchemaSyntaxError(
                f"Expected ':' after property key {token.value!r}", token.line, token.column
            )

        if key is None:
            return None
        return ObjectProperty(key=key, value=value)

    def _parse_array_expression(self) -> ArrayExpression:
        self._expect(TokenType.LBRACKET, "Expected '['")
        elements: list[ExpressionNode] = []
        while not self._check(TokenType.RBRACKET) and not self._is_at_end():
            if self._check(TokenType.COMMA):
                # Hole: [a, , b]
                self._advance()
                elements.append(NullLiteral())
                continue
            if self._check(TokenType.SPREAD):
                self._advance()
                self._parse_expression()
            else:
                elements.append(self._parse_expression())
            if not self._consume_optional(TokenType.COMMA):
                break
        self._expect(TokenType.RBRACKET, "Expected ']' to close array literal")
        return ArrayExpression(elements=elements)

    # --- Arrow functions ---

    def _is_arrow_function(self) -> bool:
        """Look ahead for `x =>`, `(...) =>`, `(...): T =>` or `async (...) =>`."""
        offset = 0
        if self._check_keyword("async") and self._peek_type(1) in (
            TokenType.LPAREN,
            TokenType.IDENTIFIER,
        ):
            offset = 1

        first = self._peek_type(offset)
        if first == TokenType.IDENTIFIER:
            return self._peek_type(offset + 1) == TokenType.ARROW
        if first != TokenType.LPAREN:
            return False

        close = self._find_matching(self.pos + offset)
        if close is None:
            return False
        after = self.tokens[close + 1].type if close + 1 < len(self.tokens) else TokenType.EOF
        if after == TokenType.ARROW:
            return True
        if after == TokenType.COLON:
            # Return type annotation, the arrow follows the type
            index = close + 2
            depth = 0
            while index < len(self.tokens):
                token = self.tokens[index]
                if token.type in OPENERS:
                    depth += 1
                elif token.type in CLOSERS:
                    if depth == 0:
                        return False
                    depth -= 1
                elif depth == 0 and token.type == TokenType.ARROW:
                    return True
                elif depth == 0 and token.type in (TokenType.COMMA, TokenType.SEMICOLON):
                    return False
                index += 1
        return False

    def _parse_arrow_function(self) -> ArrowFunction:
        if self._check_keyword("async"):
            self._advance()

        params: dict[str, str | None] = {}
        if self._check(TokenType.IDENTIFIER):
            params[self._advance().value] = None
        else:
            self._expect(TokenType.LPAREN, "Expected '(' for arrow function parameters")
            first = True
            while not self._check(TokenType.RPAREN) and not self._is_at_end():
                self._parse_binding_pattern(params, destructure_first=first)
                first = False
                if self._check(TokenType.QUESTION):
                    self._advance()
                if self._check(TokenType.COLON):
                    self._advance()
                    self._skip_type({TokenType.EQUALS})
                if self._check(TokenType.EQUALS):
                    self._advance()
                    self._parse_expression()
                if not self._consume_optional(TokenType.COMMA):
                    break
            self._expect(TokenType.RPAREN, "Expected ')' after arrow function parameters")
            if self._check(TokenType.COLON):
                self._advance()
                self._skip_type({TokenType.ARROW})

        self._expect(TokenType.ARROW, "Expected '=>'")

        if self._check(TokenType.LBRACE):
            body = self._parse_block_body()
        else:
            body = self._parse_expression()
        return ArrowFunction(params=params, body=body)

    def _parse_binding_pattern(self, params: dict[str, str | None], destructure_first: bool) -> None:
        """Parse one parameter: `name`, `...rest` or `{ key, key: alias, key = d }`."""
        if self._check(TokenType.SPREAD):
            self._advance()
        if self._check(TokenType.IDENTIFIER):
            params[self._advance().value] = None
            return
        if self._check(TokenType.LBRACKET):
            self._skip_balanced()
            return

        self._expect(TokenType.LBRACE, "Expected parameter name or pattern")
        while not self._check(TokenType.RBRACE) and not self._is_at_end():
            if self._check(TokenType.SPREAD):
                self._advance()
                self._expect(TokenType.IDENTIFIER, "Expected rest name")
            else:
                key = self._expect(TokenType.IDENTIFIER, "Expected destructured name").value
                local = key
                if self._check(TokenType.COLON):
                    self._advance()
                    if self._check(TokenType.IDENTIFIER):
                        local = self._advance().value
                    else:
                        self._skip_balanced()
                        local = None
                if self._check(TokenType.EQUALS):
                    self._advance()
                    self._parse_expression()
                # Only the first argument carries the schema helpers
                if local is not None and destructure_first:
                    params[local] = key
            if not self._consume_optional(TokenType.COMMA):
                break
        self._expect(TokenType.RBRACE, "Expected '}' to close parameter pattern")

    def _parse_block_body(self) -> ExpressionNode:
        """Parse `{ ...; return expr; }`, keeping the first top-level return."""
        open_token = self._expect(TokenType.LBRACE, "Expected '{'")
        result: ExpressionNode | None = None
        while not self._check(TokenType.RBRACE):
            if self._is_at_end():
                raise SchemaSyntaxError("Unterminated block", open_token.line, open_token.column)
            if self._check_keyword("return") and result is None:
                self._advance()
                result = self._parse_expression()
            elif self._current().type in OPENERS:
                self._skip_balanced()
            else:
                self._advance()
        self._advance()  # }
        return result if result is not None else UnsupportedNode(kind="BlockStatement")

    # --- Types ---

    def _skip_type(self, stops: set[TokenType]) -> None:
        """Skip a TypeScript type annotation at depth 0 until one of `stops`."""
        angle_depth = 0
        while not self._is_at_end():
            token = self._current()
            if angle_depth == 0 and (
                token.type in stops or token.type in EXPRESSION_STOPS or token.type == TokenType.ARROW
            ):
                if token.type == TokenType.ARROW and TokenType.ARROW not in stops:
                    # Function type `(a: A) => B`
                    self._advance()
                    continue
                return
            if angle_depth == 0 and self._at_expression_end():
                return
            if token.type in OPENERS:
                self._skip_balanced()
                continue
            if token.type == TokenType.OPERATOR and token.value == "<":
                angle_depth += 1
            elif token.type == TokenType.OPERATOR and token.value in (">", ">>", ">>>"):
                angle_depth = max(0, angle_depth - len(token.value))
            elif token.type == TokenType.EQUALS and angle_depth == 0:
                return
            self._advance()

    # --- Helpers ---

    def _skip_balanced(self) -> None:
        """Skip from an opening delimiter to its matching closer."""
        open_token = self._current()
        if open_token.type not in OPENERS:
            self._advance()
            return
        stack = [OPENERS[open_token.type]]
        self._advance()
        while stack:
            token = self._current()
            if token.type == TokenType.EOF:
                raise SchemaSyntaxError(
                    f"Unbalanced delimiter '{open_token.value}'", open_token.line, open_token.column
                )
            if token.type in OPENERS:
                stack.append(OPENERS[token.type])
            elif token.type in CLOSERS:
                if token.type != stack[-1]:
                    raise SchemaSyntaxError(
                        f"Mismatched delimiter '{token.value}'", token.line, token.column
                    )
                stack.pop()
            self._advance()

    def _find_matching(self, index: int) -> int | None:
        """Index of the closer matching the opener at `index`, without consuming."""
        stack: list[TokenType] = []
        while index < len(self.tokens):
            token = self.tokens[index]
            if token.type in OPENERS:
                stack.append(OPENERS[token.type])
            elif token.type in CLOSERS:
                if not stack or token.type != stack[-1]:
                    return None
                stack.pop()
                if not stack:
                    return index
            elif token.type == TokenType.EOF:
                return None
            index += 1
        return None

    def _starts_line(self, index: int) -> bool:
        return index == 0 or self.tokens[index - 1].line < self.tokens[index].line

    @staticmethod
    def _parse_number(token: Token) -> int | float:
        text = token.value.replace("_", "")
        try:
            if text[:2].lower() in ("0x", "0o", "0b"):
                return int(text, 0)
            if any(c in text for c in ".eE"):
                return float(text)
            return int(text)
        except ValueError as e:
            raise SchemaSyntaxError(f"Invalid number {token.value!r}", token.line, token.column) from e

    def _current(self) -> Token:
        """Get the current token."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # Return EOF

    def _advance(self) -> Token:
        """Advance to the next token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _peek_type(self, offset: int) -> TokenType:
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index].type
        return TokenType.EOF

    def _peek_is(self, offset: int, token_type: TokenType) -> bool:
        return self._peek_type(offset) == token_type

    def _peek_keyword(self, offset: int, value: str) -> bool:
        index = self.pos + offset
        return (
            index < len(self.tokens)
            and self.tokens[index].type == TokenType.IDENTIFIER
            and self.tokens[index].value == value
        )

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches the given type."""
        if self._is_at_end():
            return token_type == TokenType.EOF
        return self._current().type == token_type

    def _check_keyword(self, value: str) -> bool:
        return self._check(TokenType.IDENTIFIER) and self._current().value == value

    def _check_any_keyword(self, values: frozenset[str]) -> bool:
        return self._check(TokenType.IDENTIFIER) and self._current().value in values

    def _consume_optional(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, message: str) -> Token:
        if not self._check(token_type):
            token = self._current()
            raise SchemaSyntaxError(f"{message}, got {token.value!r}", token.line, token.column)
        return self._advance()

    def _expect_keyword(self, value: str) -> Token:
        if not self._check_keyword(value):
            token = self._current()
            raise SchemaSyntaxError(
                f"Expected '{value}', got {token.value!r}", token.line, token.column
            )
        return self._advance()

    def _is_at_end(self) -> bool:
        """Check if we're at the end of tokens."""
        return self._current().type == TokenType.EOF
