"""
Abstract Syntax Tree (AST) definitions for content config sources.

Only the node kinds a schema declaration is built from get their own class.
Anything else the parser meets inside an expression becomes an
UnsupportedNode, which the evaluator drops.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ExpressionNode:
    """Base class for expression nodes in the AST."""

    pass


@dataclass
class Identifier(ExpressionNode):
    name: str


@dataclass
class StringLiteral(ExpressionNode):
    value: str


@dataclass
class NumericLiteral(ExpressionNode):
    value: int | float


@dataclass
class BooleanLiteral(ExpressionNode):
    value: bool


@dataclass
class NullLiteral(ExpressionNode):
    """`null` or `undefined`."""

    pass


@dataclass
class ObjectProperty:
    """`key: value` (or shorthand `key`) inside an object literal."""

    key: str
    value: ExpressionNode
    shorthand: bool = False


@dataclass
class ObjectExpression(ExpressionNode):
    properties: list[ObjectProperty] = field(default_factory=list)

    def get(self, key: str) -> ExpressionNode | None:
        """Return the value of the last property named `key`, as JS would."""
        found = None
        for prop in self.properties:
            if prop.key == key:
                found = prop.value
        return found


@dataclass
class ArrayExpression(ExpressionNode):
    elements: list[ExpressionNode] = field(default_factory=list)


@dataclass
class MemberExpression(ExpressionNode):
    """Property access (e.g., 'z.string', 'z.coerce.date')."""

    object: ExpressionNode
    property: str
    computed: bool = False


@dataclass
class CallExpression(ExpressionNode):
    """Function call (e.g., 'z.object({...})', 'defineCollection({...})')."""

    callee: ExpressionNode
    arguments: list[ExpressionNode] = field(default_factory=list)


@dataclass
class ArrowFunction(ExpressionNode):
    """Arrow function (e.g., '({ image }) => z.object({...})').

    `params` holds every bound name, destructured names included:
    `({ image: img })` binds "img" to the "image" key of the first argument.
    """

    params: dict[str, str | None]  # local name -> destructured key (None = whole argument)
    body: ExpressionNode


@dataclass
class UnsupportedNode(ExpressionNode):
    """Expression the parser recognized but does not model."""

    kind: str
    text: str = ""


@dataclass
class VariableBinding:
    """A top-level `const|let|var name = init` binding."""

    name: str
    init: ExpressionNode | None
    exported: bool = False
    line: int = 0


@dataclass
class ModuleNode:
    """Complete config module AST (only the parts schema analysis uses)."""

    bindings: dict[str, VariableBinding] = field(default_factory=dict)
    # `export const collections = { name: binding }`; None when absent
    collection_exports: dict[str, str] | None = None
    imports: dict[str, tuple[str, str]] = field(default_factory=dict)  # local -> (module, imported)
    export_names: dict[str, str] = field(default_factory=dict)  # `export { local as name }`

    def __repr__(self) -> str:
        parts = [f"ModuleNode(bindings={list(self.bindings)}"]
        if self.collection_exports is not None:
            parts.append(f"exports={self.collection_exports!r}")
        return ", ".join(parts) + ")"


def literal_value(node: ExpressionNode) -> Any:
    """Return the Python value of a literal node.

    Raises ValueError when the node (or any nested element) is not a literal.
    """
    if isinstance(node, (StringLiteral, NumericLiteral, BooleanLiteral)):
        return node.value
    if isinstance(node, NullLiteral):
        return None
    if isinstance(node, ArrayExpression):
        return [literal_value(element) for element in node.elements]
    if isinstance(node, ObjectExpression):
        return {prop.key: literal_value(prop.value) for prop in node.properties}
    raise ValueError(f"Not a literal: {type(node).__name__}")
