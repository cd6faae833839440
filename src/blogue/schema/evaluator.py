"""
Schema evaluator for parsed content configs.

Walks the expression tree of a `schema` property and builds the shape IR
directly. Nothing from the config is executed: only the Zod constructors,
modifiers and helpers listed below are understood, and every other node
kind evaluates to None and is dropped from its parent.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from blogue.schema.ast import (
    ArrayExpression,
    ArrowFunction,
    BooleanLiteral,
    CallExpression,
    ExpressionNode,
    Identifier,
    MemberExpression,
    NullLiteral,
    NumericLiteral,
    ObjectExpression,
    StringLiteral,
    UnsupportedNode,
    VariableBinding,
    literal_value,
)
from blogue.schema.errors import SchemaEvaluationError
from blogue.schema.shapes import (
    ArrayShape,
    BooleanShape,
    CoercedShape,
    DateShape,
    DefaultShape,
    DescribedShape,
    EnumShape,
    ImageShape,
    LiteralShape,
    NumberShape,
    ObjectShape,
    OptionalShape,
    Shape,
    StringShape,
    UnknownShape,
    unwrap,
)

PRIMITIVE_CONSTRUCTORS = {
    "string": StringShape,
    "number": NumberShape,
    "bigint": NumberShape,
    "boolean": BooleanShape,
    "date": DateShape,
}

OBJECT_CONSTRUCTORS = frozenset({"object", "strictObject", "looseObject"})

# Constructors with no field type of their own
UNKNOWN_CONSTRUCTORS = frozenset(
    {
        "any",
        "unknown",
        "union",
        "discriminatedUnion",
        "intersection",
        "record",
        "tuple",
        "map",
        "set",
        "null",
        "undefined",
        "void",
        "never",
        "lazy",
        "custom",
        "instanceof",
        "nativeEnum",
        "function",
        "promise",
        "preprocess",
    }
)

OPTIONAL_MODIFIERS = frozenset({"optional", "nullish"})

# Refinements and transforms keep the shape they are called on
PASSTHROUGH_MODIFIERS = frozenset(
    {
        "nullable",
        "min",
        "max",
        "length",
        "nonempty",
        "url",
        "email",
        "uuid",
        "cuid",
        "regex",
        "startsWith",
        "endsWith",
        "includes",
        "trim",
        "toLowerCase",
        "toUpperCase",
        "datetime",
        "int",
        "positive",
        "negative",
        "nonnegative",
        "nonpositive",
        "finite",
        "multipleOf",
        "gt",
        "gte",
        "lt",
        "lte",
        "refine",
        "superRefine",
        "transform",
        "pipe",
        "brand",
        "readonly",
        "catch",
        "strict",
        "passthrough",
        "strip",
        "catchall",
    }
)

HELPER_NAMES = frozenset({"image", "reference"})


# --- Intermediate values ---
# Values the visitor passes around before a call produces a Shape.


@dataclass(frozen=True)
class ZodNamespace:
    """`z` or `z.coerce`."""

    coerce: bool = False


@dataclass(frozen=True)
class ZodConstructor:
    """`z.string`, `z.coerce.date`, ... before it is called."""

    name: str
    coerce: bool = False


@dataclass(frozen=True)
class ShapeMethod:
    """`<shape>.optional`, `<shape>.default`, ... before it is called."""

    shape: Shape
    name: str


@dataclass(frozen=True)
class Helper:
    """Schema helper handed to a schema function, e.g. `image`."""

    name: str


@dataclass(frozen=True)
class HelperContext:
    """Whole helper argument bound to one name: `(ctx) => ctx.image()`."""

    pass


class SchemaEvaluator:
    """Evaluates schema expressions into shapes."""

    def __init__(
        self,
        helpers: dict[str, str] | None = None,
        zod_names: set[str] | None = None,
        bindings: dict[str, VariableBinding] | None = None,
    ):
        # local name -> helper name, "" for a whole context argument
        self.helpers = helpers or {}
        self.zod_names = zod_names or {"z"}
        self.bindings = bindings or {}
        self._resolving: list[str] = []

    def evaluate_schema(self, expression: ExpressionNode) -> ObjectShape:
        """Evaluate a collection's schema expression.

        Raises:
            SchemaEvaluationError: If the expression does not produce an object schema
        """
        result = self.evaluate(expression)
        if not isinstance(result, Shape):
            raise SchemaEvaluationError(
                f"Schema expression did not produce a schema (got {type(result).__name__})"
            )
        base = unwrap(result)
        if not isinstance(base, ObjectShape):
            raise SchemaEvaluationError(
                f"Schema is not an object schema (got {type(base).__name__})"
            )
        return base

    def evaluate(self, expression: ExpressionNode) -> Any:
        """
        Evaluate an expression node.

        Args:
            expression: AST expression node

        Returns:
            A Shape, an intermediate value, a literal, or None for nodes that are dropped
        """
        if isinstance(expression, (StringLiteral, NumericLiteral, BooleanLiteral)):
            return expression.value

        elif isinstance(expression, NullLiteral):
            return None

        elif isinstance(expression, Identifier):
            return self._eval_identifier(expression.name)

        elif isinstance(expression, MemberExpression):
            target = self.evaluate(expression.object)
            return self._eval_member(target, expression.property)

        elif isinstance(expression, CallExpression):
            callee = self.evaluate(expression.callee)
            return self._eval_call(callee, expression)

        elif isinstance(expression, ObjectExpression):
            values = {}
            for prop in expression.properties:
                value = self.evaluate(prop.value)
                if value is not None:
                    values[prop.key] = value
            return values

        elif isinstance(expression, ArrayExpression):
            return [
                value
                for value in (self.evaluate(element) for element in expression.elements)
                if value is not None
            ]

        elif isinstance(expression, (ArrowFunction, UnsupportedNode)):
            kind = expression.kind if isinstance(expression, UnsupportedNode) else "ArrowFunction"
            logger.debug(f"Dropping unsupported schema node: {kind}")
            return None

        else:
            raise SchemaEvaluationError(f"Unknown expression type: {type(expression)}")

    def _eval_identifier(self, name: str) -> Any:
        if name in self.zod_names:
            return ZodNamespace()

        if name in self.helpers:
            helper = self.helpers[name]
            return Helper(helper) if helper else HelperContext()

        # Reference to another top-level binding, e.g. a shared sub-schema
        binding = self.bindings.get(name)
        if binding is not None and binding.init is not None:
            if name in self._resolving:
                raise SchemaEvaluationError(f"Circular reference to '{name}'")
            self._resolving.append(name)
            try:
                return self.evaluate(binding.init)
            finally:
                self._resolving.pop()

        raise SchemaEvaluationError(f"Unknown identifier: {name}")

    def _eval_member(self, target: Any, name: str) -> Any:
        if isinstance(target, ZodNamespace):
            if name == "coerce" and not target.coerce:
                return ZodNamespace(coerce=True)
            return ZodConstructor(name=name, coerce=target.coerce)

        if isinstance(target, Shape):
            return ShapeMethod(shape=target, name=name)

        if isinstance(target, HelperContext):
            return Helper(name)

        if target is None:
            return None

        logger.debug(f"Dropping member access '{name}' on {type(target).__name__}")
        return None

    def _eval_call(self, callee: Any, call: CallExpression) -> Any:
        if callee is None:
            # Callee was dropped; the whole call goes with it
            return None

        if isinstance(callee, ZodConstructor):
            return self._construct(callee, call.arguments)

        if isinstance(callee, ShapeMethod):
            return self._apply_modifier(callee.shape, callee.name, call.arguments)

        if isinstance(callee, Helper):
            if callee.name == "image":
                return ImageShape()
            return UnknownShape(type_name=callee.name)

        raise SchemaEvaluationError(f"Value of type {type(callee).__name__} is not callable")

    # --- Constructors ---

    def _construct(self, constructor: ZodConstructor, arguments: list[ExpressionNode]) -> Shape:
        name = constructor.name

        if name in PRIMITIVE_CONSTRUCTORS:
            shape = PRIMITIVE_CONSTRUCTORS[name]()
            return CoercedShape(inner=shape) if constructor.coerce else shape

        if constructor.coerce:
            logger.debug(f"Unknown coercion target: z.coerce.{name}")
            return UnknownShape(type_name=name)

        if name in OBJECT_CONSTRUCTORS:
            members = self.evaluate(arguments[0]) if arguments else {}
            return ObjectShape(fields=self._object_fields(members))

        if name == "array":
            item = self.evaluate(arguments[0]) if arguments else None
            return ArrayShape(item=item if isinstance(item, Shape) else UnknownShape())

        if name == "enum":
            # May be an inline array or a `const` binding holding one
            values = self.evaluate(arguments[0]) if arguments else []
            if isinstance(values, dict):
                values = list(values.values())
            return EnumShape(values=tuple(values) if isinstance(values, list) else ())

        if name == "literal":
            value = self.evaluate(arguments[0]) if arguments else None
            if isinstance(value, (Shape, ZodNamespace, ZodConstructor, ShapeMethod, Helper)):
                raise SchemaEvaluationError("z.literal() expects a literal value")
            return LiteralShape(value=value)

        if name in UNKNOWN_CONSTRUCTORS:
            return UnknownShape(type_name=name)

        logger.warning(f"Unknown schema constructor: z.{name}")
        return UnknownShape(type_name=name)

    def _object_fields(self, members: Any) -> dict[str, Shape]:
        if not isinstance(members, dict):
            raise SchemaEvaluationError(
                f"z.object() expects an object literal (got {type(members).__name__})"
            )
        fields: dict[str, Shape] = {}
        for key, value in members.items():
            if isinstance(value, Shape):
                fields[key] = value
            else:
                logger.debug(f"Dropping non-schema member '{key}'")
        return fields

    # --- Modifiers ---

    def _apply_modifier(
        self, shape: Shape, name: str, arguments: list[ExpressionNode]
    ) -> Shape:
        if name in OPTIONAL_MODIFIERS:
            return OptionalShape(inner=shape)

        if name == "default":
            try:
                value = self._literal_argument(arguments)
            except SchemaEvaluationError:
                # `.default(() => new Date())`: optional, but no usable value
                logger.debug("Non-literal default value, treating field as optional")
                return OptionalShape(inner=shape)
            return DefaultShape(inner=shape, value=value)

        if name == "describe":
            description = self._literal_argument(arguments, default="")
            return DescribedShape(inner=shape, description=str(description))

        if name == "array":
            return ArrayShape(item=shape)

        if name in ("or", "and"):
            return UnknownShape(type_name="union" if name == "or" else "intersection")

        base = unwrap(shape)
        if isinstance(base, ObjectShape) and name in ("extend", "merge", "partial", "pick", "omit", "required"):
            return self._reshape_object(shape, base, name, arguments)

        if name in PASSTHROUGH_MODIFIERS:
            return shape

        logger.debug(f"Unknown modifier '.{name}()', keeping shape unchanged")
        return shape

    def _reshape_object(
        self, shape: Shape, base: ObjectShape, name: str, arguments: list[ExpressionNode]
    ) -> Shape:
        """Apply the object-only helpers that change the member set."""
        argument = self.evaluate(arguments[0]) if arguments else None

        if name == "extend":
            return ObjectShape(fields={**base.fields, **self._object_fields(argument or {})})

        if name == "merge":
            other = unwrap(argument) if isinstance(argument, Shape) else None
            if not isinstance(other, ObjectShape):
                raise SchemaEvaluationError(".merge() expects an object schema")
            return ObjectShape(fields={**base.fields, **other.fields})

        if name == "partial":
            return ObjectShape(
                fields={
                    key: value if isinstance(value, OptionalShape) else OptionalShape(inner=value)
                    for key, value in base.fields.items()
                }
            )

        if name == "required":
            return ObjectShape(
                fields={
                    key: value.inner if isinstance(value, OptionalShape) else value
                    for key, value in base.fields.items()
                }
            )

        if argument is None:
            argument = {}
        if not isinstance(argument, dict):
            raise SchemaEvaluationError(
                f".{name}() expects an object of keys (got {type(argument).__name__})"
            )
        keys = {key for key, flag in argument.items() if flag is True}
        if name == "pick":
            return ObjectShape(fields={k: v for k, v in base.fields.items() if k in keys})
        return ObjectShape(fields={k: v for k, v in base.fields.items() if k not in keys})

    def _literal_argument(self, arguments: list[ExpressionNode], default: Any = None) -> Any:
        """Return the first argument as a Python literal.

        Raises:
            SchemaEvaluationError: If the argument is not a literal
        """
        if not arguments:
            return default
        node = arguments[0]
        try:
            return literal_value(node)
        except ValueError as e:
            raise SchemaEvaluationError(f"Expected a literal argument: {e}") from e
