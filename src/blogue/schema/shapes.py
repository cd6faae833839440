"""
Intermediate representation of an evaluated content schema.

The evaluator turns a parsed `z.object({...})` expression into these
shapes. They mirror the Zod constructors a content config can use, as a
closed set of dataclasses the extractor can dispatch on.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Shape:
    """Base class for schema shapes."""

    pass


@dataclass(frozen=True)
class StringShape(Shape):
    pass


@dataclass(frozen=True)
class NumberShape(Shape):
    pass


@dataclass(frozen=True)
class BooleanShape(Shape):
    pass


@dataclass(frozen=True)
class DateShape(Shape):
    pass


@dataclass(frozen=True)
class ImageShape(Shape):
    """Result of the `image()` helper passed to schema functions."""

    pass


@dataclass(frozen=True)
class EnumShape(Shape):
    values: tuple[Any, ...] = ()


@dataclass(frozen=True)
class LiteralShape(Shape):
    value: Any = None


@dataclass(frozen=True)
class UnknownShape(Shape):
    """A constructor with no mapping (union, any, reference, ...)."""

    type_name: str = "unknown"


@dataclass(frozen=True)
class ArrayShape(Shape):
    item: Shape


@dataclass(frozen=True)
class ObjectShape(Shape):
    # Insertion order is declaration order
    fields: dict[str, Shape] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class OptionalShape(Shape):
    inner: Shape


@dataclass(frozen=True)
class DefaultShape(Shape):
    inner: Shape
    value: Any = field(default=None, hash=False)


@dataclass(frozen=True)
class CoercedShape(Shape):
    """`z.coerce.<type>()` wrapper."""

    inner: Shape


@dataclass(frozen=True)
class DescribedShape(Shape):
    inner: Shape
    description: str = ""


WRAPPER_SHAPES = (OptionalShape, DefaultShape, CoercedShape, DescribedShape)


def unwrap(shape: Shape) -> Shape:
    """Strip every wrapper and return the base shape."""
    while isinstance(shape, WRAPPER_SHAPES):
        shape = shape.inner
    return shape
