"""Field model shared by both inference paths.

Schema analysis (content config -> fields) and pattern learning (existing
posts -> frequencies) both end up here, so template synthesis and
conflict resolution only ever deal with one shape:

  SchemaField   -> one frontmatter key, its semantic type and default
  FieldModel    -> ordered, name-unique list of fields for one collection
  Collection    -> a named FieldModel from a content config
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, TypeAlias

Template: TypeAlias = dict[str, Any]


class FieldType(str, Enum):
    """Semantic type of a frontmatter field."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"
    IMAGE = "image"  # object with exactly a src/url key and an alt key
    UNKNOWN = "unknown"


@dataclass
class SchemaField:
    """A single declared or inferred frontmatter field."""

    name: str
    type: FieldType
    required: bool
    default_value: Any = None
    has_default: bool = False
    item_type: FieldType | None = None  # Only set for arrays
    description: str | None = None

    def __post_init__(self):
        # A default always makes the field optional for template purposes
        if self.has_default:
            self.required = False


@dataclass
class FieldModel:
    """Normalized description of a collection's expected frontmatter."""

    fields: list[SchemaField] = field(default_factory=list)
    success: bool = True
    message: str = ""
    confidence: float = 1.0
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self):
        seen: set[str] = set()
        for schema_field in self.fields:
            if schema_field.name in seen:
                raise ValueError(f"Duplicate field name in model: {schema_field.name}")
            seen.add(schema_field.name)

    @property
    def required_fields(self) -> list[SchemaField]:
        return [f for f in self.fields if f.required]

    @property
    def optional_fields(self) -> list[SchemaField]:
        return [f for f in self.fields if not f.required]

    @property
    def image_fields(self) -> list[SchemaField]:
        return [f for f in self.fields if f.type == FieldType.IMAGE]

    def get(self, name: str) -> SchemaField | None:
        """Look up a field by name."""
        return next((f for f in self.fields if f.name == name), None)

    @classmethod
    def failure(cls, message: str) -> "FieldModel":
        return cls(fields=[], success=False, message=message, confidence=0.0)

    @classmethod
    def from_template(cls, template: Template, confidence: float = 1.0) -> "FieldModel":
        """Build a model from a fixed template.

        Every key becomes an optional field whose default is the template value,
        so synthesizing a template from the model reproduces the input.
        """
        fields = [
            SchemaField(
                name=name,
                type=value_field_type(value),
                required=False,
                default_value=value,
                has_default=True,
                item_type=_item_type(value),
            )
            for name, value in template.items()
        ]
        return cls(
            fields=fields,
            success=True,
            message=f"Static template with {len(fields)} fields",
            confidence=confidence,
        )


@dataclass
class Collection:
    """A named content collection and its field model."""

    name: str
    kind: str  # "content" | "data"
    model: FieldModel
    default_dir: str

    @property
    def fields(self) -> list[SchemaField]:
        return self.model.fields

    @property
    def required_fields(self) -> list[SchemaField]:
        return self.model.required_fields

    @property
    def optional_fields(self) -> list[SchemaField]:
        return self.model.optional_fields

    @property
    def image_fields(self) -> list[SchemaField]:
        return self.model.image_fields


def value_field_type(value: Any) -> FieldType:
    """Classify a concrete Python value into a FieldType."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldType.NUMBER
    if isinstance(value, date):
        return FieldType.DATE
    if isinstance(value, str):
        return FieldType.STRING
    if isinstance(value, (list, tuple)):
        return FieldType.ARRAY
    if isinstance(value, dict):
        if is_image_keys(set(value)):
            return FieldType.IMAGE
        return FieldType.OBJECT
    return FieldType.UNKNOWN


def _item_type(value: Any) -> FieldType | None:
    if not isinstance(value, (list, tuple)):
        return None
    if not value:
        return FieldType.UNKNOWN
    return value_field_type(value[0])


SOURCE_KEYS = frozenset({"src", "url"})
ALT_KEYS = frozenset({"alt"})


def is_image_keys(keys: set[str]) -> bool:
    """True when the keys are exactly one source-like key and one alt-like key."""
    return len(keys) == 2 and len(keys & SOURCE_KEYS) == 1 and len(keys & ALT_KEYS) == 1
