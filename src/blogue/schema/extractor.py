"""Field extraction from evaluated schemas.

Turns an ObjectShape into the ordered SchemaField list of a FieldModel.
Each member is unwrapped layer by layer (optional, default, description,
coercion, in any order and any depth), then its base shape is classified.

The same classification is available for JSON Schema documents, the form
a Zod schema takes after `zod-to-json-schema`, so a schema exported that
way maps to the same fields.
"""

from typing import Any

from loguru import logger

from blogue.schema.model import FieldType, SchemaField, is_image_keys
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
)

# --- Shape IR ---


def extract_fields(schema: ObjectShape) -> list[SchemaField]:
    """Extract one SchemaField per member, in declaration order."""
    return [extract_field(name, shape) for name, shape in schema.fields.items()]


def extract_field(name: str, shape: Shape) -> SchemaField:
    """Classify a single object member."""
    optional = False
    has_default = False
    default_value: Any = None
    description: str | None = None

    # Peel wrappers from the outside in. The outermost default wins, as it
    # is the one applied last when the schema parses input.
    while True:
        if isinstance(shape, OptionalShape):
            optional = True
            shape = shape.inner
        elif isinstance(shape, DefaultShape):
            if not has_default:
                has_default = True
                default_value = shape.value
            shape = shape.inner
        elif isinstance(shape, DescribedShape):
            description = description or shape.description or None
            shape = shape.inner
        elif isinstance(shape, CoercedShape):
            shape = shape.inner
        else:
            break

    field_type = classify_shape(shape, name)
    item_type = None
    if isinstance(shape, ArrayShape):
        item_type = classify_shape(_strip(shape.item), f"{name}[]")

    return SchemaField(
        name=name,
        type=field_type,
        required=not optional and not has_default,
        default_value=default_value,
        has_default=has_default,
        item_type=item_type,
        description=description,
    )


def classify_shape(shape: Shape, name: str = "") -> FieldType:
    """Map an unwrapped shape to its FieldType."""
    shape = _strip(shape)

    if isinstance(shape, StringShape):
        return FieldType.STRING
    if isinstance(shape, NumberShape):
        return FieldType.NUMBER
    if isinstance(shape, BooleanShape):
        return FieldType.BOOLEAN
    if isinstance(shape, DateShape):
        return FieldType.DATE
    if isinstance(shape, ImageShape):
        return FieldType.IMAGE
    if isinstance(shape, ArrayShape):
        return FieldType.ARRAY
    if isinstance(shape, ObjectShape):
        if is_image_keys(set(shape.fields)):
            return FieldType.IMAGE
        return FieldType.OBJECT
    if isinstance(shape, EnumShape):
        return FieldType.STRING
    if isinstance(shape, LiteralShape):
        return _literal_type(shape.value)
    if isinstance(shape, UnknownShape):
        logger.debug(f"Field '{name}' has unmapped type '{shape.type_name}'")
        return FieldType.UNKNOWN

    logger.warning(f"Field '{name}' has unrecognized shape {type(shape).__name__}")
    return FieldType.UNKNOWN


def _strip(shape: Shape) -> Shape:
    while isinstance(shape, (OptionalShape, DefaultShape, DescribedShape, CoercedShape)):
        shape = shape.inner
    return shape


def _literal_type(value: Any) -> FieldType:
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldType.NUMBER
    if isinstance(value, str):
        return FieldType.STRING
    return FieldType.UNKNOWN


# --- JSON Schema projection ---


def to_json_schema(shape: Shape) -> dict[str, Any]:
    """Project a shape to a JSON Schema document (draft-07 style, as zod-to-json-schema emits)."""
    if isinstance(shape, OptionalShape):
        return to_json_schema(shape.inner)
    if isinstance(shape, DefaultShape):
        return {**to_json_schema(shape.inner), "default": shape.value}
    if isinstance(shape, DescribedShape):
        return {**to_json_schema(shape.inner), "description": shape.description}
    if isinstance(shape, CoercedShape):
        return to_json_schema(shape.inner)

    if isinstance(shape, StringShape):
        return {"type": "string"}
    if isinstance(shape, NumberShape):
        return {"type": "number"}
    if isinstance(shape, BooleanShape):
        return {"type": "boolean"}
    if isinstance(shape, DateShape):
        return {"type": "string", "format": "date-time"}
    if isinstance(shape, ImageShape):
        return {
            "type": "object",
            "properties": {"src": {"type": "string"}, "alt": {"type": "string"}},
            "required": ["src", "alt"],
        }
    if isinstance(shape, EnumShape):
        return {"type": "string", "enum": list(shape.values)}
    if isinstance(shape, LiteralShape):
        literal_type = _literal_type(shape.value)
        schema: dict[str, Any] = {"const": shape.value}
        if literal_type != FieldType.UNKNOWN:
            schema["type"] = literal_type.value
        return schema
    if isinstance(shape, ArrayShape):
        return {"type": "array", "items": to_json_schema(shape.item)}
    if isinstance(shape, ObjectShape):
        properties = {name: to_json_schema(member) for name, member in shape.fields.items()}
        required = [
            name
            for name, member in shape.fields.items()
            if not _has_optional_layer(member)
        ]
        document: dict[str, Any] = {
            "type": "object",
            "properties": properties,
            "additionalProperties": False,
        }
        if required:
            document["required"] = required
        return document

    # Unknown shapes accept anything
    return {}


def _has_optional_layer(shape: Shape) -> bool:
    while isinstance(shape, (OptionalShape, DefaultShape, DescribedShape, CoercedShape)):
        if isinstance(shape, (OptionalShape, DefaultShape)):
            return True
        shape = shape.inner
    return False


def extract_fields_from_json_schema(document: dict[str, Any]) -> list[SchemaField]:
    """Extract fields from a JSON Schema object document.

    Follows a top-level `$ref` into `definitions` / `$defs`, which is how
    zod-to-json-schema wraps named schemas.
    """
    root = document
    schema = _resolve_ref(document, root)
    if schema.get("type") != "object":
        logger.warning("JSON Schema root is not an object, no fields extracted")
        return []

    properties: dict[str, Any] = schema.get("properties", {})
    required = set(schema.get("required", []))
    fields: list[SchemaField] = []

    for name, member in properties.items():
        member = _resolve_ref(member, root)
        has_default = "default" in member
        item_type = None
        field_type = _json_field_type(member, root)
        if field_type == FieldType.ARRAY:
            items = member.get("items")
            item_type = (
                _json_field_type(_resolve_ref(items, root), root)
                if isinstance(items, dict)
                else FieldType.UNKNOWN
            )
        fields.append(
            SchemaField(
                name=name,
                type=field_type,
                required=name in required and not has_default,
                default_value=member.get("default"),
                has_default=has_default,
                item_type=item_type,
                description=member.get("description"),
            )
        )

    return fields


def _resolve_ref(schema: dict[str, Any], root: dict[str, Any]) -> dict[str, Any]:
    seen: set[str] = set()
    while "$ref" in schema:
        ref = schema["$ref"]
        if ref in seen or not ref.startswith("#/"):
            logger.warning(f"Cannot resolve JSON Schema reference {ref!r}")
            return {}
        seen.add(ref)
        target: Any = root
        for part in ref[2:].split("/"):
            target = target.get(part, {}) if isinstance(target, dict) else {}
        schema = target
    return schema


def _json_field_type(schema: dict[str, Any], root: dict[str, Any]) -> FieldType:
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # ["string", "null"] from nullable members
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if len(non_null) == 1 else None

    if schema_type == "string":
        if schema.get("format") in ("date", "date-time"):
            return FieldType.DATE
        return FieldType.STRING
    if schema_type in ("number", "integer"):
        return FieldType.NUMBER
    if schema_type == "boolean":
        return FieldType.BOOLEAN
    if schema_type == "array":
        return FieldType.ARRAY
    if schema_type == "object":
        keys = set(schema.get("properties", {}))
        return FieldType.IMAGE if is_image_keys(keys) else FieldType.OBJECT

    if "anyOf" in schema:
        # Optional date coercion renders as anyOf [string date-time, number]
        options = [_json_field_type(_resolve_ref(option, root), root) for option in schema["anyOf"]]
        distinct = set(options) - {FieldType.UNKNOWN}
        if len(distinct) == 1:
            return distinct.pop()
        if FieldType.DATE in distinct:
            return FieldType.DATE
    return FieldType.UNKNOWN
