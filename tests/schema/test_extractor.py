"""Tests for blogue.schema.extractor -- shapes to schema fields."""

from blogue.schema.evaluator import SchemaEvaluator
from blogue.schema.extractor import (
    classify_shape,
    extract_field,
    extract_fields,
    extract_fields_from_json_schema,
    to_json_schema,
)
from blogue.schema.model import FieldType
from blogue.schema.parser import SchemaParser
from blogue.schema.shapes import (
    ArrayShape,
    DateShape,
    DefaultShape,
    EnumShape,
    LiteralShape,
    ObjectShape,
    OptionalShape,
    StringShape,
    UnknownShape,
)

BLOG_SCHEMA = """
z.object({
  title: z.string(),
  views: z.number(),
  featured: z.boolean(),
  pubDate: z.coerce.date(),
  tags: z.array(z.string()).default([]),
  draft: z.boolean().default(false),
})
"""


def _fields(text: str, **kwargs):
    shape = SchemaEvaluator(**kwargs).evaluate_schema(SchemaParser.parse_expression_text(text))
    return extract_fields(shape)


class TestExtractFields:
    def test_blog_schema(self):
        fields = {f.name: f for f in _fields(BLOG_SCHEMA)}

        assert list(fields) == ["title", "views", "featured", "pubDate", "tags", "draft"]
        assert fields["title"].type == FieldType.STRING
        assert fields["views"].type == FieldType.NUMBER
        assert fields["featured"].type == FieldType.BOOLEAN
        assert fields["pubDate"].type == FieldType.DATE
        assert fields["tags"].type == FieldType.ARRAY
        assert fields["tags"].item_type == FieldType.STRING
        assert fields["draft"].type == FieldType.BOOLEAN

        required = {name for name, f in fields.items() if f.required}
        assert required == {"title", "views", "featured", "pubDate"}

        assert fields["tags"].has_default is True
        assert fields["tags"].default_value == []
        assert fields["draft"].has_default is True
        assert fields["draft"].default_value is False

    def test_optional_field(self):
        [field] = _fields("z.object({ subtitle: z.string().optional() })")
        assert field.required is False
        assert field.has_default is False

    def test_wrapper_order_does_not_matter(self):
        fields = _fields(
            "z.object({"
            " a: z.string().describe('x').optional(),"
            " b: z.string().optional().describe('x'),"
            " c: z.coerce.number().default(1).describe('x'),"
            "})"
        )
        assert [f.type for f in fields] == [FieldType.STRING, FieldType.STRING, FieldType.NUMBER]
        assert [f.required for f in fields] == [False, False, False]
        assert fields[0].description == "x"
        assert fields[2].default_value == 1

    def test_outermost_default_wins(self):
        field = extract_field(
            "n", DefaultShape(inner=DefaultShape(inner=StringShape(), value="inner"), value="outer")
        )
        assert field.default_value == "outer"

    def test_image_helper_field(self):
        [field] = _fields("z.object({ cover: image() })", helpers={"image": "image"})
        assert field.type == FieldType.IMAGE

    def test_src_alt_object_is_image(self):
        [field] = _fields("z.object({ hero: z.object({ src: z.string(), alt: z.string() }) })")
        assert field.type == FieldType.IMAGE

    def test_url_alt_object_is_image(self):
        [field] = _fields("z.object({ hero: z.object({ url: z.string(), alt: z.string() }) })")
        assert field.type == FieldType.IMAGE

    def test_object_with_extra_keys_is_not_image(self):
        [field] = _fields(
            "z.object({ hero: z.object({ src: z.string(), alt: z.string(), width: z.number() }) })"
        )
        assert field.type == FieldType.OBJECT

    def test_unknown_member(self):
        [field] = _fields(
            "z.object({ author: reference('authors') })", helpers={"reference": "reference"}
        )
        assert field.type == FieldType.UNKNOWN
        assert field.required is True

    def test_unmapped_constructor_member(self):
        [field] = _fields("z.object({ extra: z.record(z.string()) })")
        assert field.type == FieldType.UNKNOWN


class TestClassifyShape:
    def test_enum_is_string(self):
        assert classify_shape(EnumShape(values=("a", "b"))) == FieldType.STRING

    def test_literals(self):
        assert classify_shape(LiteralShape(value="x")) == FieldType.STRING
        assert classify_shape(LiteralShape(value=3)) == FieldType.NUMBER
        assert classify_shape(LiteralShape(value=True)) == FieldType.BOOLEAN
        assert classify_shape(LiteralShape(value=None)) == FieldType.UNKNOWN

    def test_wrappers_are_stripped(self):
        assert classify_shape(OptionalShape(inner=DateShape())) == FieldType.DATE

    def test_array_item_type_through_wrappers(self):
        field = extract_field("tags", ArrayShape(item=OptionalShape(inner=StringShape())))
        assert field.item_type == FieldType.STRING

    def test_unknown(self):
        assert classify_shape(UnknownShape(type_name="any")) == FieldType.UNKNOWN


class TestJsonSchema:
    def test_projection(self):
        shape = SchemaEvaluator().evaluate_schema(SchemaParser.parse_expression_text(BLOG_SCHEMA))
        document = to_json_schema(shape)

        assert document["type"] == "object"
        assert document["additionalProperties"] is False
        assert document["required"] == ["title", "views", "featured", "pubDate"]
        assert document["properties"]["pubDate"] == {"type": "string", "format": "date-time"}
        assert document["properties"]["tags"] == {
            "type": "array",
            "items": {"type": "string"},
            "default": [],
        }

    def test_same_fields_as_shape_extraction(self):
        shape = SchemaEvaluator().evaluate_schema(SchemaParser.parse_expression_text(BLOG_SCHEMA))
        from_shape = extract_fields(shape)
        from_json = extract_fields_from_json_schema(to_json_schema(shape))
        assert [(f.name, f.type, f.required, f.default_value) for f in from_json] == [
            (f.name, f.type, f.required, f.default_value) for f in from_shape
        ]

    def test_ref_into_definitions(self):
        document = {
            "$ref": "#/definitions/Post",
            "definitions": {
                "Post": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "cover": {"$ref": "#/definitions/Image"},
                    },
                    "required": ["title"],
                },
                "Image": {
                    "type": "object",
                    "properties": {"src": {"type": "string"}, "alt": {"type": "string"}},
                },
            },
        }
        fields = {f.name: f for f in extract_fields_from_json_schema(document)}
        assert fields["title"].required is True
        assert fields["cover"].type == FieldType.IMAGE
        assert fields["cover"].required is False

    def test_nullable_and_any_of(self):
        document = {
            "type": "object",
            "properties": {
                "subtitle": {"type": ["string", "null"]},
                "updated": {"anyOf": [{"type": "string", "format": "date-time"}, {"type": "number"}]},
            },
        }
        fields = {f.name: f for f in extract_fields_from_json_schema(document)}
        assert fields["subtitle"].type == FieldType.STRING
        assert fields["updated"].type == FieldType.DATE

    def test_non_object_root(self):
        assert extract_fields_from_json_schema({"type": "string"}) == []

    def test_nested_object_projection(self):
        shape = ObjectShape(fields={"meta": OptionalShape(inner=ObjectShape(fields={}))})
        document = to_json_schema(shape)
        assert "required" not in document
        assert document["properties"]["meta"]["type"] == "object"
