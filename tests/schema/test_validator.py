"""Tests for blogue.schema.validator -- checking post frontmatter."""

from datetime import date

from blogue.schema.model import FieldModel, FieldType, SchemaField
from blogue.schema.validator import (
    validate_content,
    validate_frontmatter,
    validate_post,
    validate_quick,
)

GOOD_BODY = "# Heading\n\nThis body is long enough to pass the short content check easily.\n"


def _model() -> FieldModel:
    return FieldModel(
        fields=[
            SchemaField("title", FieldType.STRING, True),
            SchemaField("pubDate", FieldType.DATE, True),
            SchemaField("tags", FieldType.ARRAY, False, item_type=FieldType.STRING),
            SchemaField("cover", FieldType.IMAGE, False),
            SchemaField("views", FieldType.NUMBER, False),
            SchemaField("extra", FieldType.UNKNOWN, False),
        ]
    )


# --- Default rules ---


class TestDefaultRules:
    def test_valid_post(self):
        result = validate_frontmatter(
            {"title": "Hello", "date": "2024-01-15", "tags": ["a"], "draft": False}
        )
        assert result.passed is True
        assert result.errors == []

    def test_missing_title(self):
        result = validate_frontmatter({"date": "2024-01-15"})
        assert result.passed is False
        assert result.errors == ["Title is required and must be a non-empty string"]
        assert result.missing_required_fields == ["title"]

    def test_blank_title(self):
        result = validate_frontmatter({"title": "   "})
        assert "Title is required and must be a non-empty string" in result.errors

    def test_long_title_warns(self):
        result = validate_frontmatter({"title": "x" * 101})
        assert result.passed is True
        assert result.warnings == ["Title is very long (>100 characters), consider shortening"]

    def test_bad_date_format(self):
        result = validate_frontmatter({"title": "a", "date": "15/01/2024"})
        assert result.errors == ["Date must be in YYYY-MM-DD format"]
        assert result.invalid_fields == ["date"]

    def test_impossible_date(self):
        result = validate_frontmatter({"title": "a", "date": "2024-02-31"})
        assert result.passed is False

    def test_yaml_date_is_accepted(self):
        assert validate_frontmatter({"title": "a", "date": date(2024, 1, 15)}).passed is True

    def test_tags(self):
        assert validate_frontmatter({"title": "a", "tags": "x"}).errors == ["Tags must be an array"]
        assert validate_frontmatter({"title": "a", "tags": ["x", 1]}).errors == [
            "All tags must be strings"
        ]

    def test_draft_must_be_boolean(self):
        result = validate_frontmatter({"title": "a", "draft": "no"})
        assert result.errors == ["Draft must be a boolean value"]

    def test_author_and_description_warn(self):
        result = validate_frontmatter({"title": "a", "author": 1, "description": ["x"]})
        assert result.passed is True
        assert result.warnings == ["Author should be a string", "Description should be a string"]


# --- Model rules ---


class TestModelRules:
    def test_valid(self):
        result = validate_frontmatter(
            {
                "title": "Hello",
                "pubDate": date(2024, 1, 15),
                "tags": ["a"],
                "cover": {"src": "a.png", "alt": "A"},
                "views": 3,
                "extra": object(),
            },
            _model(),
        )
        assert result.passed is True
        assert result.warnings == []

    def test_missing_required(self):
        result = validate_frontmatter({"title": "Hello"}, _model())
        assert result.passed is False
        assert result.missing_required_fields == ["pubDate"]
        assert result.errors == ["Missing required field: pubDate"]

    def test_null_counts_as_missing(self):
        result = validate_frontmatter({"title": None, "pubDate": "2024-01-15"}, _model())
        assert result.missing_required_fields == ["title"]

    def test_date_strings(self):
        model = _model()
        assert validate_frontmatter({"title": "a", "pubDate": "2024-01-15T10:00:00Z"}, model).passed
        result = validate_frontmatter({"title": "a", "pubDate": "soon"}, model)
        assert result.errors == ["Field 'pubDate' must be a date"]

    def test_type_mismatch(self):
        result = validate_frontmatter({"title": "a", "pubDate": "2024-01-15", "views": "3"}, _model())
        assert result.errors == ["Field 'views' must be of type number, got string"]
        assert result.invalid_fields == ["views"]

    def test_array_item_type(self):
        result = validate_frontmatter({"title": "a", "pubDate": "2024-01-15", "tags": [1]}, _model())
        assert result.errors == ["All items of 'tags' must be of type string"]

    def test_image_path_string_is_accepted(self):
        result = validate_frontmatter(
            {"title": "a", "pubDate": "2024-01-15", "cover": "./cover.png"}, _model()
        )
        assert result.passed is True

    def test_image_with_wrong_keys_warns(self):
        result = validate_frontmatter(
            {"title": "a", "pubDate": "2024-01-15", "cover": {"src": "a.png"}}, _model()
        )
        assert result.passed is True
        assert result.warnings == ["Field 'cover' should have exactly 'src' (or 'url') and 'alt'"]

    def test_image_of_wrong_type(self):
        result = validate_frontmatter({"title": "a", "pubDate": "2024-01-15", "cover": 3}, _model())
        assert result.passed is False
        assert result.invalid_fields == ["cover"]


# --- Content ---


class TestValidateContent:
    def test_good_body(self):
        assert validate_content(GOOD_BODY).warnings == []

    def test_empty(self):
        assert validate_content("  \n").warnings == ["Post content is empty"]

    def test_placeholder_short_and_no_heading(self):
        result = validate_content("Write your blog post content here...")
        assert result.passed is True
        assert result.warnings == [
            "Post still contains placeholder content",
            "Post content is very short (<50 characters)",
            "Post has no headings, consider adding structure",
        ]


# --- Files ---


class TestValidatePost:
    def test_valid_file(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text(f"---\ntitle: Hello\ndate: 2024-01-15\n---\n\n{GOOD_BODY}")
        result = validate_post(path)
        assert result.passed is True
        assert result.warnings == []

    def test_merges_frontmatter_and_content(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text("---\ndate: 2024-01-15\n---\n\nshort")
        result = validate_post(path)
        assert result.passed is False
        assert "Title is required and must be a non-empty string" in result.errors
        assert "Post content is very short (<50 characters)" in result.warnings

    def test_missing_file(self, tmp_path):
        result = validate_post(tmp_path / "missing.md")
        assert result.passed is False
        assert result.errors[0].startswith("File not found:")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text("---\ntitle: [unclosed\n---\n\nbody")
        result = validate_post(path)
        assert result.passed is False
        assert result.errors[0].startswith("Failed to parse markdown file")

    def test_with_model(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text(f"---\ntitle: Hello\n---\n\n{GOOD_BODY}")
        result = validate_post(path, _model())
        assert result.missing_required_fields == ["pubDate"]


class TestValidateQuick:
    def test_title_present(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text("---\ntitle: Hello\n---\n\nx")
        assert validate_quick(path).passed is True

    def test_title_missing(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text("---\ndraft: true\n---\n\nx")
        result = validate_quick(path)
        assert result.errors == ["Title is required"]

    def test_missing_file(self, tmp_path):
        assert validate_quick(tmp_path / "nope.md").passed is False
