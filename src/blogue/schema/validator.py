"""Frontmatter validator for blogue.

Checks a post's frontmatter either against a field model (schema-derived
or learned) or, without one, against the conventions most blogs share:

  title        -> required, non-empty string
  date         -> YYYY-MM-DD string (or a YAML date)
  tags         -> list of strings
  draft        -> boolean
  author, description -> strings (warning only)

Errors fail validation, warnings are informational.
"""

import re
from dataclasses import dataclass, field as dataclass_field
from datetime import date
from pathlib import Path
from typing import Any

from blogue.file_utils import ParseError, parse_frontmatter
from blogue.schema.model import FieldModel, FieldType, SchemaField, is_image_keys, value_field_type
from blogue.utils import FilePath

CALENDAR_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MAX_TITLE_LENGTH = 100
MIN_CONTENT_LENGTH = 50
PLACEHOLDER_TEXT = "Write your blog post content here..."


# --- Result Data Model ---


@dataclass
class ValidationResult:
    """Outcome of validating a post or its frontmatter."""

    passed: bool = True  # True if no errors (warnings are OK)
    errors: list[str] = dataclass_field(default_factory=list)
    warnings: list[str] = dataclass_field(default_factory=list)
    missing_required_fields: list[str] = dataclass_field(default_factory=list)
    invalid_fields: list[str] = dataclass_field(default_factory=list)

    def merge(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.missing_required_fields.extend(other.missing_required_fields)
        self.invalid_fields.extend(other.invalid_fields)
        self.passed = not self.errors

    def _error(self, message: str, field_name: str | None = None) -> None:
        self.errors.append(message)
        if field_name and field_name not in self.invalid_fields:
            self.invalid_fields.append(field_name)
        self.passed = False


# --- Validation Logic ---


def validate_frontmatter(
    frontmatter: dict[str, Any], model: FieldModel | None = None
) -> ValidationResult:
    """Validate frontmatter against a field model, or the default blog rules."""
    if model is None:
        return _validate_default_rules(frontmatter)

    result = ValidationResult()
    for schema_field in model.fields:
        if schema_field.name not in frontmatter or frontmatter[schema_field.name] is None:
            if schema_field.required:
                result.missing_required_fields.append(schema_field.name)
                result._error(f"Missing required field: {schema_field.name}")
            continue
        _check_type(schema_field, frontmatter[schema_field.name], result)

    return result


def _check_type(schema_field: SchemaField, value: Any, result: ValidationResult) -> None:
    name = schema_field.name
    expected = schema_field.type
    actual = value_field_type(value)

    if expected == FieldType.UNKNOWN:
        return

    if expected == FieldType.DATE:
        if isinstance(value, date):
            return
        if isinstance(value, str) and _is_date_string(value):
            return
        result._error(f"Field '{name}' must be a date", name)
        return

    if expected == FieldType.IMAGE:
        if isinstance(value, str):
            # Astro image() accepts a plain path
            return
        if not isinstance(value, dict):
            result._error(f"Field '{name}' must be an image path or {{src, alt}} object", name)
        elif not is_image_keys(set(value)):
            result.warnings.append(f"Field '{name}' should have exactly 'src' (or 'url') and 'alt'")
        return

    if expected == FieldType.OBJECT and actual == FieldType.IMAGE:
        return

    if actual != expected:
        result._error(f"Field '{name}' must be of type {expected.value}, got {actual.value}", name)
        return

    if expected == FieldType.ARRAY and schema_field.item_type not in (None, FieldType.UNKNOWN):
        wrong = [item for item in value if value_field_type(item) != schema_field.item_type]
        if wrong:
            result._error(
                f"All items of '{name}' must be of type {schema_field.item_type.value}", name
            )


def _is_date_string(value: str) -> bool:
    try:
        date.fromisoformat(value[:10])
    except ValueError:
        return False
    return True


def _validate_default_rules(frontmatter: dict[str, Any]) -> ValidationResult:
    result = ValidationResult()

    title = frontmatter.get("title")
    if not isinstance(title, str) or not title.strip():
        result.missing_required_fields.append("title")
        result._error("Title is required and must be a non-empty string", "title")
    elif len(title) > MAX_TITLE_LENGTH:
        result.warnings.append(
            f"Title is very long (>{MAX_TITLE_LENGTH} characters), consider shortening"
        )

    if "date" in frontmatter and frontmatter["date"]:
        value = frontmatter["date"]
        # A YAML date is a parsed calendar date already
        if not isinstance(value, date):
            if not isinstance(value, str) or not CALENDAR_DATE.match(value):
                result._error("Date must be in YYYY-MM-DD format", "date")
            elif not _is_date_string(value):
                result._error("Date must be a valid date", "date")

    if "tags" in frontmatter:
        tags = frontmatter["tags"]
        if not isinstance(tags, list):
            result._error("Tags must be an array", "tags")
        elif any(not isinstance(tag, str) for tag in tags):
            result._error("All tags must be strings", "tags")

    if "draft" in frontmatter and not isinstance(frontmatter["draft"], bool):
        result._error("Draft must be a boolean value", "draft")

    if "author" in frontmatter and not isinstance(frontmatter["author"], str):
        result.warnings.append("Author should be a string")

    if "description" in frontmatter and not isinstance(frontmatter["description"], str):
        result.warnings.append("Description should be a string")

    return result


def validate_content(body: str) -> ValidationResult:
    """Check the markdown body; content problems are warnings only."""
    result = ValidationResult()

    if not body or not body.strip():
        result.warnings.append("Post content is empty")
        return result

    if PLACEHOLDER_TEXT in body:
        result.warnings.append("Post still contains placeholder content")

    if len(body.strip()) < MIN_CONTENT_LENGTH:
        result.warnings.append(f"Post content is very short (<{MIN_CONTENT_LENGTH} characters)")

    if not re.search(r"^#+\s", body, re.MULTILINE):
        result.warnings.append("Post has no headings, consider adding structure")

    return result


def validate_post(path: FilePath, model: FieldModel | None = None) -> ValidationResult:
    """Validate a markdown file's frontmatter and body."""
    result = ValidationResult()
    file_path = Path(path)

    if not file_path.is_file():
        result._error(f"File not found: {path}")
        return result

    try:
        metadata, body = parse_frontmatter(file_path.read_text(encoding="utf-8"))
    except (ParseError, OSError, UnicodeDecodeError) as e:
        result._error(f"Failed to parse markdown file: {e}")
        return result

    result.merge(validate_frontmatter(metadata, model))
    result.merge(validate_content(body))
    return result


def validate_quick(path: FilePath) -> ValidationResult:
    """Only the critical check: the file parses and has a title."""
    result = ValidationResult()
    file_path = Path(path)

    if not file_path.is_file():
        result._error(f"File not found: {path}")
        return result

    try:
        metadata, _ = parse_frontmatter(file_path.read_text(encoding="utf-8"))
    except (ParseError, OSError, UnicodeDecodeError) as e:
        result._error(f"Failed to parse file: {e}")
        return result

    title = metadata.get("title")
    if not isinstance(title, str) or not title.strip():
        result._error("Title is required", "title")

    return result
