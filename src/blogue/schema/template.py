"""Template synthesis for field models.

A template is the default frontmatter mapping written into a new post.
Dates are the delicate part: the YAML codec writes a `date`/`datetime`
unquoted and a date-looking `str` quoted, so the date representation in a
template decides how the new post's frontmatter reads. `DateFormat`
carries the representation an existing corpus uses through to the writer.
"""

import copy
import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterable

from blogue.schema.model import FieldModel, FieldType, SchemaField, Template

CALENDAR_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateFormat(str, Enum):
    """How a date value is represented in frontmatter."""

    CALENDAR = "calendar"  # "2024-01-15" (quoted string)
    TIMESTAMP = "timestamp"  # "2024-01-15T10:00:00.000Z" (quoted string)
    DATE = "date"  # 2024-01-15 (unquoted, loads as datetime.date)
    DATETIME = "datetime"  # 2024-01-15 10:00:00+00:00 (unquoted, loads as datetime)


def infer_date_format(examples: Iterable[Any]) -> DateFormat:
    """Pick the date representation matching observed example values.

    Strings only: CALENDAR when every string is a plain YYYY-MM-DD date,
    TIMESTAMP otherwise. Instants only: DATE when none carries a time,
    DATETIME otherwise. Mixed or no examples: DATETIME.
    """
    strings: list[str] = []
    instants: list[date] = []
    for example in examples:
        if isinstance(example, str):
            strings.append(example)
        elif isinstance(example, date):
            instants.append(example)

    if strings and not instants:
        if all(CALENDAR_DATE_PATTERN.match(s) for s in strings):
            return DateFormat.CALENDAR
        return DateFormat.TIMESTAMP

    if instants and not strings:
        if any(isinstance(i, datetime) for i in instants):
            return DateFormat.DATETIME
        return DateFormat.DATE

    return DateFormat.DATETIME


def date_value(date_format: DateFormat | None = None, now: datetime | None = None) -> date | str:
    """Current date in the given representation."""
    now = now or datetime.now(timezone.utc)
    date_format = date_format or DateFormat.DATETIME

    if date_format == DateFormat.CALENDAR:
        return now.date().isoformat()
    if date_format == DateFormat.TIMESTAMP:
        return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        )
    if date_format == DateFormat.DATE:
        return now.date()
    return now.replace(microsecond=0)


def placeholder_value(
    schema_field: SchemaField, date_format: DateFormat | None = None, now: datetime | None = None
) -> Any:
    """Type-appropriate placeholder for a required field without default."""
    field_type = schema_field.type

    if field_type == FieldType.STRING:
        return ""
    if field_type == FieldType.NUMBER:
        return 0
    if field_type == FieldType.BOOLEAN:
        return False
    if field_type == FieldType.DATE:
        return date_value(date_format, now)
    if field_type == FieldType.ARRAY:
        return []
    if field_type == FieldType.IMAGE:
        return {"src": "", "alt": ""}
    if field_type == FieldType.OBJECT:
        lowered = schema_field.name.lower()
        if "image" in lowered or "cover" in lowered:
            return {"src": "", "alt": ""}
        return {}
    return ""


def synthesize_template(
    model: FieldModel,
    provided: Template | None = None,
    date_format: DateFormat | None = None,
    now: datetime | None = None,
) -> Template:
    """Build the default frontmatter for a field model.

    Provided values win. Fields with a default get a copy of it, optional
    fields without one are left out, required fields get a placeholder.
    Provided keys the model does not know are appended in their own order.
    """
    provided = provided or {}
    template: Template = {}

    for schema_field in model.fields:
        if schema_field.name in provided:
            template[schema_field.name] = provided[schema_field.name]
        elif schema_field.has_default:
            template[schema_field.name] = copy.deepcopy(schema_field.default_value)
        elif schema_field.required:
            template[schema_field.name] = placeholder_value(schema_field, date_format, now)

    for name, value in provided.items():
        if name not in template:
            template[name] = value

    return template


def minimal_template(date_format: DateFormat | None = None, now: datetime | None = None) -> Template:
    """Hard-coded default shape used when nothing could be inferred."""
    return {
        "title": "",
        "date": date_value(date_format, now),
        "author": "",
        "description": "",
        "tags": [],
        "draft": True,
    }
