"""Frontmatter pattern inference for blogue.

Learns the frontmatter a project expects by reading its most recent posts
instead of its config. Each field is bucketed by how often it shows up:

  80%+ present   -> required field
  20%+ present   -> optional field
  Below 20%      -> rare (observed, but left out of templates)

Counting happens in two phases: occurrences are accumulated while samples
stream in, then divided by the sample count once all of them are read.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from loguru import logger

from blogue.file_utils import ParseError, list_markdown_files, parse_frontmatter
from blogue.schema.model import Template
from blogue.schema.template import DateFormat, date_value, infer_date_format

MAX_EXAMPLES = 3

DATE_ALIASES = frozenset(
    {"date", "publishedAt", "publishDate", "pubDate", "published_at", "publish_date"}
)

# Lower-cased names whose default is a date in the corpus's own format
DATE_FIELD_NAMES = frozenset(
    {"date", "publishedat", "publishdate", "pubdate", "created", "updatedat", "modified", "lastmod"}
)


# --- Result Data Model ---


@dataclass
class FieldPattern:
    """Observed statistics for one frontmatter field."""

    field_name: str
    frequency: float  # occurrence count until normalized, then count / samples
    types: list[str] = field(default_factory=list)  # first-seen order
    examples: list[Any] = field(default_factory=list)  # at most MAX_EXAMPLES, distinct


@dataclass
class FrontmatterPattern:
    """Frequency tiers learned from a set of frontmatter samples."""

    common_fields: list[FieldPattern]
    required_fields: list[str]
    optional_fields: list[str]
    rare_fields: list[str]
    total_posts: int
    confidence: float

    def get(self, field_name: str) -> FieldPattern | None:
        return next((f for f in self.common_fields if f.field_name == field_name), None)


@dataclass
class DetectionResult:
    """Outcome of learning a pattern from a content directory."""

    pattern: FrontmatterPattern | None
    success: bool
    message: str
    suggested_template: Template | None = None
    warnings: list[str] = field(default_factory=list)
    preferred_date_format: DateFormat | None = None


# --- Directory Learning ---


def learn_pattern_from_directory(
    content_dir: str | Path,
    max_posts: int = 10,
    extensions: tuple[str, ...] = (".md",),
    required_threshold: float = 0.8,
    optional_threshold: float = 0.2,
) -> DetectionResult:
    """Analyze the most recent posts in a directory.

    Args:
        content_dir: Directory holding the posts.
        max_posts: Maximum number of files to read (newest first).
        extensions: Markdown file extensions to consider.
        required_threshold: Frequency at or above which a field is required.
        optional_threshold: Frequency at or above which a field is optional.

    Returns:
        A DetectionResult. Missing directories, empty directories and
        unreadable files are reported in it, never raised.
    """
    content_path = Path(content_dir)
    if not content_path.is_dir():
        return DetectionResult(
            pattern=None, success=False, message=f"Directory not found: {content_dir}"
        )

    files = list_markdown_files(content_path, extensions)[:max_posts]
    if not files:
        return DetectionResult(
            pattern=None, success=False, message="No markdown files found to analyze"
        )

    samples: list[dict[str, Any]] = []
    warnings: list[str] = []
    for file_path in files:
        try:
            metadata, _ = parse_frontmatter(file_path.read_text(encoding="utf-8"))
        except (ParseError, OSError, UnicodeDecodeError) as e:
            warning = f"Skipped {file_path.name}: {e}"
            logger.warning(warning)
            warnings.append(warning)
            continue
        if metadata:
            samples.append(metadata)

    if not samples:
        return DetectionResult(
            pattern=None,
            success=False,
            message="No valid frontmatter found in existing posts",
            warnings=warnings,
        )

    pattern = analyze_frontmatter_patterns(samples, required_threshold, optional_threshold)
    template, template_warnings = generate_pattern_template(pattern)

    logger.info(
        f"Learned frontmatter pattern from {content_dir}: "
        f"posts={pattern.total_posts}, confidence={pattern.confidence:.2f}"
    )
    return DetectionResult(
        pattern=pattern,
        success=True,
        message=f"Analyzed {len(samples)} posts, confidence: {round(pattern.confidence * 100)}%",
        suggested_template=template,
        warnings=warnings + template_warnings,
        preferred_date_format=preferred_date_format(pattern),
    )


# --- Pattern Analysis ---


def value_kind(value: Any) -> str:
    """Classify a frontmatter value; lists are `array`, not generic objects."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    # datetime is a date subclass, both are structured instants
    if isinstance(value, date):
        return "date"
    if isinstance(value, (list, tuple)):
        return "array"
    return "object"


def analyze_frontmatter_patterns(
    samples: list[dict[str, Any]],
    required_threshold: float = 0.8,
    optional_threshold: float = 0.2,
) -> FrontmatterPattern:
    """Count field occurrences across samples and bucket them into tiers."""
    total_posts = len(samples)
    counts: Counter[str] = Counter()
    patterns: dict[str, FieldPattern] = {}

    # Phase 1: accumulate
    for sample in samples:
        for field_name, value in sample.items():
            counts[field_name] += 1
            pattern = patterns.setdefault(field_name, FieldPattern(field_name=field_name, frequency=0))

            kind = value_kind(value)
            if kind not in pattern.types:
                pattern.types.append(kind)

            # Keyed by kind too, since True == 1
            if len(pattern.examples) < MAX_EXAMPLES and not any(
                value_kind(example) == kind and example == value for example in pattern.examples
            ):
                pattern.examples.append(value)

    # Phase 2: normalize
    for field_name, pattern in patterns.items():
        pattern.frequency = counts[field_name] / total_posts if total_posts else 0.0

    common_fields = list(patterns.values())
    required_fields: list[str] = []
    optional_fields: list[str] = []
    rare_fields: list[str] = []

    for pattern in common_fields:
        if pattern.frequency >= required_threshold:
            required_fields.append(pattern.field_name)
        elif pattern.frequency >= optional_threshold:
            optional_fields.append(pattern.field_name)
        else:
            rare_fields.append(pattern.field_name)

    return FrontmatterPattern(
        common_fields=common_fields,
        required_fields=required_fields,
        optional_fields=optional_fields,
        rare_fields=rare_fields,
        total_posts=total_posts,
        confidence=calculate_confidence(common_fields, total_posts, required_threshold),
    )


def calculate_confidence(
    fields: list[FieldPattern], total_posts: int, required_threshold: float = 0.8
) -> float:
    """Score how far the learned pattern can be trusted.

    Fewer than two samples say nothing about a distribution, so they get a
    flat 0.5. Otherwise start at 0.6 and add for a stable title (+0.2), a
    stable date alias (+0.2), at least three required fields (+0.1) and at
    least five samples (+0.1), capped at 1.0.
    """
    if total_posts < 2:
        return 0.5

    stable = [f for f in fields if f.frequency >= required_threshold]
    has_title = any(f.field_name == "title" for f in stable)
    has_date = any(f.field_name in DATE_ALIASES for f in stable)

    confidence = 0.6
    if has_title:
        confidence += 0.2
    if has_date:
        confidence += 0.2
    if len(stable) >= 3:
        confidence += 0.1
    if total_posts >= 5:
        confidence += 0.1

    return min(confidence, 1.0)


# --- Template Generation ---


def generate_pattern_template(pattern: FrontmatterPattern) -> tuple[Template, list[str]]:
    """Build a template from required then optional fields; rare fields are left out.

    Returns:
        The template and the notices for fields that were skipped.
    """
    template: Template = {}
    warnings: list[str] = []

    for field_name in pattern.required_fields + pattern.optional_fields:
        field_pattern = pattern.get(field_name)
        if field_pattern is None:
            continue

        if _only_empty_objects(field_pattern):
            warning = f"Skipping field '{field_name}' - all examples are empty objects"
            logger.debug(warning)
            warnings.append(warning)
            continue

        template[field_name] = default_value_for_field(field_pattern)

    return template, warnings


def default_value_for_field(field_pattern: FieldPattern) -> Any:
    """Default value by field-name convention, then by first observed type."""
    name = field_pattern.field_name.lower()

    if name == "title":
        return ""
    if name in DATE_FIELD_NAMES:
        return date_value(infer_date_format(field_pattern.examples))
    if name == "draft":
        return True
    if name in ("tags", "categories"):
        return []
    if name in ("author", "description"):
        return ""
    if name == "published":
        return False

    primary_type = field_pattern.types[0] if field_pattern.types else "string"
    if primary_type == "boolean":
        return False
    if primary_type == "number":
        return 0
    if primary_type == "array":
        return []
    if primary_type == "object":
        return {}
    if primary_type == "date":
        return date_value(infer_date_format(field_pattern.examples))
    return ""


def preferred_date_format(pattern: FrontmatterPattern) -> DateFormat | None:
    """Date representation shared by the corpus's date-like fields, if any."""
    examples = [
        example
        for f in pattern.common_fields
        if f.field_name.lower() in DATE_FIELD_NAMES
        for example in f.examples
    ]
    if not examples:
        return None
    return infer_date_format(examples)


def _only_empty_objects(field_pattern: FieldPattern) -> bool:
    return "object" in field_pattern.types and all(
        isinstance(example, dict) and not example for example in field_pattern.examples
    )


# --- Template Checks ---


@dataclass
class PatternCheck:
    """Result of checking a template against a learned pattern."""

    passed: bool
    missing_fields: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_against_pattern(template: Template, pattern: FrontmatterPattern) -> PatternCheck:
    """Report required fields a template lacks and values whose type the corpus never used."""
    missing_fields = [name for name in pattern.required_fields if name not in template]
    warnings: list[str] = []

    for field_name, value in template.items():
        field_pattern = pattern.get(field_name)
        if field_pattern is None:
            continue
        kind = value_kind(value)
        if kind not in field_pattern.types:
            warnings.append(
                f"Field '{field_name}' type '{kind}' differs from expected '{field_pattern.types[0]}'"
            )

    return PatternCheck(passed=not missing_fields, missing_fields=missing_fields, warnings=warnings)
