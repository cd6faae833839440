"""Frontmatter schema system for blogue.

Reads Astro content collection schemas without running them, learns
frontmatter patterns from existing posts, and decides which of the two
(or a minimal default) shapes a new post.
"""

from blogue.schema.collections import (
    CollectionDefinition,
    SchemaAnalysis,
    analyze_schema_source,
    parse_schema_source,
)
from blogue.schema.errors import (
    SchemaError,
    SchemaEvaluationError,
    SchemaParseError,
    SchemaSyntaxError,
)
from blogue.schema.inference import (
    DetectionResult,
    FieldPattern,
    FrontmatterPattern,
    analyze_frontmatter_patterns,
    calculate_confidence,
    generate_pattern_template,
    learn_pattern_from_directory,
)
from blogue.schema.model import (
    Collection,
    FieldModel,
    FieldType,
    SchemaField,
    Template,
)
from blogue.schema.resolver import (
    Resolution,
    detect_schema_conflicts,
    resolve_preferred_model,
)
from blogue.schema.template import (
    DateFormat,
    minimal_template,
    synthesize_template,
)
from blogue.schema.validator import (
    ValidationResult,
    validate_content,
    validate_frontmatter,
    validate_post,
    validate_quick,
)

__all__ = [
    # Model
    "Collection",
    "FieldModel",
    "FieldType",
    "SchemaField",
    "Template",
    # Errors
    "SchemaError",
    "SchemaEvaluationError",
    "SchemaParseError",
    "SchemaSyntaxError",
    # Collections
    "CollectionDefinition",
    "SchemaAnalysis",
    "analyze_schema_source",
    "parse_schema_source",
    # Inference
    "DetectionResult",
    "FieldPattern",
    "FrontmatterPattern",
    "analyze_frontmatter_patterns",
    "calculate_confidence",
    "generate_pattern_template",
    "learn_pattern_from_directory",
    # Template
    "DateFormat",
    "minimal_template",
    "synthesize_template",
    # Resolver
    "Resolution",
    "detect_schema_conflicts",
    "resolve_preferred_model",
    # Validator
    "ValidationResult",
    "validate_content",
    "validate_frontmatter",
    "validate_post",
    "validate_quick",
]
