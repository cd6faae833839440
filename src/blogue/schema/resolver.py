"""Template source resolution for blogue.

Decides whether a new post's frontmatter follows the learned pattern of
existing posts or the schema-derived field model, in this order:
  1. No schema model        -> learned pattern, else the minimal template
  2. Pattern unusable       -> schema model
  3. Pattern conflicts      -> schema model (empty object in an optional object/image field)
  4. Weak pattern, strong schema (< 0.7 vs > 0.8) -> schema model
  5. Otherwise              -> learned pattern

The order matters: reordering the rules changes which template wins when
both sources are plausible.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, TypeAlias

from loguru import logger

from blogue.schema.inference import DetectionResult
from blogue.schema.model import FieldModel, FieldType, Template
from blogue.schema.template import DateFormat, minimal_template, synthesize_template

ResolutionSource: TypeAlias = Literal["pattern", "schema", "fallback"]

LOW_PATTERN_CONFIDENCE = 0.7
HIGH_SCHEMA_CONFIDENCE = 0.8


@dataclass
class Resolution:
    """The winning field model and the template synthesized from it."""

    source: ResolutionSource
    model: FieldModel
    template: Template
    reason: str
    warnings: list[str] = field(default_factory=list)


def resolve_preferred_model(
    detection: DetectionResult | None,
    schema_model: FieldModel | None,
    date_format: DateFormat | None = None,
    now: datetime | None = None,
) -> Resolution:
    """Pick the template source for a new post.

    Args:
        detection: Pattern learned from existing posts, if any were read.
        schema_model: Field model from the framework schema or signature table.
        date_format: Date representation for synthesized date fields. Defaults
            to the one the learned pattern observed.
        now: Clock override for synthesized dates.

    Returns:
        A Resolution naming which source won and why.
    """
    warnings = list(detection.warnings) if detection else []
    if date_format is None and detection is not None:
        date_format = detection.preferred_date_format

    pattern_usable = bool(
        detection is not None
        and detection.success
        and detection.pattern is not None
        and detection.suggested_template
    )
    schema_usable = schema_model is not None and schema_model.success

    # --- 1. No schema model ---
    # Trigger: no framework schema was found (or it failed)
    # Outcome: learned pattern if it has a template, else the minimal default shape
    if not schema_usable:
        if pattern_usable:
            return _pattern_resolution(detection, "No schema model, using learned pattern", warnings)
        template = minimal_template(date_format, now)
        reason = "No schema model or learned pattern, using minimal template"
        if detection is not None and not detection.success:
            reason = f"{reason} ({detection.message})"
        logger.warning(reason)
        warnings.append(reason)
        return Resolution(
            source="fallback",
            model=FieldModel.from_template(template, confidence=0.0),
            template=template,
            reason=reason,
            warnings=warnings,
        )

    assert schema_model is not None

    # --- 2. Pattern unusable ---
    # Trigger: no posts, no frontmatter, or an empty suggested template
    # Outcome: schema model
    if not pattern_usable:
        reason = "Pattern detection produced no template, using schema model"
        if detection is not None and not detection.success:
            reason = f"{reason} ({detection.message})"
        return _schema_resolution(schema_model, reason, warnings, date_format, now)

    assert detection is not None and detection.pattern is not None
    assert detection.suggested_template is not None

    # --- 3. Pattern conflicts with schema ---
    # Trigger: pattern suggests {} for a field the schema types as optional object/image
    # Outcome: schema model, the suggested value would fail schema validation
    conflicts = detect_schema_conflicts(detection.suggested_template, schema_model)
    if conflicts:
        reason = (
            f"Pattern template conflicts with schema on {', '.join(conflicts)}, using schema model"
        )
        logger.info(reason)
        warnings.append(reason)
        return _schema_resolution(schema_model, reason, warnings, date_format, now)

    # --- 4. Weak pattern, strong schema ---
    pattern_confidence = detection.pattern.confidence
    if (
        pattern_confidence < LOW_PATTERN_CONFIDENCE
        and schema_model.confidence > HIGH_SCHEMA_CONFIDENCE
    ):
        reason = (
            f"Pattern confidence {pattern_confidence:.2f} is low and schema confidence "
            f"{schema_model.confidence:.2f} is high, using schema model"
        )
        return _schema_resolution(schema_model, reason, warnings, date_format, now)

    # --- 5. Learned pattern ---
    return _pattern_resolution(
        detection, f"Using learned pattern (confidence {pattern_confidence:.2f})", warnings
    )


def detect_schema_conflicts(template: Template, model: FieldModel) -> list[str]:
    """Names of template fields holding {} where the schema expects an optional object or image."""
    conflicts: list[str] = []
    for field_name, value in template.items():
        schema_field = model.get(field_name)
        if schema_field is None or schema_field.required:
            continue
        if schema_field.type not in (FieldType.OBJECT, FieldType.IMAGE):
            continue
        if isinstance(value, dict) and not value:
            conflicts.append(field_name)
    return conflicts


def _pattern_resolution(
    detection: DetectionResult, reason: str, warnings: list[str]
) -> Resolution:
    assert detection.pattern is not None and detection.suggested_template is not None
    template = dict(detection.suggested_template)
    return Resolution(
        source="pattern",
        model=FieldModel.from_template(template, confidence=detection.pattern.confidence),
        template=template,
        reason=reason,
        warnings=warnings,
    )


def _schema_resolution(
    model: FieldModel,
    reason: str,
    warnings: list[str],
    date_format: DateFormat | None,
    now: datetime | None,
) -> Resolution:
    return Resolution(
        source="schema",
        model=model,
        template=synthesize_template(model, date_format=date_format, now=now),
        reason=reason,
        warnings=warnings + list(model.warnings),
    )
