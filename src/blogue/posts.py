"""Post creation and publishing.

A new post's frontmatter comes from the best available source: the
pattern learned from existing posts, the framework's schema or template,
or a minimal default shape. Which one wins is decided by
`resolve_preferred_model`; this module gathers the inputs, applies the
user's values on top and writes the file.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from blogue.config import BlogueConfig, ConfigManager
from blogue.file_utils import dump_post, read_post, write_file_atomic
from blogue.frameworks import FrameworkDetectionResult, detect_framework
from blogue.schema.inference import DATE_ALIASES, DetectionResult, learn_pattern_from_directory
from blogue.schema.model import FieldModel, Template
from blogue.schema.resolver import ResolutionSource, resolve_preferred_model
from blogue.schema.template import date_value, infer_date_format
from blogue.utils import FilePath, generate_slug

PLACEHOLDER_BODY = "Write your blog post content here..."


class PostOptions(BaseModel):
    """What the user asked for when creating a post."""

    title: str = Field(min_length=1)
    content_dir: str | None = None  # Relative to project_root; config default when unset
    project_root: Path | None = None
    author: str = ""
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    draft: bool = True
    collection_name: str | None = None
    overwrite: bool = False


@dataclass
class CreatedPost:
    path: Path
    source: ResolutionSource
    reason: str
    frontmatter: Template
    warnings: list[str] = field(default_factory=list)


async def create_post(options: PostOptions, config: BlogueConfig | None = None) -> CreatedPost:
    """Create a new post with inferred frontmatter.

    Args:
        options: Title and overrides for the new post
        config: Settings; loaded from the project when omitted

    Returns:
        The written path, the template source that won and any degraded-path notices

    Raises:
        FileExistsError: If a post with the same slug exists and overwrite is off
        FileWriteError: If the file cannot be written
    """
    root = options.project_root or Path.cwd()
    config = config or ConfigManager(root).load()
    content_dir = options.content_dir or config.content_dir
    warnings: list[str] = []

    detection = _learn(root / content_dir, config)
    frameworks = detect_framework(root, detection.preferred_date_format)
    warnings.extend(frameworks.warnings)
    schema_model = frameworks.schema_model

    # An explicit collection brings its own model and directory
    if options.collection_name:
        collection = frameworks.get_collection(options.collection_name)
        if collection is None:
            warning = f"Collection '{options.collection_name}' not found, using defaults"
            logger.warning(warning)
            warnings.append(warning)
        else:
            schema_model = _with_confidence(collection.model, frameworks)
            if options.content_dir is None:
                content_dir = collection.default_dir
                detection = _learn(root / content_dir, config)

    resolution = resolve_preferred_model(detection, schema_model)
    warnings.extend(resolution.warnings)
    logger.info(f"Frontmatter source: {resolution.source} ({resolution.reason})")

    frontmatter = apply_overrides(
        resolution.template,
        options,
        default_author=config.default_author,
        frameworks=frameworks if resolution.source == "schema" else None,
    )

    slug = generate_slug(options.title) or "untitled"
    path = root / content_dir / f"{slug}.md"
    if path.exists() and not options.overwrite:
        raise FileExistsError(f"Post already exists: {path}")

    body = f"# {options.title}\n\n{PLACEHOLDER_BODY}\n"
    await write_file_atomic(path, dump_post(frontmatter, body))
    logger.info(f"Created post {path}")

    return CreatedPost(
        path=path,
        source=resolution.source,
        reason=resolution.reason,
        frontmatter=frontmatter,
        warnings=warnings,
    )


def apply_overrides(
    template: Template,
    options: PostOptions,
    default_author: str = "",
    frameworks: FrameworkDetectionResult | None = None,
) -> Template:
    """Merge user values into a template.

    Title always wins; author, tags and description only when given. The
    draft flag goes to the draft field, or inverted to the published field.
    """
    frontmatter = dict(template)
    frontmatter["title"] = options.title

    author = options.author or default_author
    if author:
        frontmatter["author"] = author
    if options.tags:
        frontmatter["tags"] = list(options.tags)
    if options.description:
        frontmatter["description"] = options.description

    draft_field, published_field = "draft", "published"
    if frameworks is not None and frameworks.primary is not None:
        content = frameworks.primary.content_config
        draft_field = content.draft_field or draft_field
        published_field = content.published_field or published_field

    if draft_field in frontmatter:
        frontmatter[draft_field] = options.draft
    elif published_field in frontmatter:
        frontmatter[published_field] = not options.draft

    return frontmatter


async def publish_post(path: FilePath, publish_date: date | datetime | None = None) -> Template:
    """Mark a post as published, optionally stamping its date.

    The new date keeps the representation the post already uses.

    Raises:
        FileNotFoundError: If the post does not exist
    """
    metadata, body = read_post(path)

    if "draft" in metadata or "published" not in metadata:
        metadata["draft"] = False
    if "published" in metadata:
        metadata["published"] = True

    if publish_date is not None:
        date_field = next((name for name in metadata if name in DATE_ALIASES), "date")
        existing = metadata.get(date_field)
        moment = (
            publish_date
            if isinstance(publish_date, datetime)
            else datetime.combine(publish_date, time(), tzinfo=timezone.utc)
        )
        date_format = infer_date_format([existing if existing is not None else publish_date])
        metadata[date_field] = date_value(date_format, now=moment)

    await write_file_atomic(path, dump_post(metadata, body))
    logger.info(f"Published {path}")
    return metadata


async def unpublish_post(path: FilePath) -> Template:
    """Mark a post as a draft again.

    Raises:
        FileNotFoundError: If the post does not exist
    """
    metadata, body = read_post(path)

    metadata["draft"] = True
    if "published" in metadata:
        metadata["published"] = False

    await write_file_atomic(path, dump_post(metadata, body))
    logger.info(f"Unpublished {path}")
    return metadata


def get_post_meta(path: FilePath) -> dict[str, Any]:
    """Frontmatter of a post plus its slug.

    Raises:
        FileNotFoundError: If the post does not exist
    """
    metadata, _ = read_post(path)
    return {**metadata, "slug": generate_slug(str(metadata.get("title") or ""))}


def _learn(content_path: Path, config: BlogueConfig) -> DetectionResult:
    return learn_pattern_from_directory(
        content_path,
        max_posts=config.max_posts,
        extensions=tuple(config.markdown_extensions),
        required_threshold=config.required_threshold,
        optional_threshold=config.optional_threshold,
    )


def _with_confidence(model: FieldModel, frameworks: FrameworkDetectionResult) -> FieldModel:
    confidence = frameworks.primary.confidence if frameworks.primary else model.confidence
    return FieldModel(
        fields=model.fields,
        success=model.success,
        message=model.message,
        confidence=confidence,
        warnings=list(model.warnings),
    )
