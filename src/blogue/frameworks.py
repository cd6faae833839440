"""Static site framework detection.

Each supported framework is a row in a signature table: groups of marker
files, package.json dependencies or directories, each adding a fixed
confidence increment when any of its names is present, plus the
framework's content conventions and template generator.

Astro is the only framework whose frontmatter schema can be read from the
project itself (its content collection config). Every other framework
contributes a fixed template.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Literal, Protocol

from loguru import logger

from blogue.schema.collections import SchemaAnalysis, analyze_schema_source
from blogue.schema.model import Collection, FieldModel, Template
from blogue.schema.template import DateFormat, date_value, synthesize_template
from blogue.utils import FilePath

ASTRO_CONFIG_CANDIDATES = (
    "src/content/config.ts",
    "src/content/config.mts",
    "src/content/config.js",
    "src/content/config.mjs",
    "src/content.config.ts",
    "src/content.config.mts",
    "src/content.config.js",
    "src/content.config.mjs",
)

SCHEMA_ANALYSIS_BONUS = 0.3
DEFAULT_CONTENT_DIR = "src/content/blog"


# --- Template generators ---


class TemplateGenerator(Protocol):
    """Produces the default frontmatter for a framework."""

    def generate_template(
        self, model: FieldModel | None, date_format: DateFormat | None = None
    ) -> Template: ...


@dataclass(frozen=True)
class StaticTemplateGenerator:
    """Fixed template built by a factory; the field model is ignored."""

    factory: Callable[[DateFormat | None], Template]

    def generate_template(
        self, model: FieldModel | None, date_format: DateFormat | None = None
    ) -> Template:
        return self.factory(date_format)


@dataclass(frozen=True)
class SchemaTemplateGenerator:
    """Template synthesized from a schema field model, with a fixed fallback."""

    fallback: TemplateGenerator | None = None

    def generate_template(
        self, model: FieldModel | None, date_format: DateFormat | None = None
    ) -> Template:
        if model is None or not model.success:
            if self.fallback is None:
                return {}
            return self.fallback.generate_template(None, date_format)
        return synthesize_template(model, date_format=date_format)


# --- Signature table ---


@dataclass(frozen=True)
class MarkerGroup:
    """Any-of markers worth a fixed confidence increment."""

    kind: Literal["file", "dependency", "directory"]
    names: tuple[str, ...]
    weight: float


@dataclass(frozen=True)
class ContentConfig:
    """Content conventions of a framework."""

    default_dir: str
    date_field: str
    draft_field: str | None = None
    published_field: str | None = None
    setup_docs: str = ""


@dataclass(frozen=True)
class FrameworkSignature:
    name: str
    markers: tuple[MarkerGroup, ...]
    content: ContentConfig
    generator: TemplateGenerator
    reads_schema: bool = False


def _calendar_default(date_format: DateFormat | None) -> date | str:
    return date_value(date_format or DateFormat.CALENDAR)


def _astro_template(date_format: DateFormat | None) -> Template:
    return {
        "title": "",
        "description": "",
        "publishedAt": date_value(date_format),
        "updatedAt": date_value(date_format),
        "tags": [],
        "draft": False,
    }


def _hugo_template(date_format: DateFormat | None) -> Template:
    return {
        "title": "",
        "publishDate": _calendar_default(date_format),
        "lastmod": _calendar_default(date_format),
        "description": "",
        "categories": [],
        "tags": [],
        "draft": False,
    }


def _jekyll_template(date_format: DateFormat | None) -> Template:
    return {
        "layout": "post",
        "title": "",
        "date": _calendar_default(date_format),
        "categories": [],
        "tags": [],
        "published": True,
    }


def _blog_template(date_format: DateFormat | None) -> Template:
    return {
        "title": "",
        "date": _calendar_default(date_format),
        "description": "",
        "tags": [],
        "draft": False,
    }


SIGNATURES: tuple[FrameworkSignature, ...] = (
    FrameworkSignature(
        name="Astro",
        markers=(
            MarkerGroup("file", ("astro.config.mjs", "astro.config.ts", "astro.config.js"), 0.4),
            MarkerGroup("dependency", ("astro",), 0.4),
            MarkerGroup("directory", ("src/content",), 0.2),
        ),
        content=ContentConfig(
            default_dir=DEFAULT_CONTENT_DIR,
            date_field="publishedAt",
            draft_field="draft",
            setup_docs="https://docs.astro.build/en/guides/content-collections/",
        ),
        generator=SchemaTemplateGenerator(fallback=StaticTemplateGenerator(_astro_template)),
        reads_schema=True,
    ),
    FrameworkSignature(
        name="Hugo",
        markers=(
            MarkerGroup(
                "file",
                ("hugo.toml", "hugo.yaml", "hugo.json", "config.toml", "config.yaml", "config.json"),
                0.5,
            ),
            MarkerGroup("directory", ("content",), 0.3),
            MarkerGroup("directory", ("themes",), 0.2),
        ),
        content=ContentConfig(
            default_dir="content/posts",
            date_field="publishDate",
            draft_field="draft",
            setup_docs="https://gohugo.io/content-management/front-matter/",
        ),
        generator=StaticTemplateGenerator(_hugo_template),
    ),
    FrameworkSignature(
        name="Jekyll",
        markers=(
            MarkerGroup("file", ("_config.yml",), 0.5),
            MarkerGroup("directory", ("_posts",), 0.3),
            MarkerGroup("file", ("Gemfile",), 0.2),
        ),
        content=ContentConfig(
            default_dir="_posts",
            date_field="date",
            published_field="published",
            setup_docs="https://jekyllrb.com/docs/front-matter/",
        ),
        generator=StaticTemplateGenerator(_jekyll_template),
    ),
    FrameworkSignature(
        name="Eleventy",
        markers=(
            MarkerGroup("file", (".eleventy.js", "eleventy.config.js", ".eleventy.config.js"), 0.5),
            MarkerGroup("dependency", ("@11ty/eleventy",), 0.4),
        ),
        content=ContentConfig(
            default_dir="src/posts",
            date_field="date",
            draft_field="draft",
            setup_docs="https://www.11ty.dev/docs/data-frontmatter/",
        ),
        generator=StaticTemplateGenerator(_blog_template),
    ),
    FrameworkSignature(
        name="Next.js",
        markers=(
            MarkerGroup("file", ("next.config.js", "next.config.mjs", "next.config.ts"), 0.4),
            MarkerGroup("dependency", ("next",), 0.5),
        ),
        content=ContentConfig(
            default_dir="posts",
            date_field="date",
            draft_field="draft",
            setup_docs="https://nextjs.org/blog/markdown",
        ),
        generator=StaticTemplateGenerator(_blog_template),
    ),
    FrameworkSignature(
        name="Gatsby",
        markers=(
            MarkerGroup("file", ("gatsby-config.js", "gatsby-config.ts"), 0.5),
            MarkerGroup("dependency", ("gatsby",), 0.4),
        ),
        content=ContentConfig(
            default_dir="content/blog",
            date_field="date",
            draft_field="draft",
            setup_docs="https://www.gatsbyjs.com/docs/how-to/routing/adding-markdown-pages/",
        ),
        generator=StaticTemplateGenerator(_blog_template),
    ),
)


# --- Detection results ---


@dataclass
class FrameworkInfo:
    """A framework found in the project."""

    name: str
    confidence: float
    detected_by: list[str]
    content_config: ContentConfig
    version: str | None = None
    template: Template = field(default_factory=dict)
    model: FieldModel | None = None


@dataclass
class FrameworkDetectionResult:
    frameworks: list[FrameworkInfo]  # Sorted by confidence, highest first
    primary: FrameworkInfo | None
    content_dir: str
    suggested_template: Template | None
    schema_model: FieldModel | None = None
    collections: list[Collection] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def get_collection(self, name: str) -> Collection | None:
        return next((c for c in self.collections if c.name == name), None)


def read_dependencies(project_root: FilePath) -> dict[str, str]:
    """Merged dependencies and devDependencies from package.json; empty if unreadable."""
    package_json = Path(project_root) / "package.json"
    if not package_json.is_file():
        return {}
    try:
        data: Any = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.debug(f"Ignoring malformed package.json: {e}")
        return {}
    if not isinstance(data, dict):
        return {}
    dependencies: dict[str, str] = {}
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            dependencies.update({str(k): str(v) for k, v in section.items()})
    return dependencies


def analyze_config(project_root: FilePath) -> SchemaAnalysis:
    """Read the Astro content collection config of a project.

    Args:
        project_root: Project directory

    Returns:
        A SchemaAnalysis; a missing config, a non-Astro project or an
        unreadable file is reported as unsuccessful, never raised.
    """
    root = Path(project_root)
    config_path = next(
        (root / candidate for candidate in ASTRO_CONFIG_CANDIDATES if (root / candidate).is_file()),
        None,
    )
    if config_path is None:
        return SchemaAnalysis(
            success=False, message="No Astro content config found at src/content/config.ts"
        )

    if "astro" not in read_dependencies(root):
        return SchemaAnalysis(success=False, message="Not an Astro project")

    try:
        source = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return SchemaAnalysis(success=False, message=f"Failed to read config: {e}")

    logger.debug(f"Analyzing content config {config_path}")
    return analyze_schema_source(source)


def detect_framework(
    project_root: FilePath | None = None, preferred_date_format: DateFormat | None = None
) -> FrameworkDetectionResult:
    """Detect static site frameworks in a project.

    Args:
        project_root: Project directory (defaults to the working directory)
        preferred_date_format: Date representation observed in existing posts

    Returns:
        Frameworks sorted by confidence, with the primary one's template and model.
    """
    root = Path(project_root) if project_root else Path.cwd()
    dependencies = read_dependencies(root)
    frameworks: list[FrameworkInfo] = []
    collections: list[Collection] = []
    warnings: list[str] = []

    for signature in SIGNATURES:
        confidence, detected_by, version = _match_markers(signature, root, dependencies)
        if confidence == 0:
            continue

        content = signature.content
        model: FieldModel | None = None

        if signature.reads_schema:
            analysis = analyze_config(root)
            warnings.extend(analysis.warnings)
            if analysis.success and analysis.collections:
                collections = analysis.collections
                first = collections[0]
                model = first.model
                content = ContentConfig(
                    default_dir=first.default_dir,
                    date_field=content.date_field,
                    draft_field=content.draft_field,
                    published_field=content.published_field,
                    setup_docs=content.setup_docs,
                )
                confidence += SCHEMA_ANALYSIS_BONUS
            elif any((root / candidate).is_file() for candidate in ASTRO_CONFIG_CANDIDATES):
                # A config exists but yielded nothing; fall back to the default template
                warning = f"Astro schema not used: {analysis.message}"
                logger.warning(warning)
                warnings.append(warning)
            else:
                logger.debug(f"{signature.name} schema analysis: {analysis.message}")

        confidence = round(min(confidence, 1.0), 2)
        template = signature.generator.generate_template(model, preferred_date_format)
        if model is None:
            model = FieldModel.from_template(template, confidence=confidence)
        else:
            model = FieldModel(
                fields=model.fields,
                success=model.success,
                message=model.message,
                confidence=confidence,
                warnings=list(model.warnings),
            )

        frameworks.append(
            FrameworkInfo(
                name=signature.name,
                confidence=confidence,
                detected_by=detected_by,
                content_config=content,
                version=version,
                template=template,
                model=model,
            )
        )

    # Stable sort keeps table order on ties
    frameworks.sort(key=lambda f: f.confidence, reverse=True)
    primary = frameworks[0] if frameworks else None

    return FrameworkDetectionResult(
        frameworks=frameworks,
        primary=primary,
        content_dir=primary.content_config.default_dir if primary else DEFAULT_CONTENT_DIR,
        suggested_template=dict(primary.template) if primary else None,
        schema_model=primary.model if primary else None,
        collections=collections if primary and primary.name == "Astro" else [],
        warnings=warnings,
    )


def _match_markers(
    signature: FrameworkSignature, root: Path, dependencies: dict[str, str]
) -> tuple[float, list[str], str | None]:
    confidence = 0.0
    detected_by: list[str] = []
    version: str | None = None

    for group in signature.markers:
        for name in group.names:
            if group.kind == "file" and (root / name).is_file():
                detected_by.append(name)
            elif group.kind == "directory" and (root / name).is_dir():
                detected_by.append(f"{name}/")
            elif group.kind == "dependency" and name in dependencies:
                detected_by.append(f"package.json:{name}")
                version = version or dependencies[name]
            else:
                continue
            confidence += group.weight
            break

    return confidence, detected_by, version
