"""Schema commands for blogue.

`analyze` learns the frontmatter pattern of existing posts, `schema` reads
the Astro content collection config, `detect` lists the frameworks found
in a project.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from blogue.cli.app import app
from blogue.config import ConfigManager
from blogue.file_utils import dump_post
from blogue.frameworks import analyze_config, detect_framework
from blogue.schema.inference import learn_pattern_from_directory
from blogue.schema.model import FieldModel
from blogue.schema.template import synthesize_template

console = Console()

ProjectRoot = Annotated[Optional[Path], typer.Option("--project-root", help="Project directory")]


def _print_template(template: dict) -> None:
    console.print("\n[bold]Suggested frontmatter:[/bold]")
    # YAML flow lists would otherwise read as rich markup
    console.print(dump_post(template, "").rstrip(), markup=False)


def _field_table(title: str, model: FieldModel) -> Table:
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Required", justify="center")
    table.add_column("Default")

    for schema_field in model.fields:
        field_type = schema_field.type.value
        if schema_field.item_type is not None:
            field_type = f"{field_type}<{schema_field.item_type.value}>"
        table.add_row(
            schema_field.name,
            field_type,
            "yes" if schema_field.required else "",
            json.dumps(schema_field.default_value, default=str)
            if schema_field.has_default
            else "",
        )
    return table


# --- Analyze ---


@app.command()
def analyze(
    content_dir: Annotated[
        Optional[Path], typer.Argument(help="Directory of existing posts")
    ] = None,
    max_posts: Annotated[
        Optional[int], typer.Option("--max-posts", "-n", help="Number of recent posts to read")
    ] = None,
    project_root: ProjectRoot = None,
):
    """Learn the frontmatter pattern of existing posts."""
    root = project_root or Path.cwd()
    config = ConfigManager(root).load()
    directory = content_dir or root / config.content_dir

    detection = learn_pattern_from_directory(
        directory,
        max_posts=max_posts or config.max_posts,
        extensions=tuple(config.markdown_extensions),
        required_threshold=config.required_threshold,
        optional_threshold=config.optional_threshold,
    )
    for warning in detection.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")

    if not detection.success or detection.pattern is None:
        console.print(f"[red]{detection.message}[/red]")
        raise typer.Exit(1)

    pattern = detection.pattern
    console.print(f"\n[bold]{detection.message}[/bold]\n")

    table = Table(title="Field Frequencies")
    table.add_column("Field", style="cyan")
    table.add_column("Frequency", justify="right")
    table.add_column("Tier")
    table.add_column("Types")

    for field_pattern in pattern.common_fields:
        if field_pattern.field_name in pattern.required_fields:
            tier = "[green]required[/green]"
        elif field_pattern.field_name in pattern.optional_fields:
            tier = "[yellow]optional[/yellow]"
        else:
            tier = "[dim]rare[/dim]"
        table.add_row(
            field_pattern.field_name,
            f"{field_pattern.frequency:.0%}",
            tier,
            ", ".join(field_pattern.types),
        )

    console.print(table)
    if detection.suggested_template is not None:
        _print_template(detection.suggested_template)


# --- Schema ---


@app.command()
def schema(
    collection: Annotated[
        Optional[str], typer.Option(help="Only show this collection")
    ] = None,
    show_template: bool = typer.Option(
        False, "--template", help="Print the frontmatter synthesized from each collection"
    ),
    project_root: ProjectRoot = None,
):
    """Show the fields declared by the Astro content collection config."""
    analysis = analyze_config(project_root or Path.cwd())
    for warning in analysis.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")

    if not analysis.success:
        console.print(f"[red]{analysis.message}[/red]")
        raise typer.Exit(1)

    collections = analysis.collections
    if collection is not None:
        found = analysis.get(collection)
        if found is None:
            names = ", ".join(c.name for c in analysis.collections)
            console.print(f"[red]Collection '{collection}' not found. Available: {names}[/red]")
            raise typer.Exit(1)
        collections = [found]

    console.print(f"[bold]{analysis.message}[/bold]")
    for item in collections:
        console.print(_field_table(f"{item.name} ({item.kind}, {item.default_dir})", item.model))
        if show_template:
            _print_template(synthesize_template(item.model))


# --- Detect ---


@app.command()
def detect(project_root: ProjectRoot = None):
    """Detect static site frameworks in a project."""
    result = detect_framework(project_root or Path.cwd())
    for warning in result.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")

    if result.primary is None:
        console.print("[yellow]No framework detected.[/yellow]")
        console.print(f"New posts go to {result.content_dir} with the minimal template.")
        return

    table = Table(title="Detected Frameworks")
    table.add_column("Framework", style="cyan")
    table.add_column("Confidence", justify="right")
    table.add_column("Version")
    table.add_column("Detected by")

    for info in result.frameworks:
        table.add_row(
            info.name,
            f"{info.confidence:.0%}",
            info.version or "",
            ", ".join(info.detected_by),
        )

    console.print(table)
    primary = result.primary
    console.print(f"\nPrimary: [bold]{primary.name}[/bold]")
    console.print(f"Content directory: {result.content_dir}")
    if result.collections:
        console.print(f"Collections: {', '.join(c.name for c in result.collections)}")
    console.print(f"Docs: {primary.content_config.setup_docs}")
    if result.suggested_template is not None:
        _print_template(result.suggested_template)
