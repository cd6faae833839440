"""Post commands for blogue: new, publish, unpublish, validate."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from blogue.cli.app import app
from blogue.file_utils import FileError
from blogue.frameworks import detect_framework
from blogue.posts import PostOptions, create_post, publish_post, unpublish_post
from blogue.schema.validator import ValidationResult, validate_post, validate_quick

console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]


@app.command()
def new(
    title: Annotated[str, typer.Argument(help="Title of the new post")],
    content_dir: Annotated[
        Optional[str],
        typer.Option("--dir", "-d", help="Content directory, relative to the project root"),
    ] = None,
    author: Annotated[str, typer.Option(help="Post author")] = "",
    tags: Annotated[
        Optional[List[str]], typer.Option("--tag", "-t", help="Tag (repeatable)")
    ] = None,
    description: Annotated[str, typer.Option(help="Short description")] = "",
    publish: bool = typer.Option(False, "--publish", help="Create the post as published"),
    collection: Annotated[
        Optional[str], typer.Option(help="Astro content collection to follow")
    ] = None,
    project_root: Annotated[
        Optional[Path], typer.Option("--project-root", help="Project directory")
    ] = None,
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing post"),
):
    """Create a new post with frontmatter inferred from the project."""
    try:
        options = PostOptions(
            title=title,
            content_dir=content_dir,
            project_root=project_root,
            author=author,
            tags=tags or [],
            description=description,
            draft=not publish,
            collection_name=collection,
            overwrite=overwrite,
        )
        created = asyncio.run(create_post(options))
    except ValidationError as e:
        console.print(f"[red]Invalid options: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(1)
    except (FileExistsError, FileError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Created {created.path}[/green]")
    console.print(f"Frontmatter source: [cyan]{created.source}[/cyan] ({created.reason})")
    for warning in created.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")


@app.command(name="publish")
def publish_command(
    path: Annotated[Path, typer.Argument(help="Post to publish")],
    publish_date: Annotated[
        Optional[datetime],
        typer.Option("--date", formats=DATE_FORMATS, help="Publication date to stamp"),
    ] = None,
):
    """Mark a post as published."""
    if publish_date is not None and publish_date.tzinfo is None:
        publish_date = publish_date.replace(tzinfo=timezone.utc)
    try:
        asyncio.run(publish_post(path, publish_date))
    except (FileNotFoundError, FileError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Published {path}[/green]")


@app.command(name="unpublish")
def unpublish_command(path: Annotated[Path, typer.Argument(help="Post to turn back into a draft")]):
    """Mark a post as a draft."""
    try:
        asyncio.run(unpublish_post(path))
    except (FileNotFoundError, FileError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Unpublished {path}[/green]")


@app.command()
def validate(
    paths: Annotated[List[Path], typer.Argument(help="Posts to validate")],
    quick: bool = typer.Option(False, "--quick", help="Only check that a title is present"),
    use_schema: bool = typer.Option(
        False, "--use-schema", help="Validate against the detected framework's field model"
    ),
    project_root: Annotated[
        Optional[Path], typer.Option("--project-root", help="Project directory")
    ] = None,
):
    """Validate post frontmatter and content.

    Exits with code 1 if any post has errors.
    """
    model = None
    if use_schema and not quick:
        detection = detect_framework(project_root)
        model = detection.schema_model
        if model is None:
            console.print("[yellow]No framework detected, using default rules[/yellow]")

    results: list[tuple[Path, ValidationResult]] = []
    for path in paths:
        result = validate_quick(path) if quick else validate_post(path, model)
        logger.debug(f"Validated {path}: passed={result.passed}")
        results.append((path, result))

    table = Table(title="Post Validation")
    table.add_column("Post", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Warnings", justify="right")
    table.add_column("Errors", justify="right")

    for path, result in results:
        if result.passed and not result.warnings:
            status = "[green]pass[/green]"
        elif result.passed:
            status = "[yellow]warn[/yellow]"
        else:
            status = "[red]fail[/red]"
        table.add_row(str(path), status, str(len(result.warnings)), str(len(result.errors)))

    console.print(table)

    for path, result in results:
        for error in result.errors:
            console.print(f"[red]{path}: {error}[/red]")
        for warning in result.warnings:
            console.print(f"[yellow]{path}: {warning}[/yellow]")

    if any(not result.passed for _, result in results):
        raise typer.Exit(1)
