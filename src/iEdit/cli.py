"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.table import Table

from .application.services.image_service import InMemoryImageServiceClient
from .core.crop import CropRegion
from .core.descriptor import parse_transformations
from .core.diff import diff as diff_transformations
from .core.transformations import TransformationStore
from .core.url_builder import build_url
from .errors import ConfigurationError, IEditError, MetadataInvalidError, SettingsError
from .io.placement import read_placement
from .settings.manager import SettingsManager
from .utils.logging import ensure_console_logger, get_logger

app = typer.Typer(help="Build and inspect image service transformation URLs")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ConfigurationError, MetadataInvalidError, SettingsError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except IEditError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")) -> None:
    ensure_console_logger(
        get_logger(),
        "iedit-cli",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


def _load_settings(path: Optional[Path]) -> SettingsManager:
    if path is None:
        return SettingsManager.from_mapping(None)
    manager = SettingsManager(path)
    manager.load()
    return manager


def _parse_crop(value: Optional[str]) -> Optional[CropRegion]:
    if not value:
        return None
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 4:
        raise typer.BadParameter("expected x,y,x2,y2")
    try:
        return CropRegion.from_value([float(part) for part in parts])
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
@_handle_errors
def url(
    image_identifier: str = typer.Argument(..., help="Image identifier on the image service"),
    transformation: List[str] = typer.Option([], "--transformation", "-t", help="Descriptor such as modulate:b=120"),
    crop: Optional[str] = typer.Option(None, "--crop", help="Crop rectangle x,y,x2,y2"),
    preview: bool = typer.Option(False, "--preview/--commit", help="Build a preview or a committed URL"),
    host: Optional[str] = typer.Option(None, "--host", help="Image service host"),
    user: Optional[str] = typer.Option(None, "--user"),
    private_key: Optional[str] = typer.Option(None, "--private-key"),
    settings_path: Optional[Path] = typer.Option(None, "--settings", exists=True, dir_okay=False),
) -> None:
    """Print the transformation URL for an image."""

    settings = _load_settings(settings_path)
    service = settings.image_service_config() or {}
    host = host or service.get("host")
    if not host:
        raise ConfigurationError("No image service host given; pass --host or configure image_service")

    client = InMemoryImageServiceClient(
        host,
        user or service.get("user"),
        private_key or service.get("private_key"),
    )
    store = TransformationStore()
    store.apply_descriptors(parse_transformations(transformation))

    built = build_url(
        client.get_image_url(image_identifier),
        diff_transformations(store.get(), store.defaults),
        _parse_crop(crop),
        preview=preview,
        max_output_width=settings.get("editor.output_max_width"),
        max_preview_width=settings.get("editor.max_preview_width"),
        max_preview_height=settings.get("editor.max_preview_height"),
        min_crop_size=settings.get("editor.min_crop_size"),
        image_format=settings.get("editor.output_format"),
    )
    typer.echo(built.to_string())


@app.command()
def parse(descriptors: List[str] = typer.Argument(..., help="Transformation descriptors")) -> None:
    """Show how descriptors are parsed."""

    table = Table("Operation", "Parameters")
    for descriptor in parse_transformations(descriptors):
        table.add_row(descriptor.name, json.dumps(descriptor.params))
    print(table)


@app.command()
def diff(
    transformation: List[str] = typer.Option([], "--transformation", "-t", help="Descriptor such as modulate:b=120"),
) -> None:
    """Print the parameters that differ from the defaults, as JSON."""

    store = TransformationStore()
    store.apply_descriptors(parse_transformations(transformation))
    typer.echo(json.dumps(diff_transformations(store.get(), store.defaults), sort_keys=False))


@app.command()
@_handle_errors
def inspect(markup_file: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Print the placement metadata embedded in a committed reference."""

    metadata = read_placement(markup_file.read_text(encoding="utf-8"))
    if metadata is None:
        print("[yellow]No image reference found")
        raise typer.Exit(1)
    typer.echo(json.dumps(metadata.to_dict(), indent=2))


if __name__ == "__main__":  # pragma: no cover
    app()
