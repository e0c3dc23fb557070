"""Command-line entry point: wxapigen -i spec.yaml -o api.js [-b URL]."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .codegen import generate, write_module
from .config import get_settings
from .errors import WxApiGenError
from .loader import check_openapi_version, get_base_url, load_spec
from .log import configure_logging

app = typer.Typer(
    name="wxapigen",
    help="Convert an OpenAPI 3.0.x spec into wx.request client functions.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wxapigen {__version__}")
        raise typer.Exit()


@app.command()
def main(
    input_path: str = typer.Option(
        ..., "--input", "-i", help="Path or URL of the OpenAPI spec (JSON or YAML)."
    ),
    output_path: Path = typer.Option(
        ..., "--output", "-o", help="Output JavaScript file path."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="Base URL for API requests."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Generate a wx.request API client module from an OpenAPI spec."""
    try:
        settings = get_settings()
        configure_logging("DEBUG" if verbose else settings.log_level)
        spec = load_spec(input_path, timeout=settings.http_timeout)
        check_openapi_version(spec)
        source, method_count = generate(spec, get_base_url(spec, base_url or settings.base_url))
        write_module(source, output_path)
    except WxApiGenError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=exc.exit_code) from exc

    typer.echo(
        f"Successfully generated wx.request functions at {output_path} ({method_count} methods)"
    )
