"""CLI interface for Docsite.

Command-line tool for building, previewing and exercising API documentation.
"""

import asyncio
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from docsite.config import CliSettings, Config
from docsite.exceptions import DocsiteError
from docsite.playground.client import Playground
from docsite.playground.request import RequestDescriptor
from docsite.playground.snippets import LANGUAGES, generate_snippet, generate_snippets


@click.group()
def cli() -> None:
    """Docsite - API reference sites from Markdown."""


def _site_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by commands that build the site."""
    options = [
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(exists=True, path_type=Path),
            default=None,
            help="Path to configuration file (default: auto-discover docsite.toml)",
        ),
        click.option(
            "--source-dir",
            "-s",
            type=click.Path(exists=True, path_type=Path, file_okay=False),
            default=None,
            help="Content source directory (overrides config)",
        ),
        click.option(
            "--output-dir",
            "-o",
            type=click.Path(path_type=Path, file_okay=False),
            default=None,
            help="Build output directory (overrides config)",
        ),
        click.option(
            "--manifest",
            "-m",
            default=None,
            help="Manifest file relative to the source directory (overrides config)",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable debug logging",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(error: Exception) -> None:
    click.echo(click.style(f"Error: {error}", fg="red"), err=True)
    sys.exit(1)


@cli.command()
@_site_options
def build(
    config_path: Path | None,
    source_dir: Path | None,
    output_dir: Path | None,
    manifest: str | None,
    verbose: bool,
) -> None:
    """Build the static site."""
    from docsite.core.builder import SiteBuilder

    _configure_logging(verbose)
    try:
        cli_settings = CliSettings(
            source_dir=source_dir,
            output_dir=output_dir,
            manifest=manifest,
        )
        config = Config.load(config_path, cli_settings)
        result = SiteBuilder(config).build()
    except (DocsiteError, OSError, ValueError) as e:
        _fail(e)
        return

    click.echo(
        click.style(
            f"Built {len(result.pages)} pages into {result.output_dir}",
            fg="green",
        )
    )


@cli.command()
@_site_options
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    output_dir: Path | None,
    manifest: str | None,
    verbose: bool,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
) -> None:
    """Build the site and start the preview server."""
    from docsite.server import run_server

    _configure_logging(verbose)
    try:
        cli_settings = CliSettings(
            source_dir=source_dir,
            output_dir=output_dir,
            manifest=manifest,
            host=host,
            port=port,
            live_reload_enabled=live_reload,
        )
        config = Config.load(config_path, cli_settings)

        click.echo(f"Starting server on {config.server.host}:{config.server.port}")
        click.echo(f"Source directory: {config.site.source_dir}")
        click.echo(f"Output directory: {config.site.output_dir}")
        if config.live_reload.enabled:
            click.echo("Live reload: enabled")
        else:
            click.echo("Live reload: disabled")

        run_server(config)
    except (DocsiteError, OSError, ValueError) as e:
        _fail(e)


def _request_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Arguments and options describing one playground request."""
    options = [
        click.argument("method"),
        click.argument("url"),
        click.option(
            "--header",
            "-H",
            "headers",
            multiple=True,
            help='Request header as "Name: value" (repeatable)',
        ),
        click.option(
            "--data",
            "-d",
            "body",
            default=None,
            help="Request body (ignored for GET)",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, separator, header_value = value.partition(":")
        if not separator or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {value!r}", param_hint="--header")
        headers[name.strip()] = header_value.strip()
    return headers


def _build_request(
    method: str,
    url: str,
    headers: tuple[str, ...],
    body: str | None,
    defaults: dict[str, str] | None = None,
) -> RequestDescriptor:
    return RequestDescriptor.for_endpoint(
        method,
        url,
        headers={**(defaults or {}), **_parse_headers(headers)},
        body=body,
    )


@cli.command("try")
@_request_options
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Request timeout in seconds (overrides config)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docsite.toml)",
)
def try_request(
    method: str,
    url: str,
    headers: tuple[str, ...],
    body: str | None,
    timeout: float | None,
    config_path: Path | None,
) -> None:
    """Send a request the way the playground does and print the response."""
    try:
        config = Config.load(config_path)
        request = _build_request(method, url, headers, body, config.playground.headers)
    except (OSError, ValueError) as e:
        _fail(e)
        return

    playground = Playground(
        request,
        timeout=timeout if timeout is not None else config.playground.timeout,
    )
    response = asyncio.run(playground.submit())

    color = "green" if response.ok else "red"
    click.echo(click.style(f"{response.status} {response.status_text}", fg=color, bold=True))
    click.echo(f"Time: {response.elapsed_ms:.0f} ms")
    if response.headers:
        click.echo("\nHeaders:")
        click.echo(response.format_headers())
    click.echo("\nBody:")
    click.echo(response.format_data())

    if response.is_network_error:
        sys.exit(1)


@cli.command()
@_request_options
@click.option(
    "--language",
    "-l",
    type=click.Choice([*LANGUAGES, "all"], case_sensitive=False),
    default="all",
    help="Snippet language (default: all)",
)
def snippet(
    method: str,
    url: str,
    headers: tuple[str, ...],
    body: str | None,
    language: str,
) -> None:
    """Print code that sends the given request."""
    try:
        request = _build_request(method, url, headers, body)
    except ValueError as e:
        _fail(e)
        return

    if language.lower() != "all":
        click.echo(generate_snippet(language, request))
        return

    for name, code in generate_snippets(request).items():
        click.echo(click.style(f"--- {name} ---", fg="cyan", bold=True))
        click.echo(code)


if __name__ == "__main__":
    cli()
