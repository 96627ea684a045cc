"""CLI entry point for simple-msf."""

from pathlib import Path

import click

from simple_msf import __version__
from simple_msf.config import get_settings, load_config, require_definition, require_docs
from simple_msf.errors import MsfConfigError
from simple_msf.openapi.document import OPENAPI_VERSION, compile_document
from simple_msf.openapi.writer import FORMATS, write_document


def _generate(config_path: Path, section: str, output_dir: Path | None, fmt: str | None, strict: bool) -> Path:
    settings = get_settings()
    config = load_config(config_path)
    if section == "openapi":
        definition, configured_dir = require_definition(config, source=config_path.name)
    else:
        definition, configured_dir = require_docs(config, source=config_path.name)

    click.echo(f"\nGenerating openapi {OPENAPI_VERSION} documentation...")
    document = compile_document(definition, strict=strict)
    return write_document(
        document,
        output_dir=output_dir or configured_dir,
        file_name=settings.output_file_name,
        fmt=fmt or settings.output_format,
    )


def _run(config_path: Path | None, section: str, output_dir: Path | None, fmt: str | None, strict: bool) -> None:
    config_path = config_path or get_settings().config_file
    try:
        path = _generate(config_path, section, output_dir, fmt, strict)
    except MsfConfigError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Documentation generated successfully. Path: {path}\n")


config_option = click.option(
    "-c", "--config", "config_path", default=None, type=click.Path(path_type=Path),
    help="Configuration module (default: $MSF_CONFIG_FILE or msf_config.py).",
)
output_option = click.option(
    "-o", "--output-dir", default=None, type=click.Path(path_type=Path),
    help="Directory for the generated document (overrides the configured one).",
)
format_option = click.option(
    "--format", "fmt", default=None, type=click.Choice(FORMATS), help="Output format (default: yaml).",
)
strict_option = click.option(
    "--strict", is_flag=True, default=False, help="Fail on schema references that are not registered.",
)


@click.group()
@click.version_option(__version__, prog_name="simple-msf")
def main():
    """simple-msf: a simple framework for building serverless microservices."""
    pass


@main.command()
@config_option
@output_option
@format_option
@strict_option
def openapi_gen(config_path: Path | None, output_dir: Path | None, fmt: str | None, strict: bool):
    """Generate OpenAPI documentation from the "openapi" section."""
    _run(config_path, "openapi", output_dir, fmt, strict)


@main.command()
@config_option
@output_option
@format_option
@strict_option
def docs_gen(config_path: Path | None, output_dir: Path | None, fmt: str | None, strict: bool):
    """Generate OpenAPI documentation from the list-based "docs" section."""
    _run(config_path, "docs", output_dir, fmt, strict)
