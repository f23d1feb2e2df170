#!/usr/bin/env python3
"""
CLI entry point for firestore-directives.
"""

import sys
from pathlib import Path

import click
import uvicorn

from firestore_directives import __version__
from firestore_directives.config import settings
from firestore_directives.directives import directive_type_defs
from firestore_directives.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _load_schema(schema_file: Path):
    from firestore_directives.schema import make_executable_schema

    type_defs = schema_file.read_text()
    return make_executable_schema(type_defs, settings)


@click.group()
@click.version_option(version=__version__, prog_name="firestore-directives")
def cli() -> None:
    """firestore-directives CLI - inspect and serve directive-driven schemas."""
    pass


@cli.command()
def typedefs() -> None:
    """Print the SDL declarations of every supported directive."""
    click.echo(
        directive_type_defs(settings.fetch_one_directive, settings.fetch_many_directive).strip()
    )


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(schema_file: Path) -> None:
    """Build SCHEMA_FILE and list its collections and document fields."""
    configure_logging(debug=settings.debug, level="warning")

    try:
        _, registry = _load_schema(schema_file)
    except Exception as e:
        click.echo(f"✗ Schema check failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Schema OK: {schema_file}")
    for type_name, template in sorted(registry.path_templates.items()):
        identifier = registry.identifier_field(type_name)
        click.echo(f"  {type_name}: {template}")
        if identifier:
            click.echo(f"    documentID: {identifier.field_name}")

    for record in registry:
        for field in record.fields.values():
            if field.fetch is not None:
                click.echo(f"  @{field.fetch.name} {record.type_name}.{field.field_name}")


@cli.command()
@click.argument(
    "schema_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--host", default=settings.api_host, help="Host to bind to")
@click.option("--port", default=settings.api_port, type=int, help="Port to bind to")
@click.option(
    "--store",
    "backend",
    default=settings.store_backend,
    type=click.Choice(["firestore", "memory"]),
    help="Document store backend",
)
@click.option(
    "--seed",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON/YAML documents for the memory store",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    schema_file: Path | None,
    host: str,
    port: int,
    backend: str,
    seed: str | None,
    log_level: str,
) -> None:
    """Serve SCHEMA_FILE (default: the configured schema_path) over HTTP at /graphql."""
    from firestore_directives.api.app import create_app
    from firestore_directives.store.factory import create_store

    configure_logging(debug=(log_level == "debug"), level=log_level)

    if schema_file is None:
        if not settings.schema_path:
            raise click.UsageError("SCHEMA_FILE is required when schema_path is not configured")
        schema_file = Path(settings.schema_path)

    try:
        schema, _ = _load_schema(schema_file)
        store_settings = settings.model_copy(update={"seed_path": seed}) if seed else settings
        store = create_store(store_settings, backend=backend)
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    logger.info("Starting firestore-directives server", host=host, port=port, store=backend)

    try:
        uvicorn.run(
            create_app(schema, store, settings),
            host=host,
            port=port,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
