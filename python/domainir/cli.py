"""CLI commands for domainir."""

import json
import logging
from pathlib import Path

import typer

from domainir.bootstrap import SchemaContext, bootstrap
from domainir.config import get_settings
from domainir.exceptions import DomainIRError, NotFoundError, SchemaCompileError

app = typer.Typer(
    name="domainir",
    help="domainir - validate and compile declarative domain models",
    no_args_is_help=True,
)

UNITS_ARGUMENT = typer.Argument(
    ..., help="Model units: dotted module names, JSON files or directories of JSON files"
)


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _boot(units: list[str]) -> SchemaContext:
    try:
        return bootstrap(units)
    except DomainIRError as e:
        typer.secho(f"❌ Registration failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def _report_compile_error(error: SchemaCompileError) -> None:
    typer.secho(
        f"❌ Compilation failed with {len(error.errors)} error(s):",
        fg=typer.colors.RED,
        err=True,
    )
    for item in error.errors:
        typer.secho(f"   - {item}", fg=typer.colors.RED, err=True)


@app.command()
def check(
    units: list[str] = UNITS_ARGUMENT,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Register, seal and compile the given units, reporting every problem.

    Nothing is written; the exit code is 1 if any error was found.
    """
    _configure_logging(verbose)
    context = _boot(units)
    typer.echo(f"✅ Registered {len(context.registry)} model(s)")

    try:
        schema = context.compile()
    except SchemaCompileError as e:
        _report_compile_error(e)
        raise typer.Exit(1)

    for warning in schema.warnings:
        typer.secho(
            f"   ⚠️  [{warning.code}] {warning.model}: {warning.message}",
            fg=typer.colors.YELLOW,
        )
    typer.secho(f"✨ Schema is valid (fingerprint {schema.fingerprint[:12]})", fg=typer.colors.GREEN)


@app.command("compile")
def compile_schema(
    units: list[str] = UNITS_ARGUMENT,
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the artifact here"),
    fmt: str = typer.Option("json", "--format", "-f", help="Artifact format (json, msgpack)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Compile the given units and emit the schema artifact.

    JSON goes to stdout unless --output is given; msgpack requires --output.
    """
    if fmt not in ("json", "msgpack"):
        typer.secho(f"❌ Unknown format: {fmt}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    if fmt == "msgpack" and output is None:
        typer.secho("❌ --format msgpack requires --output", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    _configure_logging(verbose)
    context = _boot(units)
    try:
        schema = context.compile()
    except SchemaCompileError as e:
        _report_compile_error(e)
        raise typer.Exit(1)

    if output is None:
        typer.echo(schema.to_json())
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "msgpack":
        output.write_bytes(schema.to_bytes())
    else:
        output.write_text(schema.to_json() + "\n", encoding="utf-8")
    typer.secho(
        f"✅ Wrote {len(schema.models)} model(s) to {output} (fingerprint {schema.fingerprint[:12]})",
        fg=typer.colors.GREEN,
    )


@app.command("list")
def list_models(
    units: list[str] = UNITS_ARGUMENT,
    module: str | None = typer.Option(None, help="Only models of this functional module"),
):
    """
    List registered models with their module, table and sizes.
    """
    _configure_logging(False)
    context = _boot(units)
    summaries = [s for s in context.registry.summaries() if module is None or s.module == module]
    if not summaries:
        typer.secho("⚠️  No models found", fg=typer.colors.YELLOW)
        return

    typer.echo(f"Found {len(summaries)} model(s):")
    for summary in summaries:
        kind = "table" if summary.storage else "validation-only"
        typer.echo(
            f"  - {summary.name} [{summary.module or '-'}] {kind} {summary.table}: "
            f"{summary.field_count} field(s), {summary.relation_count} relation(s)"
        )


@app.command()
def describe(
    units: list[str] = UNITS_ARGUMENT,
    model: str = typer.Option(..., "--model", "-m", help="Model name"),
    compiled: bool = typer.Option(False, help="Show the compiled record instead of the declaration"),
):
    """
    Print one model as JSON, either as declared or as compiled.
    """
    _configure_logging(False)
    context = _boot(units)

    if compiled:
        try:
            record = context.compile().get(model)
        except SchemaCompileError as e:
            _report_compile_error(e)
            raise typer.Exit(1)
        if record is None:
            typer.secho(f"❌ Model '{model}' is not registered", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        typer.echo(json.dumps(record.to_dict(), indent=2))
        return

    try:
        declaration = context.registry.get(model)
    except NotFoundError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    typer.echo(
        json.dumps(
            declaration.model_dump(mode="json", by_alias=True, exclude_none=True),
            indent=2,
        )
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
