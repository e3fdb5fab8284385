"""Schema generation commands for the typeschema CLI."""

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from typeschema.adapters.python import PythonTypeIntrospector
from typeschema.compiler.config_loader import load_config
from typeschema.kernel.config import TypeSchemaConfig
from typeschema.kernel.exceptions import TypeSchemaError
from typeschema.kernel.resolver import resolve
from typeschema.kernel.schema import (
    OUTPUT_FORMATS,
    format_output,
    generate_components_document,
    generate_json_schema,
)

app = typer.Typer()
console = Console()
err_console = Console(stderr=True)

FormatOption = Annotated[
    str, typer.Option("--format", "-f", help="Output format: json or yaml")
]
OutputOption = Annotated[
    Path | None, typer.Option("--output", "-o", help="Write the schema to this file")
]
PrettyOption = Annotated[
    bool, typer.Option("--pretty", help="Show highlighted output in a panel")
]


def _config(ctx: typer.Context) -> TypeSchemaConfig:
    """Return the configuration loaded by the main callback, or load it now."""
    if ctx.obj and (config := ctx.obj.get("config")) is not None:
        return config
    return load_config()


def _fail(message: str, hint: str | None = None) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {message}", highlight=False)
    if hint:
        err_console.print(f"[yellow]Hint:[/yellow] {hint}", highlight=False)
    return typer.Exit(1)


def _emit(
    schema: dict[str, Any], format: str, output: Path | None, pretty: bool, title: str
) -> None:
    if format not in OUTPUT_FORMATS or format == "dict":
        raise _fail(f"Unsupported format '{format}'", "Use --format json or --format yaml")

    text = str(format_output(schema, format))
    if not text.endswith("\n"):
        text += "\n"

    if output is not None:
        if output.exists() and output.read_text(encoding="utf-8") == text:
            err_console.print(f"[dim]{output} is up to date[/dim]")
            return
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        err_console.print(f"[green]✓[/green] Wrote {output}")
        return

    if pretty:
        syntax = Syntax(text, format, theme="monokai", line_numbers=False)
        console.print(Panel(syntax, title=title, border_style="blue"))
    else:
        console.print(text, end="", markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.command("json")
def json_schema(
    ctx: typer.Context,
    target: Annotated[str, typer.Argument(help="Import path of the type (e.g., app.models:User)")],
    format: FormatOption = "json",
    output: OutputOption = None,
    pretty: PrettyOption = False,
) -> None:
    """Generate a freestanding JSON Schema (draft-07) for a type."""
    config = _config(ctx)
    try:
        type_ = resolve(target)
        schema = generate_json_schema(type_, PythonTypeIntrospector(), config.generator)
    except TypeSchemaError as e:
        raise _fail(str(e)) from e

    _emit(schema, format, output, pretty, f"JSON Schema: {target}")


@app.command("components")
def components(
    ctx: typer.Context,
    targets: Annotated[
        list[str], typer.Argument(help="Import paths of the root types (e.g., app.models:User)")
    ],
    format: FormatOption = "json",
    output: OutputOption = None,
    pretty: PrettyOption = False,
) -> None:
    """Generate an OpenAPI components section for types and everything they reference."""
    config = _config(ctx)
    try:
        roots = [resolve(target) for target in targets]
        document = generate_components_document(roots, PythonTypeIntrospector(), config.generator)
    except TypeSchemaError as e:
        raise _fail(str(e)) from e

    _emit(document, format, output, pretty, "Components")
