"""typeschema CLI - Main entrypoint."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from typeschema import __version__
from typeschema.cli.commands import schema_cmd
from typeschema.compiler.config_loader import load_config
from typeschema.kernel.exceptions import TypeSchemaError
from typeschema.kernel.logging import configure_logging

app = typer.Typer(
    name="typeschema",
    help="typeschema - Generate JSON Schema and OpenAPI components from Python types.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

console = Console()
err_console = Console(stderr=True)

app.add_typer(schema_cmd.app, name="schema", help="Schema generation commands")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]typeschema[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    quiet: Annotated[
        bool, typer.Option("-q", "--quiet", help="Only log errors")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("-V", "--verbose", help="Enable debug logging")
    ] = False,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Log level: debug|info|warning|error")
    ] = None,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to a kind: Config YAML or TOML file")
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """typeschema CLI.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    try:
        config = load_config(config_path)
    except (FileNotFoundError, TypeSchemaError) as e:
        err_console.print(f"[red]Error:[/red] {e}", highlight=False)
        raise typer.Exit(1) from e

    effective_level = (log_level or config.logging.level).upper()
    if quiet:
        effective_level = "ERROR"
    elif verbose:
        effective_level = "DEBUG"
    if effective_level == "WARN":
        effective_level = "WARNING"

    logging_config = config.logging
    configure_logging(
        level=effective_level,  # type: ignore[arg-type]
        format=logging_config.format,
        output_file=logging_config.output_file,
        use_color=logging_config.use_color,
        include_timestamp=logging_config.include_timestamp,
        use_rich=logging_config.use_rich,
        dual_sink=logging_config.dual_sink,
        enable_stdlib_bridge=logging_config.enable_stdlib_bridge,
        backtrace=logging_config.backtrace,
        diagnose=logging_config.diagnose,
    )

    if ctx.obj is None:
        ctx.obj = {}
    ctx.obj.update({
        "quiet": quiet,
        "verbose": verbose,
        "log_level": effective_level,
        "config": config,
    })


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
