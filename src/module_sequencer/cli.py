"""Command-line interface for the module sequencer."""

import json
from dataclasses import dataclass
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import SequencerConfig, load_config
from .models.manifest import load_manifest
from .models.module import ModuleInterface
from .observability import LogContext, configure_logging
from .sequence import DependencyModuleSequence
from .utils.exceptions import SequencerError

app = typer.Typer(
    name="module-sequencer",
    help="Module Sequencer - serve modules in dependency order",
    add_completion=False,
)

console = Console()
logger = structlog.get_logger(__name__)


@dataclass
class LoggingOverrides:
    """Logging options given before the command."""

    log_level: str | None = None
    json_logs: bool = False


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON"),
) -> None:
    """Module Sequencer - serve modules in dependency order."""
    ctx.obj = LoggingOverrides(log_level=log_level, json_logs=json_logs)


def _setup(ctx: typer.Context, config_file: Path | None) -> SequencerConfig:
    """Load configuration and configure logging from it and the global overrides."""
    overrides = ctx.obj if isinstance(ctx.obj, LoggingOverrides) else LoggingOverrides()

    config = load_config(config_file)
    if overrides.log_level:
        config.logging.level = overrides.log_level
    if overrides.json_logs:
        config.logging.format = "json"

    configure_logging(
        level=config.logging.level,
        json_logs=config.logging.json_logs,
        log_file=config.logging.file,
    )
    return config


def _print_error(error: Exception) -> None:
    console.print(f"[red]ERROR:[/red] {escape(str(error))}", soft_wrap=True)


def _deferred_dependencies(order: list[ModuleInterface]) -> list[tuple[str, str]]:
    """
    Find dependencies served after the module requiring them.

    This only happens when a dependency cycle was broken while sequencing.

    Returns:
        (module key, dependency key) pairs in served order
    """
    served: set[str] = set()
    deferred = []
    for module in order:
        for dependency in module.dependencies:
            if dependency.key not in served:
                deferred.append((module.key, dependency.key))
        served.add(module.key)
    return deferred


@app.command()
def order(
    ctx: typer.Context,
    manifest_file: Path = typer.Argument(..., help="Module manifest (YAML or JSON)", exists=True),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Configuration file"),
    strict: bool | None = typer.Option(
        None, "--strict/--no-strict", help="Fail on unknown dependency keys"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the order as a JSON list of keys"),
    trace: bool = typer.Option(False, "--trace", help="Log every resolution step"),
) -> None:
    """
    Print the order in which the manifest's modules are served.

    Examples:
        module-sequencer order modules.yaml
        module-sequencer order modules.yaml --json
        module-sequencer --log-level DEBUG order modules.yaml --strict --trace
    """
    try:
        config = _setup(ctx, config_file)
        if strict is None:
            strict = config.sequencing.strict_dependencies

        with LogContext(manifest=str(manifest_file)):
            manifest = load_manifest(manifest_file)
            modules = manifest.build_modules(strict=strict)
            sequence = DependencyModuleSequence(
                modules, trace_resolution=trace or config.sequencing.trace_resolution
            )
            served = sequence.served_order()
            logger.info("Modules ordered", module_count=len(served))

    except (SequencerError, FileNotFoundError) as e:
        _print_error(e)
        raise typer.Exit(code=1) from e

    if as_json:
        typer.echo(json.dumps([module.key for module in served]))
        return

    table = Table(title=f"Module Order ({escape(manifest_file.name)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Module", style="cyan")
    table.add_column("Dependencies", style="green")

    for position, module in enumerate(served, start=1):
        dependencies = ", ".join(dep.key for dep in module.dependencies) or "-"
        table.add_row(str(position), escape(module.key), escape(dependencies))

    console.print(table)


@app.command()
def validate(
    ctx: typer.Context,
    manifest_file: Path = typer.Argument(..., help="Module manifest (YAML or JSON)", exists=True),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Configuration file"),
    strict: bool | None = typer.Option(
        None, "--strict/--no-strict", help="Fail on unknown dependency keys"
    ),
) -> None:
    """
    Check a manifest without printing the order.

    Reports unknown dependency keys and dependencies that could only be
    served after their dependent because of a cycle.

    Examples:
        module-sequencer validate modules.yaml
        module-sequencer validate modules.yaml --strict
    """
    console.print(
        f"\n[bold blue]Validating manifest:[/bold blue] {escape(str(manifest_file))}\n"
    )

    try:
        config = _setup(ctx, config_file)
        if strict is None:
            strict = config.sequencing.strict_dependencies

        manifest = load_manifest(manifest_file)
        unknown = manifest.unknown_dependencies()
        if unknown and strict:
            for module_key, dep_key in unknown:
                console.print(f"[red]  {escape(module_key)} -> {escape(dep_key)} (unknown)[/red]")
            console.print(
                f"\n[red]ERROR: {len(unknown)} unknown dependencies (strict mode)[/red]"
            )
            raise typer.Exit(code=1)

        modules = manifest.build_modules(strict=False)
        served = DependencyModuleSequence(modules).served_order()

    except (SequencerError, FileNotFoundError) as e:
        _print_error(e)
        raise typer.Exit(code=1) from e

    console.print(f"Modules: {len(manifest.modules)}")

    if unknown:
        console.print(f"[yellow]WARNING: {len(unknown)} unknown dependencies dropped:[/yellow]")
        for module_key, dep_key in unknown:
            console.print(f"  {escape(module_key)} -> {escape(dep_key)}")

    deferred = _deferred_dependencies(served)
    if deferred:
        console.print(
            f"[yellow]Dependency cycles: {len(deferred)} dependencies served after "
            "their dependent[/yellow]"
        )
        for module_key, dep_key in deferred:
            console.print(f"  {escape(module_key)} -> {escape(dep_key)}")

    console.print("\n[green]Validation successful![/green]")


if __name__ == "__main__":
    app()
