"""
Command-line interface for the asset validator.
"""

import os
import sys
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import ValidatorConfig, ConfigurationError, DEFAULT_CONFIG_FILES, ENV_PREFIX, ENV_VARS
from .formatters import OutputFormat, ReportError
from .probes import ProbeError
from .processing.entities import EntitySourceError
from .processing.validator import ScopeClosedError
from .runner import RunSummary, run as run_validation

# Initialize typer app and rich console
app = typer.Typer(
    name="asset-validator",
    help="Asset validator - check that assets referenced by CSV entity lists exist and match their expected type, dimension and size",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]asset-validator run[/cyan]                          Print problems to the console
  [cyan]asset-validator run --format html[/cyan]            Write asset_validation.html
  [cyan]asset-validator run --format json[/cyan]            Print problems as JSON
  [cyan]asset-validator config --env-vars[/cyan]            List environment overrides
    """
)
console = Console()
# Status lines stay off stdout so JSON output remains machine-readable
err_console = Console(stderr=True)

FATAL_ERRORS = (ConfigurationError, EntitySourceError, ProbeError, ReportError, ScopeClosedError)


@app.command()
def run(
    output_format: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help="Output format [default: from config, else simple]", case_sensitive=False),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    root: Optional[Path] = typer.Option(None, "--root", help="Project root for sources and asset paths"),
    validations: Optional[Path] = typer.Option(None, "--validations", help="Validations file (TOML or JSON)"),
    probe: Optional[str] = typer.Option(None, "--probe", help="Image probe: pillow or identify"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide progress bars"),
    fail_on_problems: bool = typer.Option(False, "--fail-on-problems", help="Exit with code 2 when problems are found"),
):
    """Validate all registered entity lists and render the report."""
    config, notes = _load_config(config_file)

    if root is not None:
        config.project_root = str(root)
    if validations is not None:
        config.validations_file = str(validations)
    if probe is not None:
        config.probe = probe
    if no_progress:
        config.show_progress = False

    resolved_format = output_format.value if output_format else config.output_format.lower()
    if resolved_format != OutputFormat.JSON.value:
        _print_notes(notes)

    try:
        summary = run_validation(resolved_format, config=config, console=console)
    except FATAL_ERRORS as e:
        console.print(f"[red]Error validating assets:[/red] {e}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid option:[/red] {e}")
        raise typer.Exit(1)

    if resolved_format != OutputFormat.JSON.value:
        _display_run_summary(summary)

    if fail_on_problems and summary.has_problems:
        raise typer.Exit(2)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    validate_config: bool = typer.Option(False, "--validate", help="Validate configuration"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables"),
):
    """Manage validator configuration."""
    if env_vars:
        _display_env_vars()
        return

    if not (show or validate_config):
        console.print("Use --show to display configuration, --validate to check it, or --env-vars to see environment variables.")
        return

    config, notes = _load_config(config_file)
    _print_notes(notes)

    if show:
        _display_config(config)

    if validate_config:
        errors = config.validate()
        if errors:
            console.print("[red]Configuration validation errors:[/red]")
            for error in errors:
                console.print(f"  • {error}")
            raise typer.Exit(1)
        console.print("[green]✓ Configuration is valid[/green]")


@app.command()
def version():
    """Show asset validator version information."""
    console.print("[bold]Asset Validator[/bold]")
    console.print(f"Version: {__version__}")
    console.print("Python: " + sys.version.split()[0])

    table = Table(show_header=False)
    table.add_column("Status", width=3)
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")

    for name in ("Pillow", "Jinja2", "typer", "rich"):
        try:
            table.add_row("[green]✓[/green]", name, package_version(name))
        except PackageNotFoundError:
            table.add_row("[red]✗[/red]", name, "Not installed")

    console.print("\n[bold]Dependencies:[/bold]")
    console.print(table)


def _load_config(config_file: Optional[Path]) -> Tuple[ValidatorConfig, List[str]]:
    """
    Load configuration from file or use defaults with environment variable support.

    Returns:
        The configuration and the status notes describing where it came from
    """
    config = None
    notes = []

    try:
        if config_file:
            if not config_file.exists():
                console.print(f"[red]Configuration file not found:[/red] {config_file}")
                raise typer.Exit(1)
            config = ValidatorConfig.from_file(config_file)
            notes.append(f"Using configuration: {config_file}")
        else:
            for config_path in DEFAULT_CONFIG_FILES:
                if config_path.exists():
                    notes.append(f"Using configuration: {config_path}")
                    config = ValidatorConfig.from_file(config_path)
                    break
    except ConfigurationError as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(1)

    if config is None:
        config = ValidatorConfig()

    # Apply environment variable overrides
    config = ValidatorConfig._apply_env_overrides(config)

    env_vars_used = [key for key in os.environ if key.startswith(ENV_PREFIX)]
    if env_vars_used:
        notes.append(f"Environment overrides applied: {len(env_vars_used)} variables")

    return config, notes


def _print_notes(notes: List[str]) -> None:
    for note in notes:
        err_console.print(note, style="dim", markup=False, highlight=False)


def _display_run_summary(summary: RunSummary) -> None:
    """Display a table with per entity list results."""
    if not summary.entity_lists:
        console.print("[yellow]No entity lists registered[/yellow]")
        return

    table = Table(title="Asset Validation Summary")
    table.add_column("Entity list", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_column("Checks", justify="right")
    table.add_column("Problems", justify="right")

    for result in summary.entity_lists:
        color = "red" if result.messages else "green"
        table.add_row(result.name, str(result.rows), str(result.checks), f"[{color}]{result.messages}[/{color}]")

    console.print(table)

    counts = summary.messages_by_kind
    console.print(
        f"{summary.total_messages} problems "
        f"({counts.get('missing', 0)} missing, {counts.get('invalid', 0)} invalid) "
        f"in {summary.duration:.2f}s"
    )
    if summary.report_path:
        console.print(f"[green]✓[/green] Report written to {summary.report_path}")


def _display_config(config: ValidatorConfig) -> None:
    """Display configuration in a formatted table."""
    table = Table(title="Asset Validator Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Project Root", config.project_root)
    table.add_row("Validations File", str(config.validations_file or "(default location)"))
    table.add_row("Report File", config.report_file)
    table.add_row("Template Directory", str(config.template_dir or "(built-in)"))
    table.add_row("Output Format", config.output_format)
    table.add_row("Probe", config.probe)
    table.add_row("Show Progress", str(config.show_progress))
    table.add_row("Log Level", config.log_level)

    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="Asset Validator Environment Variables")
    table.add_column("Environment Variable", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")

    for var_name, description, example in ENV_VARS:
        table.add_row(var_name, description, example)

    console.print(table)
    console.print("\n[dim]Set these environment variables to override configuration file settings.[/dim]")


if __name__ == "__main__":
    app()
