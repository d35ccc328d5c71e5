"""CLI interface for fieldrules using Typer framework."""

import importlib
import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fieldrules import __description__, __version__
from fieldrules.config import FieldRulesConfig, load_config
from fieldrules.engine import ValidationReport, Validator
from fieldrules.errors import FieldRulesError

app = typer.Typer(
    name="fieldrules",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_RULE_TABLE = [
    ("len", "non-negative integer", "string, sequence of strings", "length equals parameter"),
    ("min", "signed integer", "string (length), integer, sequence", "value >= parameter"),
    ("max", "signed integer", "string (length), integer, sequence", "value <= parameter"),
    ("in", "comma separated list", "string, integer, sequence", "value is in the list"),
]


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"fieldrules version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """fieldrules - declarative field validation for records."""


def _setup_logging(config: FieldRulesConfig) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(config.logging.level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_record_type(target: str) -> type:
    """Resolve ``module:ClassName`` to a dataclass or pydantic model class."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        console.print(f"[red]Error:[/red] Invalid target '{target}'. Expected module:ClassName")
        raise typer.Exit(1)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        console.print(f"[red]Error:[/red] Cannot import module '{module_name}': {e}")
        raise typer.Exit(1)

    record_type = getattr(module, class_name, None)
    if not isinstance(record_type, type):
        console.print(f"[red]Error:[/red] '{class_name}' is not a class in module '{module_name}'")
        raise typer.Exit(1)
    return record_type


def _build_record(record_type: type, data: dict):
    if issubclass(record_type, BaseModel):
        return record_type.model_validate(data)
    return record_type(**data)


def _load_json(path: Path, what: str):
    try:
        with open(path, encoding="utf-8") as f:
            return jsonlib.load(f)
    except FileNotFoundError:
        console.print(f"[red]Error:[/red] {what} file not found: {path}")
        raise typer.Exit(1)
    except jsonlib.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON in {what.lower()} file {path}: {e}")
        raise typer.Exit(1)


def _print_reports(reports: list[tuple[int, ValidationReport]], format: str) -> None:
    if format == "json":
        payload = [dict(index=index, **report.to_dict()) for index, report in reports]
        console.print(jsonlib.dumps(payload, indent=2))
        return

    if format == "markdown":
        console.print("# Validation Report")
        for index, report in reports:
            status = "valid" if report.ok else "invalid"
            console.print(f"## Record {index} ({report.record_type}): {status}")
            for violation in report.violations:
                console.print(f"- **{violation.field}** {violation.kind.value}: {violation.kind.description}")
        return

    table = Table(title="Validation Report")
    table.add_column("Record", style="cyan")
    table.add_column("Field", style="white")
    table.add_column("Kind", style="yellow")
    table.add_column("Message", style="dim")
    for index, report in reports:
        if report.ok:
            table.add_row(str(index), "-", "[green]valid[/green]", "")
        for violation in report.violations:
            table.add_row(
                str(index), violation.field, violation.kind.value, violation.kind.description
            )
    console.print(table)


@app.command()
def check(
    target: Annotated[
        str,
        typer.Argument(help="Record type as module:ClassName (dataclass or pydantic model)")
    ],
    data: Annotated[
        Path,
        typer.Argument(help="JSON file holding one record object or a list of them")
    ],
    rules: Annotated[
        Optional[Path],
        typer.Option("--rules", "-r", help="JSON file mapping field names to rule annotations")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: table)")
    ] = "table",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .fieldrules.json)")
    ] = None,
) -> None:
    """Validate JSON records against a record type's field rules."""
    valid_formats = ["table", "json", "markdown"]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    try:
        fieldrules_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _setup_logging(fieldrules_config)

    record_type = _load_record_type(target)

    sidecar = None
    if rules is not None:
        sidecar = _load_json(rules, "Rules")
        if not isinstance(sidecar, dict) or not all(isinstance(v, str) for v in sidecar.values()):
            console.print("[red]Error:[/red] Rules file must map field names to annotation strings")
            raise typer.Exit(1)

    payload = _load_json(data, "Data")
    items = payload if isinstance(payload, list) else [payload]

    validator = Validator(fieldrules_config)
    reports = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            console.print(f"[red]Error:[/red] Record {index} is not a JSON object")
            raise typer.Exit(1)
        try:
            record = _build_record(record_type, item)
        except (TypeError, PydanticValidationError) as e:
            console.print(f"[red]Error:[/red] Cannot build record {index} as {record_type.__name__}: {e}")
            raise typer.Exit(1)

        try:
            reports.append((index, validator.check(record, sidecar)))
        except FieldRulesError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    _print_reports(reports, format)

    if any(not report.ok for _, report in reports):
        raise typer.Exit(1)


@app.command("rules")
def list_rules() -> None:
    """Show the supported rules and their parameter syntax."""
    table = Table(title="Supported Rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Parameter", style="white")
    table.add_column("Field kinds", style="yellow")
    table.add_column("Check", style="dim")
    for row in _RULE_TABLE:
        table.add_row(*row)
    console.print(table)


if __name__ == "__main__":
    app()
