import logging
from pathlib import Path
from typing import List, Optional

import typer
from inspection_core.classification import load_classification
from inspection_core.engine import load_engine
from inspection_core.errors import (
    AnalysisEngineError,
    ConfigParseError,
    GateExceededError,
    InspectionError,
    ReportWriteError,
    TaskConfigError,
    TaskExecutionError,
)
from inspection_core.models import Severity

from .config import build_task, find_config_file, load_settings

app = typer.Typer(help="Inspection Runner - Run inspections and gate the build on their results")

EXIT_CODES = {
    GateExceededError: 1,
    ConfigParseError: 2,
    TaskConfigError: 2,
    AnalysisEngineError: 3,
    ReportWriteError: 4,
}
UNEXPECTED_ERROR_EXIT = 5


def _exit_code(error: Exception) -> int:
    for error_type, code in EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return UNEXPECTED_ERROR_EXIT


def _parse_properties(values: List[str]) -> dict:
    properties = {}
    for value in values:
        key, sep, prop = value.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{value}'", param_hint="--property")
        properties[key] = prop
    return properties


def _parse_limit(value: Optional[str], option: str) -> Optional[int]:
    if value == "unbounded":
        return None
    try:
        limit = int(value)
    except ValueError:
        raise typer.BadParameter("must be an integer or 'unbounded'", param_hint=option) from None
    if limit < 0:
        raise typer.BadParameter("must be non-negative", param_hint=option)
    return limit


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
):
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)


@app.command()
def run(
    project_dir: Path = typer.Option(Path("."), "--project-dir", help="Project root"),
    config_file: Optional[Path] = typer.Option(
        None, help="Task configuration file (default: .inspection.toml or pyproject.toml)"
    ),
    engine: Optional[str] = typer.Option(None, help="Analysis engine as 'package.module:attribute'"),
    config: Optional[Path] = typer.Option(None, help="Severity configuration document"),
    prop: List[str] = typer.Option([], "--property", "-P", help="Configuration property KEY=VALUE"),
    max_errors: Optional[str] = typer.Option(None, help="Errors tolerated, or 'unbounded'"),
    max_warnings: Optional[str] = typer.Option(None, help="Warnings tolerated, or 'unbounded'"),
    show_violations: Optional[bool] = typer.Option(
        None, "--show-violations/--hide-violations", help="Echo violations while analyzing"
    ),
    ignore_failures: Optional[bool] = typer.Option(
        None, "--ignore-failures/--fail-on-violations", help="Do not break the build on limits"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Always re-run the analysis"),
):
    """Run inspections and check the results against the configured limits"""
    project_dir = project_dir.resolve()
    config_file = config_file or find_config_file(project_dir)

    try:
        settings = load_settings(config_file)
        engine_ref = engine or settings.engine
        if not engine_ref:
            raise AnalysisEngineError("No analysis engine configured, use --engine")
        task = build_task(
            settings, project_dir, engine=load_engine(engine_ref), engine_id=engine_ref
        )
    except InspectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=_exit_code(e))

    if config is not None:
        task.config = config.resolve()
    if prop:
        task.config_properties = {**task.config_properties, **_parse_properties(prop)}
    if max_errors is not None:
        task.max_errors = _parse_limit(max_errors, "--max-errors")
    if max_warnings is not None:
        task.max_warnings = _parse_limit(max_warnings, "--max-warnings")
    if show_violations is not None:
        task.show_violations = show_violations
    if ignore_failures is not None:
        task.ignore_failures = ignore_failures
    if no_cache:
        task.use_cache = False

    try:
        decision = task.run()
    except TaskExecutionError as e:
        typer.echo(f"FAILED: {e.cause}", err=True)
        raise typer.Exit(code=_exit_code(e.cause))

    result = task.result
    typer.echo(
        f"Inspections: {result.error_count} error(s), {result.warning_count} warning(s), "
        f"{result.info_count} info(s)"
    )
    for location in sorted(task.written):
        typer.echo(f"Report: {location}")
    if decision.exceeded:
        typer.echo(f"{decision.describe()} (ignored)")


@app.command()
def classify(
    config: Path = typer.Argument(..., help="Severity configuration document"),
    prop: List[str] = typer.Option([], "--property", "-P", help="Configuration property KEY=VALUE"),
):
    """Show which inspections a severity document enables, per severity"""
    try:
        classification = load_classification(config, _parse_properties(prop))
    except ConfigParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    for severity in Severity:
        identifiers = classification.identifiers(severity)
        typer.echo(f"{severity.value.upper()} ({len(identifiers)})")
        for identifier in identifiers:
            typer.echo(f"  {identifier}")


if __name__ == "__main__":
    app()
