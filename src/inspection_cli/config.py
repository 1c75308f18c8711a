import tomllib
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ValidationError, field_validator

from inspection_core.errors import TaskConfigError
from inspection_reports.base import ReportKind

from .task import InspectionTask

DEFAULT_CONFIG_FILES = (".inspection.toml", "pyproject.toml")

Limit = Union[int, Literal["unbounded"]]


class ReportSettings(BaseModel):
    enabled: bool = True
    destination: Optional[str] = None


class TaskSettings(BaseModel):
    """The ``[tool.inspection]`` table of a task configuration file"""

    name: str = "main"
    engine: Optional[str] = None
    config: str = "config/inspections/inspections.xml"
    source: List[str] = ["src/**/*"]
    classpath: List[str] = []
    properties: Dict[str, Any] = {}
    max_errors: Limit = 0
    max_warnings: Limit = "unbounded"
    show_violations: bool = True
    ignore_failures: bool = False
    tolerate_partial_reports: bool = False
    use_cache: bool = True
    reports_dir: str = "build/reports/inspections"
    reports: Dict[ReportKind, ReportSettings] = {}

    @field_validator("max_errors", "max_warnings")
    @classmethod
    def _non_negative(cls, value: Limit) -> Limit:
        if value != "unbounded" and value < 0:
            raise ValueError("must be non-negative or 'unbounded'")
        return value


def find_config_file(project_root: Path) -> Optional[Path]:
    for name in DEFAULT_CONFIG_FILES:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    return None


def load_settings(config_path: Optional[Path] = None) -> TaskSettings:
    """Load task settings; defaults when no configuration file is given."""
    if config_path is None:
        return TaskSettings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise TaskConfigError(f"Cannot read {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise TaskConfigError(f"Invalid TOML in {config_path}: {e}") from e

    table = data.get("tool", {}).get("inspection", {})
    try:
        return TaskSettings.model_validate(table)
    except ValidationError as e:
        raise TaskConfigError(f"Invalid [tool.inspection] settings in {config_path}:\n{e}") from e


def limit_value(limit: Limit) -> Optional[int]:
    return None if limit == "unbounded" else limit


def collect_sources(project_root: Path, patterns: List[str]) -> List[Path]:
    """Expand glob patterns relative to the project root, sorted and deduplicated"""
    files = set()
    for pattern in patterns:
        files.update(p for p in project_root.glob(pattern) if p.is_file())
    return sorted(files)


def build_task(
    settings: TaskSettings, project_root: Path, engine=None, engine_id: Optional[str] = None
) -> InspectionTask:
    """Create a configured task from settings"""
    task = InspectionTask(
        name=settings.name, engine=engine, project_root=project_root, engine_id=engine_id
    )
    task.source = collect_sources(task.project_root, settings.source)
    task.classpath = [Path(p) for p in settings.classpath]
    task.config = Path(settings.config)
    task.config_properties = dict(settings.properties)
    task.max_errors = limit_value(settings.max_errors)
    task.max_warnings = limit_value(settings.max_warnings)
    task.show_violations = settings.show_violations
    task.ignore_failures = settings.ignore_failures
    task.tolerate_partial_reports = settings.tolerate_partial_reports
    task.use_cache = settings.use_cache
    task.reports_dir = Path(settings.reports_dir)

    for kind, report in settings.reports.items():
        location = Path(report.destination) if report.destination else None
        task.configure_report(kind, enabled=report.enabled, location=location)
    return task
