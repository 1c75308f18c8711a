from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from inspection_core.aggregate import aggregate, gate
from inspection_core.classification import load_classification
from inspection_core.engine import AnalysisEngine, AnalysisInvoker
from inspection_core.errors import (
    AnalysisEngineError,
    GateExceededError,
    InspectionError,
    ReportWriteError,
    TaskConfigError,
    TaskExecutionError,
    TaskStateError,
)
from inspection_core.models import AggregatedResult, GateDecision, RunOptions
from inspection_reports.base import ReportKind
from inspection_reports.emitter import ReportDestination, ReportEmitter, resolve_destinations

from .cache import ResultCache, TaskInputs

logger = logging.getLogger(__name__)


class TaskState(str, Enum):
    CONFIGURED = "configured"
    RUNNING = "running"
    AGGREGATED = "aggregated"
    REPORTED = "reported"
    COMPLETED = "completed"
    FAILED = "failed"


def _setting(name: str, doc: str) -> property:
    attr = f"_{name}"

    def getter(self):
        return getattr(self, attr)

    def setter(self, value):
        self._ensure_configurable(name)
        setattr(self, attr, value)

    return property(getter, setter, doc=doc)


class InspectionTask:
    """
    Runs inspections over a source set and turns the results into a build outcome.

    Settings may only change while the task is CONFIGURED. ``run()`` freezes
    them, executes classification, analysis, aggregation, reporting and the
    threshold gate in order, and ends in COMPLETED or FAILED. A finished task
    has to be ``reset()`` before it can run again.
    """

    classpath = _setting("classpath", "Binary roots containing the compiled classes of the sources.")
    source = _setting("source", "Source files to analyze.")
    config = _setting("config", "Path of the severity configuration document.")
    config_properties = _setting(
        "config_properties", "Properties substituted into the configuration document."
    )
    max_errors = _setting("max_errors", "Errors tolerated before breaking the build, None = unbounded.")
    max_warnings = _setting(
        "max_warnings", "Warnings tolerated before breaking the build, None = unbounded."
    )
    show_violations = _setting("show_violations", "Whether violations are echoed to the log.")
    ignore_failures = _setting(
        "ignore_failures", "Whether exceeding the limits is reported without breaking the build."
    )
    tolerate_partial_reports = _setting(
        "tolerate_partial_reports", "Whether failing to write some reports still lets the run pass."
    )
    reports_dir = _setting("reports_dir", "Directory for reports without an explicit location.")
    use_cache = _setting("use_cache", "Whether an unchanged run reuses the previous result.")
    name = _setting("name", "Task name, used for default report and cache file names.")
    engine = _setting("engine", "The analysis engine the run is handed to.")
    engine_id = _setting(
        "engine_id", "Identity of the engine for up-to-date checks; defaults to its class."
    )
    emitter = _setting("emitter", "Writes the reports of a run.")

    def __init__(
        self,
        name: str = "main",
        engine: AnalysisEngine | None = None,
        project_root: Path | None = None,
        emitter: ReportEmitter | None = None,
        engine_id: str | None = None,
    ):
        self._state = TaskState.CONFIGURED
        self._name = name
        self._engine = engine
        self._engine_id = engine_id
        self.project_root = Path(project_root or Path.cwd()).resolve()
        self._emitter = emitter or ReportEmitter()

        self._classpath: list[Path] = []
        self._source: list[Path] = []
        self._config: Path | None = None
        self._config_properties: dict[str, Any] = {}
        self._max_errors: int | None = 0
        self._max_warnings: int | None = None
        self._show_violations = True
        self._ignore_failures = False
        self._tolerate_partial_reports = False
        self._reports_dir = self.project_root / "build" / "reports" / "inspections"
        self._use_cache = True
        self._reports: dict[ReportKind, ReportDestination] = {}

        self._clear_outcome()

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def reports(self) -> dict[ReportKind, ReportDestination]:
        """Report destinations with default locations filled in."""
        return resolve_destinations(
            self._reports, self._resolve(self._reports_dir), self.name, self.emitter.registry
        )

    @property
    def cache_file(self) -> Path:
        return self._resolve(self._reports_dir) / f".{self.name}-results.json"

    def configure_report(
        self, kind: ReportKind, enabled: bool | None = None, location: Path | None = None
    ):
        """Enable/disable a report kind or change where it is written."""
        self._ensure_configurable("reports")
        current = self._reports.get(kind, ReportDestination())
        self._reports[kind] = ReportDestination(
            enabled=current.enabled if enabled is None else enabled,
            location=current.location if location is None else Path(location),
        )

    def freeze(self) -> TaskInputs:
        """Snapshot the current settings as the immutable inputs of a run."""
        if self._config is None:
            raise TaskConfigError("No severity configuration document configured")
        try:
            options = RunOptions(
                max_errors=self._max_errors,
                max_warnings=self._max_warnings,
                show_violations=self._show_violations,
                ignore_failures=self._ignore_failures,
            )
        except ValueError as e:
            raise TaskConfigError(str(e)) from e

        return TaskInputs(
            project_root=self.project_root,
            source_files=tuple(self._resolve(p) for p in self._source),
            classpath=tuple(sorted(self._resolve(p) for p in self._classpath)),
            config_path=self._resolve(self._config),
            config_properties=tuple(sorted(self._config_properties.items())),
            options=options,
            engine_id=self._engine_identity(),
        )

    def run(self) -> GateDecision:
        """Execute the inspection pipeline.

        Raises TaskExecutionError carrying the classified cause when the run
        fails; a gate breach does not fail the run if ``ignore_failures`` is set.
        """
        if self._state != TaskState.CONFIGURED:
            raise TaskStateError(
                f"Task '{self.name}' is {self._state.value}; reset() it before running again"
            )

        self._transition(TaskState.RUNNING)
        try:
            decision = self._execute()
        except InspectionError as e:
            self._transition(TaskState.FAILED)
            logger.error("%s", e)
            raise TaskExecutionError(self.name, e) from e
        except Exception as e:
            self._transition(TaskState.FAILED)
            logger.exception("Unexpected failure in inspection task '%s'", self.name)
            raise TaskExecutionError(self.name, e) from e

        self._transition(TaskState.COMPLETED)
        return decision

    def reset(self):
        if self._state not in (TaskState.COMPLETED, TaskState.FAILED):
            raise TaskStateError(f"Cannot reset task '{self.name}' while {self._state.value}")
        self._clear_outcome()
        self._transition(TaskState.CONFIGURED)

    def _execute(self) -> GateDecision:
        inputs = self.freeze()
        options = inputs.options
        classification = load_classification(inputs.config_path, dict(inputs.config_properties))

        cache = ResultCache(self.cache_file) if self._use_cache else None
        fingerprint = inputs.fingerprint() if cache else None
        result = cache.load(fingerprint) if cache else None

        if result is not None:
            logger.info("Inputs of task '%s' are unchanged, reusing previous results", self.name)
            self.from_cache = True
        else:
            if self.engine is None:
                raise AnalysisEngineError(f"No analysis engine configured for task '{self.name}'")
            invoker = AnalysisInvoker(self.engine)
            diagnostics = invoker.analyze(
                inputs.source_files,
                inputs.classpath,
                classification,
                show_violations=options.show_violations,
                project_root=inputs.project_root,
            )
            result = aggregate(diagnostics)
            if cache:
                cache.store(fingerprint, result)

        self.result = result
        self._transition(TaskState.AGGREGATED)

        self.written = self._emit_reports(result)
        self._transition(TaskState.REPORTED)

        decision = gate(result, options)
        self.decision = decision
        logger.info(
            "Inspection '%s': %d error(s), %d warning(s), %d info(s)",
            self.name,
            result.error_count,
            result.warning_count,
            result.info_count,
        )

        if decision.exceeded:
            if not options.ignore_failures:
                raise GateExceededError(decision)
            logger.warning("%s (ignored)", decision.describe())
        return decision

    def _engine_identity(self) -> str:
        if self._engine_id:
            return self._engine_id
        if self._engine is None:
            return ""
        engine_type = type(self._engine)
        return f"{engine_type.__module__}:{engine_type.__qualname__}"

    def _emit_reports(self, result: AggregatedResult) -> frozenset[Path]:
        try:
            return self.emitter.emit(result, self.reports)
        except ReportWriteError as e:
            if not self._tolerate_partial_reports:
                raise
            logger.warning("%s (tolerated)", e)
            return e.written

    def _clear_outcome(self):
        self.result: AggregatedResult | None = None
        self.decision: GateDecision | None = None
        self.written: frozenset[Path] = frozenset()
        self.from_cache = False

    def _ensure_configurable(self, setting: str):
        if self._state != TaskState.CONFIGURED:
            raise TaskStateError(
                f"Cannot change '{setting}' of task '{self.name}' while {self._state.value}"
            )

    def _transition(self, state: TaskState):
        logger.debug("Task '%s': %s -> %s", self.name, self._state.value, state.value)
        self._state = state

    def _resolve(self, path: Path | str) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.project_root / path
