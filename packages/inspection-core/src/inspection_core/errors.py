"""Exception hierarchy for the inspection pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import GateDecision


class InspectionError(Exception):
    """Base class for all inspection errors."""


class ConfigParseError(InspectionError):
    """The severity configuration document is missing or malformed."""

    def __init__(self, message: str, source: str | Path | None = None):
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


class AnalysisEngineError(InspectionError):
    """The external analysis engine failed."""


class ReportWriteError(InspectionError):
    """One or more report destinations could not be written."""

    def __init__(self, failures: dict, written: frozenset[Path] = frozenset()):
        self.failures = failures
        self.written = written
        names = ", ".join(f"{kind.value} ({err})" for kind, err in failures.items())
        super().__init__(f"Failed to write report(s): {names}")


class GateExceededError(InspectionError):
    """Diagnostic counts breached the configured ceilings."""

    def __init__(self, decision: GateDecision):
        self.decision = decision
        super().__init__(decision.describe())


class TaskStateError(InspectionError):
    """The task was used outside the lifecycle state that allows it."""


class TaskConfigError(InspectionError):
    """The task configuration file is invalid."""


class TaskExecutionError(InspectionError):
    """Build-level failure of an inspection task, wrapping the classified cause."""

    def __init__(self, task_name: str, cause: Exception):
        self.task_name = task_name
        self.cause = cause
        super().__init__(f"Exception occurred in inspection task '{task_name}': {cause}")
