from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Severity(str, Enum):
    """Severity tiers an inspection can be classified into."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class SeverityClassification:
    """Inspection identifiers partitioned by severity tier, in document order."""

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    infos: tuple[str, ...] = ()

    def identifiers(self, severity: Severity) -> tuple[str, ...]:
        return {
            Severity.ERROR: self.errors,
            Severity.WARNING: self.warnings,
            Severity.INFO: self.infos,
        }[severity]

    def severity_of(self, inspection_id: str) -> Severity | None:
        for severity in Severity:
            if inspection_id in self.identifiers(severity):
                return severity
        return None

    def __len__(self) -> int:
        return len(self.errors) + len(self.warnings) + len(self.infos)


@dataclass(frozen=True)
class RunOptions:
    """Options frozen for the duration of one inspection run.

    A ceiling of ``None`` is unbounded and never breaks the build.
    """

    max_errors: int | None = 0
    max_warnings: int | None = None
    show_violations: bool = True
    ignore_failures: bool = False

    def __post_init__(self):
        for name in ("max_errors", "max_warnings"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative or unbounded, got {value}")


@dataclass(frozen=True)
class Diagnostic:
    """One issue reported by the analysis engine"""

    inspection_id: str
    severity: Severity
    file_path: Path
    message: str
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True)
class AggregatedResult:
    """All diagnostics of a run, in discovery order, with per-tier counts."""

    diagnostics: tuple[Diagnostic, ...] = ()
    error_count: int = field(init=False)
    warning_count: int = field(init=False)
    info_count: int = field(init=False)

    def __post_init__(self):
        counts = {severity: 0 for severity in Severity}
        for diagnostic in self.diagnostics:
            counts[diagnostic.severity] += 1
        object.__setattr__(self, "error_count", counts[Severity.ERROR])
        object.__setattr__(self, "warning_count", counts[Severity.WARNING])
        object.__setattr__(self, "info_count", counts[Severity.INFO])

    def count(self, severity: Severity) -> int:
        return {
            Severity.ERROR: self.error_count,
            Severity.WARNING: self.warning_count,
            Severity.INFO: self.info_count,
        }[severity]

    def of_severity(self, severity: Severity) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == severity)

    def by_file(self) -> dict[Path, list[Diagnostic]]:
        """Group diagnostics by source file, files ordered by first appearance."""
        grouped: dict[Path, list[Diagnostic]] = {}
        for diagnostic in self.diagnostics:
            grouped.setdefault(diagnostic.file_path, []).append(diagnostic)
        return grouped


@dataclass(frozen=True)
class GateBreach:
    """A single tier whose count went over its ceiling"""

    severity: Severity
    count: int
    limit: int


@dataclass(frozen=True)
class GateDecision:
    exceeded: bool
    breaches: tuple[GateBreach, ...] = ()

    def describe(self) -> str:
        if not self.exceeded:
            return "Inspection counts are within the configured limits"
        parts = [
            f"{breach.count} {breach.severity.value}(s) exceed the maximum of {breach.limit}"
            for breach in self.breaches
        ]
        return "Inspection limits exceeded: " + "; ".join(parts)
