from pathlib import Path

from inspection_core.models import AggregatedResult, Diagnostic

from .models import DiagnosticEntry, FileEntry, JsonReport, ReportSummary


def diagnostic_to_entry(diagnostic: Diagnostic) -> DiagnosticEntry:
    """Convert an internal dataclass diagnostic to an external Pydantic entry"""
    return DiagnosticEntry(
        inspection_id=diagnostic.inspection_id,
        severity=diagnostic.severity,
        file_path=str(diagnostic.file_path),
        line=diagnostic.line,
        column=diagnostic.column,
        message=diagnostic.message,
    )


def entry_to_diagnostic(entry: DiagnosticEntry) -> Diagnostic:
    return Diagnostic(
        inspection_id=entry.inspection_id,
        severity=entry.severity,
        file_path=Path(entry.file_path),
        line=entry.line,
        column=entry.column,
        message=entry.message,
    )


def result_to_report(result: AggregatedResult) -> JsonReport:
    return JsonReport(
        summary=ReportSummary(
            errors=result.error_count,
            warnings=result.warning_count,
            infos=result.info_count,
        ),
        files=[
            FileEntry(
                file_path=str(file_path),
                diagnostics=[diagnostic_to_entry(d) for d in diagnostics],
            )
            for file_path, diagnostics in result.by_file().items()
        ],
    )
