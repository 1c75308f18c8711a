from typing import List, Optional

from pydantic import BaseModel

from inspection_core.models import Severity


class DiagnosticEntry(BaseModel):
    inspection_id: str
    severity: Severity
    file_path: str
    line: Optional[int] = None
    column: Optional[int] = None
    message: str


class FileEntry(BaseModel):
    file_path: str
    diagnostics: List[DiagnosticEntry]


class ReportSummary(BaseModel):
    errors: int
    warnings: int
    infos: int


class JsonReport(BaseModel):
    summary: ReportSummary
    files: List[FileEntry]
