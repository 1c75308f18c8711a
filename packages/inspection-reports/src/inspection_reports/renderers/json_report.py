from inspection_core.models import AggregatedResult

from ..base import ReportKind, ReportRenderer
from ..converters import result_to_report


class JsonReportRenderer(ReportRenderer):
    @property
    def kind(self) -> ReportKind:
        return ReportKind.JSON

    def render(self, result: AggregatedResult) -> bytes:
        return (result_to_report(result).model_dump_json(indent=2) + "\n").encode("utf-8")
