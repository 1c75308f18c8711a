from html import escape

from inspection_core.models import AggregatedResult, Severity

from ..base import ReportKind, ReportRenderer

_STYLE = """
body { font-family: sans-serif; margin: 2em; }
table { border-collapse: collapse; width: 100%; margin-bottom: 2em; }
th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; }
.error { color: #b00020; }
.warning { color: #b26a00; }
.info { color: #1d5fa8; }
"""


class HtmlReportRenderer(ReportRenderer):
    """Human readable report grouped by source file"""

    @property
    def kind(self) -> ReportKind:
        return ReportKind.HTML

    def render(self, result: AggregatedResult) -> bytes:
        lines = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            "<title>Inspection Report</title>",
            f"<style>{_STYLE}</style>",
            "</head>",
            "<body>",
            "<h1>Inspection Report</h1>",
            "<table>",
            "<tr><th>Severity</th><th>Count</th></tr>",
        ]
        for severity in Severity:
            lines.append(
                f'<tr><td class="{severity.value}">{severity.value}</td>'
                f"<td>{result.count(severity)}</td></tr>"
            )
        lines.append("</table>")

        if not result.diagnostics:
            lines.append("<p>No problems found.</p>")

        for file_path, diagnostics in result.by_file().items():
            lines.append(f"<h2>{escape(str(file_path))}</h2>")
            lines.append("<table>")
            lines.append(
                "<tr><th>Line</th><th>Column</th><th>Severity</th>"
                "<th>Inspection</th><th>Message</th></tr>"
            )
            for d in diagnostics:
                line = "" if d.line is None else d.line
                column = "" if d.column is None else d.column
                lines.append(
                    f"<tr><td>{line}</td><td>{column}</td>"
                    f'<td class="{d.severity.value}">{d.severity.value}</td>'
                    f"<td>{escape(d.inspection_id)}</td><td>{escape(d.message)}</td></tr>"
                )
            lines.append("</table>")

        lines.extend(["</body>", "</html>", ""])
        return "\n".join(lines).encode("utf-8")
