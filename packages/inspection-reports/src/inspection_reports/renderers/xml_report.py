import xml.etree.ElementTree as ET

from inspection_core.models import AggregatedResult

from ..base import ReportKind, ReportRenderer

CHECKSTYLE_VERSION = "8.0"


class XmlReportRenderer(ReportRenderer):
    """Checkstyle-compatible XML, one <file> element per source file."""

    @property
    def kind(self) -> ReportKind:
        return ReportKind.XML

    def render(self, result: AggregatedResult) -> bytes:
        root = ET.Element("checkstyle", version=CHECKSTYLE_VERSION)
        for file_path, diagnostics in result.by_file().items():
            file_element = ET.SubElement(root, "file", name=str(file_path))
            for diagnostic in diagnostics:
                attributes = {}
                if diagnostic.line is not None:
                    attributes["line"] = str(diagnostic.line)
                if diagnostic.column is not None:
                    attributes["column"] = str(diagnostic.column)
                attributes["severity"] = diagnostic.severity.value
                attributes["message"] = diagnostic.message
                attributes["source"] = diagnostic.inspection_id
                ET.SubElement(file_element, "error", attributes)

        ET.indent(root)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n"
