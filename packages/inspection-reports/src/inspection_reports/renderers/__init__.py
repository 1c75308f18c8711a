from .html_report import HtmlReportRenderer
from .json_report import JsonReportRenderer
from .xml_report import XmlReportRenderer

__all__ = ["HtmlReportRenderer", "JsonReportRenderer", "XmlReportRenderer"]
