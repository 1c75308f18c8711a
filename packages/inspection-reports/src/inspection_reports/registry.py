from .base import ReportKind, ReportRenderer


class RendererRegistry:
    """Registry mapping each report kind to its renderer"""

    def __init__(self):
        self._renderers: dict[ReportKind, ReportRenderer] = {}
        self._load_builtin_renderers()

    def register(self, renderer: ReportRenderer):
        self._renderers[renderer.kind] = renderer

    def get(self, kind: ReportKind) -> ReportRenderer:
        try:
            return self._renderers[kind]
        except KeyError:
            raise KeyError(f"No renderer registered for report kind '{kind.value}'") from None

    def get_all_renderers(self) -> list[ReportRenderer]:
        return list(self._renderers.values())

    def _load_builtin_renderers(self):
        from .renderers import HtmlReportRenderer, JsonReportRenderer, XmlReportRenderer

        self.register(XmlReportRenderer())
        self.register(HtmlReportRenderer())
        self.register(JsonReportRenderer())


registry = RendererRegistry()
