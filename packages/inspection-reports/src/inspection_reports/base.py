from abc import ABC, abstractmethod
from enum import Enum

from inspection_core.models import AggregatedResult


class ReportKind(str, Enum):
    """Report formats an inspection task can produce."""

    XML = "xml"
    HTML = "html"
    JSON = "json"


class ReportRenderer(ABC):
    """Abstract base class for all report renderers."""

    @property
    @abstractmethod
    def kind(self) -> ReportKind:
        """The report kind this renderer produces."""
        pass

    @property
    def extension(self) -> str:
        """File extension of the default report location."""
        return self.kind.value

    @abstractmethod
    def render(self, result: AggregatedResult) -> bytes:
        """Render the full result. Must be deterministic for an unchanged result."""
        pass
