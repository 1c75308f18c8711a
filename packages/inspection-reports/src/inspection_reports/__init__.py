"""Report rendering and emission for inspection results."""

from .base import ReportKind, ReportRenderer
from .emitter import ReportDestination, ReportEmitter, resolve_destinations
from .registry import RendererRegistry, registry

__all__ = [
    "ReportKind",
    "ReportRenderer",
    "ReportDestination",
    "ReportEmitter",
    "resolve_destinations",
    "RendererRegistry",
    "registry",
]
