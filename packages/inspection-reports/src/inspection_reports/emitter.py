from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from inspection_core.errors import ReportWriteError
from inspection_core.models import AggregatedResult

from .base import ReportKind
from .registry import RendererRegistry, registry as default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportDestination:
    """Whether a report kind is produced, and where"""

    enabled: bool = True
    location: Path | None = None


def resolve_destinations(
    destinations: Mapping[ReportKind, ReportDestination],
    reports_dir: Path,
    task_name: str,
    registry: RendererRegistry | None = None,
) -> dict[ReportKind, ReportDestination]:
    """Fill in missing report locations.

    Kinds without an entry are enabled. A missing location defaults to
    ``<reports_dir>/<task_name>.<extension>``; relative locations are taken
    relative to ``reports_dir``.
    """
    registry = registry or default_registry
    resolved = {}
    for renderer in registry.get_all_renderers():
        destination = destinations.get(renderer.kind, ReportDestination())
        location = destination.location
        if location is None:
            location = Path(reports_dir) / f"{task_name}.{renderer.extension}"
        elif not Path(location).is_absolute():
            location = Path(reports_dir) / location
        resolved[renderer.kind] = ReportDestination(enabled=destination.enabled, location=Path(location))
    return resolved


class ReportEmitter:
    """Writes an aggregated result to every enabled report destination."""

    def __init__(self, registry: RendererRegistry | None = None):
        self.registry = registry or default_registry

    def emit(
        self,
        result: AggregatedResult,
        destinations: Mapping[ReportKind, ReportDestination],
    ) -> frozenset[Path]:
        """Render and write each enabled report.

        Every destination is attempted even if an earlier one fails; failures
        are collected and raised together as a ReportWriteError afterwards.
        """
        written: set[Path] = set()
        failures: dict[ReportKind, Exception] = {}

        for kind in ReportKind:
            destination = destinations.get(kind)
            if destination is None or not destination.enabled:
                continue
            if destination.location is None:
                failures[kind] = ValueError("no output location configured")
                continue

            try:
                content = self.registry.get(kind).render(result)
                location = Path(destination.location)
                location.parent.mkdir(parents=True, exist_ok=True)
                location.write_bytes(content)
            except (OSError, KeyError, ValueError) as e:
                logger.error("Could not write %s report to %s: %s", kind.value, destination.location, e)
                failures[kind] = e
                continue

            logger.info("Wrote %s report to %s", kind.value, location)
            written.add(location)

        if failures:
            raise ReportWriteError(failures, frozenset(written))
        return frozenset(written)
