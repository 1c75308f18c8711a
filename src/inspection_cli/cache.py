"""
Up-to-date checking for inspection runs.

A run is keyed by a fingerprint of exactly the inputs that affect its output.
Paths inside the project root are hashed relative to it, so a relocated
checkout reuses the cached result even though reported paths are absolute.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from inspection_core.models import AggregatedResult, RunOptions
from inspection_reports.converters import diagnostic_to_entry, entry_to_diagnostic
from inspection_reports.models import DiagnosticEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskInputs:
    """Inputs of one run, frozen when the run starts"""

    project_root: Path
    source_files: tuple[Path, ...]
    classpath: tuple[Path, ...]
    config_path: Path
    config_properties: tuple[tuple[str, Any], ...]
    options: RunOptions
    engine_id: str = ""

    def fingerprint(self) -> str:
        digest = hashlib.sha256()

        def update(*parts: str):
            for part in parts:
                digest.update(part.encode("utf-8", "surrogateescape"))
                digest.update(b"\0")

        update("sources")
        for path in self.source_files:
            update(self._relative(path), _content_hash(path))

        update("classpath")
        for root in self.classpath:
            update(self._relative(root))
            for path in _walk(root):
                update(_relative_to(path, root), _content_hash(path))

        update("engine", self.engine_id)
        update("config", _content_hash(self.config_path))
        update("properties", json.dumps(self.config_properties, sort_keys=True, default=str))
        update(
            "options",
            str(self.options.max_errors),
            str(self.options.max_warnings),
            str(self.options.show_violations),
            str(self.options.ignore_failures),
        )
        return digest.hexdigest()

    def _relative(self, path: Path) -> str:
        return _relative_to(path, self.project_root)


def _relative_to(path: Path, root: Path) -> str:
    try:
        return Path(path).resolve().relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        return Path(path).resolve().as_posix()


def _walk(root: Path) -> list[Path]:
    root = Path(root)
    if root.is_file():
        return [root]
    if not root.is_dir():
        return []
    return sorted(p for p in root.rglob("*") if p.is_file())


def _content_hash(path: Path) -> str:
    try:
        return hashlib.md5(Path(path).read_bytes()).hexdigest()
    except OSError:
        return "missing"


class CachedResult(BaseModel):
    fingerprint: str
    diagnostics: list[DiagnosticEntry]


class ResultCache:
    """Stores the aggregated result of the last run next to its fingerprint."""

    def __init__(self, cache_file: Path):
        self.cache_file = Path(cache_file)

    def load(self, fingerprint: str) -> AggregatedResult | None:
        if not self.cache_file.is_file():
            return None
        try:
            cached = CachedResult.model_validate_json(self.cache_file.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.debug("Ignoring unreadable result cache %s: %s", self.cache_file, e)
            return None
        if cached.fingerprint != fingerprint:
            return None
        return AggregatedResult(diagnostics=tuple(entry_to_diagnostic(e) for e in cached.diagnostics))

    def store(self, fingerprint: str, result: AggregatedResult):
        try:
            cached = CachedResult(
                fingerprint=fingerprint,
                diagnostics=[diagnostic_to_entry(d) for d in result.diagnostics],
            )
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file.write_text(cached.model_dump_json(), encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.warning("Could not write result cache %s: %s", self.cache_file, e)
