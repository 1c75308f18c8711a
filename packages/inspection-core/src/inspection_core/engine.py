from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Protocol

from .errors import AnalysisEngineError
from .models import Diagnostic, Severity, SeverityClassification

logger = logging.getLogger(__name__)

_ECHO_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}


class AnalysisEngine(Protocol):
    """Protocol for an external analysis engine"""

    def analyze(
        self,
        project_root: Path,
        source_files: Sequence[Path],
        classpath: frozenset[Path],
        classification: SeverityClassification,
        options: dict[str, Any],
    ) -> Iterable[Diagnostic]: ...


class AnalysisInvoker:
    """Hands a run's inputs to the analysis engine and collects its diagnostics."""

    def __init__(self, engine: AnalysisEngine):
        self.engine = engine

    def analyze(
        self,
        source_files: Iterable[Path],
        classpath: Iterable[Path],
        classification: SeverityClassification,
        show_violations: bool = True,
        project_root: Path | None = None,
    ) -> tuple[Diagnostic, ...]:
        """Run the engine once and return the complete diagnostic sequence.

        Diagnostics are passed through exactly as the engine produced them.
        Any exception raised by the engine is re-raised as AnalysisEngineError.
        """
        files = tuple(Path(f) for f in source_files)
        roots = frozenset(Path(p) for p in classpath)
        root = Path(project_root) if project_root is not None else Path.cwd()
        options = {"show_violations": show_violations}

        logger.info(
            "Analyzing %d source file(s) with %d inspection(s)", len(files), len(classification)
        )
        try:
            diagnostics = tuple(
                self.engine.analyze(root, files, roots, classification, options)
            )
        except AnalysisEngineError:
            raise
        except Exception as e:
            raise AnalysisEngineError(f"Analysis engine failed: {e}") from e

        if show_violations:
            for diagnostic in diagnostics:
                logger.log(_ECHO_LEVELS[diagnostic.severity], format_violation(diagnostic))

        return diagnostics


def format_violation(diagnostic: Diagnostic) -> str:
    location = str(diagnostic.file_path)
    if diagnostic.line is not None:
        location += f":{diagnostic.line}"
        if diagnostic.column is not None:
            location += f":{diagnostic.column}"
    return f"{location}: [{diagnostic.inspection_id}] {diagnostic.message}"


def load_engine(spec: str) -> AnalysisEngine:
    """Instantiate an engine from a ``package.module:attribute`` reference.

    The attribute may be an engine class or any zero-argument factory.
    """
    module_name, sep, attribute = spec.partition(":")
    if not sep or not module_name or not attribute:
        raise AnalysisEngineError(
            f"Invalid engine reference '{spec}', expected 'package.module:attribute'"
        )
    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise AnalysisEngineError(f"Cannot load analysis engine '{spec}': {e}") from e

    try:
        engine = factory()
    except Exception as e:
        raise AnalysisEngineError(f"Cannot create analysis engine '{spec}': {e}") from e

    if not callable(getattr(engine, "analyze", None)):
        raise AnalysisEngineError(f"'{spec}' does not provide an analyze() method")
    return engine
