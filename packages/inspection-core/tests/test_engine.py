import logging
import sys
import types
from pathlib import Path

import pytest
from inspection_core.engine import AnalysisInvoker, load_engine
from inspection_core.errors import AnalysisEngineError
from inspection_core.models import Diagnostic, Severity, SeverityClassification

CLASSIFICATION = SeverityClassification(errors=("a.Err",), warnings=("a.Warn",))


class RecordingEngine:
    def __init__(self, diagnostics=()):
        self.diagnostics = list(diagnostics)
        self.calls = []

    def analyze(self, project_root, source_files, classpath, classification, options):
        self.calls.append((project_root, source_files, classpath, classification, options))
        # Generators must be fully materialized by the invoker
        yield from self.diagnostics


class FailingEngine:
    def analyze(self, project_root, source_files, classpath, classification, options):
        raise RuntimeError("engine crashed")


def make_diagnostic(severity=Severity.ERROR, inspection_id="a.Err", line=4):
    return Diagnostic(
        inspection_id=inspection_id,
        severity=severity,
        file_path=Path("/p/src/Main.kt"),
        message="Something is wrong",
        line=line,
        column=2,
    )


def test_invoker_marshals_inputs(tmp_path):
    engine = RecordingEngine()
    invoker = AnalysisInvoker(engine)

    invoker.analyze(
        ["b.kt", "a.kt"],
        ["classes", "classes"],
        CLASSIFICATION,
        show_violations=False,
        project_root=tmp_path,
    )

    project_root, files, classpath, classification, options = engine.calls[0]
    assert project_root == tmp_path
    assert files == (Path("b.kt"), Path("a.kt"))
    assert classpath == frozenset({Path("classes")})
    assert classification is CLASSIFICATION
    assert options == {"show_violations": False}


def test_invoker_passes_diagnostics_through_unmodified():
    items = [
        make_diagnostic(Severity.WARNING, "a.Warn", 9),
        make_diagnostic(Severity.ERROR, "a.Err", 1),
        make_diagnostic(Severity.INFO, "not.classified", 5),
    ]
    invoker = AnalysisInvoker(RecordingEngine(items))

    assert invoker.analyze([], [], CLASSIFICATION) == tuple(items)


def test_invoker_wraps_engine_errors():
    invoker = AnalysisInvoker(FailingEngine())

    with pytest.raises(AnalysisEngineError, match="engine crashed") as exc_info:
        invoker.analyze([], [], CLASSIFICATION)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_show_violations_echoes_to_log(caplog):
    invoker = AnalysisInvoker(RecordingEngine([make_diagnostic()]))

    with caplog.at_level(logging.INFO, logger="inspection_core.engine"):
        invoker.analyze([], [], CLASSIFICATION, show_violations=True)
    assert "/p/src/Main.kt:4:2: [a.Err] Something is wrong" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.INFO, logger="inspection_core.engine"):
        invoker.analyze([], [], CLASSIFICATION, show_violations=False)
    assert "Something is wrong" not in caplog.text


@pytest.fixture
def engine_module(monkeypatch):
    module = types.ModuleType("fake_engine_module")
    module.RecordingEngine = RecordingEngine
    module.not_an_engine = lambda: object()
    monkeypatch.setitem(sys.modules, "fake_engine_module", module)
    return module


def test_load_engine(engine_module):
    engine = load_engine("fake_engine_module:RecordingEngine")
    assert isinstance(engine, RecordingEngine)


@pytest.mark.parametrize(
    "reference",
    [
        "no_colon_here",
        "fake_engine_module:Missing",
        "does_not_exist_module:Engine",
        "fake_engine_module:not_an_engine",
    ],
)
def test_load_engine_errors(engine_module, reference):
    with pytest.raises(AnalysisEngineError):
        load_engine(reference)
