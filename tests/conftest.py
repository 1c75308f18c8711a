import sys
import types
from pathlib import Path

import pytest
from inspection_core.models import Diagnostic

SEVERITY_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<inspections>
  <errors>
    <error class="org.example.UnusedSymbolInspection"/>
    <error class="org.example.NullableProblemsInspection"/>
  </errors>
  <warnings>
    <warning class="org.example.NamingConventionInspection"/>
  </warnings>
  <infos>
    <info class="org.example.RedundantSemicolonInspection"/>
  </infos>
</inspections>
"""


class ScriptedEngine:
    """Engine returning one diagnostic per scripted (inspection_id, file name, line)."""

    def __init__(self, script=()):
        self.script = list(script)
        self.calls = 0

    def analyze(self, project_root, source_files, classpath, classification, options):
        self.calls += 1
        by_name = {f.name: f for f in source_files}
        diagnostics = []
        for inspection_id, file_name, line in self.script:
            severity = classification.severity_of(inspection_id)
            if severity is None:
                continue
            diagnostics.append(
                Diagnostic(
                    inspection_id=inspection_id,
                    severity=severity,
                    file_path=by_name.get(file_name, project_root / file_name),
                    message=f"{inspection_id.rsplit('.', 1)[-1]} problem",
                    line=line,
                )
            )
        return diagnostics


@pytest.fixture
def project(tmp_path):
    """A project with two sources, a classpath root and a severity document."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "Main.kt").write_text("fun main() {}\n")
    (src / "Util.kt").write_text("val x = 1\n")
    classes = tmp_path / "build" / "classes"
    classes.mkdir(parents=True)
    (classes / "MainKt.class").write_bytes(b"\xca\xfe\xba\xbe")
    config_dir = tmp_path / "config" / "inspections"
    config_dir.mkdir(parents=True)
    (config_dir / "inspections.xml").write_text(SEVERITY_DOCUMENT, encoding="utf-8")
    return tmp_path


@pytest.fixture
def scripted_engine():
    return ScriptedEngine


@pytest.fixture
def engine_module(monkeypatch):
    """Registers an importable module exposing engines for 'module:attribute' references."""
    module = types.ModuleType("scripted_engines")
    module.ScriptedEngine = ScriptedEngine
    module.three_errors = lambda: ScriptedEngine(
        [
            ("org.example.UnusedSymbolInspection", "Main.kt", 1),
            ("org.example.UnusedSymbolInspection", "Util.kt", 1),
            ("org.example.NullableProblemsInspection", "Main.kt", 2),
        ]
    )
    module.clean = lambda: ScriptedEngine([])

    def crash():
        class CrashingEngine:
            def analyze(self, *args):
                raise RuntimeError("engine exploded")

        return CrashingEngine()

    module.crash = crash
    monkeypatch.setitem(sys.modules, "scripted_engines", module)
    return module
