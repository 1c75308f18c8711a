from pathlib import Path

import pytest
from inspection_core.aggregate import aggregate, gate
from inspection_core.models import Diagnostic, RunOptions, Severity


def diag(severity, inspection_id="a.Check", file_name="A.kt", line=1):
    return Diagnostic(
        inspection_id=inspection_id,
        severity=severity,
        file_path=Path("/project/src") / file_name,
        message=f"{severity.value} found",
        line=line,
    )


def diagnostics(errors=0, warnings=0, infos=0):
    return (
        [diag(Severity.ERROR, line=i) for i in range(errors)]
        + [diag(Severity.WARNING, line=i) for i in range(warnings)]
        + [diag(Severity.INFO, line=i) for i in range(infos)]
    )


def test_aggregate_counts_and_keeps_order():
    items = [diag(Severity.WARNING), diag(Severity.ERROR), diag(Severity.INFO), diag(Severity.ERROR)]
    result = aggregate(items)

    assert result.diagnostics == tuple(items)
    assert result.error_count == 2
    assert result.warning_count == 1
    assert result.info_count == 1
    for severity in Severity:
        assert result.count(severity) == len(result.of_severity(severity))


def test_aggregate_empty():
    result = aggregate([])
    assert result.diagnostics == ()
    assert (result.error_count, result.warning_count, result.info_count) == (0, 0, 0)


def test_by_file_groups_in_first_appearance_order():
    items = [
        diag(Severity.ERROR, file_name="B.kt", line=3),
        diag(Severity.ERROR, file_name="A.kt", line=1),
        diag(Severity.WARNING, file_name="B.kt", line=1),
    ]
    grouped = aggregate(items).by_file()

    assert [p.name for p in grouped] == ["B.kt", "A.kt"]
    assert [d.line for d in grouped[Path("/project/src/B.kt")]] == [3, 1]


@pytest.mark.parametrize(
    "errors,warnings,max_errors,max_warnings,exceeded",
    [
        (0, 0, 0, 0, False),
        (1, 0, 0, None, True),
        (2, 0, 2, None, False),
        (3, 0, 2, None, True),
        (3, 0, 3, None, False),
        (0, 5, 0, 5, False),
        (0, 6, 0, 5, True),
        (100, 100, None, None, False),
        (0, 0, None, 0, False),
    ],
)
def test_gate_strict_greater_than(errors, warnings, max_errors, max_warnings, exceeded):
    result = aggregate(diagnostics(errors, warnings))
    options = RunOptions(max_errors=max_errors, max_warnings=max_warnings)
    assert gate(result, options).exceeded is exceeded


def test_gate_reports_triggering_tiers():
    result = aggregate(diagnostics(errors=3, warnings=4, infos=10))
    decision = gate(result, RunOptions(max_errors=2, max_warnings=1))

    assert decision.exceeded
    assert [(b.severity, b.count, b.limit) for b in decision.breaches] == [
        (Severity.ERROR, 3, 2),
        (Severity.WARNING, 4, 1),
    ]
    assert "3 error(s) exceed the maximum of 2" in decision.describe()


def test_gate_ignores_infos():
    result = aggregate(diagnostics(infos=50))
    assert not gate(result, RunOptions(max_errors=0, max_warnings=0)).exceeded


def test_gate_does_not_consult_ignore_failures():
    result = aggregate(diagnostics(errors=1))
    assert gate(result, RunOptions(max_errors=0, ignore_failures=True)).exceeded


def test_run_options_reject_negative_limits():
    with pytest.raises(ValueError, match="max_errors"):
        RunOptions(max_errors=-1)
    with pytest.raises(ValueError, match="max_warnings"):
        RunOptions(max_warnings=-5)


def test_run_options_defaults():
    options = RunOptions()
    assert options.max_errors == 0
    assert options.max_warnings is None
    assert options.show_violations is True
    assert options.ignore_failures is False
