from __future__ import annotations

from collections.abc import Iterable

from .models import AggregatedResult, Diagnostic, GateBreach, GateDecision, RunOptions, Severity


def aggregate(diagnostics: Iterable[Diagnostic]) -> AggregatedResult:
    """Count diagnostics per severity tier, keeping the full sequence in order."""
    return AggregatedResult(diagnostics=tuple(diagnostics))


def gate(result: AggregatedResult, options: RunOptions) -> GateDecision:
    """Decide whether the counts of a run breach the configured ceilings.

    A maximum of N tolerates exactly N occurrences; ``None`` never triggers.
    ``ignore_failures`` is deliberately not consulted here.
    """
    breaches = []
    for severity, limit in (
        (Severity.ERROR, options.max_errors),
        (Severity.WARNING, options.max_warnings),
    ):
        count = result.count(severity)
        if limit is not None and count > limit:
            breaches.append(GateBreach(severity=severity, count=count, limit=limit))
    return GateDecision(exceeded=bool(breaches), breaches=tuple(breaches))
