"""
Inspection Core - severity classification, engine invocation and result gating

This package provides:
- Loading of severity configuration documents
- The analysis engine protocol and invoker
- Aggregation of diagnostics and the threshold gate
"""

__version__ = "0.1.0"

from .aggregate import aggregate, gate
from .classification import load_classification, parse_classification
from .engine import AnalysisEngine, AnalysisInvoker, load_engine
from .errors import (
    AnalysisEngineError,
    ConfigParseError,
    GateExceededError,
    InspectionError,
    ReportWriteError,
    TaskConfigError,
    TaskExecutionError,
    TaskStateError,
)
from .models import (
    AggregatedResult,
    Diagnostic,
    GateBreach,
    GateDecision,
    RunOptions,
    Severity,
    SeverityClassification,
)

__all__ = [
    "aggregate",
    "gate",
    "load_classification",
    "parse_classification",
    "load_engine",
    "AnalysisEngine",
    "AnalysisInvoker",
    "InspectionError",
    "ConfigParseError",
    "AnalysisEngineError",
    "ReportWriteError",
    "GateExceededError",
    "TaskStateError",
    "TaskConfigError",
    "TaskExecutionError",
    "AggregatedResult",
    "Diagnostic",
    "GateBreach",
    "GateDecision",
    "RunOptions",
    "Severity",
    "SeverityClassification",
]
