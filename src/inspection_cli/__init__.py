"""
Inspection Runner - build task wrapper around an external analysis engine

Loads the severity classification, runs the engine over the source set,
writes reports and gates the build on configured error/warning limits.
"""

__version__ = "0.1.0"

from .task import InspectionTask, TaskState

__all__ = ["InspectionTask", "TaskState"]
