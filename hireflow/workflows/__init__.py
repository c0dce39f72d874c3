"""
Workflows Package for the Hireflow Engine.

This package provides the live candidate workflows created from templates
and the step-approval state machine they run on.
"""

from .helpers import as_utc, derive_status, find_step, is_within_window, select_current_step
from .step import WorkflowStep
from .workflow import Workflow

__all__ = [
    "Workflow",
    "WorkflowStep",
    "derive_status",
    "select_current_step",
    "find_step",
    "is_within_window",
    "as_utc",
]
