"""
Templates Package for the Hireflow Engine.

Company-owned workflow templates and their ordered step templates.
"""

from .step_template import WorkflowStepTemplate
from .workflow_template import WorkflowTemplate, validate_name

__all__ = [
    "WorkflowStepTemplate",
    "WorkflowTemplate",
    "validate_name",
]
