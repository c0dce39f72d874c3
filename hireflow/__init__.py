"""
Hireflow Engine

Candidate approval workflows for hiring: company-owned workflow templates,
per-candidate workflows created from them, and the step-approval state
machine with role-based authorization and time-boxed delegation.
"""

__version__ = "1.0.0"
__author__ = "Hireflow Engine Team"
__email__ = "team@example.com"

from .config import EngineSettings, configure_logging, get_settings, load_settings
from .models import NIL_ID, Employee, StepStatus
from .results import ErrorKind, OperationResult
from .templates.step_template import WorkflowStepTemplate
from .templates.workflow_template import WorkflowTemplate
from .workflows.step import WorkflowStep
from .workflows.workflow import Workflow

__all__ = [
    "NIL_ID",
    "Employee",
    "StepStatus",
    "ErrorKind",
    "OperationResult",
    "EngineSettings",
    "load_settings",
    "get_settings",
    "configure_logging",
    "WorkflowStepTemplate",
    "WorkflowTemplate",
    "WorkflowStep",
    "Workflow",
]
