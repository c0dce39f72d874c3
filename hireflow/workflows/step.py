"""
Workflow Step for the Hireflow Engine.

A live, per-workflow instance of a step template. Steps carry their own
status, feedback, assignee and delegation window, and are the unit on which
authorization and state transitions are enforced.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import NIL_ID, Employee, StepStatus, is_default_timestamp, is_nil, utcnow
from ..results import ErrorKind, OperationResult
from ..templates.step_template import WorkflowStepTemplate
from .helpers import as_utc, is_within_window

logger = logging.getLogger(__name__)


class WorkflowStep(BaseModel):
    """Single approval gate of a running workflow."""
    candidate_id: UUID = Field(..., description="Candidate the step is evaluating")
    number: int = Field(..., ge=1, description="Number copied from the step template")
    description: str = Field(..., description="What happens at this step")
    employee_id: Optional[UUID] = Field(None, description="Employee assigned to the step")
    role_id: Optional[UUID] = Field(None, description="Role whose holders may pass the step")
    status: StepStatus = StepStatus.EXPECTATION
    feedback: Optional[str] = Field(None, description="Feedback left by the deciding employee")
    delegated_employee_id: Optional[UUID] = Field(None, description="Employee acting for the assignee")
    delegate_start_time: Optional[datetime] = None
    delegate_end_time: Optional[datetime] = None
    restart_author_employee_id: Optional[UUID] = None
    restart_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator('candidate_id')
    @classmethod
    def validate_candidate_id(cls, v: UUID) -> UUID:
        if v == NIL_ID:
            raise ValueError('Candidate identifier must not be the nil UUID')
        return v

    @field_validator('created_at', 'updated_at')
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        if is_default_timestamp(v):
            raise ValueError('Timestamp must be set')
        return v

    @model_validator(mode='after')
    def validate_assignee(self) -> "WorkflowStep":
        if self.employee_id is None and self.role_id is None:
            raise ValueError('Step must be bound to an employee or a role')
        return self

    @classmethod
    def create(cls, candidate_id: Optional[UUID], step_template: Optional[WorkflowStepTemplate],
               now: Optional[datetime] = None) -> OperationResult:
        """
        Instantiate a step from its template for one candidate.

        Args:
            candidate_id: Candidate going through the workflow
            step_template: Template row to copy

        Returns:
            OperationResult carrying the WorkflowStep on success
        """
        if is_nil(candidate_id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{candidate_id} is not a valid candidate id")

        if step_template is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Step template must not be empty")

        if step_template.employee_id is None and step_template.role_id is None:
            return OperationResult.fail(
                ErrorKind.INVALID_ARGUMENT,
                f"Step {step_template.number} must be bound to an employee or a role",
            )

        now = now or utcnow()
        step = cls(
            candidate_id=candidate_id,
            number=step_template.number,
            description=step_template.description,
            employee_id=step_template.employee_id,
            role_id=step_template.role_id,
            created_at=now,
            updated_at=now,
        )
        return OperationResult.ok(step)

    @property
    def is_terminal(self) -> bool:
        return self.status != StepStatus.EXPECTATION

    def is_delegation_active(self, now: Optional[datetime] = None) -> bool:
        """True when a delegate exists and ``now`` falls inside the delegation window."""
        if self.delegated_employee_id is None:
            return False
        return is_within_window(now or utcnow(), self.delegate_start_time, self.delegate_end_time)

    def can_act(self, employee: Employee, now: Optional[datetime] = None) -> bool:
        """
        Check whether an employee may approve or reject this step.

        The employee qualifies as the assigned employee, as a holder of the
        assigned role, or as the delegate while the delegation window is open.
        """
        if self.employee_id is not None and employee.id == self.employee_id:
            return True

        if self.role_id is not None and employee.role_id == self.role_id:
            return True

        return employee.id == self.delegated_employee_id and self.is_delegation_active(now)

    def approve(self, employee: Optional[Employee], feedback: Optional[str] = None,
                now: Optional[datetime] = None) -> OperationResult:
        """Approve the candidate at this step."""
        return self._decide(employee, StepStatus.APPROVED, feedback, now)

    def reject(self, employee: Optional[Employee], feedback: Optional[str] = None,
               now: Optional[datetime] = None) -> OperationResult:
        """Reject the candidate at this step."""
        return self._decide(employee, StepStatus.REJECTED, feedback, now)

    def _decide(self, employee: Optional[Employee], decision: StepStatus, feedback: Optional[str],
                now: Optional[datetime]) -> OperationResult:
        if employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        now = now or utcnow()

        if not self.can_act(employee, now):
            logger.warning(f"Employee {employee.id} is not allowed to decide step {self.number}")
            return OperationResult.fail(
                ErrorKind.UNAUTHORIZED, f"Employee {employee.id} is not allowed to decide step {self.number}"
            )

        if self.is_terminal:
            return OperationResult.fail(ErrorKind.STEP_TERMINAL, f"Step {self.number} is finished")

        self.status = decision
        self.feedback = feedback
        self.updated_at = now

        logger.info(f"Step {self.number} for candidate {self.candidate_id} {decision.value.lower()} by {employee.id}")
        return OperationResult.ok()

    def restart(self, employee_id: Optional[UUID], now: Optional[datetime] = None) -> OperationResult:
        """
        Send the step back to EXPECTATION.

        The restart author and date are recorded even when the step was
        already pending.
        """
        if is_nil(employee_id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{employee_id} is not a valid employee id")

        now = now or utcnow()
        self.status = StepStatus.EXPECTATION
        self.restart_author_employee_id = employee_id
        self.restart_date = now
        self.updated_at = now
        return OperationResult.ok()

    def set_employee(self, employee: Optional[Employee], now: Optional[datetime] = None) -> OperationResult:
        """
        Assign the step to a specific employee.

        Explicit assignment supersedes the role binding and cancels any
        delegation granted by the previous assignee.
        """
        if employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        if self.is_terminal:
            return OperationResult.fail(ErrorKind.STEP_TERMINAL, f"Step {self.number} is finished")

        self.employee_id = employee.id
        self.role_id = None
        self._clear_delegation()
        self.updated_at = now or utcnow()

        logger.info(f"Step {self.number} for candidate {self.candidate_id} assigned to {employee.id}")
        return OperationResult.ok()

    def delegate(self, employee: Optional[Employee], delegated_employee: Optional[Employee],
                 start: datetime, end: datetime, now: Optional[datetime] = None) -> OperationResult:
        """
        Grant a time-boxed delegation of this step.

        Only the employee explicitly assigned to the step may delegate it.

        Args:
            employee: Assigned employee granting the delegation
            delegated_employee: Employee receiving the delegation
            start: Start of the delegation window (inclusive)
            end: End of the delegation window (inclusive)

        Returns:
            OperationResult indicating success or failure
        """
        if employee is None or delegated_employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        if is_nil(delegated_employee.id):
            return OperationResult.fail(
                ErrorKind.INVALID_ARGUMENT, f"{delegated_employee.id} is not a valid employee id"
            )

        if self.employee_id is None or employee.id != self.employee_id:
            logger.warning(f"Employee {employee.id} tried to delegate step {self.number} without being assigned")
            return OperationResult.fail(
                ErrorKind.UNAUTHORIZED, f"Only the employee assigned to step {self.number} may delegate it"
            )

        if self.is_terminal:
            return OperationResult.fail(ErrorKind.STEP_TERMINAL, f"Step {self.number} is finished")

        now = as_utc(now or utcnow())
        start = as_utc(start)
        end = as_utc(end)

        if start >= end:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Delegation must start before it ends")

        if start < now or end < now:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Delegation window cannot lie in the past")

        self.delegated_employee_id = delegated_employee.id
        self.delegate_start_time = start
        self.delegate_end_time = end
        self.updated_at = now

        logger.info(
            f"Step {self.number} for candidate {self.candidate_id} delegated by {employee.id} "
            f"to {delegated_employee.id} from {start.isoformat()} to {end.isoformat()}"
        )
        return OperationResult.ok()

    def _clear_delegation(self):
        self.delegated_employee_id = None
        self.delegate_start_time = None
        self.delegate_end_time = None
