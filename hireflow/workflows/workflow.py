"""
Workflow aggregate for the Hireflow Engine.

A workflow is a live, per-candidate snapshot of a workflow template. Its
steps are created once, at instantiation time, and then progress strictly
in number order: approve, reject and reassignment always target the
earliest pending step unless a step number is given explicitly.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ..models import NIL_ID, Employee, StepStatus, is_default_timestamp, is_nil, utcnow
from ..results import ErrorKind, OperationResult
from ..templates.workflow_template import WorkflowTemplate, validate_name
from .helpers import derive_status, find_step, select_current_step
from .step import WorkflowStep

logger = logging.getLogger(__name__)


class Workflow(BaseModel):
    """
    Candidate approval workflow.

    The set of steps is fixed at creation; the aggregate status is never
    stored and is recomputed from the steps on every read.
    """
    id: UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(..., description="Copied from the template, editable afterwards")
    description: str = Field(..., description="Copied from the template, editable afterwards")
    feedback: Optional[str] = Field(None, description="Feedback of the decision that ended the workflow")
    template_id: UUID = Field(..., description="Template the workflow was created from")
    author_id: UUID = Field(..., description="Employee who started the workflow")
    candidate_id: UUID = Field(..., description="Candidate going through the workflow")
    company_id: UUID = Field(..., description="Company owning the workflow")
    steps: Tuple[WorkflowStep, ...] = Field(..., min_length=1)
    delegated_employee_id: Optional[UUID] = Field(None, description="Delegate of the latest delegation")
    delegate_start_time: Optional[datetime] = None
    delegate_end_time: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator('id', 'template_id', 'author_id', 'candidate_id', 'company_id')
    @classmethod
    def validate_identifier(cls, v: UUID) -> UUID:
        if v == NIL_ID:
            raise ValueError('Identifier must not be the nil UUID')
        return v

    @field_validator('name', 'description')
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Name and description must not be empty')
        return v

    @field_validator('created_at', 'updated_at')
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        if is_default_timestamp(v):
            raise ValueError('Timestamp must be set')
        return v

    @classmethod
    def create(cls, author_id: Optional[UUID], candidate_id: Optional[UUID],
               template: Optional[WorkflowTemplate], now: Optional[datetime] = None) -> OperationResult:
        """
        Start a workflow for a candidate from a template.

        Creation is all-or-nothing: if any step cannot be instantiated no
        workflow is produced.

        Args:
            author_id: Employee starting the workflow
            candidate_id: Candidate going through the workflow
            template: Template whose steps are copied

        Returns:
            OperationResult carrying the Workflow on success
        """
        if template is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Template must not be empty")

        if is_nil(author_id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{author_id} is not a valid employee id")

        if is_nil(candidate_id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{candidate_id} is not a valid candidate id")

        name_error = validate_name(template.name)
        if name_error:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, name_error)

        if not template.steps:
            return OperationResult.fail(ErrorKind.EMPTY_TEMPLATE, f"Template {template.id} has no steps")

        now = now or utcnow()
        steps = []
        for step_template in sorted(template.steps, key=lambda s: s.number):
            created = WorkflowStep.create(candidate_id, step_template, now)
            if created.is_failure:
                logger.warning(f"Cannot create workflow from template {template.id}: {created.error}")
                return created.wrap("Failed to create workflow steps")
            steps.append(created.data)

        workflow = cls(
            name=template.name,
            description=template.description,
            template_id=template.id,
            author_id=author_id,
            candidate_id=candidate_id,
            company_id=template.company_id,
            steps=tuple(steps),
            created_at=now,
            updated_at=now,
        )

        logger.info(
            f"Created workflow {workflow.id} for candidate {candidate_id} "
            f"from template {template.id} with {len(steps)} steps"
        )
        return OperationResult.ok(workflow)

    @property
    def status(self) -> StepStatus:
        return derive_status(step.status for step in self.steps)

    @property
    def current_step(self) -> Optional[WorkflowStep]:
        """Earliest pending step, the target of approve/reject/set_employee."""
        return select_current_step(self.steps)

    def get_step(self, number: int) -> Optional[WorkflowStep]:
        return find_step(self.steps, number)

    def update_info(self, name: Optional[str] = None, description: Optional[str] = None,
                    now: Optional[datetime] = None) -> OperationResult:
        """Rename or redescribe the workflow independently of its template."""
        changed = False

        if name is not None:
            name_error = validate_name(name)
            if name_error:
                return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, name_error)

            if name.strip() != self.name:
                self.name = name.strip()
                changed = True

        if description is not None:
            if not description.strip():
                return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Description must not be empty")

            if description.strip() != self.description:
                self.description = description.strip()
                changed = True

        if changed:
            self.updated_at = now or utcnow()

        return OperationResult.ok(changed)

    def approve(self, employee: Optional[Employee], feedback: Optional[str] = None,
                now: Optional[datetime] = None) -> OperationResult:
        """
        Approve the candidate at the earliest pending step.

        Args:
            employee: Employee taking the decision
            feedback: Feedback about the candidate

        Returns:
            OperationResult indicating success or failure
        """
        if employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        status = self.status
        if status == StepStatus.REJECTED:
            return OperationResult.fail(ErrorKind.TERMINAL_STATE, "A rejected workflow cannot be approved")

        if status != StepStatus.EXPECTATION:
            return OperationResult.fail(ErrorKind.TERMINAL_STATE, "Workflow is finished")

        now = now or utcnow()
        result = self.current_step.approve(employee, feedback, now)
        if result.is_failure:
            return result

        self.updated_at = now
        if self.status == StepStatus.APPROVED:
            self.feedback = feedback
            logger.info(f"Workflow {self.id} approved for candidate {self.candidate_id}")

        return OperationResult.ok()

    def reject(self, employee: Optional[Employee], feedback: Optional[str] = None,
               now: Optional[datetime] = None) -> OperationResult:
        """
        Reject the candidate at the earliest pending step.

        Args:
            employee: Employee taking the decision
            feedback: Feedback about the candidate

        Returns:
            OperationResult indicating success or failure
        """
        if employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        if self.status != StepStatus.EXPECTATION:
            return OperationResult.fail(ErrorKind.TERMINAL_STATE, "Workflow is finished")

        now = now or utcnow()
        result = self.current_step.reject(employee, feedback, now)
        if result.is_failure:
            return result

        self.feedback = feedback
        self.updated_at = now

        logger.info(f"Workflow {self.id} rejected for candidate {self.candidate_id}")
        return OperationResult.ok()

    def restart(self, employee: Optional[Employee], now: Optional[datetime] = None) -> OperationResult:
        """Reopen the workflow by sending every step back to EXPECTATION."""
        if employee is None or is_nil(employee.id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        now = now or utcnow()
        for step in self.steps:
            step.restart(employee.id, now)

        self.feedback = None
        self.updated_at = now

        logger.info(f"Workflow {self.id} restarted by {employee.id}")
        return OperationResult.ok()

    def set_employee(self, employee: Optional[Employee], now: Optional[datetime] = None) -> OperationResult:
        """Assign the earliest pending step to an employee."""
        if employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        if self.status != StepStatus.EXPECTATION:
            return OperationResult.fail(ErrorKind.TERMINAL_STATE, "Workflow is finished")

        return self._assign(self.current_step, employee, now)

    def set_employee_in_step(self, employee: Optional[Employee], number: int,
                             now: Optional[datetime] = None) -> OperationResult:
        """Assign an explicitly numbered step to an employee."""
        if employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        if self.status != StepStatus.EXPECTATION:
            return OperationResult.fail(ErrorKind.TERMINAL_STATE, "Workflow is finished")

        step = self.get_step(number)
        if step is None:
            return OperationResult.fail(ErrorKind.OUT_OF_RANGE, f"Step with number {number} not found")

        return self._assign(step, employee, now)

    def set_delegated_employee_in_step(self, employee: Optional[Employee],
                                       delegated_employee: Optional[Employee],
                                       start: datetime, end: datetime, number: int,
                                       now: Optional[datetime] = None) -> OperationResult:
        """
        Let another employee act for the assignee of a step during a time window.

        Args:
            employee: Employee assigned to the step, granting the delegation
            delegated_employee: Employee receiving the delegation
            start: Start of the delegation window (inclusive)
            end: End of the delegation window (inclusive)
            number: Number of the step to delegate

        Returns:
            OperationResult indicating success or failure
        """
        if employee is None or delegated_employee is None:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Employee must not be empty")

        if self.status != StepStatus.EXPECTATION:
            return OperationResult.fail(ErrorKind.TERMINAL_STATE, "Workflow is finished")

        step = self.get_step(number)
        if step is None:
            return OperationResult.fail(ErrorKind.OUT_OF_RANGE, f"Step with number {number} not found")

        now = now or utcnow()
        result = step.delegate(employee, delegated_employee, start, end, now)
        if result.is_failure:
            return result

        self.delegated_employee_id = step.delegated_employee_id
        self.delegate_start_time = step.delegate_start_time
        self.delegate_end_time = step.delegate_end_time
        self.updated_at = now
        return OperationResult.ok()

    def _assign(self, step: WorkflowStep, employee: Employee, now: Optional[datetime]) -> OperationResult:
        now = now or utcnow()
        result = step.set_employee(employee, now)
        if result.is_failure:
            return result

        self.updated_at = now
        return OperationResult.ok()
