"""
Workflow Step Template.

A step template describes one ordinal gate of a workflow template and who
is allowed to pass it: a specific employee, any holder of a role, or both.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import NIL_ID, is_default_timestamp, is_nil, utcnow
from ..results import ErrorKind, OperationResult

logger = logging.getLogger(__name__)


class WorkflowStepTemplate(BaseModel):
    """Template row for a single workflow step."""
    number: int = Field(..., ge=1, description="Ordinal position within the template, starting at 1")
    description: str = Field(..., description="What happens at this step")
    employee_id: Optional[UUID] = Field(None, description="Employee assigned to the step")
    role_id: Optional[UUID] = Field(None, description="Role whose holders may pass the step")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Step description must not be empty')
        return v

    @field_validator('employee_id', 'role_id')
    @classmethod
    def validate_assignee_id(cls, v: Optional[UUID]) -> Optional[UUID]:
        if v is not None and v == NIL_ID:
            raise ValueError('Assignee identifier must not be the nil UUID')
        return v

    @field_validator('created_at', 'updated_at')
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        if is_default_timestamp(v):
            raise ValueError('Timestamp must be set')
        return v

    @model_validator(mode='after')
    def validate_assignee(self) -> "WorkflowStepTemplate":
        if self.employee_id is None and self.role_id is None:
            raise ValueError('Step must be bound to an employee or a role')
        return self

    @classmethod
    def create(cls, number: int, description: str, employee_id: Optional[UUID] = None,
               role_id: Optional[UUID] = None) -> OperationResult:
        """
        Create a new step template.

        Args:
            number: Ordinal number of the step (1-based)
            description: Human-readable description of the step
            employee_id: Employee who must pass the step
            role_id: Role whose holders may pass the step

        Returns:
            OperationResult carrying the WorkflowStepTemplate on success
        """
        if number < 1:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{number} is not a valid step number")

        if not description or not description.strip():
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Step description must not be empty")

        if employee_id is None and role_id is None:
            return OperationResult.fail(
                ErrorKind.INVALID_ARGUMENT, "Step must be bound to an employee or a role"
            )

        if employee_id is not None and employee_id == NIL_ID:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{employee_id} is not a valid employee id")

        if role_id is not None and role_id == NIL_ID:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{role_id} is not a valid role id")

        now = utcnow()
        step = cls(
            number=number,
            description=description.strip(),
            employee_id=employee_id,
            role_id=role_id,
            created_at=now,
            updated_at=now,
        )
        return OperationResult.ok(step)

    def update_info(self, description: str, now: Optional[datetime] = None) -> OperationResult:
        """Replace the step description."""
        if not description or not description.strip():
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Step description must not be empty")

        self.description = description.strip()
        self.updated_at = now or utcnow()
        return OperationResult.ok()

    def update_number(self, number: int, now: Optional[datetime] = None) -> OperationResult:
        """Move the step to another ordinal position; unchanged numbers are a no-op."""
        if number <= 0:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{number} is not a valid step number")

        if number != self.number:
            self.number = number
            self.updated_at = now or utcnow()

        return OperationResult.ok()

    def update_role_id(self, role_id: Optional[UUID], now: Optional[datetime] = None) -> OperationResult:
        if is_nil(role_id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{role_id} is not a valid role id")

        if role_id != self.role_id:
            self.role_id = role_id
            self.updated_at = now or utcnow()

        return OperationResult.ok()

    def update_employee_id(self, employee_id: Optional[UUID], now: Optional[datetime] = None) -> OperationResult:
        if is_nil(employee_id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{employee_id} is not a valid employee id")

        if employee_id != self.employee_id:
            self.employee_id = employee_id
            self.updated_at = now or utcnow()

        return OperationResult.ok()
