"""
Workflow Template.

A company-owned blueprint describing the ordered steps a candidate has to
pass. Templates stay editable; workflows created from them take a snapshot
of the steps and are unaffected by later edits.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from ..config import get_settings
from ..models import NIL_ID, is_default_timestamp, is_nil, utcnow
from ..results import ErrorKind, OperationResult
from .step_template import WorkflowStepTemplate

logger = logging.getLogger(__name__)


def validate_name(name: Optional[str]) -> Optional[str]:
    """
    Check a template or workflow name against the configured rules.

    Args:
        name: Candidate name

    Returns:
        Error message, or None when the name is acceptable
    """
    if not name or not name.strip():
        return "Name must not be empty"

    min_length = get_settings().min_name_length
    if len(name.strip()) < min_length:
        return f"Name must be at least {min_length} characters long"

    return None


class WorkflowTemplate(BaseModel):
    """
    Ordered, mutable collection of step templates owned by a company.

    Step numbers are always exactly 1..len(steps) and the list is kept
    in number order.
    """
    id: UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(..., description="Template name")
    description: str = Field(..., description="Template description")
    company_id: UUID = Field(..., description="Company owning the template")
    steps: List[WorkflowStepTemplate] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator('id', 'company_id')
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

    @model_validator(mode='after')
    def validate_numbering(self) -> "WorkflowTemplate":
        numbers = [step.number for step in self.steps]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError(f'Step numbers must be contiguous from 1, got {numbers}')
        return self

    @classmethod
    def create(cls, name: str, description: str, company_id: Optional[UUID]) -> OperationResult:
        """
        Create an empty workflow template.

        Args:
            name: Template name; trimmed before storing
            description: Template description
            company_id: Owning company

        Returns:
            OperationResult carrying the WorkflowTemplate on success
        """
        name_error = validate_name(name)
        if name_error:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, name_error)

        if not description or not description.strip():
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Description must not be empty")

        if is_nil(company_id):
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, f"{company_id} is not a valid company id")

        now = utcnow()
        template = cls(
            name=name.strip(),
            description=description,
            company_id=company_id,
            created_at=now,
            updated_at=now,
        )

        logger.info(f"Created workflow template {template.id} '{template.name}' for company {company_id}")
        return OperationResult.ok(template)

    def get_step(self, number: int) -> Optional[WorkflowStepTemplate]:
        """Look up a step template by its number."""
        for step in self.steps:
            if step.number == number:
                return step
        return None

    def update_info(self, name: Optional[str] = None, description: Optional[str] = None,
                    now: Optional[datetime] = None) -> OperationResult:
        """
        Update name and/or description.

        Arguments left as None are not touched. The update timestamp only
        moves when a value actually changes.
        """
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

    def add_step(self, description: str, employee_id: Optional[UUID] = None,
                 role_id: Optional[UUID] = None, now: Optional[datetime] = None) -> OperationResult:
        """
        Append a step at the end of the template.

        Args:
            description: Step description
            employee_id: Employee who must pass the step
            role_id: Role whose holders may pass the step

        Returns:
            OperationResult carrying the new WorkflowStepTemplate on success
        """
        created = WorkflowStepTemplate.create(len(self.steps) + 1, description, employee_id, role_id)
        if created.is_failure:
            logger.warning(f"Rejected new step for template {self.id}: {created.error}")
            return created.wrap("Failed to add step")

        self.steps.append(created.data)
        self.updated_at = now or utcnow()

        logger.info(f"Added step {created.data.number} to template {self.id}")
        return OperationResult.ok(created.data)

    def remove_step(self, number: int, now: Optional[datetime] = None) -> OperationResult:
        """Remove a step and shift every later step down by one."""
        if number < 1 or number > len(self.steps):
            return OperationResult.fail(
                ErrorKind.OUT_OF_RANGE, f"Template does not contain a step with number {number}"
            )

        removed = self.steps.pop(number - 1)
        self._renumber_from(number - 1, now)
        self.updated_at = now or utcnow()

        logger.info(f"Removed step {number} from template {self.id}, {len(self.steps)} steps left")
        return OperationResult.ok(removed)

    def swap_steps(self, number_first: int, number_second: int,
                   now: Optional[datetime] = None) -> OperationResult:
        """Exchange the positions of two steps."""
        count = len(self.steps)
        for number in (number_first, number_second):
            if number < 1 or number > count:
                return OperationResult.fail(
                    ErrorKind.OUT_OF_RANGE, f"Template does not contain a step with number {number}"
                )

        if number_first == number_second:
            return OperationResult.ok(False)

        first = self.get_step(number_first)
        second = self.get_step(number_second)
        first.update_number(number_second, now)
        second.update_number(number_first, now)
        self.steps.sort(key=lambda step: step.number)
        self.updated_at = now or utcnow()

        logger.info(f"Swapped steps {number_first} and {number_second} in template {self.id}")
        return OperationResult.ok(True)

    def _renumber_from(self, index: int, now: Optional[datetime] = None):
        """Renumber steps from a list position onwards so numbering stays 1..N."""
        for position in range(index, len(self.steps)):
            self.steps[position].update_number(position + 1, now)
