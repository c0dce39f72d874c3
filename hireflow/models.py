"""
Core data models for the Hireflow Engine.

This module defines the shared identifiers, the step status enum and the
Employee record that the approval workflow consumes from the outside world.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

# Empty identifier sentinel, rejected wherever an identifier is required
NIL_ID = UUID(int=0)


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def is_nil(identifier: Optional[UUID]) -> bool:
    """True when the identifier is missing or equals the nil sentinel."""
    return identifier is None or identifier == NIL_ID


def is_default_timestamp(value: datetime) -> bool:
    """True when the timestamp was never set (``datetime.min``)."""
    return value.replace(tzinfo=None) == datetime.min


class StepStatus(str, Enum):
    """Status of a workflow step and, derived from its steps, of a workflow."""
    EXPECTATION = "EXPECTATION"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Employee(BaseModel):
    """
    Employee as seen by the approval core.

    The core never mutates an employee; it only compares identifiers
    when deciding who may act on a step.
    """
    id: UUID = Field(..., description="Unique employee identifier")
    role_id: Optional[UUID] = Field(None, description="Role held by the employee")
    company_id: UUID = Field(..., description="Company the employee works for")
    name: Optional[str] = Field(None, description="Full name of the employee")

    @field_validator('id', 'company_id')
    @classmethod
    def validate_identifier(cls, v: UUID) -> UUID:
        if v == NIL_ID:
            raise ValueError('Identifier must not be the nil UUID')
        return v
