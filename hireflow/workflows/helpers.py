"""
Workflow Helper Functions for the Hireflow Engine.

Pure helpers shared by workflows and their steps: status derivation,
current-step selection and delegation window checks.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from ..models import StepStatus


def derive_status(statuses: Iterable[StepStatus]) -> StepStatus:
    """
    Derive the aggregate status of a workflow from its step statuses.

    Any rejected step rejects the workflow; the workflow is approved only
    once every step is approved; otherwise it is still pending.

    Args:
        statuses: Status of every step

    Returns:
        Aggregate StepStatus
    """
    statuses = list(statuses)

    if any(status == StepStatus.REJECTED for status in statuses):
        return StepStatus.REJECTED

    if all(status == StepStatus.APPROVED for status in statuses):
        return StepStatus.APPROVED

    return StepStatus.EXPECTATION


def select_current_step(steps: Sequence):
    """Pending step with the lowest number, or None when nothing is pending."""
    pending = [step for step in steps if step.status == StepStatus.EXPECTATION]
    if not pending:
        return None
    return min(pending, key=lambda step: step.number)


def find_step(steps: Sequence, number: int):
    """Step with the given number, or None."""
    for step in steps:
        if step.number == number:
            return step
    return None


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_within_window(now: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    """True when ``now`` lies inside the inclusive [start, end] window."""
    if start is None or end is None:
        return False
    return as_utc(start) <= as_utc(now) <= as_utc(end)
