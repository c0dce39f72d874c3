"""
Tests for step reassignment and delegation on the Workflow aggregate.
"""

from datetime import timedelta

import pytest

from hireflow.models import StepStatus
from hireflow.results import ErrorKind


class TestSetEmployee:
    """Test cases for Workflow.set_employee and Workflow.set_employee_in_step."""

    def test_set_employee_targets_current_step(self, workflow, outsider, interviewer, base_time):
        result = workflow.set_employee(outsider, now=base_time)

        assert result.success is True
        assert workflow.steps[0].employee_id == outsider.id
        assert workflow.updated_at == base_time
        assert workflow.approve(interviewer).kind == ErrorKind.UNAUTHORIZED
        assert workflow.approve(outsider, "ok").success is True

    def test_set_employee_moves_with_progress(self, workflow, interviewer, outsider):
        workflow.approve(interviewer, "ok")

        workflow.set_employee(outsider)

        assert workflow.steps[1].employee_id == outsider.id
        assert workflow.steps[1].role_id is None

    def test_set_employee_in_step_clears_role(self, workflow, outsider, hr_manager, interviewer):
        result = workflow.set_employee_in_step(outsider, 2)

        assert result.success is True
        assert workflow.steps[1].employee_id == outsider.id
        assert workflow.steps[1].role_id is None

        workflow.approve(interviewer, "ok")
        assert workflow.approve(hr_manager, "ok").kind == ErrorKind.UNAUTHORIZED
        assert workflow.approve(outsider, "ok").success is True

    @pytest.mark.parametrize("number", [0, 3, 99])
    def test_set_employee_in_unknown_step(self, workflow, outsider, number):
        result = workflow.set_employee_in_step(outsider, number)

        assert result.kind == ErrorKind.OUT_OF_RANGE

    def test_set_employee_in_decided_step(self, workflow, interviewer, outsider):
        workflow.approve(interviewer, "ok")

        result = workflow.set_employee_in_step(outsider, 1)

        assert result.kind == ErrorKind.STEP_TERMINAL
        assert workflow.steps[0].employee_id == interviewer.id

    @pytest.mark.parametrize("finish", ["approve", "reject"])
    def test_finished_workflow_cannot_be_reassigned(self, workflow, interviewer, hr_manager, outsider, finish):
        workflow.approve(interviewer)
        getattr(workflow, finish)(hr_manager)

        assert workflow.set_employee(outsider).kind == ErrorKind.TERMINAL_STATE
        assert workflow.set_employee_in_step(outsider, 2).kind == ErrorKind.TERMINAL_STATE

    def test_set_employee_requires_employee(self, workflow):
        assert workflow.set_employee(None).kind == ErrorKind.INVALID_ARGUMENT
        assert workflow.set_employee_in_step(None, 1).kind == ErrorKind.INVALID_ARGUMENT


class TestDelegation:
    """Test cases for Workflow.set_delegated_employee_in_step."""

    @pytest.fixture
    def window(self, base_time):
        return base_time + timedelta(hours=1), base_time + timedelta(hours=4)

    def test_delegation_is_mirrored_on_workflow(self, workflow, interviewer, outsider, window, base_time):
        start, end = window

        result = workflow.set_delegated_employee_in_step(interviewer, outsider, start, end, 1, now=base_time)

        assert result.success is True
        step = workflow.steps[0]
        assert step.delegated_employee_id == outsider.id
        assert (step.delegate_start_time, step.delegate_end_time) == (start, end)
        assert workflow.delegated_employee_id == outsider.id
        assert (workflow.delegate_start_time, workflow.delegate_end_time) == (start, end)
        assert workflow.updated_at == base_time

    def test_delegate_approves_inside_window(self, workflow, interviewer, outsider, window, base_time):
        start, end = window
        workflow.set_delegated_employee_in_step(interviewer, outsider, start, end, 1, now=base_time)

        early = workflow.approve(outsider, "ok", now=start - timedelta(minutes=1))
        on_time = workflow.approve(outsider, "ok", now=start + timedelta(hours=1))

        assert early.kind == ErrorKind.UNAUTHORIZED
        assert on_time.success is True
        assert workflow.steps[0].status == StepStatus.APPROVED

    def test_expired_delegation_is_unauthorized(self, workflow, interviewer, outsider, window, base_time):
        start, end = window
        workflow.set_delegated_employee_in_step(interviewer, outsider, start, end, 1, now=base_time)

        result = workflow.reject(outsider, "no", now=end + timedelta(seconds=1))

        assert result.kind == ErrorKind.UNAUTHORIZED
        assert workflow.status == StepStatus.EXPECTATION

    def test_delegation_of_later_step(self, workflow, interviewer, outsider, window, base_time):
        start, end = window
        workflow.set_employee_in_step(interviewer, 2)

        result = workflow.set_delegated_employee_in_step(interviewer, outsider, start, end, 2, now=base_time)

        assert result.success is True
        assert workflow.steps[1].delegated_employee_id == outsider.id
        # Step 1 is still pending, so the delegate cannot act yet
        assert workflow.approve(outsider, now=start).kind == ErrorKind.UNAUTHORIZED

    def test_role_only_step_cannot_be_delegated(self, workflow, hr_manager, outsider, window, base_time):
        start, end = window

        result = workflow.set_delegated_employee_in_step(hr_manager, outsider, start, end, 2, now=base_time)

        assert result.kind == ErrorKind.UNAUTHORIZED
        assert workflow.delegated_employee_id is None

    def test_only_assignee_can_delegate(self, workflow, outsider, hr_manager, window, base_time):
        start, end = window

        result = workflow.set_delegated_employee_in_step(outsider, hr_manager, start, end, 1, now=base_time)

        assert result.kind == ErrorKind.UNAUTHORIZED

    def test_window_must_be_ordered(self, workflow, interviewer, outsider, window, base_time):
        start, end = window

        result = workflow.set_delegated_employee_in_step(interviewer, outsider, end, start, 1, now=base_time)

        assert result.kind == ErrorKind.INVALID_ARGUMENT

    def test_window_cannot_be_in_the_past(self, workflow, interviewer, outsider, base_time):
        result = workflow.set_delegated_employee_in_step(
            interviewer, outsider, base_time - timedelta(hours=2), base_time + timedelta(hours=2), 1,
            now=base_time,
        )

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert workflow.delegated_employee_id is None

    def test_unknown_step(self, workflow, interviewer, outsider, window, base_time):
        start, end = window

        result = workflow.set_delegated_employee_in_step(interviewer, outsider, start, end, 5, now=base_time)

        assert result.kind == ErrorKind.OUT_OF_RANGE

    def test_finished_workflow(self, workflow, interviewer, outsider, window, base_time):
        start, end = window
        workflow.reject(interviewer, "no")

        result = workflow.set_delegated_employee_in_step(interviewer, outsider, start, end, 1, now=base_time)

        assert result.kind == ErrorKind.TERMINAL_STATE

    @pytest.mark.parametrize("missing", ["employee", "delegated_employee"])
    def test_missing_employees(self, workflow, interviewer, outsider, window, base_time, missing):
        start, end = window
        employees = {"employee": interviewer, "delegated_employee": outsider}
        employees[missing] = None

        result = workflow.set_delegated_employee_in_step(start=start, end=end, number=1, now=base_time,
                                                         **employees)

        assert result.kind == ErrorKind.INVALID_ARGUMENT

    def test_reassignment_revokes_delegation(self, workflow, interviewer, outsider, hr_manager, window,
                                             base_time):
        start, end = window
        workflow.set_delegated_employee_in_step(interviewer, outsider, start, end, 1, now=base_time)

        workflow.set_employee_in_step(hr_manager, 1)

        assert workflow.steps[0].delegated_employee_id is None
        assert workflow.approve(outsider, now=start).kind == ErrorKind.UNAUTHORIZED
