"""
Shared fixtures for the Hireflow Engine test suite.
"""

import uuid
from datetime import datetime, timezone

import pytest

from hireflow.config import get_settings
from hireflow.models import Employee
from hireflow.templates import WorkflowTemplate
from hireflow.workflows import Workflow


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Isolate every test from ambient HIREFLOW_* configuration."""
    for var in ("HIREFLOW_CONFIG", "HIREFLOW_MIN_NAME_LENGTH", "HIREFLOW_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def company_id():
    return uuid.uuid4()


@pytest.fixture
def role_id():
    """Role required by the HR interview step."""
    return uuid.uuid4()


@pytest.fixture
def author_id():
    return uuid.uuid4()


@pytest.fixture
def candidate_id():
    return uuid.uuid4()


@pytest.fixture
def make_employee(company_id):
    """Factory for employees of the test company."""
    def _make(role_id=None, name="Test Employee"):
        return Employee(id=uuid.uuid4(), role_id=role_id, company_id=company_id, name=name)
    return _make


@pytest.fixture
def interviewer(make_employee):
    """Employee explicitly assigned to the first step."""
    return make_employee(role_id=uuid.uuid4(), name="Alice Johnson")


@pytest.fixture
def hr_manager(make_employee, role_id):
    """Holder of the role required by the second step."""
    return make_employee(role_id=role_id, name="Bob Smith")


@pytest.fixture
def outsider(make_employee):
    """Employee with no claim on any step."""
    return make_employee(role_id=uuid.uuid4(), name="Carol White")


@pytest.fixture
def template(company_id, interviewer, role_id):
    """Two-step template: a named interviewer, then any HR manager."""
    template = WorkflowTemplate.create("Backend Engineer hiring", "Interview pipeline", company_id).data
    template.add_step("Technical interview", employee_id=interviewer.id)
    template.add_step("HR interview", role_id=role_id)
    return template


@pytest.fixture
def workflow(author_id, candidate_id, template):
    return Workflow.create(author_id, candidate_id, template).data


@pytest.fixture
def base_time():
    """Fixed reference time, safely in the future."""
    return datetime(2030, 1, 15, 9, 0, tzinfo=timezone.utc)
