"""
Pytest configuration and fixtures for the workflow initializer compiler.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from flowinit.workflow.models import WorkflowDefinition


def make_step(step_id, title, step_type="Approval", **extra):
    """Build a raw step mapping the way the workflow builder exports it."""
    step = {"id": step_id, "title": title, "stepType": step_type}
    step.update(extra)
    return step


@pytest.fixture
def scenario_b_data():
    """Two approval steps on the home school and non-partner paths."""
    return {
        "conditions": {
            "home_school": {"entity": "HighSchool", "property": "is_home_school"},
            "non_partner": {"entity": "HighSchool", "property": "isNonPartner"},
        },
        "workflow": [
            make_step("s1", "Confirm Enrollment", conditional=True, workflowCondition="home_school"),
            make_step("s2", "Verify Partner Status", conditional=True, workflowCondition=["non_partner"]),
        ],
    }


@pytest.fixture
def scenario_b(scenario_b_data):
    return WorkflowDefinition.model_validate(scenario_b_data)


@pytest.fixture
def mixed_category_data():
    """Steps spread over the one time, per term and per course categories."""
    return {
        "conditions": {
            "minor": {"entity": "Student", "property": "isMinor", "comparison": "equals", "value": True},
        },
        "workflow": [
            make_step(1, "Parent Consent", "ProvideConsent", workflow_category="One Time",
                      conditional=True, workflowCondition="minor"),
            make_step(2, "Term Agreement", "Information", workflow_category="Per Term",
                      conditional=True, workflowCondition="minor"),
            make_step(3, "Advisor Approval", workflow_category="Per Course"),
            make_step(4, "Welcome", "Information"),
        ],
    }


@pytest.fixture
def three_path_data():
    """One step on each of the partner, home school and non-partner paths."""
    return {
        "conditions": {
            "home_school": {"entity": "HighSchool", "property": "isHomeSchool"},
            "non_partner": {"entity": "HighSchool", "property": "isNonPartner"},
        },
        "workflow": [
            make_step(1, "Counselor Approval", role="Counselor"),
            make_step(2, "Home School Affidavit", "Upload", conditional=True, workflowCondition="home_school"),
            make_step(3, "Non Partner Agreement", "Upload", conditional=True, workflowCondition="non_partner"),
        ],
    }
