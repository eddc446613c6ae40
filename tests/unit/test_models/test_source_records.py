"""Tests for opportunity, assignment and user records."""

import pytest
from pydantic import ValidationError

from planner.models.assignment import Assignment, AssignmentStatus
from planner.models.opportunity import Opportunity
from planner.models.user import User


@pytest.mark.unit
def test_opportunity_from_camel_case(sample_opportunity):
    """Test store documents parse through their camelCase keys."""
    opportunity = Opportunity.model_validate(sample_opportunity)

    assert opportunity.id == "opp-1"
    assert opportunity.activities[0].date_time == "2024-06-17T10:00:00Z"
    assert opportunity.activities[0].assigned_to == "user-1"
    assert opportunity.checklist[0].due_date == "2024-06-20T09:00:00Z"
    assert opportunity.blockers[0].priority == "Low"


@pytest.mark.unit
def test_opportunity_requires_id():
    with pytest.raises(ValidationError):
        Opportunity.model_validate({"title": "No ID"})


@pytest.mark.unit
def test_opportunity_defaults():
    opportunity = Opportunity(id="opp-2")

    assert opportunity.title == ""
    assert opportunity.activities == []
    assert opportunity.checklist == []
    assert opportunity.blockers == []


@pytest.mark.unit
def test_missing_or_malformed_lists_read_as_empty():
    opportunity = Opportunity.model_validate({
        "id": "opp-3",
        "activities": None,
        "checklist": "not a list",
    })

    assert opportunity.activities == []
    assert opportunity.checklist == []


@pytest.mark.unit
def test_unknown_fields_are_ignored():
    opportunity = Opportunity.model_validate({"id": "opp-4", "dealValue": 1000})

    assert not hasattr(opportunity, "deal_value")


@pytest.mark.unit
def test_assignment_from_camel_case(sample_assignment):
    assignment = Assignment.model_validate(sample_assignment)

    assert assignment.task_id == "asg-1"
    assert assignment.status == AssignmentStatus.IN_PROGRESS.value
    assert assignment.checklist[0].text == "Draft report"


@pytest.mark.unit
def test_assignment_checklist_item_id_is_optional():
    assignment = Assignment.model_validate({"taskId": "asg-2", "checklist": [{"text": "Call back"}]})

    assert assignment.checklist[0].id == ""


@pytest.mark.unit
def test_user_from_camel_case(sample_users):
    user = User.model_validate(sample_users[1])

    assert user.first_name == "Alan"
    assert user.last_name == "Turing"
    assert user.display_name is None
