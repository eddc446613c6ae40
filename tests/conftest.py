"""Shared pytest fixtures and configuration."""

import os
import time
import pytest
from datetime import date, datetime, timezone
from unittest.mock import Mock, AsyncMock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("PLANNER_WEEK_START", "sunday")
os.environ.setdefault("LOG_FORMAT", "text")

# Calendar-day logic runs in local time; pin it
os.environ["TZ"] = "UTC"
time.tzset()


@pytest.fixture
def today():
    """Reference day for status and calendar tests (a Saturday)."""
    return date(2024, 6, 15)


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-06-15 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for testing."""
    client = Mock()
    client.table = Mock(return_value=Mock())
    return client


@pytest.fixture
def sample_opportunity():
    """Opportunity with one of each task source."""
    return {
        "id": "opp-1",
        "title": "Deal X",
        "priority": "High",
        "activities": [
            {
                "id": "act-1",
                "subject": "Kickoff call",
                "status": "Scheduled",
                "dateTime": "2024-06-17T10:00:00Z",
                "assignedTo": "user-1",
                "createdAt": {"seconds": 1717200000, "nanoseconds": 0},
            },
        ],
        "checklist": [
            {"id": "chk-1", "text": "Send proposal", "completed": False, "dueDate": "2024-06-20T09:00:00Z"},
        ],
        "blockers": [
            {"id": "blk-1", "text": "Legal review", "completed": False, "dueDate": "2024-06-14T09:00:00Z", "priority": "Low"},
        ],
        "createdAt": {"_seconds": 1717000000, "_nanoseconds": 0},
    }


@pytest.fixture
def sample_assignment():
    """In-progress assignment with one checklist item due today."""
    return {
        "taskId": "asg-1",
        "title": "Task Y",
        "status": "in_progress",
        "checklist": [
            {"id": "item-1", "text": "Draft report", "completed": False, "dueDate": "2024-06-15T15:00:00Z"},
        ],
        "activities": [],
        "createdAt": datetime(2024, 6, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_users():
    return [
        {"id": "user-1", "displayName": "Ada Lovelace", "email": "ada@example.com"},
        {"id": "user-2", "firstName": "Alan", "lastName": "Turing"},
    ]


@pytest.fixture
def fetchers(sample_opportunity, sample_assignment, sample_users):
    """Async fetchers standing in for the Supabase data source."""
    return {
        "fetch_opportunities": AsyncMock(return_value=[sample_opportunity]),
        "fetch_assignments": AsyncMock(return_value=[sample_assignment]),
        "fetch_users": AsyncMock(return_value=sample_users),
    }
