"""Tests for planner configuration."""

import pytest

from planner.utils.config import PlannerConfig, parse_week_start
from planner.utils.errors import ConfigurationError


@pytest.mark.unit
@pytest.mark.parametrize("value, expected", [
    ("sunday", 6),
    ("Monday", 0),
    (" saturday ", 5),
])
def test_parse_week_start(value, expected):
    assert parse_week_start(value) == expected


@pytest.mark.unit
def test_parse_week_start_rejects_unknown_day():
    with pytest.raises(ConfigurationError, match="funday"):
        parse_week_start("funday")


@pytest.mark.unit
def test_week_start_day_reads_config(monkeypatch):
    monkeypatch.setattr(PlannerConfig, "WEEK_START", "monday")

    assert PlannerConfig.week_start_day() == 0


@pytest.mark.unit
def test_defaults():
    assert PlannerConfig.USER_CACHE_TTL_SECONDS == 300
    assert PlannerConfig.OPPORTUNITY_FETCH_LIMIT == 100
    assert PlannerConfig.USER_FETCH_LIMIT == 100
