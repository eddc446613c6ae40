"""Planner configuration with environment variable support."""

import os

from planner.utils.errors import ConfigurationError


# Python weekday numbers (Monday == 0)
WEEKDAY_NUMBERS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


def parse_week_start(value: str) -> int:
    """Map a weekday name to its Python weekday number."""
    try:
        return WEEKDAY_NUMBERS[value.strip().lower()]
    except KeyError:
        raise ConfigurationError(f"Invalid week start day: {value!r}")


class PlannerConfig:
    """Centralized planner configuration."""

    WEEK_START = os.environ.get("PLANNER_WEEK_START", "sunday").lower()
    USER_CACHE_TTL_SECONDS = int(os.environ.get("USER_CACHE_TTL_SECONDS", "300"))  # 5 minutes
    OPPORTUNITY_FETCH_LIMIT = int(os.environ.get("OPPORTUNITY_FETCH_LIMIT", "100"))
    USER_FETCH_LIMIT = int(os.environ.get("USER_FETCH_LIMIT", "100"))

    @classmethod
    def week_start_day(cls) -> int:
        """First day of the planner week as a Python weekday number."""
        return parse_week_start(cls.WEEK_START)
