"""Error handling utilities."""


class PlannerError(Exception):
    """Base exception for the planner backend."""
    pass


class DataSourceError(PlannerError):
    """Document store read failed."""
    pass


class ConfigurationError(PlannerError):
    """Missing or invalid configuration."""
    pass
