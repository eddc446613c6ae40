"""Planner data service - fetch source records and keep the filtered task view."""

from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any, Optional

from planner.models.unified_task import SortOptions, TaskFilters, UnifiedTask
from planner.services import supabase_client
from planner.services.task_builder import build_unified_tasks
from planner.services.task_query import FiltersInput, apply_filters_and_sort, merge_filters
from planner.services.task_stats import TaskStats, compute_task_stats
from planner.services.user_directory import UserCache, UserDirectory, resolve_assignee_names
from planner.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

NO_DATA_ERROR = "Failed to load any data. Please check your connection and try again."

Fetcher = Callable[[], Awaitable[list[Any]]]


class PlannerData:
    """
    Source records in, filtered and sorted unified tasks out.

    Each source is fetched independently: one failing source is logged and
    treated as empty so the planner still shows what it can.
    """

    def __init__(
        self,
        fetch_opportunities: Optional[Fetcher] = None,
        fetch_assignments: Optional[Fetcher] = None,
        user_directory: Optional[UserDirectory] = None,
    ):
        self._fetch_opportunities = fetch_opportunities or supabase_client.fetch_opportunities
        self._fetch_assignments = fetch_assignments or supabase_client.fetch_assignments
        self.user_directory = user_directory or UserDirectory(supabase_client.fetch_users, UserCache())

        self.tasks: list[UnifiedTask] = []
        self.filtered_tasks: list[UnifiedTask] = []
        self.filters = TaskFilters()
        self.sort_options = SortOptions()
        self.error: Optional[str] = None

    async def _fetch(self, source: str, fetch: Fetcher) -> list[Any]:
        try:
            return list(await fetch())
        except Exception as e:
            logger.error(f"Error fetching {source}", source=source, error=str(e))
            return []

    async def refresh(self, today: Optional[date] = None) -> list[UnifiedTask]:
        """Fetch everything again and rebuild the task list."""
        opportunities = await self._fetch("opportunities", self._fetch_opportunities)
        assignments = await self._fetch("assignments", self._fetch_assignments)
        users = await self.user_directory.get_all_users()

        with log_timing("build_unified_tasks", logger=logger):
            tasks = build_unified_tasks(opportunities, assignments, today=today)

        self.tasks = resolve_assignee_names(tasks, users)
        self.error = NO_DATA_ERROR if not opportunities and not assignments else None
        self._apply()
        return self.filtered_tasks

    def _apply(self) -> None:
        self.filtered_tasks = apply_filters_and_sort(self.tasks, self.filters, self.sort_options)

    def update_filters(self, filters: FiltersInput, replace: bool = False) -> list[UnifiedTask]:
        """Merge ``filters`` into the current ones (or replace them)."""
        self.filters = merge_filters(self.filters, filters, replace=replace)
        self._apply()
        return self.filtered_tasks

    def update_sort_options(self, **changes: Any) -> list[UnifiedTask]:
        """Change the sort ``field`` and/or ``direction``."""
        current = self.sort_options.model_dump()
        current.update({key: value for key, value in changes.items() if value is not None})
        self.sort_options = SortOptions.model_validate(current)
        self._apply()
        return self.filtered_tasks

    def clear_filters(self) -> list[UnifiedTask]:
        self.filters = TaskFilters()
        self._apply()
        return self.filtered_tasks

    def stats(self) -> TaskStats:
        """Statistics over all tasks, ignoring the active filters."""
        return compute_task_stats(self.tasks)
