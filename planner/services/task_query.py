"""Filtering and sorting of unified tasks."""

from collections.abc import Mapping
from typing import Any, Optional, Union

from planner.models.unified_task import (
    PRIORITY_ORDER,
    SortDirection,
    SortField,
    SortOptions,
    TaskFilters,
    TaskPriority,
    UnifiedTask,
)
from planner.utils.timestamps import to_epoch_millis

FiltersInput = Union[TaskFilters, Mapping[str, Any], None]
SortInput = Union[SortOptions, Mapping[str, Any], None]


def _as_filters(filters: FiltersInput) -> TaskFilters:
    if filters is None:
        return TaskFilters()
    if isinstance(filters, TaskFilters):
        return filters
    return TaskFilters.model_validate(filters)


def _as_sort_options(sort_options: SortInput) -> SortOptions:
    if sort_options is None:
        return SortOptions()
    if isinstance(sort_options, SortOptions):
        return sort_options
    return SortOptions.model_validate(sort_options)


def matches_filters(task: UnifiedTask, filters: TaskFilters) -> bool:
    """True when ``task`` satisfies every filter that is set."""
    if filters.status is not None and task.status != filters.status:
        return False
    if filters.priority is not None and task.priority != filters.priority:
        return False
    if filters.type is not None and task.type != filters.type:
        return False
    if filters.parent_type is not None and task.parent_type != filters.parent_type:
        return False
    if filters.assigned_to and task.assigned_to != filters.assigned_to:
        return False
    if filters.date_range is not None:
        if task.due_date < filters.date_range.start or task.due_date > filters.date_range.end:
            return False
    return True


def filter_tasks(tasks: list[UnifiedTask], filters: FiltersInput) -> list[UnifiedTask]:
    """Tasks matching all set filters, in their original order."""
    filters = _as_filters(filters)
    return [task for task in tasks if matches_filters(task, filters)]


def _text_key(value: str) -> tuple[str, str]:
    # Case-insensitive first, like a locale collation, then exact for ties
    return (value.casefold(), value)


def _sort_key(field: SortField):
    if field == SortField.DUE_DATE:
        return lambda task: to_epoch_millis(task.due_date)
    if field == SortField.PRIORITY:
        return lambda task: PRIORITY_ORDER[task.priority or TaskPriority.LOW]
    if field == SortField.TITLE:
        return lambda task: _text_key(task.title)
    if field == SortField.PARENT_TITLE:
        return lambda task: _text_key(task.parent_title)
    return lambda task: to_epoch_millis(task.created_at)


def sort_tasks(tasks: list[UnifiedTask], sort_options: SortInput) -> list[UnifiedTask]:
    """
    Return a new, sorted list.

    The sort is stable in both directions: tasks that compare equal keep
    their input order.
    """
    sort_options = _as_sort_options(sort_options)
    return sorted(
        tasks,
        key=_sort_key(sort_options.field),
        reverse=sort_options.direction == SortDirection.DESC,
    )


def merge_filters(
    current: FiltersInput,
    updates: FiltersInput,
    replace: bool = False,
) -> TaskFilters:
    """
    Apply a filter update the way the planner controls do.

    An empty update or ``replace=True`` replaces the current filters (this is
    how removing a filter chip is expressed); otherwise set fields are merged
    over the current ones.
    """
    updates = _as_filters(updates)
    update_fields = updates.model_dump(exclude_unset=True)
    if replace or not update_fields:
        return updates

    current = _as_filters(current)
    return current.model_copy(update={
        name: getattr(updates, name) for name in update_fields
    })


def apply_filters_and_sort(
    tasks: list[UnifiedTask],
    filters: FiltersInput,
    sort_options: SortInput,
) -> list[UnifiedTask]:
    return sort_tasks(filter_tasks(tasks, filters), sort_options)


def parse_filters(params: Optional[Mapping[str, Any]]) -> TaskFilters:
    """Build filters from camelCase query parameters, ignoring blank values."""
    params = params or {}
    return TaskFilters.model_validate({
        key: value for key, value in params.items()
        if key in {"status", "priority", "type", "parentType", "assignedTo"} and value not in (None, "")
    })
