"""Planner statistics."""

import math
from collections import Counter

from pydantic import BaseModel, Field

from planner.models.unified_task import TaskPriority, TaskStatus, TaskType, UnifiedTask


class TaskStats(BaseModel):
    """Counts shown on the planner summary cards."""
    total: int = 0
    overdue: int = 0
    due_today: int = 0
    upcoming: int = 0
    completed: int = 0
    by_priority: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)
    completion_rate: int = Field(default=0, description="Completed share of all tasks, whole percent")
    overdue_rate: int = Field(default=0, description="Overdue share of all tasks, whole percent")


def _percent(part: int, total: int) -> int:
    if total == 0:
        return 0
    # Round half up
    return math.floor(part * 100 / total + 0.5)


def compute_task_stats(tasks: list[UnifiedTask]) -> TaskStats:
    """Summarize tasks by status, priority and type."""
    statuses = Counter(task.status for task in tasks)
    priorities = Counter(task.priority for task in tasks if task.priority is not None)
    types = Counter(task.type for task in tasks)
    total = len(tasks)

    return TaskStats(
        total=total,
        overdue=statuses[TaskStatus.OVERDUE],
        due_today=statuses[TaskStatus.DUE_TODAY],
        upcoming=statuses[TaskStatus.UPCOMING],
        completed=statuses[TaskStatus.COMPLETED],
        by_priority={priority.value: priorities[priority] for priority in TaskPriority},
        by_type={task_type.value: types[task_type] for task_type in TaskType},
        completion_rate=_percent(statuses[TaskStatus.COMPLETED], total),
        overdue_rate=_percent(statuses[TaskStatus.OVERDUE], total),
    )
