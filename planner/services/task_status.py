"""Task status classification and assignment priority inference."""

from datetime import date, datetime
from typing import Optional

from planner.models.assignment import AssignmentStatus
from planner.models.unified_task import TaskPriority, TaskStatus
from planner.utils.timestamps import local_day


ASSIGNMENT_PRIORITY = {
    AssignmentStatus.TODO: TaskPriority.MEDIUM,
    AssignmentStatus.IN_PROGRESS: TaskPriority.HIGH,
    AssignmentStatus.DONE: TaskPriority.LOW,
}


def classify_status(due_date: datetime, is_complete: bool, today: Optional[date] = None) -> TaskStatus:
    """
    Classify a task by comparing calendar days, not instants.

    A task due at 23:59 today is "Due Today" and one due at 00:01 yesterday
    is "Overdue". Completion wins over any due date.
    """
    if is_complete:
        return TaskStatus.COMPLETED

    if today is None:
        today = date.today()

    due_day = local_day(due_date)
    if due_day < today:
        return TaskStatus.OVERDUE
    if due_day == today:
        return TaskStatus.DUE_TODAY
    return TaskStatus.UPCOMING


def infer_assignment_priority(status: Optional[str]) -> TaskPriority:
    """Infer a task priority from its assignment's workflow status."""
    try:
        return ASSIGNMENT_PRIORITY[AssignmentStatus(status)]
    except ValueError:
        return TaskPriority.LOW
