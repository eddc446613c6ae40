"""Unified task builder - flatten opportunities and assignments into one task list."""

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any, Optional

from planner.models.assignment import Assignment, AssignmentChecklistItem
from planner.models.base import validate_items
from planner.models.opportunity import Activity, ChecklistItem, Opportunity
from planner.models.unified_task import ParentType, TaskPriority, TaskType, UnifiedTask
from planner.services.task_status import classify_status, infer_assignment_priority
from planner.utils.logging import get_structured_logger
from planner.utils.timestamps import parse_timestamp

logger = get_structured_logger(__name__)

ACTIVITY_SCHEDULED = "Scheduled"
ACTIVITY_COMPLETED = "Completed"
UNTITLED_TASK = "Untitled Task"


def opportunity_url(opportunity_id: str) -> str:
    return f"/opportunities/{opportunity_id}"


def assignment_url(assignment_id: str) -> str:
    return f"/assignments/{assignment_id}"


def _priority(value: Optional[str]) -> Optional[TaskPriority]:
    """Read a stored priority; unknown values are treated as unset."""
    if not value:
        return None
    try:
        return TaskPriority(value)
    except ValueError:
        logger.debug("Ignoring unknown priority", priority=value)
        return None


def activity_due_date(activity: Activity) -> Optional[datetime]:
    """
    Due date of an activity: its follow-up date, or for activities that are
    still scheduled, the activity's own date and time.
    """
    due_date = parse_timestamp(activity.follow_up_date)
    if due_date is None and activity.status == ACTIVITY_SCHEDULED:
        due_date = parse_timestamp(activity.date_time)
    return due_date


class UnifiedTaskBuilder:
    """
    Collects unified tasks from opportunities and assignments.

    Completed items are skipped. Items whose due date cannot be resolved are
    dropped and counted in ``undated_count``; nothing raises on bad data.
    """

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()
        self.tasks: list[UnifiedTask] = []
        self.undated_count = 0

    def _drop_undated(self, kind: TaskType, item_id: str, parent_id: str) -> None:
        self.undated_count += 1
        logger.debug(
            "Dropping task without due date",
            task_type=kind.value,
            item_id=item_id,
            parent_id=parent_id,
        )

    def _add_activity(
        self,
        activity: Activity,
        kind: TaskType,
        parent_id: str,
        parent_title: str,
        parent_type: ParentType,
        linked_url: str,
        priority: Optional[TaskPriority],
    ) -> None:
        if activity.status == ACTIVITY_COMPLETED:
            return

        due_date = activity_due_date(activity)
        if due_date is None:
            self._drop_undated(kind, activity.id, parent_id)
            return

        self.tasks.append(UnifiedTask(
            id=activity.id,
            title=activity.subject,
            type=kind,
            parent_id=parent_id,
            parent_title=parent_title,
            due_date=due_date,
            status=classify_status(due_date, False, today=self.today),
            priority=priority,
            is_complete=False,
            linked_url=linked_url,
            parent_type=parent_type,
            notes=activity.notes,
            assigned_to=activity.assigned_to,
            created_at=parse_timestamp(activity.created_at),
            completed_at=parse_timestamp(activity.completed_at),
        ))

    def _add_opportunity_item(
        self,
        item: ChecklistItem,
        kind: TaskType,
        opportunity: Opportunity,
        priority: Optional[TaskPriority],
    ) -> None:
        if item.completed:
            return

        due_date = parse_timestamp(item.due_date)
        if due_date is None:
            self._drop_undated(kind, item.id, opportunity.id)
            return

        self.tasks.append(UnifiedTask(
            id=item.id,
            title=item.text or "",
            type=kind,
            parent_id=opportunity.id,
            parent_title=opportunity.title,
            due_date=due_date,
            status=classify_status(due_date, False, today=self.today),
            priority=priority,
            is_complete=False,
            linked_url=opportunity_url(opportunity.id),
            parent_type=ParentType.OPPORTUNITY,
            created_at=parse_timestamp(item.created_at),
            completed_at=parse_timestamp(item.completed_at),
        ))

    def add_opportunity(self, opportunity: Opportunity) -> None:
        """Collect activities, checklist items and blockers of one opportunity."""
        for activity in opportunity.activities:
            self._add_activity(
                activity,
                TaskType.OPPORTUNITY_ACTIVITY,
                parent_id=opportunity.id,
                parent_title=opportunity.title,
                parent_type=ParentType.OPPORTUNITY,
                linked_url=opportunity_url(opportunity.id),
                priority=_priority(activity.priority),
            )

        inherited = _priority(opportunity.priority)
        for item in opportunity.checklist:
            self._add_opportunity_item(item, TaskType.OPPORTUNITY_CHECKLIST, opportunity, inherited)

        # Blockers are always top urgency, whatever the item says
        for blocker in opportunity.blockers:
            self._add_opportunity_item(blocker, TaskType.OPPORTUNITY_BLOCKER, opportunity, TaskPriority.CRITICAL)

    def _add_assignment_item(self, item: AssignmentChecklistItem, assignment: Assignment, priority: TaskPriority) -> None:
        if item.completed:
            return

        due_date = parse_timestamp(item.due_date)
        if due_date is None:
            self._drop_undated(TaskType.ASSIGNMENT_CHECKLIST, item.id, assignment.task_id)
            return

        self.tasks.append(UnifiedTask(
            id=item.id,
            title=item.text or item.id or UNTITLED_TASK,
            type=TaskType.ASSIGNMENT_CHECKLIST,
            parent_id=assignment.task_id,
            parent_title=assignment.title,
            due_date=due_date,
            status=classify_status(due_date, False, today=self.today),
            priority=priority,
            is_complete=False,
            linked_url=assignment_url(assignment.task_id),
            parent_type=ParentType.ASSIGNMENT,
            created_at=parse_timestamp(item.created_at) or parse_timestamp(assignment.created_at),
            completed_at=parse_timestamp(item.completed_at),
        ))

    def add_assignment(self, assignment: Assignment) -> None:
        """Collect checklist items and activities of one assignment."""
        inferred = infer_assignment_priority(assignment.status)

        for item in assignment.checklist:
            self._add_assignment_item(item, assignment, inferred)

        for activity in assignment.activities:
            self._add_activity(
                activity,
                TaskType.ASSIGNMENT_ACTIVITY,
                parent_id=assignment.task_id,
                parent_title=assignment.title,
                parent_type=ParentType.ASSIGNMENT,
                linked_url=assignment_url(assignment.task_id),
                priority=_priority(activity.priority) or inferred,
            )

    def build(self) -> list[UnifiedTask]:
        """Collected tasks, ascending by due date (stable for equal dates)."""
        return sorted(self.tasks, key=lambda task: task.due_date)


def build_unified_tasks(
    opportunities: Iterable[Any],
    assignments: Iterable[Any],
    today: Optional[date] = None,
) -> list[UnifiedTask]:
    """
    Build the unified, due-date-sorted task list.

    Accepts model instances or raw store mappings; records that fail
    validation are skipped with a warning.
    """
    opportunity_records = validate_items(Opportunity, list(opportunities or []), "opportunity")
    assignment_records = validate_items(Assignment, list(assignments or []), "assignment")

    builder = UnifiedTaskBuilder(today=today)
    for opportunity in opportunity_records:
        builder.add_opportunity(opportunity)
    for assignment in assignment_records:
        builder.add_assignment(assignment)

    tasks = builder.build()

    status_counts = Counter(task.status.value for task in tasks)
    logger.info(
        "Built unified tasks",
        task_count=len(tasks),
        opportunity_count=len(opportunity_records),
        assignment_count=len(assignment_records),
        undated_count=builder.undated_count,
        status_breakdown=dict(status_counts),
    )

    return tasks
