"""Unified task models - one normalized view over activities, checklists and blockers."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from planner.utils.timestamps import end_of_day, parse_timestamp, start_of_day


class TaskType(str, Enum):
    """Origin of a unified task."""
    OPPORTUNITY_ACTIVITY = "OpportunityActivity"
    OPPORTUNITY_CHECKLIST = "OpportunityChecklist"
    OPPORTUNITY_BLOCKER = "OpportunityBlocker"
    ASSIGNMENT_ACTIVITY = "AssignmentActivity"
    ASSIGNMENT_CHECKLIST = "AssignmentChecklist"


class TaskStatus(str, Enum):
    """Due-date status shown on the planner."""
    OVERDUE = "Overdue"
    DUE_TODAY = "Due Today"
    UPCOMING = "Upcoming"
    COMPLETED = "Completed"


class TaskPriority(str, Enum):
    """Task priority."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ParentType(str, Enum):
    """Kind of record a task belongs to."""
    OPPORTUNITY = "Opportunity"
    ASSIGNMENT = "Assignment"


PRIORITY_ORDER: dict[TaskPriority, int] = {
    TaskPriority.CRITICAL: 4,
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UnifiedTask(_CamelModel):
    """
    A due-dated item drawn from an opportunity or an assignment.

    Tasks are rebuilt from their source records whenever those change and are
    never edited in place. ``status`` is evaluated once, when the task is
    built; ``status_as_of`` re-evaluates it for another day.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="ID of the originating activity or checklist item")
    title: str = Field(..., description="Activity subject or checklist text")
    type: TaskType
    parent_id: str = Field(..., description="Opportunity or assignment ID")
    parent_title: str = Field(default="", description="Parent title, for context")
    due_date: datetime
    status: TaskStatus
    priority: Optional[TaskPriority] = None
    is_complete: bool = False
    linked_url: str = Field(..., description="Path of the parent detail view")
    parent_type: ParentType
    notes: Optional[str] = None
    assigned_to: Optional[str] = Field(None, description="Assigned user ID")
    assigned_to_name: Optional[str] = Field(None, description="Assigned user display name")
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("due_date", "created_at", "completed_at", mode="before")
    @classmethod
    def _normalize_timestamps(cls, value: Any) -> Any:
        if value is None:
            return None
        return parse_timestamp(value) or value

    def status_as_of(self, today: Optional[date] = None) -> TaskStatus:
        """Status of this task evaluated against ``today`` instead of build time."""
        from planner.services.task_status import classify_status

        return classify_status(self.due_date, self.is_complete, today=today)


class DateRange(_CamelModel):
    """Inclusive due-date range. A date-only end (``date`` or ``"2024-06-15"``) covers that whole day."""
    start: datetime
    end: datetime

    @field_validator("start", mode="before")
    @classmethod
    def _coerce_start(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            return start_of_day(value)
        return parse_timestamp(value) or value

    @field_validator("end", mode="before")
    @classmethod
    def _coerce_end(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            return end_of_day(value)
        if isinstance(value, str):
            try:
                return end_of_day(date.fromisoformat(value.strip()))
            except ValueError:
                pass
        return parse_timestamp(value) or value


class TaskFilters(_CamelModel):
    """Planner filters. Unset fields do not constrain the result."""
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    type: Optional[TaskType] = None
    parent_type: Optional[ParentType] = None
    assigned_to: Optional[str] = None
    date_range: Optional[DateRange] = None


class SortField(str, Enum):
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    TITLE = "title"
    PARENT_TITLE = "parentTitle"
    CREATED_AT = "createdAt"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortOptions(_CamelModel):
    """Planner sort order."""
    field: SortField = SortField.DUE_DATE
    direction: SortDirection = SortDirection.ASC
