"""Assignment models - internal work items with checklist and activity log."""

from enum import Enum
from typing import Any, Optional
from pydantic import Field, field_validator

from planner.models.base import StoreRecord, completion_flag, empty_if_none, validate_items
from planner.models.opportunity import Activity


class AssignmentStatus(str, Enum):
    """Assignment workflow states."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class AssignmentChecklistItem(StoreRecord):
    """Assignment checklist item."""
    id: str = Field(default="", description="Checklist item ID")
    text: Optional[str] = Field(None, description="Item text (formerly 'label')")
    completed: bool = Field(default=False, description="Completion flag")
    due_date: Any = Field(None, description="Due date")
    created_at: Any = None
    completed_at: Any = None

    @field_validator("completed", mode="before")
    @classmethod
    def _completed_flag(cls, value: Any) -> bool:
        return completion_flag(value)

    @field_validator("id", mode="before")
    @classmethod
    def _default_id(cls, value: Any) -> Any:
        return empty_if_none(value)


class Assignment(StoreRecord):
    """Assignment model."""
    task_id: str = Field(..., description="Assignment ID")
    title: str = Field(default="", description="Assignment title")
    details: Optional[str] = None
    status: Optional[str] = Field(None, description="Status: todo, in_progress, done")
    owner_id: Optional[str] = Field(None, description="Owning user ID")
    checklist: list[AssignmentChecklistItem] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    created_at: Any = None
    updated_at: Any = None

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> Any:
        return empty_if_none(value)

    @field_validator("checklist", mode="before")
    @classmethod
    def _validate_checklist(cls, value: Any) -> list:
        return validate_items(AssignmentChecklistItem, value, "assignment_checklist")

    @field_validator("activities", mode="before")
    @classmethod
    def _validate_activities(cls, value: Any) -> list:
        return validate_items(Activity, value, "assignment_activity")
