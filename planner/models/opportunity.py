"""Opportunity models - sales-pipeline records with activities, checklist and blockers."""

from typing import Any, Optional
from pydantic import Field, field_validator

from planner.models.base import StoreRecord, completion_flag, empty_if_none, validate_items


class Activity(StoreRecord):
    """Activity model - meetings, calls and emails logged against a parent record."""
    id: str = Field(..., description="Activity ID")
    subject: str = Field(default="", description="Activity subject")
    activity_type: Optional[str] = Field(None, description="Meeting, Email, Call, WhatsApp, Demo, Workshop")
    status: Optional[str] = Field(None, description="Status: Scheduled, Completed, Cancelled")
    date_time: Any = Field(None, description="When the activity takes place")
    follow_up_date: Any = Field(None, description="When follow-up is due")
    priority: Optional[str] = Field(None, description="Priority: High, Medium, Low")
    notes: Optional[str] = None
    assigned_to: Optional[str] = Field(None, description="Assigned user ID")
    created_at: Any = None
    completed_at: Any = None

    @field_validator("subject", mode="before")
    @classmethod
    def _default_subject(cls, value: Any) -> Any:
        return empty_if_none(value)


class ChecklistItem(StoreRecord):
    """Checklist item - also the shape of opportunity blockers."""
    id: str = Field(..., description="Checklist item ID")
    text: Optional[str] = Field(None, description="Item text")
    completed: bool = Field(default=False, description="Completion flag")
    due_date: Any = Field(None, description="Due date")
    priority: Optional[str] = Field(None, description="Ignored by the planner")
    created_at: Any = None
    completed_at: Any = None

    @field_validator("completed", mode="before")
    @classmethod
    def _completed_flag(cls, value: Any) -> bool:
        return completion_flag(value)


class Opportunity(StoreRecord):
    """Opportunity model."""
    id: str = Field(..., description="Opportunity ID")
    title: str = Field(default="", description="Opportunity title")
    stage: Optional[str] = Field(None, description="Discovery, Proposal, Negotiation, Closed-Won, Closed-Lost")
    priority: Optional[str] = Field(None, description="Priority: Critical, High, Medium, Low")
    activities: list[Activity] = Field(default_factory=list)
    checklist: list[ChecklistItem] = Field(default_factory=list)
    blockers: list[ChecklistItem] = Field(default_factory=list)
    created_at: Any = None
    updated_at: Any = None

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> Any:
        return empty_if_none(value)

    @field_validator("activities", mode="before")
    @classmethod
    def _validate_activities(cls, value: Any) -> list:
        return validate_items(Activity, value, "opportunity_activity")

    @field_validator("checklist", mode="before")
    @classmethod
    def _validate_checklist(cls, value: Any) -> list:
        return validate_items(ChecklistItem, value, "opportunity_checklist")

    @field_validator("blockers", mode="before")
    @classmethod
    def _validate_blockers(cls, value: Any) -> list:
        return validate_items(ChecklistItem, value, "opportunity_blocker")
